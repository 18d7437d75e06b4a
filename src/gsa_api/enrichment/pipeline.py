"""Invoke, then reshape: the overlap query used by the HTTP route and the CLI."""

import asyncio

from gsa_api.enrichment.invoker import EnrichmentInvoker
from gsa_api.enrichment.models import EnrichmentRequest
from gsa_api.enrichment.transform import ResultTransformer, TransformResult


async def query_overlapping_comparisons(
    request: EnrichmentRequest,
    invoker: EnrichmentInvoker,
    transformer: ResultTransformer,
) -> TransformResult:
    """Run the enrichment command for request and reshape its result file.

    The result file is read in a worker thread and deleted once read.

    Raises:
        InvocationError: If the command fails; no result file exists then
    """
    result_path = await invoker.run(request)
    return await asyncio.to_thread(transformer.transform_file, result_path, request)
