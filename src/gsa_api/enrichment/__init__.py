"""Enrichment pipeline: command invocation and result reshaping."""

from gsa_api.enrichment.invoker import EnrichmentInvoker
from gsa_api.enrichment.models import (
    OUTPUT_COLUMNS,
    RESULT_HEADER_SENTINEL,
    EnrichmentRequest,
    EnrichmentResultRecord,
)
from gsa_api.enrichment.pipeline import query_overlapping_comparisons
from gsa_api.enrichment.transform import ResultTransformer, TransformResult

__all__ = [
    "EnrichmentInvoker",
    "EnrichmentRequest",
    "EnrichmentResultRecord",
    "OUTPUT_COLUMNS",
    "query_overlapping_comparisons",
    "RESULT_HEADER_SENTINEL",
    "ResultTransformer",
    "TransformResult",
]
