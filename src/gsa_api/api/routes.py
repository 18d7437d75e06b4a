"""HTTP routes.

    GET /getOrganisms
    GET /getContrastTitle/{EXPACC}/{CONTRASTID}
    GET /{FORMAT}/getOverlappingComparisons/{ORGANISM}/{GENE_IDS}
    GET /health

Anything else falls through to a greeting naming the worker process.
"""

import os
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from gsa_api.api.dependencies import (
    get_config,
    get_invoker,
    get_title_index,
    get_transformer,
    get_validator,
)
from gsa_api.api.responses import (
    error_response,
    format_results,
    format_validation_errors,
)
from gsa_api.config.schema import ServiceConfig
from gsa_api.enrichment import (
    EnrichmentInvoker,
    EnrichmentRequest,
    ResultTransformer,
    query_overlapping_comparisons,
)
from gsa_api.errors import InvocationError, OrganismListingError
from gsa_api.organisms import format_organisms, list_organisms
from gsa_api.titles import ContrastTitleIndex
from gsa_api.validation import ParameterValidator

router = APIRouter()
fallback_router = APIRouter()

ConfigDep = Annotated[ServiceConfig, Depends(get_config)]
TitleIndexDep = Annotated[ContrastTitleIndex, Depends(get_title_index)]
ValidatorDep = Annotated[ParameterValidator, Depends(get_validator)]
InvokerDep = Annotated[EnrichmentInvoker, Depends(get_invoker)]
TransformerDep = Annotated[ResultTransformer, Depends(get_transformer)]


@router.get("/health")
async def health(request: Request, title_index: TitleIndexDep) -> dict:
    return {
        "status": "ok",
        "pid": os.getpid(),
        "titles_loaded": request.app.state.titles_loaded,
        "title_count": len(title_index),
    }


@router.get("/getOrganisms")
def get_organisms(config: ConfigDep) -> Response:
    """List organisms with a gene-set database, one per line."""
    try:
        organisms = list_organisms(config.data_dir)
    except OrganismListingError:
        return error_response(
            config.server.default_format,
            "Error retrieving available organisms",
        )
    return PlainTextResponse(format_organisms(organisms))


@router.get("/getContrastTitle/{expacc}/{contrast_id}")
async def get_contrast_title(
    expacc: str,
    contrast_id: str,
    validator: ValidatorDep,
    title_index: TitleIndexDep,
) -> Response:
    """Title of a comparison; an empty body when it is not known.

    Always answers 200. Parameters failing the whitelist get the list of
    validation errors instead of a title.
    """
    validation = validator.validate({"EXPACC": expacc, "CONTRASTID": contrast_id})
    if not validation.passed:
        return JSONResponse(validation.errors)

    title = title_index.get(expacc, contrast_id)
    return PlainTextResponse(title or "")


@router.get("/{fmt}/getOverlappingComparisons/{organism}/{gene_ids}")
async def get_overlapping_comparisons(
    fmt: str,
    organism: str,
    gene_ids: str,
    validator: ValidatorDep,
    invoker: InvokerDep,
    transformer: TransformerDep,
) -> Response:
    """Comparisons whose differentially expressed genes overlap gene_ids."""
    validation = validator.validate({
        "FORMAT": fmt,
        "ORGANISM": organism,
        "GENE_IDS": gene_ids,
    })
    if not validation.passed:
        return format_validation_errors(fmt, validation.errors)

    enrichment_request = EnrichmentRequest(
        organism=organism,
        gene_ids_raw=gene_ids,
        format=fmt,
    )

    try:
        result = await query_overlapping_comparisons(enrichment_request, invoker, transformer)
    except InvocationError as e:
        return error_response(fmt, str(e))

    if result.error is not None and not result.lines:
        return error_response(
            fmt,
            f"Error reading overlapping Atlas comparisons for {enrichment_request.describe()}",
        )

    return format_results(fmt, result.text)


@fallback_router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
async def hello(path: str) -> Response:
    return PlainTextResponse(f"process {os.getpid()} says hello!")
