"""FastAPI dependencies resolving per-worker state from the application."""

from fastapi import Request

from gsa_api.config.schema import ServiceConfig
from gsa_api.enrichment.invoker import EnrichmentInvoker
from gsa_api.enrichment.transform import ResultTransformer
from gsa_api.titles import ContrastTitleIndex
from gsa_api.validation import ParameterValidator


def get_config(request: Request) -> ServiceConfig:
    return request.app.state.config


def get_title_index(request: Request) -> ContrastTitleIndex:
    # Replaced wholesale once the background load finishes
    return request.app.state.title_index


def get_validator(request: Request) -> ParameterValidator:
    return request.app.state.validator


def get_invoker(request: Request) -> EnrichmentInvoker:
    return request.app.state.invoker


def get_transformer(request: Request) -> ResultTransformer:
    return ResultTransformer(
        title_index=request.app.state.title_index,
        atlas_base_url=request.app.state.config.atlas_base_url,
    )
