"""FastAPI application factory.

Each worker process builds its own app: its own contrast title index,
validator and invoker. The title index starts empty and is swapped in once
the background load at startup completes; requests arriving earlier simply
get no titles.
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI

from gsa_api import __version__
from gsa_api.api.routes import fallback_router, router
from gsa_api.config import load_config_from_env
from gsa_api.config.schema import ServiceConfig
from gsa_api.enrichment import EnrichmentInvoker
from gsa_api.logging_config import configure_logging
from gsa_api.titles import ContrastTitleIndex, load_contrast_titles
from gsa_api.validation import ParameterValidator

logger = structlog.get_logger()


async def load_titles_into(app: FastAPI, path: Path) -> None:
    """Load the title file off the event loop and publish the snapshot."""
    index = await asyncio.to_thread(load_contrast_titles, path)
    app.state.title_index = index
    app.state.titles_loaded = True


def create_app(
    config: ServiceConfig,
    title_index: Optional[ContrastTitleIndex] = None,
) -> FastAPI:
    """
    Build the application for one worker process.

    Args:
        config: Validated service configuration
        title_index: Prebuilt index; when None the index is loaded from
            config.titles_path in the background at startup

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        load_task = None
        if not app.state.titles_loaded:
            load_task = asyncio.create_task(load_titles_into(app, config.titles_path))
        logger.info(
            "worker_started",
            data_dir=str(config.data_dir),
            config_hash=config.config_hash()[:16],
        )
        yield
        if load_task is not None and not load_task.done():
            load_task.cancel()

    app = FastAPI(
        title="GSA API",
        description="Gene set enrichment across Expression Atlas comparisons",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.title_index = title_index if title_index is not None else ContrastTitleIndex()
    app.state.titles_loaded = title_index is not None
    app.state.validator = ParameterValidator(max_genes=config.max_genes)
    app.state.invoker = EnrichmentInvoker.from_config(config)

    app.include_router(router)
    # Catch-all must be registered last
    app.include_router(fallback_router)

    return app


def create_app_from_env() -> FastAPI:
    """uvicorn factory: load config named by GSA_API_CONFIG and build the app."""
    config = load_config_from_env()
    configure_logging(config.log_dir)
    return create_app(config)
