"""List organisms that have a precomputed gene-set database."""

from pathlib import Path

import structlog

from gsa_api.enrichment.invoker import DATABASE_SUFFIX
from gsa_api.errors import OrganismListingError

logger = structlog.get_logger()


def list_organisms(data_dir: Path) -> list[str]:
    """Return sorted organism names for every <organism>.po file in data_dir.

    Raises:
        OrganismListingError: If the directory cannot be read
    """
    data_dir = Path(data_dir)
    try:
        organisms = sorted(
            p.name[: -len(DATABASE_SUFFIX)]
            for p in data_dir.iterdir()
            if p.name.endswith(DATABASE_SUFFIX) and p.is_file()
        )
    except OSError as e:
        logger.error("organism_listing_failed", data_dir=str(data_dir), error=str(e))
        raise OrganismListingError(str(e)) from e

    logger.debug("organisms_listed", count=len(organisms))
    return organisms


def format_organisms(organisms: list[str]) -> str:
    """One organism per line, newline-terminated."""
    return "".join(f"{name}\n" for name in organisms)
