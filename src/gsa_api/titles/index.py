"""Contrast title index: experiment accession -> contrast id -> title.

The index is built once per worker process from a tab-delimited file with
three columns (experiment accession, contrast id, contrast title) and is
read-only afterwards.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import structlog

logger = structlog.get_logger()


class ContrastTitleIndex:
    """Immutable two-level lookup of contrast titles.

    Lookups for unknown accessions or contrast ids return None.
    """

    def __init__(self, titles: Optional[Mapping[str, Mapping[str, str]]] = None):
        self._titles = MappingProxyType({
            accession: MappingProxyType(dict(contrasts))
            for accession, contrasts in (titles or {}).items()
        })

    def get(self, accession: str, contrast_id: str) -> Optional[str]:
        """Return the title for (accession, contrast_id), or None if absent."""
        contrasts = self._titles.get(accession)
        if contrasts is None:
            return None
        return contrasts.get(contrast_id)

    @property
    def accession_count(self) -> int:
        return len(self._titles)

    def __len__(self) -> int:
        return sum(len(contrasts) for contrasts in self._titles.values())

    def __repr__(self) -> str:
        return (
            f"ContrastTitleIndex(accessions={self.accession_count}, "
            f"titles={len(self)})"
        )


def load_contrast_titles(path: Path | str) -> ContrastTitleIndex:
    """Load the contrast title file into a ContrastTitleIndex.

    Best-effort: lines with fewer than three tab-separated fields are skipped,
    and read errors (missing file, undecodable bytes) are logged rather than
    raised. Whatever was parsed before an error is kept, so a worker always
    starts with a usable (possibly empty) index.

    Args:
        path: Tab-delimited file with accession, contrast id and title columns

    Returns:
        ContrastTitleIndex snapshot of the parsed rows
    """
    path = Path(path)
    titles: dict[str, dict[str, str]] = {}
    line_count = 0
    skipped = 0

    logger.info("contrast_titles_load_start", path=str(path))

    try:
        with path.open("rb") as f:
            for raw in f:
                fields = raw.decode("utf-8").rstrip("\r\n").split("\t")
                line_count += 1
                if len(fields) < 3:
                    skipped += 1
                    continue
                accession, contrast_id, title = fields[0], fields[1], fields[2]
                titles.setdefault(accession, {})[contrast_id] = title
    except (OSError, UnicodeDecodeError) as e:
        logger.error(
            "contrast_titles_read_error",
            path=str(path),
            lines_read=line_count,
            error=str(e),
        )

    index = ContrastTitleIndex(titles)

    if skipped:
        logger.debug("contrast_titles_skipped_lines", skipped=skipped)
    logger.info(
        "contrast_titles_loaded",
        path=str(path),
        accessions=index.accession_count,
        titles=len(index),
    )

    return index
