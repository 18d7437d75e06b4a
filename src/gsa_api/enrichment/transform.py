"""Reshape the enrichment command's result file into the published columns."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from gsa_api.enrichment.models import (
    DESCRIPTION_TEMPLATE,
    OUTPUT_COLUMNS,
    RESULT_HEADER_SENTINEL,
    EnrichmentRequest,
    EnrichmentResultRecord,
)
from gsa_api.titles import ContrastTitleIndex

logger = structlog.get_logger()


@dataclass
class TransformResult:
    """Accumulated output of one result file.

    Attributes:
        lines: Output lines (comments, column header, data rows)
        data_rows: Number of data rows emitted
        error: Error that interrupted reading, if any; lines parsed before
            it are still present
    """
    lines: list[str] = field(default_factory=list)
    data_rows: int = 0
    error: Optional[Exception] = None

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class ResultTransformer:
    """Turns raw result rows into nine-column output rows.

    Splits the composite experiment/contrast key, adds the contrast title from
    the index and an Expression Atlas link for the experiment.
    """

    def __init__(self, title_index: ContrastTitleIndex, atlas_base_url: str):
        self.title_index = title_index
        self.atlas_base_url = atlas_base_url.rstrip("/")

    def header_lines(self, request: EnrichmentRequest) -> list[str]:
        """Lines replacing the command's header row.

        TSV output is prefixed with two comment lines describing the query.
        """
        lines = []
        if request.format == "tsv":
            lines.append(DESCRIPTION_TEMPLATE.format(organism=request.organism))
            lines.append(f"# '{request.gene_ids_raw}'")
        lines.append("\t".join(OUTPUT_COLUMNS))
        return lines

    def transform_record(self, record: EnrichmentResultRecord) -> str:
        title = self.title_index.get(record.experiment_accession, record.contrast_id)
        return "\t".join(record.to_row(self.atlas_base_url, title))

    def transform_file(self, path: Path, request: EnrichmentRequest) -> TransformResult:
        """Read and reshape a result file, then delete it.

        The file is removed on every path out of this method, including
        empty files and read errors.

        Args:
            path: Result file written by the enrichment command
            request: The request the file was produced for

        Returns:
            TransformResult with the accumulated lines and any read error
        """
        path = Path(path)
        result = TransformResult()

        try:
            with path.open("rb") as f:
                for line_no, raw in enumerate(f, start=1):
                    line = raw.decode("utf-8").rstrip("\r\n")
                    if not line:
                        continue
                    fields = line.split("\t")
                    if fields[0] == RESULT_HEADER_SENTINEL:
                        result.lines.extend(self.header_lines(request))
                        continue
                    try:
                        record = EnrichmentResultRecord.from_fields(fields)
                    except (ValueError, ValidationError) as e:
                        logger.warning(
                            "gsa_result_row_skipped",
                            path=str(path),
                            line_no=line_no,
                            reason=str(e).splitlines()[0],
                        )
                        continue
                    result.lines.append(self.transform_record(record))
                    result.data_rows += 1
        except (OSError, UnicodeDecodeError) as e:
            logger.error(
                "gsa_result_read_error",
                path=str(path),
                lines_parsed=len(result.lines),
                error=str(e),
            )
            result.error = e
        finally:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.error("gsa_result_delete_failed", path=str(path), error=str(e))

        logger.info(
            "gsa_result_transformed",
            organism=request.organism,
            data_rows=result.data_rows,
        )
        return result
