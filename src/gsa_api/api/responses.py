"""Serialize pipeline output as JSON records or tab-delimited text.

Errors use a format-dependent envelope: ``{"status": 500, "message": ...}``
for json, the bare message for tsv. Success and failure are told apart by
HTTP status alone.
"""

import math
from typing import Any, Optional

import polars as pl
import structlog
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from gsa_api.errors import UnsupportedFormatError

logger = structlog.get_logger()

# Identifier and free-text columns are never coerced to numbers
TEXT_COLUMNS = ["EXPERIMENT", "COMPARISON_ID", "COMPARISON_TITLE", "EXPERIMENT_URL"]

VALIDATION_MESSAGE = "Invalid request parameters"


def tsv_to_records(text: str) -> list[dict[str, Any]]:
    """Convert header + rows of tab-delimited text into field-keyed records.

    Numeric columns are typed by schema inference. Empty fields and
    non-finite numbers become None.
    """
    if not text.strip():
        return []

    header = text.split("\n", 1)[0].split("\t")
    df = pl.read_csv(
        text.encode("utf-8"),
        separator="\t",
        has_header=True,
        quote_char=None,
        infer_schema_length=None,
        schema_overrides={c: pl.String for c in TEXT_COLUMNS if c in header},
    )

    records = df.to_dicts()
    for record in records:
        for key, value in record.items():
            if isinstance(value, float) and not math.isfinite(value):
                record[key] = None
    return records


def error_response(fmt: Optional[str], message: str) -> Response:
    """500 response carrying message in the envelope for fmt."""
    if fmt == "json":
        return JSONResponse(status_code=500, content={"status": 500, "message": message})
    if fmt == "tsv":
        return PlainTextResponse(status_code=500, content=message)
    return unrecognised_format(fmt)


def unrecognised_format(fmt: Optional[str]) -> Response:
    error = UnsupportedFormatError(fmt)
    logger.error("unrecognised_format", format=fmt)
    return PlainTextResponse(status_code=500, content=str(error))


def format_results(fmt: Optional[str], text: str) -> Response:
    """200 response with text as JSON records (json) or verbatim (tsv)."""
    if fmt == "json":
        try:
            records = tsv_to_records(text)
        except pl.exceptions.PolarsError as e:
            logger.error("json_conversion_failed", error=str(e))
            return error_response(fmt, "Error converting results to json")
        return JSONResponse(status_code=200, content=records)
    if fmt == "tsv":
        return PlainTextResponse(status_code=200, content=text)
    return unrecognised_format(fmt)


def format_validation_errors(fmt: Optional[str], errors: list[dict]) -> Response:
    """500 response listing every failed parameter check."""
    if fmt == "json":
        return JSONResponse(
            status_code=500,
            content={"status": 500, "message": VALIDATION_MESSAGE, "errors": errors},
        )
    if fmt == "tsv":
        body = "\n".join(f"{e['param']}: {e['msg']}" for e in errors)
        return PlainTextResponse(status_code=500, content=body)
    return unrecognised_format(fmt)
