"""Data models for enrichment requests and result rows."""

from typing import Optional

from pydantic import BaseModel, field_validator

# First field of the header row written by the enrichment command
RESULT_HEADER_SENTINEL = "exp"

# Columns of the reshaped output, in order
OUTPUT_COLUMNS = [
    "EXPERIMENT",
    "COMPARISON_ID",
    "P-VALUE",
    "OBSERVED",
    "EXPECTED",
    "ADJUSTED P-VALUE",
    "EFFECT SIZE",
    "COMPARISON_TITLE",
    "EXPERIMENT_URL",
]

DESCRIPTION_TEMPLATE = (
    "# Enrichment (Fisher-exact, FDR=0.01) of the following gene set across "
    "differentially expressed genes in each {organism} comparison in Expression Atlas: "
)


class EnrichmentRequest(BaseModel):
    """A validated overlap query.

    Attributes:
        organism: Organism name, also the stem of its <organism>.po database
        gene_ids_raw: Gene identifiers exactly as supplied (space-delimited)
        format: Output format, "tsv" or "json"
    """

    organism: str
    gene_ids_raw: str
    format: str = "tsv"

    def describe(self) -> str:
        return f"organism: '{self.organism}' and genes: '{self.gene_ids_raw}'"


class EnrichmentResultRecord(BaseModel):
    """One data row written by the enrichment command.

    The composite key has the shape ``<accession>_<suffix>:<a>:<b>:<contrast id>``.
    Numeric columns are kept as the strings the command wrote so the output
    reproduces them byte for byte.
    """

    composite_key: str
    p_value: str
    observed: str
    expected: str
    adjusted_p_value: str
    effect_size: str

    @field_validator("composite_key")
    @classmethod
    def check_composite_key(cls, v: str) -> str:
        if len(v.split(":")) < 4:
            raise ValueError(f"composite key has fewer than 4 ':' parts: {v!r}")
        return v

    @classmethod
    def from_fields(cls, fields: list[str]) -> "EnrichmentResultRecord":
        """Build a record from a tab-split result row.

        Raises:
            ValueError: If the row has fewer than six fields or a malformed key
        """
        if len(fields) < 6:
            raise ValueError(f"expected at least 6 fields, got {len(fields)}")
        return cls(
            composite_key=fields[0],
            p_value=fields[1],
            observed=fields[2],
            expected=fields[3],
            adjusted_p_value=fields[4],
            effect_size=fields[5],
        )

    @property
    def experiment_accession(self) -> str:
        return self.composite_key.split(":")[0].split("_")[0]

    @property
    def contrast_id(self) -> str:
        return self.composite_key.split(":")[3]

    def experiment_url(self, base_url: str) -> str:
        return (
            f"{base_url}/experiments/{self.experiment_accession}"
            f"?queryFactorValues={self.contrast_id}&_specific=on"
        )

    def to_row(self, base_url: str, title: Optional[str] = None) -> list[str]:
        """Return the nine output fields in OUTPUT_COLUMNS order.

        A missing title is written as an empty field so every row keeps the
        same shape.
        """
        return [
            self.experiment_accession,
            self.contrast_id,
            self.p_value,
            self.observed,
            self.expected,
            self.adjusted_p_value,
            self.effect_size,
            title or "",
            self.experiment_url(base_url),
        ]
