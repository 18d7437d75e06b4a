"""Validation of request path parameters.

Every present parameter is checked and all failures are collected, so a
client sees every problem with its request in a single response.
"""

import string
from dataclasses import dataclass, field
from typing import Mapping, Optional

import structlog

from gsa_api.errors import ParameterValidationError

logger = structlog.get_logger()

# Alphanumerics, space and ( ) _ . + -
DEFAULT_WHITELIST = frozenset(string.ascii_letters + string.digits + " ()_.+-")

ALLOWED_FORMATS = ("tsv", "json")

# Parameter name -> message reported when it contains a forbidden character
WHITELISTED_PARAMS = {
    "EXPACC": "Invalid experiment accession",
    "CONTRASTID": "Invalid comparison identifier",
    "ORGANISM": "Invalid organism name",
    "GENE_IDS": "Invalid gene identifiers",
}


@dataclass
class ValidationResult:
    """Result of validating one request's parameters.

    Attributes:
        errors: One {"param", "msg", "value"} record per failed check
    """
    errors: list[dict] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    def add(self, param: str, msg: str, value: str) -> None:
        self.errors.append({"param": param, "msg": msg, "value": value})

    def raise_for_errors(self) -> None:
        """Raise ParameterValidationError if any check failed."""
        if self.errors:
            raise ParameterValidationError(self.errors)


class ParameterValidator:
    """Validator for EXPACC, CONTRASTID, FORMAT, ORGANISM and GENE_IDS.

    Parameters absent from the request (None or empty) are not checked.
    """

    def __init__(
        self,
        max_genes: int = 100,
        whitelist: frozenset[str] = DEFAULT_WHITELIST,
    ):
        """Initialize parameter validator.

        Args:
            max_genes: Maximum number of space-separated gene identifiers (default: 100)
            whitelist: Characters allowed in free-text parameters
        """
        self.max_genes = max_genes
        self.whitelist = whitelist

    def is_whitelisted(self, value: str) -> bool:
        return all(ch in self.whitelist for ch in value)

    def count_genes(self, gene_ids: str) -> int:
        """Count gene identifiers the way clients delimit them: on single spaces."""
        return len(gene_ids.split(" "))

    def validate(self, params: Mapping[str, Optional[str]]) -> ValidationResult:
        """Validate request parameters.

        Args:
            params: Raw path parameters keyed by route parameter name

        Returns:
            ValidationResult holding every failed check (empty when valid)
        """
        result = ValidationResult()

        for param, message in WHITELISTED_PARAMS.items():
            value = params.get(param)
            if value and not self.is_whitelisted(value):
                result.add(param, message, value)

        fmt = params.get("FORMAT")
        if fmt and fmt not in ALLOWED_FORMATS:
            result.add(
                "FORMAT",
                "The only formats allowed are " + " and ".join(ALLOWED_FORMATS),
                fmt,
            )

        gene_ids = params.get("GENE_IDS")
        if gene_ids and self.count_genes(gene_ids) > self.max_genes:
            result.add(
                "GENE_IDS",
                f"The number of gene identifiers must be no more than {self.max_genes}",
                gene_ids,
            )

        if not result.passed:
            logger.warning(
                "request_validation_failed",
                params=[e["param"] for e in result.errors],
            )

        return result
