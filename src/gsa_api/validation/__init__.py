"""Request parameter validation."""

from gsa_api.validation.validator import (
    ALLOWED_FORMATS,
    DEFAULT_WHITELIST,
    ParameterValidator,
    ValidationResult,
)

__all__ = [
    "ALLOWED_FORMATS",
    "DEFAULT_WHITELIST",
    "ParameterValidator",
    "ValidationResult",
]
