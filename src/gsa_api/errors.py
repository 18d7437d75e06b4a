"""Exception hierarchy for request-level failures.

Every error raised while serving a request derives from GSAError so that the
routes can map it onto the uniform 500 envelope produced by the formatter.
"""


class GSAError(Exception):
    """Base class for service errors."""


class ParameterValidationError(GSAError):
    """Request parameters failed whitelist, format, or gene-count checks.

    Attributes:
        errors: List of ``{"param", "msg", "value"}`` records, one per failed check
    """

    def __init__(self, errors: list[dict]):
        self.errors = errors
        super().__init__(
            "; ".join(f"{e['param']}: {e['msg']}" for e in errors)
        )


class InvocationError(GSAError):
    """The external enrichment command failed, timed out, or could not start."""


class UnsupportedFormatError(GSAError):
    """An output format outside {tsv, json} reached the formatter."""

    def __init__(self, fmt: str | None):
        self.format = fmt
        super().__init__(f"Unrecognised data format:{fmt}")


class OrganismListingError(GSAError):
    """The data directory could not be listed."""
