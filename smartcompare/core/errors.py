# smartcompare/core/errors.py


class SmartCompareError(Exception):
    """Base class for errors surfaced to callers of the comparison engine."""


class MalformedCatalogError(SmartCompareError, ValueError):
    """Raised when attribute definitions cannot form a valid catalog."""


class EmptyInputError(SmartCompareError):
    """Raised when a recommendation is requested over zero products."""


class DocumentDecodeError(SmartCompareError):
    """Raised when a single document cannot be read or decoded."""

    def __init__(self, source_name: str, reason: str):
        self.source_name = source_name
        self.reason = reason
        super().__init__(f"Could not decode '{source_name}': {reason}")
