"""
Exceptions used throughout Table Scanner.

Exception Hierarchy:
    TableScanError (base)
    ├── ValidationError
    ├── ExtractionError
    │   ├── AuthError
    │   ├── EmptyResultError
    │   ├── TransportError
    │   │   └── ResponseFormatError
    │   └── UnknownExtractionError
    └── ExportError
"""


class TableScanError(Exception):
    """
    Base exception for all Table Scanner errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str = "", details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ValidationError(TableScanError):
    """Raised when a selected image is rejected before any network call."""
    pass


# =============================================================================
# EXTRACTION ERRORS
# =============================================================================

class ExtractionError(TableScanError):
    """Base exception for failures of the remote table extraction call."""
    pass


class AuthError(ExtractionError):
    """The remote service rejected the API key."""
    pass


class EmptyResultError(ExtractionError):
    """The call succeeded but the model returned no rows."""
    pass


class TransportError(ExtractionError):
    """Network failure or a remote error that carries a message."""
    pass


class ResponseFormatError(TransportError):
    """The model answered with something that is not a table."""
    pass


class UnknownExtractionError(ExtractionError):
    """A failure without any usable message."""
    pass


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class ExportError(TableScanError):
    """Raised when the spreadsheet cannot be generated."""
    pass
