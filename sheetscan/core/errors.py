"""
Exception hierarchy for SheetScan

Every error aborts the current scan. Nothing is retried, and no error is
translated beyond attaching the option or column that triggered it.
"""

from typing import Optional


class SheetScanError(Exception):
    """Base class for all SheetScan errors"""


class ConfigError(SheetScanError, ValueError):
    """A server or table option is missing or invalid"""

    def __init__(self, message: str, option: Optional[str] = None):
        super().__init__(message)
        self.option = option


class FetchError(SheetScanError):
    """The remote table could not be fetched or unwrapped"""


class TransportError(FetchError, OSError):
    """The HTTP request failed or returned an error status"""


class InvalidEnvelopeError(FetchError):
    """The response body is empty or lacks the expected framing"""


class MalformedResponseError(FetchError):
    """The unwrapped body is not valid JSON"""


class UnexpectedShapeError(FetchError):
    """The JSON envelope has no row array at ``table.rows``"""


class ProjectionError(SheetScanError, ValueError):
    """A row could not be projected onto the requested columns"""

    def __init__(self, message: str, column: Optional[str] = None):
        super().__init__(message)
        self.column = column


class ColumnNotFoundError(ProjectionError):
    """The source row has no value at the column's position"""


class UnsupportedTypeError(ProjectionError):
    """The column's declared type has no coercion rule"""


class MalformedTimestampError(ProjectionError):
    """A timestamp column holds a value that is not a timestamp literal"""


class MalformedNumericError(ProjectionError):
    """A numeric column holds an unparsable value under strict numeric parsing"""


class UnsupportedOperationError(SheetScanError):
    """The operation is not available on a read-only, single-pass scan"""
