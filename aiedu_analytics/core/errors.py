"""Exception types raised by the analytics engine.

Degenerate statistics (empty input, zero variance) are never errors; these
types are reserved for inputs with the wrong shape.
"""


class AnalyticsError(Exception):
    """Base class for analytics engine errors."""


class InvalidInputError(AnalyticsError, ValueError):
    """Input has an invalid shape (mismatched lengths, inverted bounds, ...)."""


class InvalidRecordError(InvalidInputError):
    """A raw survey row could not be normalized into a StudentRecord."""

    def __init__(self, message: str, row_index: int | None = None):
        self.row_index = row_index
        if row_index is not None:
            message = f"row {row_index}: {message}"
        super().__init__(message)
