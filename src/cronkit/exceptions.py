"""Exception hierarchy for cronkit.

All errors raised by the engine derive from :class:`CronError`. A search
that finds nothing is not an error: it returns ``None``.
"""

from __future__ import annotations

from enum import Enum


class CronError(Exception):
    """Base class for cronkit errors."""

    pass


# =============================================================================
# Parse Errors
# =============================================================================


class ParseErrorKind(Enum):
    """Category of a parse failure."""

    SYNTAX = "syntax"
    RANGE = "range"
    ENCODING = "encoding"
    FIELD_COUNT = "field_count"


class CronParseError(CronError, ValueError):
    """Raised when cron expression parsing fails."""

    def __init__(
        self,
        message: str,
        expression: str = "",
        position: int = -1,
        kind: ParseErrorKind = ParseErrorKind.SYNTAX,
    ) -> None:
        self.expression = expression
        self.position = position
        self.kind = kind
        super().__init__(message)


# =============================================================================
# Range Errors
# =============================================================================


class TimestampRangeError(CronError, ValueError):
    """Raised when a timestamp lies outside the supported calendar domain."""

    def __init__(self, timestamp: int, message: str | None = None) -> None:
        self.timestamp = timestamp
        super().__init__(message or f"Timestamp {timestamp} is outside the supported range")


# =============================================================================
# Handle Errors
# =============================================================================


class HandleError(CronError):
    """Base class for misuse of boundary handles."""

    pass


class StaleHandleError(HandleError):
    """Handle was already released, or never issued by this registry."""

    pass


class HandleKindError(HandleError):
    """A schedule handle was passed where an iterator handle is expected, or vice versa."""

    pass


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(CronError):
    """Invalid engine configuration."""

    pass
