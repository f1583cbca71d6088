"""
Domain-specific exception hierarchy for the salon schedule package.
"""


class ScheduleError(Exception):
    """Base class for all application-level errors."""


class ScheduleParseError(ScheduleError):
    """Raised (or returned) when a stored schedule blob cannot be parsed."""

    def __init__(self, reason: str, detail: str = ""):
        self.reason = reason
        self.detail = detail
        message = reason if not detail else f"{reason}: {detail}"
        super().__init__(message)


class RepositoryError(ScheduleError):
    """Raised when salon data cannot be fetched from storage."""


class UnknownToolError(ScheduleError):
    """Raised when a tool name is not in the allowed tool set."""
