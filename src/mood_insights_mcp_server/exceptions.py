"""
Exception hierarchy for the Mood Insights MCP Server.

Only conditions that must stop a request are raised as exceptions. Recoverable
data problems (a malformed record, a pair with too few matched days) are
absorbed where they occur and never reach this module.
"""

from typing import Any, Dict, Optional


class MoodInsightsError(Exception):
    """Base exception for all server errors.

    All custom exceptions in the application inherit from this class so a
    single except clause can catch every application-specific error.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize the exception with a message and optional details.

        Args:
            message: Human-readable error message
            details: Additional context about the error (optional)
        """
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to a dictionary for tool responses."""
        return {
            "type": self.__class__.__name__,
            "message": str(self),
            "details": self.details,
        }


class InsufficientGroupDataError(MoodInsightsError):
    """Raised when a group has too little activity to be analyzed.

    Group-level conclusions such as overall harmony cannot be produced from
    nothing, so the whole analysis run fails instead of returning zeros.

    Reasons:
    - ``too_few_members``: fewer than two members recorded in the window
    - ``no_matched_dates``: no two members recorded on the same day
    """

    TOO_FEW_MEMBERS = "too_few_members"
    NO_MATCHED_DATES = "no_matched_dates"

    def __init__(self, message: str, reason: str, details: Optional[Dict[str, Any]] = None):
        merged = {"reason": reason}
        merged.update(details or {})
        super().__init__(message, merged)
        self.reason = reason


class StorageError(MoodInsightsError):
    """Raised when the analysis result store cannot be read or written."""

    pass


class ConfigurationError(MoodInsightsError):
    """Raised when configuration values are missing or invalid."""

    pass
