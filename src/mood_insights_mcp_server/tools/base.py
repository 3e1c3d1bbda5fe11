"""
Base functionality for MCP tools.

This module provides common utilities for tool implementations.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from ..exceptions import MoodInsightsError

logger = logging.getLogger(__name__)


def create_error_response(error: Exception, error_type: str = "unknown_error") -> Dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        error: The exception that occurred
        error_type: Type of error for categorization

    Returns:
        Dict containing error information
    """
    response: Dict[str, Any] = {"error": str(error), "error_type": error_type}
    if isinstance(error, MoodInsightsError) and error.details:
        response["details"] = error.details
    return response


def create_validation_error(error: ValidationError) -> Dict[str, Any]:
    """Create an error response for tool arguments that failed validation."""
    fields = sorted({".".join(str(part) for part in err["loc"]) for err in error.errors()})
    return {
        "error": f"Invalid arguments: {', '.join(fields)}",
        "error_type": "invalid_input",
        "details": {"fields": fields},
    }
