"""
MCP Tools for Mood Insights.

This package contains all tool implementations for the MCP server.
Each tool is in its own module for better organization and maintainability.
"""

from .cross_analysis import group_cross_analysis_tool
from .health import health_check_tool
from .history import analysis_history_tool, stored_analysis_tool

__all__ = [
    "analysis_history_tool",
    "group_cross_analysis_tool",
    "health_check_tool",
    "stored_analysis_tool",
]
