"""
Mood Insights MCP Server.

Group cross-analysis of shared mood journals: pairwise emotional sync,
interaction patterns, group dynamics and time-of-day patterns.
"""

__version__ = "0.1.0"
