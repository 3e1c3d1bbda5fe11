#!/usr/bin/env python3
"""
Mood Insights MCP Server.

Exposes the group cross-analysis engine and its stored results as MCP tools
over the stdio transport.
"""

import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

# MCP SDK imports
from mcp.server.fastmcp import FastMCP

# Local imports
from mood_insights_mcp_server.config import Config, load_config, set_config
from mood_insights_mcp_server.exceptions import MoodInsightsError
from mood_insights_mcp_server.models import ToolName
from mood_insights_mcp_server.store import close_store, get_store
from mood_insights_mcp_server.tools import (
    analysis_history_tool,
    group_cross_analysis_tool,
    health_check_tool,
    stored_analysis_tool,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("Mood Insights")

# Global instances
config: Optional[Config] = None


# ===== ANALYSIS TOOLS =====


@mcp.tool(name=ToolName.GROUP_CROSS_ANALYSIS.value)
async def mood_group_cross_analysis(
    group_id: str,
    records: List[Dict[str, Any]],
    window_start: Optional[str] = None,
    persist: Optional[bool] = None,
    redact: Optional[bool] = None,
    store_path: Optional[str] = None,
):
    """Cross-analyze a group's mood records: pair sync, patterns, dynamics, timing."""
    return await group_cross_analysis_tool(
        group_id, records, window_start, persist, redact, store_path
    )


@mcp.tool(name=ToolName.STORED_ANALYSIS.value)
async def mood_stored_analysis(
    group_id: str,
    window_start: str,
    store_path: Optional[str] = None,
    redact: Optional[bool] = None,
):
    """Fetch the stored cross analysis of one group window."""
    return await stored_analysis_tool(group_id, window_start, store_path, redact)


@mcp.tool(name=ToolName.ANALYSIS_HISTORY.value)
async def mood_analysis_history(group_id: str, store_path: Optional[str] = None):
    """List the stored analysis windows of a group."""
    return await analysis_history_tool(group_id, store_path)


@mcp.tool(name=ToolName.HEALTH_CHECK.value)
async def mood_health_check(store_path: Optional[str] = None):
    """Validate result store access, schema presence and analysis thresholds."""
    return await health_check_tool(store_path)


# ===== SERVER LIFECYCLE =====


async def startup():
    """Initialize server resources on startup."""
    global config

    logger.info("Starting Mood Insights MCP Server...")

    # Load configuration
    config = load_config()
    set_config(config)
    logging.getLogger().setLevel(config.logging_level)
    logger.info(f"Loaded configuration: {config}")

    # Open the result store
    try:
        await get_store()
        logger.info("Analysis store ready")
    except MoodInsightsError as e:
        logger.error(f"Failed to open analysis store: {e}")
        # Continue anyway - tools will report the error

    logger.info("Server startup complete")


async def shutdown():
    """Clean up resources on shutdown."""
    logger.info("Shutting down Mood Insights MCP Server...")

    await close_store()

    logger.info("Server shutdown complete")


def main():
    """Main entry point for the server."""
    try:
        # Initialize resources
        asyncio.run(startup())

        # Run the MCP server
        logger.info("Starting MCP server on stdio transport...")
        mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Server interrupted by user")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
    finally:
        # Cleanup resources
        asyncio.run(shutdown())


if __name__ == "__main__":
    main()
