"""
Health check tool for Mood Insights.

Validates result store access, schema presence and the effective analysis
thresholds.
"""

import logging
import platform
from dataclasses import asdict
from typing import Any, Dict, Optional

from .. import __version__
from ..config import get_config
from ..exceptions import StorageError
from ..store import get_store

logger = logging.getLogger(__name__)


async def health_check_tool(store_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Validate store access, schema presence and configuration.

    No analysis payloads are read, only metadata and statistics.

    Args:
        store_path: Path to the analysis result store (configured path if omitted)

    Returns:
        Dict containing health check results including:
        - Store accessibility
        - Schema validation
        - Stored analysis statistics
        - Effective analysis thresholds
    """
    config = get_config()
    health: Dict[str, Any] = {
        "store_accessible": False,
        "schema_valid": False,
        "store_path": str(store_path or config.get_store_path()),
        "stats": {},
        "errors": [],
    }

    try:
        store = await get_store(store_path)
        health["store_accessible"] = True

        schema = await store.check_schema()
        health["schema_valid"] = schema["schema_valid"]
        health["schema"] = schema
        if schema["missing_required"]:
            health["errors"].append(f"Missing tables: {schema['missing_required']}")

        if health["schema_valid"]:
            health["stats"] = await store.get_stats()

    except StorageError as e:
        logger.error(f"Health check failed: {e}")
        health["errors"].append(f"Store error: {e}")

    health["analysis"] = asdict(config.analysis)
    health["classifier"] = asdict(config.classifier)

    health["system"] = {
        "python_version": platform.python_version(),
        "mcp_server": f"Mood Insights v{__version__}",
    }

    # Overall status
    health["status"] = (
        "healthy"
        if (health["store_accessible"] and health["schema_valid"] and not health["errors"])
        else "unhealthy"
    )
    health["healthy"] = health["status"] == "healthy"

    return health
