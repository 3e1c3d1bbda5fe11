"""
Stored analysis lookup tools.

Read back cross-analysis results saved by the group cross-analysis tool.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..config import get_config
from ..exceptions import StorageError
from ..models import AnalysisHistoryInput, AnalysisHistoryOutput, StoredAnalysisInput
from ..privacy import sanitize_analysis
from ..store import get_store, make_analysis_id
from .base import create_error_response, create_validation_error

logger = logging.getLogger(__name__)


async def stored_analysis_tool(
    group_id: str,
    window_start: str,
    store_path: Optional[str] = None,
    redact: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Fetch the stored analysis of one group window.

    Args:
        group_id: Group identifier
        window_start: First day of the analysis window (YYYY-MM-DD)
        store_path: Path to the analysis result store
        redact: Hash member ids in the response (config default if omitted)

    Returns:
        Dict containing the stored analysis payload
    """
    try:
        params = StoredAnalysisInput(group_id=group_id, window_start=window_start, redact=redact)
    except ValidationError as e:
        return create_validation_error(e)

    try:
        store = await get_store(store_path)
        result = await store.get_result(params.group_id, params.window_start)
    except StorageError as e:
        logger.error(f"Failed to load analysis for {params.group_id}: {e}")
        return create_error_response(e, "storage_error")

    analysis_id = make_analysis_id(params.group_id, params.window_start)
    if result is None:
        return {
            "error": f"No stored analysis {analysis_id}",
            "error_type": "not_found",
            "group_id": params.group_id,
            "window_start": params.window_start.isoformat(),
        }

    config = get_config()
    return {
        "analysis_id": analysis_id,
        "group_id": params.group_id,
        "window_start": params.window_start.isoformat(),
        "analysis": sanitize_analysis(result.to_payload(), config.should_redact(params.redact)),
    }


async def analysis_history_tool(
    group_id: str, store_path: Optional[str] = None
) -> Dict[str, Any]:
    """List the stored analysis windows of a group, most recent first."""
    try:
        params = AnalysisHistoryInput(group_id=group_id)
    except ValidationError as e:
        return create_validation_error(e)

    try:
        store = await get_store(store_path)
        analyses = await store.list_analyses(params.group_id)
    except StorageError as e:
        logger.error(f"Failed to list analyses for {params.group_id}: {e}")
        return create_error_response(e, "storage_error")

    return AnalysisHistoryOutput(group_id=params.group_id, analyses=analyses).model_dump()
