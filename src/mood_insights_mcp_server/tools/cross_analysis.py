"""
Group cross-analysis tool.

Runs the cross-analysis engine over a week of a group's mood records and
optionally stores the result for later lookup.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..analysis import CrossAnalysisEngine, normalize_window
from ..config import get_config
from ..exceptions import InsufficientGroupDataError, MoodInsightsError, StorageError
from ..models import CrossAnalysisInput
from ..privacy import sanitize_analysis
from ..store import get_store
from .base import create_error_response, create_validation_error

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA_MESSAGE = "Not enough group activity yet to analyze"


async def group_cross_analysis_tool(
    group_id: str,
    records: List[Dict[str, Any]],
    window_start: Optional[str] = None,
    persist: Optional[bool] = None,
    redact: Optional[bool] = None,
    store_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Analyze how the members of a group relate emotionally.

    Provides:
    - Pairwise emotional sync, stress correlation and energy alignment
    - An interaction pattern per pair (mirroring, supportive, conflicting,
      independent)
    - Group harmony, stability, support network and stress points
    - Peak emotion hours, low energy hours and group sync moments

    Args:
        group_id: Group identifier
        records: Raw mood records of the group's members
        window_start: First day of the analysis window (YYYY-MM-DD); records
            outside the window are ignored when given
        persist: Store the result (config default if omitted)
        redact: Hash member ids in the response (config default if omitted)
        store_path: Path to the analysis result store

    Returns:
        Dict containing the analysis payload and run metadata
    """
    try:
        params = CrossAnalysisInput(
            group_id=group_id,
            records=records,
            window_start=window_start,
            persist=persist,
            redact=redact,
        )
    except ValidationError as e:
        return create_validation_error(e)

    config = get_config()

    try:
        normalized = normalize_window(
            params.records, params.window_start, config.analysis.window_days
        )
        result = CrossAnalysisEngine(config).analyze_normalized(normalized)

    except InsufficientGroupDataError as e:
        logger.info(f"Group {params.group_id} not analyzed: {e.reason}")
        return {
            "error": INSUFFICIENT_DATA_MESSAGE,
            "error_type": "insufficient_group_data",
            "reason": e.reason,
            "details": e.details,
            "group_id": params.group_id,
        }
    except (MoodInsightsError, ValueError) as e:
        logger.error(f"Group cross analysis failed for {params.group_id}: {e}")
        return create_error_response(e, "group_analysis_error")

    member_series = normalized.member_series
    window = params.window_start or min(record.calendar_date for record in normalized.records)

    response: Dict[str, Any] = {
        "group_id": params.group_id,
        "window_start": window.isoformat(),
        "member_count": len(member_series),
        "record_count": len(normalized.records),
        "analysis": sanitize_analysis(result.to_payload(), config.should_redact(params.redact)),
    }

    if config.should_persist(params.persist):
        try:
            store = await get_store(store_path)
            response["analysis_id"] = await store.save_result(params.group_id, window, result)
        except StorageError as e:
            logger.error(f"Failed to store analysis for {params.group_id}: {e}")
            return create_error_response(e, "storage_error")

    return response
