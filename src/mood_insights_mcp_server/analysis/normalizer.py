"""
Record normalization for the cross-analysis engine.

Turns the loosely shaped mood documents handed over by the journaling feature
into validated ``MoodRecord`` instances. Pair scoring and group aggregation
work on one series per member with one record per calendar date; temporal
analysis works on every valid record in the window.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from pydantic import ValidationError

from ..models import MoodRecord

logger = logging.getLogger(__name__)

MemberSeriesMap = Dict[str, Tuple[MoodRecord, ...]]


class NormalizedRecords(NamedTuple):
    """Normalizer output for one analysis run."""

    member_series: MemberSeriesMap
    # Every valid in-window record, duplicates included, ordered by member and time
    records: Tuple[MoodRecord, ...]


def _record_sort_key(record: MoodRecord) -> Tuple[str, datetime]:
    # Wall clock only, so naive and offset-aware timestamps compare
    return (record.member_id, record.created_at.replace(tzinfo=None))


def validate_records(raw_records: Iterable[Any]) -> List[MoodRecord]:
    """
    Validate raw records, dropping the ones that cannot be used.

    Args:
        raw_records: Dicts shaped like journal documents, or MoodRecord instances

    Returns:
        Valid records in input order
    """
    records = []
    for position, raw in enumerate(raw_records):
        if isinstance(raw, MoodRecord):
            records.append(raw)
            continue
        try:
            records.append(MoodRecord.model_validate(raw))
        except ValidationError as e:
            fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
            logger.warning(f"Dropping malformed mood record #{position}: invalid {fields}")
    return records


def select_window(
    records: Iterable[MoodRecord],
    window_start: Optional[date] = None,
    window_days: int = 7,
) -> List[MoodRecord]:
    """Keep the records dated inside ``[window_start, window_start + window_days)``."""
    records = list(records)
    if window_start is None:
        return records

    window_end = window_start + timedelta(days=window_days)
    selected = []
    for record in records:
        if window_start <= record.calendar_date < window_end:
            selected.append(record)
        else:
            logger.debug(
                f"Skipping record of {record.member_id} on {record.calendar_date}: outside window"
            )
    return selected


def group_by_member(records: Iterable[MoodRecord]) -> MemberSeriesMap:
    """
    Group records into per-member series keyed by member id.

    A member keeps one record per calendar date; when the journal hands over
    two for the same day, the later one in input order wins.

    Args:
        records: Valid mood records in input order

    Returns:
        Mapping of member id to that member's records sorted by date
    """
    by_member: Dict[str, Dict[date, MoodRecord]] = {}

    for record in records:
        day = record.calendar_date
        days = by_member.setdefault(record.member_id, {})
        if day in days:
            logger.debug(f"Replacing earlier record of {record.member_id} on {day}")
        days[day] = record

    return {
        member_id: tuple(days[day] for day in sorted(days))
        for member_id, days in sorted(by_member.items())
    }


def normalize_window(
    raw_records: Iterable[Any],
    window_start: Optional[date] = None,
    window_days: int = 7,
) -> NormalizedRecords:
    """
    Validate raw records and prepare both views of the analysis window.

    Args:
        raw_records: Raw journal documents or MoodRecord instances, any order
        window_start: First day of the analysis window, if records should be filtered
        window_days: Length of the analysis window in days

    Returns:
        NormalizedRecords with the deduplicated member series and every
        in-window record
    """
    in_window = select_window(validate_records(raw_records), window_start, window_days)
    return NormalizedRecords(
        member_series=group_by_member(in_window),
        records=tuple(sorted(in_window, key=_record_sort_key)),
    )


def normalize_records(
    raw_records: Iterable[Any],
    window_start: Optional[date] = None,
    window_days: int = 7,
) -> MemberSeriesMap:
    """Validate raw records and group them into per-member series."""
    return normalize_window(raw_records, window_start, window_days).member_series
