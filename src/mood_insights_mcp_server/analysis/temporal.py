"""
Time-of-day patterns over a group's records.

Records are bucketed by the wall-clock hour of their own timestamp. No
timezone conversion happens here; timestamps arrive already localized.
Records that only carry a calendar date are left out.
"""

import math
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..config import AnalysisConfig
from ..models import MoodRecord, TemporalPatternSet


def hour_label(hour: int) -> str:
    """Format an hour of day as ``HH:00``."""
    return f"{hour:02d}:00"


def slot_label(day: date, hour: int) -> str:
    """Format an hour-granularity timestamp as ``YYYY-MM-DDTHH:00``."""
    return f"{day.isoformat()}T{hour:02d}:00"


def _mean(values: List[float]) -> float:
    # fsum keeps the mean independent of record order
    return math.fsum(values) / len(values)


def analyze_temporal_patterns(
    records: Iterable[MoodRecord], analysis: Optional[AnalysisConfig] = None
) -> TemporalPatternSet:
    """
    Find peak-emotion hours, low-energy hours and group sync moments.

    A single record is enough to populate an hour bucket, so sparse weeks give
    sparse (possibly empty) results rather than an error.

    Args:
        records: Every valid record in the window, from all members,
            including several per member and day
        analysis: Analysis parameters (defaults if omitted)

    Returns:
        TemporalPatternSet with sorted labels
    """
    analysis = analysis or AnalysisConfig()
    intensity_by_hour: Dict[int, List[float]] = defaultdict(list)
    energy_by_hour: Dict[int, List[float]] = defaultdict(list)
    members_by_slot: Dict[Tuple[date, int], Set[str]] = defaultdict(set)

    for record in records:
        if record.hour is None:
            # Date-only records have no time of day to bucket
            continue
        intensity_by_hour[record.hour].append(record.mood.intensity)
        energy_by_hour[record.hour].append(record.energy)
        members_by_slot[(record.calendar_date, record.hour)].add(record.member_id)

    peak_emotion_times = [
        hour_label(hour)
        for hour in sorted(intensity_by_hour)
        if _mean(intensity_by_hour[hour]) > analysis.peak_intensity_threshold
    ]
    low_energy_periods = [
        hour_label(hour)
        for hour in sorted(energy_by_hour)
        if _mean(energy_by_hour[hour]) < analysis.low_energy_threshold
    ]
    group_sync_moments = [
        slot_label(day, hour)
        for (day, hour), members in sorted(members_by_slot.items())
        if len(members) >= analysis.min_sync_members
    ]

    return TemporalPatternSet(
        peak_emotion_times=peak_emotion_times,
        low_energy_periods=low_energy_periods,
        group_sync_moments=group_sync_moments,
    )
