"""
Pairwise relationship metrics between two members' mood series.

Every metric is computed over date-matched records only: a day counts for a
pair when both members recorded on that calendar date.
"""

import math
from typing import FrozenSet, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..config import AnalysisConfig
from ..models import MoodRecord

MatchedPair = Tuple[MoodRecord, MoodRecord]


class PairScores(NamedTuple):
    """Raw metrics of one pair before classification."""

    member_a: str
    member_b: str
    matched_days: int
    emotional_sync: float
    stress_correlation: float
    energy_alignment: float


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def match_records_by_date(
    series_a: Sequence[MoodRecord], series_b: Sequence[MoodRecord]
) -> List[MatchedPair]:
    """Pair each record of A with B's record from the same calendar date."""
    by_date = {}
    for record in series_b:
        by_date.setdefault(record.calendar_date, record)
    return [
        (record, by_date[record.calendar_date])
        for record in series_a
        if record.calendar_date in by_date
    ]


def secondary_overlap(labels_a: FrozenSet[str], labels_b: FrozenSet[str]) -> float:
    """Jaccard overlap of two secondary mood sets; two empty sets fully agree."""
    if not labels_a and not labels_b:
        return 1.0
    return len(labels_a & labels_b) / len(labels_a | labels_b)


def emotional_sync(matched: Sequence[MatchedPair], analysis: AnalysisConfig) -> float:
    """
    Blend primary mood agreement, intensity similarity and secondary overlap.

    Returns:
        Mean blended score over matched days in [0, 1]; 0 with no matched days
    """
    if not matched:
        return 0.0

    scores = np.array(
        [
            analysis.primary_weight * (1.0 if a.mood.primary == b.mood.primary else 0.0)
            + analysis.intensity_weight
            * (1.0 - abs(a.mood.intensity - b.mood.intensity) / analysis.scale_max)
            + analysis.secondary_weight * secondary_overlap(a.mood.secondary, b.mood.secondary)
            for a, b in matched
        ],
        dtype=float,
    )
    return _clamp(float(scores.mean()), 0.0, 1.0)


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equal-length sequences.

    Returns 0 instead of NaN when there are fewer than two points or either
    sequence is constant.
    """
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    if x_arr.size != y_arr.size or x_arr.size < 2:
        return 0.0
    if np.ptp(x_arr) == 0 or np.ptp(y_arr) == 0:
        return 0.0

    dx = x_arr - x_arr.mean()
    dy = y_arr - y_arr.mean()
    denominator = math.sqrt(float(np.dot(dx, dx)) * float(np.dot(dy, dy)))
    if denominator == 0:
        return 0.0
    return _clamp(float(np.dot(dx, dy)) / denominator, -1.0, 1.0)


def stress_correlation(matched: Sequence[MatchedPair]) -> float:
    """Pearson correlation of the pair's stress levels on matched days."""
    if len(matched) < 2:
        return 0.0
    return pearson_correlation([a.stress for a, _ in matched], [b.stress for _, b in matched])


def energy_alignment(matched: Sequence[MatchedPair], analysis: AnalysisConfig) -> float:
    """Mean per-day energy similarity in [0, 1]; 0 with no matched days."""
    if not matched:
        return 0.0

    deltas = np.array([abs(a.energy - b.energy) for a, b in matched], dtype=float)
    alignment = np.maximum(0.0, 1.0 - deltas / analysis.scale_max)
    return _clamp(float(alignment.mean()), 0.0, 1.0)


def score_pair(
    member_a: str,
    series_a: Sequence[MoodRecord],
    member_b: str,
    series_b: Sequence[MoodRecord],
    analysis: Optional[AnalysisConfig] = None,
) -> Optional[PairScores]:
    """
    Compute the relationship metrics of one pair of members.

    Members are put in canonical order first, so the result does not depend on
    which one is passed as A.

    Returns:
        PairScores, or None when the two members never recorded on the same day
    """
    if member_a == member_b:
        raise ValueError(f"Cannot pair member {member_a!r} with itself")
    if member_b < member_a:
        member_a, member_b = member_b, member_a
        series_a, series_b = series_b, series_a

    analysis = analysis or AnalysisConfig()
    matched = match_records_by_date(series_a, series_b)
    if not matched:
        return None

    return PairScores(
        member_a=member_a,
        member_b=member_b,
        matched_days=len(matched),
        emotional_sync=emotional_sync(matched, analysis),
        stress_correlation=stress_correlation(matched),
        energy_alignment=energy_alignment(matched, analysis),
    )
