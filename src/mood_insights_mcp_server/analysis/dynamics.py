"""
Group-level aggregation of pairwise metrics and member series.

Reduces every pair's metrics and each member's own series into the scalars
and membership sets of a ``GroupDynamicsSummary``.
"""

import logging
from typing import List, Mapping, Optional, Sequence

import networkx as nx
import numpy as np

from ..config import AnalysisConfig
from ..models import GroupDynamicsSummary, InteractionPattern, MoodRecord, PairMetric

logger = logging.getLogger(__name__)


def overall_harmony(pairs: Sequence[PairMetric]) -> float:
    """Mean of the group's average emotional sync and average energy alignment."""
    avg_sync = float(np.mean([pair.emotional_sync for pair in pairs]))
    avg_energy = float(np.mean([pair.energy_alignment for pair in pairs]))
    return min(1.0, max(0.0, (avg_sync + avg_energy) / 2))


def emotional_stability(
    member_series: Mapping[str, Sequence[MoodRecord]], stability_divisor: float
) -> float:
    """
    Inverse of the average day-to-day intensity variance across members.

    Only members with at least two records have a variance. A group where
    nobody has two records yet reports full stability.
    """
    if stability_divisor <= 0:
        raise ValueError(f"stability_divisor must be positive, got {stability_divisor}")

    variances = [
        float(np.var([record.mood.intensity for record in series]))
        for _, series in sorted(member_series.items())
        if len(series) >= 2
    ]
    avg_variance = float(np.mean(variances)) if variances else 0.0
    return min(1.0, max(0.0, 1.0 - avg_variance / stability_divisor))


def support_network(pairs: Sequence[PairMetric]) -> List[str]:
    """Members taking part in at least one supportive pair."""
    graph = nx.Graph()
    graph.add_edges_from(
        pair.members
        for pair in pairs
        if pair.interaction_pattern == InteractionPattern.SUPPORTIVE
    )
    return sorted(graph.nodes)


def stress_points(
    member_series: Mapping[str, Sequence[MoodRecord]], threshold: float
) -> List[str]:
    """Members whose mean stress over the window is above the threshold."""
    return [
        member_id
        for member_id, series in sorted(member_series.items())
        if series and float(np.mean([record.stress for record in series])) > threshold
    ]


def analyze_group_dynamics(
    member_series: Mapping[str, Sequence[MoodRecord]],
    pairs: Sequence[PairMetric],
    analysis: Optional[AnalysisConfig] = None,
) -> GroupDynamicsSummary:
    """
    Aggregate pairwise metrics and member series into group dynamics.

    Args:
        member_series: Normalized series per member
        pairs: Every pair with at least one matched day
        analysis: Analysis parameters (defaults if omitted)

    Returns:
        GroupDynamicsSummary

    Raises:
        ValueError: If there are no pairs; harmony is undefined without them
    """
    if not pairs:
        raise ValueError("Group dynamics require at least one member pair")
    analysis = analysis or AnalysisConfig()

    summary = GroupDynamicsSummary(
        overall_harmony=overall_harmony(pairs),
        emotional_stability=emotional_stability(member_series, analysis.stability_divisor),
        support_network=support_network(pairs),
        stress_points=stress_points(member_series, analysis.stress_point_threshold),
    )
    logger.debug(
        f"Group dynamics: harmony={summary.overall_harmony:.3f} "
        f"stability={summary.emotional_stability:.3f} "
        f"support={len(summary.support_network)} stress={len(summary.stress_points)}"
    )
    return summary
