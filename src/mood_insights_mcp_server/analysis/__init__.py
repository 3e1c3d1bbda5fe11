"""
Group cross-analysis engine.

Derives pairwise relationships, interaction patterns, group dynamics and
temporal patterns from a week of per-member mood records.
"""

from .classifier import classify_interaction
from .correlation import PairScores, pearson_correlation, score_pair
from .dynamics import analyze_group_dynamics
from .engine import CrossAnalysisEngine, perform_cross_analysis
from .normalizer import MemberSeriesMap, NormalizedRecords, normalize_records, normalize_window
from .temporal import analyze_temporal_patterns

__all__ = [
    "CrossAnalysisEngine",
    "MemberSeriesMap",
    "NormalizedRecords",
    "PairScores",
    "analyze_group_dynamics",
    "analyze_temporal_patterns",
    "classify_interaction",
    "normalize_records",
    "normalize_window",
    "pearson_correlation",
    "perform_cross_analysis",
    "score_pair",
]
