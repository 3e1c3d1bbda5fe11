"""
Cross-analysis orchestration.

Runs normalization, pairwise scoring and classification, group aggregation
and temporal analysis in one synchronous pass and composes the results into
a ``CrossAnalysisResult``. This is the only stage allowed to fail a run.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from itertools import combinations
from typing import Any, Iterable, List, Optional, Tuple

from ..config import Config, get_config
from ..exceptions import InsufficientGroupDataError
from ..models import CrossAnalysisResult, PairMetric
from .classifier import classify_interaction
from .correlation import score_pair
from .dynamics import analyze_group_dynamics
from .normalizer import MemberSeriesMap, NormalizedRecords, normalize_window
from .temporal import analyze_temporal_patterns

logger = logging.getLogger(__name__)


class CrossAnalysisEngine:
    """Cross-analysis of a group's mood records for one analysis window."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()

    def analyze(
        self, records: Iterable[Any], window_start: Optional[date] = None
    ) -> CrossAnalysisResult:
        """
        Analyze raw mood records of one group.

        Args:
            records: Raw journal documents or MoodRecord instances, any order
            window_start: First day of the analysis window; records outside
                the window are ignored when given

        Returns:
            CrossAnalysisResult

        Raises:
            InsufficientGroupDataError: If fewer than two members recorded or
                no two members recorded on the same day
        """
        normalized = normalize_window(records, window_start, self.config.analysis.window_days)
        return self.analyze_normalized(normalized)

    def analyze_normalized(self, normalized: NormalizedRecords) -> CrossAnalysisResult:
        """Analyze already normalized records."""
        started = time.perf_counter()
        member_series = normalized.member_series
        analysis = self.config.analysis

        if len(member_series) < 2:
            raise InsufficientGroupDataError(
                "Not enough group activity yet to analyze: "
                "at least two members need mood records in the window",
                InsufficientGroupDataError.TOO_FEW_MEMBERS,
                {"active_members": len(member_series)},
            )

        pairs = self._score_pairs(member_series)
        if not pairs:
            raise InsufficientGroupDataError(
                "Not enough group activity yet to analyze: "
                "no two members recorded on the same day",
                InsufficientGroupDataError.NO_MATCHED_DATES,
                {"active_members": len(member_series)},
            )

        group_dynamics = analyze_group_dynamics(member_series, pairs, analysis)
        temporal_patterns = analyze_temporal_patterns(normalized.records, analysis)

        result = CrossAnalysisResult(
            correlations=pairs,
            group_dynamics=group_dynamics,
            temporal_patterns=temporal_patterns,
        )

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"Cross analysis complete: {len(member_series)} members, "
            f"{len(normalized.records)} records, "
            f"{len(pairs)} pairs in {elapsed_ms:.1f}ms"
        )
        return result

    def _score_pairs(self, member_series: MemberSeriesMap) -> List[PairMetric]:
        """Score every member pair; pairs without matched days are left out."""
        candidates = list(combinations(sorted(member_series), 2))
        performance = self.config.performance

        if len(candidates) >= performance.parallel_pair_threshold and performance.max_workers > 1:
            logger.debug(
                f"Scoring {len(candidates)} pairs on {performance.max_workers} workers"
            )
            with ThreadPoolExecutor(max_workers=performance.max_workers) as executor:
                # map() keeps candidate order, so output matches the sequential path
                scored = list(
                    executor.map(lambda pair: self._score_pair(pair, member_series), candidates)
                )
        else:
            scored = [self._score_pair(pair, member_series) for pair in candidates]

        return [metric for metric in scored if metric is not None]

    def _score_pair(
        self, pair: Tuple[str, str], member_series: MemberSeriesMap
    ) -> Optional[PairMetric]:
        member_a, member_b = pair
        scores = score_pair(
            member_a,
            member_series[member_a],
            member_b,
            member_series[member_b],
            self.config.analysis,
        )
        if scores is None:
            logger.debug(f"No matched days for {member_a} and {member_b}; pair skipped")
            return None

        pattern = classify_interaction(
            scores.emotional_sync,
            scores.stress_correlation,
            scores.energy_alignment,
            self.config.classifier,
        )
        return PairMetric(interaction_pattern=pattern, **scores._asdict())


def perform_cross_analysis(
    records: Iterable[Any],
    config: Optional[Config] = None,
    window_start: Optional[date] = None,
) -> CrossAnalysisResult:
    """Run a cross analysis with a one-off engine."""
    return CrossAnalysisEngine(config).analyze(records, window_start)
