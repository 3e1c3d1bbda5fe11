"""
Tests for group dynamics aggregation.
"""

import pytest

from mood_insights_mcp_server.analysis.dynamics import (
    analyze_group_dynamics,
    emotional_stability,
    overall_harmony,
    stress_points,
    support_network,
)
from mood_insights_mcp_server.analysis.normalizer import normalize_records
from mood_insights_mcp_server.config import AnalysisConfig
from mood_insights_mcp_server.models import InteractionPattern, PairMetric


def _pair(a, b, sync=0.5, energy=0.5, pattern=InteractionPattern.INDEPENDENT):
    return PairMetric(
        member_a=a,
        member_b=b,
        matched_days=3,
        emotional_sync=sync,
        stress_correlation=0.0,
        energy_alignment=energy,
        interaction_pattern=pattern,
    )


class TestOverallHarmony:
    """Test harmony aggregation."""

    def test_mean_of_sync_and_energy(self):
        pairs = [_pair("a", "b", 0.8, 0.6), _pair("a", "c", 0.4, 0.2)]
        assert overall_harmony(pairs) == pytest.approx((0.6 + 0.4) / 2)


class TestEmotionalStability:
    """Test stability from intensity variance."""

    def test_population_variance(self, make_record):
        series = normalize_records(
            [make_record("a", 0, intensity=4), make_record("a", 1, intensity=6)]
        )
        # Variance of [4, 6] is 1
        assert emotional_stability(series, 25.0) == pytest.approx(0.96)

    def test_single_record_members_ignored(self, make_record):
        series = normalize_records(
            [
                make_record("a", 0, intensity=4),
                make_record("a", 1, intensity=6),
                make_record("b", 0, intensity=10),
            ]
        )
        assert emotional_stability(series, 25.0) == pytest.approx(0.96)

    def test_no_member_with_two_records(self, make_record):
        series = normalize_records([make_record("a", 0), make_record("b", 0)])
        assert emotional_stability(series, 25.0) == 1.0

    def test_clamped_at_zero(self, make_record):
        series = normalize_records(
            [make_record("a", 0, intensity=0), make_record("a", 1, intensity=10)]
        )
        assert emotional_stability(series, 10.0) == 0.0

    def test_divisor_must_be_positive(self):
        with pytest.raises(ValueError):
            emotional_stability({}, 0)


class TestMembership:
    """Test support network and stress points."""

    def test_support_network_from_supportive_pairs(self):
        pairs = [
            _pair("a", "b", pattern=InteractionPattern.SUPPORTIVE),
            _pair("c", "d", pattern=InteractionPattern.SUPPORTIVE),
            _pair("a", "c", pattern=InteractionPattern.MIRRORING),
            _pair("b", "e", pattern=InteractionPattern.CONFLICTING),
        ]
        assert support_network(pairs) == ["a", "b", "c", "d"]

    def test_support_network_empty(self):
        assert support_network([_pair("a", "b")]) == []

    def test_stress_points_strictly_above_threshold(self, make_record):
        series = normalize_records(
            [
                make_record("a", 0, stress=8),
                make_record("a", 1, stress=9),
                make_record("b", 0, stress=7),
                make_record("c", 0, stress=2),
            ]
        )
        assert stress_points(series, 7.0) == ["a"]


class TestAnalyzeGroupDynamics:
    """Test the aggregate summary."""

    def test_summary(self, make_record):
        series = normalize_records(
            [make_record("a", 0, stress=9), make_record("b", 0, stress=1)]
        )
        pairs = [_pair("a", "b", 1.0, 0.2, InteractionPattern.SUPPORTIVE)]

        summary = analyze_group_dynamics(series, pairs, AnalysisConfig())

        assert summary.overall_harmony == pytest.approx(0.6)
        assert summary.emotional_stability == 1.0
        assert summary.support_network == ["a", "b"]
        assert summary.stress_points == ["a"]

    def test_requires_pairs(self, make_record):
        series = normalize_records([make_record("a")])
        with pytest.raises(ValueError):
            analyze_group_dynamics(series, [])
