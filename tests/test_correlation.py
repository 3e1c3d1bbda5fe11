"""
Tests for pairwise correlation metrics.
"""

import pytest

from mood_insights_mcp_server.analysis.correlation import (
    match_records_by_date,
    pearson_correlation,
    score_pair,
    secondary_overlap,
)
from mood_insights_mcp_server.analysis.normalizer import normalize_records


class TestPearsonCorrelation:
    """Test the Pearson coefficient and its degenerate cases."""

    def test_perfect_positive(self):
        assert pearson_correlation([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert pearson_correlation([2, 4, 6, 8], [8, 6, 4, 2]) == -1.0

    def test_constant_sequence_is_zero(self):
        assert pearson_correlation([2, 2, 2, 2], [1, 5, 3, 9]) == 0.0

    def test_too_few_points_is_zero(self):
        assert pearson_correlation([3], [7]) == 0.0
        assert pearson_correlation([], []) == 0.0

    def test_length_mismatch_is_zero(self):
        assert pearson_correlation([1, 2, 3], [1, 2]) == 0.0

    def test_result_bounded(self):
        value = pearson_correlation([0.1, 0.2, 0.30000001], [0.2, 0.4, 0.6])
        assert -1.0 <= value <= 1.0


class TestSecondaryOverlap:
    """Test secondary mood set overlap."""

    def test_both_empty_agree(self):
        assert secondary_overlap(frozenset(), frozenset()) == 1.0

    def test_one_empty(self):
        assert secondary_overlap(frozenset({"joy"}), frozenset()) == 0.0

    def test_partial_overlap(self):
        overlap = secondary_overlap(frozenset({"joy", "pride"}), frozenset({"joy", "relief"}))
        assert overlap == pytest.approx(1 / 3)


class TestScorePair:
    """Test pair scoring over date-matched records."""

    def test_identical_moods_full_sync(self, make_record):
        raw = [make_record(m, day, "calm", 6, energy=5) for m in ("a", "b") for day in range(3)]
        series = normalize_records(raw)

        scores = score_pair("a", series["a"], "b", series["b"])

        assert scores.matched_days == 3
        assert scores.emotional_sync == pytest.approx(1.0)
        assert scores.energy_alignment == pytest.approx(1.0)

    def test_sync_blend(self, make_record):
        raw = [
            make_record("a", 0, "happy", 8, secondary=["joy"]),
            make_record("b", 0, "sad", 4, secondary=["joy", "grief"]),
        ]
        series = normalize_records(raw)

        scores = score_pair("a", series["a"], "b", series["b"])

        # primary 0, intensity 0.3 * (1 - 4/10), secondary 0.2 * 1/2
        assert scores.emotional_sync == pytest.approx(0.18 + 0.1)

    def test_energy_alignment(self, make_record):
        raw = [
            make_record("a", 0, energy=2),
            make_record("b", 0, energy=8),
            make_record("a", 1, energy=5),
            make_record("b", 1, energy=5),
        ]
        series = normalize_records(raw)

        scores = score_pair("a", series["a"], "b", series["b"])

        assert scores.energy_alignment == pytest.approx((0.4 + 1.0) / 2)

    def test_only_matched_dates_count(self, make_record):
        raw = [
            make_record("a", 0, stress=1),
            make_record("a", 1, stress=9),
            make_record("b", 1, stress=9),
            make_record("b", 2, stress=1),
        ]
        series = normalize_records(raw)

        matched = match_records_by_date(series["a"], series["b"])
        scores = score_pair("a", series["a"], "b", series["b"])

        assert len(matched) == 1
        assert scores.matched_days == 1

    def test_single_matched_day_has_zero_stress_correlation(self, make_record):
        raw = [make_record("a", 0, stress=2), make_record("b", 0, stress=9)]
        series = normalize_records(raw)

        scores = score_pair("a", series["a"], "b", series["b"])

        assert scores.stress_correlation == 0.0

    def test_no_matched_dates_returns_none(self, make_record):
        series = normalize_records([make_record("a", 0), make_record("b", 1)])
        assert score_pair("a", series["a"], "b", series["b"]) is None

    def test_symmetric(self, make_record):
        raw = []
        for day in range(5):
            raw.append(make_record("a", day, "happy", day + 2, energy=day, stress=10 - day))
            raw.append(make_record("b", day, "calm", 9 - day, energy=3, stress=day * 2))
        series = normalize_records(raw)

        forward = score_pair("a", series["a"], "b", series["b"])
        backward = score_pair("b", series["b"], "a", series["a"])

        assert forward == backward
        assert (forward.member_a, forward.member_b) == ("a", "b")

    def test_self_pair_rejected(self, make_record):
        series = normalize_records([make_record("a")])
        with pytest.raises(ValueError):
            score_pair("a", series["a"], "a", series["a"])
