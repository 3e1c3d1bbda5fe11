"""Interaction pattern classification for member pairs."""

from typing import Optional

from ..config import ClassifierConfig
from ..models import InteractionPattern


def classify_interaction(
    emotional_sync: float,
    stress_correlation: float,
    energy_alignment: float,
    thresholds: Optional[ClassifierConfig] = None,
) -> InteractionPattern:
    """
    Map a pair's metrics to an interaction pattern.

    Rules are checked in priority order and the first match wins, since the
    regions overlap:

    1. mirroring: emotional state and energy move together
    2. supportive: one member's stress falls as the other's rises while
       their emotional tone still tracks
    3. conflicting: stress rises together while emotional tone diverges
    4. independent: everything else
    """
    t = thresholds or ClassifierConfig()

    if emotional_sync > t.mirroring_sync and energy_alignment > t.mirroring_energy:
        return InteractionPattern.MIRRORING
    if stress_correlation < t.supportive_stress and emotional_sync > t.supportive_sync:
        return InteractionPattern.SUPPORTIVE
    if stress_correlation > t.conflicting_stress and emotional_sync < t.conflicting_sync:
        return InteractionPattern.CONFLICTING
    return InteractionPattern.INDEPENDENT
