"""Score normalizer — unbounded raw score to a 0-100 display score."""

from __future__ import annotations

import math

from .config import DEFAULT_NORMALIZATION_K

DISPLAY_MIN = 0
DISPLAY_MAX = 100


def normalize(raw: float, k: float = DEFAULT_NORMALIZATION_K) -> int:
    """
    Map a raw score onto [0, 100].

    Saturating curve ``100 * (1 - exp(-raw / k))``. Zero maps to zero, any
    positive raw maps to at least 1, and the result never exceeds 100.
    """
    if math.isnan(raw) or raw <= 0:
        return DISPLAY_MIN
    if math.isinf(raw):
        return DISPLAY_MAX
    display = round(-math.expm1(-raw / k) * DISPLAY_MAX)
    return max(1, min(DISPLAY_MAX, display))


def trust_fraction(display: int) -> float:
    """Display score as a propagation multiplier in [0, 1]."""
    return max(0.0, min(1.0, display / DISPLAY_MAX))


def trust_level(display: int) -> str:
    if display >= 80:
        return "trusted"
    if display >= 60:
        return "established"
    if display >= 40:
        return "known"
    if display >= 20:
        return "emerging"
    return "unknown"
