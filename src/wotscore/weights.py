"""
wotscore.weights — Decay & weight model for attestations.

Two pure functions decide how much a single attestation is worth before any
issuer trust is applied:

    weight_of(type)   — fixed table, explicit default for unknown labels
    decay_of(age)     — exponential half-life decay, 1.0 for fresh claims
"""

from __future__ import annotations

import math
import sys
from typing import Mapping, Optional

# Specific claims outweigh generic ones.
TYPE_WEIGHTS: dict[str, float] = {
    "service-quality": 1.5,
    "identity-continuity": 1.0,
    "general-trust": 0.8,
}

# Unknown labels come from untrusted sources; they get the lowest weight.
DEFAULT_TYPE_WEIGHT = 0.5

HALF_LIFE_DAYS = 90.0
SECONDS_PER_DAY = 86400


def weight_of(attestation_type: str,
              weights: Optional[Mapping[str, float]] = None,
              default: Optional[float] = None) -> float:
    """Weight multiplier for an attestation type label."""
    table = TYPE_WEIGHTS if weights is None else weights
    fallback = DEFAULT_TYPE_WEIGHT if default is None else default
    return table.get(attestation_type, fallback)


def decay_of(age_seconds: float, half_life_days: float = HALF_LIFE_DAYS) -> float:
    """
    Temporal decay multiplier in (0, 1].

    2 ** (-age / half_life): exactly 0.5 at one half-life. Negative ages
    (clock skew) and NaN count as fresh. Very old claims bottom out at the
    smallest positive float instead of underflowing to zero.
    """
    if math.isnan(age_seconds) or age_seconds <= 0:
        return 1.0
    half_life = half_life_days * SECONDS_PER_DAY
    return max(2.0 ** (-age_seconds / half_life), sys.float_info.min)
