"""Scoring configuration.

Configuration via environment (see ``ScoringConfig.from_env``):
    WOT_DEFAULT_WEIGHT   — weight for unknown attestation types (default 0.5)
    WOT_HALF_LIFE_DAYS   — attestation half-life in days (default 90)
    WOT_NORMALIZATION_K  — saturation constant of the display curve (default 5)
    WOT_FETCH_TIMEOUT    — per-identity store fetch timeout, seconds (default 10)
    WOT_NAMESPACE        — label namespace of attestation events (default ai.wot)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .weights import TYPE_WEIGHTS, DEFAULT_TYPE_WEIGHT, HALF_LIFE_DAYS

DEFAULT_NORMALIZATION_K = 5.0
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_NAMESPACE = "ai.wot"


@dataclass(frozen=True)
class ScoringConfig:
    """Tunable constants for weighting, decay and normalization.

    Parameters
    ----------
    type_weights:
        Attestation type label -> weight multiplier.
    default_weight:
        Weight for labels missing from ``type_weights``.
    half_life_days:
        Age at which an attestation counts half as much as a fresh one.
    normalization_k:
        Raw score at which the display score reaches ~63.
    fetch_timeout:
        Seconds to wait for one store fetch. ``None`` disables the timeout.
    namespace:
        Label namespace (third element of ``l`` tags) read at ingestion.
    """

    type_weights: dict[str, float] = field(default_factory=lambda: dict(TYPE_WEIGHTS))
    default_weight: float = DEFAULT_TYPE_WEIGHT
    half_life_days: float = HALF_LIFE_DAYS
    normalization_k: float = DEFAULT_NORMALIZATION_K
    fetch_timeout: float | None = DEFAULT_FETCH_TIMEOUT
    namespace: str = DEFAULT_NAMESPACE

    def __post_init__(self) -> None:
        for label, weight in self.type_weights.items():
            if weight <= 0:
                raise ValueError(f"weight for {label!r} must be positive, got {weight}")
        if self.default_weight <= 0:
            raise ValueError(f"default_weight must be positive, got {self.default_weight}")
        if self.half_life_days <= 0:
            raise ValueError(f"half_life_days must be positive, got {self.half_life_days}")
        if self.normalization_k <= 0:
            raise ValueError(f"normalization_k must be positive, got {self.normalization_k}")
        if self.fetch_timeout is not None and self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive or None, got {self.fetch_timeout}")
        if not self.namespace:
            raise ValueError("namespace must not be empty")

    @classmethod
    def from_env(cls) -> "ScoringConfig":
        """Build a config from ``WOT_*`` environment variables."""
        return cls(
            default_weight=float(os.environ.get("WOT_DEFAULT_WEIGHT", str(DEFAULT_TYPE_WEIGHT))),
            half_life_days=float(os.environ.get("WOT_HALF_LIFE_DAYS", str(HALF_LIFE_DAYS))),
            normalization_k=float(os.environ.get("WOT_NORMALIZATION_K", str(DEFAULT_NORMALIZATION_K))),
            fetch_timeout=float(os.environ.get("WOT_FETCH_TIMEOUT", str(DEFAULT_FETCH_TIMEOUT))),
            namespace=os.environ.get("WOT_NAMESPACE", DEFAULT_NAMESPACE),
        )

    def to_dict(self) -> dict:
        return {
            "type_weights": dict(self.type_weights),
            "default_weight": self.default_weight,
            "half_life_days": self.half_life_days,
            "normalization_k": self.normalization_k,
            "fetch_timeout": self.fetch_timeout,
            "namespace": self.namespace,
        }
