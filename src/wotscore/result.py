"""ScoreResult — the value returned by every scoring call."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .normalize import trust_level


@dataclass(frozen=True)
class ScoreResult:
    """A computed trust score for one identity.

    Parameters
    ----------
    identity:
        The scored public key.
    raw:
        Unbounded weighted, decayed sum (>= 0).
    display:
        Normalized score in [0, 100].
    attestation_count:
        Direct attestations considered.
    diversity:
        Distinct issuers among those attestations.
    type_breakdown:
        Attestation type -> count (read-only).
    depth:
        Depth bound the score was computed with.
    """

    identity: str
    raw: float
    display: int
    attestation_count: int = 0
    diversity: int = 0
    type_breakdown: Mapping[str, int] = field(default_factory=dict)
    depth: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "type_breakdown",
                           MappingProxyType(dict(self.type_breakdown)))

    @property
    def attesters(self) -> int:
        return self.diversity

    @property
    def trust_level(self) -> str:
        """Qualitative label derived from the display score."""
        return trust_level(self.display)

    def to_dict(self) -> dict[str, object]:
        """Serialise to a flat, JSON-compatible dictionary."""
        return {
            "identity": self.identity,
            "trust_score": self.display,
            "raw_score": round(self.raw, 2),
            "trust_level": self.trust_level,
            "attestation_count": self.attestation_count,
            "attesters": self.attesters,
            "diversity": self.diversity,
            "types": dict(self.type_breakdown),
            "depth": self.depth,
        }
