"""
wotscore.aggregate — Fold attestations about one identity into a raw score.

    raw = Σ weight_of(type) × decay_of(age) × trust_of(issuer)

trust_of defaults to 1.0 (direct scoring); the graph walker supplies the
propagated issuer trust for multi-hop scoring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .attestation import Attestation
from .config import ScoringConfig
from .weights import decay_of, weight_of

TrustLookup = Callable[[str], float]


@dataclass
class Aggregate:
    """Raw score plus descriptive statistics for one identity."""
    raw: float = 0.0
    attestation_count: int = 0
    diversity: int = 0
    type_breakdown: dict[str, int] = field(default_factory=dict)


def contribution(att: Attestation, now: float, config: ScoringConfig,
                 issuer_trust: float = 1.0) -> float:
    """Score contribution of a single attestation."""
    trust = max(0.0, min(1.0, issuer_trust))
    weight = weight_of(att.attestation_type, config.type_weights, config.default_weight)
    return weight * decay_of(now - att.created_at, config.half_life_days) * trust


def aggregate(attestations: Iterable[Attestation], identity: str, now: float,
              config: Optional[ScoringConfig] = None,
              trust_of: Optional[TrustLookup] = None) -> Aggregate:
    """
    Aggregate attestations about ``identity``.

    Attestations naming another subject are ignored, and an attestation id
    seen twice (the same event from two sources) is counted once. Issuers
    attesting to themselves add nothing to ``raw`` or ``diversity``. The sum
    only ever grows: adding an attestation never lowers ``raw``.
    """
    config = config or ScoringConfig()
    result = Aggregate()
    seen_ids: set[str] = set()
    issuers: set[str] = set()

    for att in attestations:
        if att.subject_key != identity or att.id in seen_ids:
            continue
        seen_ids.add(att.id)
        result.attestation_count += 1
        result.type_breakdown[att.attestation_type] = \
            result.type_breakdown.get(att.attestation_type, 0) + 1

        # Self-attestations are counted but carry no weight.
        if att.issuer_key == identity:
            continue
        issuers.add(att.issuer_key)
        issuer_trust = trust_of(att.issuer_key) if trust_of is not None else 1.0
        result.raw += contribution(att, now, config, issuer_trust)

    result.diversity = len(issuers)
    return result
