"""wotscore — Web-of-trust scoring from decentralized attestations."""

from wotscore.attestation import (
    Attestation, MalformedAttestationError, parse_event, parse_events,
    ATTESTATION_KIND,
)
from wotscore.aggregate import Aggregate, aggregate
from wotscore.config import ScoringConfig
from wotscore.graph import TrustGraph, TrustWalker, VisitSet, calculate_trust_score
from wotscore.identity import IssuerIdentity
from wotscore.normalize import normalize, trust_fraction, trust_level
from wotscore.result import ScoreResult
from wotscore.store import AttestationStore, MemoryAttestationStore
from wotscore.weights import (
    TYPE_WEIGHTS, DEFAULT_TYPE_WEIGHT, HALF_LIFE_DAYS, decay_of, weight_of,
)

__all__ = [
    "Attestation",
    "MalformedAttestationError",
    "parse_event",
    "parse_events",
    "ATTESTATION_KIND",
    "Aggregate",
    "aggregate",
    "ScoringConfig",
    "TrustGraph",
    "TrustWalker",
    "VisitSet",
    "calculate_trust_score",
    "IssuerIdentity",
    "normalize",
    "trust_fraction",
    "trust_level",
    "ScoreResult",
    "AttestationStore",
    "MemoryAttestationStore",
    "TYPE_WEIGHTS",
    "DEFAULT_TYPE_WEIGHT",
    "HALF_LIFE_DAYS",
    "decay_of",
    "weight_of",
]
