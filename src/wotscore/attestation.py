"""
wotscore.attestation — Attestation record and the ingestion boundary.

Attestations travel as NIP-32 label events (kind 1985):

    {
      "id": "<sha256 hex>", "pubkey": "<issuer>", "created_at": 1700000000,
      "kind": 1985, "content": "Good service", "sig": "<hex>",
      "tags": [["L", "ai.wot"], ["l", "service-quality", "ai.wot"], ["p", "<subject>"]]
    }

Flat records produced by ``Attestation.to_dict`` are accepted too. Every
fallback between field spellings is resolved here, once, so scoring code
only ever sees a complete ``Attestation``.
"""

from __future__ import annotations

import hashlib
import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from .config import DEFAULT_NAMESPACE

logger = logging.getLogger(__name__)

ATTESTATION_KIND = 1985
UNKNOWN_TYPE = "unknown"

# Field spellings, in resolution order.
_ISSUER_FIELDS = ("pubkey", "issuer_key")
_SUBJECT_FIELDS = ("subject_key",)
_TYPE_FIELDS = ("attestation_type",)
_SIGNATURE_FIELDS = ("sig", "signature")


class MalformedAttestationError(ValueError):
    """Raised when a raw event cannot be turned into an Attestation."""


def event_id(pubkey: str, created_at: int, kind: int, tags: list, content: str) -> str:
    """NIP-01 event id: sha256 of the canonical JSON serialization."""
    payload = json.dumps([0, pubkey, created_at, kind, tags, content],
                         separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(payload.encode()).hexdigest()


def build_tags(subject_key: str, attestation_type: str,
               namespace: str = DEFAULT_NAMESPACE) -> list[list[str]]:
    return [
        ["L", namespace],
        ["l", attestation_type, namespace],
        ["p", subject_key],
    ]


@dataclass(frozen=True)
class Attestation:
    """A claim by ``issuer_key`` about ``subject_key``. Signature is opaque."""

    id: str
    issuer_key: str
    subject_key: str
    created_at: int
    attestation_type: str = UNKNOWN_TYPE
    content: str = ""
    signature: Optional[str] = None

    def age(self, now: float) -> float:
        """Seconds since creation; never negative."""
        return max(0.0, now - self.created_at)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "issuer_key": self.issuer_key,
            "subject_key": self.subject_key,
            "created_at": self.created_at,
            "attestation_type": self.attestation_type,
            "content": self.content,
            "signature": self.signature,
        }

    def to_event(self, namespace: str = DEFAULT_NAMESPACE) -> dict:
        """Serialize back to a kind-1985 label event."""
        return {
            "id": self.id,
            "pubkey": self.issuer_key,
            "created_at": self.created_at,
            "kind": ATTESTATION_KIND,
            "tags": build_tags(self.subject_key, self.attestation_type, namespace),
            "content": self.content,
            "sig": self.signature,
        }

    def __repr__(self):
        return (f"Attestation({self.issuer_key[:8]} → {self.subject_key[:8]}: "
                f"{self.attestation_type} @ {self.created_at})")


# ─── Field resolution ─────────────────────────────────────────────

def _first_field(event: Mapping[str, Any], names: tuple[str, ...]) -> Optional[Any]:
    for name in names:
        value = event.get(name)
        if value not in (None, ""):
            return value
    return None


def _tags(event: Mapping[str, Any]) -> list:
    tags = event.get("tags") or []
    if not isinstance(tags, list):
        raise MalformedAttestationError(f"tags must be a list, got {type(tags).__name__}")
    return [t for t in tags if isinstance(t, (list, tuple)) and t]


def _resolve_subject(event: Mapping[str, Any], tags: list) -> str:
    for tag in tags:
        if tag[0] == "p" and len(tag) > 1 and isinstance(tag[1], str) and tag[1]:
            return tag[1]
    subject = _first_field(event, _SUBJECT_FIELDS)
    if not isinstance(subject, str) or not subject:
        raise MalformedAttestationError("no subject relation (missing 'p' tag)")
    return subject


def _resolve_type(event: Mapping[str, Any], tags: list, namespace: str) -> str:
    for tag in tags:
        if tag[0] == "l" and len(tag) > 2 and tag[2] == namespace and tag[1]:
            return str(tag[1])
    label = _first_field(event, _TYPE_FIELDS)
    return str(label) if label is not None else UNKNOWN_TYPE


def _resolve_issuer(event: Mapping[str, Any]) -> str:
    issuer = _first_field(event, _ISSUER_FIELDS)
    if not isinstance(issuer, str) or not issuer:
        raise MalformedAttestationError("no issuer (missing 'pubkey')")
    return issuer


def _resolve_created_at(event: Mapping[str, Any]) -> int:
    value = event.get("created_at")
    if isinstance(value, bool) or value is None:
        raise MalformedAttestationError(f"unusable created_at: {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise MalformedAttestationError(f"unusable created_at: {value!r}")
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            pass
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise MalformedAttestationError(f"unparsable created_at: {value!r}") from e
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return int(dt.timestamp())
    raise MalformedAttestationError(f"unusable created_at: {value!r}")


# ─── Ingestion ────────────────────────────────────────────────────

def parse_event(event: Mapping[str, Any], namespace: str = DEFAULT_NAMESPACE) -> Attestation:
    """Resolve a raw event (or flat record) into an Attestation.

    Raises MalformedAttestationError if the issuer, subject or timestamp
    cannot be resolved, or the event is not an attestation kind.
    """
    if not isinstance(event, Mapping):
        raise MalformedAttestationError(f"expected a mapping, got {type(event).__name__}")
    kind = event.get("kind")
    if kind is not None and kind != ATTESTATION_KIND:
        raise MalformedAttestationError(f"kind {kind!r} is not an attestation")

    tags = _tags(event)
    issuer = _resolve_issuer(event)
    subject = _resolve_subject(event, tags)
    created_at = _resolve_created_at(event)
    attestation_type = _resolve_type(event, tags, namespace)
    content = event.get("content") or ""
    if not isinstance(content, str):
        content = str(content)

    att_id = event.get("id")
    if not isinstance(att_id, str) or not att_id:
        att_id = event_id(issuer, created_at, ATTESTATION_KIND,
                          build_tags(subject, attestation_type, namespace), content)

    return Attestation(
        id=att_id,
        issuer_key=issuer,
        subject_key=subject,
        created_at=created_at,
        attestation_type=attestation_type,
        content=content,
        signature=_first_field(event, _SIGNATURE_FIELDS),
    )


def parse_events(events: Iterable[Any], subject: Optional[str] = None,
                 namespace: str = DEFAULT_NAMESPACE) -> list[Attestation]:
    """Parse many events, dropping malformed ones and (optionally) other subjects."""
    attestations = []
    for event in events:
        if isinstance(event, Attestation):
            att = event
        else:
            try:
                att = parse_event(event, namespace=namespace)
            except MalformedAttestationError as e:
                logger.debug("Dropping malformed attestation: %s", e)
                continue
        if subject is not None and att.subject_key != subject:
            continue
        attestations.append(att)
    return attestations
