"""Shared constants and event builders for wotscore tests."""

from wotscore.attestation import ATTESTATION_KIND, build_tags, event_id

NOW = 1_700_000_000
DAY = 86400

ALICE = "a" * 64
BOB = "b" * 64
CAROL = "c" * 64
DAVE = "d" * 64
ERIN = "e" * 64
TARGET = "f" * 64


def make_event(issuer: str, subject: str, attestation_type: str = "general-trust",
               age_days: float = 0, content: str = "", now: int = NOW) -> dict:
    """A kind-1985 attestation event, shaped like what relays return."""
    created_at = int(now - age_days * DAY)
    tags = build_tags(subject, attestation_type)
    return {
        "id": event_id(issuer, created_at, ATTESTATION_KIND, tags, content),
        "pubkey": issuer,
        "created_at": created_at,
        "kind": ATTESTATION_KIND,
        "tags": tags,
        "content": content,
        "sig": "0" * 128,
    }
