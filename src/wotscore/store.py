"""Attestation store interface and an in-memory implementation."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable

from .attestation import (
    Attestation, MalformedAttestationError, parse_event,
)
from .config import DEFAULT_NAMESPACE

logger = logging.getLogger(__name__)


class AttestationStore(ABC):
    """Source of attestations about an identity.

    Implementations typically talk to relays or other network services and
    may raise on transport errors; the graph walker absorbs those failures.
    """

    @abstractmethod
    async def fetch_attestations(self, identity: str) -> list[Attestation]:
        """Return attestations whose subject is ``identity``."""
        ...


class MemoryAttestationStore(AttestationStore):
    """Attestations held in memory, indexed by subject."""

    def __init__(self, attestations: Iterable[Attestation] = (),
                 namespace: str = DEFAULT_NAMESPACE):
        self.namespace = namespace
        self._by_subject: dict[str, list[Attestation]] = {}
        self._ids: set[str] = set()
        for att in attestations:
            self.add(att)

    def add(self, attestation: Attestation) -> bool:
        """Add an attestation. Returns False if its id is already stored."""
        if attestation.id in self._ids:
            return False
        self._ids.add(attestation.id)
        self._by_subject.setdefault(attestation.subject_key, []).append(attestation)
        return True

    def add_event(self, event: dict[str, Any]) -> bool:
        """Parse and add a raw event. Raises MalformedAttestationError."""
        return self.add(parse_event(event, namespace=self.namespace))

    def add_events(self, events: Iterable[dict[str, Any]]) -> int:
        """Add many raw events, skipping malformed ones. Returns number added."""
        added = 0
        for event in events:
            try:
                if self.add_event(event):
                    added += 1
            except MalformedAttestationError as e:
                logger.debug("Skipping malformed event: %s", e)
        return added

    async def fetch_attestations(self, identity: str) -> list[Attestation]:
        return list(self._by_subject.get(identity, []))

    @property
    def attestations(self) -> list[Attestation]:
        return [a for atts in self._by_subject.values() for a in atts]

    @property
    def subjects(self) -> list[str]:
        return sorted(self._by_subject)

    def __len__(self) -> int:
        return len(self._ids)

    def save(self, filepath: str):
        """Save all attestations as a JSON list of label events."""
        data = [a.to_event(self.namespace) for a in self.attestations]
        with open(filepath, "w") as f:
            json.dump(data, f, indent=2)

    @classmethod
    def load(cls, filepath: str, namespace: str = DEFAULT_NAMESPACE) -> "MemoryAttestationStore":
        """Load a JSON list of events, skipping malformed entries."""
        store = cls(namespace=namespace)
        with open(filepath) as f:
            data = json.load(f)
        store.add_events(data)
        return store
