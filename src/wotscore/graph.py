"""
wotscore.graph — Multi-hop trust propagation over the attestation graph.

An attestation issued *by* X only counts as much as X is trusted. At depth 0
every issuer counts fully; at depth d > 0 each issuer is scored recursively at
depth d - 1 and its display score (as a fraction of 100) scales its
attestations. Self-attestations and cycles propagate zero trust.

Scoring runs in two phases:

    1. expand  — fetch attestations level by level (async, concurrent per
                 level, duplicate fetches coalesced in the TrustGraph)
    2. resolve — synchronous depth-first scoring over the fetched graph,
                 with a VisitSet for cycle detection and memoization

Fetching is the only suspension point, so the VisitSet needs no lock.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from typing import Any, Callable, Iterable, MutableMapping, Optional, Union

from .aggregate import aggregate
from .attestation import Attestation, parse_events
from .config import DEFAULT_NAMESPACE, ScoringConfig
from .normalize import normalize, trust_fraction
from .result import ScoreResult
from .store import AttestationStore

logger = logging.getLogger(__name__)


def _check_depth(depth: Any) -> int:
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise ValueError(f"depth must be a non-negative integer, got {depth!r}")
    if depth < 0:
        raise ValueError(f"depth must be a non-negative integer, got {depth}")
    return depth


# ─── Trust graph view ─────────────────────────────────────────────

class TrustGraph:
    """Fetch cache for one scoring call tree: identity -> attestations about it.

    ``known`` may be a caller-owned dict; it is used as the backing map and
    populated in place as identities are fetched. Entries are never removed.
    """

    def __init__(self, store: Optional[AttestationStore] = None,
                 known: Optional[MutableMapping[str, Any]] = None,
                 timeout: Optional[float] = None,
                 namespace: str = DEFAULT_NAMESPACE):
        self.store = store
        self.timeout = timeout
        self.namespace = namespace
        self._attestations: MutableMapping[str, tuple[Attestation, ...]] = \
            known if known is not None else {}
        self._failed: set[str] = set()
        self._inflight: dict[str, asyncio.Task] = {}
        self.fetch_count = 0
        for identity in list(self._attestations):
            self._attestations[identity] = tuple(
                parse_events(self._attestations[identity] or (), subject=identity,
                             namespace=namespace))

    def __contains__(self, identity: str) -> bool:
        return identity in self._attestations

    def __len__(self) -> int:
        return len(self._attestations)

    @property
    def identities(self) -> list[str]:
        return sorted(self._attestations)

    @property
    def failures(self) -> frozenset[str]:
        """Identities whose fetch failed."""
        return frozenset(self._failed)

    def failed(self, identity: str) -> bool:
        return identity in self._failed

    def get(self, identity: str) -> Optional[tuple[Attestation, ...]]:
        """Known attestations about ``identity``, or None if never fetched or failed."""
        return self._attestations.get(identity)

    def seed(self, identity: str, attestations: Iterable[Any]) -> None:
        """Merge attestations (or raw events) about ``identity`` without fetching."""
        existing = self._attestations.get(identity, ())
        seen = {a.id for a in existing}
        merged = list(existing)
        for att in parse_events(attestations, subject=identity, namespace=self.namespace):
            if att.id not in seen:
                seen.add(att.id)
                merged.append(att)
        self._attestations[identity] = tuple(merged)
        self._failed.discard(identity)

    async def fetch(self, identity: str) -> Optional[tuple[Attestation, ...]]:
        """
        Attestations about ``identity``, fetching from the store on first use.

        Concurrent calls for the same identity share one in-flight fetch.
        Returns None if the fetch failed; never raises for transport errors.
        """
        if identity in self._attestations:
            return self._attestations[identity]
        if identity in self._failed:
            return None
        if self.store is None:
            self._attestations[identity] = ()
            return ()
        task = self._inflight.get(identity)
        if task is None:
            task = asyncio.ensure_future(self._load(identity))
            self._inflight[identity] = task
        return await task

    async def _load(self, identity: str) -> Optional[tuple[Attestation, ...]]:
        self.fetch_count += 1
        try:
            if self.timeout is not None:
                raw = await asyncio.wait_for(
                    self.store.fetch_attestations(identity), self.timeout)
            else:
                raw = await self.store.fetch_attestations(identity)
        except Exception as e:
            logger.warning("Attestation fetch failed for %s: %r", identity[:16], e)
            self._failed.add(identity)
            return None
        finally:
            self._inflight.pop(identity, None)

        attestations = tuple(parse_events(raw or (), subject=identity,
                                          namespace=self.namespace))
        self._attestations[identity] = attestations
        logger.debug("Fetched %d attestation(s) for %s", len(attestations), identity[:16])
        return attestations


# ─── Visitation state ─────────────────────────────────────────────

class VisitSet:
    """
    Per-call-tree state: identities being resolved and memoized issuer trust.

    Memo entries are keyed by ``(identity, remaining depth)`` and remember
    every identity the resolution looked at. A value computed while some of
    those identities were mid-resolution (and so scored 0 as a cycle) is only
    reused when exactly the same ones are active again, so a cycle-shortened
    value never leaks onto a path where that cycle is not open.
    """

    def __init__(self):
        self._active: set[str] = set()
        self._resolved: dict[tuple[str, int], tuple[float, frozenset[str], frozenset[str]]] = {}

    def is_active(self, identity: str) -> bool:
        return identity in self._active

    def enter(self, identity: str) -> None:
        if identity in self._active:
            raise ValueError(f"{identity!r} is already being resolved")
        self._active.add(identity)

    def leave(self, identity: str) -> None:
        self._active.discard(identity)

    def resolved(self, identity: str, depth: int) -> Optional[tuple[float, frozenset[str]]]:
        """Memoized (trust, touched identities), or None if unusable from here."""
        entry = self._resolved.get((identity, depth))
        if entry is None:
            return None
        trust, touched, cut = entry
        if touched & self._active != cut:
            return None
        return trust, touched

    def record(self, identity: str, depth: int, trust: float,
               touched: frozenset[str]) -> None:
        self._resolved[(identity, depth)] = (trust, touched, touched & self._active)

    @property
    def resolution_count(self) -> int:
        return len(self._resolved)


# ─── Walker ───────────────────────────────────────────────────────

class TrustWalker:
    """
    Score identities from an attestation store, propagating issuer trust.

    Each top-level call owns its VisitSet and, unless the caller passes one,
    its TrustGraph. Sharing a TrustGraph between calls reuses fetched data.
    """

    def __init__(self, store: Optional[AttestationStore] = None,
                 config: Optional[ScoringConfig] = None,
                 clock: Callable[[], float] = time.time):
        self.store = store
        self.config = config or ScoringConfig()
        self.clock = clock

    def new_graph(self, known: Optional[MutableMapping[str, Any]] = None) -> TrustGraph:
        return TrustGraph(self.store, known=known, timeout=self.config.fetch_timeout,
                          namespace=self.config.namespace)

    def _as_graph(self, graph: Union[TrustGraph, MutableMapping, None]) -> TrustGraph:
        if isinstance(graph, TrustGraph):
            return graph
        return self.new_graph(known=graph)

    async def score_identity(self, identity: str, depth: int = 0,
                             graph: Union[TrustGraph, MutableMapping, None] = None) -> ScoreResult:
        """Score ``identity`` using attestations from the store.

        Raises ValueError for a negative or non-integer depth; every other
        problem (missing data, failed fetches) degrades the score instead.
        """
        _check_depth(depth)
        graph = self._as_graph(graph)
        now = self.clock()
        await self._expand(graph, identity, depth)
        return self._score_root(graph, identity, depth, now)

    async def score_attestations(self, identity: str, attestations: Iterable[Any],
                                 depth: int = 0,
                                 graph: Union[TrustGraph, MutableMapping, None] = None) -> ScoreResult:
        """Score ``identity`` from an already-fetched direct attestation set.

        Issuers are still resolved through the graph and store when depth > 0.
        """
        _check_depth(depth)
        graph = self._as_graph(graph)
        graph.seed(identity, attestations)
        now = self.clock()
        await self._expand(graph, identity, depth)
        return self._score_root(graph, identity, depth, now)

    async def _expand(self, graph: TrustGraph, identity: str, depth: int) -> None:
        """Fetch every identity within ``depth`` issuer hops, one level at a time."""
        frontier = {identity}
        expanded: set[str] = set()
        for hop in range(depth + 1):
            level = sorted(frontier - expanded)
            if not level:
                break
            expanded.update(level)
            results = await asyncio.gather(*(graph.fetch(x) for x in level))
            if hop == depth:
                break
            frontier = {att.issuer_key for atts in results if atts for att in atts}
        logger.debug("Expanded %d identities for %s (depth=%d, failures=%d)",
                     len(expanded), identity[:16], depth, len(graph.failures))

    def _score_root(self, graph: TrustGraph, identity: str, depth: int,
                    now: float) -> ScoreResult:
        visit = VisitSet()
        visit.enter(identity)
        try:
            result, _ = self._resolve(graph, identity, depth, visit, now)
        finally:
            visit.leave(identity)
        return result

    def _resolve(self, graph: TrustGraph, identity: str, depth: int,
                 visit: VisitSet, now: float) -> tuple[ScoreResult, frozenset[str]]:
        """Score ``identity`` at ``depth``; also returns every issuer examined below it."""
        attestations = graph.get(identity) or ()
        touched: set[str] = set()

        trust_of = None
        if depth > 0:
            issuer_trust = {}
            for issuer in sorted({a.issuer_key for a in attestations} - {identity}):
                issuer_trust[issuer], seen = self._issuer_trust(
                    graph, issuer, depth - 1, visit, now)
                touched |= seen

            def trust_of(issuer: str) -> float:
                return issuer_trust.get(issuer, 0.0)

        agg = aggregate(attestations, identity, now, self.config, trust_of)
        display = normalize(agg.raw, self.config.normalization_k)
        logger.debug("Scored %s at depth %d: raw=%.3f display=%d",
                     identity[:16], depth, agg.raw, display)
        result = ScoreResult(
            identity=identity,
            raw=agg.raw,
            display=display,
            attestation_count=agg.attestation_count,
            diversity=agg.diversity,
            type_breakdown=agg.type_breakdown,
            depth=depth,
        )
        return result, frozenset(touched)

    def _issuer_trust(self, graph: TrustGraph, issuer: str, depth: int,
                      visit: VisitSet, now: float) -> tuple[float, frozenset[str]]:
        """Propagated trust multiplier in [0, 1] for ``issuer`` scored at ``depth``."""
        if visit.is_active(issuer):
            return 0.0, frozenset((issuer,))
        cached = visit.resolved(issuer, depth)
        if cached is not None:
            return cached

        if graph.failed(issuer):
            trust, touched = 0.0, frozenset()
        else:
            visit.enter(issuer)
            try:
                result, touched = self._resolve(graph, issuer, depth, visit, now)
            finally:
                visit.leave(issuer)
            trust = trust_fraction(result.display)
        touched = touched | {issuer}
        visit.record(issuer, depth, trust, touched)
        return trust, touched


# ─── Convenience ──────────────────────────────────────────────────

async def calculate_trust_score(attestations: Iterable[Any],
                                graph: Union[TrustGraph, MutableMapping, None] = None,
                                max_depth: int = 0,
                                store: Optional[AttestationStore] = None,
                                config: Optional[ScoringConfig] = None,
                                now: Optional[float] = None,
                                identity: Optional[str] = None) -> ScoreResult:
    """
    Score a fetched list of attestations (or raw events) about one subject.

    The subject is taken from the attestations unless ``identity`` is given.
    If the list names several subjects, the one attested most often is scored
    (ties go to the lowest key) and the rest are ignored. An empty list scores
    zero. Raises ValueError only for an invalid ``max_depth``.
    """
    _check_depth(max_depth)
    config = config or ScoringConfig()
    parsed = parse_events(attestations, namespace=config.namespace)
    if identity is None:
        counts = Counter(a.subject_key for a in parsed)
        if len(counts) > 1:
            logger.warning("Attestations name %d subjects; scoring the most attested",
                           len(counts))
        identity = min(counts, key=lambda s: (-counts[s], s)) if counts else ""

    clock = (lambda: now) if now is not None else time.time
    walker = TrustWalker(store, config=config, clock=clock)
    return await walker.score_attestations(identity, parsed, depth=max_depth, graph=graph)
