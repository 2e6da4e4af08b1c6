"""Tests for wotscore.aggregate — folding attestations into a raw score."""

import pytest

from wotscore.aggregate import aggregate, contribution
from wotscore.attestation import parse_event, parse_events
from wotscore.config import ScoringConfig
from conftest import ALICE, BOB, CAROL, DAVE, NOW, TARGET, make_event


def _atts(*events):
    return parse_events(events)


class TestAggregate:
    def test_empty(self):
        agg = aggregate([], TARGET, NOW)
        assert agg.raw == 0.0
        assert agg.attestation_count == 0
        assert agg.diversity == 0
        assert agg.type_breakdown == {}

    def test_single_service_quality(self):
        agg = aggregate(_atts(make_event(ALICE, TARGET, "service-quality")), TARGET, NOW)
        assert agg.raw == pytest.approx(1.5)
        assert agg.attestation_count == 1
        assert agg.diversity == 1
        assert agg.type_breakdown == {"service-quality": 1}

    def test_half_life_halves_contribution(self):
        agg = aggregate(_atts(make_event(ALICE, TARGET, "service-quality", age_days=90)),
                        TARGET, NOW)
        assert agg.raw == pytest.approx(0.75)

    def test_unknown_type_uses_default_weight(self):
        agg = aggregate(_atts(make_event(ALICE, TARGET, "vibes")), TARGET, NOW)
        assert agg.raw == pytest.approx(0.5)
        assert agg.type_breakdown == {"vibes": 1}

    def test_sums_and_counts(self):
        atts = _atts(
            make_event(ALICE, TARGET, "service-quality"),
            make_event(BOB, TARGET, "general-trust"),
            make_event(BOB, TARGET, "general-trust", content="again"),
        )
        agg = aggregate(atts, TARGET, NOW)
        assert agg.raw == pytest.approx(1.5 + 0.8 + 0.8)
        assert agg.attestation_count == 3
        assert agg.diversity == 2
        assert agg.type_breakdown == {"service-quality": 1, "general-trust": 2}

    def test_duplicate_ids_counted_once(self):
        event = make_event(ALICE, TARGET, "service-quality")
        agg = aggregate(_atts(event, dict(event)), TARGET, NOW)
        assert agg.attestation_count == 1
        assert agg.raw == pytest.approx(1.5)

    def test_other_subjects_ignored(self):
        atts = _atts(make_event(ALICE, TARGET), make_event(ALICE, CAROL))
        agg = aggregate(atts, TARGET, NOW)
        assert agg.attestation_count == 1

    def test_self_attestation_adds_nothing(self):
        atts = _atts(make_event(TARGET, TARGET, "service-quality"))
        agg = aggregate(atts, TARGET, NOW)
        assert agg.raw == 0.0
        assert agg.attestation_count == 1
        assert agg.diversity == 0

    def test_issuer_trust_scales(self):
        atts = _atts(make_event(ALICE, TARGET, "service-quality"),
                     make_event(BOB, TARGET, "service-quality"))
        trust = {ALICE: 0.5, BOB: 0.0}
        agg = aggregate(atts, TARGET, NOW, trust_of=trust.get)
        assert agg.raw == pytest.approx(0.75)
        assert agg.diversity == 2

    def test_issuer_trust_clamped(self):
        atts = _atts(make_event(ALICE, TARGET, "general-trust"),
                     make_event(BOB, TARGET, "general-trust"))
        trust = {ALICE: 3.0, BOB: -1.0}
        agg = aggregate(atts, TARGET, NOW, trust_of=trust.get)
        assert agg.raw == pytest.approx(0.8)

    def test_future_timestamp_counts_as_fresh(self):
        agg = aggregate(_atts(make_event(ALICE, TARGET, "general-trust", age_days=-3)),
                        TARGET, NOW)
        assert agg.raw == pytest.approx(0.8)

    def test_adding_never_decreases(self):
        events = [
            make_event(ALICE, TARGET, "service-quality", age_days=200),
            make_event(BOB, TARGET, "general-trust"),
            make_event(CAROL, TARGET, "unknown-label", age_days=10),
            make_event(DAVE, TARGET, "identity-continuity", age_days=1000),
            make_event(TARGET, TARGET, "service-quality"),
        ]
        previous = 0.0
        for i in range(1, len(events) + 1):
            raw = aggregate(_atts(*events[:i]), TARGET, NOW).raw
            assert raw >= previous
            previous = raw

    def test_custom_config(self):
        cfg = ScoringConfig(type_weights={"code-review": 2.0}, default_weight=0.1,
                            half_life_days=1)
        atts = _atts(make_event(ALICE, TARGET, "code-review", age_days=1),
                     make_event(BOB, TARGET, "service-quality"))
        agg = aggregate(atts, TARGET, NOW, config=cfg)
        assert agg.raw == pytest.approx(2.0 * 0.5 + 0.1)


def test_contribution():
    att = parse_event(make_event(ALICE, TARGET, "service-quality", age_days=90))
    assert contribution(att, NOW, ScoringConfig(), issuer_trust=0.5) == pytest.approx(0.375)
