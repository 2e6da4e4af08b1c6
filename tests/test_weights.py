"""Tests for wotscore.weights — type weights and temporal decay."""

import math

import pytest

from wotscore.weights import (
    DEFAULT_TYPE_WEIGHT, HALF_LIFE_DAYS, SECONDS_PER_DAY, TYPE_WEIGHTS,
    decay_of, weight_of,
)

HALF_LIFE = HALF_LIFE_DAYS * SECONDS_PER_DAY


class TestWeightOf:
    def test_service_quality_outweighs_general_trust(self):
        assert weight_of("service-quality") == pytest.approx(1.5)
        assert weight_of("general-trust") == pytest.approx(0.8)
        assert weight_of("service-quality") > weight_of("general-trust")

    def test_unknown_label_gets_default(self):
        assert weight_of("made-up-label") == DEFAULT_TYPE_WEIGHT

    def test_default_is_lowest_weight(self):
        assert DEFAULT_TYPE_WEIGHT <= min(TYPE_WEIGHTS.values())

    def test_custom_table_and_default(self):
        table = {"code-review": 2.0}
        assert weight_of("code-review", table) == 2.0
        assert weight_of("service-quality", table, default=0.1) == 0.1

    def test_all_weights_positive(self):
        assert all(w > 0 for w in TYPE_WEIGHTS.values())


class TestDecayOf:
    def test_fresh_is_full_weight(self):
        assert decay_of(0) == 1.0

    def test_half_life_is_half(self):
        assert decay_of(HALF_LIFE) == pytest.approx(0.5)

    def test_two_half_lives(self):
        assert decay_of(2 * HALF_LIFE) == pytest.approx(0.25)

    def test_past_boundary_strictly_less(self):
        assert decay_of(HALF_LIFE + SECONDS_PER_DAY) < decay_of(HALF_LIFE) < decay_of(0)

    def test_monotone_non_increasing(self):
        ages = [0, 1, 3600, SECONDS_PER_DAY, 30 * SECONDS_PER_DAY, HALF_LIFE, 10 * HALF_LIFE]
        values = [decay_of(a) for a in ages]
        assert values == sorted(values, reverse=True)

    def test_negative_age_treated_as_fresh(self):
        assert decay_of(-5000) == 1.0

    def test_nan_age_treated_as_fresh(self):
        assert decay_of(math.nan) == 1.0

    def test_infinite_age_stays_positive(self):
        assert 0.0 < decay_of(math.inf) < decay_of(10 * HALF_LIFE)

    def test_ancient_age_does_not_underflow(self):
        assert decay_of(1000 * 365 * SECONDS_PER_DAY) > 0.0

    def test_custom_half_life(self):
        assert decay_of(7 * SECONDS_PER_DAY, half_life_days=7) == pytest.approx(0.5)
