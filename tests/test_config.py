"""Tests for wotscore.config — ScoringConfig validation and environment loading."""

import pytest

from wotscore.config import ScoringConfig
from wotscore.weights import DEFAULT_TYPE_WEIGHT, HALF_LIFE_DAYS, TYPE_WEIGHTS


class TestScoringConfig:
    def test_defaults(self):
        cfg = ScoringConfig()
        assert cfg.type_weights == TYPE_WEIGHTS
        assert cfg.default_weight == DEFAULT_TYPE_WEIGHT
        assert cfg.half_life_days == HALF_LIFE_DAYS
        assert cfg.normalization_k == 5.0
        assert cfg.fetch_timeout == 10.0
        assert cfg.namespace == "ai.wot"

    def test_weight_table_is_a_copy(self):
        cfg = ScoringConfig()
        cfg.type_weights["service-quality"] = 99.0
        assert TYPE_WEIGHTS["service-quality"] == 1.5

    def test_frozen(self):
        cfg = ScoringConfig()
        with pytest.raises(Exception):
            cfg.half_life_days = 1.0

    @pytest.mark.parametrize("kwargs", [
        {"default_weight": 0},
        {"half_life_days": -1},
        {"normalization_k": 0},
        {"fetch_timeout": 0},
        {"namespace": ""},
        {"type_weights": {"spam": -1.0}},
    ])
    def test_rejects_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ScoringConfig(**kwargs)

    def test_no_timeout(self):
        assert ScoringConfig(fetch_timeout=None).fetch_timeout is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("WOT_HALF_LIFE_DAYS", "30")
        monkeypatch.setenv("WOT_NORMALIZATION_K", "2.5")
        monkeypatch.setenv("WOT_FETCH_TIMEOUT", "3")
        monkeypatch.setenv("WOT_DEFAULT_WEIGHT", "0.25")
        monkeypatch.setenv("WOT_NAMESPACE", "test.wot")
        cfg = ScoringConfig.from_env()
        assert cfg.half_life_days == 30.0
        assert cfg.normalization_k == 2.5
        assert cfg.fetch_timeout == 3.0
        assert cfg.default_weight == 0.25
        assert cfg.namespace == "test.wot"

    def test_from_env_defaults(self, monkeypatch):
        for var in ("WOT_HALF_LIFE_DAYS", "WOT_NORMALIZATION_K", "WOT_FETCH_TIMEOUT",
                    "WOT_DEFAULT_WEIGHT", "WOT_NAMESPACE"):
            monkeypatch.delenv(var, raising=False)
        assert ScoringConfig.from_env() == ScoringConfig()

    def test_to_dict(self):
        d = ScoringConfig().to_dict()
        assert d["half_life_days"] == HALF_LIFE_DAYS
        assert d["type_weights"]["general-trust"] == 0.8
