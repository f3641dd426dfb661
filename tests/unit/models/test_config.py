"""Tests for owner-configured parameters."""

import pytest
from pydantic import ValidationError

from clmm.config import RELATIVE_THRESHOLD_DENOMINATOR, OracleConfig, SolverConfig


class TestOracleConfig:
    def test_defaults(self):
        config = OracleConfig()
        assert config.twap_window == 60
        assert config.band_half_width == 50

    @pytest.mark.parametrize("field,value", [("twap_window", 0), ("band_half_width", 0)])
    def test_rejects_non_positive(self, field, value):
        with pytest.raises(ValidationError):
            OracleConfig(**{field: value})

    def test_assignment_is_validated(self):
        config = OracleConfig()
        config.twap_window = 1800
        assert config.twap_window == 1800

        with pytest.raises(ValidationError):
            config.twap_window = -1
        assert config.twap_window == 1800

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CLMM_TWAP_WINDOW", "300")
        monkeypatch.delenv("CLMM_BAND_HALF_WIDTH", raising=False)

        config = OracleConfig.from_env()
        assert config.twap_window == 300
        assert config.band_half_width == 50

    def test_from_env_invalid(self, monkeypatch):
        monkeypatch.setenv("CLMM_BAND_HALF_WIDTH", "-5")
        with pytest.raises(ValidationError):
            OracleConfig.from_env()


class TestSolverConfig:
    def test_defaults(self):
        config = SolverConfig()
        assert config.max_iterations == 16
        assert config.relative_stop_threshold == 1
        assert config.absolute_stop_floor is None

    def test_relative_threshold_units(self):
        """1 unit is 0.001% of portfolio value."""
        assert RELATIVE_THRESHOLD_DENOMINATOR == 100_000

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_iterations": 0},
            {"max_iterations": 257},
            {"relative_stop_threshold": -1},
            {"relative_stop_threshold": RELATIVE_THRESHOLD_DENOMINATOR + 1},
            {"absolute_stop_floor": -1},
        ],
    )
    def test_rejects_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            SolverConfig(**kwargs)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CLMM_MAX_ITERATIONS", "8")
        monkeypatch.setenv("CLMM_ABSOLUTE_STOP_FLOOR", "1000000")
        monkeypatch.delenv("CLMM_RELATIVE_STOP_THRESHOLD", raising=False)

        config = SolverConfig.from_env()
        assert config.max_iterations == 8
        assert config.absolute_stop_floor == 1_000_000
        assert config.relative_stop_threshold == 1
