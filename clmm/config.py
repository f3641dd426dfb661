"""Owner-configured parameters for the valuation cache and rebalance solver.

Both models validate on assignment, so an administrator can mutate a live
instance and every reader sees the current, validated value. Invalid values
raise pydantic.ValidationError immediately.

Environment overrides (read by from_env):
- CLMM_TWAP_WINDOW: TWAP lookback in seconds (default: 60)
- CLMM_BAND_HALF_WIDTH: depth band half-width in ticks (default: 50)
- CLMM_MAX_ITERATIONS: solver iteration cap (default: 16)
- CLMM_RELATIVE_STOP_THRESHOLD: early stop, units of 0.001% of portfolio (default: 1)
- CLMM_ABSOLUTE_STOP_FLOOR: early stop floor in quote-currency raw units (default: unset)
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

from clmm.math.tick_math import MAX_TICK

# Relative threshold denominator: 1 unit == 0.001% of portfolio value
RELATIVE_THRESHOLD_DENOMINATOR = 100_000


def _env_overrides(mapping: dict[str, str]) -> dict[str, str]:
    """Collect CLMM_* environment variables that are set, keyed by field name."""
    return {field: os.environ[var] for var, field in mapping.items() if var in os.environ}


class OracleConfig(BaseModel):
    """TWAP and depth-band parameters for pool scoring and valuation."""

    model_config = ConfigDict(validate_assignment=True)

    twap_window: int = Field(default=60, gt=0, le=2**32 - 1)
    band_half_width: int = Field(default=50, ge=1, le=MAX_TICK)

    @classmethod
    def from_env(cls) -> OracleConfig:
        return cls(
            **_env_overrides(
                {
                    "CLMM_TWAP_WINDOW": "twap_window",
                    "CLMM_BAND_HALF_WIDTH": "band_half_width",
                }
            )
        )


class SolverConfig(BaseModel):
    """Iteration and early-stop parameters for the rebalance solver.

    Attributes:
        max_iterations: Hard cap on Newton iterations
        relative_stop_threshold: Stop when the step is worth less than this many
            thousandths of a percent of the portfolio
        absolute_stop_floor: Stop floor in quote-currency raw units, converted
            through the valuation cache. None skips the absolute check.
    """

    model_config = ConfigDict(validate_assignment=True)

    max_iterations: int = Field(default=16, ge=1, le=256)
    relative_stop_threshold: int = Field(default=1, ge=0, le=RELATIVE_THRESHOLD_DENOMINATOR)
    absolute_stop_floor: int | None = Field(default=None, ge=0)

    @classmethod
    def from_env(cls) -> SolverConfig:
        return cls(
            **_env_overrides(
                {
                    "CLMM_MAX_ITERATIONS": "max_iterations",
                    "CLMM_RELATIVE_STOP_THRESHOLD": "relative_stop_threshold",
                    "CLMM_ABSOLUTE_STOP_FLOOR": "absolute_stop_floor",
                }
            )
        )


__all__ = ["OracleConfig", "SolverConfig", "RELATIVE_THRESHOLD_DENOMINATOR"]
