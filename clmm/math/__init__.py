"""Mathematical primitives for concentrated-liquidity AMMs.

This package provides integer fixed-point math matching UniswapV3's
on-chain libraries:
- full_math: full-precision mul_div with uint256 bound checks
- tick_math: tick <-> Q64.96 sqrt price conversion
- sqrt_price_math: amount deltas and next-price functions
- swap_math: exact-input swap step at constant liquidity
"""

from clmm.math.full_math import div_rounding_up, mul_div, mul_div_rounding_up
from clmm.math.sqrt_price_math import (
    get_amount0_delta,
    get_amount1_delta,
    get_next_sqrt_price_from_input,
)
from clmm.math.swap_math import SwapStep, amount_in_to_reach, compute_swap_step
from clmm.math.tick_math import (
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
    clamp_tick,
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    is_valid_tick,
)

__all__ = [
    "mul_div",
    "mul_div_rounding_up",
    "div_rounding_up",
    "get_amount0_delta",
    "get_amount1_delta",
    "get_next_sqrt_price_from_input",
    "SwapStep",
    "amount_in_to_reach",
    "compute_swap_step",
    "MIN_TICK",
    "MAX_TICK",
    "MIN_SQRT_RATIO",
    "MAX_SQRT_RATIO",
    "clamp_tick",
    "get_sqrt_ratio_at_tick",
    "get_tick_at_sqrt_ratio",
    "is_valid_tick",
]
