"""Time-weighted oracle reads (UniswapV3 OracleLibrary).

Pricing in this package is TWAP-only; valuation never reads the spot price.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from clmm.constants import Q128, Q192
from clmm.errors import OracleError, TwapTickOutOfRange
from clmm.math.full_math import mul_div
from clmm.math.tick_math import get_sqrt_ratio_at_tick, is_valid_tick
from clmm.models.types import UINT128_MAX, normalize_address, short

from .pool import PoolReader

logger = structlog.get_logger()

# window * (2^160 - 1) numerator of the harmonic-mean liquidity formula
_X160_MAX = 2**160 - 1


@dataclass(frozen=True)
class TwapObservation:
    """Time-weighted averages over a lookback window.

    Attributes:
        arithmetic_mean_tick: Floor of the tick-cumulative delta over the window
        harmonic_mean_liquidity: Average active liquidity derived from the
            seconds-per-liquidity cumulative (resists single-block manipulation)
        window: Lookback window in seconds
    """

    arithmetic_mean_tick: int
    harmonic_mean_liquidity: int
    window: int


def consult(pool: PoolReader, window: int) -> TwapObservation:
    """Read the arithmetic mean tick and harmonic mean liquidity over `window`.

    Raises:
        OracleError: If the window is not positive, the observation read fails,
            or the mean tick is outside the valid tick range
    """
    if window <= 0:
        raise OracleError(f"TWAP window must be positive, got {window}")

    tick_cumulatives, seconds_per_liquidity = pool.observe([window, 0])

    tick_delta = tick_cumulatives[1] - tick_cumulatives[0]
    # Floor division rounds negative non-exact means toward negative infinity
    mean_tick = tick_delta // window
    if not is_valid_tick(mean_tick):
        raise TwapTickOutOfRange(f"TWAP tick {mean_tick} out of range for {pool.address}")

    spl_delta = seconds_per_liquidity[1] - seconds_per_liquidity[0]
    if spl_delta <= 0:
        raise OracleError(
            f"Non-increasing seconds-per-liquidity cumulative for {pool.address}"
        )
    harmonic_mean_liquidity = min((window * _X160_MAX) // (spl_delta << 32), UINT128_MAX)

    logger.debug(
        "twap_consulted",
        pool=short(pool.address),
        window=window,
        mean_tick=mean_tick,
        mean_liquidity=harmonic_mean_liquidity,
    )
    return TwapObservation(
        arithmetic_mean_tick=mean_tick,
        harmonic_mean_liquidity=harmonic_mean_liquidity,
        window=window,
    )


def get_quote_at_tick(tick: int, base_amount: int, base_is_token0: bool) -> int:
    """Convert `base_amount` of one pool token into the other at `tick`.

    Args:
        tick: Tick whose price to use (token1 per token0 = 1.0001^tick)
        base_amount: Amount of the base token
        base_is_token0: True if the base token is the pool's token0

    Returns:
        Amount of the other token, rounded down
    """
    sqrt_ratio_x96 = get_sqrt_ratio_at_tick(tick)

    # Calculate quote with better precision if it doesn't overflow when multiplied by itself
    if sqrt_ratio_x96 <= UINT128_MAX:
        ratio_x192 = sqrt_ratio_x96 * sqrt_ratio_x96
        if base_is_token0:
            return mul_div(ratio_x192, base_amount, Q192)
        return mul_div(Q192, base_amount, ratio_x192)

    ratio_x128 = mul_div(sqrt_ratio_x96, sqrt_ratio_x96, 1 << 64)
    if base_is_token0:
        return mul_div(ratio_x128, base_amount, Q128)
    return mul_div(Q128, base_amount, ratio_x128)


def quote_through_pool(pool: PoolReader, tick: int, amount: int, token_in: str) -> int:
    """Convert `amount` of `token_in` into the pool's other token at `tick`.

    Raises:
        ValueError: If token_in is not one of the pool's tokens
    """
    token_in_norm = normalize_address(token_in)
    if token_in_norm == normalize_address(pool.token0):
        return get_quote_at_tick(tick, amount, base_is_token0=True)
    if token_in_norm == normalize_address(pool.token1):
        return get_quote_at_tick(tick, amount, base_is_token0=False)
    raise ValueError(f"Token {token_in} not in pool {pool.address}")


__all__ = ["TwapObservation", "consult", "get_quote_at_tick", "quote_through_pool"]
