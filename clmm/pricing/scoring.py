"""Manipulation-resistant depth scoring for candidate pools.

A pool's score is the quote-currency value of the thinner side of the
liquidity sitting in a small band around its TWAP tick:

1. consult the oracle for the mean tick and harmonic-mean liquidity
2. take the band [mean - w, mean + w], clamped to the global tick bounds
3. compute the token0/token1 amounts that liquidity holds across the band
4. value both sides in the quote currency (directly, or through the
   connector's anchor pool)
5. score = min(token-side value, connector-side value)

Scoring never raises for a bad candidate; it returns a ScoreResult failure
so the caller can keep evaluating the remaining candidates.
"""

from __future__ import annotations

from clmm.amm.oracle import consult, quote_through_pool
from clmm.amm.pool import PoolReader
from clmm.config import OracleConfig
from clmm.errors import OracleError, PoolMathError, TwapTickOutOfRange
from clmm.math.sqrt_price_math import get_amount0_delta, get_amount1_delta
from clmm.math.tick_math import clamp_tick, get_sqrt_ratio_at_tick
from clmm.models.types import normalize_address

from .types import Anchor, ScoreFailureReason, ScoreResult


def band_depths(mean_tick: int, half_width: int, liquidity: int) -> tuple[int, int]:
    """Token0 and token1 held by `liquidity` across the band around `mean_tick`.

    Both amounts are rounded down.

    Returns:
        (token0 depth, token1 depth)
    """
    sqrt_lower = get_sqrt_ratio_at_tick(clamp_tick(mean_tick - half_width))
    sqrt_upper = get_sqrt_ratio_at_tick(clamp_tick(mean_tick + half_width))
    depth0 = get_amount0_delta(sqrt_lower, sqrt_upper, liquidity, False)
    depth1 = get_amount1_delta(sqrt_lower, sqrt_upper, liquidity, False)
    return depth0, depth1


def score_candidate(
    pool: PoolReader,
    token: str,
    connector: str,
    quote: str,
    config: OracleConfig,
    anchor: Anchor | None = None,
) -> ScoreResult:
    """Score one candidate pool for the (token, connector) edge.

    Args:
        pool: Candidate pool holding token and connector
        token: Token being routed
        connector: Connector on the other side of the pool
        quote: Quote currency
        config: TWAP window and band half-width
        anchor: Connector -> quote pool and its TWAP tick; required unless the
            connector is the quote currency

    Returns:
        ScoreResult.ok(score) or ScoreResult.fail(reason)
    """
    connector_is_quote = normalize_address(connector) == normalize_address(quote)
    if not connector_is_quote and anchor is None:
        return ScoreResult.fail(
            ScoreFailureReason.MISSING_ANCHOR, f"no anchor edge for connector {connector}"
        )

    try:
        observation = consult(pool, config.twap_window)
    except TwapTickOutOfRange as err:
        return ScoreResult.fail(ScoreFailureReason.TICK_OUT_OF_RANGE, str(err))
    except OracleError as err:
        return ScoreResult.fail(ScoreFailureReason.ORACLE_FAILURE, str(err))

    liquidity = observation.harmonic_mean_liquidity
    if liquidity == 0:
        return ScoreResult.fail(ScoreFailureReason.ZERO_LIQUIDITY)

    mean_tick = observation.arithmetic_mean_tick
    try:
        depth0, depth1 = band_depths(mean_tick, config.band_half_width, liquidity)
        if normalize_address(token) == normalize_address(pool.token0):
            token_depth, connector_depth = depth0, depth1
        else:
            token_depth, connector_depth = depth1, depth0

        token_in_connector = quote_through_pool(pool, mean_tick, token_depth, token)
        if connector_is_quote:
            token_value = token_in_connector
            connector_value = connector_depth
        else:
            assert anchor is not None  # Checked above
            token_value = quote_through_pool(
                anchor.pool, anchor.mean_tick, token_in_connector, connector
            )
            connector_value = quote_through_pool(
                anchor.pool, anchor.mean_tick, connector_depth, connector
            )
    except PoolMathError as err:
        return ScoreResult.fail(ScoreFailureReason.MATH_FAULT, str(err))

    if token_value == 0 or connector_value == 0:
        return ScoreResult.fail(
            ScoreFailureReason.ZERO_VALUE,
            f"token side {token_value}, connector side {connector_value}",
        )

    return ScoreResult.ok(score=min(token_value, connector_value), mean_tick=mean_tick)


__all__ = ["band_depths", "score_candidate"]
