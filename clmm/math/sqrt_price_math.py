"""Amount deltas and next-price functions for constant-liquidity ranges.

Port of UniswapV3 SqrtPriceMath. All prices are Q64.96 sqrt prices and all
rounding favours the pool: amounts owed to the pool round up, amounts paid
out round down.
"""

from __future__ import annotations

from clmm.constants import Q96, RESOLUTION
from clmm.errors import InsufficientLiquidity, PoolMathError, SqrtPriceOutOfRange

from .full_math import div_rounding_up, mul_div, mul_div_rounding_up

UINT160_MAX = 2**160 - 1


def _sorted(sqrt_a: int, sqrt_b: int) -> tuple[int, int]:
    if sqrt_a > sqrt_b:
        return sqrt_b, sqrt_a
    return sqrt_a, sqrt_b


def get_amount0_delta(sqrt_a: int, sqrt_b: int, liquidity: int, round_up: bool) -> int:
    """Token0 amount between two sqrt prices: L * (sb - sa) / (sa * sb).

    Args:
        sqrt_a: One sqrt price bound (order does not matter)
        sqrt_b: The other sqrt price bound
        liquidity: Active liquidity across the interval
        round_up: Round up (amount owed to the pool) or down (amount paid out)

    Raises:
        SqrtPriceOutOfRange: If the lower bound is zero
    """
    sqrt_lower, sqrt_upper = _sorted(sqrt_a, sqrt_b)
    if sqrt_lower <= 0:
        raise SqrtPriceOutOfRange("sqrt price must be positive")

    numerator1 = liquidity << RESOLUTION
    numerator2 = sqrt_upper - sqrt_lower

    if round_up:
        return div_rounding_up(
            mul_div_rounding_up(numerator1, numerator2, sqrt_upper), sqrt_lower
        )
    return mul_div(numerator1, numerator2, sqrt_upper) // sqrt_lower


def get_amount1_delta(sqrt_a: int, sqrt_b: int, liquidity: int, round_up: bool) -> int:
    """Token1 amount between two sqrt prices: L * (sb - sa)."""
    sqrt_lower, sqrt_upper = _sorted(sqrt_a, sqrt_b)
    if round_up:
        return mul_div_rounding_up(liquidity, sqrt_upper - sqrt_lower, Q96)
    return mul_div(liquidity, sqrt_upper - sqrt_lower, Q96)


def get_next_sqrt_price_from_amount0_rounding_up(
    sqrt_price_x96: int, liquidity: int, amount: int, add: bool
) -> int:
    """Next sqrt price after adding or removing `amount` of token0.

    Rounds up so the price never moves further than the amount pays for.

    Raises:
        InsufficientLiquidity: If removing more token0 than the range holds
    """
    if amount == 0:
        return sqrt_price_x96
    numerator1 = liquidity << RESOLUTION
    product = amount * sqrt_price_x96

    if add:
        denominator = numerator1 + product
        return mul_div_rounding_up(numerator1, sqrt_price_x96, denominator)

    if numerator1 <= product:
        raise InsufficientLiquidity(
            f"Cannot remove {amount} token0 at liquidity {liquidity}"
        )
    return mul_div_rounding_up(numerator1, sqrt_price_x96, numerator1 - product)


def get_next_sqrt_price_from_amount1_rounding_down(
    sqrt_price_x96: int, liquidity: int, amount: int, add: bool
) -> int:
    """Next sqrt price after adding or removing `amount` of token1.

    Raises:
        InsufficientLiquidity: If removing more token1 than the range holds
        SqrtPriceOutOfRange: If the result exceeds uint160
    """
    if add:
        quotient = (amount << RESOLUTION) // liquidity
        result = sqrt_price_x96 + quotient
        if result > UINT160_MAX:
            raise SqrtPriceOutOfRange(f"sqrt price overflows uint160: {result}")
        return result

    quotient = div_rounding_up(amount << RESOLUTION, liquidity)
    if sqrt_price_x96 <= quotient:
        raise InsufficientLiquidity(f"Cannot remove {amount} token1 at liquidity {liquidity}")
    return sqrt_price_x96 - quotient


def get_next_sqrt_price_from_input(
    sqrt_price_x96: int, liquidity: int, amount_in: int, zero_for_one: bool
) -> int:
    """Next sqrt price after swapping `amount_in` (already net of fee) into the pool.

    Raises:
        PoolMathError: If price or liquidity is zero
    """
    if sqrt_price_x96 <= 0:
        raise PoolMathError("sqrt price must be positive")
    if liquidity <= 0:
        raise PoolMathError("liquidity must be positive")

    if zero_for_one:
        return get_next_sqrt_price_from_amount0_rounding_up(
            sqrt_price_x96, liquidity, amount_in, True
        )
    return get_next_sqrt_price_from_amount1_rounding_down(
        sqrt_price_x96, liquidity, amount_in, True
    )


__all__ = [
    "UINT160_MAX",
    "get_amount0_delta",
    "get_amount1_delta",
    "get_next_sqrt_price_from_amount0_rounding_up",
    "get_next_sqrt_price_from_amount1_rounding_down",
    "get_next_sqrt_price_from_input",
]
