"""Single-range swap simulation at constant liquidity.

Mirrors UniswapV3 SwapMath.computeSwapStep for exact-input swaps: the fee is
taken from the input, the remainder moves the price, and the output is the
amount delta across the price move. Tick crossings are not modelled.
"""

from __future__ import annotations

from dataclasses import dataclass

from clmm.constants import FEE_DENOMINATOR
from clmm.errors import PoolMathError

from .full_math import mul_div, mul_div_rounding_up
from .sqrt_price_math import (
    get_amount0_delta,
    get_amount1_delta,
    get_next_sqrt_price_from_input,
)


@dataclass(frozen=True)
class SwapStep:
    """Result of simulating one exact-input swap step.

    Attributes:
        amount_in: Gross input consumed (including fee)
        amount_out: Output paid out by the pool
        sqrt_price_next_x96: Sqrt price after the step
        reached_limit: True if the step stopped at the price limit
    """

    amount_in: int
    amount_out: int
    sqrt_price_next_x96: int
    reached_limit: bool = False


def _check_fee(fee: int) -> None:
    if fee < 0 or fee >= FEE_DENOMINATOR:
        raise PoolMathError(f"Fee must be in [0, {FEE_DENOMINATOR}), got {fee}")


def amount_in_to_reach(
    sqrt_price_x96: int,
    sqrt_target_x96: int,
    liquidity: int,
    fee: int,
) -> int:
    """Gross input (fee included) that moves the price exactly to the target.

    Direction is implied by the target: a lower target is a token0 -> token1
    swap, a higher target a token1 -> token0 swap. Rounded up.
    """
    _check_fee(fee)
    if sqrt_target_x96 == sqrt_price_x96:
        return 0
    if sqrt_target_x96 < sqrt_price_x96:
        net = get_amount0_delta(sqrt_target_x96, sqrt_price_x96, liquidity, True)
    else:
        net = get_amount1_delta(sqrt_price_x96, sqrt_target_x96, liquidity, True)
    return mul_div_rounding_up(net, FEE_DENOMINATOR, FEE_DENOMINATOR - fee)


def compute_swap_step(
    sqrt_price_x96: int,
    liquidity: int,
    fee: int,
    amount_in: int,
    zero_for_one: bool,
    sqrt_price_limit_x96: int | None = None,
) -> SwapStep:
    """Simulate an exact-input swap within one constant-liquidity range.

    Args:
        sqrt_price_x96: Starting sqrt price
        liquidity: Active liquidity (assumed constant over the move)
        fee: Pool fee in pips (3000 = 0.3%)
        amount_in: Gross input amount
        zero_for_one: True when selling token0 for token1
        sqrt_price_limit_x96: Optional price the step may not cross; if the
            input would move past it, only the amount needed to reach it is used

    Returns:
        SwapStep with consumed input, output and resulting price
    """
    _check_fee(fee)
    if amount_in == 0:
        return SwapStep(amount_in=0, amount_out=0, sqrt_price_next_x96=sqrt_price_x96)

    if sqrt_price_limit_x96 is not None:
        crosses = (
            sqrt_price_limit_x96 <= sqrt_price_x96
            if zero_for_one
            else sqrt_price_limit_x96 >= sqrt_price_x96
        )
        if not crosses:
            raise PoolMathError(
                f"Price limit {sqrt_price_limit_x96} is on the wrong side of {sqrt_price_x96}"
            )

    amount_in_less_fee = mul_div(amount_in, FEE_DENOMINATOR - fee, FEE_DENOMINATOR)

    reached_limit = False
    if sqrt_price_limit_x96 is not None:
        gross_to_limit = amount_in_to_reach(sqrt_price_x96, sqrt_price_limit_x96, liquidity, fee)
        if amount_in >= gross_to_limit:
            amount_in = gross_to_limit
            sqrt_next = sqrt_price_limit_x96
            reached_limit = True

    if not reached_limit:
        sqrt_next = get_next_sqrt_price_from_input(
            sqrt_price_x96, liquidity, amount_in_less_fee, zero_for_one
        )

    if zero_for_one:
        amount_out = get_amount1_delta(sqrt_next, sqrt_price_x96, liquidity, False)
    else:
        amount_out = get_amount0_delta(sqrt_price_x96, sqrt_next, liquidity, False)

    return SwapStep(
        amount_in=amount_in,
        amount_out=amount_out,
        sqrt_price_next_x96=sqrt_next,
        reached_limit=reached_limit,
    )


__all__ = ["SwapStep", "amount_in_to_reach", "compute_swap_step"]
