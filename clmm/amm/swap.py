"""Exact-input swap simulation across initialized ticks.

Walks the pool's liquidity ranges from the current price toward a price
limit, one constant-liquidity step per range, updating active liquidity by
each crossed tick's liquidity_net. With no initialized ticks this reduces to
a single compute_swap_step.
"""

from __future__ import annotations

from collections.abc import Iterator

from clmm.errors import PoolMathError
from clmm.math.swap_math import SwapStep, amount_in_to_reach, compute_swap_step
from clmm.math.tick_math import (
    MAX_SQRT_RATIO,
    MIN_SQRT_RATIO,
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
)

from .pool import PoolState


def default_price_limit(zero_for_one: bool) -> int:
    """Loosest price limit a swap may use in the given direction."""
    return MIN_SQRT_RATIO + 1 if zero_for_one else MAX_SQRT_RATIO - 1


def _crossings(state: PoolState, zero_for_one: bool, sqrt_limit: int) -> Iterator[tuple[int, int]]:
    """(sqrt price, liquidity delta) of each tick crossed before the limit, in swap order."""
    current = get_tick_at_sqrt_ratio(state.sqrt_price_x96)
    if zero_for_one:
        ticks = [t for t in reversed(state.ticks) if t.tick <= current]
    else:
        ticks = [t for t in state.ticks if t.tick > current]

    for tick in ticks:
        sqrt_tick = get_sqrt_ratio_at_tick(tick.tick)
        if (sqrt_tick <= sqrt_limit) if zero_for_one else (sqrt_tick >= sqrt_limit):
            return
        yield sqrt_tick, -tick.liquidity_net if zero_for_one else tick.liquidity_net


def _cross(liquidity: int, delta: int, sqrt_price: int) -> int:
    liquidity += delta
    if liquidity < 0:
        raise PoolMathError(f"Liquidity underflow crossing sqrt price {sqrt_price}")
    return liquidity


def simulate_swap(
    state: PoolState,
    amount_in: int,
    zero_for_one: bool,
    sqrt_price_limit_x96: int | None = None,
) -> SwapStep:
    """Simulate an exact-input swap against a pool snapshot.

    Args:
        state: Pool snapshot, including its initialized ticks
        amount_in: Gross input amount
        zero_for_one: True when selling token0 for token1
        sqrt_price_limit_x96: Price the swap may not cross. Defaults to the
            global sqrt price bound in the swap direction.

    Returns:
        SwapStep totals; reached_limit is True if the swap stopped at the limit
    """
    if sqrt_price_limit_x96 is None:
        sqrt_price_limit_x96 = default_price_limit(zero_for_one)
    if amount_in == 0:
        return SwapStep(amount_in=0, amount_out=0, sqrt_price_next_x96=state.sqrt_price_x96)

    sqrt_price = state.sqrt_price_x96
    liquidity = state.liquidity
    remaining = amount_in
    amount_out = 0

    for sqrt_tick, delta in _crossings(state, zero_for_one, sqrt_price_limit_x96):
        step = compute_swap_step(
            sqrt_price, liquidity, state.fee, remaining, zero_for_one, sqrt_tick
        )
        remaining -= step.amount_in
        amount_out += step.amount_out
        sqrt_price = step.sqrt_price_next_x96
        if not step.reached_limit:
            return SwapStep(amount_in - remaining, amount_out, sqrt_price)
        liquidity = _cross(liquidity, delta, sqrt_tick)

    step = compute_swap_step(
        sqrt_price, liquidity, state.fee, remaining, zero_for_one, sqrt_price_limit_x96
    )
    return SwapStep(
        amount_in=amount_in - remaining + step.amount_in,
        amount_out=amount_out + step.amount_out,
        sqrt_price_next_x96=step.sqrt_price_next_x96,
        reached_limit=step.reached_limit,
    )


def amount_in_to_price(state: PoolState, sqrt_target_x96: int) -> int:
    """Gross input that moves the pool price exactly to the target, crossing ticks.

    Direction is implied by the target, as in amount_in_to_reach.
    """
    if sqrt_target_x96 == state.sqrt_price_x96:
        return 0
    zero_for_one = sqrt_target_x96 < state.sqrt_price_x96

    sqrt_price = state.sqrt_price_x96
    liquidity = state.liquidity
    total = 0
    for sqrt_tick, delta in _crossings(state, zero_for_one, sqrt_target_x96):
        total += amount_in_to_reach(sqrt_price, sqrt_tick, liquidity, state.fee)
        sqrt_price = sqrt_tick
        liquidity = _cross(liquidity, delta, sqrt_tick)
    return total + amount_in_to_reach(sqrt_price, sqrt_target_x96, liquidity, state.fee)


__all__ = ["amount_in_to_price", "default_price_limit", "simulate_swap"]
