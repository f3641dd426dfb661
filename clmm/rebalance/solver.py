"""Rebalance solver: the one swap that fits a bundle into a tick range.

Given (amount0, amount1) and a target range on a pool, the solver finds the
single-direction swap after which the bundle matches the ratio the range
consumes at the post-swap price, so that adding liquidity leaves minimal dust.

The search is a damped Newton-Raphson iteration over exact swap math, with
each range between initialized ticks at constant liquidity:

1. Outside the range, the answer is closed form: sell all of the token the
   range cannot hold.
2. Inside the range, each iteration
   - re-simulates the running total swap from the original bundle,
   - computes the token0 target implied by the range's per-unit-liquidity
     capacities at the virtual price,
   - stops once the gap is worth less than both early-stop thresholds,
   - damps the step by L_pool / (L_pool + L_ideal), with L_pool the active
     liquidity, to account for the swap's own price impact,
   - clamps the running total at the range bound, and
   - absorbs opposite-direction steps by shrinking the running total by
     half of the smaller of the two.

All prices are Q64.96 integers and the iteration state is threaded through
the loop as a value; nothing about a solve is stored on the solver.
"""

from __future__ import annotations

from typing import NamedTuple

import structlog

from clmm.amm.pool import PoolReader, PoolState
from clmm.amm.swap import amount_in_to_price, simulate_swap
from clmm.config import RELATIVE_THRESHOLD_DENOMINATOR, SolverConfig
from clmm.constants import FEE_DENOMINATOR, Q96
from clmm.errors import (
    ConfigurationError,
    FeeLookupError,
    InsufficientLiquidity,
    InvalidTickRangeError,
    PoolMathError,
    PoolNotFoundError,
    UnsupportedPoolError,
    ZeroAddressError,
)
from clmm.exchanges.context import ExchangeContext
from clmm.math.full_math import mul_div
from clmm.math.sqrt_price_math import get_amount0_delta, get_amount1_delta
from clmm.math.tick_math import get_sqrt_ratio_at_tick, is_valid_tick
from clmm.models.types import is_zero_address, normalize_address, short
from clmm.pools.registry import PoolRegistry
from clmm.pricing.cache import RouteCache
from clmm.pricing.connectors import ConnectorSet

from .types import RebalancePlan, RebalanceRequest

logger = structlog.get_logger()

# Reference liquidity for per-unit range capacities
UNIT_LIQUIDITY = 1 << 128


class _Virtual(NamedTuple):
    """Bundle and price after simulating the running total."""

    balance0: int
    balance1: int
    sqrt_price_x96: int
    amount_out: int
    reached_limit: bool


class _Step(NamedTuple):
    """Raw Newton step toward the range's ideal ratio."""

    zero_for_one: bool
    amount: int  # In units of the token being sold
    value: int  # In token1 units
    ideal_liquidity: int
    portfolio_value: int  # In token1 units


class _Running(NamedTuple):
    """Running total swap threaded through the iteration."""

    total: int
    zero_for_one: bool | None
    flips: int
    corrections: int
    last_step: bool | None = None  # Direction of the last applied step


class RebalanceSolver:
    """Compute single-swap rebalance plans for concentrated-liquidity ranges.

    Usage:
        solver = RebalanceSolver(registry, connectors, route_cache=cache)
        plan = solver.solve(
            RebalanceRequest(
                pool=pool_address,
                token_a=WETH,
                token_b=USDC,
                amount_a=5 * 10**18,
                amount_b=7_000 * 10**6,
                tick_lower=-200_040,
                tick_upper=-199_020,
            )
        )
    """

    def __init__(
        self,
        registry: PoolRegistry,
        connectors: ConnectorSet,
        config: SolverConfig | None = None,
        route_cache: RouteCache | None = None,
    ) -> None:
        """Initialize the solver.

        Args:
            registry: Pool registry used to resolve and validate the target pool
            connectors: Quote currency and bridge connectors
            config: Iteration cap and early-stop thresholds. Defaults to SolverConfig().
            route_cache: Valuation cache for the absolute early-stop floor. If
                None, the absolute floor is skipped.

        Raises:
            ConfigurationError: If registry or connectors are missing
        """
        if registry is None:
            raise ConfigurationError("RebalanceSolver requires a pool registry")
        if connectors is None:
            raise ConfigurationError("RebalanceSolver requires a connector set")
        self.registry = registry
        self.connectors = connectors
        self.config = config if config is not None else SolverConfig()
        self.route_cache = route_cache

    def solve(self, request: RebalanceRequest) -> RebalancePlan:
        """Compute the swap that best fits the bundle into the requested range.

        Raises:
            ZeroAddressError: If the pool or a token is the zero address
            PoolNotFoundError: If the pool is unknown or not allowlisted
            FeeLookupError: If the pool's fee or tick spacing cannot be resolved
            UnsupportedPoolError: If the tokens do not match the pool, or
                neither token is a connector
            InvalidTickRangeError: If the range is empty, out of bounds or misaligned
            PoolMathError: If the pool is uninitialized or the math overflows
            RouteNotFoundError: If the absolute floor cannot be converted
        """
        _, state, context = self._load_pool(request)
        sqrt_lower, sqrt_upper = self._range_bounds(request, state)

        if state.is_token0(request.token_a):
            amount0, amount1 = request.amount_a, request.amount_b
        else:
            logger.debug("rebalance_reordered_tokens", pool=short(state.address))
            amount0, amount1 = request.amount_b, request.amount_a

        if state.sqrt_price_x96 <= sqrt_lower:
            # Range holds only token0 at this price
            return self._sell_all(state, amount0, amount1, zero_for_one=False)
        if state.sqrt_price_x96 >= sqrt_upper:
            # Range holds only token1 at this price
            return self._sell_all(state, amount0, amount1, zero_for_one=True)

        if state.liquidity == 0:
            raise InsufficientLiquidity(f"Pool {state.address} has no active liquidity")

        floor = self._absolute_floor(context, state.token1)
        return self._iterate(state, amount0, amount1, sqrt_lower, sqrt_upper, floor)

    # =========================================================================
    # Validation
    # =========================================================================

    def _load_pool(
        self, request: RebalanceRequest
    ) -> tuple[PoolReader, PoolState, ExchangeContext]:
        for name, address in (
            ("pool", request.pool),
            ("token_a", request.token_a),
            ("token_b", request.token_b),
        ):
            if is_zero_address(address):
                raise ZeroAddressError(f"{name} is the zero address")

        token_a = normalize_address(request.token_a)
        token_b = normalize_address(request.token_b)
        if token_a == token_b:
            raise UnsupportedPoolError(f"token_a and token_b are the same token: {token_a}")

        pool = self.registry.get(request.pool)
        if pool is None:
            raise PoolNotFoundError(f"Pool {request.pool} is not registered")
        if not self.registry.is_allowlisted(pool.address):
            raise PoolNotFoundError(f"Pool {request.pool} is not allowlisted")

        context = self.registry.exchange(pool.factory)
        if context is None:
            raise FeeLookupError(f"No exchange context for factory {pool.factory}")

        state = pool.snapshot()
        if not 0 <= state.fee < FEE_DENOMINATOR or state.tick_spacing <= 0:
            raise FeeLookupError(
                f"Pool {state.address} has invalid fee {state.fee} "
                f"or tick spacing {state.tick_spacing}"
            )
        if not context.supports(state.fee, state.tick_spacing):
            raise FeeLookupError(
                f"Pool {state.address} tier is not enumerated by exchange {context.name}"
            )
        if state.sqrt_price_x96 == 0:
            raise PoolMathError(f"Pool {state.address} is not initialized")

        if not (state.has_token(token_a) and state.has_token(token_b)):
            raise UnsupportedPoolError(f"Tokens do not match pool {state.address}")
        if not any(self.connectors.is_connector(token) for token in (token_a, token_b)):
            raise UnsupportedPoolError(
                f"Pool {state.address} has neither the quote currency nor a connector"
            )

        return pool, state, context

    def _range_bounds(self, request: RebalanceRequest, state: PoolState) -> tuple[int, int]:
        tick_lower, tick_upper = request.tick_lower, request.tick_upper
        if tick_lower >= tick_upper:
            raise InvalidTickRangeError(f"tick_lower {tick_lower} >= tick_upper {tick_upper}")
        if not (is_valid_tick(tick_lower) and is_valid_tick(tick_upper)):
            raise InvalidTickRangeError(f"Range [{tick_lower}, {tick_upper}] out of bounds")
        spacing = state.tick_spacing
        if tick_lower % spacing or tick_upper % spacing:
            raise InvalidTickRangeError(
                f"Range [{tick_lower}, {tick_upper}] not aligned to tick spacing {spacing}"
            )
        return get_sqrt_ratio_at_tick(tick_lower), get_sqrt_ratio_at_tick(tick_upper)

    def _absolute_floor(self, context: ExchangeContext, token1: str) -> int | None:
        """Absolute early-stop floor in token1 units, or None if unconfigured."""
        floor = self.config.absolute_stop_floor
        if floor is None or self.route_cache is None:
            return None
        return self.route_cache.convert(context, self.connectors.quote, token1, floor)

    # =========================================================================
    # Boundary short-circuit
    # =========================================================================

    def _sell_all(
        self, state: PoolState, amount0: int, amount1: int, zero_for_one: bool
    ) -> RebalancePlan:
        amount_in = amount0 if zero_for_one else amount1
        # Bounded by the global price limit; the whole balance is still sold
        amount_out = simulate_swap(state, amount_in, zero_for_one).amount_out

        logger.info(
            "rebalance_boundary_short_circuit",
            pool=short(state.address),
            zero_for_one=zero_for_one,
            amount_in=amount_in,
        )
        if zero_for_one:
            return RebalancePlan(
                token0=state.token0,
                token1=state.token1,
                amount0_in=amount_in,
                amount1_in=0,
                expected_amount_out=amount_out,
                balance0_after=0,
                balance1_after=amount1 + amount_out,
            )
        return RebalancePlan(
            token0=state.token0,
            token1=state.token1,
            amount0_in=0,
            amount1_in=amount_in,
            expected_amount_out=amount_out,
            balance0_after=amount0 + amount_out,
            balance1_after=0,
        )

    # =========================================================================
    # Newton iteration
    # =========================================================================

    def _iterate(
        self,
        state: PoolState,
        amount0: int,
        amount1: int,
        sqrt_lower: int,
        sqrt_upper: int,
        floor: int | None,
    ) -> RebalancePlan:
        max_iterations = self.config.max_iterations
        relative_threshold = self.config.relative_stop_threshold

        running = _Running(total=0, zero_for_one=None, flips=0, corrections=0)
        converged = False
        iterations = 0

        for iterations in range(1, max_iterations + 1):
            virtual = self._simulate(state, amount0, amount1, running, sqrt_lower, sqrt_upper)
            step = self._raw_step(virtual, sqrt_lower, sqrt_upper)

            relative = mul_div(
                step.portfolio_value, relative_threshold, RELATIVE_THRESHOLD_DENOMINATOR
            )
            if step.amount == 0 or (
                step.value < relative and (floor is None or step.value < floor)
            ):
                converged = True
                break

            damped = mul_div(step.amount, state.liquidity, state.liquidity + step.ideal_liquidity)
            if damped == 0:
                converged = True
                break

            running = self._apply_step(running, step.zero_for_one, damped, virtual.sqrt_price_x96)
            running = self._clamp(running, state, amount0, amount1, sqrt_lower, sqrt_upper)

        final = self._simulate(state, amount0, amount1, running, sqrt_lower, sqrt_upper)

        if converged:
            logger.debug(
                "rebalance_converged",
                pool=short(state.address),
                iterations=iterations,
                total=running.total,
            )
        else:
            logger.info(
                "rebalance_iteration_cap_reached",
                pool=short(state.address),
                iterations=iterations,
                total=running.total,
            )

        zero_for_one = bool(running.zero_for_one) and running.total > 0
        one_for_zero = running.zero_for_one is False and running.total > 0
        return RebalancePlan(
            token0=state.token0,
            token1=state.token1,
            amount0_in=running.total if zero_for_one else 0,
            amount1_in=running.total if one_for_zero else 0,
            expected_amount_out=final.amount_out,
            balance0_after=final.balance0,
            balance1_after=final.balance1,
            iterations=iterations,
            converged=converged,
            boundary_hit=final.reached_limit,
            direction_flips=running.flips,
            overshoot_corrections=running.corrections,
        )

    def _simulate(
        self,
        state: PoolState,
        amount0: int,
        amount1: int,
        running: _Running,
        sqrt_lower: int,
        sqrt_upper: int,
    ) -> _Virtual:
        """Apply the running total to the original bundle, crossing initialized ticks."""
        if running.total == 0 or running.zero_for_one is None:
            return _Virtual(amount0, amount1, state.sqrt_price_x96, 0, False)

        zero_for_one = running.zero_for_one
        swap = simulate_swap(
            state, running.total, zero_for_one, sqrt_lower if zero_for_one else sqrt_upper
        )
        if zero_for_one:
            return _Virtual(
                amount0 - running.total,
                amount1 + swap.amount_out,
                swap.sqrt_price_next_x96,
                swap.amount_out,
                swap.reached_limit,
            )
        return _Virtual(
            amount0 + swap.amount_out,
            amount1 - running.total,
            swap.sqrt_price_next_x96,
            swap.amount_out,
            swap.reached_limit,
        )

    def _raw_step(self, virtual: _Virtual, sqrt_lower: int, sqrt_upper: int) -> _Step:
        """Gap between the virtual bundle and the range's ideal token0 holding."""
        sqrt_price = virtual.sqrt_price_x96

        # Per-unit-liquidity capacity: token0 from price to upper, token1 from lower to price
        capacity0 = (
            get_amount0_delta(sqrt_price, sqrt_upper, UNIT_LIQUIDITY, False)
            if sqrt_price < sqrt_upper
            else 0
        )
        capacity1 = (
            get_amount1_delta(sqrt_lower, sqrt_price, UNIT_LIQUIDITY, False)
            if sqrt_price > sqrt_lower
            else 0
        )

        portfolio_value = _token0_in_token1(virtual.balance0, sqrt_price) + virtual.balance1
        capacity_value = _token0_in_token1(capacity0, sqrt_price) + capacity1
        target0 = mul_div(portfolio_value, capacity0, capacity_value)
        ideal_liquidity = mul_div(portfolio_value, UNIT_LIQUIDITY, capacity_value)

        if virtual.balance0 > target0:
            amount = virtual.balance0 - target0
            return _Step(
                zero_for_one=True,
                amount=amount,
                value=_token0_in_token1(amount, sqrt_price),
                ideal_liquidity=ideal_liquidity,
                portfolio_value=portfolio_value,
            )
        amount = _token0_in_token1(target0 - virtual.balance0, sqrt_price)
        return _Step(
            zero_for_one=False,
            amount=amount,
            value=amount,
            ideal_liquidity=ideal_liquidity,
            portfolio_value=portfolio_value,
        )

    def _apply_step(
        self, running: _Running, zero_for_one: bool, amount: int, sqrt_price: int
    ) -> _Running:
        """Add a damped step to the running total, absorbing opposite steps.

        A flip is counted each time a step reverses the previous step's direction.
        """
        flipped = running.last_step is not None and running.last_step != zero_for_one
        running = running._replace(last_step=zero_for_one, flips=running.flips + int(flipped))

        if running.total == 0:
            return running._replace(total=amount, zero_for_one=zero_for_one)

        if zero_for_one == running.zero_for_one:
            return running._replace(total=running.total + amount)

        # Opposite step: express it in the running token and shrink the total
        if zero_for_one:
            equivalent = _token0_in_token1(amount, sqrt_price)
        else:
            equivalent = _token1_in_token0(amount, sqrt_price)
        reduction = min(equivalent, running.total) // 2
        logger.debug(
            "rebalance_overshoot_corrected",
            total=running.total,
            step=equivalent,
            reduction=reduction,
        )
        return running._replace(
            total=running.total - reduction,
            corrections=running.corrections + 1,
        )

    def _clamp(
        self,
        running: _Running,
        state: PoolState,
        amount0: int,
        amount1: int,
        sqrt_lower: int,
        sqrt_upper: int,
    ) -> _Running:
        """Cap the total at the sold balance and at the range bound."""
        zero_for_one = running.zero_for_one
        if zero_for_one is None:
            return running

        total = min(running.total, amount0 if zero_for_one else amount1)
        to_boundary = amount_in_to_price(state, sqrt_lower if zero_for_one else sqrt_upper)
        if total >= to_boundary:
            logger.debug(
                "rebalance_boundary_clamp",
                pool=short(state.address),
                total=total,
                to_boundary=to_boundary,
            )
            total = to_boundary
        return running._replace(total=total)


def _token0_in_token1(amount0: int, sqrt_price_x96: int) -> int:
    """Value a token0 amount in token1 at a sqrt price, rounded down."""
    return mul_div(mul_div(amount0, sqrt_price_x96, Q96), sqrt_price_x96, Q96)


def _token1_in_token0(amount1: int, sqrt_price_x96: int) -> int:
    """Value a token1 amount in token0 at a sqrt price, rounded down."""
    return mul_div(mul_div(amount1, Q96, sqrt_price_x96), Q96, sqrt_price_x96)


__all__ = ["RebalanceSolver", "UNIT_LIQUIDITY"]
