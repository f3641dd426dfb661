"""Request and plan types for the rebalance solver."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from clmm.models.types import Address, Uint256


class RebalanceRequest(BaseModel):
    """A two-token bundle to fit into a tick range on one pool.

    token_a/token_b may be given in either order; the pool's native order is
    authoritative and the resulting plan is reported in native order.
    """

    model_config = ConfigDict(frozen=True)

    pool: Address
    token_a: Address
    token_b: Address
    amount_a: Uint256
    amount_b: Uint256
    tick_lower: int
    tick_upper: int


@dataclass(frozen=True)
class RebalancePlan:
    """A single swap instruction in pool-native token order.

    At most one of amount0_in / amount1_in is non-zero.

    Attributes:
        token0: Pool token0
        token1: Pool token1
        amount0_in: token0 to sell for token1
        amount1_in: token1 to sell for token0
        expected_amount_out: Output of the swap under exact constant-liquidity
            simulation against the pool state read for this plan
        balance0_after: token0 held after the swap (simulated)
        balance1_after: token1 held after the swap (simulated)
        iterations: Solver iterations run (0 for boundary short-circuits)
        converged: True if an early-stop threshold was met
        boundary_hit: True if the simulated swap ends at a range bound
        direction_flips: Times an applied step reversed the previous step's direction
        overshoot_corrections: Opposite-direction steps absorbed into the total
    """

    token0: str
    token1: str
    amount0_in: int
    amount1_in: int
    expected_amount_out: int
    balance0_after: int
    balance1_after: int
    iterations: int = 0
    converged: bool = True
    boundary_hit: bool = False
    direction_flips: int = 0
    overshoot_corrections: int = 0

    def __post_init__(self) -> None:
        if self.amount0_in < 0 or self.amount1_in < 0:
            raise ValueError("Swap amounts cannot be negative")
        if self.amount0_in and self.amount1_in:
            raise ValueError("A rebalance plan swaps in one direction only")

    @property
    def zero_for_one(self) -> bool:
        """True when selling token0 for token1."""
        return self.amount0_in > 0

    @property
    def is_noop(self) -> bool:
        return self.amount0_in == 0 and self.amount1_in == 0

    @property
    def amount_in(self) -> int:
        return self.amount0_in or self.amount1_in

    @property
    def token_in(self) -> str | None:
        if self.amount0_in:
            return self.token0
        if self.amount1_in:
            return self.token1
        return None

    @property
    def token_out(self) -> str | None:
        if self.amount0_in:
            return self.token1
        if self.amount1_in:
            return self.token0
        return None


__all__ = ["RebalanceRequest", "RebalancePlan"]
