"""Pool read interface and live pool snapshot."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from clmm.models.types import normalize_address


@dataclass(frozen=True)
class TickLiquidity:
    """An initialized tick.

    liquidity_net is added to active liquidity when the price crosses the tick
    upward and subtracted when it crosses downward.
    """

    tick: int
    liquidity_net: int


@dataclass(frozen=True)
class PoolState:
    """Live snapshot of a concentrated-liquidity pool.

    Read fresh on every call that needs it and never cached: a stale
    liquidity or price read leads to wrong swap sizing.
    """

    address: str
    token0: str
    token1: str
    fee: int  # Fee in pips (e.g., 3000 for 0.3%)
    tick_spacing: int
    sqrt_price_x96: int  # Current sqrt(price) * 2^96
    tick: int  # Current tick index
    liquidity: int  # Current active liquidity
    ticks: tuple[TickLiquidity, ...] = ()  # Initialized ticks, ascending

    def is_token0(self, token: str) -> bool:
        """True if token is the pool's token0."""
        return normalize_address(token) == normalize_address(self.token0)

    def has_token(self, token: str) -> bool:
        token_norm = normalize_address(token)
        return token_norm in (normalize_address(self.token0), normalize_address(self.token1))


@runtime_checkable
class PoolReader(Protocol):
    """Read-only access to an on-chain concentrated-liquidity pool.

    This allows swapping between an RPC-backed reader and SimulatedPool
    for testing.
    """

    @property
    def address(self) -> str: ...

    @property
    def factory(self) -> str: ...

    @property
    def token0(self) -> str: ...

    @property
    def token1(self) -> str: ...

    @property
    def fee(self) -> int: ...

    @property
    def tick_spacing(self) -> int: ...

    def snapshot(self) -> PoolState:
        """Read current price, tick and active liquidity."""
        ...

    def observe(self, seconds_agos: Sequence[int]) -> tuple[list[int], list[int]]:
        """Read cumulative observations.

        Args:
            seconds_agos: Lookback offsets from now, in seconds

        Returns:
            (tick_cumulatives, seconds_per_liquidity_cumulative_x128s), one
            entry per offset

        Raises:
            OracleError: If an offset predates the oldest observation
        """
        ...


__all__ = ["PoolState", "PoolReader", "TickLiquidity"]
