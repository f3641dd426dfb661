"""In-memory pool with deterministic oracle observations.

SimulatedPool implements PoolReader without RPC calls. Its oracle behaves as
if the pool had sat at a constant tick and liquidity for `observation_age`
seconds, which makes TWAP reads exact and reproducible.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from clmm.errors import OracleError
from clmm.math.tick_math import get_sqrt_ratio_at_tick

from .pool import PoolState, TickLiquidity


@dataclass
class SimulatedPool:
    """Pool snapshot plus a constant-history oracle.

    Attributes:
        twap_tick: Tick the oracle history sat at (defaults to `tick`)
        twap_liquidity: Liquidity the oracle history saw (defaults to `liquidity`)
        observation_age: Seconds of oracle history available
        ticks: Initialized ticks outside the active range, in any order
    """

    address: str
    factory: str
    token0: str
    token1: str
    fee: int
    tick_spacing: int
    tick: int
    liquidity: int
    sqrt_price_x96: int | None = None
    twap_tick: int | None = None
    twap_liquidity: int | None = None
    observation_age: int = 3600
    ticks: tuple[TickLiquidity, ...] = ()
    observe_calls: list[tuple[int, ...]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.address = self.address.lower()
        self.factory = self.factory.lower()
        self.token0 = self.token0.lower()
        self.token1 = self.token1.lower()
        if self.sqrt_price_x96 is None:
            self.sqrt_price_x96 = get_sqrt_ratio_at_tick(self.tick)

    def snapshot(self) -> PoolState:
        assert self.sqrt_price_x96 is not None  # Set in __post_init__
        return PoolState(
            address=self.address,
            token0=self.token0,
            token1=self.token1,
            fee=self.fee,
            tick_spacing=self.tick_spacing,
            sqrt_price_x96=self.sqrt_price_x96,
            tick=self.tick,
            liquidity=self.liquidity,
            ticks=tuple(sorted(self.ticks, key=lambda t: t.tick)),
        )

    def observe(self, seconds_agos: Sequence[int]) -> tuple[list[int], list[int]]:
        self.observe_calls.append(tuple(seconds_agos))
        tick = self.tick if self.twap_tick is None else self.twap_tick
        liquidity = self.liquidity if self.twap_liquidity is None else self.twap_liquidity

        tick_cumulatives: list[int] = []
        seconds_per_liquidity: list[int] = []
        for seconds_ago in seconds_agos:
            if seconds_ago < 0 or seconds_ago > self.observation_age:
                raise OracleError(
                    f"Observation {seconds_ago}s ago predates pool history "
                    f"({self.observation_age}s) for {self.address}"
                )
            elapsed = self.observation_age - seconds_ago
            tick_cumulatives.append(tick * elapsed)
            # Same convention as the pool oracle: zero liquidity counts as one
            seconds_per_liquidity.append((elapsed << 128) // max(liquidity, 1))
        return tick_cumulatives, seconds_per_liquidity


__all__ = ["SimulatedPool"]
