"""Concentrated-liquidity pool access.

This package provides:
- PoolReader protocol and PoolState snapshot
- SimulatedPool, an in-memory reader with deterministic oracle history
- Swap simulation across initialized ticks (simulate_swap, amount_in_to_price)
- TWAP oracle reads (consult, get_quote_at_tick)
"""

from .oracle import TwapObservation, consult, get_quote_at_tick, quote_through_pool
from .pool import PoolReader, PoolState, TickLiquidity
from .simulated import SimulatedPool
from .swap import amount_in_to_price, default_price_limit, simulate_swap

__all__ = [
    "PoolReader",
    "PoolState",
    "SimulatedPool",
    "TickLiquidity",
    "TwapObservation",
    "amount_in_to_price",
    "default_price_limit",
    "simulate_swap",
    "consult",
    "get_quote_at_tick",
    "quote_through_pool",
]
