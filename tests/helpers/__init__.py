"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token and factory addresses
- factories: SimulatedPool and RebalanceRequest factory functions
"""

from tests.helpers.constants import (
    COW,
    DAI,
    SLIPSTREAM_FACTORY,
    TICK_PRICE_TWO,
    UNI,
    UNI_V3_FACTORY,
    UNKNOWN_FACTORY,
    USDC,
    USDT,
    WBTC,
    WETH,
    ZERO,
)
from tests.helpers.factories import (
    FixedObservationPool,
    make_pool,
    make_request,
    next_pool_address,
)

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "USDT",
    "WBTC",
    "UNI",
    "COW",
    "ZERO",
    "UNI_V3_FACTORY",
    "SLIPSTREAM_FACTORY",
    "UNKNOWN_FACTORY",
    "TICK_PRICE_TWO",
    # Factories
    "make_pool",
    "make_request",
    "next_pool_address",
    "FixedObservationPool",
]
