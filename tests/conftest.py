"""Pytest configuration and fixtures."""

import pytest

from clmm.amm.simulated import SimulatedPool
from clmm.config import OracleConfig, SolverConfig
from clmm.exchanges.context import ExchangeContext, slipstream, uniswap_v3
from clmm.pools.registry import PoolRegistry
from clmm.pricing.cache import RouteCache
from clmm.pricing.connectors import ConnectorSet
from clmm.rebalance.solver import RebalanceSolver
from tests.helpers import DAI, TICK_PRICE_TWO, UNI, USDC, WETH, make_pool

# =============================================================================
# Exchange contexts and connectors
# =============================================================================


@pytest.fixture
def uni_context() -> ExchangeContext:
    """UniswapV3 context with the standard fee tiers."""
    return uniswap_v3()


@pytest.fixture
def slipstream_context() -> ExchangeContext:
    """Slipstream context with the standard tick spacings."""
    return slipstream()


@pytest.fixture
def connectors() -> ConnectorSet:
    """USDC quote currency with WETH as the only bridge."""
    return ConnectorSet(quote=USDC, bridges=(WETH,))


@pytest.fixture
def oracle_config() -> OracleConfig:
    return OracleConfig()


@pytest.fixture
def registry(uni_context: ExchangeContext, slipstream_context: ExchangeContext) -> PoolRegistry:
    """Empty registry that knows both exchange contexts."""
    return PoolRegistry(exchanges=[uni_context, slipstream_context])


# =============================================================================
# Priced pool graph
# =============================================================================


@pytest.fixture
def weth_usdc_pool() -> SimulatedPool:
    """Anchor pool: 1 WETH ~= 2 USDC (raw units)."""
    return make_pool(WETH, USDC, fee=500, tick_spacing=10, tick=TICK_PRICE_TWO, liquidity=10**20)


@pytest.fixture
def dai_usdc_pool() -> SimulatedPool:
    return make_pool(DAI, USDC, fee=100, tick_spacing=1, tick=0, liquidity=10**18)


@pytest.fixture
def dai_weth_pool() -> SimulatedPool:
    return make_pool(DAI, WETH, fee=3000, tick_spacing=60, tick=-TICK_PRICE_TWO, liquidity=10**21)


@pytest.fixture
def uni_weth_pool() -> SimulatedPool:
    """UNI only reaches USDC through WETH."""
    return make_pool(UNI, WETH, fee=3000, tick_spacing=60, tick=0, liquidity=10**18)


@pytest.fixture
def priced_registry(
    registry: PoolRegistry,
    weth_usdc_pool: SimulatedPool,
    dai_usdc_pool: SimulatedPool,
    dai_weth_pool: SimulatedPool,
    uni_weth_pool: SimulatedPool,
) -> PoolRegistry:
    """Registry with an anchor, a direct-quote pool and bridge-only pools."""
    for pool in (weth_usdc_pool, dai_usdc_pool, dai_weth_pool, uni_weth_pool):
        registry.add_pool(pool)
    return registry


@pytest.fixture
def cache(priced_registry: PoolRegistry, connectors: ConnectorSet) -> RouteCache:
    """Unrefreshed cache over the priced registry."""
    return RouteCache(priced_registry, connectors)


@pytest.fixture
def refreshed_cache(cache: RouteCache) -> RouteCache:
    cache.refresh()
    return cache


# =============================================================================
# Rebalance solver
# =============================================================================


@pytest.fixture
def solver_pool() -> SimulatedPool:
    """Deep WETH/DAI pool at price 1.0 (both tokens 18 decimals)."""
    return make_pool(WETH, DAI, fee=3000, tick_spacing=60, tick=0, liquidity=10**24)


@pytest.fixture
def solver(registry: PoolRegistry, connectors: ConnectorSet, solver_pool: SimulatedPool):
    registry.add_pool(solver_pool)
    return RebalanceSolver(registry, connectors, SolverConfig())
