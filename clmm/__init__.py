"""Concentrated-liquidity pricing, routing and rebalancing core."""

from clmm.config import OracleConfig, SolverConfig
from clmm.exchanges import ExchangeContext, slipstream, uniswap_v3
from clmm.logging_config import configure_logging
from clmm.pools import PoolRegistry
from clmm.pricing import ConnectorSet, RouteCache
from clmm.rebalance import RebalancePlan, RebalanceRequest, RebalanceSolver

__version__ = "0.1.0"

__all__ = [
    "OracleConfig",
    "SolverConfig",
    "ExchangeContext",
    "uniswap_v3",
    "slipstream",
    "configure_logging",
    "PoolRegistry",
    "ConnectorSet",
    "RouteCache",
    "RebalancePlan",
    "RebalanceRequest",
    "RebalanceSolver",
]
