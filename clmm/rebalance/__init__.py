"""Single-swap rebalancing into a concentrated-liquidity range.

This package provides:
- RebalanceRequest: validated solver input
- RebalancePlan: native-order swap instruction with diagnostics
- RebalanceSolver: damped Newton search over exact swap math
"""

from .solver import RebalanceSolver
from .types import RebalancePlan, RebalanceRequest

__all__ = ["RebalanceSolver", "RebalancePlan", "RebalanceRequest"]
