"""Routing/valuation cache.

This package provides:
- ConnectorSet: quote currency plus bridge connectors
- score_candidate / band_depths: TWAP band-depth scoring
- RouteCache: refresh, value, convert and best_route queries
"""

from .cache import RouteCache
from .connectors import ConnectorSet
from .scoring import band_depths, score_candidate
from .types import (
    Anchor,
    PoolEdge,
    RefreshReport,
    Route,
    RouteHop,
    ScoreFailure,
    ScoreFailureReason,
    ScoreResult,
)

__all__ = [
    "RouteCache",
    "ConnectorSet",
    "band_depths",
    "score_candidate",
    "Anchor",
    "PoolEdge",
    "RefreshReport",
    "Route",
    "RouteHop",
    "ScoreFailure",
    "ScoreFailureReason",
    "ScoreResult",
]
