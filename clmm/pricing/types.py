"""Type definitions for the routing/valuation cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from clmm.amm.pool import PoolReader


@dataclass(frozen=True)
class PoolEdge:
    """Cached best pool between a token and a connector.

    Attributes:
        pool: Pool address
        score: Bottleneck depth in quote-currency raw units
    """

    pool: str
    score: int


@dataclass(frozen=True)
class RouteHop:
    """One pool traversal within a route."""

    pool: str
    token_in: str
    token_out: str
    score: int


@dataclass(frozen=True)
class Route:
    """A direct (one-hop) or two-hop path through exactly one connector."""

    hops: tuple[RouteHop, ...]

    def __post_init__(self) -> None:
        if not 1 <= len(self.hops) <= 2:
            raise ValueError(f"Routes have one or two hops, got {len(self.hops)}")
        if len(self.hops) == 2 and self.hops[0].token_out != self.hops[1].token_in:
            raise ValueError("Route hops are not contiguous")

    @property
    def score(self) -> int:
        """Bottleneck score: the shallowest hop bounds the route."""
        return min(hop.score for hop in self.hops)

    @property
    def is_direct(self) -> bool:
        return len(self.hops) == 1

    @property
    def pools(self) -> list[str]:
        return [hop.pool for hop in self.hops]

    @property
    def token_in(self) -> str:
        return self.hops[0].token_in

    @property
    def token_out(self) -> str:
        return self.hops[-1].token_out

    @property
    def connector(self) -> str | None:
        """Intermediate connector of a two-hop route, None for direct routes."""
        if self.is_direct:
            return None
        return self.hops[0].token_out


class ScoreFailureReason(Enum):
    """Why a candidate pool was disqualified during refresh."""

    ORACLE_FAILURE = "oracle_failure"
    TICK_OUT_OF_RANGE = "tick_out_of_range"
    ZERO_LIQUIDITY = "zero_liquidity"
    MISSING_ANCHOR = "missing_anchor"
    ZERO_VALUE = "zero_value"
    MATH_FAULT = "math_fault"


@dataclass(frozen=True)
class ScoreResult:
    """Result of scoring one candidate pool: success(score) | failure(reason).

    Examples:
        result = ScoreResult.ok(score=5_000_000, mean_tick=-200_000)
        assert result.is_ok

        result = ScoreResult.fail(ScoreFailureReason.ZERO_LIQUIDITY)
        assert not result.is_ok
    """

    score: int | None
    mean_tick: int | None = None
    reason: ScoreFailureReason | None = None
    detail: str | None = None

    @property
    def is_ok(self) -> bool:
        return self.reason is None

    @classmethod
    def ok(cls, score: int, mean_tick: int) -> ScoreResult:
        return cls(score=score, mean_tick=mean_tick)

    @classmethod
    def fail(cls, reason: ScoreFailureReason, detail: str | None = None) -> ScoreResult:
        return cls(score=None, reason=reason, detail=detail)


@dataclass(frozen=True)
class Anchor:
    """Connector -> quote pool with its TWAP tick, read once per refresh pass."""

    pool: PoolReader
    mean_tick: int


@dataclass(frozen=True)
class ScoreFailure:
    """Diagnostic record of a disqualified candidate."""

    factory: str
    pool: str
    token: str
    connector: str
    reason: ScoreFailureReason
    detail: str | None = None


@dataclass
class RefreshReport:
    """Outcome of a cache refresh.

    Attributes:
        edges_written: Number of edges cached per factory
        failures: Every candidate disqualified during the refresh
        skipped_factories: Factories with allowlisted pools but no exchange context
    """

    edges_written: dict[str, int] = field(default_factory=dict)
    failures: list[ScoreFailure] = field(default_factory=list)
    skipped_factories: list[str] = field(default_factory=list)

    @property
    def total_edges(self) -> int:
        return sum(self.edges_written.values())

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


__all__ = [
    "PoolEdge",
    "RouteHop",
    "Route",
    "ScoreFailureReason",
    "ScoreResult",
    "Anchor",
    "ScoreFailure",
    "RefreshReport",
]
