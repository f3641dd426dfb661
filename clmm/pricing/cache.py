"""Routing/valuation cache.

RouteCache keeps, per exchange context, the best pool for converting each
token into each connector currency, scored by TWAP band depth. Refresh is the
only mutating operation; value/convert/best_route are read-only and price
exclusively through TWAP reads of the cached pools.

Cache freshness is bounded only by how recently refresh ran. Queries re-check
the allowlist, but a pool's depth ranking is as old as the last refresh.
"""

from __future__ import annotations

import structlog

from clmm.amm.oracle import consult, quote_through_pool
from clmm.config import OracleConfig
from clmm.errors import ConfigurationError, RouteNotFoundError
from clmm.exchanges.context import ExchangeContext
from clmm.models.types import normalize_address, short
from clmm.pools.registry import PoolRegistry

from .connectors import ConnectorSet
from .scoring import score_candidate
from .types import (
    Anchor,
    PoolEdge,
    RefreshReport,
    Route,
    RouteHop,
    ScoreFailure,
)

logger = structlog.get_logger()

# (token, connector) -> edge
EdgeMap = dict[tuple[str, str], PoolEdge]


class RouteCache:
    """Best-pool cache and TWAP valuation across exchange contexts.

    Usage:
        cache = RouteCache(registry, ConnectorSet(quote=USDC, bridges=(WETH,)))
        report = cache.refresh()
        usdc_value = cache.value(context, token, amount)
        route = cache.best_route(context, token, WETH)
    """

    def __init__(
        self,
        registry: PoolRegistry,
        connectors: ConnectorSet,
        config: OracleConfig | None = None,
    ) -> None:
        """Initialize an empty cache.

        Args:
            registry: Pool registry (allowlist, enumeration, factory lookup)
            connectors: Quote currency and bridge connectors
            config: TWAP window and band half-width. Defaults to OracleConfig().

        Raises:
            ConfigurationError: If registry or connectors are missing
        """
        if registry is None:
            raise ConfigurationError("RouteCache requires a pool registry")
        if connectors is None:
            raise ConfigurationError("RouteCache requires a connector set")
        self.registry = registry
        self.connectors = connectors
        self.config = config if config is not None else OracleConfig()
        # factory -> edges; each context's map is replaced wholesale on refresh
        self._edges: dict[str, EdgeMap] = {}

    # =========================================================================
    # Refresh
    # =========================================================================

    def refresh(self) -> RefreshReport:
        """Rebuild every cached edge from the current allowlisted pools.

        Candidates that fail to score are recorded in the report and skipped;
        a failure never aborts the refresh. Running refresh twice against
        unchanged pool state yields identical edges.
        """
        report = RefreshReport()
        pools_by_factory = self.registry.allowlisted_by_factory()
        logger.info(
            "refresh_started",
            factories=len(pools_by_factory),
            connectors=len(self.connectors),
        )

        new_edges: dict[str, EdgeMap] = {}
        for factory, pools in pools_by_factory.items():
            context = self.registry.exchange(factory)
            if context is None:
                logger.warning("refresh_unknown_exchange", factory=short(factory))
                report.skipped_factories.append(factory)
                continue

            tokens: set[str] = set()
            for pool in pools:
                tokens.add(normalize_address(pool.token0))
                tokens.add(normalize_address(pool.token1))
            non_connectors = sorted(t for t in tokens if not self.connectors.is_connector(t))

            edges = self._refresh_context(context, non_connectors, report)
            new_edges[factory] = edges
            report.edges_written[factory] = len(edges)
            logger.info(
                "refresh_context_done",
                exchange=context.name,
                tokens=len(non_connectors),
                edges=len(edges),
            )

        self._edges = new_edges
        logger.info(
            "refresh_finished",
            edges=report.total_edges,
            failures=len(report.failures),
        )
        return report

    def _refresh_context(
        self,
        context: ExchangeContext,
        tokens: list[str],
        report: RefreshReport,
    ) -> EdgeMap:
        """Build the edge map for one context: anchors first, then token edges."""
        quote = self.connectors.quote
        edges: EdgeMap = {}
        anchors: dict[str, Anchor] = {}

        # Anchor edges denominate non-quote connectors in quote terms
        for bridge in self.connectors.bridges:
            best = self._select_best(context, bridge, quote, None, report)
            if best is None:
                continue
            edge, mean_tick = best
            edges[(bridge, quote)] = edge
            pool = self.registry.get(edge.pool)
            assert pool is not None  # Candidates come from the registry
            anchors[bridge] = Anchor(pool=pool, mean_tick=mean_tick)

        for token in tokens:
            for connector in self.connectors:
                best = self._select_best(context, token, connector, anchors.get(connector), report)
                if best is not None:
                    edges[(token, connector)] = best[0]

        return edges

    def _select_best(
        self,
        context: ExchangeContext,
        token: str,
        connector: str,
        anchor: Anchor | None,
        report: RefreshReport,
    ) -> tuple[PoolEdge, int] | None:
        """Score every candidate pool for a pair and keep the highest score.

        Ties keep the earliest candidate in tier order.

        Returns:
            (edge, TWAP mean tick of the chosen pool), or None if nothing qualified
        """
        best: tuple[PoolEdge, int] | None = None
        for pool in self.registry.candidates(context, token, connector):
            result = score_candidate(
                pool, token, connector, self.connectors.quote, self.config, anchor
            )
            if not result.is_ok:
                assert result.reason is not None
                report.failures.append(
                    ScoreFailure(
                        factory=context.factory,
                        pool=normalize_address(pool.address),
                        token=token,
                        connector=connector,
                        reason=result.reason,
                        detail=result.detail,
                    )
                )
                logger.info(
                    "candidate_disqualified",
                    exchange=context.name,
                    pool=short(pool.address),
                    token=short(token),
                    connector=short(connector),
                    reason=result.reason.value,
                    detail=result.detail,
                )
                continue

            assert result.score is not None and result.mean_tick is not None
            if best is None or result.score > best[0].score:
                best = (
                    PoolEdge(pool=normalize_address(pool.address), score=result.score),
                    result.mean_tick,
                )

        if best is not None:
            logger.debug(
                "edge_selected",
                exchange=context.name,
                token=short(token),
                connector=short(connector),
                pool=short(best[0].pool),
                score=best[0].score,
            )
        return best

    # =========================================================================
    # Read access
    # =========================================================================

    def edge(self, context: ExchangeContext, token: str, connector: str) -> PoolEdge | None:
        """Cached edge for (token, connector), or None if unknown."""
        edges = self._edges.get(context.factory, {})
        return edges.get((normalize_address(token), normalize_address(connector)))

    def edges(self, context: ExchangeContext) -> dict[tuple[str, str], PoolEdge]:
        """Copy of all cached edges for a context."""
        return dict(self._edges.get(context.factory, {}))

    def _lookup(self, edges: EdgeMap, token_a: str, token_b: str) -> PoolEdge | None:
        """Edge joining two tokens, if one of them is a connector."""
        edge = None
        if self.connectors.is_connector(token_b):
            edge = edges.get((token_a, token_b))
        if edge is None and self.connectors.is_connector(token_a):
            edge = edges.get((token_b, token_a))
        if edge is not None and not self.registry.is_allowlisted(edge.pool):
            logger.debug("edge_pool_not_allowlisted", pool=short(edge.pool))
            return None
        return edge

    # =========================================================================
    # Queries
    # =========================================================================

    def best_route(self, context: ExchangeContext, token_in: str, token_out: str) -> Route:
        """Choose the pool(s) to swap token_in into token_out.

        A direct edge is used when one endpoint is a connector and the edge
        exists; otherwise the best two-hop route through one connector wins by
        minimum hop score. Every pool is re-checked against the allowlist.

        Raises:
            ValueError: If token_in and token_out are the same token
            RouteNotFoundError: If no usable route exists
        """
        token_in = normalize_address(token_in)
        token_out = normalize_address(token_out)
        if token_in == token_out:
            raise ValueError(f"Cannot route {token_in} to itself")

        edges = self._edges.get(context.factory, {})

        if self.connectors.is_connector(token_in) or self.connectors.is_connector(token_out):
            direct = self._lookup(edges, token_in, token_out)
            if direct is not None:
                return Route(hops=(RouteHop(direct.pool, token_in, token_out, direct.score),))

        best: Route | None = None
        for connector in self.connectors:
            if connector in (token_in, token_out):
                continue
            first = self._lookup(edges, token_in, connector)
            if first is None:
                continue
            second = self._lookup(edges, connector, token_out)
            if second is None:
                continue
            route = Route(
                hops=(
                    RouteHop(first.pool, token_in, connector, first.score),
                    RouteHop(second.pool, connector, token_out, second.score),
                )
            )
            if best is None or route.score > best.score:
                best = route

        if best is None:
            logger.info(
                "route_not_found",
                exchange=context.name,
                token_in=short(token_in),
                token_out=short(token_out),
            )
            raise RouteNotFoundError(
                f"No route from {token_in} to {token_out} on {context.name}"
            )
        return best

    def convert(
        self, context: ExchangeContext, token_in: str, token_out: str, amount: int
    ) -> int:
        """Convert an amount along the best route using TWAP prices only.

        Raises:
            RouteNotFoundError: If no usable route exists
            OracleError: If a route pool's TWAP cannot be read
        """
        if normalize_address(token_in) == normalize_address(token_out):
            return amount

        route = self.best_route(context, token_in, token_out)
        for hop in route.hops:
            pool = self.registry.get(hop.pool)
            if pool is None:
                raise RouteNotFoundError(f"Route pool {hop.pool} is no longer registered")
            mean_tick = consult(pool, self.config.twap_window).arithmetic_mean_tick
            amount = quote_through_pool(pool, mean_tick, amount, hop.token_in)
        return amount

    def value(self, context: ExchangeContext, token: str, amount: int) -> int:
        """Value `amount` of `token` in the quote currency.

        Identity for the quote currency. A legitimately tiny amount may value
        to zero.

        Raises:
            RouteNotFoundError: If the token has no route to the quote currency
            OracleError: If a route pool's TWAP cannot be read
        """
        if self.connectors.is_quote(token):
            return amount
        return self.convert(context, token, self.connectors.quote, amount)


__all__ = ["RouteCache"]
