"""Pool registry: tracked pools, allowlist membership and factory lookup.

The registry plays the external pool-registry and exchange-adapter roles for
the pricing core:
- enumerates allowlisted pools for cache refresh
- answers the allowlist predicate at refresh and at query time
- resolves (factory, token pair, fee tier | tick spacing) to a pool the way
  an on-chain factory's getPool does
"""

from __future__ import annotations

from collections import defaultdict

import structlog

from clmm.amm.pool import PoolReader
from clmm.exchanges.context import ExchangeContext, FeeTiered
from clmm.models.types import normalize_address, short

logger = structlog.get_logger()


def _pair_key(token_a: str, token_b: str) -> tuple[str, str]:
    """Canonical (lower, higher) ordering of a token pair."""
    a = normalize_address(token_a)
    b = normalize_address(token_b)
    if a > b:
        a, b = b, a
    return a, b


class PoolRegistry:
    """Registry of concentrated-liquidity pools across exchange contexts.

    Pools are registered once and may be allowlisted or revoked independently.
    Lookups by fee tier or tick spacing return a pool whether or not it is
    allowlisted; callers check `is_allowlisted` where membership matters.
    """

    def __init__(
        self,
        pools: list[PoolReader] | None = None,
        exchanges: list[ExchangeContext] | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            pools: Initial pools; all are allowlisted on registration
            exchanges: Exchange contexts, keyed by factory
        """
        self._pools: dict[str, PoolReader] = {}
        self._allowlist: set[str] = set()
        self._exchanges: dict[str, ExchangeContext] = {}
        # (factory, token_lo, token_hi, fee) -> pool address
        self._by_fee: dict[tuple[str, str, str, int], str] = {}
        # (factory, token_lo, token_hi, tick_spacing) -> pool address
        self._by_spacing: dict[tuple[str, str, str, int], str] = {}

        for context in exchanges or []:
            self.register_exchange(context)
        for pool in pools or []:
            self.add_pool(pool)

    # --- Exchanges ---

    def register_exchange(self, context: ExchangeContext) -> None:
        self._exchanges[context.factory] = context

    def exchange(self, factory: str) -> ExchangeContext | None:
        """Get the exchange context for a factory address."""
        return self._exchanges.get(normalize_address(factory))

    def exchanges(self) -> list[ExchangeContext]:
        return list(self._exchanges.values())

    # --- Pools ---

    def add_pool(self, pool: PoolReader, allowlisted: bool = True) -> None:
        """Register a pool, replacing any pool at the same address.

        Args:
            pool: The pool to add
            allowlisted: Whether to allowlist the pool immediately
        """
        address = normalize_address(pool.address)
        factory = normalize_address(pool.factory)
        token_lo, token_hi = _pair_key(pool.token0, pool.token1)

        if address in self._pools:
            logger.debug("pool_replaced", pool=short(address))
        self._pools[address] = pool
        self._by_fee[(factory, token_lo, token_hi, pool.fee)] = address
        self._by_spacing[(factory, token_lo, token_hi, pool.tick_spacing)] = address

        if allowlisted:
            self._allowlist.add(address)

    def get(self, address: str) -> PoolReader | None:
        return self._pools.get(normalize_address(address))

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    # --- Allowlist ---

    def allowlist(self, address: str) -> None:
        """Allowlist a registered pool.

        Raises:
            KeyError: If the pool is not registered
        """
        address = normalize_address(address)
        if address not in self._pools:
            raise KeyError(f"Pool {address} is not registered")
        self._allowlist.add(address)

    def revoke(self, address: str) -> None:
        """Remove a pool from the allowlist (the pool stays registered)."""
        self._allowlist.discard(normalize_address(address))

    def is_allowlisted(self, address: str) -> bool:
        return normalize_address(address) in self._allowlist

    def allowlisted_pools(self) -> list[PoolReader]:
        """All allowlisted pools, in registration order."""
        return [pool for address, pool in self._pools.items() if address in self._allowlist]

    def allowlisted_by_factory(self) -> dict[str, list[PoolReader]]:
        """Allowlisted pools grouped by factory address."""
        grouped: dict[str, list[PoolReader]] = defaultdict(list)
        for pool in self.allowlisted_pools():
            grouped[normalize_address(pool.factory)].append(pool)
        return dict(grouped)

    # --- Factory-style lookup ---

    def find_pool(
        self, context: ExchangeContext, token_a: str, token_b: str, tier: int
    ) -> PoolReader | None:
        """Resolve a pool for a pair and one fee tier or tick spacing.

        Args:
            context: Exchange whose factory to search
            token_a: First token (any order, any case)
            token_b: Second token
            tier: Fee in pips for fee-tiered contexts, tick spacing otherwise
        """
        token_lo, token_hi = _pair_key(token_a, token_b)
        key = (context.factory, token_lo, token_hi, tier)
        index = self._by_fee if isinstance(context.tiers, FeeTiered) else self._by_spacing
        address = index.get(key)
        if address is None:
            return None
        return self._pools.get(address)

    def candidates(self, context: ExchangeContext, token_a: str, token_b: str) -> list[PoolReader]:
        """Allowlisted pools for a pair across every tier of the context, in tier order."""
        found: list[PoolReader] = []
        for tier in context.tier_values():
            pool = self.find_pool(context, token_a, token_b, tier)
            if pool is not None and self.is_allowlisted(pool.address):
                found.append(pool)
        return found


__all__ = ["PoolRegistry"]
