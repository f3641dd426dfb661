"""Connector currencies: the quote currency plus up to three bridge tokens."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from clmm.constants import MAX_BRIDGE_CONNECTORS
from clmm.errors import ConfigurationError
from clmm.models.types import is_valid_address, is_zero_address, normalize_address


@dataclass(frozen=True)
class ConnectorSet:
    """Tokens usable as routing hops.

    Membership is fixed for the lifetime of an instance; a configuration
    change produces a new ConnectorSet.

    Attributes:
        quote: Canonical settlement/accounting currency
        bridges: Additional connectors (at most three), e.g. WETH or WBTC
    """

    quote: str
    bridges: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        quote = normalize_address(self.quote)
        bridges = tuple(normalize_address(b) for b in self.bridges)

        for token in (quote, *bridges):
            if not is_valid_address(token) or is_zero_address(token):
                raise ConfigurationError(f"Invalid connector address: {token}")
        if len(bridges) > MAX_BRIDGE_CONNECTORS:
            raise ConfigurationError(
                f"At most {MAX_BRIDGE_CONNECTORS} bridge connectors allowed, got {len(bridges)}"
            )
        if len(set(bridges)) != len(bridges) or quote in bridges:
            raise ConfigurationError("Connector set contains duplicates")

        object.__setattr__(self, "quote", quote)
        object.__setattr__(self, "bridges", bridges)

    def __iter__(self) -> Iterator[str]:
        """Quote currency first, then bridges in configured order."""
        yield self.quote
        yield from self.bridges

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and self.is_connector(token)

    def __len__(self) -> int:
        return 1 + len(self.bridges)

    def is_connector(self, token: str) -> bool:
        token_norm = normalize_address(token)
        return token_norm == self.quote or token_norm in self.bridges

    def is_quote(self, token: str) -> bool:
        return normalize_address(token) == self.quote


__all__ = ["ConnectorSet"]
