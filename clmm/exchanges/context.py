"""Exchange contexts: one factory plus how its pools are enumerated.

Pool families differ only in how a (token, token) pair maps to candidate
pools: UniswapV3-style factories key pools by fee tier, Slipstream-style
factories by tick spacing. The variant is a tagged union so scoring and
routing share one code path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from clmm.models.types import normalize_address

from .constants import (
    AERODROME_SLIPSTREAM_FACTORY,
    SLIPSTREAM_TICK_SPACINGS,
    UNISWAP_V3_FACTORY,
    V3_FEE_TIERS,
)


@dataclass(frozen=True)
class FeeTiered:
    """Pools are enumerated by fee tier (pips)."""

    fees: tuple[int, ...] = V3_FEE_TIERS


@dataclass(frozen=True)
class SpacingTiered:
    """Pools are enumerated by tick spacing."""

    spacings: tuple[int, ...] = SLIPSTREAM_TICK_SPACINGS


TierVariant: TypeAlias = FeeTiered | SpacingTiered


@dataclass(frozen=True)
class ExchangeContext:
    """One exchange family, identified by its pool factory.

    Attributes:
        name: Human-readable label (logging only)
        factory: Pool factory address; the context's identity
        tiers: FeeTiered or SpacingTiered enumeration of candidate pools
    """

    name: str
    factory: str
    tiers: TierVariant

    def __post_init__(self) -> None:
        object.__setattr__(self, "factory", normalize_address(self.factory))
        if isinstance(self.tiers, FeeTiered):
            if not self.tiers.fees:
                raise ValueError(f"Exchange {self.name} has no fee tiers")
        elif isinstance(self.tiers, SpacingTiered):
            if not self.tiers.spacings:
                raise ValueError(f"Exchange {self.name} has no tick spacings")
        else:
            raise TypeError(f"Unknown tier variant: {type(self.tiers)}")

    @property
    def is_fee_tiered(self) -> bool:
        return isinstance(self.tiers, FeeTiered)

    def tier_values(self) -> tuple[int, ...]:
        """Fee tiers or tick spacings, in enumeration order."""
        if isinstance(self.tiers, FeeTiered):
            return self.tiers.fees
        return self.tiers.spacings

    def supports(self, fee: int, tick_spacing: int) -> bool:
        """True if a pool with this fee and spacing belongs to an enumerated tier."""
        if isinstance(self.tiers, FeeTiered):
            return fee in self.tiers.fees
        return tick_spacing in self.tiers.spacings


def uniswap_v3(factory: str = UNISWAP_V3_FACTORY) -> ExchangeContext:
    """Fee-tiered context with the standard UniswapV3 tiers."""
    return ExchangeContext(name="uniswap_v3", factory=factory, tiers=FeeTiered())


def slipstream(factory: str = AERODROME_SLIPSTREAM_FACTORY) -> ExchangeContext:
    """Spacing-tiered context with the standard Slipstream spacings."""
    return ExchangeContext(name="slipstream", factory=factory, tiers=SpacingTiered())


__all__ = [
    "ExchangeContext",
    "FeeTiered",
    "SpacingTiered",
    "TierVariant",
    "uniswap_v3",
    "slipstream",
]
