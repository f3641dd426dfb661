"""Exchange contexts (fee-tiered and spacing-tiered pool families)."""

from .constants import (
    AERODROME_SLIPSTREAM_FACTORY,
    SLIPSTREAM_TICK_SPACINGS,
    UNISWAP_V3_FACTORY,
    V3_FEE_HIGH,
    V3_FEE_LOW,
    V3_FEE_LOWEST,
    V3_FEE_MEDIUM,
    V3_FEE_TIERS,
)
from .context import (
    ExchangeContext,
    FeeTiered,
    SpacingTiered,
    TierVariant,
    slipstream,
    uniswap_v3,
)

__all__ = [
    "ExchangeContext",
    "FeeTiered",
    "SpacingTiered",
    "TierVariant",
    "uniswap_v3",
    "slipstream",
    "V3_FEE_LOWEST",
    "V3_FEE_LOW",
    "V3_FEE_MEDIUM",
    "V3_FEE_HIGH",
    "V3_FEE_TIERS",
    "SLIPSTREAM_TICK_SPACINGS",
    "UNISWAP_V3_FACTORY",
    "AERODROME_SLIPSTREAM_FACTORY",
]
