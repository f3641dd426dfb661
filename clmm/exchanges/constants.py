"""Fee tiers, tick spacings and factory addresses per exchange family."""

from clmm.models.types import is_valid_address

# UniswapV3-style fee tiers in pips (hundredths of a basis point)
# Fee = units / 1,000,000 (e.g., 3000 = 0.3%)
V3_FEE_LOWEST = 100  # 0.01% - stable pairs
V3_FEE_LOW = 500  # 0.05% - stable pairs
V3_FEE_MEDIUM = 3000  # 0.30% - most pairs
V3_FEE_HIGH = 10000  # 1.00% - exotic pairs

V3_FEE_TIERS = (V3_FEE_LOWEST, V3_FEE_LOW, V3_FEE_MEDIUM, V3_FEE_HIGH)

# Slipstream-style pools are keyed by tick spacing; fee is a per-pool setting
SLIPSTREAM_TICK_SPACINGS = (1, 50, 100, 200, 2000)


def _validate_factory_address(name: str, address: str) -> str:
    """Validate and return a factory address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Validated at import time
UNISWAP_V3_FACTORY = _validate_factory_address(
    "UNISWAP_V3_FACTORY", "0x1f98431c8ad98523631ae4a59f267346ea31f984"
)
AERODROME_SLIPSTREAM_FACTORY = _validate_factory_address(
    "AERODROME_SLIPSTREAM_FACTORY", "0x5e7bb104d84c7cb9b682aac2f3d509f5f406809a"
)

__all__ = [
    "V3_FEE_LOWEST",
    "V3_FEE_LOW",
    "V3_FEE_MEDIUM",
    "V3_FEE_HIGH",
    "V3_FEE_TIERS",
    "SLIPSTREAM_TICK_SPACINGS",
    "UNISWAP_V3_FACTORY",
    "AERODROME_SLIPSTREAM_FACTORY",
]
