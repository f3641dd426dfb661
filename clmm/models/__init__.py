"""Shared model types."""

from clmm.models.types import (
    UINT128_MAX,
    UINT256_MAX,
    ZERO_ADDRESS,
    Address,
    Uint256,
    is_valid_address,
    is_zero_address,
    normalize_address,
    short,
    validate_uint256,
)

__all__ = [
    "Address",
    "Uint256",
    "UINT128_MAX",
    "UINT256_MAX",
    "ZERO_ADDRESS",
    "is_valid_address",
    "is_zero_address",
    "normalize_address",
    "short",
    "validate_uint256",
]
