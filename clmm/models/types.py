"""Address and integer-amount types shared across the core."""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

UINT128_MAX = 2**128 - 1
UINT256_MAX = 2**256 - 1

ZERO_ADDRESS = "0x" + "0" * 40

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def validate_uint256(value: Any) -> int:
    """Coerce a token amount to int and check it fits in uint256.

    Decimal strings are accepted; bools and floats are not.

    Raises:
        ValueError: If value is not a valid uint256
    """
    if isinstance(value, str):
        try:
            value = int(value, 10)
        except ValueError as err:
            raise ValueError(f"Amount is not a decimal integer: '{value}'") from err
    elif isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Amount must be an int or decimal string, got {type(value).__name__}")
    if not 0 <= value <= UINT256_MAX:
        raise ValueError(f"Amount {value} is outside the uint256 range")
    return value


# 0x-prefixed 20-byte hex address, lowercased before pattern validation
Address = Annotated[
    str,
    Field(pattern=_ADDRESS_RE.pattern),
    BeforeValidator(lambda v: v.lower() if isinstance(v, str) else v),
]

# Raw token amount in the token's smallest unit
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="Raw token amount (uint256)"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address and ensure it carries the 0x prefix.

    Raises:
        ValueError: If validate is set and the result is not a valid address
    """
    normalized = address.lower()
    if not normalized.startswith("0x"):
        normalized = f"0x{normalized}"
    if validate and not is_valid_address(normalized):
        raise ValueError(f"Invalid address: {address}")
    return normalized


def is_valid_address(address: str) -> bool:
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def is_zero_address(address: str) -> bool:
    """True if the address is the zero address (any case, any prefix)."""
    return normalize_address(address) == ZERO_ADDRESS


def short(address: str) -> str:
    """Last 8 characters of an address, for log lines."""
    return address[-8:]
