"""Error classes for the pricing/routing core and rebalance solver.

Errors fall into four groups:
- configuration errors (fatal, never retried)
- routing/valuation gaps (fatal to the calling operation)
- oracle and pool-math faults (fatal to the single call)
- rebalance request validation errors
"""


class ClmmError(Exception):
    """Base error for all clmm operations."""

    pass


class ConfigurationError(ClmmError):
    """A required collaborator or parameter is missing or invalid."""

    pass


class RouteNotFoundError(ClmmError):
    """No cached or discoverable route between two tokens."""

    pass


class OracleError(ClmmError):
    """A TWAP observation could not be read or is unusable."""

    pass


class TwapTickOutOfRange(OracleError):
    """Arithmetic mean tick falls outside [MIN_TICK, MAX_TICK]."""

    pass


# =============================================================================
# Pool math
# =============================================================================


class PoolMathError(ClmmError, ArithmeticError):
    """Base error for fixed-point AMM math."""

    pass


class DivisionByZero(PoolMathError):
    """Division or mul_div by zero."""

    pass


class MulDivOverflow(PoolMathError):
    """Result does not fit in uint256."""

    pass


class TickOutOfRange(PoolMathError):
    """Tick is outside [MIN_TICK, MAX_TICK]."""

    pass


class SqrtPriceOutOfRange(PoolMathError):
    """Sqrt price is outside [MIN_SQRT_RATIO, MAX_SQRT_RATIO) or above uint160."""

    pass


class InsufficientLiquidity(PoolMathError):
    """Requested output exceeds what the liquidity can supply."""

    pass


# =============================================================================
# Rebalance request validation
# =============================================================================


class ZeroAddressError(ClmmError, ValueError):
    """A token or pool address is the zero address."""

    pass


class PoolNotFoundError(ClmmError):
    """Pool is unknown to the registry or not allowlisted."""

    pass


class UnsupportedPoolError(ClmmError):
    """Pool tokens do not match, or neither token is a connector."""

    pass


class InvalidTickRangeError(ClmmError, ValueError):
    """Tick range is empty, out of bounds, or not aligned to tick spacing."""

    pass


class FeeLookupError(ClmmError):
    """Pool fee or tick spacing could not be determined."""

    pass


__all__ = [
    "ClmmError",
    "ConfigurationError",
    "RouteNotFoundError",
    "OracleError",
    "TwapTickOutOfRange",
    "PoolMathError",
    "DivisionByZero",
    "MulDivOverflow",
    "TickOutOfRange",
    "SqrtPriceOutOfRange",
    "InsufficientLiquidity",
    "ZeroAddressError",
    "PoolNotFoundError",
    "UnsupportedPoolError",
    "InvalidTickRangeError",
    "FeeLookupError",
]
