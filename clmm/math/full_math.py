"""Full-precision multiply-divide helpers.

Python integers are arbitrary precision, so the 512-bit intermediate of
Solidity's FullMath comes for free. What remains is the contract: the
denominator must be non-zero and the result must fit in uint256.
"""

from __future__ import annotations

from clmm.errors import DivisionByZero, MulDivOverflow
from clmm.models.types import UINT256_MAX


def mul_div(a: int, b: int, denominator: int) -> int:
    """Compute floor(a * b / denominator) with full precision.

    Raises:
        DivisionByZero: If denominator is zero
        MulDivOverflow: If the result exceeds uint256
    """
    if denominator == 0:
        raise DivisionByZero(f"mul_div by zero: {a} * {b} / 0")
    result = (a * b) // denominator
    if result > UINT256_MAX:
        raise MulDivOverflow(f"mul_div result exceeds uint256: {a} * {b} / {denominator}")
    return result


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """Compute ceil(a * b / denominator) with full precision.

    Raises:
        DivisionByZero: If denominator is zero
        MulDivOverflow: If the result exceeds uint256
    """
    if denominator == 0:
        raise DivisionByZero(f"mul_div_rounding_up by zero: {a} * {b} / 0")
    product = a * b
    result = product // denominator
    if product % denominator:
        result += 1
    if result > UINT256_MAX:
        raise MulDivOverflow(
            f"mul_div_rounding_up result exceeds uint256: {a} * {b} / {denominator}"
        )
    return result


def div_rounding_up(a: int, denominator: int) -> int:
    """Ceiling division for non-negative operands.

    Raises:
        DivisionByZero: If denominator is zero
    """
    if denominator == 0:
        raise DivisionByZero(f"div_rounding_up by zero: {a} / 0")
    return -(-a // denominator)


__all__ = ["mul_div", "mul_div_rounding_up", "div_rounding_up"]
