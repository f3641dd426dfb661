"""Tick <-> sqrt price conversion (UniswapV3 TickMath).

price = 1.0001^tick, sqrt_price_x96 = sqrt(price) * 2^96. Integer-only so the
results match the on-chain library bit for bit.
"""

from __future__ import annotations

from clmm.errors import SqrtPriceOutOfRange, TickOutOfRange

MIN_TICK = -887272
MAX_TICK = -MIN_TICK

# get_sqrt_ratio_at_tick(MIN_TICK) and get_sqrt_ratio_at_tick(MAX_TICK)
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342

_UINT256_MAX = 2**256 - 1

# 1 / sqrt(1.0001)^(2^i) in Q128.128, for i = 1..19
_RATIO_FACTORS = (
    (0x2, 0xFFF97272373D413259A46990580E213A),
    (0x4, 0xFFF2E50F5F656932EF12357CF3C7FDCC),
    (0x8, 0xFFE5CACA7E10E4E61C3624EAA0941CD0),
    (0x10, 0xFFCB9843D60F6159C9DB58835C926644),
    (0x20, 0xFF973B41FA98C081472E6896DFB254C0),
    (0x40, 0xFF2EA16466C96A3843EC78B326B52861),
    (0x80, 0xFE5DEE046A99A2A811C461F1969C3053),
    (0x100, 0xFCBE86C7900A88AEDCFFC83B479AA3A4),
    (0x200, 0xF987A7253AC413176F2B074CF7815E54),
    (0x400, 0xF3392B0822B70005940C7A398E4B70F3),
    (0x800, 0xE7159475A2C29B7443B29C7FA6E889D9),
    (0x1000, 0xD097F3BDFD2022B8845AD8F792AA5825),
    (0x2000, 0xA9F746462D870FDF8A65DC1F90E061E5),
    (0x4000, 0x70D869A156D2A1B890BB3DF62BAF32F7),
    (0x8000, 0x31BE135F97D08FD981231505542FCFA6),
    (0x10000, 0x9AA508B5B7A84E1C677DE54F3E99BC9),
    (0x20000, 0x5D6AF8DEDB81196699C329225EE604),
    (0x40000, 0x2216E584F5FA1EA926041BEDFE98),
    (0x80000, 0x48A170391F7DC42444E8FA2),
)


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """Compute sqrt(1.0001^tick) * 2^96, rounded up.

    Raises:
        TickOutOfRange: If tick is outside [MIN_TICK, MAX_TICK]
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise TickOutOfRange(f"Tick {tick} out of bounds [{MIN_TICK}, {MAX_TICK}]")

    abs_tick = abs(tick)
    ratio = (
        0xFFFCB933BD6FAD37AA2D162D1A594001
        if abs_tick & 0x1
        else 0x100000000000000000000000000000000
    )
    for bit, factor in _RATIO_FACTORS:
        if abs_tick & bit:
            ratio = (ratio * factor) >> 128

    if tick > 0:
        ratio = _UINT256_MAX // ratio

    # Q128.128 -> Q64.96, rounding up so get_tick_at_sqrt_ratio inverts exactly
    return (ratio >> 32) + (1 if ratio % (1 << 32) else 0)


def get_tick_at_sqrt_ratio(sqrt_price_x96: int) -> int:
    """Greatest tick whose sqrt ratio is <= sqrt_price_x96.

    Raises:
        SqrtPriceOutOfRange: If sqrt_price_x96 is outside [MIN_SQRT_RATIO, MAX_SQRT_RATIO)
    """
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise SqrtPriceOutOfRange(f"sqrt_price_x96 {sqrt_price_x96} out of bounds")

    lo, hi = MIN_TICK, MAX_TICK
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if get_sqrt_ratio_at_tick(mid) <= sqrt_price_x96:
            lo = mid
        else:
            hi = mid - 1
    return lo


def is_valid_tick(tick: int) -> bool:
    """True if tick lies within [MIN_TICK, MAX_TICK]."""
    return MIN_TICK <= tick <= MAX_TICK


def clamp_tick(tick: int) -> int:
    """Clamp a tick to the global tick bounds."""
    return max(MIN_TICK, min(MAX_TICK, tick))


__all__ = [
    "MIN_TICK",
    "MAX_TICK",
    "MIN_SQRT_RATIO",
    "MAX_SQRT_RATIO",
    "get_sqrt_ratio_at_tick",
    "get_tick_at_sqrt_ratio",
    "is_valid_tick",
    "clamp_tick",
]
