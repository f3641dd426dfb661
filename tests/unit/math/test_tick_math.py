"""Tests for tick <-> sqrt price conversion."""

import pytest

from clmm.errors import SqrtPriceOutOfRange, TickOutOfRange
from clmm.math.tick_math import (
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
    clamp_tick,
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    is_valid_tick,
)

Q96 = 2**96


class TestGetSqrtRatioAtTick:
    def test_tick_zero_is_one(self):
        assert get_sqrt_ratio_at_tick(0) == Q96

    def test_min_tick(self):
        assert get_sqrt_ratio_at_tick(MIN_TICK) == MIN_SQRT_RATIO

    def test_max_tick(self):
        assert get_sqrt_ratio_at_tick(MAX_TICK) == MAX_SQRT_RATIO

    @pytest.mark.parametrize("tick", [-200_000, -6932, -50, -1, 1, 50, 6932, 200_000])
    def test_matches_closed_form(self, tick):
        """sqrt(1.0001^tick) * 2^96."""
        expected = 1.0001 ** (tick / 2)
        assert get_sqrt_ratio_at_tick(tick) / Q96 == pytest.approx(expected, rel=1e-9)

    def test_monotonic(self):
        ticks = [-1000, -1, 0, 1, 1000]
        ratios = [get_sqrt_ratio_at_tick(t) for t in ticks]
        assert ratios == sorted(ratios)
        assert len(set(ratios)) == len(ratios)

    @pytest.mark.parametrize("tick", [MIN_TICK - 1, MAX_TICK + 1])
    def test_out_of_range_raises(self, tick):
        with pytest.raises(TickOutOfRange):
            get_sqrt_ratio_at_tick(tick)


class TestGetTickAtSqrtRatio:
    def test_one_is_tick_zero(self):
        assert get_tick_at_sqrt_ratio(Q96) == 0

    def test_min_sqrt_ratio(self):
        assert get_tick_at_sqrt_ratio(MIN_SQRT_RATIO) == MIN_TICK

    def test_just_below_max(self):
        assert get_tick_at_sqrt_ratio(MAX_SQRT_RATIO - 1) == MAX_TICK - 1

    @pytest.mark.parametrize("tick", [MIN_TICK, -200_000, -1, 1, 6932, 200_000, MAX_TICK - 1])
    def test_inverts_exact_ratio(self, tick):
        assert get_tick_at_sqrt_ratio(get_sqrt_ratio_at_tick(tick)) == tick

    def test_between_ticks_rounds_down(self):
        """Greatest tick whose ratio is <= the price."""
        assert get_tick_at_sqrt_ratio(get_sqrt_ratio_at_tick(101) - 1) == 100

    @pytest.mark.parametrize("sqrt_price", [MIN_SQRT_RATIO - 1, MAX_SQRT_RATIO])
    def test_out_of_range_raises(self, sqrt_price):
        with pytest.raises(SqrtPriceOutOfRange):
            get_tick_at_sqrt_ratio(sqrt_price)


class TestTickHelpers:
    def test_is_valid_tick(self):
        assert is_valid_tick(0)
        assert is_valid_tick(MIN_TICK)
        assert is_valid_tick(MAX_TICK)
        assert not is_valid_tick(MIN_TICK - 1)
        assert not is_valid_tick(MAX_TICK + 1)

    def test_clamp_tick(self):
        assert clamp_tick(MIN_TICK - 50) == MIN_TICK
        assert clamp_tick(MAX_TICK + 50) == MAX_TICK
        assert clamp_tick(123) == 123
