"""Tests for exchange contexts."""

import pytest

from clmm.exchanges import (
    AERODROME_SLIPSTREAM_FACTORY,
    SLIPSTREAM_TICK_SPACINGS,
    UNISWAP_V3_FACTORY,
    V3_FEE_TIERS,
    ExchangeContext,
    FeeTiered,
    SpacingTiered,
    slipstream,
    uniswap_v3,
)


class TestDefaults:
    def test_uniswap_v3_fee_tiers(self):
        context = uniswap_v3()
        assert context.factory == UNISWAP_V3_FACTORY
        assert context.is_fee_tiered
        assert context.tier_values() == (100, 500, 3000, 10000)
        assert V3_FEE_TIERS == (100, 500, 3000, 10000)

    def test_slipstream_tick_spacings(self):
        context = slipstream()
        assert context.factory == AERODROME_SLIPSTREAM_FACTORY
        assert not context.is_fee_tiered
        assert context.tier_values() == (1, 50, 100, 200, 2000)
        assert SLIPSTREAM_TICK_SPACINGS == (1, 50, 100, 200, 2000)


class TestExchangeContext:
    def test_factory_normalized(self):
        context = ExchangeContext("x", "0x" + "AB" * 20, FeeTiered())
        assert context.factory == "0x" + "ab" * 20

    def test_empty_fee_tiers_rejected(self):
        with pytest.raises(ValueError, match="no fee tiers"):
            ExchangeContext("x", UNISWAP_V3_FACTORY, FeeTiered(fees=()))

    def test_empty_spacings_rejected(self):
        with pytest.raises(ValueError, match="no tick spacings"):
            ExchangeContext("x", AERODROME_SLIPSTREAM_FACTORY, SpacingTiered(spacings=()))

    def test_unknown_variant_rejected(self):
        with pytest.raises(TypeError):
            ExchangeContext("x", UNISWAP_V3_FACTORY, (100, 500))  # type: ignore[arg-type]

    def test_supports_fee_tiered_ignores_spacing(self):
        context = uniswap_v3()
        assert context.supports(3000, 60)
        assert context.supports(3000, 1)
        assert not context.supports(2500, 60)

    def test_supports_spacing_tiered_ignores_fee(self):
        context = slipstream()
        assert context.supports(500, 100)
        assert context.supports(1234, 100)
        assert not context.supports(500, 60)

    def test_immutable(self):
        context = uniswap_v3()
        with pytest.raises(AttributeError):
            context.name = "other"  # type: ignore[misc]
