"""Tests for TWAP band-depth scoring."""

import pytest

from clmm.amm.oracle import consult, get_quote_at_tick
from clmm.config import OracleConfig
from clmm.math.tick_math import MAX_TICK, MIN_TICK
from clmm.pricing import Anchor, ScoreFailureReason, band_depths, score_candidate
from tests.helpers import DAI, TICK_PRICE_TWO, USDC, WETH, make_pool

L = 10**18


def _band_factor(half_width: int) -> float:
    return 1.0001 ** (half_width / 2) - 1.0001 ** (-half_width / 2)


class TestBandDepths:
    def test_tick_zero_regression(self):
        """At T=0 both sides hold L * (1.0001^25 - 1.0001^-25)."""
        depth0, depth1 = band_depths(0, 50, L)
        expected = L * _band_factor(50)

        assert depth0 == pytest.approx(expected, rel=1e-9)
        assert depth1 == pytest.approx(expected, rel=1e-9)

    @pytest.mark.parametrize("mean_tick", [-200_000, -6932, 6932, 200_000])
    def test_closed_form_at_mean_tick(self, mean_tick):
        """token1 = L*sqrt(P)*f, token0 = L/sqrt(P)*f with f the band factor."""
        depth0, depth1 = band_depths(mean_tick, 50, L)
        sqrt_price = 1.0001 ** (mean_tick / 2)

        assert depth1 == pytest.approx(L * sqrt_price * _band_factor(50), rel=1e-6)
        assert depth0 == pytest.approx(L / sqrt_price * _band_factor(50), rel=1e-6)

    def test_rounds_down(self):
        assert band_depths(0, 50, 1) == (0, 0)

    def test_clamped_at_tick_bounds(self):
        """A band past MAX_TICK is truncated, not rejected."""
        depth0, depth1 = band_depths(MAX_TICK - 10, 50, L)
        assert depth0 >= 0
        assert depth1 > 0
        assert band_depths(MIN_TICK, 50, L)[0] > 0

    def test_wider_band_is_deeper(self):
        narrow = band_depths(0, 50, L)
        wide = band_depths(0, 200, L)
        assert wide[0] > narrow[0]
        assert wide[1] > narrow[1]


class TestScoreCandidate:
    @pytest.fixture
    def config(self) -> OracleConfig:
        return OracleConfig()

    def test_quote_connector_score(self, config):
        pool = make_pool(DAI, USDC, tick=0, liquidity=L)
        result = score_candidate(pool, DAI, USDC, USDC, config)

        liquidity = consult(pool, 60).harmonic_mean_liquidity
        depth0, depth1 = band_depths(0, 50, liquidity)
        assert result.is_ok
        assert result.mean_tick == 0
        # Quote at tick 0 is identity, so the score is the thinner raw side
        assert result.score == min(depth0, depth1)

    def test_token_as_token1(self, config):
        pool = make_pool(USDC, DAI, tick=TICK_PRICE_TWO, liquidity=L)
        result = score_candidate(pool, DAI, USDC, USDC, config)

        liquidity = consult(pool, 60).harmonic_mean_liquidity
        depth0, depth1 = band_depths(TICK_PRICE_TWO, 50, liquidity)
        token_value = get_quote_at_tick(TICK_PRICE_TWO, depth1, base_is_token0=False)
        assert result.score == min(token_value, depth0)

    def test_score_monotonic_in_liquidity(self, config):
        scores = [
            score_candidate(make_pool(DAI, USDC, liquidity=liq), DAI, USDC, USDC, config).score
            for liq in (10**18, 2 * 10**18, 10**20)
        ]
        assert scores == sorted(scores)
        assert len(set(scores)) == 3

    def test_scores_use_twap_liquidity(self, config):
        """Spot liquidity does not move the score."""
        honest = make_pool(DAI, USDC, liquidity=L)
        inflated = make_pool(DAI, USDC, liquidity=1000 * L, twap_liquidity=L)

        assert (
            score_candidate(honest, DAI, USDC, USDC, config).score
            == score_candidate(inflated, DAI, USDC, USDC, config).score
        )

    def test_anchored_connector(self, config):
        pool = make_pool(DAI, WETH, tick=0, liquidity=L)
        anchor_pool = make_pool(WETH, USDC, fee=500, tick=TICK_PRICE_TWO)
        anchor = Anchor(pool=anchor_pool, mean_tick=TICK_PRICE_TWO)

        result = score_candidate(pool, DAI, WETH, USDC, config, anchor)

        liquidity = consult(pool, 60).harmonic_mean_liquidity
        depth0, depth1 = band_depths(0, 50, liquidity)
        expected = min(
            get_quote_at_tick(TICK_PRICE_TWO, depth0, True),
            get_quote_at_tick(TICK_PRICE_TWO, depth1, True),
        )
        assert result.is_ok
        assert result.score == expected

    def test_missing_anchor(self, config):
        pool = make_pool(DAI, WETH)
        result = score_candidate(pool, DAI, WETH, USDC, config, anchor=None)

        assert not result.is_ok
        assert result.reason is ScoreFailureReason.MISSING_ANCHOR
        # Rejected before touching the oracle
        assert pool.observe_calls == []

    def test_oracle_failure(self, config):
        pool = make_pool(DAI, USDC, observation_age=30)
        result = score_candidate(pool, DAI, USDC, USDC, config)
        assert result.reason is ScoreFailureReason.ORACLE_FAILURE
        assert result.score is None

    def test_tick_out_of_range(self, config):
        pool = make_pool(DAI, USDC, twap_tick=MIN_TICK - 1)
        result = score_candidate(pool, DAI, USDC, USDC, config)
        assert result.reason is ScoreFailureReason.TICK_OUT_OF_RANGE

    def test_zero_liquidity(self, config):
        pool = make_pool(DAI, USDC, twap_liquidity=0)
        result = score_candidate(pool, DAI, USDC, USDC, config)
        assert result.reason is ScoreFailureReason.ZERO_LIQUIDITY

    def test_zero_value(self, config):
        """Dust liquidity holds less than one raw unit across the band."""
        pool = make_pool(DAI, USDC, liquidity=10)
        result = score_candidate(pool, DAI, USDC, USDC, config)
        assert result.reason is ScoreFailureReason.ZERO_VALUE

    def test_band_width_from_config(self):
        pool = make_pool(DAI, USDC, liquidity=L)
        narrow = score_candidate(pool, DAI, USDC, USDC, OracleConfig(band_half_width=10))
        wide = score_candidate(pool, DAI, USDC, USDC, OracleConfig(band_half_width=500))
        assert wide.score > narrow.score
