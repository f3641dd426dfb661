"""Tests for rebalance request and plan types."""

import pytest
from pydantic import ValidationError

from clmm.rebalance import RebalancePlan, RebalanceRequest
from tests.helpers import DAI, WETH


class TestRebalancePlan:
    def test_sell_token0(self):
        plan = RebalancePlan(WETH, DAI, 10, 0, 9, 0, 9)
        assert plan.zero_for_one
        assert plan.amount_in == 10
        assert plan.token_in == WETH
        assert plan.token_out == DAI
        assert not plan.is_noop

    def test_sell_token1(self):
        plan = RebalancePlan(WETH, DAI, 0, 10, 9, 9, 0)
        assert not plan.zero_for_one
        assert plan.token_in == DAI
        assert plan.token_out == WETH

    def test_noop(self):
        plan = RebalancePlan(WETH, DAI, 0, 0, 0, 5, 5)
        assert plan.is_noop
        assert plan.amount_in == 0
        assert plan.token_in is None
        assert plan.token_out is None

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            RebalancePlan(WETH, DAI, -1, 0, 0, 0, 0)


class TestRebalanceRequest:
    def test_normalizes_addresses_and_amounts(self):
        request = RebalanceRequest(
            pool="0x" + "AB" * 20,
            token_a=WETH.upper(),
            token_b=DAI,
            amount_a="1000",
            amount_b=0,
            tick_lower=-60,
            tick_upper=60,
        )
        assert request.pool == "0x" + "ab" * 20
        assert request.token_a == WETH
        assert request.amount_a == 1000

    def test_frozen(self):
        request = RebalanceRequest(
            pool="0x" + "ab" * 20,
            token_a=WETH,
            token_b=DAI,
            amount_a=1,
            amount_b=1,
            tick_lower=-60,
            tick_upper=60,
        )
        with pytest.raises(ValidationError):
            request.amount_a = 2
