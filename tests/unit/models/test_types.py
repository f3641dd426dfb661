"""Tests for shared address and amount types."""

import pytest
from pydantic import BaseModel, ValidationError

from clmm.models import (
    UINT256_MAX,
    Address,
    Uint256,
    is_valid_address,
    is_zero_address,
    normalize_address,
    short,
)
from tests.helpers import WETH, ZERO


class _Holder(BaseModel):
    address: Address
    amount: Uint256


class TestAddress:
    def test_lowercased(self):
        holder = _Holder(address=WETH.upper(), amount=0)
        assert holder.address == WETH

    @pytest.mark.parametrize("bad", ["0x1234", WETH[2:], "0x" + "g" * 40])
    def test_invalid_rejected(self, bad):
        with pytest.raises(ValidationError):
            _Holder(address=bad, amount=0)


class TestUint256:
    def test_accepts_decimal_string(self):
        assert _Holder(address=WETH, amount="1000").amount == 1000

    @pytest.mark.parametrize("bad", [-1, UINT256_MAX + 1, "1.5", True, 1.5])
    def test_invalid_rejected(self, bad):
        with pytest.raises(ValidationError):
            _Holder(address=WETH, amount=bad)

    def test_max_accepted(self):
        assert _Holder(address=WETH, amount=UINT256_MAX).amount == UINT256_MAX


class TestAddressHelpers:
    def test_normalize_adds_prefix(self):
        assert normalize_address(WETH[2:].upper()) == WETH

    def test_normalize_validate(self):
        with pytest.raises(ValueError, match="Invalid address"):
            normalize_address("0x1234", validate=True)

    def test_is_valid_address(self):
        assert is_valid_address(WETH)
        assert not is_valid_address(WETH[2:])
        assert not is_valid_address("0x1234")

    def test_is_zero_address(self):
        assert is_zero_address(ZERO)
        assert is_zero_address("0" * 40)
        assert not is_zero_address(WETH)

    def test_short(self):
        assert short(WETH) == "3c756cc2"
