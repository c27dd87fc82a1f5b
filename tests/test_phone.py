"""Tests for phone number normalization."""

from __future__ import annotations

import importlib.util

import pytest

from smsbridge.core.bridge import SmsBridge
from smsbridge.identity.phone import is_canonical, is_valid_phone, normalize_phone

HAS_PHONENUMBERS = importlib.util.find_spec("phonenumbers") is not None

needs_phonenumbers = pytest.mark.skipif(
    not HAS_PHONENUMBERS,
    reason="phonenumbers library not installed",
)


class TestIsCanonical:
    @pytest.mark.parametrize("number", ["16502530000", "33612345678", "4915112345678"])
    def test_digits(self, number: str) -> None:
        assert is_canonical(number) is True

    @pytest.mark.parametrize(
        "number", ["+16502530000", "650-253-0000", "123", "", "１６５０２５３００００"]
    )
    def test_not_canonical(self, number: str) -> None:
        assert is_canonical(number) is False


@needs_phonenumbers
class TestNormalizePhone:
    def test_e164_input(self) -> None:
        assert normalize_phone("+16502530000") == "16502530000"

    def test_country_code_without_plus(self) -> None:
        assert normalize_phone("16502530000") == "16502530000"

    def test_formatted(self) -> None:
        assert normalize_phone("+1 (650) 253-0000") == "16502530000"

    def test_local_format_uses_region(self) -> None:
        assert normalize_phone("650-253-0000", "US") == "16502530000"

    def test_french_number(self) -> None:
        assert normalize_phone("+33 6 12 34 56 78") == "33612345678"

    def test_garbage_raises(self) -> None:
        with pytest.raises(ValueError, match="Not a valid phone number"):
            normalize_phone("not a number")

    def test_is_valid_phone(self) -> None:
        assert is_valid_phone("+1 650 253 0000") is True
        assert is_valid_phone("123") is False


class TestVirtualIdentity:
    def test_canonical_number_used_as_is(self, bridge: SmsBridge) -> None:
        assert bridge.virtual_identity("15551234567") == "@_sms_15551234567:example.org"

    @needs_phonenumbers
    def test_formatted_number_normalised(self, bridge: SmsBridge) -> None:
        assert bridge.virtual_identity("+1 (650) 253-0000") == "@_sms_16502530000:example.org"
        assert bridge.virtual_identity("650.253.0000") == "@_sms_16502530000:example.org"

    @needs_phonenumbers
    def test_invalid_number_rejected(self, bridge: SmsBridge) -> None:
        with pytest.raises(ValueError):
            bridge.virtual_identity("call me")
