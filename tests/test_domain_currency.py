"""Tests for settlement currency conversion."""

from __future__ import annotations

from decimal import Decimal

import pytest

from fuelcard.domain import DEFAULT_EUR_RATES, CurrencyConverter, StaticRateTable


def _build_converter() -> CurrencyConverter:
    """Create converter over the default EUR rate table.

    Returns:
        CurrencyConverter: Converter settling into EUR.

    Raises:
        ValueError: Raised when converter inputs are invalid.
    """

    return CurrencyConverter(rate_lookup=StaticRateTable(rates=DEFAULT_EUR_RATES))


def test_domain_currency_converts_known_currency_with_half_up_rounding() -> None:
    """Multiply by the rate and round half-up to cents.

    Returns:
        None: Assertions validate converted amounts.

    Raises:
        AssertionError: Raised when converted amounts differ.
    """

    converter = _build_converter()

    assert converter.converter_to_settlement(Decimal("310.00"), "PLN") == Decimal("68.20")
    assert converter.converter_to_settlement(Decimal("100"), "usd") == Decimal("92.00")
    assert converter.converter_to_settlement(Decimal("0.25"), "RON") == Decimal("0.05")


def test_domain_currency_keeps_settlement_and_unknown_amounts() -> None:
    """Return settlement-currency and unknown-currency amounts unchanged.

    Returns:
        None: Assertions validate pass-through behavior.

    Raises:
        AssertionError: Raised when amounts are modified.
    """

    converter = _build_converter()

    assert converter.settlement_currency == "EUR"
    assert converter.converter_to_settlement(Decimal("45.678"), "EUR") == Decimal("45.678")
    assert converter.converter_to_settlement(Decimal("12.34"), "XYZ") == Decimal("12.34")


def test_domain_currency_rejects_blank_settlement_currency() -> None:
    """Fail fast on blank settlement currency.

    Returns:
        None: Assertions validate constructor guard.

    Raises:
        AssertionError: Raised when constructor accepts blank currency.
    """

    with pytest.raises(ValueError, match="settlement_currency"):
        CurrencyConverter(rate_lookup=StaticRateTable(rates={}), settlement_currency=" ")
