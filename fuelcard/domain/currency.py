"""Settlement currency conversion behind a swappable rate-lookup port."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_SETTLEMENT_CURRENCY = "EUR"

DEFAULT_EUR_RATES: dict[str, str] = {
    "USD": "0.92",
    "GBP": "1.17",
    "PLN": "0.22",
    "CZK": "0.041",
    "SEK": "0.087",
    "NOK": "0.086",
    "DKK": "0.13",
    "CHF": "1.04",
    "HUF": "0.0025",
    "RON": "0.20",
    "BGN": "0.51",
    "HRK": "0.13",
    "RUB": "0.010",
    "UAH": "0.025",
    "TRY": "0.028",
}

_CENTS = Decimal("0.01")


class RateLookupPort(Protocol):
    """Port definition for settlement exchange-rate lookup."""

    def rate_lookup_get(self, currency_code: str) -> Decimal | None:
        """Return multiplicative rate into the settlement currency.

        Args:
            currency_code: Upper-case source currency code.

        Returns:
            Decimal | None: Rate, or None when the currency is unknown.
        """


class StaticRateTable(RateLookupPort):
    """In-memory rate table keyed by upper-case currency code."""

    def __init__(self, rates: Mapping[str, Decimal | str]):
        self._rates = {code.strip().upper(): Decimal(str(rate)) for code, rate in rates.items()}

    def rate_lookup_get(self, currency_code: str) -> Decimal | None:
        return self._rates.get(currency_code.strip().upper())


class CurrencyConverter:
    """Convert source amounts into the fixed settlement currency."""

    def __init__(
        self,
        rate_lookup: RateLookupPort,
        settlement_currency: str = DEFAULT_SETTLEMENT_CURRENCY,
    ):
        """Initialize converter.

        Args:
            rate_lookup: Rate provider for non-settlement currencies.
            settlement_currency: Target currency code.

        Raises:
            ValueError: Raised when dependencies or currency code are invalid.
        """

        if rate_lookup is None:
            raise ValueError("rate_lookup must not be None")
        normalized_currency = settlement_currency.strip().upper()
        if not normalized_currency:
            raise ValueError("settlement_currency must not be blank")

        self._rate_lookup = rate_lookup
        self._settlement_currency = normalized_currency

    @property
    def settlement_currency(self) -> str:
        return self._settlement_currency

    def converter_to_settlement(self, amount: Decimal, currency_code: str) -> Decimal:
        """Convert an amount into the settlement currency.

        Known currencies are converted and rounded half-up to two decimals.
        Unknown currencies pass through unconverted and are logged.

        Args:
            amount: Source amount.
            currency_code: Source currency code (case-insensitive).

        Returns:
            Decimal: Amount in settlement currency.
        """

        normalized_currency = currency_code.strip().upper()
        if normalized_currency == self._settlement_currency:
            return amount

        rate = self._rate_lookup.rate_lookup_get(normalized_currency)
        if rate is None:
            logger.warning(
                "no %s rate for currency=%s, amount left unconverted",
                self._settlement_currency,
                normalized_currency,
            )
            return amount

        return (amount * rate).quantize(_CENTS, rounding=ROUND_HALF_UP)
