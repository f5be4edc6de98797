"""Tests for single-row transaction parsing."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from fuelcard.domain import (
    DEFAULT_EUR_RATES,
    CurrencyConverter,
    EnrichmentStatus,
    ProductCategory,
    ProductClassifier,
    StaticRateTable,
    csv_build_header_map,
)
from fuelcard.jobs import TransactionRowParser

_HEADER = [
    "Date",
    "Time",
    "Card Nr.",
    "Vehicle Nr.",
    "Product",
    "Amount",
    "Total sum",
    "Currency",
    "Country",
    "Country ISO",
    "Fuel station",
]
_CREATED_AT = datetime(2025, 2, 1, 9, 0, 0)


class _VehicleLookupStub:
    """Vehicle lookup stub backed by a dictionary."""

    def __init__(self, unit_ids: dict[str, int] | None = None, fail: bool = False):
        self.unit_ids = unit_ids or {}
        self.fail = fail
        self.calls: list[str] = []

    def db_vehicle_lookup_unit_id(self, vehicle_number: str) -> int | None:
        """Return configured unit id.

        Args:
            vehicle_number: Vehicle registration number.

        Returns:
            int | None: Configured unit id.

        Raises:
            RuntimeError: Raised when configured to fail.
        """

        self.calls.append(vehicle_number)
        if self.fail:
            raise RuntimeError("vehicle lookup failed")
        return self.unit_ids.get(vehicle_number)


def _build_parser(vehicle_lookup: _VehicleLookupStub | None = None) -> TransactionRowParser:
    """Create row parser with default classifier and EUR rates.

    Args:
        vehicle_lookup: Optional vehicle lookup stub.

    Returns:
        TransactionRowParser: Parser under test.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    return TransactionRowParser(
        classifier=ProductClassifier(),
        converter=CurrencyConverter(rate_lookup=StaticRateTable(rates=DEFAULT_EUR_RATES)),
        vehicle_lookup=vehicle_lookup or _VehicleLookupStub(unit_ids={"JR-2222": 199332}),
    )


def _parse(parser: TransactionRowParser, row: list[str], header: list[str] | None = None):
    return parser.parser_parse_row(
        row=row,
        header_map=csv_build_header_map(header or _HEADER),
        batch_id="import_20250201_090000_abcd1234",
        created_at=_CREATED_AT,
    )


def test_jobs_row_parser_builds_converted_record() -> None:
    """Build a complete record with conversion, unit price and lookup.

    Returns:
        None: Assertions validate all mapped fields.

    Raises:
        AssertionError: Raised when record fields differ.
    """

    outcome = _parse(
        _build_parser(),
        ["15.01.2025", "10:30", "7001", "JR-2222", "Diesel", "45,50", "310,00", "PLN", "Poland", "PL", "Orlen"],
    )

    assert outcome.status == "parsed"
    record = outcome.record
    assert record is not None
    assert record.vehicle_number == "JR-2222"
    assert record.card_number == "7001"
    assert record.transaction_date == datetime(2025, 1, 15, 10, 30)
    assert record.product_type == ProductCategory.DIESEL
    assert record.quantity == Decimal("45.50")
    assert record.unit == "L"
    assert record.total_amount == Decimal("68.20")
    assert record.currency == "EUR"
    assert record.original_amount == Decimal("310.00")
    assert record.original_currency == "PLN"
    assert record.unit_price == Decimal("1.4989")
    assert record.station_country == "PL"
    assert record.station_name == "Orlen"
    assert record.telematics_unit_id == 199332
    assert record.enrichment_status == EnrichmentStatus.PENDING
    assert record.import_batch_id == "import_20250201_090000_abcd1234"
    assert record.created_at == _CREATED_AT
    assert record.transaction_id is None


def test_jobs_row_parser_skips_non_fuel_before_reading_other_fields() -> None:
    """Skip non-fuel rows without consulting the vehicle lookup.

    Returns:
        None: Assertions validate skip ordering.

    Raises:
        AssertionError: Raised when skip is not the first decision.
    """

    vehicle_lookup = _VehicleLookupStub()
    outcome = _parse(_build_parser(vehicle_lookup), ["", "", "", "", "Coffee", "", "", "", "", "", ""])

    assert outcome.status == "skipped"
    assert outcome.record is None
    assert vehicle_lookup.calls == []


def test_jobs_row_parser_fails_on_empty_vehicle() -> None:
    """Report a vehicle failure for rows without vehicle number.

    Returns:
        None: Assertions validate failure message.

    Raises:
        AssertionError: Raised when outcome is not failed.
    """

    outcome = _parse(
        _build_parser(),
        ["15.01.2025", "10:30", "7001", "  ", "Diesel", "45,50", "70,00", "EUR", "Latvia", "LV", "Circle K"],
    )

    assert outcome.status == "failed"
    assert "vehicle" in (outcome.message or "").lower()


@pytest.mark.parametrize(
    ("row", "expected_message"),
    [
        (
            ["", "10:30", "7001", "JR-2222", "Diesel", "45,50", "70,00", "EUR", "", "LV", ""],
            "Missing value for: Date",
        ),
        (
            ["15.01.2025", "10:30", "7001", "JR-2222", "Diesel", "", "70,00", "EUR", "", "LV", ""],
            "Missing value for: Amount",
        ),
        (
            ["15.01.2025", "10:30", "7001", "JR-2222", "Diesel", "45,50", "", "EUR", "", "LV", ""],
            "Missing value for: Total sum",
        ),
        (
            ["15.01.2025", "late", "7001", "JR-2222", "Diesel", "45,50", "70,00", "EUR", "", "LV", ""],
            "Invalid transaction date/time",
        ),
        (
            ["15.01.2025", "10:30", "7001", "JR-2222", "Diesel", "-5,00", "70,00", "EUR", "", "LV", ""],
            "Negative value for: Amount",
        ),
    ],
)
def test_jobs_row_parser_reports_field_failures(row: list[str], expected_message: str) -> None:
    """Return failed outcomes with field-specific messages.

    Args:
        row: CSV cells.
        expected_message: Expected message fragment.

    Returns:
        None: Assertions validate failure messages.

    Raises:
        AssertionError: Raised when outcome differs.
    """

    outcome = _parse(_build_parser(), row)

    assert outcome.status == "failed"
    assert expected_message in (outcome.message or "")


def test_jobs_row_parser_reports_missing_required_column() -> None:
    """Fail rows when a required column is absent from the header.

    Returns:
        None: Assertions validate missing-column message.

    Raises:
        AssertionError: Raised when outcome differs.
    """

    header = ["Date", "Time", "Vehicle Nr.", "Product", "Amount"]
    outcome = _parse(_build_parser(), ["15.01.2025", "10:30", "JR-2222", "Diesel", "45,50"], header=header)

    assert outcome.status == "failed"
    assert outcome.message == "Missing required column: Total sum"


def test_jobs_row_parser_defaults_currency_and_country_fallback() -> None:
    """Use settlement currency for blank currency and `Country` when ISO is blank.

    Returns:
        None: Assertions validate defaults.

    Raises:
        AssertionError: Raised when defaults are not applied.
    """

    outcome = _parse(
        _build_parser(),
        ["2025-01-15", "08:00", "", "LV-1", "Super 95", "10", "0", "", "Latvia", "", ""],
    )

    record = outcome.record
    assert record is not None
    assert record.original_currency == "EUR"
    assert record.total_amount == Decimal("0")
    assert record.unit_price == Decimal("0.0000")
    assert record.station_country == "Latvia"
    assert record.card_number is None
    assert record.telematics_unit_id is None
    assert record.product_type == ProductCategory.PETROL


def test_jobs_row_parser_leaves_unit_price_empty_for_zero_quantity() -> None:
    """Leave unit price unset when quantity is zero.

    Returns:
        None: Assertions validate unit price guard.

    Raises:
        AssertionError: Raised when unit price is computed.
    """

    outcome = _parse(
        _build_parser(),
        ["15.01.2025", "10:30", "", "JR-2222", "Unknown Fuel", "0", "12,00", "EUR", "", "", ""],
    )

    assert outcome.record is not None
    assert outcome.record.unit_price is None
    assert outcome.record.product_type == ProductCategory.OTHER


def test_jobs_row_parser_propagates_lookup_failure() -> None:
    """Propagate runtime lookup failures to the batch importer.

    Returns:
        None: Assertions validate propagation.

    Raises:
        AssertionError: Raised when lookup failure is swallowed.
    """

    parser = _build_parser(_VehicleLookupStub(fail=True))

    with pytest.raises(RuntimeError, match="vehicle lookup failed"):
        _parse(parser, ["15.01.2025", "10:30", "", "JR-2222", "Diesel", "1", "1", "EUR", "", "", ""])


def test_jobs_row_parser_accepts_unpadded_european_date() -> None:
    """Parse `D.M.YYYY` dates without leading zeros.

    Returns:
        None: Assertions validate the parsed transaction date.

    Raises:
        AssertionError: Raised when the row fails.
    """

    outcome = _parse(
        _build_parser(),
        ["5.1.2025", "10:30:00", "", "JR-2222", "Diesel", "10", "15", "EUR", "", "LV", ""],
    )

    assert outcome.status == "parsed"
    assert outcome.record is not None
    assert outcome.record.transaction_date == datetime(2025, 1, 5, 10, 30, 0)


def test_jobs_row_parser_keeps_long_free_text_country() -> None:
    """Fall back to a free-text country name longer than an ISO code.

    Returns:
        None: Assertions validate the country fallback.

    Raises:
        AssertionError: Raised when the country is shortened or the row fails.
    """

    outcome = _parse(
        _build_parser(),
        ["15.01.2025", "10:30", "", "JR-2222", "Diesel", "10", "15", "EUR", "Deutschland", "", "Aral"],
    )

    assert outcome.record is not None
    assert outcome.record.station_country == "Deutschland"
