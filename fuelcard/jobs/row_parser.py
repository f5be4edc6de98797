"""Build one normalized fuel transaction from one fuel-card CSV row.

Expected columns (fuel card provider export):
    Date,Time,Card Nr.,Vehicle Nr.,Product,Amount,Total sum,Currency,Country,Country ISO,Fuel station
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from fuelcard.db import VehicleLookupPort
from fuelcard.domain import (
    CsvRowFields,
    CurrencyConverter,
    EnrichmentStatus,
    FuelTransactionRecord,
    InvalidVehicleError,
    ProductClassifier,
    RowParseError,
    classifier_unit_for,
    locale_parse_decimal,
    locale_parse_timestamp,
)

from .interfaces import RowParseOutcome

_UNIT_PRICE_PLACES = Decimal("0.0001")


class TransactionRowParser:
    """Parse CSV rows into transaction records using injected classification and conversion."""

    def __init__(
        self,
        classifier: ProductClassifier,
        converter: CurrencyConverter,
        vehicle_lookup: VehicleLookupPort,
    ):
        """Initialize row parser dependencies.

        Args:
            classifier: Fuel gate and category mapper.
            converter: Settlement currency converter.
            vehicle_lookup: Vehicle number to telematics unit id lookup.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if classifier is None:
            raise ValueError("classifier must not be None")
        if converter is None:
            raise ValueError("converter must not be None")
        if vehicle_lookup is None:
            raise ValueError("vehicle_lookup must not be None")

        self._classifier = classifier
        self._converter = converter
        self._vehicle_lookup = vehicle_lookup

    def parser_parse_row(
        self,
        row: Sequence[str],
        header_map: dict[str, int],
        batch_id: str,
        created_at: datetime,
    ) -> RowParseOutcome:
        """Parse one CSV row.

        Non-fuel products are skipped before any other field is read. Parse and
        validation errors are returned as failed outcomes.

        Args:
            row: CSV cells.
            header_map: Column name to index map from the header row.
            batch_id: Import batch identifier stamped on the record.
            created_at: Creation timestamp stamped on the record.

        Returns:
            RowParseOutcome: Parsed, skipped or failed outcome.

        Raises:
            RuntimeError: Raised when the vehicle lookup fails.
        """

        fields = CsvRowFields(row=row, header_map=header_map)
        raw_product = fields.field_or_default("Product", "")
        if not self._classifier.classifier_is_fuel(raw_product):
            return RowParseOutcome.outcome_skipped()

        try:
            record = self._parser_build_record(
                fields=fields,
                raw_product=raw_product,
                batch_id=batch_id,
                created_at=created_at,
            )
        except (ValueError, ArithmeticError) as error:
            return RowParseOutcome.outcome_failed(str(error))
        return RowParseOutcome.outcome_parsed(record)

    def _parser_build_record(
        self,
        fields: CsvRowFields,
        raw_product: str,
        batch_id: str,
        created_at: datetime,
    ) -> FuelTransactionRecord:
        vehicle_number = fields.field_optional("Vehicle Nr.")
        if vehicle_number is None:
            raise InvalidVehicleError("Missing vehicle number", field_name="Vehicle Nr.")

        telematics_unit_id = self._vehicle_lookup.db_vehicle_lookup_unit_id(vehicle_number)

        transaction_date = locale_parse_timestamp(fields.field_required("Date"), fields.field_required("Time"))

        product_type = self._classifier.classifier_map_category(raw_product)
        quantity = locale_parse_decimal(fields.field_required("Amount"))

        original_amount = locale_parse_decimal(fields.field_required("Total sum"))
        _parser_require_non_negative(quantity, "Amount")
        _parser_require_non_negative(original_amount, "Total sum")
        original_currency = fields.field_or_default("Currency", self._converter.settlement_currency)
        total_amount = self._converter.converter_to_settlement(original_amount, original_currency)

        unit_price = None
        if quantity > 0:
            unit_price = (total_amount / quantity).quantize(_UNIT_PRICE_PLACES, rounding=ROUND_HALF_UP)

        station_country = fields.field_optional("Country ISO") or fields.field_optional("Country")

        return FuelTransactionRecord(
            vehicle_number=vehicle_number,
            card_number=fields.field_optional("Card Nr."),
            transaction_date=transaction_date,
            station_name=fields.field_optional("Fuel station"),
            station_country=station_country,
            product_type=product_type,
            quantity=quantity,
            unit=classifier_unit_for(product_type),
            unit_price=unit_price,
            total_amount=total_amount,
            currency=self._converter.settlement_currency,
            original_amount=original_amount,
            original_currency=original_currency,
            telematics_unit_id=telematics_unit_id,
            enrichment_status=EnrichmentStatus.PENDING,
            import_batch_id=batch_id,
            created_at=created_at,
        )


def _parser_require_non_negative(value: Decimal, field_name: str) -> None:
    if value < 0:
        raise RowParseError(f"Negative value for: {field_name}", field_name=field_name)
