"""Typed domain models shared across runtime layers.

This module provides the data contracts produced by the import pipeline and
consumed by persistence, enrichment and API surfaces.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ProductCategory(str, Enum):
    """Normalized fuel product category."""

    DIESEL = "diesel"
    PETROL = "petrol"
    LPG = "lpg"
    ADBLUE = "adblue"
    CNG = "cng"
    ELECTRIC = "electric"
    OTHER = "other"


class EnrichmentStatus(str, Enum):
    """Lifecycle flag for GPS/odometer enrichment of one transaction."""

    PENDING = "pending"
    ENRICHED = "enriched"
    FAILED = "failed"


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str


@dataclass(frozen=True)
class FuelTransactionRecord:
    """Normalized fuel-card transaction produced by one CSV row.

    Attributes:
        vehicle_number: Vehicle registration number.
        card_number: Optional fuel card number.
        transaction_date: Naive local transaction timestamp.
        station_name: Optional fuel station name.
        station_country: Optional station country (ISO code preferred).
        product_type: Normalized product category.
        quantity: Purchased quantity in `unit`.
        unit: Unit of measure derived from product category.
        unit_price: Settlement amount per unit, None when quantity is zero.
        total_amount: Amount in settlement currency.
        currency: Settlement currency code.
        original_amount: Amount as stated on the source row.
        original_currency: Currency as stated on the source row.
        telematics_unit_id: External vehicle-unit id, None for unknown vehicles.
        enrichment_status: Enrichment lifecycle flag.
        import_batch_id: Identifier of the import batch that created the record.
        created_at: Record creation timestamp.
        transaction_id: Storage identity, None until persisted.
        gps_latitude: Latitude set by enrichment.
        gps_longitude: Longitude set by enrichment.
        odometer_gps: GPS odometer reading set by enrichment.
        enriched_at: Enrichment timestamp.
    """

    vehicle_number: str
    card_number: str | None
    transaction_date: datetime
    station_name: str | None
    station_country: str | None
    product_type: ProductCategory
    quantity: Decimal
    unit: str
    unit_price: Decimal | None
    total_amount: Decimal
    currency: str
    original_amount: Decimal
    original_currency: str
    telematics_unit_id: int | None
    enrichment_status: EnrichmentStatus
    import_batch_id: str
    created_at: datetime
    transaction_id: int | None = None
    gps_latitude: Decimal | None = None
    gps_longitude: Decimal | None = None
    odometer_gps: int | None = None
    enriched_at: datetime | None = None

    def to_payload(self) -> dict[str, object]:
        """Serialize record to a JSON-compatible payload.

        Returns:
            dict[str, object]: JSON-serializable record payload.
        """

        return {
            "id": self.transaction_id,
            "vehicle_number": self.vehicle_number,
            "card_number": self.card_number,
            "transaction_date": self.transaction_date.isoformat(sep=" "),
            "station_name": self.station_name,
            "station_country": self.station_country,
            "product_type": self.product_type.value,
            "quantity": _format_decimal(self.quantity),
            "unit": self.unit,
            "unit_price": _format_decimal(self.unit_price),
            "total_amount": _format_decimal(self.total_amount),
            "currency": self.currency,
            "original_amount": _format_decimal(self.original_amount),
            "original_currency": self.original_currency,
            "mapon_unit_id": self.telematics_unit_id,
            "enrichment_status": self.enrichment_status.value,
            "gps_latitude": _format_decimal(self.gps_latitude),
            "gps_longitude": _format_decimal(self.gps_longitude),
            "odometer_gps": self.odometer_gps,
            "enriched_at": self.enriched_at.isoformat(sep=" ") if self.enriched_at else None,
            "import_batch_id": self.import_batch_id,
            "created_at": self.created_at.isoformat(sep=" "),
        }


@dataclass(frozen=True)
class ImportBatchReport:
    """Immutable outcome of one CSV import invocation.

    Attributes:
        imported: Number of persisted records.
        skipped: Number of non-fuel rows.
        failed: Number of rows that failed parsing, lookup or persistence.
        errors: Ordered `Row N: <message>` entries and structural errors.
        batch_id: Identifier tagging every record created by the invocation.
    """

    imported: int
    skipped: int
    failed: int
    errors: tuple[str, ...]
    batch_id: str

    def to_payload(self) -> dict[str, object]:
        """Serialize report to a JSON-compatible payload.

        Returns:
            dict[str, object]: JSON-serializable report payload.
        """

        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "failed": self.failed,
            "errors": list(self.errors),
            "batchId": self.batch_id,
        }


def _format_decimal(value: Decimal | None) -> str | None:
    if value is None:
        return None
    return format(value, "f")
