"""Database service for append-only fuel transaction persistence and reads."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from sqlalchemy import DateTime, Engine, Integer, Numeric, bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from fuelcard.domain import EnrichmentStatus, FuelTransactionRecord, ProductCategory

from .interfaces import TransactionEnrichmentUpdate, TransactionRepositoryPort

_TRANSACTION_SELECT_COLUMNS = (
    "transaction_id, vehicle_number, card_number, transaction_date, station_name, station_country, "
    "product_type, quantity, unit, unit_price, total_amount, currency, original_amount, original_currency, "
    "telematics_unit_id, enrichment_status, gps_latitude, gps_longitude, odometer_gps, enriched_at, "
    "import_batch_id, created_at"
)

_TRANSACTION_TYPED_COLUMNS = {
    "transaction_id": Integer(),
    "transaction_date": DateTime(),
    "quantity": Numeric(10, 3),
    "unit_price": Numeric(10, 4),
    "total_amount": Numeric(10, 2),
    "original_amount": Numeric(10, 2),
    "telematics_unit_id": Integer(),
    "gps_latitude": Numeric(10, 7),
    "gps_longitude": Numeric(10, 7),
    "odometer_gps": Integer(),
    "enriched_at": DateTime(),
    "created_at": DateTime(),
}


def _db_transaction_typed_bindparams(*names: str) -> list:
    return [bindparam(name, type_=_TRANSACTION_TYPED_COLUMNS[name]) for name in names]


def _db_transaction_error_reason(error: SQLAlchemyError) -> str:
    """Return the first line of the driver error, without SQL text or parameters."""

    driver_error = getattr(error, "orig", None) or error
    reason_lines = str(driver_error).strip().splitlines()
    return reason_lines[0][:200] if reason_lines else type(driver_error).__name__


_INSERT_TRANSACTION_STATEMENT = (
    text(
        "INSERT INTO fuel_transaction ("
        "vehicle_number, card_number, transaction_date, station_name, station_country, product_type, "
        "quantity, unit, unit_price, total_amount, currency, original_amount, original_currency, "
        "telematics_unit_id, enrichment_status, import_batch_id, created_at"
        ") VALUES ("
        ":vehicle_number, :card_number, :transaction_date, :station_name, :station_country, :product_type, "
        ":quantity, :unit, :unit_price, :total_amount, :currency, :original_amount, :original_currency, "
        ":telematics_unit_id, :enrichment_status, :import_batch_id, :created_at"
        ") RETURNING transaction_id"
    )
    .bindparams(
        *_db_transaction_typed_bindparams(
            "transaction_date",
            "quantity",
            "unit_price",
            "total_amount",
            "original_amount",
            "telematics_unit_id",
            "created_at",
        )
    )
    .columns(transaction_id=Integer())
)

_SELECT_BY_VEHICLE_STATEMENT = text(
    f"SELECT {_TRANSACTION_SELECT_COLUMNS} FROM fuel_transaction "
    "WHERE vehicle_number = :vehicle_number "
    "ORDER BY transaction_date ASC, transaction_id ASC "
    "LIMIT :limit OFFSET :offset"
).columns(**_TRANSACTION_TYPED_COLUMNS)

_SELECT_PENDING_STATEMENT = text(
    f"SELECT {_TRANSACTION_SELECT_COLUMNS} FROM fuel_transaction "
    "WHERE enrichment_status = :enrichment_status AND telematics_unit_id IS NOT NULL "
    "ORDER BY transaction_date ASC, transaction_id ASC "
    "LIMIT :limit"
).columns(**_TRANSACTION_TYPED_COLUMNS)

_MARK_ENRICHED_STATEMENT = text(
    "UPDATE fuel_transaction SET "
    "enrichment_status = :enrichment_status, gps_latitude = :gps_latitude, gps_longitude = :gps_longitude, "
    "odometer_gps = :odometer_gps, enriched_at = :enriched_at, updated_at = :enriched_at "
    "WHERE transaction_id = :transaction_id"
).bindparams(
    *_db_transaction_typed_bindparams("gps_latitude", "gps_longitude", "odometer_gps", "enriched_at", "transaction_id")
)

_MARK_FAILED_STATEMENT = text(
    "UPDATE fuel_transaction SET enrichment_status = :enrichment_status "
    "WHERE transaction_id = :transaction_id"
).bindparams(*_db_transaction_typed_bindparams("transaction_id"))


class SQLAlchemyTransactionService(TransactionRepositoryPort):
    """SQLAlchemy implementation of fuel transaction persistence operations.

    Saves are append-only: every call inserts a new row in its own database
    transaction, so one failing save never affects rows saved before it.
    """

    def __init__(self, engine: Engine):
        """Initialize transaction persistence service.

        Args:
            engine: SQLAlchemy engine used for all persistence operations.

        Raises:
            ValueError: Raised when engine is invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")

        self._engine = engine

    def db_transaction_save(self, record: FuelTransactionRecord) -> FuelTransactionRecord:
        """Insert one transaction row and return the record with its identity.

        Args:
            record: Unsaved transaction record.

        Returns:
            FuelTransactionRecord: Persisted record.

        Raises:
            ValueError: Raised when record values are invalid.
            RuntimeError: Raised when persistence fails.
        """

        if record is None:
            raise ValueError("record must not be None")
        if record.transaction_id is not None:
            raise ValueError("record.transaction_id must be None for append-only save")
        vehicle_number = self._db_transaction_validate_non_empty_text(record.vehicle_number, "record.vehicle_number")
        import_batch_id = self._db_transaction_validate_non_empty_text(
            record.import_batch_id,
            "record.import_batch_id",
        )

        try:
            with self._engine.begin() as connection:
                inserted_row = connection.execute(
                    _INSERT_TRANSACTION_STATEMENT,
                    {
                        "vehicle_number": vehicle_number,
                        "card_number": record.card_number,
                        "transaction_date": record.transaction_date,
                        "station_name": record.station_name,
                        "station_country": record.station_country,
                        "product_type": record.product_type.value,
                        "quantity": record.quantity,
                        "unit": record.unit,
                        "unit_price": record.unit_price,
                        "total_amount": record.total_amount,
                        "currency": record.currency,
                        "original_amount": record.original_amount,
                        "original_currency": record.original_currency,
                        "telematics_unit_id": record.telematics_unit_id,
                        "enrichment_status": record.enrichment_status.value,
                        "import_batch_id": import_batch_id,
                        "created_at": record.created_at,
                    },
                ).mappings().fetchone()
        except SQLAlchemyError as error:
            raise RuntimeError(f"transaction persistence failed: {_db_transaction_error_reason(error)}") from error

        if inserted_row is None:
            raise RuntimeError("transaction insert returned no identity")
        return replace(record, transaction_id=int(inserted_row["transaction_id"]))

    def db_transaction_list_by_vehicle(
        self,
        vehicle_number: str,
        limit: int = 50,
        offset: int = 0,
    ) -> list[FuelTransactionRecord]:
        """List transactions for one vehicle ordered by transaction date and id.

        Args:
            vehicle_number: Vehicle registration number.
            limit: Max rows to return.
            offset: Rows to skip.

        Returns:
            list[FuelTransactionRecord]: Deterministically ordered records.

        Raises:
            ValueError: Raised when arguments are invalid.
            RuntimeError: Raised when the read fails.
        """

        normalized_vehicle_number = self._db_transaction_validate_non_empty_text(vehicle_number, "vehicle_number")
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if offset < 0:
            raise ValueError("offset must be >= 0")

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    _SELECT_BY_VEHICLE_STATEMENT,
                    {"vehicle_number": normalized_vehicle_number, "limit": limit, "offset": offset},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("transaction read failed") from error

        return [self._db_transaction_map_row(row) for row in rows]

    def db_transaction_list_pending_enrichment(self, limit: int) -> list[FuelTransactionRecord]:
        """List pending transactions that have a telematics unit id.

        Args:
            limit: Max rows to return.

        Returns:
            list[FuelTransactionRecord]: Pending records, oldest first.

        Raises:
            ValueError: Raised when limit is invalid.
            RuntimeError: Raised when the read fails.
        """

        if limit < 1:
            raise ValueError("limit must be >= 1")

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    _SELECT_PENDING_STATEMENT,
                    {"enrichment_status": EnrichmentStatus.PENDING.value, "limit": limit},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("pending transaction read failed") from error

        return [self._db_transaction_map_row(row) for row in rows]

    def db_transaction_mark_enriched(self, update: TransactionEnrichmentUpdate) -> None:
        """Store enrichment values and set status to `enriched`.

        Args:
            update: Enrichment values.

        Raises:
            LookupError: Raised when the transaction id is not found.
            RuntimeError: Raised when persistence fails.
        """

        try:
            with self._engine.begin() as connection:
                result = connection.execute(
                    _MARK_ENRICHED_STATEMENT,
                    {
                        "enrichment_status": EnrichmentStatus.ENRICHED.value,
                        "gps_latitude": update.gps_latitude,
                        "gps_longitude": update.gps_longitude,
                        "odometer_gps": update.odometer_gps,
                        "enriched_at": update.enriched_at,
                        "transaction_id": update.transaction_id,
                    },
                )
                updated_row_count = result.rowcount
        except SQLAlchemyError as error:
            raise RuntimeError("transaction enrichment update failed") from error

        if updated_row_count == 0:
            raise LookupError(f"transaction not found: transaction_id={update.transaction_id}")

    def db_transaction_mark_enrichment_failed(self, transaction_id: int) -> None:
        """Set enrichment status to `failed`.

        Args:
            transaction_id: Target transaction identity.

        Raises:
            LookupError: Raised when the transaction id is not found.
            RuntimeError: Raised when persistence fails.
        """

        try:
            with self._engine.begin() as connection:
                result = connection.execute(
                    _MARK_FAILED_STATEMENT,
                    {"enrichment_status": EnrichmentStatus.FAILED.value, "transaction_id": transaction_id},
                )
                updated_row_count = result.rowcount
        except SQLAlchemyError as error:
            raise RuntimeError("transaction enrichment update failed") from error

        if updated_row_count == 0:
            raise LookupError(f"transaction not found: transaction_id={transaction_id}")

    def _db_transaction_map_row(self, row: Any) -> FuelTransactionRecord:
        """Map SQL row payload into typed transaction record.

        Args:
            row: SQLAlchemy row mapping.

        Returns:
            FuelTransactionRecord: Typed persisted record.

        Raises:
            ValueError: Raised when stored enum values are unknown.
        """

        return FuelTransactionRecord(
            transaction_id=row["transaction_id"],
            vehicle_number=row["vehicle_number"],
            card_number=row["card_number"],
            transaction_date=row["transaction_date"],
            station_name=row["station_name"],
            station_country=row["station_country"],
            product_type=ProductCategory(row["product_type"]),
            quantity=row["quantity"],
            unit=row["unit"],
            unit_price=row["unit_price"],
            total_amount=row["total_amount"],
            currency=row["currency"],
            original_amount=row["original_amount"],
            original_currency=row["original_currency"],
            telematics_unit_id=row["telematics_unit_id"],
            enrichment_status=EnrichmentStatus(row["enrichment_status"]),
            gps_latitude=row["gps_latitude"],
            gps_longitude=row["gps_longitude"],
            odometer_gps=row["odometer_gps"],
            enriched_at=row["enriched_at"],
            import_batch_id=row["import_batch_id"],
            created_at=row["created_at"],
        )

    def _db_transaction_validate_non_empty_text(self, value: str, field_name: str) -> str:
        """Validate text value and normalize surrounding whitespace.

        Args:
            value: Input text value.
            field_name: Field label for deterministic error messages.

        Returns:
            str: Normalized non-empty text value.

        Raises:
            ValueError: Raised when value is not valid non-empty text.
        """

        if not isinstance(value, str):
            raise ValueError(f"{field_name} must be a string")

        normalized_value = value.strip()
        if not normalized_value:
            raise ValueError(f"{field_name} must not be blank")

        return normalized_value
