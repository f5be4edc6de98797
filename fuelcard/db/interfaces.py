"""Typed interfaces for database-layer services.

All SQL access must remain in the db package and its submodules.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from fuelcard.domain import FuelTransactionRecord, HealthStatus


class DatabaseHealthPort(Protocol):
    """Port definition for database connectivity verification."""

    def db_connection_label(self) -> str:
        """Return a stable label for the active database connection target.

        Returns:
            str: Database target label for diagnostics.

        Raises:
            RuntimeError: Raised when connection metadata is unavailable.
        """

    def db_check_health(self) -> HealthStatus:
        """Check database connectivity and return deterministic health payload.

        Returns:
            HealthStatus: Database health status payload.

        Raises:
            ConnectionError: Raised when database cannot be reached.
        """


@dataclass(frozen=True)
class VehicleRecord:
    """Persistence model for one vehicle mapping row.

    Attributes:
        vehicle_id: Storage identity.
        vehicle_number: Vehicle registration number.
        telematics_unit_id: Optional telematics provider unit id.
        created_at: Row creation timestamp.
    """

    vehicle_id: int
    vehicle_number: str
    telematics_unit_id: int | None
    created_at: datetime


@dataclass(frozen=True)
class TransactionEnrichmentUpdate:
    """GPS/odometer values written by one successful enrichment.

    Attributes:
        transaction_id: Target transaction identity.
        gps_latitude: Unit latitude at transaction time.
        gps_longitude: Unit longitude at transaction time.
        odometer_gps: Optional GPS odometer reading.
        enriched_at: Enrichment timestamp.
    """

    transaction_id: int
    gps_latitude: Decimal
    gps_longitude: Decimal
    odometer_gps: int | None
    enriched_at: datetime


class VehicleLookupPort(Protocol):
    """Port definition for resolving vehicle numbers to telematics unit ids."""

    def db_vehicle_lookup_unit_id(self, vehicle_number: str) -> int | None:
        """Return telematics unit id for a vehicle number.

        Args:
            vehicle_number: Vehicle registration number.

        Returns:
            int | None: Unit id, or None for unknown vehicles or unmapped units.

        Raises:
            RuntimeError: Raised when the read fails.
        """


class VehicleRepositoryPort(VehicleLookupPort, Protocol):
    """Port definition for vehicle mapping maintenance."""

    def db_vehicle_upsert(self, vehicle_number: str, telematics_unit_id: int | None) -> VehicleRecord:
        """Create or update one vehicle mapping.

        Args:
            vehicle_number: Vehicle registration number.
            telematics_unit_id: Optional telematics unit id.

        Returns:
            VehicleRecord: Persisted vehicle row.

        Raises:
            ValueError: Raised when vehicle number is blank.
            RuntimeError: Raised when persistence fails.
        """


class TransactionRepositoryPort(Protocol):
    """Port definition for fuel transaction persistence and reads."""

    def db_transaction_save(self, record: FuelTransactionRecord) -> FuelTransactionRecord:
        """Append one transaction record.

        Args:
            record: Unsaved transaction record.

        Returns:
            FuelTransactionRecord: Record with assigned `transaction_id`.

        Raises:
            ValueError: Raised when record values are invalid.
            RuntimeError: Raised when persistence fails.
        """

    def db_transaction_list_by_vehicle(
        self,
        vehicle_number: str,
        limit: int,
        offset: int,
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

    def db_transaction_mark_enriched(self, update: TransactionEnrichmentUpdate) -> None:
        """Store enrichment values and set status to `enriched`.

        Args:
            update: Enrichment values.

        Raises:
            LookupError: Raised when the transaction id is not found.
            RuntimeError: Raised when persistence fails.
        """

    def db_transaction_mark_enrichment_failed(self, transaction_id: int) -> None:
        """Set enrichment status to `failed`.

        Args:
            transaction_id: Target transaction identity.

        Raises:
            LookupError: Raised when the transaction id is not found.
            RuntimeError: Raised when persistence fails.
        """
