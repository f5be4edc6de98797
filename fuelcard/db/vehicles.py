"""Database service for vehicle to telematics-unit mappings."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Engine, Integer, bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from .interfaces import VehicleRecord, VehicleRepositoryPort

_SELECT_VEHICLE_STATEMENT = text(
    "SELECT vehicle_id, vehicle_number, telematics_unit_id, created_at "
    "FROM vehicle WHERE vehicle_number = :vehicle_number"
).columns(vehicle_id=Integer(), telematics_unit_id=Integer(), created_at=DateTime())

_INSERT_VEHICLE_STATEMENT = text(
    "INSERT INTO vehicle (vehicle_number, telematics_unit_id, created_at) "
    "VALUES (:vehicle_number, :telematics_unit_id, :created_at)"
).bindparams(bindparam("created_at", type_=DateTime()))

_UPDATE_VEHICLE_STATEMENT = text(
    "UPDATE vehicle SET telematics_unit_id = :telematics_unit_id WHERE vehicle_number = :vehicle_number"
)


class SQLAlchemyVehicleService(VehicleRepositoryPort):
    """SQLAlchemy implementation of vehicle lookup and mapping maintenance."""

    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_vehicle_lookup_unit_id(self, vehicle_number: str) -> int | None:
        """Return telematics unit id for a vehicle number.

        Args:
            vehicle_number: Vehicle registration number.

        Returns:
            int | None: Unit id, or None for unknown vehicles.

        Raises:
            RuntimeError: Raised when the read fails.
        """

        normalized_vehicle_number = vehicle_number.strip()
        if not normalized_vehicle_number:
            return None

        try:
            with self._engine.connect() as connection:
                row = connection.execute(
                    _SELECT_VEHICLE_STATEMENT,
                    {"vehicle_number": normalized_vehicle_number},
                ).mappings().fetchone()
        except SQLAlchemyError as error:
            raise RuntimeError("vehicle lookup failed") from error

        if row is None:
            return None
        return row["telematics_unit_id"]

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

        normalized_vehicle_number = vehicle_number.strip()
        if not normalized_vehicle_number:
            raise ValueError("vehicle_number must not be blank")

        parameters = {"vehicle_number": normalized_vehicle_number, "telematics_unit_id": telematics_unit_id}
        try:
            with self._engine.begin() as connection:
                existing_row = connection.execute(_SELECT_VEHICLE_STATEMENT, parameters).mappings().fetchone()
                if existing_row is None:
                    connection.execute(_INSERT_VEHICLE_STATEMENT, {**parameters, "created_at": datetime.now()})
                else:
                    connection.execute(_UPDATE_VEHICLE_STATEMENT, parameters)
                stored_row = connection.execute(_SELECT_VEHICLE_STATEMENT, parameters).mappings().fetchone()
        except SQLAlchemyError as error:
            raise RuntimeError("vehicle persistence failed") from error

        if stored_row is None:
            raise RuntimeError("vehicle upsert completed without stored row")
        return VehicleRecord(
            vehicle_id=stored_row["vehicle_id"],
            vehicle_number=stored_row["vehicle_number"],
            telematics_unit_id=stored_row["telematics_unit_id"],
            created_at=stored_row["created_at"],
        )
