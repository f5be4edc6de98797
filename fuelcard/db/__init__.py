"""Database layer package for all SQL and persistence boundaries."""

from .health import SQLAlchemyDatabaseHealthService
from .interfaces import (
	DatabaseHealthPort,
	TransactionEnrichmentUpdate,
	TransactionRepositoryPort,
	VehicleLookupPort,
	VehicleRecord,
	VehicleRepositoryPort,
)
from .session import db_create_engine
from .transactions import SQLAlchemyTransactionService
from .vehicles import SQLAlchemyVehicleService

__all__ = [
	"DatabaseHealthPort",
	"SQLAlchemyDatabaseHealthService",
	"SQLAlchemyTransactionService",
	"SQLAlchemyVehicleService",
	"TransactionEnrichmentUpdate",
	"TransactionRepositoryPort",
	"VehicleLookupPort",
	"VehicleRecord",
	"VehicleRepositoryPort",
	"db_create_engine",
]
