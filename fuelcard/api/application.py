"""FastAPI application factory for the fuel transaction service."""

from fastapi import FastAPI

from fuelcard.config import AppSettings
from fuelcard.db import DatabaseHealthPort, TransactionRepositoryPort
from fuelcard.jobs import EnrichmentJobPort, TransactionImporterPort

from .routers import api_create_health_router, api_create_transactions_router


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    transaction_importer: TransactionImporterPort,
    transaction_repository: TransactionRepositoryPort,
    enrichment_job: EnrichmentJobPort | None = None,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings.
        db_health_service: Database health service used by health endpoints.
        transaction_importer: CSV batch importer for the import endpoint.
        transaction_repository: Transaction store for list endpoints.
        enrichment_job: Optional enrichment job, None when telematics is not configured.

    Returns:
        FastAPI: Framework application instance.
    """
    application = FastAPI(title="Fuel Card Transactions")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return service identity for bootstrap verification."""

        return {
            "service": "fuelcard-transactions",
            "status": "ready",
            "environment": settings.environment_name,
            "settlement_currency": settings.settlement_currency,
        }

    application.include_router(api_create_health_router(db_health_service=db_health_service))
    application.include_router(
        api_create_transactions_router(
            settings=settings,
            transaction_importer=transaction_importer,
            transaction_repository=transaction_repository,
            enrichment_job=enrichment_job,
        )
    )

    return application
