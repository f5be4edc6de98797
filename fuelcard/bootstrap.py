"""Application bootstrap wiring for startup validation and dependency assembly."""

import logging

from fastapi import FastAPI
from sqlalchemy import Engine

from fuelcard.adapters import MaponApiAdapter
from fuelcard.api import create_api_application
from fuelcard.config import AppSettings, config_load_settings
from fuelcard.db import (
    SQLAlchemyDatabaseHealthService,
    SQLAlchemyTransactionService,
    SQLAlchemyVehicleService,
    db_create_engine,
)
from fuelcard.domain import DEFAULT_EUR_RATES, CurrencyConverter, ProductClassifier, StaticRateTable
from fuelcard.jobs import TransactionCsvImporter, TransactionEnrichmentJob, TransactionRowParser

logger = logging.getLogger(__name__)


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional preloaded settings, loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    engine = db_create_engine(database_url=resolved_settings.database_url)
    return create_api_application(
        settings=resolved_settings,
        db_health_service=SQLAlchemyDatabaseHealthService(engine=engine),
        transaction_importer=bootstrap_create_csv_importer(settings=resolved_settings, engine=engine),
        transaction_repository=SQLAlchemyTransactionService(engine=engine),
        enrichment_job=bootstrap_create_enrichment_job(settings=resolved_settings, engine=engine),
    )


def bootstrap_create_csv_importer(settings: AppSettings, engine: Engine) -> TransactionCsvImporter:
    """Build the CSV batch importer.

    Args:
        settings: Validated runtime settings.
        engine: Shared SQLAlchemy engine.

    Returns:
        TransactionCsvImporter: Importer wired to the vehicle and transaction stores.
    """

    converter = CurrencyConverter(
        rate_lookup=StaticRateTable(rates=DEFAULT_EUR_RATES),
        settlement_currency=settings.settlement_currency,
    )
    row_parser = TransactionRowParser(
        classifier=ProductClassifier(),
        converter=converter,
        vehicle_lookup=SQLAlchemyVehicleService(engine=engine),
    )
    return TransactionCsvImporter(
        row_parser=row_parser,
        transaction_repository=SQLAlchemyTransactionService(engine=engine),
    )


def bootstrap_create_enrichment_job(settings: AppSettings, engine: Engine) -> TransactionEnrichmentJob | None:
    """Build the enrichment job when a telematics API key is configured.

    Args:
        settings: Validated runtime settings.
        engine: Shared SQLAlchemy engine.

    Returns:
        TransactionEnrichmentJob | None: Enrichment job, or None without `MAPON_API_KEY`.
    """

    if not settings.mapon_api_key.strip():
        logger.info("telematics enrichment disabled: MAPON_API_KEY is not set")
        return None

    telematics_adapter = MaponApiAdapter(
        api_key=settings.mapon_api_key,
        base_url=settings.mapon_base_url,
        local_timezone=settings.telematics_timezone,
        request_timeout_seconds=settings.mapon_request_timeout_seconds,
    )
    return TransactionEnrichmentJob(
        transaction_repository=SQLAlchemyTransactionService(engine=engine),
        telematics_adapter=telematics_adapter,
    )
