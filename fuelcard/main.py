"""Main module entrypoint for local runtime execution.

This module validates startup configuration and then either launches the
FastAPI service or runs one import, enrichment or vehicle maintenance command.
"""

import argparse
import json
import logging
from pathlib import Path

import uvicorn

from fuelcard.bootstrap import (
    bootstrap_create_application,
    bootstrap_create_csv_importer,
    bootstrap_create_enrichment_job,
)
from fuelcard.config import AppSettings, config_load_settings
from fuelcard.db import SQLAlchemyVehicleService, db_create_engine

logger = logging.getLogger(__name__)


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with status 1 when a command reports failures.
    """

    argument_parser = argparse.ArgumentParser(description="Fuel card transactions runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "import-csv", "enrich-pending", "seed-vehicle"),
        help="Runtime command: `api` starts server, `import-csv` imports one CSV file, "
        "`enrich-pending` runs one enrichment pass, `seed-vehicle` maps a vehicle to a telematics unit",
        type=str,
    )
    argument_parser.add_argument("--file", dest="csv_file", type=Path, help="CSV file path for `import-csv`")
    argument_parser.add_argument("--limit", dest="limit", type=int, help="Max records for `enrich-pending`")
    argument_parser.add_argument("--vehicle-number", dest="vehicle_number", type=str, help="Vehicle for `seed-vehicle`")
    argument_parser.add_argument("--unit-id", dest="unit_id", type=int, help="Telematics unit id for `seed-vehicle`")
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if parsed_arguments.command == "import-csv":
        if parsed_arguments.csv_file is None:
            argument_parser.error("--file is required for import-csv")
        main_run_import_csv(settings=settings, csv_file=parsed_arguments.csv_file)
        return

    if parsed_arguments.command == "enrich-pending":
        main_run_enrich_pending(settings=settings, limit=parsed_arguments.limit)
        return

    if parsed_arguments.command == "seed-vehicle":
        if not parsed_arguments.vehicle_number:
            argument_parser.error("--vehicle-number is required for seed-vehicle")
        engine = db_create_engine(database_url=settings.database_url)
        vehicle_record = SQLAlchemyVehicleService(engine=engine).db_vehicle_upsert(
            vehicle_number=parsed_arguments.vehicle_number,
            telematics_unit_id=parsed_arguments.unit_id,
        )
        print(
            json.dumps(
                {
                    "vehicle_id": vehicle_record.vehicle_id,
                    "vehicle_number": vehicle_record.vehicle_number,
                    "mapon_unit_id": vehicle_record.telematics_unit_id,
                }
            )
        )
        return

    application = bootstrap_create_application(settings=settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


def main_run_import_csv(settings: AppSettings, csv_file: Path) -> None:
    """Import one CSV file and print the batch report.

    Args:
        settings: Validated runtime settings.
        csv_file: CSV file to import.

    Raises:
        SystemExit: Raised with status 1 when any row failed or the file is unreadable.
    """

    try:
        raw_csv_text = csv_file.read_text(encoding="utf-8-sig")
    except OSError as error:
        logger.error("cannot read csv file path=%s error=%s", csv_file, error)
        raise SystemExit(1) from error

    engine = db_create_engine(database_url=settings.database_url)
    import_report = bootstrap_create_csv_importer(settings=settings, engine=engine).job_import_from_csv(raw_csv_text)
    print(json.dumps(import_report.to_payload(), indent=2))
    if import_report.failed or (import_report.imported == 0 and import_report.errors):
        raise SystemExit(1)


def main_run_enrich_pending(settings: AppSettings, limit: int | None) -> None:
    """Run one enrichment pass and print the counters.

    Args:
        settings: Validated runtime settings.
        limit: Optional max records, defaults to `ENRICHMENT_BATCH_LIMIT`.

    Raises:
        SystemExit: Raised with status 1 when telematics is not configured.
    """

    engine = db_create_engine(database_url=settings.database_url)
    enrichment_job = bootstrap_create_enrichment_job(settings=settings, engine=engine)
    if enrichment_job is None:
        logger.error("enrich-pending requires MAPON_API_KEY")
        raise SystemExit(1)

    run_result = enrichment_job.job_enrich_pending(limit=limit or settings.enrichment_batch_limit)
    print(json.dumps(run_result.to_payload()))


if __name__ == "__main__":
    main()
