"""Tests for batch CSV import accounting and persistence behavior."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from fuelcard.domain import (
    DEFAULT_EUR_RATES,
    CurrencyConverter,
    FuelTransactionRecord,
    ProductClassifier,
    StaticRateTable,
)
from fuelcard.jobs import STRUCTURAL_ERROR_MESSAGE, TransactionCsvImporter, TransactionRowParser

_HEADER = "Date,Time,Card Nr.,Vehicle Nr.,Product,Amount,Total sum,Currency,Country,Country ISO,Fuel station"


class _VehicleLookupStub:
    """Vehicle lookup stub returning a fixed unit id for known vehicles."""

    def db_vehicle_lookup_unit_id(self, vehicle_number: str) -> int | None:
        """Return unit id for the seeded vehicle.

        Args:
            vehicle_number: Vehicle registration number.

        Returns:
            int | None: Unit id for `JR-2222`, otherwise None.

        Raises:
            RuntimeError: Never raised by this stub.
        """

        return 199332 if vehicle_number == "JR-2222" else None


class _InMemoryTransactionRepository:
    """Append-only in-memory transaction store."""

    def __init__(self, failing_vehicle_numbers: set[str] | None = None):
        self.records: list[FuelTransactionRecord] = []
        self.failing_vehicle_numbers = failing_vehicle_numbers or set()

    def db_transaction_save(self, record: FuelTransactionRecord) -> FuelTransactionRecord:
        """Store record with a sequential identity.

        Args:
            record: Unsaved record.

        Returns:
            FuelTransactionRecord: Record with assigned identity.

        Raises:
            RuntimeError: Raised for configured failing vehicles.
        """

        if record.vehicle_number in self.failing_vehicle_numbers:
            raise RuntimeError("transaction persistence failed")
        saved_record = replace(record, transaction_id=len(self.records) + 1)
        self.records.append(saved_record)
        return saved_record


def _build_importer(
    repository: _InMemoryTransactionRepository,
    batch_id_factory=None,
) -> TransactionCsvImporter:
    """Create importer over in-memory collaborators.

    Args:
        repository: In-memory transaction store.
        batch_id_factory: Optional deterministic batch id factory.

    Returns:
        TransactionCsvImporter: Importer under test.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    row_parser = TransactionRowParser(
        classifier=ProductClassifier(),
        converter=CurrencyConverter(rate_lookup=StaticRateTable(rates=DEFAULT_EUR_RATES)),
        vehicle_lookup=_VehicleLookupStub(),
    )
    return TransactionCsvImporter(
        row_parser=row_parser,
        transaction_repository=repository,
        clock=lambda: datetime(2025, 2, 1, 9, 0, 0),
        batch_id_factory=batch_id_factory,
    )


def _csv(*rows: str) -> str:
    return "\n".join((_HEADER, *rows)) + "\n"


def test_jobs_csv_import_counts_every_non_blank_data_row() -> None:
    """Account for every non-blank data row as imported, skipped or failed.

    Returns:
        None: Assertions validate counters and error ordering.

    Raises:
        AssertionError: Raised when accounting differs.
    """

    repository = _InMemoryTransactionRepository()
    csv_text = _csv(
        '15.01.2025,10:30,7001,JR-2222,Diesel,"45,50","310,00",PLN,Poland,PL,Orlen',
        "15.01.2025,11:00,7001,JR-2222,Coffee,1,3,EUR,Latvia,LV,Circle K",
        "15.01.2025,11:05,7001,,Diesel,10,15,EUR,Latvia,LV,Circle K",
        "",
        "16.01.2025,08:00,7002,LV-1,Super 95,20,32,EUR,Latvia,LV,Neste",
        "16.01.2025,09:00,7002,LV-1,Car Wash,1,8,EUR,Latvia,LV,Neste",
    )

    report = _build_importer(repository).job_import_from_csv(csv_text)

    assert (report.imported, report.skipped, report.failed) == (2, 2, 1)
    assert report.imported + report.skipped + report.failed == 5
    assert len(report.errors) == 1
    assert report.errors[0].startswith("Row 4: ")
    assert "vehicle" in report.errors[0].lower()
    assert len(repository.records) == 2
    assert all(record.import_batch_id == report.batch_id for record in repository.records)


def test_jobs_csv_import_converts_and_preserves_original_amount() -> None:
    """Persist settlement amount while keeping source amount and currency.

    Returns:
        None: Assertions validate persisted amounts.

    Raises:
        AssertionError: Raised when conversion differs.
    """

    repository = _InMemoryTransactionRepository()

    _build_importer(repository).job_import_from_csv(
        _csv('15.01.2025,10:30,7001,JR-2222,Diesel,"45,50","310,00",PLN,Poland,PL,Orlen')
    )

    saved_record = repository.records[0]
    assert saved_record.total_amount == Decimal("68.20")
    assert saved_record.currency == "EUR"
    assert saved_record.original_amount == Decimal("310.00")
    assert saved_record.original_currency == "PLN"
    assert saved_record.telematics_unit_id == 199332


def test_jobs_csv_import_rejects_header_only_body() -> None:
    """Report one structural error and import nothing for header-only input.

    Returns:
        None: Assertions validate structural failure report.

    Raises:
        AssertionError: Raised when structural failure is not reported.
    """

    repository = _InMemoryTransactionRepository()
    importer = _build_importer(repository)

    for csv_text in (_HEADER, "", "\n\n", _HEADER + "\n\n   \n"):
        report = importer.job_import_from_csv(csv_text)
        assert report.imported == 0
        assert report.failed == 0
        assert report.errors == (STRUCTURAL_ERROR_MESSAGE,)
    assert repository.records == []


def test_jobs_csv_import_isolates_persistence_failures() -> None:
    """Record failing saves as row failures and continue with later rows.

    Returns:
        None: Assertions validate failure isolation.

    Raises:
        AssertionError: Raised when one save failure aborts the batch.
    """

    repository = _InMemoryTransactionRepository(failing_vehicle_numbers={"BAD-1"})

    report = _build_importer(repository).job_import_from_csv(
        _csv(
            "15.01.2025,10:30,,BAD-1,Diesel,10,15,EUR,,LV,",
            "15.01.2025,10:40,,JR-2222,Diesel,10,15,EUR,,LV,",
        )
    )

    assert (report.imported, report.failed) == (1, 1)
    assert report.errors == ("Row 2: transaction persistence failed",)
    assert [record.vehicle_number for record in repository.records] == ["JR-2222"]


def test_jobs_csv_import_duplicates_records_on_reimport() -> None:
    """Import the same body twice into distinct batches without deduplication.

    Returns:
        None: Assertions validate duplicate persistence and unique batch ids.

    Raises:
        AssertionError: Raised when records are deduplicated or batch ids repeat.
    """

    repository = _InMemoryTransactionRepository()
    importer = _build_importer(repository)
    csv_text = _csv("15.01.2025,10:30,7001,JR-2222,Diesel,10,15,EUR,Latvia,LV,Neste")

    first_report = importer.job_import_from_csv(csv_text)
    second_report = importer.job_import_from_csv(csv_text)

    assert first_report.imported == second_report.imported == 1
    assert len(repository.records) == 2
    assert first_report.batch_id != second_report.batch_id
    assert first_report.batch_id.startswith("import_20250201_090000_")


def test_jobs_csv_import_handles_quoted_cells_and_padded_header_names() -> None:
    """Parse quoted cells with commas and trim header names.

    Returns:
        None: Assertions validate quoting support.

    Raises:
        AssertionError: Raised when quoted cells are split.
    """

    repository = _InMemoryTransactionRepository()
    header = " Date , Time ,Vehicle Nr.,Product,Amount,Total sum,Currency,Fuel station"

    report = _build_importer(repository).job_import_from_csv(
        header + '\n15.01.2025,10:30,JR-2222,Diesel,"1 234,5","2 000,00",EUR,"Station ""North"", Riga"\n'
    )

    assert report.imported == 1
    assert repository.records[0].quantity == Decimal("1234.5")
    assert repository.records[0].station_name == 'Station "North", Riga'


def test_jobs_csv_import_report_payload_uses_batch_id_key() -> None:
    """Serialize the report with the `batchId` key.

    Returns:
        None: Assertions validate payload shape.

    Raises:
        AssertionError: Raised when payload keys differ.
    """

    report = _build_importer(
        _InMemoryTransactionRepository(),
        batch_id_factory=lambda _created_at: "import_fixed",
    ).job_import_from_csv(_csv("15.01.2025,10:30,,JR-2222,Coffee,1,1,EUR,,,"))

    assert report.to_payload() == {
        "imported": 0,
        "skipped": 1,
        "failed": 0,
        "errors": [],
        "batchId": "import_fixed",
    }


def test_jobs_csv_import_keeps_unicode_separators_inside_a_row() -> None:
    """Treat only newline as a row break so cell text may hold Unicode separators.

    Returns:
        None: Assertions validate one row per source line.

    Raises:
        AssertionError: Raised when a cell is split into an extra row.
    """

    repository = _InMemoryTransactionRepository()

    report = _build_importer(repository).job_import_from_csv(
        _csv("15.01.2025,10:30,7001,JR-2222,Diesel,10,15,EUR,Latvia,LV,Nes\u2028te\x0cRiga").replace("\n", "\r\n")
    )

    assert (report.imported, report.skipped, report.failed) == (1, 0, 0)
    assert repository.records[0].station_name == "Nes\u2028te\x0cRiga"


def test_jobs_csv_import_isolates_oversized_field_rows() -> None:
    """Record a row whose cell exceeds the CSV field limit and continue.

    Returns:
        None: Assertions validate failure isolation for malformed rows.

    Raises:
        AssertionError: Raised when the malformed row aborts the batch.
    """

    repository = _InMemoryTransactionRepository()
    oversized_station = "N" * 200_000

    report = _build_importer(repository).job_import_from_csv(
        _csv(
            f"15.01.2025,10:30,7001,JR-2222,Diesel,10,15,EUR,Latvia,LV,{oversized_station}",
            "15.01.2025,10:40,7001,JR-2222,Diesel,10,15,EUR,Latvia,LV,Neste",
        )
    )

    assert (report.imported, report.skipped, report.failed) == (1, 0, 1)
    assert report.errors[0].startswith("Row 2: field larger than field limit")
    assert [record.station_name for record in repository.records] == ["Neste"]


def test_jobs_csv_import_rejects_unparseable_header() -> None:
    """Report a header parse failure as a row 1 error without importing rows.

    Returns:
        None: Assertions validate header failure report.

    Raises:
        AssertionError: Raised when the batch is not rejected.
    """

    repository = _InMemoryTransactionRepository()

    report = _build_importer(repository).job_import_from_csv(
        _HEADER + "," + "X" * 200_000 + "\n15.01.2025,10:30,7001,JR-2222,Diesel,10,15,EUR,Latvia,LV,Neste\n"
    )

    assert (report.imported, report.skipped, report.failed) == (0, 0, 0)
    assert len(report.errors) == 1
    assert report.errors[0].startswith("Row 1: ")
    assert repository.records == []
