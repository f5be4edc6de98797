"""Batch CSV import of fuel-card transactions with per-row outcome accounting."""

from __future__ import annotations

import csv
import logging
import secrets
from collections.abc import Callable
from datetime import datetime

from fuelcard.db import TransactionRepositoryPort
from fuelcard.domain import CsvStructureError, ImportBatchReport, csv_build_header_map

from .interfaces import TransactionImporterPort
from .row_parser import TransactionRowParser

logger = logging.getLogger(__name__)

STRUCTURAL_ERROR_MESSAGE = "CSV must contain header and at least one data row"


def job_generate_batch_id(created_at: datetime) -> str:
    """Build a unique import batch identifier.

    Args:
        created_at: Batch creation timestamp.

    Returns:
        str: `import_<YYYYmmdd_HHMMSS>_<8 hex chars>`.
    """

    return f"import_{created_at:%Y%m%d_%H%M%S}_{secrets.token_hex(4)}"


def job_csv_split_lines(raw_csv_text: str) -> tuple[str, list[tuple[int, str]]]:
    """Split CSV text into the header line and numbered data lines.

    Args:
        raw_csv_text: Complete CSV body.

    Returns:
        tuple[str, list[tuple[int, str]]]: Header line and `(row_number, line)`
            pairs, where the header is row 1. Blank lines are kept so row
            numbers match the source. Only `\n` ends a line, a trailing `\r`
            is dropped.

    Raises:
        CsvStructureError: Raised when fewer than two non-blank lines exist.
    """

    lines = [line.removesuffix("\r") for line in raw_csv_text.strip().split("\n")]
    if sum(1 for line in lines if line.strip()) < 2:
        raise CsvStructureError(STRUCTURAL_ERROR_MESSAGE)
    return lines[0], list(enumerate(lines[1:], start=2))


def job_csv_parse_line(line: str) -> list[str]:
    """Parse one comma-delimited, double-quote-escaped CSV line into cells.

    Raises:
        csv.Error: Raised when the line is malformed or a field exceeds the field size limit.
    """

    return next(csv.reader([line]), [])


class TransactionCsvImporter(TransactionImporterPort):
    """Drive one CSV body through the row parser and the transaction store.

    Rows are independent: a failing row is recorded and processing continues.
    Parsed records are saved immediately, one save per row, without retries.
    """

    def __init__(
        self,
        row_parser: TransactionRowParser,
        transaction_repository: TransactionRepositoryPort,
        clock: Callable[[], datetime] | None = None,
        batch_id_factory: Callable[[datetime], str] | None = None,
    ):
        """Initialize importer dependencies.

        Args:
            row_parser: Row parser building transaction records.
            transaction_repository: Append-only transaction store.
            clock: Optional naive local clock, defaults to `datetime.now`.
            batch_id_factory: Optional batch identifier factory.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if row_parser is None:
            raise ValueError("row_parser must not be None")
        if transaction_repository is None:
            raise ValueError("transaction_repository must not be None")

        self._row_parser = row_parser
        self._transaction_repository = transaction_repository
        self._clock = clock or datetime.now
        self._batch_id_factory = batch_id_factory or job_generate_batch_id

    def job_import_from_csv(self, raw_csv_text: str) -> ImportBatchReport:
        """Import one CSV body and report per-row outcomes.

        Args:
            raw_csv_text: Complete CSV text including header.

        Returns:
            ImportBatchReport: Imported/skipped/failed counters, ordered row
                errors and the batch identifier.
        """

        batch_id = self._batch_id_factory(self._clock())

        try:
            header_line, data_lines = job_csv_split_lines(raw_csv_text)
        except CsvStructureError as error:
            logger.warning("csv import rejected batch_id=%s reason=%s", batch_id, error)
            return ImportBatchReport(imported=0, skipped=0, failed=0, errors=(str(error),), batch_id=batch_id)

        try:
            header_map = csv_build_header_map(job_csv_parse_line(header_line))
        except csv.Error as error:
            logger.warning("csv import rejected batch_id=%s header error=%s", batch_id, error)
            return ImportBatchReport(imported=0, skipped=0, failed=0, errors=(f"Row 1: {error}",), batch_id=batch_id)

        imported = 0
        skipped = 0
        failed = 0
        errors: list[str] = []

        for row_number, line in data_lines:
            if not line.strip():
                continue

            try:
                outcome = self._row_parser.parser_parse_row(
                    row=job_csv_parse_line(line),
                    header_map=header_map,
                    batch_id=batch_id,
                    created_at=self._clock(),
                )
                if outcome.status == "skipped":
                    skipped += 1
                    continue
                if outcome.status == "failed" or outcome.record is None:
                    failed += 1
                    errors.append(f"Row {row_number}: {outcome.message}")
                    continue

                self._transaction_repository.db_transaction_save(outcome.record)
            except (RuntimeError, ValueError, csv.Error) as error:
                logger.warning("csv import row failed batch_id=%s row=%d error=%s", batch_id, row_number, error)
                failed += 1
                errors.append(f"Row {row_number}: {error}")
                continue

            imported += 1

        logger.info(
            "csv import finished batch_id=%s imported=%d skipped=%d failed=%d",
            batch_id,
            imported,
            skipped,
            failed,
        )
        return ImportBatchReport(
            imported=imported,
            skipped=skipped,
            failed=failed,
            errors=tuple(errors),
            batch_id=batch_id,
        )
