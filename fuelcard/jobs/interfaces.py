"""Typed interfaces for job-layer import and enrichment responsibilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from fuelcard.domain import FuelTransactionRecord, ImportBatchReport

RowParseStatus = Literal["parsed", "skipped", "failed"]


@dataclass(frozen=True)
class RowParseOutcome:
    """Result of parsing one CSV data row.

    Attributes:
        status: `parsed` with a record, `skipped` for non-fuel products,
            `failed` with a message.
        record: Parsed record when status is `parsed`.
        message: Failure message when status is `failed`.
    """

    status: RowParseStatus
    record: FuelTransactionRecord | None = None
    message: str | None = None

    @classmethod
    def outcome_parsed(cls, record: FuelTransactionRecord) -> RowParseOutcome:
        return cls(status="parsed", record=record)

    @classmethod
    def outcome_skipped(cls) -> RowParseOutcome:
        return cls(status="skipped")

    @classmethod
    def outcome_failed(cls, message: str) -> RowParseOutcome:
        return cls(status="failed", message=message)


@dataclass(frozen=True)
class EnrichmentRunResult:
    """Counters for one enrichment run.

    Attributes:
        processed: Pending records examined.
        enriched: Records marked `enriched`.
        failed: Records marked `failed`.
    """

    processed: int
    enriched: int
    failed: int

    def to_payload(self) -> dict[str, int]:
        return {"processed": self.processed, "enriched": self.enriched, "failed": self.failed}


class TransactionImporterPort(Protocol):
    """Port definition for CSV transaction import."""

    def job_import_from_csv(self, raw_csv_text: str) -> ImportBatchReport:
        """Import one CSV body and report per-row outcomes.

        Args:
            raw_csv_text: Complete CSV text including header.

        Returns:
            ImportBatchReport: Immutable batch outcome.
        """


class EnrichmentJobPort(Protocol):
    """Port definition for enrichment of pending transactions."""

    def job_enrich_pending(self, limit: int) -> EnrichmentRunResult:
        """Enrich up to `limit` pending transactions.

        Args:
            limit: Max records to process.

        Returns:
            EnrichmentRunResult: Run counters.
        """
