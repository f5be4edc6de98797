"""GPS and odometer enrichment of imported transactions from telematics history."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from fuelcard.adapters import TelematicsAdapterPort
from fuelcard.db import TransactionEnrichmentUpdate, TransactionRepositoryPort
from fuelcard.domain import FuelTransactionRecord

from .interfaces import EnrichmentJobPort, EnrichmentRunResult

logger = logging.getLogger(__name__)


class TransactionEnrichmentJob(EnrichmentJobPort):
    """Resolve unit positions for pending transactions and record the outcome.

    Each pending record ends the run as either `enriched` or `failed`; provider
    errors for one record do not stop the run.
    """

    def __init__(
        self,
        transaction_repository: TransactionRepositoryPort,
        telematics_adapter: TelematicsAdapterPort,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize enrichment job dependencies.

        Args:
            transaction_repository: Transaction store.
            telematics_adapter: Telematics provider adapter.
            clock: Optional clock for `enriched_at`, defaults to `datetime.now`.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if transaction_repository is None:
            raise ValueError("transaction_repository must not be None")
        if telematics_adapter is None:
            raise ValueError("telematics_adapter must not be None")

        self._transaction_repository = transaction_repository
        self._telematics_adapter = telematics_adapter
        self._clock = clock or datetime.now

    def job_enrich_pending(self, limit: int) -> EnrichmentRunResult:
        """Enrich up to `limit` pending transactions.

        Args:
            limit: Max records to process.

        Returns:
            EnrichmentRunResult: Processed, enriched and failed counters.

        Raises:
            ValueError: Raised when limit is not positive.
            RuntimeError: Raised when the store cannot be read or written.
        """

        if limit <= 0:
            raise ValueError("limit must be > 0")

        pending_records = self._transaction_repository.db_transaction_list_pending_enrichment(limit)
        enriched = 0
        failed = 0
        for record in pending_records:
            if self._job_enrich_record(record):
                enriched += 1
            else:
                failed += 1

        logger.info(
            "enrichment finished source=%s processed=%d enriched=%d failed=%d",
            self._telematics_adapter.adapter_source_name(),
            len(pending_records),
            enriched,
            failed,
        )
        return EnrichmentRunResult(processed=len(pending_records), enriched=enriched, failed=failed)

    def _job_enrich_record(self, record: FuelTransactionRecord) -> bool:
        if record.transaction_id is None or record.telematics_unit_id is None:
            raise ValueError("pending record must have transaction_id and telematics_unit_id")

        try:
            position = self._telematics_adapter.adapter_fetch_unit_position(
                unit_id=record.telematics_unit_id,
                at=record.transaction_date,
            )
        except (ConnectionError, TimeoutError, ValueError) as error:
            logger.warning(
                "enrichment lookup failed transaction_id=%s unit_id=%s error=%s",
                record.transaction_id,
                record.telematics_unit_id,
                error,
            )
            position = None

        if position is None:
            self._transaction_repository.db_transaction_mark_enrichment_failed(record.transaction_id)
            return False

        self._transaction_repository.db_transaction_mark_enriched(
            TransactionEnrichmentUpdate(
                transaction_id=record.transaction_id,
                gps_latitude=position.latitude,
                gps_longitude=position.longitude,
                odometer_gps=position.odometer,
                enriched_at=self._clock(),
            )
        )
        return True
