"""Job layer package for CSV import and telematics enrichment workflows."""

from .csv_import import STRUCTURAL_ERROR_MESSAGE, TransactionCsvImporter, job_generate_batch_id
from .enrichment import TransactionEnrichmentJob
from .interfaces import (
	EnrichmentJobPort,
	EnrichmentRunResult,
	RowParseOutcome,
	TransactionImporterPort,
)
from .row_parser import TransactionRowParser

__all__ = [
	"EnrichmentJobPort",
	"EnrichmentRunResult",
	"RowParseOutcome",
	"STRUCTURAL_ERROR_MESSAGE",
	"TransactionCsvImporter",
	"TransactionEnrichmentJob",
	"TransactionImporterPort",
	"TransactionRowParser",
	"job_generate_batch_id",
]
