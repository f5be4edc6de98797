"""Domain models and pure parsing helpers used across application layers."""

from .csv_fields import CsvRowFields, csv_build_header_map
from .currency import (
    DEFAULT_EUR_RATES,
    DEFAULT_SETTLEMENT_CURRENCY,
    CurrencyConverter,
    RateLookupPort,
    StaticRateTable,
)
from .errors import (
    CsvStructureError,
    InvalidTimestampError,
    InvalidVehicleError,
    MissingColumnError,
    MissingValueError,
    RowParseError,
)
from .locale_parsing import locale_build_timestamp_text, locale_parse_decimal, locale_parse_timestamp
from .models import EnrichmentStatus, FuelTransactionRecord, HealthStatus, ImportBatchReport, ProductCategory
from .product_classifier import (
    DEFAULT_CATEGORY_RULES,
    DEFAULT_FUEL_KEYWORDS,
    ProductClassifier,
    ProductRule,
    classifier_unit_for,
)

__all__ = [
    "CsvRowFields",
    "CsvStructureError",
    "CurrencyConverter",
    "DEFAULT_CATEGORY_RULES",
    "DEFAULT_EUR_RATES",
    "DEFAULT_FUEL_KEYWORDS",
    "DEFAULT_SETTLEMENT_CURRENCY",
    "EnrichmentStatus",
    "FuelTransactionRecord",
    "HealthStatus",
    "ImportBatchReport",
    "InvalidTimestampError",
    "InvalidVehicleError",
    "MissingColumnError",
    "MissingValueError",
    "ProductCategory",
    "ProductClassifier",
    "ProductRule",
    "RateLookupPort",
    "RowParseError",
    "StaticRateTable",
    "classifier_unit_for",
    "csv_build_header_map",
    "locale_build_timestamp_text",
    "locale_parse_decimal",
    "locale_parse_timestamp",
]
