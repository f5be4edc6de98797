"""Project-native typed exceptions for CSV import failures."""

from __future__ import annotations


class CsvStructureError(ValueError):
    """CSV body has no header or no data rows."""


class RowParseError(ValueError):
    """Base exception for row-level parse and validation failures.

    Attributes:
        field_name: Optional CSV column name the failure relates to.
    """

    def __init__(self, message: str, field_name: str | None = None):
        super().__init__(message)
        self.field_name = field_name


class MissingColumnError(RowParseError):
    """Required column is absent from the CSV header."""


class MissingValueError(RowParseError):
    """Required column is present but the cell is blank."""


class InvalidVehicleError(RowParseError):
    """Row has no usable vehicle number."""


class InvalidTimestampError(RowParseError):
    """Date and time cells do not form a valid timestamp."""
