"""Header-indexed field access for fuel-card CSV rows."""

from __future__ import annotations

from collections.abc import Sequence

from .errors import MissingColumnError, MissingValueError


def csv_build_header_map(header_cells: Sequence[str]) -> dict[str, int]:
    """Build trimmed column name to index map from the header row.

    Args:
        header_cells: Raw header cells.

    Returns:
        dict[str, int]: Column index keyed by trimmed name. Later duplicates win.
    """

    return {cell.strip(): index for index, cell in enumerate(header_cells)}


class CsvRowFields:
    """Typed accessors over one CSV row resolved through a header map."""

    def __init__(self, row: Sequence[str], header_map: dict[str, int]):
        self._row = row
        self._header_map = header_map

    def field_required(self, field_name: str) -> str:
        """Return trimmed value of a required column.

        Args:
            field_name: CSV column name.

        Returns:
            str: Non-blank trimmed cell value.

        Raises:
            MissingColumnError: Raised when the column is absent from the header.
            MissingValueError: Raised when the cell is missing or blank.
        """

        if field_name not in self._header_map:
            raise MissingColumnError(f"Missing required column: {field_name}", field_name=field_name)

        value = self._field_cell(self._header_map[field_name])
        if value is None:
            raise MissingValueError(f"Missing value for: {field_name}", field_name=field_name)
        return value

    def field_optional(self, field_name: str) -> str | None:
        """Return trimmed value or None when the column or value is absent."""

        index = self._header_map.get(field_name)
        if index is None:
            return None
        return self._field_cell(index)

    def field_or_default(self, field_name: str, default: str) -> str:
        """Return trimmed value or `default` when the column or value is absent."""

        value = self.field_optional(field_name)
        return default if value is None else value

    def _field_cell(self, index: int) -> str | None:
        if index >= len(self._row):
            return None
        value = self._row[index].strip()
        return value or None
