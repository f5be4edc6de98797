"""European date and number normalization helpers for fuel-card exports.

Fuel-card providers export dates as `DD.MM.YYYY` and decimals with a comma
separator and optional whitespace thousand separators. These helpers convert
them to canonical forms while keeping the tolerant behavior of the import
contract: malformed dates pass through unchanged and non-numeric amounts
degrade to their numeric prefix (or zero) instead of failing.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation

from .errors import InvalidTimestampError

logger = logging.getLogger(__name__)

_EUROPEAN_DATE_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")
_WHITESPACE_PATTERN = re.compile(r"\s")
_NUMERIC_PREFIX_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def locale_build_timestamp_text(date_text: str, time_text: str) -> str:
    """Build canonical naive timestamp text from separate date and time cells.

    Args:
        date_text: Date cell, `DD.MM.YYYY` (or unpadded `D.M.YYYY`) is
            reordered to zero-padded `YYYY-MM-DD`.
        time_text: Time cell, used as-is.

    Returns:
        str: `<date> <time>` text. No validation is applied.
    """

    date_match = _EUROPEAN_DATE_PATTERN.match(date_text)
    if date_match is not None:
        day, month, year = date_match.groups()
        date_text = f"{int(year):04d}-{int(month):02d}-{int(day):02d}"
    return f"{date_text} {time_text}"


def locale_parse_timestamp(date_text: str, time_text: str) -> datetime:
    """Parse date and time cells into a naive datetime.

    Args:
        date_text: Date cell text.
        time_text: Time cell text.

    Returns:
        datetime: Naive local timestamp.

    Raises:
        InvalidTimestampError: Raised when the normalized text is not a timestamp.
    """

    timestamp_text = locale_build_timestamp_text(date_text, time_text)
    try:
        parsed_value = datetime.fromisoformat(timestamp_text)
    except ValueError as error:
        raise InvalidTimestampError(f"Invalid transaction date/time: {timestamp_text}") from error
    return parsed_value.replace(tzinfo=None)


def locale_parse_decimal(value: str) -> Decimal:
    """Parse a European-formatted number.

    Whitespace is removed, the comma decimal separator is swapped for a
    period, and the longest numeric prefix is parsed. Input without a numeric
    prefix yields zero.

    Args:
        value: Raw number text, e.g. `"1 234,50"`.

    Returns:
        Decimal: Parsed number.
    """

    normalized_value = _WHITESPACE_PATTERN.sub("", value).replace(",", ".")
    prefix_match = _NUMERIC_PREFIX_PATTERN.match(normalized_value)
    if prefix_match is None:
        logger.warning("non-numeric value %r parsed as 0", value)
        return Decimal("0")

    numeric_text = prefix_match.group(0)
    if numeric_text != normalized_value:
        logger.warning("value %r truncated to numeric prefix %s", value, numeric_text)
    try:
        return Decimal(numeric_text)
    except InvalidOperation:
        logger.warning("non-numeric value %r parsed as 0", value)
        return Decimal("0")
