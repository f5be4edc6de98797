"""Typed interfaces for adapter-layer responsibilities."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol


@dataclass(frozen=True)
class UnitPositionData:
    """GPS position and odometer of one telematics unit at a point in time.

    Attributes:
        latitude: Unit latitude.
        longitude: Unit longitude.
        odometer: Optional GPS odometer reading in kilometres.
        recorded_at: Provider timestamp of the position fix.
    """

    latitude: Decimal
    longitude: Decimal
    odometer: int | None
    recorded_at: datetime


class TelematicsAdapterPort(Protocol):
    """Port definition for reading historical unit positions from a telematics provider."""

    def adapter_source_name(self) -> str:
        """Return adapter source identifier for diagnostics.

        Returns:
            str: Human-readable upstream source identifier.
        """

    def adapter_fetch_unit_position(self, unit_id: int, at: datetime) -> UnitPositionData | None:
        """Fetch unit position closest to the given timestamp.

        Args:
            unit_id: Provider unit identifier.
            at: Naive local timestamp of interest.

        Returns:
            UnitPositionData | None: Position data, or None when the provider has none.

        Raises:
            ConnectionError: Raised when upstream connection fails.
            TimeoutError: Raised when request exceeds timeout.
            ValueError: Raised when the upstream response is malformed.
        """
