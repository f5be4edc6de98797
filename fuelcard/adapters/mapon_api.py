"""Mapon telematics API adapter for historical unit position lookups."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Final
from zoneinfo import ZoneInfo

import httpx

from .interfaces import TelematicsAdapterPort, UnitPositionData
from .telematics_errors import TelematicsConnectionError, TelematicsResponseError, TelematicsTimeoutError


class MaponApiAdapter(TelematicsAdapterPort):
    """Adapter for the Mapon `unit_data/history_point` endpoint.

    Transaction timestamps are naive local times; they are localized with the
    configured timezone and sent to the provider in UTC.
    """

    _USER_AGENT: Final[str] = "fuelcard-import/1.0 (Python/httpx)"
    _HISTORY_POINT_PATH: Final[str] = "/unit_data/history_point.json"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://mapon.com/api/v1",
        local_timezone: str = "Europe/Riga",
        request_timeout_seconds: float = 30.0,
    ):
        """Initialize Mapon adapter.

        Args:
            api_key: Mapon API key.
            base_url: API base URL.
            local_timezone: IANA timezone of naive transaction timestamps.
            request_timeout_seconds: HTTP request timeout in seconds.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_api_key = api_key.strip()
        normalized_base_url = base_url.strip()
        if not normalized_api_key:
            raise ValueError("api_key must not be blank")
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._api_key = normalized_api_key
        self._base_url = normalized_base_url.rstrip("/")
        self._local_timezone = ZoneInfo(local_timezone)
        self._http_client = httpx.Client(
            timeout=request_timeout_seconds,
            headers={"User-Agent": self._USER_AGENT},
        )

    def adapter_source_name(self) -> str:
        return "mapon_api"

    def adapter_fetch_unit_position(self, unit_id: int, at: datetime) -> UnitPositionData | None:
        """Fetch unit position at the given local timestamp.

        Args:
            unit_id: Mapon unit identifier.
            at: Naive local timestamp of interest.

        Returns:
            UnitPositionData | None: Position data, or None when Mapon has no point.

        Raises:
            TelematicsConnectionError: Raised for network and non-success HTTP status.
            TelematicsTimeoutError: Raised when the request times out.
            TelematicsResponseError: Raised when the payload is an error or malformed.
        """

        if unit_id <= 0:
            raise ValueError("unit_id must be > 0")

        query_parameters = {
            "key": self._api_key,
            "unit_id": str(unit_id),
            "datetime": self._adapter_format_utc(at),
            "include[]": "mileage",
        }
        payload = self._adapter_http_get_json(
            url=f"{self._base_url}{self._HISTORY_POINT_PATH}",
            query_parameters=query_parameters,
        )
        return self._adapter_parse_history_point(payload)

    def adapter_close(self) -> None:
        """Close the pooled HTTP client."""

        self._http_client.close()

    def _adapter_format_utc(self, value: datetime) -> str:
        localized_value = value if value.tzinfo is not None else value.replace(tzinfo=self._local_timezone)
        return localized_value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    def _adapter_http_get_json(self, url: str, query_parameters: dict[str, str]) -> Any:
        """Execute one HTTP GET and decode the JSON body.

        Args:
            url: Endpoint URL.
            query_parameters: Query string parameters.

        Returns:
            Any: Decoded JSON document.

        Raises:
            TelematicsConnectionError: Raised for network and non-success HTTP status.
            TelematicsTimeoutError: Raised when the request times out.
            TelematicsResponseError: Raised when the body is not JSON.
        """

        try:
            response = self._http_client.get(url, params=query_parameters)
            response.raise_for_status()
        except httpx.TimeoutException as error:
            raise TelematicsTimeoutError("Mapon request timed out") from error
        except httpx.HTTPStatusError as error:
            raise TelematicsConnectionError(
                f"Mapon upstream returned HTTP {error.response.status_code}",
                status_code=error.response.status_code,
            ) from error
        except httpx.HTTPError as error:
            raise TelematicsConnectionError("Mapon transport request failed") from error

        try:
            return response.json()
        except ValueError as error:
            raise TelematicsResponseError("Mapon response is not valid JSON") from error

    def _adapter_parse_history_point(self, payload: Any) -> UnitPositionData | None:
        """Map a history-point document to position data.

        Args:
            payload: Decoded JSON document.

        Returns:
            UnitPositionData | None: Position data, or None for an empty unit list.

        Raises:
            TelematicsResponseError: Raised for error payloads and unexpected shapes.
        """

        if not isinstance(payload, dict):
            raise TelematicsResponseError("Mapon response must be a JSON object")

        error_payload = payload.get("error")
        if error_payload:
            error_message = error_payload.get("msg") if isinstance(error_payload, dict) else str(error_payload)
            raise TelematicsResponseError(f"Mapon request rejected: {error_message}")

        data = payload.get("data")
        units = data.get("units") if isinstance(data, dict) else None
        if not isinstance(units, list):
            raise TelematicsResponseError("Mapon response missing data.units")
        if not units:
            return None

        unit = units[0]
        if not isinstance(unit, dict):
            raise TelematicsResponseError("Mapon unit entry must be an object")

        try:
            latitude = Decimal(str(unit["lat"]))
            longitude = Decimal(str(unit["lng"]))
        except (KeyError, InvalidOperation) as error:
            raise TelematicsResponseError("Mapon unit entry missing valid lat/lng") from error

        mileage = unit.get("mileage")
        if isinstance(mileage, dict):
            mileage = mileage.get("value")
        odometer = int(mileage) if isinstance(mileage, (int, float)) else None

        recorded_at_text = str(unit.get("datetime") or "").strip()
        try:
            recorded_at = datetime.fromisoformat(recorded_at_text.replace("Z", "+00:00"))
        except ValueError as error:
            raise TelematicsResponseError(f"Mapon unit entry has invalid datetime={recorded_at_text!r}") from error

        return UnitPositionData(
            latitude=latitude,
            longitude=longitude,
            odometer=odometer,
            recorded_at=recorded_at,
        )
