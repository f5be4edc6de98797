"""Project-native typed exceptions for telematics adapter failures."""

from __future__ import annotations


class TelematicsAdapterError(Exception):
    """Base exception for adapter-level telematics failures.

    Attributes:
        status_code: Optional upstream HTTP status code.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TelematicsConnectionError(TelematicsAdapterError, ConnectionError):
    """Transport-level connectivity failure or non-success HTTP status."""


class TelematicsTimeoutError(TelematicsAdapterError, TimeoutError):
    """Transport timeout while waiting for the provider response."""


class TelematicsResponseError(TelematicsAdapterError, ValueError):
    """Provider answered with an error payload or an unexpected document shape."""
