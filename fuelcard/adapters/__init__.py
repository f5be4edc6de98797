"""Adapter layer package for telematics integration boundaries."""

from .interfaces import TelematicsAdapterPort, UnitPositionData
from .mapon_api import MaponApiAdapter
from .telematics_errors import (
	TelematicsAdapterError,
	TelematicsConnectionError,
	TelematicsResponseError,
	TelematicsTimeoutError,
)

__all__ = [
	"MaponApiAdapter",
	"TelematicsAdapterError",
	"TelematicsAdapterPort",
	"TelematicsConnectionError",
	"TelematicsResponseError",
	"TelematicsTimeoutError",
	"UnitPositionData",
]
