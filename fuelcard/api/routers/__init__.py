"""API router package for endpoint composition."""

from .auth import api_check_bearer_key
from .health import api_create_health_router
from .transactions import api_create_transactions_router

__all__ = ["api_check_bearer_key", "api_create_health_router", "api_create_transactions_router"]
