"""HTTP surface: FastAPI application factory plus health and transaction routers."""

from .application import create_api_application
from .routers import api_create_health_router, api_create_transactions_router

__all__ = ["api_create_health_router", "api_create_transactions_router", "create_api_application"]
