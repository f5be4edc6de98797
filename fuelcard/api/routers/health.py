"""Health endpoint router for application, database and schema status."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from fuelcard.db import DatabaseHealthPort


def api_create_health_router(db_health_service: DatabaseHealthPort) -> APIRouter:
    """Create health-check router.

    Args:
        db_health_service: DB-layer health service interface.

    Returns:
        APIRouter: Router exposing `/health`.

    Raises:
        ValueError: Raised when db_health_service is invalid.
    """

    if db_health_service is None:
        raise ValueError("db_health_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application and database health state.

        A reachable database without the transaction schema reports `degraded`
        with HTTP 200; an unreachable database reports HTTP 503.

        Returns:
            JSONResponse: Health payload.
        """

        target_label = db_health_service.db_connection_label()
        try:
            db_health = db_health_service.db_check_health()
        except ConnectionError as error:
            return JSONResponse(
                content={
                    "status": "degraded",
                    "app": "up",
                    "database": "down",
                    "detail": str(error),
                    "target": target_label,
                },
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        overall_status = "ok" if db_health.status == "ok" else "degraded"
        return JSONResponse(
            content={
                "status": overall_status,
                "app": "up",
                "database": db_health.status,
                "detail": db_health.detail,
                "target": target_label,
            },
            status_code=status.HTTP_200_OK,
        )

    return router
