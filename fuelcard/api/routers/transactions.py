"""Transaction API router composition for CSV import, listing and enrichment endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, Request, status
from fastapi.responses import JSONResponse

from fuelcard.config import AppSettings
from fuelcard.db import TransactionRepositoryPort
from fuelcard.jobs import EnrichmentJobPort, TransactionImporterPort

from .auth import api_check_bearer_key, api_unauthorized_response


async def api_read_csv_body(request: Request) -> str:
    """Read the raw request body as CSV text.

    Args:
        request: Incoming request.

    Returns:
        str: Body decoded as UTF-8 with an optional byte order mark removed.
    """

    raw_body = await request.body()
    return raw_body.decode("utf-8-sig", errors="replace")


def api_create_transactions_router(
    settings: AppSettings,
    transaction_importer: TransactionImporterPort,
    transaction_repository: TransactionRepositoryPort,
    enrichment_job: EnrichmentJobPort | None = None,
) -> APIRouter:
    """Create transactions router with import, list and enrichment endpoints.

    All endpoints require `Authorization: Bearer <INTERNAL_API_KEY>`.

    Args:
        settings: Runtime settings used for the API key and pagination defaults.
        transaction_importer: CSV batch importer.
        transaction_repository: Transaction store for list reads.
        enrichment_job: Optional enrichment job, absent when telematics is not configured.

    Returns:
        APIRouter: Router exposing transaction APIs.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if transaction_importer is None:
        raise ValueError("transaction_importer must not be None")
    if transaction_repository is None:
        raise ValueError("transaction_repository must not be None")

    router = APIRouter(prefix="/transactions", tags=["transactions"])

    @router.post("/import")
    def api_transactions_import(
        raw_csv_text: str = Depends(api_read_csv_body),
        authorization: str | None = Header(default=None),
    ) -> JSONResponse:
        """Import one fuel-card CSV export sent as the raw request body.

        Returns:
            JSONResponse: Batch report payload.

        Raises:
            RuntimeError: Raised when import fails unexpectedly.
        """

        auth_error = api_check_bearer_key(authorization, settings.internal_api_key)
        if auth_error is not None:
            return api_unauthorized_response(auth_error)

        import_report = transaction_importer.job_import_from_csv(raw_csv_text)
        return JSONResponse(content=import_report.to_payload(), status_code=status.HTTP_200_OK)

    @router.get("")
    def api_transactions_list(
        vehicle_number: str = Query(default=""),
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
        authorization: str | None = Header(default=None),
    ) -> JSONResponse:
        """Return transactions of one vehicle ordered by transaction date.

        Args:
            vehicle_number: Vehicle registration number.
            limit: Max rows to return.
            offset: Rows to skip.

        Returns:
            JSONResponse: Transactions list payload.

        Raises:
            RuntimeError: Raised when repository read fails.
        """

        auth_error = api_check_bearer_key(authorization, settings.internal_api_key)
        if auth_error is not None:
            return api_unauthorized_response(auth_error)

        normalized_vehicle_number = vehicle_number.strip()
        if not normalized_vehicle_number:
            payload = {
                "status": "error",
                "message": "vehicle_number must not be blank",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        applied_limit = min(limit, settings.api_max_limit)
        transaction_rows = transaction_repository.db_transaction_list_by_vehicle(
            vehicle_number=normalized_vehicle_number,
            limit=applied_limit,
            offset=offset,
        )
        payload = {
            "items": [transaction_record.to_payload() for transaction_record in transaction_rows],
            "page": {
                "limit": limit,
                "applied_limit": applied_limit,
                "offset": offset,
                "returned": len(transaction_rows),
            },
            "filters": {"vehicle_number": normalized_vehicle_number},
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/enrich")
    def api_transactions_enrich(
        limit: int = Query(default=settings.enrichment_batch_limit, ge=1),
        authorization: str | None = Header(default=None),
    ) -> JSONResponse:
        """Run one enrichment pass over pending transactions.

        Args:
            limit: Max pending records to process.

        Returns:
            JSONResponse: Enrichment counters, or 503 when telematics is not configured.

        Raises:
            RuntimeError: Raised when repository access fails.
        """

        auth_error = api_check_bearer_key(authorization, settings.internal_api_key)
        if auth_error is not None:
            return api_unauthorized_response(auth_error)

        if enrichment_job is None:
            payload = {
                "status": "error",
                "message": "telematics enrichment is not configured",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

        run_result = enrichment_job.job_enrich_pending(limit=min(limit, settings.api_max_limit))
        return JSONResponse(content=run_result.to_payload(), status_code=status.HTTP_200_OK)

    return router
