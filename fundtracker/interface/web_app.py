"""Mini README: FastAPI transport for the fund tracker.

Structure:
    * create_application - application factory wiring JSON routes.
    * _http_error - maps ledger errors onto HTTP status codes.

Admin routes create collections, add contributors and record payments;
the public route returns the read-only view with contributors in display
order and aggregate totals. All routes delegate to ``FundManager``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from ..configuration import FundTrackerSettings, get_settings
from ..funds import FundManager
from ..ledger import InvalidAmount, InvalidInput, LedgerError, NotFound, StaleWrite
from ..logging_utils import configure_root_logger, get_logger, level_for_environment
from ..storage import create_store
from .schemas import CollectionCreate, ContributorCreate, ContributorUpdate, PaymentCreate, StatusChange

LOGGER = get_logger(__name__)


def _http_error(error: LedgerError) -> HTTPException:
    """Translate a domain error into the matching HTTP response."""

    if isinstance(error, NotFound):
        status_code = 404
    elif isinstance(error, StaleWrite):
        status_code = 409
    elif isinstance(error, (InvalidInput, InvalidAmount)):
        status_code = 400
    else:
        status_code = 500
    LOGGER.info("Request failed with %s: %s", status_code, error)
    return HTTPException(status_code=status_code, detail=str(error))


def create_application(
    manager: Optional[FundManager] = None,
    settings: Optional[FundTrackerSettings] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    configure_root_logger(level_for_environment(settings.environment))
    if manager is None:
        manager = FundManager(create_store(settings), settings)
    manager.initialise()

    app = FastAPI(title="Fund Collection Tracker", version="0.1.0")
    app.state.manager = manager

    @app.get("/")
    async def index() -> JSONResponse:
        """Describe the service and the configured store."""

        return JSONResponse(
            {
                "service": "fundtracker",
                "storage": manager.store.backend_name,
                "overpaymentPolicy": settings.overpayment_policy.value,
                "currency": settings.currency_symbol,
            }
        )

    @app.get("/api/init-db")
    async def init_db() -> JSONResponse:
        """Initialise storage and report the logical tables."""

        tables = manager.initialise()
        return JSONResponse({"message": "Database initialized successfully", "tables": tables})

    @app.get("/api/collections")
    async def list_collections() -> JSONResponse:
        """Return every collection, newest first, with its contributors."""

        collections = manager.list_collections()
        return JSONResponse([collection.as_dict() for collection in collections])

    @app.post("/api/collections")
    async def create_collection(body: CollectionCreate) -> JSONResponse:
        try:
            collection = manager.create_collection(body.name, body.description or "", body.targetAmount)
        except LedgerError as error:
            raise _http_error(error) from error
        return JSONResponse(collection.as_dict(), status_code=201)

    @app.get("/api/collections/{collection_id}")
    async def get_collection(collection_id: str) -> JSONResponse:
        """Admin view: contributors in storage order plus totals."""

        try:
            payload = manager.admin_view(collection_id)
        except LedgerError as error:
            raise _http_error(error) from error
        return JSONResponse(payload)

    @app.delete("/api/collections/{collection_id}")
    async def delete_collection(collection_id: str) -> JSONResponse:
        try:
            manager.delete_collection(collection_id)
        except LedgerError as error:
            raise _http_error(error) from error
        return JSONResponse({"success": True})

    @app.get("/api/collections/{collection_id}/summary")
    async def collection_summary(collection_id: str) -> JSONResponse:
        try:
            summary = manager.summarise(collection_id)
        except LedgerError as error:
            raise _http_error(error) from error
        return JSONResponse(summary.as_dict())

    @app.get("/api/collections/{collection_id}/public")
    async def public_view(collection_id: str) -> JSONResponse:
        """Read-only view for contributors: paid first, pending last."""

        try:
            payload = manager.public_view(collection_id)
        except LedgerError as error:
            raise _http_error(error) from error
        return JSONResponse(payload)

    @app.post("/api/collections/{collection_id}/contributors")
    async def add_contributor(collection_id: str, body: ContributorCreate) -> JSONResponse:
        try:
            contributor = manager.add_contributor(collection_id, body.name, body.amount)
        except LedgerError as error:
            raise _http_error(error) from error
        return JSONResponse(
            {"success": True, "id": contributor.contributor_id, "contributor": contributor.as_dict()}
        )

    @app.put("/api/collections/{collection_id}/contributors")
    async def update_contributor(collection_id: str, body: ContributorUpdate) -> JSONResponse:
        """Overwrite the paid amount; any submitted status is recomputed."""

        try:
            contributor = manager.update_contributor(
                collection_id, body.contributorId, body.paidAmount, body.paymentStatus
            )
        except LedgerError as error:
            raise _http_error(error) from error
        return JSONResponse({"success": True, "contributor": contributor.as_dict()})

    @app.post("/api/collections/{collection_id}/contributors/{contributor_id}/payments")
    async def record_payment(collection_id: str, contributor_id: str, body: PaymentCreate) -> JSONResponse:
        try:
            contributor = manager.record_payment(collection_id, contributor_id, body.amount)
        except LedgerError as error:
            raise _http_error(error) from error
        return JSONResponse({"success": True, "contributor": contributor.as_dict()})

    @app.post("/api/collections/{collection_id}/contributors/{contributor_id}/status")
    async def change_status(collection_id: str, contributor_id: str, body: StatusChange) -> JSONResponse:
        """Mark a contributor as paid or reset it to pending."""

        try:
            contributor = manager.set_status(collection_id, contributor_id, body.status)
        except LedgerError as error:
            raise _http_error(error) from error
        return JSONResponse({"success": True, "contributor": contributor.as_dict()})

    return app
