"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from iam.presentation import router as iam_router
from infrastructure.database.dependencies import (
    check_database_connection,
    close_database_connections,
)
from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import (
    get_email_settings,
    get_settings,
    get_storage_settings,
)
from infrastructure.version import __version__
from shipping.presentation import router as shipping_router


@asynccontextmanager
async def cargo_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Reporting of optional integrations that are switched off
    - Database engine disposal on shutdown
    """
    configure_logging()
    probe = DefaultStartupProbe()

    if not get_storage_settings().is_configured:
        probe.storage_not_configured()
    if not get_email_settings().enabled:
        probe.email_disabled()

    probe.application_started(version=__version__)

    yield

    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title=get_settings().app_name,
    description="Multi-tenant shipment tracking",
    version=__version__,
    lifespan=cargo_lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as 400 with per-field detail."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation failed",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


# Include IAM bounded context routes
app.include_router(iam_router)

# Include Shipping bounded context routes
app.include_router(shipping_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db() -> dict:
    """Check database connection health."""
    try:
        await check_database_connection()
    except DatabaseConnectionError as e:
        return {
            "status": "error",
            "connected": False,
            "error": str(e),
        }

    return {"status": "ok", "connected": True}
