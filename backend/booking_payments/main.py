"""
Booking Payments API - Main Application Entry Point

Accepts booking form submissions, prices them against the spreadsheet
catalog, charges through Stripe or records an invoice request, appends one
sheet row per participant and emails a confirmation.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from booking_payments.api.middleware import RequestLoggingMiddleware
from booking_payments.api.router import api_router
from booking_payments.core.config import get_settings
from booking_payments.core.exceptions import BookingError
from booking_payments.core.logging import get_logger, setup_logging
from booking_payments.core.metrics import metrics_endpoint, record_payment_request
from booking_payments.infrastructure import close_http_client

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
        port=settings.PORT,
    )
    if not settings.STRIPE_SECRET:
        logger.warning("stripe_secret_missing", message="Card payments will fail")
    if not settings.cors_origins:
        logger.warning("cors_whitelist_empty", message="Browsers will be refused")

    yield

    await close_http_client()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Booking payments: pricing, Stripe charges, invoices and sheet rows",
    lifespan=lifespan,
)

# Only whitelisted booking sites may post to the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    logger.error(
        "booking_failed",
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=exc.status_code,
    )
    if request.url.path == "/processPayment":
        record_payment_request("rejected" if exc.status_code < 500 else "failed")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.APP_ENV,
    }


@app.get("/metrics", include_in_schema=False)
def metrics():
    return metrics_endpoint()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("booking_payments.main:app", host="0.0.0.0", port=settings.PORT)
