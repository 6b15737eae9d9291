"""
Module: main.py
Description: FastAPI application entry point for the delivery service.

Initializes the FastAPI application with routes and error handlers, and
builds the delivery components once at startup: the backend selected
by configuration, the background scheduler and the orchestrator.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi import status as status_codes
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from channel_delivery.config.settings import settings
from channel_delivery.delivery.orchestrator import DeliveryOrchestrator
from channel_delivery.delivery.scheduler import DeliveryScheduler
from channel_delivery.errors import DecodeError, TransportError, ValidationError
from channel_delivery.gateways import build_gateway
from channel_delivery.handlers.business import router as business_router
from channel_delivery.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def _error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": status_code,
                "message": message,
                "type": error_type
            }
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the error handlers mapping service errors to HTTP responses.

    ValidationError -> 400, TransportError/DecodeError -> 502,
    HTTPException -> its own status, anything else -> 500.
    """

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning(
            "Rejected invalid request",
            detail=str(exc),
            path=request.url.path,
            method=request.method
        )
        return _error_response(status_codes.HTTP_400_BAD_REQUEST, str(exc), "validation_error")

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Request body validation failed",
            errors=exc.errors(),
            path=request.url.path
        )
        return _error_response(status_codes.HTTP_400_BAD_REQUEST, "Invalid request", "validation_error")

    @app.exception_handler(TransportError)
    @app.exception_handler(DecodeError)
    async def upstream_error_handler(request: Request, exc: Exception):
        logger.error(
            "Upstream provider failure",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path
        )
        return _error_response(status_codes.HTTP_502_BAD_GATEWAY, str(exc), "upstream_error")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(
            "HTTP exception occurred",
            status_code=exc.status_code,
            detail=exc.detail,
            path=request.url.path,
            method=request.method
        )
        return _error_response(exc.status_code, str(exc.detail), "http_exception")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception occurred",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method
        )
        return _error_response(
            status_codes.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            "internal_error"
        )


# Initialize FastAPI app
app = FastAPI(
    title="Channel Delivery Service",
    description="Channel credentials and delayed notification delivery",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.include_router(business_router)
register_exception_handlers(app)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "backend": settings.backend_mode.value,
        "version": settings.app_version,
        "environment": settings.stage
    }


@app.on_event("startup")
async def startup_event():
    """
    Build the delivery components.

    A ConfigError from build_gateway, or a failure to reach the backend
    in gateway.start(), aborts startup. The gateway's clients are closed
    before the error propagates.
    """
    configure_logging(settings.log_level)
    logger.info(
        "Starting channel delivery service",
        version=settings.app_version,
        stage=settings.stage,
        backend=settings.backend_mode.value
    )

    gateway = build_gateway(settings)
    try:
        await gateway.start()
    except Exception as e:
        logger.error(
            "Delivery backend failed to start",
            backend=gateway.name,
            error=str(e),
            error_type=type(e).__name__
        )
        await gateway.close()
        raise

    scheduler = DeliveryScheduler(worker_count=settings.worker_count)
    scheduler.start()

    app.state.gateway = gateway
    app.state.scheduler = scheduler
    app.state.orchestrator = DeliveryOrchestrator(
        gateway,
        scheduler,
        max_jitter_ms=settings.max_jitter_ms
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the scheduler and release backend connections."""
    logger.info("Shutting down channel delivery service")
    await app.state.scheduler.stop()
    await app.state.gateway.close()
