"""
PayGate Backend - FastAPI Application

Payment-acceptance backend for a PayPal checkout: serves the PayPal client
configuration, validates service and custom-amount selections, and records
completed transactions with an emailed receipt.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging
import uuid

from .config import Settings, settings as default_settings
from .exceptions import PaymentGatewayError, InputValidationError
from .db.init_db import Database, initialize_database
from .services.amount_validator import CustomAmountValidator
from .services.notification_service import ReceiptMailer, ReceiptNotifier
from .services.scheduler import NotificationScheduler
from .services.service_selector import ServiceSelector
from .services.transaction_service import TransactionRecorder
from .api.paypal import router as paypal_router
from .api.services import router as services_router
from .api.payments import router as payments_router
from .api.transactions import router as transactions_router


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Console logging at log_level, plus an ERROR-only file log if log_file is set."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=LOG_FORMAT
    )
    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def _request_id_header(request: Request) -> Optional[dict]:
    # Unhandled errors are rendered outside the request-id middleware
    request_id = _request_id(request)
    return {"X-Request-ID": request_id} if request_id else None


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application for the given settings.

    Components are created in the lifespan and stored on app.state; routes
    reach them through the dependencies in api/dependencies.py.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        - Startup: create the database handle, tables and catalog, start the
          notification scheduler, wire the validators and the recorder
        - Shutdown: stop the scheduler, close database connections
        """
        logger.info("Starting PayGate backend server...")

        if not settings.paypal_client_id:
            logger.error("PAYPAL_CLIENT_ID is not set; /config/paypal will fail")
        if not settings.email_enabled:
            logger.warning("EMAIL_USER/EMAIL_PASS not set; receipts will be skipped")

        database = Database(settings.database_url, timeout=settings.database_timeout)
        try:
            await initialize_database(database)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            await database.dispose()
            raise

        scheduler = NotificationScheduler()
        scheduler.start()

        notifier = ReceiptNotifier(scheduler, ReceiptMailer.from_settings(settings))

        app.state.settings = settings
        app.state.database = database
        app.state.scheduler = scheduler
        app.state.service_selector = ServiceSelector(database, min_price=settings.min_service_price)
        app.state.amount_validator = CustomAmountValidator(min_amount=settings.min_custom_amount)
        app.state.transaction_recorder = TransactionRecorder(
            database,
            notifier=notifier,
            default_currency=settings.default_currency
        )

        logger.info("Server startup complete")

        yield

        logger.info("Shutting down PayGate backend server...")

        try:
            await scheduler.shutdown(wait=True)
        except Exception as e:
            logger.error(f"Error during scheduler shutdown: {e}")

        await database.dispose()

    app = FastAPI(
        title="PayGate API",
        description="PayPal checkout backend: price validation and transaction recording",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Reuse the caller's X-Request-ID or assign one; echo it on the response."""
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(PaymentGatewayError)
    async def payment_gateway_error_handler(request: Request, exc: PaymentGatewayError):
        """
        Render domain errors in the standard envelope.

        Client errors log at WARNING; 5xx ones were already logged with their
        cause where they were raised.
        """
        log = logger.warning if exc.status_code < 500 else logger.error
        log(f"{exc.error_code}: {exc.message} [{request.method} {request.url.path}]")

        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(_request_id(request)),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        """
        Body is not a JSON object (or missing). Same envelope as field errors.
        """
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"] if part != "body") or "body",
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        error = InputValidationError("Request body must be a JSON object", details=details)
        logger.warning(f"Request validation error: {details}")

        return JSONResponse(
            status_code=error.status_code,
            content=error.to_dict(_request_id(request)),
        )

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        """
        Catch-all handler for unexpected errors.

        Logs full exception for debugging but returns generic message to client.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        error = PaymentGatewayError(
            "INTERNAL_ERROR",
            "An unexpected error occurred",
            details={"error_type": type(exc).__name__} if settings.debug else None
        )
        return JSONResponse(
            status_code=500,
            content=error.to_dict(_request_id(request)),
            headers=_request_id_header(request),
        )

    @app.get("/api/health")
    async def health_check(request: Request):
        """
        Health check endpoint for monitoring and load balancers.

        Returns:
            Server status, version and database reachability
        """
        database_ok = await request.app.state.database.ping()
        return JSONResponse(
            status_code=200 if database_ok else 503,
            content={
                "status": "healthy" if database_ok else "degraded",
                "version": "0.1.0",
                "database": "connected" if database_ok else "unavailable",
                "scheduler": "running" if request.app.state.scheduler.running else "stopped",
            },
        )

    app.include_router(paypal_router, prefix="/config", tags=["Config"])
    app.include_router(services_router, prefix="/api", tags=["Services"])
    app.include_router(payments_router, prefix="/api", tags=["Payments"])
    app.include_router(transactions_router, tags=["Transactions"])

    return app


configure_logging(default_settings)

app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "paygate.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower()
    )
