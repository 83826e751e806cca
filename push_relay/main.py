"""FastAPI application for Push Relay."""
import logging
import os
import time
from contextlib import AsyncExitStack, asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from push_relay.adapters.fcm import FCMClient
from push_relay.api.health import router as health_router
from push_relay.api.router import api_router
from push_relay.config.relay import RelaySettings, get_settings
from push_relay.core.exceptions import RelayException
from push_relay.core.logging import setup_logging
from push_relay.database.connection import get_database_manager

logger = logging.getLogger(__name__)


def build_messaging_client(settings: RelaySettings) -> FCMClient | None:
    """Create the FCM client, or None when credentials are unavailable."""
    try:
        return FCMClient.from_service_account_file(
            settings.FIREBASE_CREDENTIALS_PATH,
            project_id=settings.FIREBASE_PROJECT_ID,
            timeout=settings.FCM_TIMEOUT,
            max_retries=settings.FCM_MAX_RETRIES,
        )
    except (OSError, ValueError) as e:
        logger.error(f"Firebase credentials could not be loaded: {e}")
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info("Starting Push Relay...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    if not settings.webhook_secret_configured:
        logger.error("SHOPIFY_WEBHOOK_SECRET is not set; order webhooks will be rejected")

    database_manager = get_database_manager(settings)
    if await database_manager.health_check():
        logger.info("Database connection successful")
    else:
        logger.error("Database connection failed!")
    app.state.database_manager = database_manager

    async with AsyncExitStack() as stack:
        messaging = build_messaging_client(settings)
        if messaging is not None:
            app.state.messaging = await stack.enter_async_context(messaging)
            logger.info(f"FCM client ready for project {messaging.project_id}")
        else:
            app.state.messaging = None

        yield

        logger.info("Shutting down Push Relay...")

    await database_manager.close()


def create_app(settings: RelaySettings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Relays Shopify order events and API requests to Firebase Cloud Messaging",
        version=settings.VERSION,
        docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log all requests."""
        start_time = time.time()
        logger.info(
            f"Request: {request.method} {request.url.path}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client_ip": request.client.host if request.client else None,
            },
        )

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(
            f"Response: {response.status_code} in {process_time:.3f}s",
            extra={"status_code": response.status_code, "process_time": process_time},
        )
        return response

    @app.exception_handler(RelayException)
    async def relay_exception_handler(request: Request, exc: RelayException):
        """Handle custom relay exceptions."""
        if exc.status_code >= 500:
            logger.error(f"Relay exception: {exc}", exc_info=True)
        else:
            logger.warning(f"Request rejected ({exc.error_code}): {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies are client errors like any other missing field."""
        logger.warning(f"Invalid request body for {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "Invalid request body",
                "code": "VALIDATION_ERROR",
                "details": {"errors": jsonable_errors(exc)},
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        content = {
            "success": False,
            "error": "An unexpected error occurred",
            "code": "INTERNAL_SERVER_ERROR",
        }
        if settings.ENVIRONMENT != "production":
            content["details"] = {"exception": str(exc)}
        return JSONResponse(status_code=500, content=content)

    app.include_router(health_router)
    app.include_router(api_router, prefix="/api")
    if os.path.isdir(settings.WELL_KNOWN_DIR):
        app.mount(
            "/.well-known",
            StaticFiles(directory=settings.WELL_KNOWN_DIR),
            name="well-known",
        )
    else:
        logger.warning(f"Deep link directory {settings.WELL_KNOWN_DIR} not found; /.well-known is not served")

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


settings = get_settings()
setup_logging(settings)
app = create_app(settings)


def run() -> None:
    """Console entry point."""
    uvicorn.run(
        "push_relay.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
    )


if __name__ == "__main__":
    run()
