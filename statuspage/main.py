"""FastAPI application factory for the status page service.

Build the FastAPI application, register middleware and routes, and configure
the lifespan that loads the monitored service list. Confine all side effects
(logging configuration, reading the service list) to the lifespan context
manager to ensure a predictable initialization order.

Run with ``statuspage`` / ``python -m statuspage``, or directly with
``uvicorn --factory statuspage.main:create_app``.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from statuspage.api.middleware import REQUEST_ID_HEADER, RequestCorrelationMiddleware
from statuspage.api.routes import router
from statuspage.config import Settings, get_settings
from statuspage.core.logging_config import configure_logging, get_logger
from statuspage.services import ConfigLoader, Readiness, ServiceConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle events.

    On startup, configure logging, load the service list and publish it on
    `app.state`. Loading marks the application ready whether the configured
    file or the built-in defaults were used.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control returns to the application after startup completes.
    """
    # === STARTUP SEQUENCE ===

    settings: Settings = app.state.settings
    configure_logging(settings)

    logger = get_logger("lifespan")
    logger.info(
        "🚀 Status page startup initiated",
        env=settings.ENVIRONMENT,
        version=settings.VERSION,
    )

    loader = ConfigLoader(settings.CONFIG_PATH, app.state.readiness)
    service_config = loader.load()
    app.state.service_config = service_config
    app.state.services = service_config.by_id()
    logger.info("Serving status for services", service_ids=service_config.service_ids)

    yield

    # === SHUTDOWN SEQUENCE ===

    logger.info("🛑 Status page shutdown initiated")


async def global_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions globally.

    Log the full error with structured context (including request_id) and
    return a generic 500 JSON response so internal details do not leak.
    """
    logger = get_logger("exception_handler")
    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal Server Error",
            "request_id": request.headers.get(REQUEST_ID_HEADER),
        },
    )


def create_app(settings: Settings | None = None, readiness: Readiness | None = None) -> FastAPI:
    """Build the application.

    The service list is empty and the readiness state unset until the
    lifespan has run.

    Args:
        settings: Settings to use; defaults to `get_settings()`.
        readiness: Readiness state to expose on `/readyz`; a fresh one by default.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Liveness, readiness and on-demand status of downstream services",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.readiness = readiness or Readiness()
    app.state.service_config = ServiceConfig()
    app.state.services = {}

    app.add_middleware(RequestCorrelationMiddleware)
    app.add_exception_handler(Exception, global_exception_handler)
    app.include_router(router)

    # Mounted last: only paths no route matched fall through to the files.
    static_dir = Path(settings.STATIC_DIR)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app
