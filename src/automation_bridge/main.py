"""FastAPI application entry point.

This module creates and configures the FastAPI application instance with:
- Middleware (RequestID, Timing)
- Exception handlers (APIException, HTTPException, RequestValidationError, Exception)
- Routers (installation, OAuth callback, webhooks, health)
- Startup/shutdown lifecycle management (database engine)
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from automation_bridge import __version__
from automation_bridge.api.router import router
from automation_bridge.config import get_settings
from automation_bridge.database.session import check_connection, close_db
from automation_bridge.exceptions import APIException
from automation_bridge.middleware import setup_middleware
from automation_bridge.utils.logging import get_logger, setup_logging

setup_logging()
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check the database on startup and dispose of the engine on shutdown."""
    settings = get_settings()
    logger.info(f"Starting {settings.service_name} (environment: {settings.environment.value})")

    if await check_connection():
        logger.info("Database connection verified")
    else:
        logger.warning("Database is not reachable; requests touching the store will fail")

    if not settings.monday.client_id:
        logger.warning("MONDAY_CLIENT_ID is not set; /install will answer 500")
    if not settings.monday.signing_secret:
        logger.warning("MONDAY_SIGNING_SECRET is not set; webhooks will answer 500")

    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.service_name}")
        await close_db()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Automation Bridge",
        description="OAuth installation and automation webhooks for monday.com",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        debug=settings.debug,
        lifespan=lifespan,
    )

    setup_middleware(app)
    app.include_router(router)

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
        """Handle service exceptions."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle HTTP exceptions (404, 405, ...)."""
        logger.warning(f"{exc.status_code}: {request.method} {request.url.path}")
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation errors."""
        logger.warning(f"Request validation failed: {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(f"Unhandled exception: {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "automation_bridge.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=get_settings().log_level.lower(),
    )
