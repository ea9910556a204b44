"""FastAPI application factory and configuration."""

import structlog
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agenly.api.dependencies import Services, build_services
from agenly.api.responses import fail
from agenly.api.routes import (
    agents_router,
    billing_router,
    chat_router,
    deploy_router,
    health_router,
    integrations_router,
)
from agenly.core.config import settings
from agenly.core.exceptions import AppException
from agenly.storage.memory import InMemoryStorage


# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    services: Services = app.state.services
    logger.info(
        "Starting AGENLY API",
        environment=services.settings.app_env,
        storage=type(services.storage).__name__,
    )

    # Seed demo agent in development
    if services.settings.is_development and isinstance(services.storage, InMemoryStorage):
        await services.storage.seed_demo_agent()
        logger.info("Seeded demo agent for development")

    yield

    logger.info("Shutting down AGENLY API")


def create_app(services: Services | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Pre-built service graph. Built from settings when omitted.
    """
    services = services or build_services(settings)
    app_settings = services.settings

    app = FastAPI(
        title="AGENLY API",
        description="Create, chat with and deploy AI agents",
        version="0.1.0",
        docs_url="/docs" if app_settings.is_development else None,
        redoc_url="/redoc" if app_settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.services = services

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if app_settings.is_development else [app_settings.app_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle application-specific exceptions."""
        if exc.status_code >= 500:
            logger.error(
                "Upstream failure",
                path=request.url.path,
                code=exc.code,
                message=exc.message,
                details=exc.details,
                cause=str(exc.__cause__) if exc.__cause__ else None,
            )
        else:
            logger.warning(
                "Application exception",
                path=request.url.path,
                code=exc.code,
                message=exc.message,
                details=exc.details,
            )
        message = exc.message if exc.public else "Internal server error"
        return fail(exc.status_code, message, code=exc.code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Missing or malformed input is a 400, never a 422."""
        fields = [".".join(str(part) for part in err["loc"][1:]) for err in exc.errors()]
        logger.info("Request validation failed", path=request.url.path, fields=fields)
        return fail(
            status.HTTP_400_BAD_REQUEST,
            "Missing or invalid fields",
            details=fields,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error("Unhandled exception", path=request.url.path, error=str(exc), exc_info=True)
        return fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    # Include routers
    app.include_router(health_router)
    app.include_router(agents_router, prefix="/api")
    app.include_router(chat_router, prefix="/api")
    app.include_router(deploy_router, prefix="/api")
    app.include_router(integrations_router, prefix="/api")
    app.include_router(billing_router, prefix="/api")

    # Root endpoint
    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "service": "AGENLY API",
            "version": "0.1.0",
            "status": "running",
        }

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "agenly.api.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.is_development,
    )
