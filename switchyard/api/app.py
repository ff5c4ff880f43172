"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, and route registration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from switchyard import __version__
from switchyard.api.dependencies import (
    get_settings,
    shutdown_trace_emitter,
    start_trace_emitter,
)
from switchyard.api.exceptions import SwitchyardAPIError
from switchyard.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from switchyard.api.routes import register_routes
from switchyard.observability.logging import get_logger, setup_logging
from switchyard.observability.middleware import LoggingContextMiddleware
from switchyard.wiring.exceptions import RegistryViolationError

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # noqa: ARG001
    """Own the trace emitter for the lifetime of the server."""
    emitter = await start_trace_emitter()
    logger.info("app_started", trace_enabled=emitter.enabled)
    try:
        yield
    finally:
        await shutdown_trace_emitter()
        logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )

    app = FastAPI(
        title=settings.api.title,
        description="Configuration wiring engine: resolution, tracing and tenant audits",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingContextMiddleware)

    _register_exception_handlers(app)
    register_routes(app)

    logger.info(
        "app_created",
        environment=settings.environment,
        debug=settings.debug,
        cors_origins=settings.api.cors_origins,
    )

    return app


def _validation_details(errors: list) -> list[ErrorDetail]:  # type: ignore[type-arg]
    return [
        ErrorDetail(field=".".join(str(loc) for loc in error["loc"]), message=error["msg"])
        for error in errors
    ]


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(SwitchyardAPIError)
    async def switchyard_api_error_handler(
        request: Request, exc: SwitchyardAPIError
    ) -> JSONResponse:
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        response = ErrorResponse(
            error=ErrorBody(code=exc.error_code, message=exc.message, reason=exc.reason)
        )
        return JSONResponse(status_code=exc.status_code, content=response.model_dump())

    @app.exception_handler(RegistryViolationError)
    async def registry_violation_handler(
        request: Request, exc: RegistryViolationError
    ) -> JSONResponse:
        logger.warning(
            "registry_violation",
            config_path=exc.path,
            reader_id=exc.reader_id,
            path=request.url.path,
        )
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.REGISTRY_VIOLATION,
                message=str(exc),
                path=exc.path,
            )
        )
        return JSONResponse(status_code=500, content=response.model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning("validation_error", errors=exc.errors(), path=request.url.path)
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Request validation failed",
                details=_validation_details(list(exc.errors())),
            )
        )
        return JSONResponse(status_code=400, content=response.model_dump())

    @app.exception_handler(ValidationError)
    async def pydantic_validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        logger.warning("pydantic_validation_error", errors=exc.errors(), path=request.url.path)
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Data validation failed",
                details=_validation_details(exc.errors()),
            )
        )
        return JSONResponse(status_code=400, content=response.model_dump())

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        response = ErrorResponse(
            error=ErrorBody(code=ErrorCode.INTERNAL_ERROR, message="An unexpected error occurred")
        )
        return JSONResponse(status_code=500, content=response.model_dump())

    logger.debug("exception_handlers_registered")
