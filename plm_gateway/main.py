"""
PLM Gateway - Main Application
Translates simple REST calls into the Teamcenter REST dialect
"""

import time
import traceback
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from plm_gateway.config import Settings, get_settings, validate_settings
from plm_gateway.routes import auth, health, items, search
from plm_gateway.utils.errors import ErrorKind, GatewayError
from plm_gateway.utils.logger import get_logger, setup_logging
from plm_gateway.utils.security import TokenManager

logger = get_logger(__name__)

ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.PROPERTY_KEY_COLLISION: 400,
    ErrorKind.AUTHENTICATION_FAILED: 401,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.NOT_FOUND_DOMAIN: 404,
    ErrorKind.TIMEOUT: 503,
    ErrorKind.REMOTE_UNAVAILABLE: 503,
    ErrorKind.CONNECTION_REFUSED: 503,
    ErrorKind.INVALID_DATE: 502,
    ErrorKind.REMOTE_INTERNAL_ERROR: 502,
    ErrorKind.TRANSPORT_ERROR: 502,
    ErrorKind.NETWORK_ERROR: 502,
    ErrorKind.CONFIGURATION_ERROR: 500,
}


def status_for(kind: ErrorKind) -> int:
    return ERROR_STATUS_CODES.get(kind, 500)


def error_response(
    settings: Settings,
    kind: ErrorKind,
    message: str,
    details: Optional[dict] = None,
    exc: Optional[BaseException] = None
) -> JSONResponse:
    """Build the error envelope; diagnostics are omitted in production"""
    status_code = status_for(kind)
    error = {"kind": kind.value, "message": message, "status_code": status_code}
    if not settings.is_production:
        if details:
            error["details"] = details
        if exc is not None:
            error["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content={"success": False, "error": error}, headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events"""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format, settings.logging_config_path or None)
    logger.info("Starting PLM Gateway", environment=settings.environment)

    try:
        validate_settings(settings)
        app.state.token_manager = TokenManager.from_settings(settings)
    except GatewayError as e:
        logger.error("Invalid configuration", error=e.message, details=e.details)
        raise

    settings.log_config()

    yield

    logger.info("PLM Gateway shutdown complete")


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Explicit settings (defaults to environment settings)
        transport: Optional httpx transport for outbound remote calls

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="REST gateway for the Teamcenter PLM system",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tc_transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with its duration"""
        start = time.perf_counter()
        logger.info(
            "Request received",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown",
        )

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        return response

    @app.exception_handler(GatewayError)
    async def gateway_exception_handler(request: Request, exc: GatewayError):
        status_code = status_for(exc.kind)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            "Request failed",
            kind=exc.kind.value,
            error=exc.message,
            status_code=status_code,
            method=request.method,
            path=request.url.path,
        )
        return error_response(settings, exc.kind, exc.message, exc.details, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
            for err in exc.errors()
        ]
        logger.warning("Request validation failed", path=request.url.path, errors=errors)
        return error_response(settings, ErrorKind.VALIDATION, "Invalid input data", {"errors": errors})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            method=request.method,
            path=request.url.path,
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": {
                    "kind": "internal_error",
                    "message": "An unexpected error occurred",
                    "status_code": 500,
                },
            },
        )

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(items.router, prefix="/api/items", tags=["Items"])
    app.include_router(search.router, prefix="/api/search", tags=["Search"])

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "success": True,
            "service": "plm-gateway",
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/api/health",
                "auth": "/api/auth",
                "items": "/api/items",
                "search": "/api/search",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "plm_gateway.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
        log_level=_settings.log_level.lower(),
    )
