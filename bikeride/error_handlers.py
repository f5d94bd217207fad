from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from loguru import logger
from pybreaker import CircuitBreakerError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException


def register_exception_handlers(app):
    """
    Register global exception handlers for standardized error responses.

    Every failure is logged and returned as ``{"error", "detail", "path"}``.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Validation error on {}: {}", request.url.path, exc.errors())
        return JSONResponse(
            status_code=422,
            content={
                "error": "Validation error",
                "detail": "Invalid request data",
                "path": str(request.url.path),
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error("HTTP {} on {}: {}", exc.status_code, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "HTTP error",
                "detail": exc.detail,
                "path": str(request.url.path),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(CircuitBreakerError)
    async def circuit_open_handler(request: Request, exc: CircuitBreakerError):
        logger.warning("Circuit open, rejecting {}", request.url.path)
        return JSONResponse(
            status_code=503,
            content={
                "error": "Service unavailable",
                "detail": "Service temporarily unavailable. Please try again later.",
                "path": str(request.url.path),
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Store error on {}: {}", request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Store error",
                "detail": "Operation failed",
                "path": str(request.url.path),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error("Unhandled error on {}", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": "An unexpected error occurred",
                "path": str(request.url.path),
            },
        )
