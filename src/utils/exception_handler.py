# src/utils/exception_handler.py
from fastapi import FastAPI, Request, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from .logger import setup_logger
from .exceptions import BaseAPIException
from sqlalchemy.exc import (
    SQLAlchemyError,
    IntegrityError,
    NoResultFound,
    OperationalError,
)
from slowapi.errors import RateLimitExceeded

logger = setup_logger("EXCEPTION HANDLER")


def _error_body(message, error_type: str, status_code: int, category: str) -> dict:
    return {
        "message": message,
        "type": error_type,
        "category": category,
        "status": status_code,
    }


def setup_exception_handlers(app: FastAPI):
    @app.exception_handler(BaseAPIException)
    async def api_exception_handler(request: Request, exc: BaseAPIException):
        logger.warning(f"API Exception on {request.method} {request.url.path}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                exc.detail, exc.__class__.__name__, exc.status_code, exc.category
            ),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        errors = jsonable_encoder(exc.errors())
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Validation error")
        if location:
            message = f"{location}: {message}"

        logger.info(f"Validation error on {request.url.path}: {message}")
        body = _error_body(
            message,
            "ValidationError",
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "validation",
        )
        body["errors"] = errors
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        error_details = {
            status.HTTP_400_BAD_REQUEST: "Bad request",
            status.HTTP_401_UNAUTHORIZED: "Unauthorized - Authentication required",
            status.HTTP_403_FORBIDDEN: "Forbidden - You don't have permission",
            status.HTTP_404_NOT_FOUND: "Resource not found",
            status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
            status.HTTP_409_CONFLICT: "Conflict - Resource already exists",
            status.HTTP_422_UNPROCESSABLE_ENTITY: "Validation error",
            status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal server error",
        }

        detail = exc.detail or error_details.get(exc.status_code, "An error occurred")

        if exc.status_code == status.HTTP_404_NOT_FOUND:
            logger.info(f"Not found: {detail}")
        else:
            logger.warning(f"HTTP Exception {exc.status_code}: {detail}")

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(detail, "HTTPException", exc.status_code, "error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error: {str(exc)}", exc_info=True)

        if isinstance(exc, IntegrityError):
            detail = (
                "Database integrity error - possible duplicate or constraint violation"
            )
            status_code = status.HTTP_409_CONFLICT
            category = "conflict"
        elif isinstance(exc, NoResultFound):
            detail = "Requested resource not found in database"
            status_code = status.HTTP_404_NOT_FOUND
            category = "not-found"
        elif isinstance(exc, OperationalError):
            detail = "Database unavailable - please retry"
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
            category = "transient-network"
        else:
            detail = "Database operation failed"
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            category = "error"

        return JSONResponse(
            status_code=status_code,
            content=_error_body(detail, "DatabaseError", status_code, category),
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit exceeded: {str(exc)}")

        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content=_error_body(
                "Too many requests - please try again later",
                "RateLimitExceeded",
                status.HTTP_429_TOO_MANY_REQUESTS,
                "transient-network",
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                "Internal server error",
                "InternalServerError",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "error",
            ),
        )
