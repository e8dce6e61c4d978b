# src/utils/exceptions.py
import logging
from fastapi import HTTPException, status
from typing import Any, Optional
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from .logger import setup_logger

logger = setup_logger("EXCEPTIONS")


class BaseAPIException(HTTPException):
    """Base class for every error the API reports on purpose.

    ``category`` is the error class the caller sees next to the message:
    validation, not-found, permission-denied, transient-network or conflict.
    """

    category = "error"

    def __init__(
        self,
        status_code: int,
        detail: Any = None,
        headers: Optional[dict] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundException(BaseAPIException):
    category = "not-found"

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictException(BaseAPIException):
    category = "conflict"

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnprocessableEntityException(BaseAPIException):
    category = "validation"

    def __init__(self, detail: str = "Unprocessable entity"):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail
        )


class UnauthorizedException(BaseAPIException):
    category = "permission-denied"

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(BaseAPIException):
    category = "permission-denied"

    def __init__(self, detail: str = "Operation not authorized"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class BadRequestException(BaseAPIException):
    category = "validation"

    def __init__(self, detail: str = "Bad Request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ServiceUnavailableException(BaseAPIException):
    category = "transient-network"

    def __init__(self, detail: str = "Service temporarily unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            headers={"Retry-After": "5"},
        )


async def handle_db_exception(
    db: AsyncSession, logger: logging.Logger, operation: str, exception: Exception
):
    """Roll back, log and re-raise a database failure as a typed API error"""
    await db.rollback()

    if isinstance(exception, BaseAPIException):
        raise exception

    logger.error(f"Database error during {operation}: {str(exception)}", exc_info=True)

    if isinstance(exception, IntegrityError):
        raise ConflictException(
            f"Could not {operation}: constraint violation or duplicate record"
        )

    if isinstance(exception, OperationalError):
        raise ServiceUnavailableException(
            f"Could not {operation}: database unavailable"
        )

    if isinstance(exception, SQLAlchemyError):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal server error during {operation}",
        )

    raise exception
