from uuid import UUID
from db.database import get_db
from fastapi import Depends, Header, Request
from models.doctor import Doctor
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from utils.exceptions import ForbiddenException, UnauthorizedException
from utils.security import verify_token
from utils.logger import setup_logger

logger = setup_logger("ROLE CHECKER")


async def get_current_user(
    authorization: str = Header(default=None, alias="Authorization"),
    db: AsyncSession = Depends(get_db),
) -> Doctor:
    """
    Dependency to get the authenticated doctor from the bearer token

    Raises:
        UnauthorizedException: 401 if the header, token or doctor is invalid
    """
    if not authorization:
        logger.warning("Authorization header missing")
        raise UnauthorizedException("Authorization header is missing")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise UnauthorizedException("Malformed authorization header")

    if scheme.lower() != "bearer":
        logger.warning(f"Invalid auth scheme: {scheme}")
        raise UnauthorizedException("Invalid authentication scheme")

    payload = verify_token(token)
    if not payload or not payload.get("sub"):
        raise UnauthorizedException("Could not validate credentials")

    try:
        doctor_id = UUID(payload["sub"])
    except ValueError:
        raise UnauthorizedException("Invalid token payload")

    result = await db.execute(select(Doctor).where(Doctor.id == doctor_id))
    doctor = result.scalar_one_or_none()

    if not doctor or not doctor.is_active:
        logger.warning(f"Token for unknown or inactive doctor: {doctor_id}")
        raise UnauthorizedException("Could not validate credentials")

    logger.debug(f"Authenticated doctor: {doctor_id}")
    return doctor


async def require_admin(current_user: Doctor = Depends(get_current_user)) -> Doctor:
    """Administrators are doctors flagged with is_admin"""
    if not current_user.is_admin:
        logger.warning(f"Admin route refused for doctor {current_user.id}")
        raise ForbiddenException("Administrator privileges required")
    return current_user


def get_debug_context(request: Request):
    """The app's DebugContext, or None when debug tooling is off"""
    return getattr(request.app.state, "debug_context", None)
