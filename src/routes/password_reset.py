# src/routes/password_reset.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Optional
from core.config import settings
from core.debug import DebugContext
from core.dependencies import get_debug_context
from db.database import get_db
from schemas.auth_schemas import (
    PasswordResetComplete,
    PasswordResetRequest,
    PasswordResetResponse,
    PasswordResetVerify,
)
from services.password_reset_service import password_reset_service
from utils.exceptions import BadRequestException
from utils.rate_limiter import limiter

router = APIRouter(prefix="/password-reset", tags=["password-reset"])

REQUEST_ACCEPTED = "If an account with that email exists, a reset link has been sent."


@router.post(
    "/request",
    response_model=PasswordResetResponse,
    summary="Request password reset",
    description="Issue a single-use reset token; the answer is the same for unknown emails",
)
@limiter.limit(settings.PASSWORD_RESET_RATE_LIMIT)
async def request_password_reset(
    request: Request,
    reset_request: PasswordResetRequest,
    db: AsyncSession = Depends(get_db),
    debug_context: Optional[DebugContext] = Depends(get_debug_context),
) -> Any:
    token = await password_reset_service.request_password_reset(db, reset_request.email)
    return PasswordResetResponse(
        message=REQUEST_ACCEPTED,
        reset_token=token if debug_context is not None else None,
    )


@router.post(
    "/verify",
    response_model=PasswordResetResponse,
    summary="Verify reset token",
)
async def verify_reset_token(
    verify_request: PasswordResetVerify, db: AsyncSession = Depends(get_db)
) -> Any:
    if not await password_reset_service.verify_reset_token(db, verify_request.token):
        raise BadRequestException("Invalid or expired reset token")
    return PasswordResetResponse(message="Token is valid")


@router.post(
    "/complete",
    response_model=PasswordResetResponse,
    summary="Complete password reset",
    description="Set a new password with a valid token; the token cannot be reused",
)
async def complete_password_reset(
    complete_request: PasswordResetComplete, db: AsyncSession = Depends(get_db)
) -> Any:
    await password_reset_service.complete_password_reset(
        db, complete_request.token, complete_request.new_password
    )
    return PasswordResetResponse(message="Password updated; log in with the new password")
