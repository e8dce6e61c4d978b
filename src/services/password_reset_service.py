# src/services/password_reset_service.py
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from core.config import settings
from models.doctor import Doctor
from models.password_reset import PasswordResetToken
from utils.exceptions import BadRequestException, handle_db_exception
from utils.logger import setup_logger
from utils.security import hash_password
from .doctor_service import doctor_service

logger = setup_logger("PASSWORD_RESET_SERVICE")


class PasswordResetService:
    """Single-use reset tokens for doctors' passwords.

    Requesting a reset never reveals whether the e-mail is registered, and a
    new request revokes the doctor's earlier unused tokens.
    """

    def __init__(self):
        self.token_expiry = timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)

    @staticmethod
    def _generate_secure_token() -> str:
        return secrets.token_urlsafe(32)

    async def request_password_reset(
        self, db: AsyncSession, email: str
    ) -> Optional[str]:
        """Issue a token for an active doctor; None when there is no such account"""
        doctor = await doctor_service.get_by_email(db, email)
        if not doctor or not doctor.is_active:
            logger.warning("Password reset requested for an unknown or inactive account")
            return None

        now = datetime.now(timezone.utc)
        token = self._generate_secure_token()
        try:
            await db.execute(
                update(PasswordResetToken)
                .where(
                    PasswordResetToken.doctor_id == doctor.id,
                    PasswordResetToken.is_used == False,  # noqa: E712
                )
                .values(is_used=True, used_at=now)
            )
            db.add(
                PasswordResetToken(
                    token=token,
                    doctor_id=doctor.id,
                    expires_at=now + self.token_expiry,
                    is_used=False,
                )
            )
            await db.commit()
        except SQLAlchemyError as e:
            await handle_db_exception(db, logger, "request password reset", e)

        logger.info(f"Password reset token issued for doctor {doctor.id}")
        return token

    async def _usable_token(
        self, db: AsyncSession, token: str
    ) -> Optional[PasswordResetToken]:
        result = await db.execute(
            select(PasswordResetToken).where(
                PasswordResetToken.token == token,
                PasswordResetToken.is_used == False,  # noqa: E712
            )
        )
        record = result.scalar_one_or_none()
        if record is None or record.is_expired:
            return None
        return record

    async def verify_reset_token(self, db: AsyncSession, token: str) -> bool:
        return await self._usable_token(db, token) is not None

    async def complete_password_reset(
        self, db: AsyncSession, token: str, new_password: str
    ) -> Doctor:
        """Set the new password and burn the token"""
        record = await self._usable_token(db, token)
        if record is None:
            logger.warning("Password reset attempted with an invalid or expired token")
            raise BadRequestException("Invalid or expired reset token")

        doctor = await db.get(Doctor, record.doctor_id)
        if doctor is None or not doctor.is_active:
            raise BadRequestException("Invalid or expired reset token")

        try:
            record.is_used = True
            record.used_at = datetime.now(timezone.utc)
            doctor.password_hash = hash_password(new_password)
            await db.commit()
        except SQLAlchemyError as e:
            await handle_db_exception(db, logger, "reset password", e)

        logger.info(f"Password reset completed for doctor {doctor.id}")
        return doctor


password_reset_service = PasswordResetService()
