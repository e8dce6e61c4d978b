# src/services/auth_service.py
from typing import Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from core.config import settings
from schemas.auth_schemas import LoginRequest
from utils.exceptions import UnauthorizedException
from utils.logger import setup_logger
from utils.security import create_access_token, verify_password
from .doctor_service import doctor_service, doctor_to_public

logger = setup_logger("AUTH_SERVICE")


class AuthService:
    async def login(self, db: AsyncSession, login_data: LoginRequest) -> Dict[str, Any]:
        """Check a doctor's credentials and issue a bearer token"""
        doctor = await doctor_service.get_by_email(db, login_data.email)

        if (
            not doctor
            or not doctor.is_active
            or not verify_password(login_data.password, doctor.password_hash)
        ):
            logger.warning(f"Failed login for {login_data.email}")
            raise UnauthorizedException("Invalid email or password")

        token = create_access_token(
            {"sub": doctor.id, "admin": bool(doctor.is_admin)}
        )
        logger.info(f"Doctor {doctor.id} logged in")
        return {
            "access_token": token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE * 60,
            "doctor": doctor_to_public(doctor),
        }


auth_service = AuthService()
