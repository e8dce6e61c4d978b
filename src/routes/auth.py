# src/routes/auth.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any
from core.config import settings
from core.dependencies import get_current_user
from db.database import get_db
from models.doctor import Doctor
from schemas.auth_schemas import LoginRequest, TokenResponse
from schemas.doctor_schemas import DoctorPublic
from services.auth_service import auth_service
from services.doctor_service import doctor_to_public
from utils.rate_limiter import limiter

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Doctor login",
    description="Authenticate a doctor with email and password and return a bearer token",
)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request, login_data: LoginRequest, db: AsyncSession = Depends(get_db)
) -> Any:
    return await auth_service.login(db, login_data)


@router.get(
    "/me",
    response_model=DoctorPublic,
    summary="Current doctor",
    description="Profile of the doctor the token belongs to",
)
async def read_me(current_user: Doctor = Depends(get_current_user)) -> Any:
    return doctor_to_public(current_user)
