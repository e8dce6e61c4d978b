# src/schemas/auth_schemas.py
from pydantic import EmailStr, Field
from typing import Optional
from .base_schemas import BaseSchema, FormSchema
from .doctor_schemas import DoctorPublic


class LoginRequest(FormSchema):
    email: EmailStr
    password: str


class TokenResponse(BaseSchema):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    doctor: DoctorPublic


class PasswordResetRequest(FormSchema):
    email: EmailStr


class PasswordResetVerify(FormSchema):
    token: str = Field(..., min_length=1)


class PasswordResetComplete(FormSchema):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class PasswordResetResponse(BaseSchema):
    success: bool = True
    message: str
    # Only filled in while debug tooling is on; there is no e-mail transport
    reset_token: Optional[str] = None
