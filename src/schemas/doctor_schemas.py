# src/schemas/doctor_schemas.py
from pydantic import EmailStr, Field
from typing import Optional
from .base_schemas import BaseSchema, FormSchema, PatchSchema, IDMixin, TimestampMixin


class DoctorCreate(FormSchema):
    """Schema for registering a doctor"""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)
    phone: Optional[str] = None
    specialization: Optional[str] = None
    color: Optional[str] = None
    is_admin: bool = False


class DoctorUpdate(PatchSchema):
    nullable_fields = frozenset({"phone", "specialization", "color"})

    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    phone: Optional[str] = None
    specialization: Optional[str] = None
    color: Optional[str] = None
    is_admin: Optional[bool] = None


class DoctorPublic(IDMixin, TimestampMixin):
    first_name: str
    last_name: str
    name: str
    email: str
    phone: Optional[str] = None
    specialization: Optional[str] = None
    color: Optional[str] = None
    is_admin: bool = False
