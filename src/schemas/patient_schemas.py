# src/schemas/patient_schemas.py
from pydantic import EmailStr, Field, model_validator
from typing import Optional, List
from uuid import UUID
from .base_schemas import (
    BaseSchema,
    FormSchema,
    PatchSchema,
    IDMixin,
    TimestampMixin,
    CanonicalDate,
)


class LegalGuardian(BaseSchema):
    name: str = Field(..., min_length=1)
    relationship: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None


class TreatingDoctor(BaseSchema):
    id: UUID
    first_name: str
    last_name: str
    specialization: Optional[str] = None


class PatientFields(FormSchema):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    date_of_birth: Optional[CanonicalDate] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    insurance: Optional[str] = None
    insurance_number: Optional[str] = None
    medical_history: Optional[str] = None
    legal_guardian: Optional[LegalGuardian] = None
    treating_doctor_id: Optional[UUID] = None
    last_visit: Optional[CanonicalDate] = None


class PatientCreate(PatientFields):
    """Schema for registering a patient"""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    allergies: List[str] = Field(default_factory=list)
    is_pediatric: bool = False

    @model_validator(mode="after")
    def check_guardian(self):
        if self.is_pediatric and self.legal_guardian is None:
            raise ValueError("legalGuardian is required for pediatric patients")
        return self


class PatientUpdate(PatchSchema, PatientFields):
    """Partial update: only the fields sent are written"""

    # Every contact and clinical field may be cleared
    nullable_fields = frozenset(PatientFields.model_fields)

    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    allergies: Optional[List[str]] = None
    is_pediatric: Optional[bool] = None


class PatientPublic(IDMixin, TimestampMixin):
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    insurance: Optional[str] = None
    insurance_number: Optional[str] = None
    medical_history: Optional[str] = None
    allergies: List[str] = Field(default_factory=list)
    last_visit: Optional[str] = None
    is_pediatric: bool = False
    legal_guardian: Optional[LegalGuardian] = None
    treating_doctor: Optional[TreatingDoctor] = None
