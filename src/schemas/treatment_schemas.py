# src/schemas/treatment_schemas.py
from pydantic import Field, model_validator
from typing import Optional, List
from decimal import Decimal
from uuid import UUID
from models.treatment import TreatmentStatus
from .base_schemas import (
    FormSchema,
    PatchSchema,
    IDMixin,
    TimestampMixin,
    CanonicalDate,
)


class TreatmentCreate(FormSchema):
    """Schema for adding a treatment to a patient's plan"""

    patient_id: UUID
    doctor_id: Optional[UUID] = None
    type: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    teeth: List[int] = Field(default_factory=list)
    status: TreatmentStatus = TreatmentStatus.PLANNED
    cost: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    start_date: CanonicalDate
    end_date: Optional[CanonicalDate] = None
    notes: Optional[str] = None
    suggested_by_odontogram: bool = False

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate cannot be before startDate")
        return self


class TreatmentUpdate(PatchSchema):
    nullable_fields = frozenset({"doctor_id", "description", "end_date", "notes"})

    doctor_id: Optional[UUID] = None
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    teeth: Optional[List[int]] = None
    status: Optional[TreatmentStatus] = None
    cost: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    start_date: Optional[CanonicalDate] = None
    end_date: Optional[CanonicalDate] = None
    notes: Optional[str] = None


class TreatmentPublic(IDMixin, TimestampMixin):
    patient_id: UUID
    patient_name: Optional[str] = None
    doctor_id: Optional[UUID] = None
    doctor_name: Optional[str] = None
    type: str
    description: Optional[str] = None
    teeth: List[int] = Field(default_factory=list)
    status: TreatmentStatus
    cost: Decimal
    start_date: str
    end_date: Optional[str] = None
    notes: Optional[str] = None
    suggested_by_odontogram: bool = False
