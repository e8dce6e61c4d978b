# src/schemas/odontogram_schemas.py
from pydantic import Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from models.odontogram import ToothStatus, ToothSurface
from .base_schemas import (
    BaseSchema,
    FormSchema,
    IDMixin,
    TimestampMixin,
    CanonicalDate,
)


class ToothCondition(BaseSchema):
    status: ToothStatus
    notes: Optional[str] = None
    surfaces: Optional[List[ToothSurface]] = None


class ToothConditionUpdate(FormSchema):
    """One tooth's editing context: status, surfaces and notes"""

    status: ToothStatus = ToothStatus.HEALTHY
    surfaces: List[ToothSurface] = Field(default_factory=list)
    notes: Optional[str] = None


class OdontogramSave(FormSchema):
    """Full odontogram for one patient and date; saving replaces the previous one.

    ``isPediatric`` overrides the patient's own flag for this chart.
    """

    patient_id: UUID
    date: CanonicalDate
    teeth: Dict[str, ToothCondition] = Field(default_factory=dict)
    notes: Optional[str] = None
    is_pediatric: Optional[bool] = None

    @field_validator("teeth")
    @classmethod
    def check_tooth_keys(cls, v: Dict[str, ToothCondition]):
        for key in v:
            if not key.isdigit():
                raise ValueError(f"Tooth number must be numeric, got {key!r}")
        return v


class OdontogramPublic(IDMixin, TimestampMixin):
    patient_id: UUID
    date: str
    teeth: Dict[str, ToothCondition] = Field(default_factory=dict)
    notes: Optional[str] = None
    is_pediatric: bool = False
    updated_at: Optional[datetime] = None


class SuggestedTreatmentPublic(BaseSchema):
    tooth: int
    condition: ToothStatus
    type: str
    cost: Decimal
    notes: Optional[str] = None


class SuggestedTreatmentsCreate(FormSchema):
    doctor_id: Optional[UUID] = None
    start_date: Optional[CanonicalDate] = None


class ToothCatalogPublic(BaseSchema):
    is_pediatric: bool
    upper: List[int]
    lower: List[int]
