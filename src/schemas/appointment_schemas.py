# src/schemas/appointment_schemas.py
from pydantic import Field, model_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from models.appointment import AppointmentStatus
from utils.scheduling import (
    AppointmentView,
    is_past_date,
    make_time_block,
    parse_time_block,
)
from .base_schemas import (
    BaseSchema,
    FormSchema,
    PatchSchema,
    IDMixin,
    TimestampMixin,
    CanonicalDate,
    ClockTime,
)


class AppointmentCreate(FormSchema):
    """Schema for booking an appointment.

    The time can be sent as ``timeBlock`` ("09:00-10:00") or as
    ``startTime``/``endTime``; a missing end time means a one-hour block.
    """

    patient_id: UUID
    doctor_id: UUID
    date: CanonicalDate
    time_block: Optional[str] = None
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None
    treatment_type: Optional[str] = None

    @model_validator(mode="after")
    def resolve_time_block(self):
        if self.time_block:
            block = parse_time_block(self.time_block)
        elif self.start_time:
            block = make_time_block(self.start_time, self.end_time)
        else:
            raise ValueError("timeBlock or startTime is required")

        self.start_time, self.end_time = block.start, block.end
        self.time_block = block.value

        if is_past_date(self.date):
            raise ValueError("Appointment date cannot be in the past")
        return self


class AppointmentUpdate(PatchSchema):
    """Partial edit of an appointment; past dates are allowed here"""

    nullable_fields = frozenset({"time_block", "notes", "treatment_type"})

    patient_id: Optional[UUID] = None
    doctor_id: Optional[UUID] = None
    date: Optional[CanonicalDate] = None
    time_block: Optional[str] = None
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None
    treatment_type: Optional[str] = None

    @model_validator(mode="after")
    def resolve_time_block(self):
        if self.time_block:
            block = parse_time_block(self.time_block)
            self.start_time, self.end_time = block.start, block.end
        return self


class AppointmentStatusUpdate(FormSchema):
    status: AppointmentStatus


class AppointmentPublic(IDMixin, TimestampMixin):
    patient_id: UUID
    patient_name: Optional[str] = None
    doctor_id: UUID
    doctor_name: Optional[str] = None
    date: str
    start_time: str
    end_time: str
    status: AppointmentStatus
    notes: Optional[str] = None
    treatment_type: Optional[str] = None
    updated_at: Optional[datetime] = None


class AppointmentSearch(BaseSchema):
    doctor_id: Optional[UUID] = None
    patient_id: Optional[UUID] = None
    status: Optional[AppointmentStatus] = None
    date_from: Optional[CanonicalDate] = None
    date_to: Optional[CanonicalDate] = None
    view: AppointmentView = AppointmentView.ALL


class TimeBlockPublic(BaseSchema):
    value: str
    start: str
    end: str
    label: str


class SchedulingCatalog(BaseSchema):
    blocks: List[TimeBlockPublic]
    slots: List[str]
    statuses: List[AppointmentStatus] = Field(
        default_factory=lambda: list(AppointmentStatus)
    )
