# src/models/appointment.py
import uuid
from sqlalchemy import (
    Column,
    ForeignKey,
    DateTime,
    String,
    Enum,
    Text,
    Index,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enum import Enum as PyEnum
from db.database import Base


class AppointmentStatus(str, PyEnum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


def enum_values(enum_cls):
    """Persist enum values ("no-show") rather than member names"""
    return [member.value for member in enum_cls]


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (Index("ix_appointments_doctor_date", "doctor_id", "date"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    patient_id = Column(Uuid, ForeignKey("patients.id"), nullable=False)
    doctor_id = Column(Uuid, ForeignKey("doctors.id"), nullable=False)

    # Timing: canonical strings, compared lexicographically
    date = Column(String(10), nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)

    status = Column(
        Enum(
            AppointmentStatus,
            name="appointment_status",
            values_callable=enum_values,
        ),
        default=AppointmentStatus.SCHEDULED,
        nullable=False,
    )
    notes = Column(Text, nullable=True)
    treatment_type = Column(String(100), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")

    def __repr__(self):
        return f"<Appointment {self.id} {self.date} {self.start_time}-{self.end_time}>"
