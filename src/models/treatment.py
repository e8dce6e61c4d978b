# src/models/treatment.py
import uuid
from sqlalchemy import (
    Column,
    ForeignKey,
    DateTime,
    Text,
    JSON,
    String,
    Numeric,
    Enum,
    Boolean,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enum import Enum as PyEnum
from db.database import Base
from .appointment import enum_values


class TreatmentStatus(str, PyEnum):
    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Treatment(Base):
    __tablename__ = "treatments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    patient_id = Column(Uuid, ForeignKey("patients.id"), nullable=False)
    doctor_id = Column(Uuid, ForeignKey("doctors.id"), nullable=True)

    # Treatment details
    type = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    teeth = Column(JSON, default=list)  # tooth numbers
    status = Column(
        Enum(TreatmentStatus, name="treatment_status", values_callable=enum_values),
        default=TreatmentStatus.PLANNED,
        nullable=False,
    )
    cost = Column(Numeric(10, 2), nullable=False, default=0)
    start_date = Column(String(10), nullable=False)
    end_date = Column(String(10), nullable=True)
    notes = Column(Text, nullable=True)
    suggested_by_odontogram = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="treatments")
    doctor = relationship("Doctor", back_populates="treatments")
