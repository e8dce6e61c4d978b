# src/models/patient.py
import uuid
from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    Text,
    DateTime,
    Boolean,
    JSON,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db.database import Base


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Personal information
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    date_of_birth = Column(String(10), nullable=True)  # canonical YYYY-MM-DD
    gender = Column(String(20), nullable=True)

    # Contact information
    email = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)

    # Insurance
    insurance = Column(String(100), nullable=True)
    insurance_number = Column(String(50), nullable=True)

    # Medical information
    medical_history = Column(Text, nullable=True)
    allergies = Column(JSON, default=list)  # ordered list of strings

    # Pediatric patients carry a guardian: {name, relationship, phone, email}
    is_child = Column(Boolean, default=False, nullable=False)
    legal_guardian = Column(JSON, nullable=True)

    treating_doctor_id = Column(Uuid, ForeignKey("doctors.id"), nullable=True)

    # Timestamps
    last_visit = Column(String(10), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    treating_doctor = relationship("Doctor", back_populates="patients")
    appointments = relationship(
        "Appointment", back_populates="patient", cascade="all, delete-orphan"
    )
    treatments = relationship(
        "Treatment", back_populates="patient", cascade="all, delete-orphan"
    )
    invoices = relationship(
        "Invoice", back_populates="patient", cascade="all, delete-orphan"
    )
    odontograms = relationship(
        "Odontogram", back_populates="patient", cascade="all, delete-orphan"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
