# src/models/doctor.py
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db.database import Base


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Personal information
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False, unique=True, index=True)
    phone = Column(String(20), nullable=True)
    specialization = Column(String(100), nullable=True)
    color = Column(String(20), nullable=True)  # calendar colour

    # Access
    is_admin = Column(Boolean, default=False, nullable=False)
    password_hash = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    appointments = relationship("Appointment", back_populates="doctor")
    treatments = relationship("Treatment", back_populates="doctor")
    patients = relationship("Patient", back_populates="treating_doctor")
    password_reset_tokens = relationship(
        "PasswordResetToken", back_populates="doctor", cascade="all, delete-orphan"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Doctor {self.id} - {self.first_name} {self.last_name}>"
