# src/models/odontogram.py
import uuid
from sqlalchemy import (
    Column,
    ForeignKey,
    DateTime,
    String,
    Text,
    Boolean,
    JSON,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enum import Enum as PyEnum
from db.database import Base


class ToothStatus(str, PyEnum):
    HEALTHY = "healthy"
    CARIES = "caries"
    FILLING = "filling"
    CROWN = "crown"
    EXTRACTION = "extraction"
    IMPLANT = "implant"
    ROOT_CANAL = "root-canal"


class ToothSurface(str, PyEnum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class Odontogram(Base):
    __tablename__ = "odontograms"
    __table_args__ = (
        UniqueConstraint("patient_id", "date", name="uq_odontograms_patient_date"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    patient_id = Column(Uuid, ForeignKey("patients.id"), nullable=False)
    date = Column(String(10), nullable=False)

    # Sparse map: {"14": {"status": "caries", "surfaces": ["top"], "notes": "..."}}
    teeth = Column(JSON, default=dict, nullable=False)
    notes = Column(Text, nullable=True)
    is_child = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    patient = relationship("Patient", back_populates="odontograms")
