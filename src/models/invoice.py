# src/models/invoice.py
import uuid
from sqlalchemy import (
    Column,
    ForeignKey,
    DateTime,
    String,
    Numeric,
    Text,
    Enum,
    JSON,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enum import Enum as PyEnum
from db.database import Base
from .appointment import enum_values


class InvoiceStatus(str, PyEnum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


# Invoices still waiting for money
OUTSTANDING_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.OVERDUE)


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    patient_id = Column(Uuid, ForeignKey("patients.id"), nullable=False)
    doctor_id = Column(Uuid, ForeignKey("doctors.id"), nullable=True)

    # Dates, canonical YYYY-MM-DD
    date = Column(String(10), nullable=False, index=True)
    due_date = Column(String(10), nullable=False)
    paid_date = Column(String(10), nullable=True)

    # Line items: [{id, description, quantity, unit_price, total, treatment_id}]
    items = Column(JSON, default=list)

    # Financial details
    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    paid_amount = Column(Numeric(10, 2), nullable=False, default=0)

    status = Column(
        Enum(InvoiceStatus, name="invoice_status", values_callable=enum_values),
        default=InvoiceStatus.DRAFT,
        nullable=False,
    )
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="invoices")
    doctor = relationship("Doctor")

    @property
    def is_overdue(self):
        from utils.billing import is_overdue

        return is_overdue(self.status, self.due_date)
