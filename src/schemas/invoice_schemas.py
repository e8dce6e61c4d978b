# src/schemas/invoice_schemas.py
from pydantic import Field, model_validator
from typing import Optional, List
from decimal import Decimal
from uuid import UUID
from models.invoice import InvoiceStatus
from .base_schemas import (
    BaseSchema,
    FormSchema,
    PatchSchema,
    IDMixin,
    TimestampMixin,
    CanonicalDate,
)


class InvoiceItemIn(FormSchema):
    id: Optional[str] = None
    description: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    unit_price: Decimal = Field(..., ge=0)
    treatment_id: Optional[UUID] = None
    # Sent by some clients; recomputed on the server
    total: Optional[Decimal] = None


class InvoiceItemPublic(BaseSchema):
    id: str
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal
    treatment_id: Optional[UUID] = None


class InvoiceCreate(FormSchema):
    """Schema for issuing an invoice; subtotal and total are computed"""

    patient_id: UUID
    doctor_id: Optional[UUID] = None
    date: CanonicalDate
    due_date: CanonicalDate
    items: List[InvoiceItemIn] = Field(..., min_length=1)
    tax: Decimal = Field(Decimal("0"), ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    paid_amount: Decimal = Field(Decimal("0"), ge=0)
    paid_date: Optional[CanonicalDate] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_due_date(self):
        if self.due_date < self.date:
            raise ValueError("dueDate cannot be before the invoice date")
        return self


class InvoiceUpdate(PatchSchema):
    nullable_fields = frozenset({"doctor_id", "paid_date", "notes"})

    doctor_id: Optional[UUID] = None
    date: Optional[CanonicalDate] = None
    due_date: Optional[CanonicalDate] = None
    items: Optional[List[InvoiceItemIn]] = Field(None, min_length=1)
    tax: Optional[Decimal] = Field(None, ge=0)
    discount: Optional[Decimal] = Field(None, ge=0)
    status: Optional[InvoiceStatus] = None
    paid_amount: Optional[Decimal] = Field(None, ge=0)
    paid_date: Optional[CanonicalDate] = None
    notes: Optional[str] = None


class InvoicePaid(FormSchema):
    paid_date: Optional[CanonicalDate] = None


class InvoicePublic(IDMixin, TimestampMixin):
    patient_id: UUID
    patient_name: Optional[str] = None
    doctor_id: Optional[UUID] = None
    date: str
    due_date: str
    items: List[InvoiceItemPublic] = Field(default_factory=list)
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    status: InvoiceStatus
    paid_amount: Decimal
    paid_date: Optional[str] = None
    notes: Optional[str] = None
    is_overdue: bool = False
