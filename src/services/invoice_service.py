# src/services/invoice_service.py
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from models.doctor import Doctor
from models.invoice import Invoice, InvoiceStatus, OUTSTANDING_STATUSES
from models.patient import Patient
from schemas.invoice_schemas import (
    InvoiceCreate,
    InvoicePublic,
    InvoiceUpdate,
)
from utils.billing import compute_totals, to_money
from utils.exceptions import NotFoundException, UnprocessableEntityException
from utils.logger import setup_logger
from utils.scheduling import today_str
from .base_service import BaseService

logger = setup_logger("INVOICE_SERVICE")


def invoice_to_public(invoice: Invoice) -> InvoicePublic:
    return InvoicePublic(
        id=invoice.id,
        patient_id=invoice.patient_id,
        patient_name=invoice.patient.full_name if invoice.patient else None,
        doctor_id=invoice.doctor_id,
        date=invoice.date,
        due_date=invoice.due_date,
        items=invoice.items or [],
        subtotal=invoice.subtotal,
        tax=invoice.tax,
        discount=invoice.discount,
        total=invoice.total,
        status=invoice.status,
        paid_amount=invoice.paid_amount,
        paid_date=invoice.paid_date,
        notes=invoice.notes,
        is_overdue=invoice.is_overdue,
        created_at=invoice.created_at,
    )


class InvoiceService(BaseService):
    load_options = (selectinload(Invoice.patient),)

    def __init__(self):
        super().__init__(Invoice, "Invoice")

    async def _check_parties(
        self, db: AsyncSession, patient_id: Optional[UUID], doctor_id: Optional[UUID]
    ) -> None:
        if patient_id and not await db.get(Patient, patient_id):
            raise NotFoundException("Patient not found")
        if doctor_id and not await db.get(Doctor, doctor_id):
            raise NotFoundException("Doctor not found")

    async def list_invoices(
        self,
        db: AsyncSession,
        patient_id: Optional[UUID] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Invoice]:
        return await self.get_multi(
            db,
            skip=skip,
            limit=limit,
            filters={"patient_id": patient_id, "status": status},
            order_by=(Invoice.date.desc(), Invoice.created_at.desc()),
        )

    async def get_unpaid(self, db: AsyncSession, limit: int = 5) -> List[Invoice]:
        """Sent or overdue invoices, the ones due soonest first"""
        result = await db.execute(
            self._select()
            .where(Invoice.status.in_(list(OUTSTANDING_STATUSES)))
            .order_by(Invoice.due_date)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def create_invoice(self, db: AsyncSession, invoice_data: InvoiceCreate) -> Invoice:
        """Issue an invoice; line totals, subtotal and total are computed here"""
        await self._check_parties(db, invoice_data.patient_id, invoice_data.doctor_id)

        items, subtotal, total = compute_totals(
            invoice_data.items, invoice_data.tax, invoice_data.discount
        )
        if total < 0:
            raise UnprocessableEntityException("Discount exceeds subtotal plus tax")

        data = invoice_data.model_dump(exclude={"items"})
        data.update(
            items=items,
            subtotal=subtotal,
            total=total,
            tax=to_money(invoice_data.tax),
            discount=to_money(invoice_data.discount),
        )
        invoice = await self.create_from_dict(db, data)
        logger.info(f"Issued invoice {invoice.id} for {invoice.total}")
        return invoice

    async def update_invoice(
        self, db: AsyncSession, invoice_id: UUID, invoice_data: InvoiceUpdate
    ) -> Invoice:
        """Partial update; totals follow any change to items, tax or discount"""
        invoice = await self.get_or_404(db, invoice_id)
        values = invoice_data.model_dump(exclude_unset=True, exclude={"items"})

        date = values.get("date", invoice.date)
        due_date = values.get("due_date", invoice.due_date)
        if due_date < date:
            raise UnprocessableEntityException("dueDate cannot be before the invoice date")

        if {"items", "tax", "discount"} & invoice_data.model_fields_set:
            source_items = (
                invoice_data.items if invoice_data.items is not None else invoice.items
            )
            tax = values.get("tax", invoice.tax)
            discount = values.get("discount", invoice.discount)
            items, subtotal, total = compute_totals(source_items, tax, discount)
            if total < 0:
                raise UnprocessableEntityException("Discount exceeds subtotal plus tax")
            values.update(
                items=items,
                subtotal=subtotal,
                total=total,
                tax=to_money(tax),
                discount=to_money(discount),
            )

        await self._check_parties(db, None, values.get("doctor_id"))
        return await self.update_fields(db, invoice_id, values)

    async def mark_as_paid(
        self, db: AsyncSession, invoice_id: UUID, paid_date: Optional[str] = None
    ) -> Invoice:
        """Settle an invoice in full on ``paid_date`` (today by default)"""
        invoice = await self.get_or_404(db, invoice_id)
        if InvoiceStatus(invoice.status) == InvoiceStatus.CANCELLED:
            raise UnprocessableEntityException("A cancelled invoice cannot be paid")

        logger.info(f"Invoice {invoice_id} paid")
        return await self.update_fields(
            db,
            invoice_id,
            {
                "status": InvoiceStatus.PAID,
                "paid_date": paid_date or today_str(),
                "paid_amount": invoice.total,
            },
        )


invoice_service = InvoiceService()
