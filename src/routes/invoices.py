# src/routes/invoices.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Any
from uuid import UUID
from core.dependencies import get_current_user
from db.database import get_db
from models.doctor import Doctor
from models.invoice import InvoiceStatus
from schemas.invoice_schemas import (
    InvoiceCreate,
    InvoicePaid,
    InvoicePublic,
    InvoiceUpdate,
)
from services.invoice_service import invoice_service, invoice_to_public
from services.patient_service import patient_service

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get(
    "/",
    response_model=List[InvoicePublic],
    summary="List invoices",
    description="Invoices, most recent first, optionally filtered by patient or status",
)
async def list_invoices(
    patient_id: Optional[UUID] = Query(None, alias="patientId"),
    status: Optional[InvoiceStatus] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    invoices = await invoice_service.list_invoices(db, patient_id, status, skip, limit)
    return [invoice_to_public(i) for i in invoices]


@router.get(
    "/unpaid",
    response_model=List[InvoicePublic],
    summary="Unpaid invoices",
    description="Sent or overdue invoices, earliest due date first",
)
async def unpaid_invoices(
    limit: int = Query(5, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return [invoice_to_public(i) for i in await invoice_service.get_unpaid(db, limit)]


@router.get(
    "/patient/{patient_id}",
    response_model=List[InvoicePublic],
    summary="Invoices of a patient",
)
async def patient_invoices(
    patient_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    await patient_service.ensure_exists(db, patient_id)
    invoices = await invoice_service.list_invoices(db, patient_id=patient_id)
    return [invoice_to_public(i) for i in invoices]


@router.post(
    "/",
    response_model=InvoicePublic,
    status_code=status.HTTP_201_CREATED,
    summary="Create invoice",
    description="Line totals, subtotal and total are computed by the server",
)
async def create_invoice(
    invoice_data: InvoiceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    invoice = await invoice_service.create_invoice(db, invoice_data)
    return invoice_to_public(invoice)


@router.get("/{invoice_id}", response_model=InvoicePublic, summary="Get invoice")
async def get_invoice(
    invoice_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return invoice_to_public(await invoice_service.get_or_404(db, invoice_id))


@router.patch(
    "/{invoice_id}",
    response_model=InvoicePublic,
    summary="Update invoice",
    description="Partial update; totals are recomputed when items, tax or discount change",
)
async def update_invoice(
    invoice_id: UUID,
    invoice_data: InvoiceUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    invoice = await invoice_service.update_invoice(db, invoice_id, invoice_data)
    return invoice_to_public(invoice)


@router.post(
    "/{invoice_id}/pay",
    response_model=InvoicePublic,
    summary="Mark invoice as paid",
)
async def mark_invoice_paid(
    invoice_id: UUID,
    payment: Optional[InvoicePaid] = None,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    paid_date = payment.paid_date if payment else None
    invoice = await invoice_service.mark_as_paid(db, invoice_id, paid_date)
    return invoice_to_public(invoice)


@router.delete(
    "/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete invoice"
)
async def delete_invoice(
    invoice_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Response:
    await invoice_service.delete(db, invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
