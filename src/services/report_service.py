# src/services/report_service.py
from typing import Any, Dict, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from core.cache import advanced_cache, REPORTS_NAMESPACE
from models.appointment import Appointment
from models.doctor import Doctor
from models.inventory import InventoryItem
from models.invoice import Invoice, InvoiceStatus, OUTSTANDING_STATUSES
from models.patient import Patient
from models.treatment import Treatment
from utils.billing import to_money
from utils.exceptions import handle_db_exception
from utils.logger import setup_logger

logger = setup_logger("REPORT_SERVICE")

# Aggregates are cached as JSON; money travels as strings
Row = Dict[str, Any]


def _month(column):
    return func.substr(column, 1, 7)


def _status_value(status: Any) -> str:
    return getattr(status, "value", status)


class ReportService:
    """Aggregate reads behind the dashboard and the reports page.

    Results are cached in the reports namespace; every service mutation
    clears that namespace, so a read after a write is always fresh.
    """

    async def _rows(self, db: AsyncSession, query, operation: str):
        try:
            result = await db.execute(query)
            return result.all()
        except SQLAlchemyError as e:
            await handle_db_exception(db, logger, operation, e)

    @advanced_cache(namespace=REPORTS_NAMESPACE, ignore_args=["db"])
    async def monthly_revenue(self, db: AsyncSession) -> List[Row]:
        month = _month(Invoice.date)
        rows = await self._rows(
            db,
            select(month.label("month"), func.sum(Invoice.total).label("revenue"))
            .where(Invoice.status == InvoiceStatus.PAID)
            .group_by(month)
            .order_by(month),
            "monthly revenue report",
        )
        return [{"month": m, "revenue": str(to_money(revenue))} for m, revenue in rows]

    @advanced_cache(namespace=REPORTS_NAMESPACE, ignore_args=["db"])
    async def monthly_revenue_by_doctor(self, db: AsyncSession) -> List[Row]:
        month = _month(Invoice.date)
        rows = await self._rows(
            db,
            select(
                Invoice.doctor_id,
                Doctor.first_name,
                Doctor.last_name,
                month.label("month"),
                func.sum(Invoice.total).label("revenue"),
            )
            .outerjoin(Doctor, Doctor.id == Invoice.doctor_id)
            .where(Invoice.status == InvoiceStatus.PAID)
            .group_by(Invoice.doctor_id, Doctor.first_name, Doctor.last_name, month)
            .order_by(month, Doctor.last_name),
            "monthly revenue by doctor report",
        )
        return [
            {
                "doctor_id": str(doctor_id) if doctor_id else None,
                "doctor_name": f"{first} {last}" if first else None,
                "month": m,
                "revenue": str(to_money(revenue)),
            }
            for doctor_id, first, last, m, revenue in rows
        ]

    @advanced_cache(namespace=REPORTS_NAMESPACE, ignore_args=["db"])
    async def appointment_stats(self, db: AsyncSession) -> List[Row]:
        rows = await self._rows(
            db,
            select(Appointment.status, func.count(Appointment.id))
            .group_by(Appointment.status)
            .order_by(Appointment.status),
            "appointment stats report",
        )
        return [{"status": _status_value(status), "count": count} for status, count in rows]

    @advanced_cache(namespace=REPORTS_NAMESPACE, ignore_args=["db"])
    async def treatment_stats(self, db: AsyncSession) -> List[Row]:
        rows = await self._rows(
            db,
            select(Treatment.type, func.count(Treatment.id))
            .group_by(Treatment.type)
            .order_by(func.count(Treatment.id).desc(), Treatment.type),
            "treatment stats report",
        )
        return [{"type": type_, "count": count} for type_, count in rows]

    @advanced_cache(namespace=REPORTS_NAMESPACE, ignore_args=["db"])
    async def inventory_by_category(self, db: AsyncSession) -> List[Row]:
        rows = await self._rows(
            db,
            select(InventoryItem.category, func.sum(InventoryItem.quantity))
            .group_by(InventoryItem.category)
            .order_by(InventoryItem.category),
            "inventory by category report",
        )
        return [
            {"category": category, "total_quantity": int(total or 0)}
            for category, total in rows
        ]

    @advanced_cache(namespace=REPORTS_NAMESPACE, ignore_args=["db"])
    async def dashboard_summary(self, db: AsyncSession, today: str) -> Row:
        """Counts as of ``today``, which is part of the cache key"""
        rows = await self._rows(
            db,
            select(
                select(func.count(Patient.id)).scalar_subquery(),
                select(func.count(Appointment.id))
                .where(Appointment.date == today)
                .scalar_subquery(),
                select(func.count(Appointment.id))
                .where(Appointment.date >= today)
                .scalar_subquery(),
                select(func.count(InventoryItem.id))
                .where(InventoryItem.quantity < InventoryItem.min_quantity)
                .scalar_subquery(),
                select(func.count(Invoice.id))
                .where(Invoice.status.in_(list(OUTSTANDING_STATUSES)))
                .scalar_subquery(),
                select(func.sum(Invoice.total - Invoice.paid_amount))
                .where(Invoice.status.in_(list(OUTSTANDING_STATUSES)))
                .scalar_subquery(),
            ),
            "dashboard summary",
        )
        patients, today_count, upcoming, low_stock, unpaid, outstanding = rows[0]
        return {
            "total_patients": patients,
            "appointments_today": today_count,
            "upcoming_appointments": upcoming,
            "low_stock_items": low_stock,
            "unpaid_invoices": unpaid,
            "outstanding_amount": str(to_money(outstanding)),
        }


report_service = ReportService()
