# src/schemas/report_schemas.py
from typing import Optional
from decimal import Decimal
from uuid import UUID
from .base_schemas import BaseSchema


class MonthlyRevenue(BaseSchema):
    month: str
    revenue: Decimal


class DoctorMonthlyRevenue(BaseSchema):
    doctor_id: Optional[UUID] = None
    doctor_name: Optional[str] = None
    month: str
    revenue: Decimal


class StatusCount(BaseSchema):
    status: str
    count: int


class TypeCount(BaseSchema):
    type: str
    count: int


class CategoryQuantity(BaseSchema):
    category: str
    total_quantity: int


class DashboardSummary(BaseSchema):
    total_patients: int
    appointments_today: int
    upcoming_appointments: int
    low_stock_items: int
    unpaid_invoices: int
    outstanding_amount: Decimal


class DebugStats(BaseSchema):
    environment: str
    api_calls: int
    errors: int
    avg_load_time_ms: int
    error_rate: float
    last_error: Optional[str] = None
