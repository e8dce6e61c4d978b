# src/routes/reports.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Any
from core.dependencies import get_current_user
from db.database import get_db
from models.doctor import Doctor
from schemas.report_schemas import (
    CategoryQuantity,
    DashboardSummary,
    DoctorMonthlyRevenue,
    MonthlyRevenue,
    StatusCount,
    TypeCount,
)
from services.report_service import report_service
from utils.scheduling import today_str

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/dashboard", response_model=DashboardSummary, summary="Dashboard summary")
async def dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return await report_service.dashboard_summary(db, today_str())


@router.get(
    "/revenue/monthly",
    response_model=List[MonthlyRevenue],
    summary="Monthly revenue",
    description="Sum of paid invoice totals per invoice month",
)
async def monthly_revenue(
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return await report_service.monthly_revenue(db)


@router.get(
    "/revenue/by-doctor",
    response_model=List[DoctorMonthlyRevenue],
    summary="Monthly revenue by doctor",
)
async def revenue_by_doctor(
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return await report_service.monthly_revenue_by_doctor(db)


@router.get(
    "/appointments", response_model=List[StatusCount], summary="Appointments by status"
)
async def appointment_stats(
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return await report_service.appointment_stats(db)


@router.get("/treatments", response_model=List[TypeCount], summary="Treatments by type")
async def treatment_stats(
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return await report_service.treatment_stats(db)


@router.get(
    "/inventory", response_model=List[CategoryQuantity], summary="Stock by category"
)
async def inventory_by_category(
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return await report_service.inventory_by_category(db)
