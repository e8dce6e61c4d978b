# src/routes/appointments.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Any
from uuid import UUID
from core.dependencies import get_current_user
from db.database import get_db
from models.appointment import AppointmentStatus
from models.doctor import Doctor
from schemas.appointment_schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentSearch,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from services.appointment_service import appointment_service, appointment_to_public
from utils.exceptions import UnprocessableEntityException
from utils.scheduling import AppointmentView

router = APIRouter(prefix="/appointments", tags=["appointments"])


def _search(**params) -> AppointmentSearch:
    try:
        return AppointmentSearch(**params)
    except ValueError as e:
        raise UnprocessableEntityException(str(e))


@router.get(
    "/",
    response_model=List[AppointmentPublic],
    summary="List appointments",
    description="Appointments by date and start time, with filters and the today/tomorrow/upcoming views",
)
async def list_appointments(
    doctor_id: Optional[UUID] = Query(None, alias="doctorId"),
    patient_id: Optional[UUID] = Query(None, alias="patientId"),
    status: Optional[AppointmentStatus] = Query(None),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    view: AppointmentView = Query(AppointmentView.ALL),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    search_params = _search(
        doctor_id=doctor_id,
        patient_id=patient_id,
        status=status,
        date_from=date_from,
        date_to=date_to,
        view=view,
    )
    appointments = await appointment_service.search_appointments(
        db, search_params, skip, limit
    )
    return [appointment_to_public(a) for a in appointments]


@router.get(
    "/upcoming",
    response_model=List[AppointmentPublic],
    summary="Upcoming appointments",
    description="The next appointments from today on",
)
async def upcoming_appointments(
    limit: int = Query(5, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    appointments = await appointment_service.get_upcoming(db, limit)
    return [appointment_to_public(a) for a in appointments]


@router.get(
    "/range",
    response_model=List[AppointmentPublic],
    summary="Appointments in a date range",
    description="Appointments whose date lies between startDate and endDate, both included",
)
async def appointments_in_range(
    start_date: str = Query(..., alias="startDate"),
    end_date: str = Query(..., alias="endDate"),
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    window = _search(date_from=start_date, date_to=end_date)
    appointments = await appointment_service.get_by_date_range(
        db, window.date_from, window.date_to
    )
    return [appointment_to_public(a) for a in appointments]


@router.get(
    "/patient/{patient_id}",
    response_model=List[AppointmentPublic],
    summary="Appointments of a patient",
)
async def patient_appointments(
    patient_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    appointments = await appointment_service.get_by_patient(db, patient_id)
    return [appointment_to_public(a) for a in appointments]


@router.post(
    "/",
    response_model=AppointmentPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Book appointment",
    description="Book a time block; overlapping a live appointment of the same doctor is rejected",
)
async def create_appointment(
    appointment_data: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    appointment = await appointment_service.create_appointment(db, appointment_data)
    return appointment_to_public(appointment)


@router.get("/{appointment_id}", response_model=AppointmentPublic, summary="Get appointment")
async def get_appointment(
    appointment_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return appointment_to_public(await appointment_service.get_or_404(db, appointment_id))


@router.patch(
    "/{appointment_id}",
    response_model=AppointmentPublic,
    summary="Update appointment",
    description="Partial update: only the fields sent are changed",
)
async def update_appointment(
    appointment_id: UUID,
    appointment_data: AppointmentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    appointment = await appointment_service.update_appointment(
        db, appointment_id, appointment_data
    )
    return appointment_to_public(appointment)


@router.patch(
    "/{appointment_id}/status",
    response_model=AppointmentPublic,
    summary="Change appointment status",
    description="Any status can follow any other; only the status is written",
)
async def change_appointment_status(
    appointment_id: UUID,
    status_data: AppointmentStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    appointment = await appointment_service.change_status(
        db, appointment_id, status_data.status
    )
    return appointment_to_public(appointment)


@router.delete(
    "/{appointment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete appointment",
)
async def delete_appointment(
    appointment_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Response:
    await appointment_service.delete(db, appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
