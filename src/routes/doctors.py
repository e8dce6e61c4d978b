# src/routes/doctors.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Any
from uuid import UUID
from core.dependencies import get_current_user, require_admin
from db.database import get_db
from models.doctor import Doctor
from schemas.doctor_schemas import DoctorCreate, DoctorPublic, DoctorUpdate
from services.doctor_service import doctor_service, doctor_to_public
from utils.exceptions import ForbiddenException

router = APIRouter(prefix="/doctors", tags=["doctors"])


@router.get(
    "/",
    response_model=List[DoctorPublic],
    summary="List doctors",
    description="All doctors of the clinic, by name",
)
async def list_doctors(
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return [doctor_to_public(d) for d in await doctor_service.list_doctors(db)]


@router.post(
    "/",
    response_model=DoctorPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Register doctor",
    description="Create a doctor account (administrators only)",
)
async def create_doctor(
    doctor_data: DoctorCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(require_admin),
) -> Any:
    doctor = await doctor_service.create_doctor(db, doctor_data)
    return doctor_to_public(doctor)


@router.get(
    "/{doctor_id}",
    response_model=DoctorPublic,
    summary="Get doctor",
)
async def get_doctor(
    doctor_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return doctor_to_public(await doctor_service.get_or_404(db, doctor_id))


@router.patch(
    "/{doctor_id}",
    response_model=DoctorPublic,
    summary="Update doctor",
    description="Doctors edit their own profile; administrators edit anyone",
)
async def update_doctor(
    doctor_id: UUID,
    doctor_data: DoctorUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    if not current_user.is_admin:
        if current_user.id != doctor_id:
            raise ForbiddenException("You can only edit your own profile")
        if doctor_data.is_admin is not None:
            raise ForbiddenException("Only administrators can grant admin rights")
    doctor = await doctor_service.update_doctor(db, doctor_id, doctor_data)
    return doctor_to_public(doctor)
