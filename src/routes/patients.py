# src/routes/patients.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Any
from uuid import UUID
from core.dependencies import get_current_user
from db.database import get_db
from models.doctor import Doctor
from schemas.patient_schemas import PatientCreate, PatientPublic, PatientUpdate
from services.patient_service import patient_service, patient_to_public

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get(
    "/",
    response_model=List[PatientPublic],
    summary="List patients",
    description="Patients by name, optionally filtered by a search term",
)
async def list_patients(
    search: Optional[str] = Query(None, description="Name, email or phone fragment"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    patients = await patient_service.search_patients(db, search, skip, limit)
    return [patient_to_public(p) for p in patients]


@router.post(
    "/",
    response_model=PatientPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Register patient",
    description="Pediatric patients must carry a legal guardian",
)
async def create_patient(
    patient_data: PatientCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    patient = await patient_service.create_patient(db, patient_data)
    return patient_to_public(patient)


@router.get(
    "/recent",
    response_model=List[PatientPublic],
    summary="Recent patients",
    description="Most recently registered patients, newest first",
)
async def recent_patients(
    limit: int = Query(5, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    patients = await patient_service.get_recent(db, limit)
    return [patient_to_public(p) for p in patients]


@router.get("/{patient_id}", response_model=PatientPublic, summary="Get patient")
async def get_patient(
    patient_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return patient_to_public(await patient_service.get_or_404(db, patient_id))


@router.patch(
    "/{patient_id}",
    response_model=PatientPublic,
    summary="Update patient",
    description="Partial update: only the fields sent are changed",
)
async def update_patient(
    patient_id: UUID,
    patient_data: PatientUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    patient = await patient_service.update_patient(db, patient_id, patient_data)
    return patient_to_public(patient)


@router.delete(
    "/{patient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete patient",
    description="Removes the patient with their appointments, treatments, invoices and odontograms",
)
async def delete_patient(
    patient_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Response:
    await patient_service.delete(db, patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
