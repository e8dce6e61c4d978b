# src/routes/treatments.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Any
from uuid import UUID
from core.dependencies import get_current_user
from db.database import get_db
from models.doctor import Doctor
from models.treatment import TreatmentStatus
from schemas.treatment_schemas import TreatmentCreate, TreatmentPublic, TreatmentUpdate
from services.patient_service import patient_service
from services.treatment_service import treatment_service, treatment_to_public

router = APIRouter(prefix="/treatments", tags=["treatments"])


@router.get(
    "/",
    response_model=List[TreatmentPublic],
    summary="List treatments",
    description="Treatments, most recent start date first",
)
async def list_treatments(
    patient_id: Optional[UUID] = Query(None, alias="patientId"),
    status: Optional[TreatmentStatus] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    treatments = await treatment_service.list_treatments(
        db, patient_id, status, skip, limit
    )
    return [treatment_to_public(t) for t in treatments]


@router.get(
    "/patient/{patient_id}",
    response_model=List[TreatmentPublic],
    summary="Treatments of a patient",
)
async def patient_treatments(
    patient_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    await patient_service.ensure_exists(db, patient_id)
    treatments = await treatment_service.list_treatments(db, patient_id=patient_id)
    return [treatment_to_public(t) for t in treatments]


@router.post(
    "/",
    response_model=TreatmentPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Create treatment",
)
async def create_treatment(
    treatment_data: TreatmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    treatment = await treatment_service.create_treatment(db, treatment_data)
    return treatment_to_public(treatment)


@router.get("/{treatment_id}", response_model=TreatmentPublic, summary="Get treatment")
async def get_treatment(
    treatment_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return treatment_to_public(await treatment_service.get_or_404(db, treatment_id))


@router.patch(
    "/{treatment_id}",
    response_model=TreatmentPublic,
    summary="Update treatment",
    description="Partial update: only the fields sent are changed",
)
async def update_treatment(
    treatment_id: UUID,
    treatment_data: TreatmentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    treatment = await treatment_service.update_treatment(db, treatment_id, treatment_data)
    return treatment_to_public(treatment)


@router.delete(
    "/{treatment_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete treatment"
)
async def delete_treatment(
    treatment_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Response:
    await treatment_service.delete(db, treatment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
