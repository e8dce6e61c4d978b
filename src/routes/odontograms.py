# src/routes/odontograms.py
from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Any
from uuid import UUID
from core.dependencies import get_current_user
from db.database import get_db
from models.doctor import Doctor
from schemas.odontogram_schemas import (
    OdontogramPublic,
    OdontogramSave,
    SuggestedTreatmentPublic,
    SuggestedTreatmentsCreate,
    ToothCatalogPublic,
    ToothConditionUpdate,
)
from schemas.treatment_schemas import TreatmentPublic
from services.odontogram_service import odontogram_service, odontogram_to_public
from services.treatment_service import treatment_to_public
from utils.odontogram import tooth_catalog

router = APIRouter(prefix="/odontograms", tags=["odontograms"])


@router.get(
    "/teeth",
    response_model=ToothCatalogPublic,
    summary="Tooth catalog",
    description="Upper and lower arches in chart order, adult or pediatric",
)
async def get_tooth_catalog(
    pediatric: bool = Query(False),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return ToothCatalogPublic(is_pediatric=pediatric, **tooth_catalog(pediatric))


@router.get(
    "/patient/{patient_id}",
    response_model=List[OdontogramPublic],
    summary="Odontograms of a patient",
    description="Charts of a patient, most recent date first",
)
async def patient_odontograms(
    patient_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    odontograms = await odontogram_service.get_by_patient(db, patient_id)
    return [odontogram_to_public(o) for o in odontograms]


@router.put(
    "/",
    response_model=OdontogramPublic,
    summary="Save odontogram",
    description="Create or replace the chart of a patient for a date",
)
async def save_odontogram(
    odontogram_data: OdontogramSave,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    odontogram = await odontogram_service.save(db, odontogram_data)
    return odontogram_to_public(odontogram)


@router.get("/{odontogram_id}", response_model=OdontogramPublic, summary="Get odontogram")
async def get_odontogram(
    odontogram_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    return odontogram_to_public(await odontogram_service.get_or_404(db, odontogram_id))


@router.put(
    "/{odontogram_id}/teeth/{tooth}",
    response_model=OdontogramPublic,
    summary="Set tooth condition",
    description="Replace one tooth's status, surfaces and notes",
)
async def set_tooth_condition(
    odontogram_id: UUID,
    condition: ToothConditionUpdate,
    tooth: int = Path(..., ge=11, le=85),
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    odontogram = await odontogram_service.set_tooth(db, odontogram_id, tooth, condition)
    return odontogram_to_public(odontogram)


@router.get(
    "/{odontogram_id}/suggestions",
    response_model=List[SuggestedTreatmentPublic],
    summary="Suggested treatments",
    description="Treatments implied by the chart, ordered by tooth number",
)
async def odontogram_suggestions(
    odontogram_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    suggestions = await odontogram_service.suggestions(db, odontogram_id)
    return [SuggestedTreatmentPublic(**s._asdict()) for s in suggestions]


@router.post(
    "/{odontogram_id}/treatments",
    response_model=List[TreatmentPublic],
    status_code=status.HTTP_201_CREATED,
    summary="Plan suggested treatments",
    description="Create a planned treatment for every suggestion of the chart",
)
async def create_suggested_treatments(
    odontogram_id: UUID,
    request: SuggestedTreatmentsCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    treatments = await odontogram_service.create_suggested_treatments(
        db, odontogram_id, request, default_doctor_id=current_user.id
    )
    return [treatment_to_public(t) for t in treatments]


@router.delete(
    "/{odontogram_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete odontogram"
)
async def delete_odontogram(
    odontogram_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: Doctor = Depends(get_current_user),
) -> Response:
    await odontogram_service.delete(db, odontogram_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
