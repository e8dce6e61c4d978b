# src/services/treatment_service.py
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from models.doctor import Doctor
from models.patient import Patient
from models.treatment import Treatment
from schemas.treatment_schemas import (
    TreatmentCreate,
    TreatmentPublic,
    TreatmentUpdate,
)
from utils.exceptions import NotFoundException, UnprocessableEntityException
from utils.logger import setup_logger
from .base_service import BaseService

logger = setup_logger("TREATMENT_SERVICE")


def treatment_to_public(treatment: Treatment) -> TreatmentPublic:
    return TreatmentPublic(
        id=treatment.id,
        patient_id=treatment.patient_id,
        patient_name=treatment.patient.full_name if treatment.patient else None,
        doctor_id=treatment.doctor_id,
        doctor_name=treatment.doctor.full_name if treatment.doctor else None,
        type=treatment.type,
        description=treatment.description,
        teeth=treatment.teeth or [],
        status=treatment.status,
        cost=treatment.cost,
        start_date=treatment.start_date,
        end_date=treatment.end_date,
        notes=treatment.notes,
        suggested_by_odontogram=treatment.suggested_by_odontogram,
        created_at=treatment.created_at,
    )


class TreatmentService(BaseService):
    load_options = (
        selectinload(Treatment.patient),
        selectinload(Treatment.doctor),
    )

    def __init__(self):
        super().__init__(Treatment, "Treatment")

    async def _check_parties(
        self, db: AsyncSession, patient_id: Optional[UUID], doctor_id: Optional[UUID]
    ) -> None:
        if patient_id and not await db.get(Patient, patient_id):
            raise NotFoundException("Patient not found")
        if doctor_id and not await db.get(Doctor, doctor_id):
            raise NotFoundException("Doctor not found")

    async def list_treatments(
        self,
        db: AsyncSession,
        patient_id: Optional[UUID] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Treatment]:
        return await self.get_multi(
            db,
            skip=skip,
            limit=limit,
            filters={"patient_id": patient_id, "status": status},
            order_by=(Treatment.start_date.desc(), Treatment.created_at.desc()),
        )

    async def create_treatment(
        self, db: AsyncSession, treatment_data: TreatmentCreate
    ) -> Treatment:
        await self._check_parties(db, treatment_data.patient_id, treatment_data.doctor_id)
        treatment = await self.create_from_dict(db, treatment_data.model_dump())
        logger.info(f"Planned treatment {treatment.id} ({treatment.type})")
        return treatment

    async def create_many(self, db: AsyncSession, rows: List[dict]) -> List[Treatment]:
        """Insert several treatments in one transaction"""
        treatments = [Treatment(**row) for row in rows]
        db.add_all(treatments)
        await db.flush()
        ids = [treatment.id for treatment in treatments]
        await db.commit()
        await self.after_change(db)
        return [await self.get(db, treatment_id) for treatment_id in ids]

    async def update_treatment(
        self, db: AsyncSession, treatment_id: UUID, treatment_data: TreatmentUpdate
    ) -> Treatment:
        treatment = await self.get_or_404(db, treatment_id)
        values = treatment_data.model_dump(exclude_unset=True)

        start_date = values.get("start_date", treatment.start_date)
        end_date = values.get("end_date", treatment.end_date)
        if end_date and end_date < start_date:
            raise UnprocessableEntityException("endDate cannot be before startDate")

        await self._check_parties(db, None, values.get("doctor_id"))
        return await self.update_fields(db, treatment_id, values)


treatment_service = TreatmentService()
