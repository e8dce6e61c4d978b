# src/services/odontogram_service.py
from typing import List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from models.odontogram import Odontogram
from models.treatment import Treatment, TreatmentStatus
from schemas.odontogram_schemas import (
    OdontogramPublic,
    OdontogramSave,
    SuggestedTreatmentsCreate,
    ToothConditionUpdate,
)
from utils.exceptions import UnprocessableEntityException, handle_db_exception
from utils.logger import setup_logger
from utils.odontogram import (
    SuggestedTreatment,
    is_valid_tooth,
    normalize_tooth_map,
    set_tooth_condition,
    suggest_treatments,
)
from utils.scheduling import today_str
from .base_service import BaseService
from .patient_service import patient_service
from .treatment_service import treatment_service

logger = setup_logger("ODONTOGRAM_SERVICE")


def odontogram_to_public(odontogram: Odontogram) -> OdontogramPublic:
    return OdontogramPublic(
        id=odontogram.id,
        patient_id=odontogram.patient_id,
        date=odontogram.date,
        teeth=odontogram.teeth or {},
        notes=odontogram.notes,
        is_pediatric=bool(odontogram.is_child),
        created_at=odontogram.created_at,
        updated_at=odontogram.updated_at,
    )


class OdontogramService(BaseService):
    def __init__(self):
        super().__init__(Odontogram, "Odontogram")

    @staticmethod
    def _check_teeth(teeth: dict, is_pediatric: bool) -> None:
        invalid = sorted(
            (tooth for tooth in teeth if not is_valid_tooth(tooth, is_pediatric)),
            key=int,
        )
        if invalid:
            chart = "pediatric" if is_pediatric else "adult"
            raise UnprocessableEntityException(
                f"Teeth not in the {chart} chart: {', '.join(invalid)}"
            )

    async def get_by_patient(self, db: AsyncSession, patient_id: UUID) -> List[Odontogram]:
        """A patient's charts, most recent first"""
        await patient_service.ensure_exists(db, patient_id)
        return await self.get_multi(
            db, filters={"patient_id": patient_id}, order_by=(Odontogram.date.desc(),)
        )

    async def save(self, db: AsyncSession, data: OdontogramSave) -> Odontogram:
        """Upsert by (patient, date): the stored chart is replaced, not merged"""
        patient = await patient_service.ensure_exists(db, data.patient_id)
        is_pediatric = (
            data.is_pediatric if data.is_pediatric is not None else patient.is_child
        )
        teeth = normalize_tooth_map(data.teeth)
        self._check_teeth(teeth, is_pediatric)

        result = await db.execute(
            select(Odontogram).where(
                Odontogram.patient_id == data.patient_id,
                Odontogram.date == data.date,
            )
        )
        existing = result.scalar_one_or_none()

        if existing is None:
            odontogram = await self.create_from_dict(
                db,
                {
                    "patient_id": data.patient_id,
                    "date": data.date,
                    "teeth": teeth,
                    "notes": data.notes,
                    "is_child": is_pediatric,
                },
            )
            logger.info(f"Created odontogram {odontogram.id} for patient {data.patient_id}")
            return odontogram

        logger.info(f"Replacing odontogram {existing.id} of {data.date}")
        return await self.update_fields(
            db,
            existing.id,
            {"teeth": teeth, "notes": data.notes, "is_child": is_pediatric},
        )

    async def set_tooth(
        self,
        db: AsyncSession,
        odontogram_id: UUID,
        tooth: int,
        condition: ToothConditionUpdate,
    ) -> Odontogram:
        """Edit one tooth; a healthy tooth without notes or surfaces is removed"""
        odontogram = await self.get_or_404(db, odontogram_id)
        self._check_teeth({str(tooth): None}, odontogram.is_child)

        teeth = set_tooth_condition(
            odontogram.teeth,
            tooth,
            condition.status,
            condition.surfaces,
            condition.notes,
        )
        return await self.update_fields(db, odontogram_id, {"teeth": teeth})

    async def suggestions(
        self, db: AsyncSession, odontogram_id: UUID
    ) -> List[SuggestedTreatment]:
        odontogram = await self.get_or_404(db, odontogram_id)
        return suggest_treatments(odontogram.teeth)

    async def create_suggested_treatments(
        self,
        db: AsyncSession,
        odontogram_id: UUID,
        request: SuggestedTreatmentsCreate,
        default_doctor_id: Optional[UUID] = None,
    ) -> List[Treatment]:
        """Plan one treatment per suggestion of the chart"""
        odontogram = await self.get_or_404(db, odontogram_id)
        suggestions = suggest_treatments(odontogram.teeth)
        if not suggestions:
            return []

        start_date = request.start_date or today_str()
        doctor_id = request.doctor_id or default_doctor_id
        rows = [
            {
                "patient_id": odontogram.patient_id,
                "doctor_id": doctor_id,
                "type": suggestion.type,
                "description": f"{suggestion.type} para diente {suggestion.tooth}",
                "teeth": [suggestion.tooth],
                "status": TreatmentStatus.PLANNED,
                "cost": suggestion.cost,
                "start_date": start_date,
                "notes": suggestion.notes,
                "suggested_by_odontogram": True,
            }
            for suggestion in suggestions
        ]

        try:
            treatments = await treatment_service.create_many(db, rows)
        except SQLAlchemyError as e:
            await handle_db_exception(db, self.logger, "create suggested treatments", e)

        logger.info(
            f"Planned {len(treatments)} treatments from odontogram {odontogram_id}"
        )
        return treatments


odontogram_service = OdontogramService()
