# src/services/patient_service.py
from typing import List, Optional
from uuid import UUID
from sqlalchemy import or_, func
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from models.doctor import Doctor
from models.patient import Patient
from schemas.patient_schemas import (
    PatientCreate,
    PatientPublic,
    PatientUpdate,
    TreatingDoctor,
)
from utils.exceptions import NotFoundException, UnprocessableEntityException
from utils.logger import setup_logger
from .base_service import BaseService

logger = setup_logger("PATIENT_SERVICE")


def patient_to_public(patient: Patient) -> PatientPublic:
    """Row to API shape: ``is_child`` becomes ``isPediatric`` and the
    treating doctor is embedded when one is assigned"""
    doctor = patient.treating_doctor
    return PatientPublic(
        id=patient.id,
        first_name=patient.first_name,
        last_name=patient.last_name,
        email=patient.email,
        phone=patient.phone,
        date_of_birth=patient.date_of_birth,
        gender=patient.gender,
        address=patient.address,
        city=patient.city,
        postal_code=patient.postal_code,
        insurance=patient.insurance,
        insurance_number=patient.insurance_number,
        medical_history=patient.medical_history,
        allergies=patient.allergies or [],
        last_visit=patient.last_visit,
        is_pediatric=bool(patient.is_child),
        legal_guardian=patient.legal_guardian,
        treating_doctor=(
            TreatingDoctor(
                id=doctor.id,
                first_name=doctor.first_name,
                last_name=doctor.last_name,
                specialization=doctor.specialization,
            )
            if doctor
            else None
        ),
        created_at=patient.created_at,
    )


class PatientService(BaseService):
    load_options = (selectinload(Patient.treating_doctor),)

    def __init__(self):
        super().__init__(Patient, "Patient")

    async def _check_treating_doctor(
        self, db: AsyncSession, doctor_id: Optional[UUID]
    ) -> None:
        if doctor_id and not await db.get(Doctor, doctor_id):
            raise NotFoundException("Treating doctor not found")

    @staticmethod
    def _to_row(values: dict) -> dict:
        if "is_pediatric" in values:
            values["is_child"] = values.pop("is_pediatric")
        return values

    async def search_patients(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Patient]:
        """Patients ordered by name, optionally matching a name/email/phone fragment"""
        query = self._select().order_by(Patient.last_name, Patient.first_name)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                or_(
                    func.lower(Patient.first_name).like(pattern),
                    func.lower(Patient.last_name).like(pattern),
                    func.lower(Patient.email).like(pattern),
                    Patient.phone.like(pattern),
                )
            )
        result = await db.execute(query.offset(skip).limit(limit))
        return list(result.scalars().all())

    async def get_recent(self, db: AsyncSession, limit: int = 5) -> List[Patient]:
        """Latest registrations, newest first"""
        return await self.get_multi(
            db,
            limit=limit,
            order_by=(Patient.created_at.desc(), Patient.last_name),
        )

    async def create_patient(
        self, db: AsyncSession, patient_data: PatientCreate
    ) -> Patient:
        await self._check_treating_doctor(db, patient_data.treating_doctor_id)
        data = self._to_row(patient_data.model_dump())
        patient = await self.create_from_dict(db, data)
        logger.info(f"Registered patient {patient.id} (pediatric={patient.is_child})")
        return patient

    async def update_patient(
        self, db: AsyncSession, patient_id: UUID, patient_data: PatientUpdate
    ) -> Patient:
        """Partial update; the merged record must still carry a guardian
        when it is pediatric"""
        patient = await self.get_or_404(db, patient_id)
        values = self._to_row(patient_data.model_dump(exclude_unset=True))

        is_child = values.get("is_child", patient.is_child)
        guardian = values.get("legal_guardian", patient.legal_guardian)
        if is_child and not guardian:
            raise UnprocessableEntityException(
                "legalGuardian is required for pediatric patients"
            )

        if "treating_doctor_id" in values:
            await self._check_treating_doctor(db, values["treating_doctor_id"])

        return await self.update_fields(db, patient_id, values)

    async def ensure_exists(self, db: AsyncSession, patient_id: UUID) -> Patient:
        patient = await db.get(Patient, patient_id)
        if patient is None:
            raise NotFoundException("Patient not found")
        return patient


patient_service = PatientService()
