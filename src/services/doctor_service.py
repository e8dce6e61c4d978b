# src/services/doctor_service.py
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from models.doctor import Doctor
from schemas.doctor_schemas import DoctorCreate, DoctorPublic, DoctorUpdate
from utils.exceptions import ConflictException
from utils.security import hash_password
from utils.logger import setup_logger
from .base_service import BaseService

logger = setup_logger("DOCTOR_SERVICE")


def doctor_to_public(doctor: Doctor) -> DoctorPublic:
    return DoctorPublic(
        id=doctor.id,
        first_name=doctor.first_name,
        last_name=doctor.last_name,
        name=doctor.full_name,
        email=doctor.email,
        phone=doctor.phone,
        specialization=doctor.specialization,
        color=doctor.color,
        is_admin=doctor.is_admin,
        created_at=doctor.created_at,
    )


class DoctorService(BaseService):
    def __init__(self):
        super().__init__(Doctor, "Doctor")

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[Doctor]:
        result = await db.execute(
            select(Doctor).where(func.lower(Doctor.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def list_doctors(self, db: AsyncSession) -> List[Doctor]:
        return await self.get_multi(
            db, limit=500, order_by=(Doctor.last_name, Doctor.first_name)
        )

    async def create_doctor(self, db: AsyncSession, doctor_data: DoctorCreate) -> Doctor:
        """Register a doctor; the password is only ever stored hashed"""
        if await self.get_by_email(db, doctor_data.email):
            raise ConflictException(f"A doctor with email {doctor_data.email} exists")

        data = doctor_data.model_dump(exclude={"password"})
        data["email"] = data["email"].lower()
        data["password_hash"] = hash_password(doctor_data.password)
        doctor = await self.create_from_dict(db, data)
        logger.info(f"Registered doctor {doctor.id}")
        return doctor

    async def update_doctor(
        self, db: AsyncSession, doctor_id, doctor_data: DoctorUpdate
    ) -> Doctor:
        return await self.update(db, doctor_id, doctor_data)


doctor_service = DoctorService()
