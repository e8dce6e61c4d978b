# src/services/appointment_service.py
from typing import List, Optional, Any
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from models.appointment import Appointment, AppointmentStatus
from models.doctor import Doctor
from models.patient import Patient
from schemas.appointment_schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentSearch,
    AppointmentUpdate,
)
from utils.exceptions import (
    ConflictException,
    NotFoundException,
    UnprocessableEntityException,
)
from utils.logger import setup_logger
from utils.scheduling import (
    BLOCKING_STATUSES,
    filter_by_view,
    find_overlapping,
    make_time_block,
    today_str,
    transition_status,
)
from .base_service import BaseService

logger = setup_logger("APPOINTMENT_SERVICE")


def appointment_to_public(appointment: Appointment) -> AppointmentPublic:
    return AppointmentPublic(
        id=appointment.id,
        patient_id=appointment.patient_id,
        patient_name=appointment.patient.full_name if appointment.patient else None,
        doctor_id=appointment.doctor_id,
        doctor_name=appointment.doctor.full_name if appointment.doctor else None,
        date=appointment.date,
        start_time=appointment.start_time,
        end_time=appointment.end_time,
        status=appointment.status,
        notes=appointment.notes,
        treatment_type=appointment.treatment_type,
        created_at=appointment.created_at,
        updated_at=appointment.updated_at,
    )


class AppointmentService(BaseService):
    load_options = (
        selectinload(Appointment.patient),
        selectinload(Appointment.doctor),
    )

    def __init__(self):
        super().__init__(Appointment, "Appointment")

    def _ordered(self, query):
        return query.order_by(Appointment.date, Appointment.start_time)

    async def _check_parties(
        self, db: AsyncSession, patient_id: Optional[UUID], doctor_id: Optional[UUID]
    ) -> None:
        if patient_id and not await db.get(Patient, patient_id):
            raise NotFoundException("Patient not found")
        if doctor_id and not await db.get(Doctor, doctor_id):
            raise NotFoundException("Doctor not found")

    async def check_conflicts(
        self,
        db: AsyncSession,
        doctor_id: UUID,
        date: str,
        start_time: str,
        end_time: str,
        exclude_id: Optional[UUID] = None,
    ) -> None:
        """Reject a block that overlaps another live appointment of the same
        doctor on the same date"""
        result = await db.execute(
            select(Appointment).where(
                Appointment.doctor_id == doctor_id,
                Appointment.date == date,
                Appointment.status.in_(list(BLOCKING_STATUSES)),
            )
        )
        conflicts = find_overlapping(
            start_time, end_time, result.scalars().all(), exclude_id=exclude_id
        )
        if conflicts:
            clash = conflicts[0]
            logger.warning(
                f"Overlap for doctor {doctor_id} on {date}: "
                f"{start_time}-{end_time} vs {clash.start_time}-{clash.end_time}"
            )
            raise ConflictException(
                f"Doctor already has an appointment on {date} from "
                f"{clash.start_time} to {clash.end_time}"
            )

    async def search_appointments(
        self,
        db: AsyncSession,
        search_params: AppointmentSearch,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Appointment]:
        """Search appointments with various filters"""
        query = self._select()

        if search_params.doctor_id:
            query = query.where(Appointment.doctor_id == search_params.doctor_id)
        if search_params.patient_id:
            query = query.where(Appointment.patient_id == search_params.patient_id)
        if search_params.status:
            query = query.where(Appointment.status == search_params.status)
        if search_params.date_from:
            query = query.where(Appointment.date >= search_params.date_from)
        if search_params.date_to:
            query = query.where(Appointment.date <= search_params.date_to)

        result = await db.execute(self._ordered(query))
        appointments = filter_by_view(result.scalars().all(), search_params.view)
        return appointments[skip : skip + limit]

    async def get_by_patient(self, db: AsyncSession, patient_id: UUID) -> List[Appointment]:
        return await self.search_appointments(
            db, AppointmentSearch(patient_id=patient_id)
        )

    async def get_by_date_range(
        self, db: AsyncSession, start_date: str, end_date: str
    ) -> List[Appointment]:
        if end_date < start_date:
            raise UnprocessableEntityException("endDate cannot be before startDate")
        return await self.search_appointments(
            db, AppointmentSearch(date_from=start_date, date_to=end_date)
        )

    async def get_upcoming(self, db: AsyncSession, limit: int = 5) -> List[Appointment]:
        """Next appointments from today on, earliest first"""
        result = await db.execute(
            self._ordered(self._select().where(Appointment.date >= today_str())).limit(
                limit
            )
        )
        return list(result.scalars().all())

    async def create_appointment(
        self, db: AsyncSession, appointment_data: AppointmentCreate
    ) -> Appointment:
        """Create new appointment after checking parties and overlaps"""
        await self._check_parties(
            db, appointment_data.patient_id, appointment_data.doctor_id
        )
        if AppointmentStatus(appointment_data.status) in BLOCKING_STATUSES:
            await self.check_conflicts(
                db,
                appointment_data.doctor_id,
                appointment_data.date,
                appointment_data.start_time,
                appointment_data.end_time,
            )

        appointment = await self.create_from_dict(
            db, appointment_data.model_dump(exclude={"time_block"})
        )
        logger.info(
            f"Booked appointment {appointment.id} on {appointment.date} "
            f"{appointment.start_time}-{appointment.end_time}"
        )
        return appointment

    async def update_appointment(
        self, db: AsyncSession, appointment_id: UUID, appointment_data: AppointmentUpdate
    ) -> Appointment:
        """Partial update; the merged record is re-validated and re-checked"""
        appointment = await self.get_or_404(db, appointment_id)
        values = appointment_data.model_dump(exclude_unset=True, exclude={"time_block"})
        if appointment_data.time_block:
            values["start_time"] = appointment_data.start_time
            values["end_time"] = appointment_data.end_time

        merged = {
            field: values.get(field, getattr(appointment, field))
            for field in ("patient_id", "doctor_id", "date", "start_time", "end_time", "status")
        }

        try:
            make_time_block(merged["start_time"], merged["end_time"])
        except ValueError as e:
            raise UnprocessableEntityException(str(e))

        await self._check_parties(db, values.get("patient_id"), values.get("doctor_id"))
        if AppointmentStatus(merged["status"]) in BLOCKING_STATUSES:
            await self.check_conflicts(
                db,
                merged["doctor_id"],
                merged["date"],
                merged["start_time"],
                merged["end_time"],
                exclude_id=appointment.id,
            )

        return await self.update_fields(db, appointment_id, values)

    async def change_status(
        self, db: AsyncSession, appointment_id: UUID, target: Any
    ) -> Appointment:
        """Write only the status; any status can follow any other"""
        appointment = await self.get_or_404(db, appointment_id)
        new_status = transition_status(appointment.status, target)

        # Reviving a cancelled appointment must not double-book its block
        if (
            AppointmentStatus(appointment.status) not in BLOCKING_STATUSES
            and new_status in BLOCKING_STATUSES
        ):
            await self.check_conflicts(
                db,
                appointment.doctor_id,
                appointment.date,
                appointment.start_time,
                appointment.end_time,
                exclude_id=appointment.id,
            )

        logger.info(
            f"Appointment {appointment_id}: {AppointmentStatus(appointment.status).value}"
            f" -> {new_status.value}"
        )
        return await self.update_fields(db, appointment_id, {"status": new_status})


appointment_service = AppointmentService()
