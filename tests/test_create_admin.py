from scripts.create_admin import create_admin
from services.doctor_service import doctor_service
from utils.security import verify_password


class TestCreateAdmin:
    async def test_creates_administrator(self, db_session):
        admin = await create_admin(
            db_session, "Marta", "Lopez", "Marta.Lopez@clinica-dental.es", "secreto-123"
        )
        assert admin.is_admin is True
        assert admin.email == "marta.lopez@clinica-dental.es"
        assert verify_password("secreto-123", admin.password_hash)

        again = await create_admin(
            db_session, "Marta", "Lopez", "marta.lopez@clinica-dental.es", "otro-secreto"
        )
        assert again.id == admin.id

    async def test_promotes_existing_doctor(self, db_session, doctor):
        promoted = await create_admin(
            db_session, "Luis", "Moreno", doctor.email, "ignored-password"
        )
        assert promoted.id == doctor.id
        assert promoted.is_admin is True
        stored = await doctor_service.get_by_email(db_session, doctor.email)
        assert stored.is_admin is True
