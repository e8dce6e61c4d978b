# scripts/create_admin.py
import argparse
import asyncio
import getpass
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.ext.asyncio import AsyncSession
from db.database import AsyncSessionLocal, create_tables
from models.doctor import Doctor
from schemas.doctor_schemas import DoctorCreate
from services.doctor_service import doctor_service
from utils.logger import setup_logger

logger = setup_logger("CREATE_ADMIN")


async def create_admin(
    db: AsyncSession,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    specialization: str = None,
) -> Doctor:
    """Register an administrator doctor, or promote an existing one"""
    existing = await doctor_service.get_by_email(db, email)
    if existing:
        if not existing.is_admin:
            existing = await doctor_service.update_fields(
                db, existing.id, {"is_admin": True}
            )
            logger.info(f"Promoted {email} to administrator")
        return existing

    doctor = await doctor_service.create_doctor(
        db,
        DoctorCreate(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            specialization=specialization,
            is_admin=True,
        ),
    )
    logger.info(f"Administrator {email} created")
    return doctor


async def main(args: argparse.Namespace):
    await create_tables()
    password = args.password or getpass.getpass("Password: ")
    async with AsyncSessionLocal() as session:
        await create_admin(
            session,
            args.first_name,
            args.last_name,
            args.email,
            password,
            args.specialization,
        )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the first clinic administrator")
    parser.add_argument("--email", required=True)
    parser.add_argument("--first-name", required=True)
    parser.add_argument("--last-name", required=True)
    parser.add_argument("--specialization")
    parser.add_argument("--password", help="Prompted for when omitted")
    asyncio.run(main(parser.parse_args()))
