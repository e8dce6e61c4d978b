"""
Models initialization file to handle circular dependencies
"""

from .doctor import Doctor
from .patient import Patient
from .appointment import Appointment, AppointmentStatus
from .treatment import Treatment, TreatmentStatus
from .invoice import Invoice, InvoiceStatus
from .inventory import InventoryItem
from .odontogram import Odontogram, ToothStatus, ToothSurface
from .password_reset import PasswordResetToken

from sqlalchemy.orm import configure_mappers

configure_mappers()

__all__ = [
    "Doctor",
    "Patient",
    "Appointment",
    "AppointmentStatus",
    "Treatment",
    "TreatmentStatus",
    "Invoice",
    "InvoiceStatus",
    "InventoryItem",
    "Odontogram",
    "ToothStatus",
    "ToothSurface",
    "PasswordResetToken",
]
