# src/routes/__init__.py
from .auth import router as auth_router
from .password_reset import router as password_reset_router
from .doctors import router as doctors_router
from .patients import router as patients_router
from .appointments import router as appointments_router
from .treatments import router as treatments_router
from .invoices import router as invoices_router
from .inventory import router as inventory_router
from .odontograms import router as odontograms_router
from .reports import router as reports_router
from .scheduling import router as scheduling_router
from .debug import router as debug_router

__all__ = [
    "auth_router",
    "password_reset_router",
    "doctors_router",
    "patients_router",
    "appointments_router",
    "treatments_router",
    "invoices_router",
    "inventory_router",
    "odontograms_router",
    "reports_router",
    "scheduling_router",
    "debug_router",
]
