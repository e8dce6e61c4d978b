# src/schemas/__init__.py
from .base_schemas import *
from .doctor_schemas import *
from .auth_schemas import *
from .patient_schemas import *
from .appointment_schemas import *
from .treatment_schemas import *
from .invoice_schemas import *
from .inventory_schemas import *
from .odontogram_schemas import *
from .report_schemas import *
