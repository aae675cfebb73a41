# app/model_registry/__init__.py


# Register all models here

# User models
from app.users.user_models.user_model import User
from app.users.auth_token_model.token_model import Token

# Reference data
from app.system_models.medicine_model.medicine_model import Medicine
from app.system_models.disease_model.disease_model import Disease
from app.system_models.unit_model.unit_model import Unit
from app.system_models.usage_method_model.usage_method_model import UsageMethod
from app.system_models.setting_model.setting_model import SystemSetting

# Visit workflow models
from app.system_models.patient_model.patient_model import Patient
from app.system_models.appointment_model.appointment_model import DailyAppointment
from app.system_models.medical_record_model.medical_record_model import MedicalRecord, PrescriptionDetail
from app.system_models.invoice_model.invoice_model import Invoice
