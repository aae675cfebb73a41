# app/system_models/appointment_model/appointment_schemas.py
from typing import Optional, Literal
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict

APPOINTMENT_STATUS = Literal["waiting", "examined", "completed"]


class AppointmentCreate(BaseModel):
    patient_id: int
    appointment_date: Optional[date] = None


class AppointmentStatusUpdate(BaseModel):
    # Checked against the allowed values in the service so the error is a ValidationError
    status: str


class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    appointment_date: date
    status: APPOINTMENT_STATUS
    medical_record_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class QueueEntry(AppointmentResponse):
    """A queue row joined with the patient and, once examined, the medical record."""

    full_name: str
    gender: str
    birth_year: int
    phone_number: str
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    disease_name: Optional[str] = None
    doctor_name: Optional[str] = None


class DayStats(BaseModel):
    total: int = 0
    waiting: int = 0
    examined: int = 0
    completed: int = 0


class MonthStats(BaseModel):
    total: int = 0
    completed: int = 0


class AppointmentStats(BaseModel):
    date: date
    today: DayStats
    month: MonthStats
