# app/system_models/medical_record_model/medical_record_schemas.py
from typing import List, Literal, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_validator

RECORD_STATUS = Literal["pending", "completed", "cancelled"]


class PrescriptionItem(BaseModel):
    medicine_id: int
    usage_method_id: int
    quantity: int = Field(..., gt=0)


class MedicalRecordCreate(BaseModel):
    patient_id: int
    symptoms: str = Field(..., min_length=1)
    disease_id: Optional[int] = None
    diagnosis: Optional[str] = None
    prescriptions: List[PrescriptionItem] = []

    @field_validator("symptoms")
    def symptoms_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Symptoms are required")
        return v.strip()


class PrescriptionLine(BaseModel):
    id: int
    medicine_id: int
    medicine_name: str
    unit: str
    price: Decimal
    usage_method_id: int
    usage_method_name: str
    quantity: int
    total_price: Decimal


class MedicalRecordDetail(BaseModel):
    id: int
    patient_id: int
    patient_name: str
    phone_number: str
    doctor_id: Optional[int] = None
    doctor_name: Optional[str] = None
    symptoms: str
    disease_id: Optional[int] = None
    disease_name: Optional[str] = None
    diagnosis: Optional[str] = None
    status: RECORD_STATUS
    created_at: datetime
    updated_at: Optional[datetime] = None
    prescriptions: List[PrescriptionLine] = []

    model_config = ConfigDict(from_attributes=True)
