# app/system_models/invoice_model/invoice_schemas.py
from typing import List, Literal, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict

from app.helpers.responses import ApiResponse
from app.system_models.medical_record_model.medical_record_schemas import PrescriptionLine

PAYMENT_STATUS = Literal["pending", "paid"]


class InvoiceCreate(BaseModel):
    patient_id: int
    medical_record_id: int
    daily_appointment_id: int


class InvoiceResponse(BaseModel):
    id: int
    patient_id: int
    medical_record_id: int
    daily_appointment_id: int
    consultation_fee: Decimal
    medicine_fee: Decimal
    total_amount: Decimal
    payment_status: PAYMENT_STATUS
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InvoiceListItem(InvoiceResponse):
    patient_name: str
    phone_number: str


class InvoiceDetail(InvoiceListItem):
    address: Optional[str] = None
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    disease_name: Optional[str] = None
    doctor_name: Optional[str] = None
    prescriptions: List[PrescriptionLine] = []


class InvoiceSummary(BaseModel):
    total_invoices: int = 0
    total_revenue: Decimal = Decimal("0")
    pending_count: int = 0
    paid_count: int = 0


class InvoiceListResponse(ApiResponse[List[InvoiceListItem]]):
    summary: Optional[InvoiceSummary] = None
