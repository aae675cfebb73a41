# app/system_models/report_model/report_schemas.py
from typing import Dict, List
from datetime import date
from decimal import Decimal
from pydantic import BaseModel


class DailyRevenue(BaseModel):
    date: date
    patient_count: int
    consultation_revenue: Decimal
    medicine_revenue: Decimal
    total_revenue: Decimal


class RevenueSummary(BaseModel):
    total_patients: int
    total_consultation_revenue: Decimal
    total_medicine_revenue: Decimal
    total_revenue: Decimal
    average_revenue_per_patient: Decimal


class RevenueReport(BaseModel):
    month: int
    year: int
    daily: List[DailyRevenue]
    summary: RevenueSummary


class MedicineUsageRow(BaseModel):
    medicine_id: int
    medicine_name: str
    unit: str
    total_quantity: int
    prescription_count: int
    average_quantity: Decimal
    total_value: Decimal


class MedicineUsageSummary(BaseModel):
    unique_medicines: int
    total_quantity: int
    total_prescriptions: int
    total_value: Decimal


class MedicineUsageReport(BaseModel):
    month: int
    year: int
    medicines: List[MedicineUsageRow]
    summary: MedicineUsageSummary


class PatientStatsReport(BaseModel):
    total_appointments: int
    waiting: int
    examined: int
    completed: int
    unique_patients: int
    male_count: int
    female_count: int
    age_groups: Dict[str, int]


class PeriodRevenue(BaseModel):
    invoice_count: int
    revenue: Decimal


class DashboardReport(BaseModel):
    date: date
    appointments: Dict[str, int]
    today: PeriodRevenue
    month: PeriodRevenue
