# app/system_services/report_services.py
"""
Read-only reporting over invoices, prescriptions and the appointment queue.

Revenue only counts paid invoices. Timestamps are stored in UTC; days and
months are clinic-local, so period filters compare created_at against the
UTC instants where the clinic's days begin.
"""
from collections import Counter
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.time import clinic_date, clinic_day_start, clinic_today, month_bounds
from app.system_models.appointment_model.appointment_model import APPOINTMENT_STATUSES, DailyAppointment
from app.system_models.invoice_model.invoice_model import Invoice
from app.system_models.medical_record_model.medical_record_model import MedicalRecord, PrescriptionDetail
from app.system_models.medicine_model.medicine_model import Medicine
from app.system_models.patient_model.patient_model import Patient
from app.system_models.report_model.report_schemas import (
    DailyRevenue,
    DashboardReport,
    MedicineUsageReport,
    MedicineUsageRow,
    MedicineUsageSummary,
    PatientStatsReport,
    PeriodRevenue,
    RevenueReport,
    RevenueSummary,
)

AGE_GROUPS = ("Under 18", "18-30", "31-50", "51-70", "Over 70")
CENTS = Decimal("0.01")
ZERO = Decimal("0")


def _money(value) -> Decimal:
    return Decimal(value if value is not None else 0).quantize(CENTS, rounding=ROUND_HALF_UP)


def age_group(birth_year: int, today: date) -> str:
    age = today.year - birth_year
    if age < 18:
        return "Under 18"
    if age <= 30:
        return "18-30"
    if age <= 50:
        return "31-50"
    if age <= 70:
        return "51-70"
    return "Over 70"


# ============================================================
# ✅ Revenue
# ============================================================
async def revenue_report(db: AsyncSession, month: int, year: int) -> RevenueReport:
    start, end = month_bounds(month, year)
    rows = (await db.execute(
        select(Invoice.created_at, Invoice.consultation_fee, Invoice.medicine_fee, Invoice.total_amount)
        .where(
            Invoice.payment_status == "paid",
            Invoice.created_at >= clinic_day_start(start),
            Invoice.created_at < clinic_day_start(end),
        )
    )).all()

    # Grouped here rather than in SQL: the day boundary is the clinic's, not UTC's
    per_day = {}
    for created_at, consultation_fee, medicine_fee, total_amount in rows:
        day = clinic_date(created_at)
        count, consultation, medicine, total = per_day.get(day, (0, ZERO, ZERO, ZERO))
        per_day[day] = (
            count + 1,
            consultation + Decimal(consultation_fee),
            medicine + Decimal(medicine_fee),
            total + Decimal(total_amount),
        )

    daily = [
        DailyRevenue(
            date=day,
            patient_count=count,
            consultation_revenue=_money(consultation),
            medicine_revenue=_money(medicine),
            total_revenue=_money(total),
        )
        for day, (count, consultation, medicine, total) in sorted(per_day.items())
    ]

    total_patients = sum(d.patient_count for d in daily)
    total_revenue = sum((d.total_revenue for d in daily), ZERO)
    summary = RevenueSummary(
        total_patients=total_patients,
        total_consultation_revenue=sum((d.consultation_revenue for d in daily), ZERO),
        total_medicine_revenue=sum((d.medicine_revenue for d in daily), ZERO),
        total_revenue=total_revenue,
        average_revenue_per_patient=_money(total_revenue / total_patients) if total_patients else _money(0),
    )
    return RevenueReport(month=month, year=year, daily=daily, summary=summary)


# ============================================================
# ✅ Medicine usage
# ============================================================
async def medicine_usage_report(db: AsyncSession, month: int, year: int) -> MedicineUsageReport:
    start, end = month_bounds(month, year)
    in_month = (
        MedicalRecord.created_at >= clinic_day_start(start),
        MedicalRecord.created_at < clinic_day_start(end),
    )

    total_quantity = func.sum(PrescriptionDetail.quantity)
    rows = (await db.execute(
        select(
            Medicine.id,
            Medicine.name,
            Medicine.unit,
            total_quantity,
            func.count(distinct(PrescriptionDetail.medical_record_id)),
            func.sum(PrescriptionDetail.quantity * Medicine.price),
        )
        .join(Medicine, PrescriptionDetail.medicine_id == Medicine.id)
        .join(MedicalRecord, PrescriptionDetail.medical_record_id == MedicalRecord.id)
        .where(*in_month)
        .group_by(Medicine.id, Medicine.name, Medicine.unit)
        .order_by(total_quantity.desc(), Medicine.name)
    )).all()

    medicines = [
        MedicineUsageRow(
            medicine_id=row[0],
            medicine_name=row[1],
            unit=row[2],
            total_quantity=row[3],
            prescription_count=row[4],
            average_quantity=_money(Decimal(row[3]) / row[4]),
            total_value=_money(row[5]),
        )
        for row in rows
    ]

    total_prescriptions = await db.scalar(
        select(func.count(distinct(PrescriptionDetail.medical_record_id)))
        .join(MedicalRecord, PrescriptionDetail.medical_record_id == MedicalRecord.id)
        .where(*in_month)
    )
    summary = MedicineUsageSummary(
        unique_medicines=len(medicines),
        total_quantity=sum(m.total_quantity for m in medicines),
        total_prescriptions=total_prescriptions or 0,
        total_value=sum((m.total_value for m in medicines), ZERO),
    )
    return MedicineUsageReport(month=month, year=year, medicines=medicines, summary=summary)


# ============================================================
# ✅ Patient statistics
# ============================================================
async def patient_stats_report(
    db: AsyncSession, start_date: Optional[date] = None, end_date: Optional[date] = None
) -> PatientStatsReport:
    query = select(
        DailyAppointment.status, Patient.id, Patient.gender, Patient.birth_year
    ).join(Patient, DailyAppointment.patient_id == Patient.id)
    if start_date:
        query = query.where(DailyAppointment.appointment_date >= start_date)
    if end_date:
        query = query.where(DailyAppointment.appointment_date <= end_date)
    rows = (await db.execute(query)).all()

    statuses = Counter(row[0] for row in rows)
    patients = {row[1]: (row[2], row[3]) for row in rows}
    genders = Counter(gender for gender, _ in patients.values())

    today = clinic_today()
    ages = Counter(age_group(birth_year, today) for _, birth_year in patients.values())

    return PatientStatsReport(
        total_appointments=len(rows),
        waiting=statuses.get("waiting", 0),
        examined=statuses.get("examined", 0),
        completed=statuses.get("completed", 0),
        unique_patients=len(patients),
        male_count=genders.get("male", 0),
        female_count=genders.get("female", 0),
        age_groups={group: ages.get(group, 0) for group in AGE_GROUPS},
    )


# ============================================================
# ✅ Dashboard
# ============================================================
async def _paid_revenue(db: AsyncSession, start: date, end: date) -> PeriodRevenue:
    count, revenue = (await db.execute(
        select(func.count(Invoice.id), func.sum(Invoice.total_amount))
        .where(
            Invoice.payment_status == "paid",
            Invoice.created_at >= clinic_day_start(start),
            Invoice.created_at < clinic_day_start(end),
        )
    )).one()
    return PeriodRevenue(invoice_count=count, revenue=_money(revenue))


async def dashboard_report(db: AsyncSession) -> DashboardReport:
    today = clinic_today()
    counts = dict((await db.execute(
        select(DailyAppointment.status, func.count(DailyAppointment.id))
        .where(DailyAppointment.appointment_date == today)
        .group_by(DailyAppointment.status)
    )).all())
    appointments = {status: counts.get(status, 0) for status in APPOINTMENT_STATUSES}
    appointments["total"] = sum(appointments.values())

    month_start, month_end = month_bounds(today.month, today.year)
    return DashboardReport(
        date=today,
        appointments=appointments,
        today=await _paid_revenue(db, today, today + timedelta(days=1)),
        month=await _paid_revenue(db, month_start, month_end),
    )
