# app/system_services/appointment_services.py
"""
Daily appointment queue.

A visit moves waiting -> examined (a medical record was written) -> completed
(its invoice was paid). The first two hops are driven by the medical record
and invoice services; set_appointment_status is the manual override.
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.db import commit_or_conflict, get_or_404
from app.helpers.exceptions import (
    CapacityExceededError,
    ConflictError,
    InvalidStateError,
    ValidationError,
)
from app.helpers.time import clinic_today, month_bounds
from app.system_models.appointment_model.appointment_model import APPOINTMENT_STATUSES, DailyAppointment
from app.system_models.appointment_model.appointment_schemas import (
    AppointmentStats,
    DayStats,
    MonthStats,
    QueueEntry,
)
from app.system_models.disease_model.disease_model import Disease
from app.system_models.medical_record_model.medical_record_model import MedicalRecord
from app.system_models.patient_model.patient_model import Patient
from app.system_services.setting_services import get_max_patients_per_day
from app.users.user_models.user_model import User
from config.appconfig import settings

logger = logging.getLogger(__name__)

ALREADY_QUEUED = "Patient already has an appointment for this date"


# ============================================================
# ✅ Enqueue
# ============================================================
async def enqueue_patient(
    db: AsyncSession, patient_id: int, appointment_date: Optional[date] = None
) -> DailyAppointment:
    appointment_date = appointment_date or clinic_today()
    await get_or_404(db, Patient, patient_id, "Patient")

    existing = await db.execute(
        select(DailyAppointment.id).where(
            DailyAppointment.patient_id == patient_id,
            DailyAppointment.appointment_date == appointment_date,
        )
    )
    if existing.first() is not None:
        raise ConflictError(ALREADY_QUEUED)

    max_patients = await get_max_patients_per_day(db)
    queued = await db.scalar(
        select(func.count(DailyAppointment.id)).where(DailyAppointment.appointment_date == appointment_date)
    )
    if queued >= max_patients:
        logger.warning(f"Queue for {appointment_date} is full ({queued}/{max_patients})")
        raise CapacityExceededError(f"Maximum {max_patients} patients per day reached")

    appointment = DailyAppointment(patient_id=patient_id, appointment_date=appointment_date, status="waiting")
    db.add(appointment)
    await commit_or_conflict(db, ALREADY_QUEUED)
    await db.refresh(appointment)

    logger.info(f"Patient {patient_id} queued for {appointment_date} (appointment {appointment.id})")
    return appointment


# ============================================================
# ✅ Dequeue
# ============================================================
async def dequeue_appointment(db: AsyncSession, appointment_id: int) -> None:
    appointment = await get_or_404(db, DailyAppointment, appointment_id, "Appointment")
    if appointment.status != "waiting":
        raise InvalidStateError("Only waiting appointments can be removed")

    await db.delete(appointment)
    await db.commit()
    logger.info(f"Appointment {appointment_id} removed from queue")


# ============================================================
# ✅ Manual status override
# ============================================================
async def set_appointment_status(db: AsyncSession, appointment_id: int, new_status: str) -> DailyAppointment:
    if new_status not in APPOINTMENT_STATUSES:
        raise ValidationError(
            "Invalid status",
            errors=[{"field": "status", "message": f"must be one of {', '.join(APPOINTMENT_STATUSES)}"}],
        )

    appointment = await get_or_404(db, DailyAppointment, appointment_id, "Appointment")
    current = appointment.status
    if APPOINTMENT_STATUSES.index(new_status) < APPOINTMENT_STATUSES.index(current):
        logger.warning(f"Appointment {appointment_id} moved backwards: {current} -> {new_status}")
        if settings.ENFORCE_FORWARD_STATUS_TRANSITIONS:
            raise InvalidStateError(f"Cannot change status from {current} to {new_status}")

    appointment.status = new_status
    await db.commit()
    await db.refresh(appointment)
    return appointment


# ============================================================
# ✅ Daily queue
# ============================================================
async def list_appointments_for_date(db: AsyncSession, appointment_date: date) -> List[QueueEntry]:
    query = (
        select(
            DailyAppointment,
            Patient.full_name,
            Patient.gender,
            Patient.birth_year,
            Patient.phone_number,
            MedicalRecord.symptoms,
            MedicalRecord.diagnosis,
            Disease.name.label("disease_name"),
            User.username.label("doctor_name"),
        )
        .join(Patient, DailyAppointment.patient_id == Patient.id)
        .outerjoin(MedicalRecord, DailyAppointment.medical_record_id == MedicalRecord.id)
        .outerjoin(Disease, MedicalRecord.disease_id == Disease.id)
        .outerjoin(User, MedicalRecord.doctor_id == User.id)
        .where(DailyAppointment.appointment_date == appointment_date)
        .order_by(DailyAppointment.created_at.asc(), DailyAppointment.id.asc())
    )
    rows = (await db.execute(query)).all()

    entries = []
    for row in rows:
        appointment = row[0]
        entries.append(QueueEntry(
            id=appointment.id,
            patient_id=appointment.patient_id,
            appointment_date=appointment.appointment_date,
            status=appointment.status,
            medical_record_id=appointment.medical_record_id,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
            full_name=row.full_name,
            gender=row.gender,
            birth_year=row.birth_year,
            phone_number=row.phone_number,
            symptoms=row.symptoms,
            diagnosis=row.diagnosis,
            disease_name=row.disease_name,
            doctor_name=row.doctor_name,
        ))
    return entries


# ============================================================
# ✅ Queue stats
# ============================================================
async def appointment_stats(db: AsyncSession, stats_date: date) -> AppointmentStats:
    day = await db.execute(
        select(DailyAppointment.status, func.count(DailyAppointment.id))
        .where(DailyAppointment.appointment_date == stats_date)
        .group_by(DailyAppointment.status)
    )
    counts = dict(day.all())

    start, end = month_bounds(stats_date.month, stats_date.year)
    month = (await db.execute(
        select(
            func.count(DailyAppointment.id),
            func.coalesce(func.sum(case((DailyAppointment.status == "completed", 1), else_=0)), 0),
        ).where(DailyAppointment.appointment_date >= start, DailyAppointment.appointment_date < end)
    )).one()

    return AppointmentStats(
        date=stats_date,
        today=DayStats(
            total=sum(counts.values()),
            waiting=counts.get("waiting", 0),
            examined=counts.get("examined", 0),
            completed=counts.get("completed", 0),
        ),
        month=MonthStats(total=month[0], completed=month[1]),
    )
