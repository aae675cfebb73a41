# app/system_services/medical_record_services.py
import logging
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.helpers.db import get_or_404
from app.helpers.exceptions import NotFoundError, ValidationError
from app.helpers.responses import PageParams
from app.helpers.time import clinic_today
from app.system_models.appointment_model.appointment_model import DailyAppointment
from app.system_models.disease_model.disease_model import Disease
from app.system_models.medical_record_model.medical_record_model import MedicalRecord, PrescriptionDetail
from app.system_models.medical_record_model.medical_record_schemas import (
    MedicalRecordCreate,
    MedicalRecordDetail,
    PrescriptionLine,
)
from app.system_models.medicine_model.medicine_model import Medicine
from app.system_models.patient_model.patient_model import Patient
from app.system_models.usage_method_model.usage_method_model import UsageMethod

logger = logging.getLogger(__name__)

_DETAIL_OPTIONS = (
    selectinload(MedicalRecord.patient),
    selectinload(MedicalRecord.doctor),
    selectinload(MedicalRecord.disease),
    selectinload(MedicalRecord.prescriptions).selectinload(PrescriptionDetail.medicine),
    selectinload(MedicalRecord.prescriptions).selectinload(PrescriptionDetail.usage_method),
)


def prescription_lines(record: MedicalRecord) -> List[PrescriptionLine]:
    return [
        PrescriptionLine(
            id=line.id,
            medicine_id=line.medicine_id,
            medicine_name=line.medicine.name,
            unit=line.medicine.unit,
            price=line.medicine.price,
            usage_method_id=line.usage_method_id,
            usage_method_name=line.usage_method.name,
            quantity=line.quantity,
            total_price=Decimal(line.medicine.price) * line.quantity,
        )
        for line in record.prescriptions
    ]


def to_detail(record: MedicalRecord) -> MedicalRecordDetail:
    return MedicalRecordDetail(
        id=record.id,
        patient_id=record.patient_id,
        patient_name=record.patient.full_name,
        phone_number=record.patient.phone_number,
        doctor_id=record.doctor_id,
        doctor_name=record.doctor.username if record.doctor else None,
        symptoms=record.symptoms,
        disease_id=record.disease_id,
        disease_name=record.disease.name if record.disease else None,
        diagnosis=record.diagnosis,
        status=record.status,
        created_at=record.created_at,
        updated_at=record.updated_at,
        prescriptions=prescription_lines(record),
    )


async def _require_active(db: AsyncSession, model, obj_id: int, label: str):
    obj = await db.get(model, obj_id)
    if obj is None or not obj.is_active:
        raise ValidationError(
            f"{label} {obj_id} does not exist or is inactive",
            errors=[{"field": f"{label.lower().replace(' ', '_')}_id", "message": f"{label} {obj_id} is not available"}],
        )
    return obj


# ============================================================
# ✅ Create Medical Record
# ============================================================
async def create_medical_record(
    db: AsyncSession, data: MedicalRecordCreate, doctor_id: int
) -> MedicalRecordDetail:
    """
    Write a record with its prescription lines and advance the patient's
    waiting appointment for today to "examined". All or nothing.
    """
    await get_or_404(db, Patient, data.patient_id, "Patient")

    if data.disease_id is not None:
        await _require_active(db, Disease, data.disease_id, "Disease")
    for item in data.prescriptions:
        await _require_active(db, Medicine, item.medicine_id, "Medicine")
        await _require_active(db, UsageMethod, item.usage_method_id, "Usage method")

    diagnosis = data.diagnosis.strip() if data.diagnosis else None
    status = "completed" if diagnosis else "pending"

    try:
        record = MedicalRecord(
            patient_id=data.patient_id,
            doctor_id=doctor_id,
            symptoms=data.symptoms,
            disease_id=data.disease_id,
            diagnosis=diagnosis or None,
            status=status,
        )
        record.prescriptions = [
            PrescriptionDetail(
                medicine_id=item.medicine_id,
                usage_method_id=item.usage_method_id,
                quantity=item.quantity,
            )
            for item in data.prescriptions
        ]
        db.add(record)
        await db.flush()

        waiting = await db.execute(
            select(DailyAppointment).where(
                DailyAppointment.patient_id == data.patient_id,
                DailyAppointment.appointment_date == clinic_today(),
                DailyAppointment.status == "waiting",
            )
        )
        appointment = waiting.scalars().first()
        if appointment is not None:
            appointment.status = "examined"
            appointment.medical_record_id = record.id

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    if appointment is not None:
        logger.info(f"Medical record {record.id} created; appointment {appointment.id} examined")
    else:
        logger.info(f"Medical record {record.id} created for patient {data.patient_id} without a waiting appointment")
    return await get_medical_record(db, record.id)


# ============================================================
# ✅ Read
# ============================================================
async def get_medical_record(db: AsyncSession, record_id: int) -> MedicalRecordDetail:
    result = await db.execute(
        select(MedicalRecord)
        .where(MedicalRecord.id == record_id)
        .options(*_DETAIL_OPTIONS)
        .execution_options(populate_existing=True)
    )
    record = result.scalars().first()
    if record is None:
        raise NotFoundError("Medical record not found")
    return to_detail(record)


async def _list_records(db: AsyncSession, query, params: PageParams = None) -> Tuple[List[MedicalRecordDetail], int]:
    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    query = query.options(*_DETAIL_OPTIONS).order_by(MedicalRecord.created_at.desc(), MedicalRecord.id.desc())
    if params is not None:
        query = query.offset(params.offset).limit(params.limit)
    result = await db.execute(query.execution_options(populate_existing=True))
    return [to_detail(record) for record in result.scalars().all()], total


async def list_patient_records(
    db: AsyncSession, patient_id: int, params: PageParams
) -> Tuple[List[MedicalRecordDetail], int]:
    await get_or_404(db, Patient, patient_id, "Patient")
    return await _list_records(db, select(MedicalRecord).where(MedicalRecord.patient_id == patient_id), params)


async def list_medical_records(db: AsyncSession, params: PageParams) -> Tuple[List[MedicalRecordDetail], int]:
    return await _list_records(db, select(MedicalRecord), params)


async def patient_history(db: AsyncSession, patient_id: int) -> List[MedicalRecordDetail]:
    await get_or_404(db, Patient, patient_id, "Patient")
    records, _ = await _list_records(db, select(MedicalRecord).where(MedicalRecord.patient_id == patient_id))
    return records
