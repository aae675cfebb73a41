# app/system_services/patient_services.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.db import commit_or_conflict, get_or_404
from app.helpers.exceptions import ConflictError
from app.helpers.responses import PageParams
from app.system_models.patient_model.patient_model import Patient
from app.system_models.patient_model.patient_schemas import PatientCreate, PatientUpdate

logger = logging.getLogger(__name__)

DUPLICATE_PHONE = "Phone number already exists"


async def _phone_taken(db: AsyncSession, phone_number: str, exclude_id: Optional[int] = None) -> bool:
    query = select(Patient.id).where(Patient.phone_number == phone_number)
    if exclude_id is not None:
        query = query.where(Patient.id != exclude_id)
    return (await db.execute(query)).first() is not None


async def list_patients(
    db: AsyncSession, params: PageParams, search: Optional[str] = None
) -> Tuple[List[Patient], int]:
    """Newest first; search matches name or phone, case-insensitively."""
    query = select(Patient)
    if search:
        pattern = f"%{search.strip().lower()}%"
        query = query.where(
            or_(func.lower(Patient.full_name).like(pattern), Patient.phone_number.like(pattern))
        )

    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    result = await db.execute(
        query.order_by(Patient.created_at.desc(), Patient.id.desc()).offset(params.offset).limit(params.limit)
    )
    return list(result.scalars().all()), total


async def get_patient(db: AsyncSession, patient_id: int) -> Patient:
    return await get_or_404(db, Patient, patient_id, "Patient")


async def create_patient(db: AsyncSession, patient: PatientCreate) -> Patient:
    """Create a new patient."""
    if await _phone_taken(db, patient.phone_number):
        raise ConflictError(DUPLICATE_PHONE)

    db_patient = Patient(**patient.model_dump())
    db.add(db_patient)
    await commit_or_conflict(db, DUPLICATE_PHONE)
    await db.refresh(db_patient)
    logger.info(f"Patient {db_patient.id} registered")
    return db_patient


async def update_patient(db: AsyncSession, patient_id: int, data: PatientUpdate) -> Patient:
    db_patient = await get_patient(db, patient_id)
    changes = data.model_dump(exclude_unset=True)
    # Required columns cannot be cleared
    changes = {k: v for k, v in changes.items() if v is not None or k == "address"}

    if "phone_number" in changes and await _phone_taken(db, changes["phone_number"], exclude_id=patient_id):
        raise ConflictError(DUPLICATE_PHONE)

    for field, value in changes.items():
        setattr(db_patient, field, value)
    await commit_or_conflict(db, DUPLICATE_PHONE)
    await db.refresh(db_patient)
    return db_patient
