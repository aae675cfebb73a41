# app/system_services/reference_services.py
"""
Reference data used by medical records: medicines, diseases, dosage units and
usage methods. Rows are never physically deleted; "delete" clears is_active so
existing prescriptions keep pointing at them.
"""
import logging
from typing import List, Optional, Tuple, Type

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.db import commit_or_conflict, get_or_404
from app.helpers.exceptions import ConflictError
from app.helpers.responses import PageParams
from app.system_models.disease_model.disease_model import Disease
from app.system_models.disease_model.disease_schemas import DiseaseCreate, DiseaseUpdate
from app.system_models.medicine_model.medicine_model import Medicine
from app.system_models.medicine_model.medicine_schemas import MedicineCreate, MedicineUpdate
from app.system_models.unit_model.unit_model import Unit
from app.system_models.usage_method_model.usage_method_model import UsageMethod

logger = logging.getLogger(__name__)


async def _page(db: AsyncSession, query, order_by, params: PageParams):
    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    result = await db.execute(query.order_by(order_by).offset(params.offset).limit(params.limit))
    return list(result.scalars().all()), total


async def _apply_changes(db: AsyncSession, obj, changes: dict, conflict_message: str):
    for field, value in changes.items():
        setattr(obj, field, value)
    await commit_or_conflict(db, conflict_message)
    await db.refresh(obj)
    return obj


async def _soft_delete(db: AsyncSession, obj) -> None:
    obj.is_active = False
    await db.commit()
    logger.info(f"{type(obj).__name__} {obj.id} deactivated")


# ============================================================
# ✅ Medicines
# ============================================================
MEDICINE_EXISTS = "Medicine with this name and unit already exists"


async def _medicine_exists(db: AsyncSession, name: str, unit: str, exclude_id: Optional[int] = None) -> bool:
    query = select(Medicine.id).where(Medicine.name == name, Medicine.unit == unit)
    if exclude_id is not None:
        query = query.where(Medicine.id != exclude_id)
    return (await db.execute(query)).first() is not None


async def list_medicines(
    db: AsyncSession, params: PageParams, search: Optional[str] = None, active_only: bool = True
) -> Tuple[List[Medicine], int]:
    query = select(Medicine)
    if active_only:
        query = query.where(Medicine.is_active.is_(True))
    if search:
        query = query.where(func.lower(Medicine.name).like(f"%{search.strip().lower()}%"))
    return await _page(db, query, Medicine.name, params)


async def get_medicine(db: AsyncSession, medicine_id: int) -> Medicine:
    return await get_or_404(db, Medicine, medicine_id, "Medicine")


async def create_medicine(db: AsyncSession, data: MedicineCreate) -> Medicine:
    if await _medicine_exists(db, data.name, data.unit):
        raise ConflictError(MEDICINE_EXISTS)
    medicine = Medicine(**data.model_dump())
    db.add(medicine)
    await commit_or_conflict(db, MEDICINE_EXISTS)
    await db.refresh(medicine)
    return medicine


async def update_medicine(db: AsyncSession, medicine_id: int, data: MedicineUpdate) -> Medicine:
    medicine = await get_medicine(db, medicine_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    name = changes.get("name", medicine.name)
    unit = changes.get("unit", medicine.unit)
    if ("name" in changes or "unit" in changes) and await _medicine_exists(db, name, unit, exclude_id=medicine_id):
        raise ConflictError(MEDICINE_EXISTS)
    return await _apply_changes(db, medicine, changes, MEDICINE_EXISTS)


async def delete_medicine(db: AsyncSession, medicine_id: int) -> None:
    await _soft_delete(db, await get_medicine(db, medicine_id))


# ============================================================
# ✅ Named catalogs: diseases, units, usage methods
# ============================================================
async def _name_taken(db: AsyncSession, model: Type, name: str, exclude_id: Optional[int] = None) -> bool:
    query = select(model.id).where(model.name == name)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    return (await db.execute(query)).first() is not None


async def _create_named(db: AsyncSession, model: Type, label: str, values: dict):
    message = f"{label} already exists"
    if await _name_taken(db, model, values["name"]):
        raise ConflictError(message)
    obj = model(**values)
    db.add(obj)
    await commit_or_conflict(db, message)
    await db.refresh(obj)
    return obj


async def _update_named(db: AsyncSession, model: Type, label: str, obj_id: int, changes: dict):
    obj = await get_or_404(db, model, obj_id, label)
    message = f"{label} already exists"
    if "name" in changes and await _name_taken(db, model, changes["name"], exclude_id=obj_id):
        raise ConflictError(message)
    return await _apply_changes(db, obj, changes, message)


async def _list_named(db: AsyncSession, model: Type, active_only: bool) -> List:
    query = select(model)
    if active_only:
        query = query.where(model.is_active.is_(True))
    result = await db.execute(query.order_by(model.name))
    return list(result.scalars().all())


# Diseases
async def list_diseases(
    db: AsyncSession, params: PageParams, search: Optional[str] = None, active_only: bool = True
) -> Tuple[List[Disease], int]:
    query = select(Disease)
    if active_only:
        query = query.where(Disease.is_active.is_(True))
    if search:
        query = query.where(func.lower(Disease.name).like(f"%{search.strip().lower()}%"))
    return await _page(db, query, Disease.name, params)


async def get_disease(db: AsyncSession, disease_id: int) -> Disease:
    return await get_or_404(db, Disease, disease_id, "Disease")


async def create_disease(db: AsyncSession, data: DiseaseCreate) -> Disease:
    return await _create_named(db, Disease, "Disease", data.model_dump())


async def update_disease(db: AsyncSession, disease_id: int, data: DiseaseUpdate) -> Disease:
    changes = data.model_dump(exclude_unset=True)
    changes = {k: v for k, v in changes.items() if v is not None or k == "description"}
    return await _update_named(db, Disease, "Disease", disease_id, changes)


async def delete_disease(db: AsyncSession, disease_id: int) -> None:
    await _soft_delete(db, await get_disease(db, disease_id))


# Units
async def list_units(db: AsyncSession, active_only: bool = True) -> List[Unit]:
    return await _list_named(db, Unit, active_only)


async def create_unit(db: AsyncSession, name: str) -> Unit:
    return await _create_named(db, Unit, "Unit", {"name": name})


async def update_unit(db: AsyncSession, unit_id: int, changes: dict) -> Unit:
    return await _update_named(db, Unit, "Unit", unit_id, changes)


async def delete_unit(db: AsyncSession, unit_id: int) -> None:
    await _soft_delete(db, await get_or_404(db, Unit, unit_id, "Unit"))


# Usage methods
async def list_usage_methods(db: AsyncSession, active_only: bool = True) -> List[UsageMethod]:
    return await _list_named(db, UsageMethod, active_only)


async def create_usage_method(db: AsyncSession, name: str) -> UsageMethod:
    return await _create_named(db, UsageMethod, "Usage method", {"name": name})


async def update_usage_method(db: AsyncSession, usage_method_id: int, changes: dict) -> UsageMethod:
    return await _update_named(db, UsageMethod, "Usage method", usage_method_id, changes)


async def delete_usage_method(db: AsyncSession, usage_method_id: int) -> None:
    await _soft_delete(db, await get_or_404(db, UsageMethod, usage_method_id, "Usage method"))
