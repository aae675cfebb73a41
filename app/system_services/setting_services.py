# app/system_services/setting_services.py
"""
System settings provider.

Values live in the system_settings table and are read on every call, so an
admin change applies to the next request without a restart. Known keys fall
back to the configured defaults when no row exists.
"""
import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.helpers.exceptions import NotFoundError, ValidationError
from app.system_models.setting_model.setting_model import SystemSetting
from app.system_models.setting_model.setting_schemas import ClinicSettingsUpdate
from config.appconfig import settings

logger = logging.getLogger(__name__)

MAX_PATIENTS_PER_DAY = "max_patients_per_day"
CONSULTATION_FEE = "consultation_fee"


def default_settings() -> Dict[str, Tuple[str, str]]:
    """key -> (default value, description)"""
    return {
        MAX_PATIENTS_PER_DAY: (
            str(settings.DEFAULT_MAX_PATIENTS_PER_DAY),
            "Maximum number of patients examined per day",
        ),
        CONSULTATION_FEE: (
            str(int(settings.DEFAULT_CONSULTATION_FEE)),
            "Consultation fee charged on every invoice",
        ),
    }


async def _get_row(db: AsyncSession, key: str) -> Optional[SystemSetting]:
    result = await db.execute(select(SystemSetting).where(SystemSetting.setting_key == key))
    return result.scalars().first()


# ============================================================
# ✅ Provider
# ============================================================
async def get_setting_value(db: AsyncSession, key: str) -> Optional[str]:
    row = await _get_row(db, key)
    if row is not None:
        return row.setting_value
    default = default_settings().get(key)
    return default[0] if default else None


async def get_max_patients_per_day(db: AsyncSession) -> int:
    value = await get_setting_value(db, MAX_PATIENTS_PER_DAY)
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Unparseable {MAX_PATIENTS_PER_DAY}={value!r}; using default")
        return settings.DEFAULT_MAX_PATIENTS_PER_DAY


async def get_consultation_fee(db: AsyncSession) -> Decimal:
    value = await get_setting_value(db, CONSULTATION_FEE)
    try:
        return Decimal(value)
    except (TypeError, ArithmeticError):
        logger.warning(f"Unparseable {CONSULTATION_FEE}={value!r}; using default")
        return Decimal(str(settings.DEFAULT_CONSULTATION_FEE))


# ============================================================
# ✅ Admin operations
# ============================================================
async def list_settings(db: AsyncSession) -> List[SystemSetting]:
    result = await db.execute(select(SystemSetting).order_by(SystemSetting.setting_key))
    return list(result.scalars().all())


async def get_setting(db: AsyncSession, key: str) -> SystemSetting:
    row = await _get_row(db, key)
    if row is not None:
        return row
    default = default_settings().get(key)
    if default is None:
        raise NotFoundError("Setting not found")
    return SystemSetting(setting_key=key, setting_value=default[0], description=default[1])


async def _upsert(db: AsyncSession, key: str, value: str, description: Optional[str] = None) -> SystemSetting:
    row = await _get_row(db, key)
    if row is None:
        if description is None and key in default_settings():
            description = default_settings()[key][1]
        row = SystemSetting(setting_key=key, setting_value=value, description=description)
        db.add(row)
    else:
        row.setting_value = value
        if description is not None:
            row.description = description
    return row


def _validate_known(key: str, value: str) -> None:
    if key == MAX_PATIENTS_PER_DAY:
        if not value.isdigit() or not 1 <= int(value) <= 1000:
            raise ValidationError("max_patients_per_day must be an integer between 1 and 1000")
    elif key == CONSULTATION_FEE:
        try:
            fee = Decimal(value)
        except ArithmeticError:
            fee = None
        if fee is None or not fee.is_finite() or fee < 0:
            raise ValidationError("consultation_fee must be a non-negative number")


async def set_setting(
    db: AsyncSession, key: str, value: str, description: Optional[str] = None
) -> SystemSetting:
    _validate_known(key, value)
    row = await _upsert(db, key, value, description)
    await db.commit()
    await db.refresh(row)
    logger.info(f"Setting {key} set to {value}")
    return row


async def update_clinic_settings(db: AsyncSession, data: ClinicSettingsUpdate) -> List[SystemSetting]:
    """Update the workflow settings together; nothing is written if any part fails."""
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("No settings to update")
    try:
        for key, value in changes.items():
            await _upsert(db, key, str(value))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info(f"Clinic settings updated: {changes}")
    return await list_settings(db)


async def reset_settings(db: AsyncSession) -> List[SystemSetting]:
    try:
        for key, (value, description) in default_settings().items():
            await _upsert(db, key, value, description)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Clinic settings reset to defaults")
    return await list_settings(db)
