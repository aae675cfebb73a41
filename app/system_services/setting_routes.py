# app/system_services/setting_routes.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.responses import ApiResponse
from app.system_models.setting_model.setting_schemas import (
    ClinicSettingsUpdate,
    SettingResponse,
    SettingValueUpdate,
)
from app.system_services.setting_services import (
    get_setting,
    list_settings,
    reset_settings,
    set_setting,
    update_clinic_settings,
)
from app.users.auth_dependencies import get_current_admin, get_current_user
from app.users.user_models.user_model import User

router = APIRouter()


def _many(rows) -> List[SettingResponse]:
    return [SettingResponse.model_validate(row) for row in rows]


@router.get("", response_model=ApiResponse[List[SettingResponse]], response_model_exclude_none=True, dependencies=[Depends(get_current_admin)])
async def list_settings_endpoint(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=_many(await list_settings(db)))


@router.put("", response_model=ApiResponse[List[SettingResponse]], response_model_exclude_none=True, dependencies=[Depends(get_current_admin)])
async def update_settings_endpoint(data: ClinicSettingsUpdate, db: AsyncSession = Depends(get_db)):
    rows = await update_clinic_settings(db, data)
    return ApiResponse(message="Settings updated successfully", data=_many(rows))


@router.post("/reset", response_model=ApiResponse[List[SettingResponse]], response_model_exclude_none=True)
async def reset_settings_endpoint(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Reset every known clinic setting to its configured default.
    Admin-only operation.
    """
    rows = await reset_settings(db)
    return ApiResponse(message=f"Settings reset to defaults by {admin.username}", data=_many(rows))


@router.get("/{key}", response_model=ApiResponse[SettingResponse], response_model_exclude_none=True, dependencies=[Depends(get_current_user)])
async def get_setting_endpoint(key: str, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=SettingResponse.model_validate(await get_setting(db, key)))


@router.put("/{key}", response_model=ApiResponse[SettingResponse], response_model_exclude_none=True, dependencies=[Depends(get_current_admin)])
async def set_setting_endpoint(key: str, data: SettingValueUpdate, db: AsyncSession = Depends(get_db)):
    row = await set_setting(db, key, data.value, data.description)
    return ApiResponse(message="Setting updated successfully", data=SettingResponse.model_validate(row))
