# app/users/user_routers.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.responses import ApiResponse, PageParams, page_params, paginate
from app.users.auth_dependencies import get_current_admin
from app.users.user_models.schemas import ROLES, UserCreate, UserPasswordReset, UserResponse, UserUpdate
from app.users.user_models.user_model import User
from app.users.user_services import (
    create_user,
    deactivate_user,
    get_user,
    list_users,
    reset_user_password,
    update_user,
)

router = APIRouter(dependencies=[Depends(get_current_admin)])


@router.get("", response_model=ApiResponse[List[UserResponse]], response_model_exclude_none=True)
async def list_users_endpoint(
    role: Optional[ROLES] = None,
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    users, total = await list_users(db, params, role)
    return ApiResponse(data=[UserResponse.model_validate(u) for u in users], pagination=paginate(total, params))


@router.post("", status_code=201, response_model=ApiResponse[UserResponse], response_model_exclude_none=True)
async def create_user_endpoint(data: UserCreate, db: AsyncSession = Depends(get_db)):
    user = await create_user(db, data)
    return ApiResponse(message="User created successfully", data=UserResponse.model_validate(user))


@router.get("/{user_id}", response_model=ApiResponse[UserResponse], response_model_exclude_none=True)
async def get_user_endpoint(user_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=UserResponse.model_validate(await get_user(db, user_id)))


@router.put("/{user_id}", response_model=ApiResponse[UserResponse], response_model_exclude_none=True)
async def update_user_endpoint(user_id: int, data: UserUpdate, db: AsyncSession = Depends(get_db)):
    user = await update_user(db, user_id, data)
    return ApiResponse(message="User updated successfully", data=UserResponse.model_validate(user))


@router.put("/{user_id}/password", response_model=ApiResponse[None], response_model_exclude_none=True)
async def reset_password_endpoint(user_id: int, data: UserPasswordReset, db: AsyncSession = Depends(get_db)):
    await reset_user_password(db, user_id, data.new_password)
    return ApiResponse(message="Password reset successfully")


@router.delete("/{user_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
async def delete_user_endpoint(
    user_id: int,
    current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await deactivate_user(db, user_id, current_admin)
    return ApiResponse(message="User deactivated successfully")
