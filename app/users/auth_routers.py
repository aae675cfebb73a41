# app/users/auth_routers.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.responses import ApiResponse
from app.users.auth_dependencies import get_current_user
from app.users.auth_services import login_user, logout_user, update_password
from app.users.user_models.schemas import (
    UserChangePassword,
    UserLogin,
    UserLoginResponse,
    UserResponse,
)
from app.users.user_models.user_model import User

router = APIRouter()


# ============================================================
# ✅ AUTHENTICATE USER (LOGIN)
# ============================================================
@router.post("/login", response_model=ApiResponse[UserLoginResponse], response_model_exclude_none=True)
async def login(user_data: UserLogin, db: AsyncSession = Depends(get_db)):
    access_token, user = await login_user(user_data, db)
    return ApiResponse(
        message="Login successful",
        data=UserLoginResponse(access_token=access_token, user=UserResponse.model_validate(user)),
    )


# ============================================================
# ✅ CURRENT USER
# ============================================================
@router.get("/me", response_model=ApiResponse[UserResponse], response_model_exclude_none=True)
async def me(current_user: User = Depends(get_current_user)):
    return ApiResponse(data=UserResponse.model_validate(current_user))


# ============================================================
# ✅ CHANGE PASSWORD
# ============================================================
@router.post("/change-password", response_model=ApiResponse[None], response_model_exclude_none=True)
async def change_password(
    data: UserChangePassword,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await update_password(current_user, data.current_password, data.new_password, db)
    return ApiResponse(message="Password changed successfully")


# ============================================================
# ✅ LOGOUT USER
# ============================================================
@router.post("/logout", response_model=ApiResponse[None], response_model_exclude_none=True)
async def logout(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await logout_user(current_user, db)
    return ApiResponse(message="Logged out successfully")
