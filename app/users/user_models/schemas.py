# app/users/user_models/schemas.py


from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Allowed values as constants
ROLES = Literal["admin", "receptionist", "doctor"]
USERNAME_PATTERN = r"^[A-Za-z0-9_.]+$"


# ✅ Request schema for creating a staff account (admin only)
class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=6, max_length=100)
    role: ROLES

    @field_validator("username", mode="before")
    def normalize_username(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    role: Optional[ROLES] = None
    is_active: Optional[bool] = None


# ✅ Response schema for user info
class UserResponse(BaseModel):
    id: int
    username: str
    role: ROLES
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# ✅ User login request
class UserLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# ✅ Response schema for user login
class UserLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# ✅ Request schema for change password (authenticated)
class UserChangePassword(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6, max_length=100)


# ✅ Request schema for an admin resetting someone's password
class UserPasswordReset(BaseModel):
    new_password: str = Field(..., min_length=6, max_length=100)
