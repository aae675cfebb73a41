# app/system_models/usage_method_model/usage_method_schemas.py
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class UsageMethodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class UsageMethodUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class UsageMethodResponse(BaseModel):
    id: int
    name: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
