# app/system_models/unit_model/unit_schemas.py
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class UnitCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=20)


class UnitUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=20)
    is_active: Optional[bool] = None


class UnitResponse(BaseModel):
    id: int
    name: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
