# app/system_models/setting_model/setting_schemas.py
from typing import Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


class SettingResponse(BaseModel):
    setting_key: str
    setting_value: str
    description: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ClinicSettingsUpdate(BaseModel):
    max_patients_per_day: Optional[int] = Field(None, ge=1, le=1000)
    consultation_fee: Optional[Decimal] = Field(None, ge=0)


class SettingValueUpdate(BaseModel):
    value: str = Field(..., min_length=1)
    description: Optional[str] = None
