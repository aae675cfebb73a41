# app/system_models/patient_model/patient_schemas.py
from typing import Optional, Literal
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

GENDER = Literal["male", "female"]
PHONE_PATTERN = r"^\d{10,11}$"


def _check_birth_year(v: Optional[int]) -> Optional[int]:
    if v is not None and not 1900 <= v <= date.today().year:
        raise ValueError("Invalid birth year")
    return v


class PatientBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    gender: GENDER
    birth_year: int
    phone_number: str = Field(..., pattern=PHONE_PATTERN)
    address: Optional[str] = None

    @field_validator("full_name", mode="before")
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("birth_year")
    def validate_birth_year(cls, v):
        return _check_birth_year(v)


class PatientCreate(PatientBase):
    pass


class PatientUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    gender: Optional[GENDER] = None
    birth_year: Optional[int] = None
    phone_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = None

    @field_validator("birth_year")
    def validate_birth_year(cls, v):
        return _check_birth_year(v)


class PatientResponse(PatientBase):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
