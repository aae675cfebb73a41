# app/system_services/medical_record_routes.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.responses import ApiResponse, PageParams, page_params, paginate
from app.system_models.medical_record_model.medical_record_schemas import MedicalRecordCreate, MedicalRecordDetail
from app.system_services.medical_record_services import (
    create_medical_record,
    get_medical_record,
    list_medical_records,
    list_patient_records,
)
from app.users.auth_dependencies import get_clinician, get_current_admin
from app.users.user_models.user_model import User

router = APIRouter()


@router.post("", status_code=201, response_model=ApiResponse[MedicalRecordDetail], response_model_exclude_none=True)
async def create_record_endpoint(
    data: MedicalRecordCreate,
    current_user: User = Depends(get_clinician),
    db: AsyncSession = Depends(get_db),
):
    record = await create_medical_record(db, data, doctor_id=current_user.id)
    return ApiResponse(message="Medical record created successfully", data=record)


@router.get(
    "",
    response_model=ApiResponse[List[MedicalRecordDetail]],
    response_model_exclude_none=True,
    dependencies=[Depends(get_current_admin)],
)
async def list_records_endpoint(params: PageParams = Depends(page_params), db: AsyncSession = Depends(get_db)):
    records, total = await list_medical_records(db, params)
    return ApiResponse(data=records, pagination=paginate(total, params))


@router.get(
    "/patient/{patient_id}",
    response_model=ApiResponse[List[MedicalRecordDetail]],
    response_model_exclude_none=True,
    dependencies=[Depends(get_clinician)],
)
async def patient_records_endpoint(
    patient_id: int, params: PageParams = Depends(page_params), db: AsyncSession = Depends(get_db)
):
    records, total = await list_patient_records(db, patient_id, params)
    return ApiResponse(data=records, pagination=paginate(total, params))


@router.get(
    "/{record_id}",
    response_model=ApiResponse[MedicalRecordDetail],
    response_model_exclude_none=True,
    dependencies=[Depends(get_clinician)],
)
async def get_record_endpoint(record_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await get_medical_record(db, record_id))
