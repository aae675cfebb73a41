# app/system_services/patient_routes.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.responses import ApiResponse, PageParams, page_params, paginate
from app.system_models.medical_record_model.medical_record_schemas import MedicalRecordDetail
from app.system_models.patient_model.patient_schemas import PatientCreate, PatientResponse, PatientUpdate
from app.system_services.medical_record_services import patient_history
from app.system_services.patient_services import create_patient, get_patient, list_patients, update_patient
from app.users.auth_dependencies import get_clinician, get_current_user, get_front_desk_user

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[List[PatientResponse]],
    response_model_exclude_none=True,
    dependencies=[Depends(get_current_user)],
)
async def list_patients_endpoint(
    search: Optional[str] = None,
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    patients, total = await list_patients(db, params, search)
    return ApiResponse(
        data=[PatientResponse.model_validate(p) for p in patients],
        pagination=paginate(total, params),
    )


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[PatientResponse],
    response_model_exclude_none=True,
    dependencies=[Depends(get_front_desk_user)],
)
async def create_patient_endpoint(patient: PatientCreate, db: AsyncSession = Depends(get_db)):
    """Register a new patient."""
    db_patient = await create_patient(db, patient)
    return ApiResponse(message="Patient created successfully", data=PatientResponse.model_validate(db_patient))


@router.get(
    "/{patient_id}",
    response_model=ApiResponse[PatientResponse],
    response_model_exclude_none=True,
    dependencies=[Depends(get_current_user)],
)
async def get_patient_endpoint(patient_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=PatientResponse.model_validate(await get_patient(db, patient_id)))


@router.put(
    "/{patient_id}",
    response_model=ApiResponse[PatientResponse],
    response_model_exclude_none=True,
    dependencies=[Depends(get_front_desk_user)],
)
async def update_patient_endpoint(patient_id: int, patient: PatientUpdate, db: AsyncSession = Depends(get_db)):
    db_patient = await update_patient(db, patient_id, patient)
    return ApiResponse(message="Patient updated successfully", data=PatientResponse.model_validate(db_patient))


@router.get(
    "/{patient_id}/medical-history",
    response_model=ApiResponse[List[MedicalRecordDetail]],
    response_model_exclude_none=True,
    dependencies=[Depends(get_clinician)],
)
async def patient_history_endpoint(patient_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await patient_history(db, patient_id))
