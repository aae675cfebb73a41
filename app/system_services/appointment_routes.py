# app/system_services/appointment_routes.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.responses import ApiResponse
from app.helpers.time import clinic_today
from app.system_models.appointment_model.appointment_schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStats,
    AppointmentStatusUpdate,
    QueueEntry,
)
from app.system_services.appointment_services import (
    appointment_stats,
    dequeue_appointment,
    enqueue_patient,
    list_appointments_for_date,
    set_appointment_status,
)
from app.users.auth_dependencies import get_current_user, get_front_desk_user

router = APIRouter()


@router.get(
    "/daily",
    response_model=ApiResponse[List[QueueEntry]],
    response_model_exclude_none=True,
    dependencies=[Depends(get_current_user)],
)
async def daily_queue_endpoint(date: Optional[date] = None, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await list_appointments_for_date(db, date or clinic_today()))


@router.get(
    "/stats",
    response_model=ApiResponse[AppointmentStats],
    response_model_exclude_none=True,
    dependencies=[Depends(get_current_user)],
)
async def queue_stats_endpoint(date: Optional[date] = None, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await appointment_stats(db, date or clinic_today()))


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[AppointmentResponse],
    response_model_exclude_none=True,
    dependencies=[Depends(get_front_desk_user)],
)
async def enqueue_endpoint(data: AppointmentCreate, db: AsyncSession = Depends(get_db)):
    appointment = await enqueue_patient(db, data.patient_id, data.appointment_date)
    return ApiResponse(
        message="Patient added to queue successfully",
        data=AppointmentResponse.model_validate(appointment),
    )


@router.put(
    "/{appointment_id}/status",
    response_model=ApiResponse[AppointmentResponse],
    response_model_exclude_none=True,
    dependencies=[Depends(get_current_user)],
)
async def set_status_endpoint(
    appointment_id: int, data: AppointmentStatusUpdate, db: AsyncSession = Depends(get_db)
):
    appointment = await set_appointment_status(db, appointment_id, data.status)
    return ApiResponse(
        message="Appointment status updated successfully",
        data=AppointmentResponse.model_validate(appointment),
    )


@router.delete(
    "/{appointment_id}",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
    dependencies=[Depends(get_front_desk_user)],
)
async def dequeue_endpoint(appointment_id: int, db: AsyncSession = Depends(get_db)):
    await dequeue_appointment(db, appointment_id)
    return ApiResponse(message="Patient removed from queue successfully")
