# app/system_services/report_routes.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.responses import ApiResponse
from app.system_models.report_model.report_schemas import (
    DashboardReport,
    MedicineUsageReport,
    PatientStatsReport,
    RevenueReport,
)
from app.system_services.report_services import (
    dashboard_report,
    medicine_usage_report,
    patient_stats_report,
    revenue_report,
)
from app.users.auth_dependencies import get_current_admin, get_current_user

router = APIRouter()


@router.get("/revenue", response_model=ApiResponse[RevenueReport], response_model_exclude_none=True, dependencies=[Depends(get_current_admin)])
async def revenue_endpoint(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=3000),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await revenue_report(db, month, year))


@router.get("/medicine-usage", response_model=ApiResponse[MedicineUsageReport], response_model_exclude_none=True, dependencies=[Depends(get_current_admin)])
async def medicine_usage_endpoint(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=3000),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await medicine_usage_report(db, month, year))


@router.get("/patient-stats", response_model=ApiResponse[PatientStatsReport], response_model_exclude_none=True, dependencies=[Depends(get_current_admin)])
async def patient_stats_endpoint(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await patient_stats_report(db, start_date, end_date))


@router.get("/dashboard", response_model=ApiResponse[DashboardReport], response_model_exclude_none=True, dependencies=[Depends(get_current_user)])
async def dashboard_endpoint(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await dashboard_report(db))
