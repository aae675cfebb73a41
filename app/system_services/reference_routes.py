# app/system_services/reference_routes.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.responses import ApiResponse, PageParams, page_params, paginate
from app.system_models.disease_model.disease_schemas import DiseaseCreate, DiseaseResponse, DiseaseUpdate
from app.system_models.medicine_model.medicine_schemas import MedicineCreate, MedicineResponse, MedicineUpdate
from app.system_models.unit_model.unit_schemas import UnitCreate, UnitResponse, UnitUpdate
from app.system_models.usage_method_model.usage_method_schemas import (
    UsageMethodCreate,
    UsageMethodResponse,
    UsageMethodUpdate,
)
from app.system_services import reference_services as refs
from app.users.auth_dependencies import get_current_admin, get_current_user

medicine_router = APIRouter()
disease_router = APIRouter()
unit_router = APIRouter()
usage_method_router = APIRouter()

READ = [Depends(get_current_user)]
WRITE = [Depends(get_current_admin)]


# ============================================================
# ✅ Medicines
# ============================================================
@medicine_router.get("", response_model=ApiResponse[List[MedicineResponse]], response_model_exclude_none=True, dependencies=READ)
async def list_medicines_endpoint(
    search: Optional[str] = None,
    active_only: bool = True,
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    medicines, total = await refs.list_medicines(db, params, search, active_only)
    return ApiResponse(data=[MedicineResponse.model_validate(m) for m in medicines], pagination=paginate(total, params))


@medicine_router.get("/{medicine_id}", response_model=ApiResponse[MedicineResponse], response_model_exclude_none=True, dependencies=READ)
async def get_medicine_endpoint(medicine_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=MedicineResponse.model_validate(await refs.get_medicine(db, medicine_id)))


@medicine_router.post("", status_code=201, response_model=ApiResponse[MedicineResponse], response_model_exclude_none=True, dependencies=WRITE)
async def create_medicine_endpoint(data: MedicineCreate, db: AsyncSession = Depends(get_db)):
    medicine = await refs.create_medicine(db, data)
    return ApiResponse(message="Medicine created successfully", data=MedicineResponse.model_validate(medicine))


@medicine_router.put("/{medicine_id}", response_model=ApiResponse[MedicineResponse], response_model_exclude_none=True, dependencies=WRITE)
async def update_medicine_endpoint(medicine_id: int, data: MedicineUpdate, db: AsyncSession = Depends(get_db)):
    medicine = await refs.update_medicine(db, medicine_id, data)
    return ApiResponse(message="Medicine updated successfully", data=MedicineResponse.model_validate(medicine))


@medicine_router.delete("/{medicine_id}", response_model=ApiResponse[None], response_model_exclude_none=True, dependencies=WRITE)
async def delete_medicine_endpoint(medicine_id: int, db: AsyncSession = Depends(get_db)):
    await refs.delete_medicine(db, medicine_id)
    return ApiResponse(message="Medicine deleted successfully")


# ============================================================
# ✅ Diseases
# ============================================================
@disease_router.get("", response_model=ApiResponse[List[DiseaseResponse]], response_model_exclude_none=True, dependencies=READ)
async def list_diseases_endpoint(
    search: Optional[str] = None,
    active_only: bool = True,
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    diseases, total = await refs.list_diseases(db, params, search, active_only)
    return ApiResponse(data=[DiseaseResponse.model_validate(d) for d in diseases], pagination=paginate(total, params))


@disease_router.get("/{disease_id}", response_model=ApiResponse[DiseaseResponse], response_model_exclude_none=True, dependencies=READ)
async def get_disease_endpoint(disease_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=DiseaseResponse.model_validate(await refs.get_disease(db, disease_id)))


@disease_router.post("", status_code=201, response_model=ApiResponse[DiseaseResponse], response_model_exclude_none=True, dependencies=WRITE)
async def create_disease_endpoint(data: DiseaseCreate, db: AsyncSession = Depends(get_db)):
    disease = await refs.create_disease(db, data)
    return ApiResponse(message="Disease created successfully", data=DiseaseResponse.model_validate(disease))


@disease_router.put("/{disease_id}", response_model=ApiResponse[DiseaseResponse], response_model_exclude_none=True, dependencies=WRITE)
async def update_disease_endpoint(disease_id: int, data: DiseaseUpdate, db: AsyncSession = Depends(get_db)):
    disease = await refs.update_disease(db, disease_id, data)
    return ApiResponse(message="Disease updated successfully", data=DiseaseResponse.model_validate(disease))


@disease_router.delete("/{disease_id}", response_model=ApiResponse[None], response_model_exclude_none=True, dependencies=WRITE)
async def delete_disease_endpoint(disease_id: int, db: AsyncSession = Depends(get_db)):
    await refs.delete_disease(db, disease_id)
    return ApiResponse(message="Disease deleted successfully")


# ============================================================
# ✅ Units
# ============================================================
@unit_router.get("", response_model=ApiResponse[List[UnitResponse]], response_model_exclude_none=True, dependencies=READ)
async def list_units_endpoint(active_only: bool = True, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=[UnitResponse.model_validate(u) for u in await refs.list_units(db, active_only)])


@unit_router.post("", status_code=201, response_model=ApiResponse[UnitResponse], response_model_exclude_none=True, dependencies=WRITE)
async def create_unit_endpoint(data: UnitCreate, db: AsyncSession = Depends(get_db)):
    unit = await refs.create_unit(db, data.name)
    return ApiResponse(message="Unit created successfully", data=UnitResponse.model_validate(unit))


@unit_router.put("/{unit_id}", response_model=ApiResponse[UnitResponse], response_model_exclude_none=True, dependencies=WRITE)
async def update_unit_endpoint(unit_id: int, data: UnitUpdate, db: AsyncSession = Depends(get_db)):
    unit = await refs.update_unit(db, unit_id, data.model_dump(exclude_unset=True, exclude_none=True))
    return ApiResponse(message="Unit updated successfully", data=UnitResponse.model_validate(unit))


@unit_router.delete("/{unit_id}", response_model=ApiResponse[None], response_model_exclude_none=True, dependencies=WRITE)
async def delete_unit_endpoint(unit_id: int, db: AsyncSession = Depends(get_db)):
    await refs.delete_unit(db, unit_id)
    return ApiResponse(message="Unit deleted successfully")


# ============================================================
# ✅ Usage methods
# ============================================================
@usage_method_router.get("", response_model=ApiResponse[List[UsageMethodResponse]], response_model_exclude_none=True, dependencies=READ)
async def list_usage_methods_endpoint(active_only: bool = True, db: AsyncSession = Depends(get_db)):
    methods = await refs.list_usage_methods(db, active_only)
    return ApiResponse(data=[UsageMethodResponse.model_validate(m) for m in methods])


@usage_method_router.post("", status_code=201, response_model=ApiResponse[UsageMethodResponse], response_model_exclude_none=True, dependencies=WRITE)
async def create_usage_method_endpoint(data: UsageMethodCreate, db: AsyncSession = Depends(get_db)):
    method = await refs.create_usage_method(db, data.name)
    return ApiResponse(message="Usage method created successfully", data=UsageMethodResponse.model_validate(method))


@usage_method_router.put("/{usage_method_id}", response_model=ApiResponse[UsageMethodResponse], response_model_exclude_none=True, dependencies=WRITE)
async def update_usage_method_endpoint(usage_method_id: int, data: UsageMethodUpdate, db: AsyncSession = Depends(get_db)):
    method = await refs.update_usage_method(db, usage_method_id, data.model_dump(exclude_unset=True, exclude_none=True))
    return ApiResponse(message="Usage method updated successfully", data=UsageMethodResponse.model_validate(method))


@usage_method_router.delete("/{usage_method_id}", response_model=ApiResponse[None], response_model_exclude_none=True, dependencies=WRITE)
async def delete_usage_method_endpoint(usage_method_id: int, db: AsyncSession = Depends(get_db)):
    await refs.delete_usage_method(db, usage_method_id)
    return ApiResponse(message="Usage method deleted successfully")
