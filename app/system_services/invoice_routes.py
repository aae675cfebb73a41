# app/system_services/invoice_routes.py
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import get_db
from app.helpers.responses import ApiResponse, PageParams, page_params, paginate
from app.system_models.invoice_model.invoice_schemas import (
    InvoiceCreate,
    InvoiceDetail,
    InvoiceListResponse,
    InvoiceResponse,
)
from app.system_services.invoice_services import create_invoice, get_invoice, list_invoices, pay_invoice
from app.users.auth_dependencies import get_front_desk_user

router = APIRouter(dependencies=[Depends(get_front_desk_user)])


@router.post("", status_code=201, response_model=ApiResponse[InvoiceResponse], response_model_exclude_none=True)
async def create_invoice_endpoint(data: InvoiceCreate, db: AsyncSession = Depends(get_db)):
    invoice = await create_invoice(db, data)
    return ApiResponse(message="Invoice created successfully", data=InvoiceResponse.model_validate(invoice))


@router.get("", response_model=InvoiceListResponse, response_model_exclude_none=True)
async def list_invoices_endpoint(
    patient_id: Optional[int] = None,
    payment_status: Optional[Literal["pending", "paid"]] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    items, total, summary = await list_invoices(db, params, patient_id, payment_status, start_date, end_date)
    return InvoiceListResponse(data=items, pagination=paginate(total, params), summary=summary)


@router.get("/{invoice_id}", response_model=ApiResponse[InvoiceDetail], response_model_exclude_none=True)
async def get_invoice_endpoint(invoice_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await get_invoice(db, invoice_id))


@router.put("/{invoice_id}/pay", response_model=ApiResponse[InvoiceResponse], response_model_exclude_none=True)
async def pay_invoice_endpoint(invoice_id: int, db: AsyncSession = Depends(get_db)):
    invoice = await pay_invoice(db, invoice_id)
    return ApiResponse(message="Invoice paid successfully", data=InvoiceResponse.model_validate(invoice))
