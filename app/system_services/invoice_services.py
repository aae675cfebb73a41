# app/system_services/invoice_services.py
"""
Invoicing and payment.

An invoice can only be raised for an examined appointment, once. Paying it
flips the invoice to "paid" and the appointment to "completed" in a single
transaction.
"""
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.helpers.db import commit_or_conflict, get_or_404
from app.helpers.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from app.helpers.responses import PageParams
from app.helpers.time import clinic_day_start, utcnow
from app.system_models.appointment_model.appointment_model import DailyAppointment
from app.system_models.invoice_model.invoice_model import Invoice
from app.system_models.invoice_model.invoice_schemas import (
    InvoiceCreate,
    InvoiceDetail,
    InvoiceListItem,
    InvoiceResponse,
    InvoiceSummary,
)
from app.system_models.medical_record_model.medical_record_model import MedicalRecord, PrescriptionDetail
from app.system_models.medicine_model.medicine_model import Medicine
from app.system_models.patient_model.patient_model import Patient
from app.system_services.medical_record_services import prescription_lines
from app.system_services.setting_services import get_consultation_fee

logger = logging.getLogger(__name__)

INVOICE_EXISTS = "Invoice already exists for this appointment"


async def medicine_fee_for_record(db: AsyncSession, medical_record_id: int) -> Decimal:
    """Sum of quantity x current unit price over the record's prescription lines."""
    rows = await db.execute(
        select(PrescriptionDetail.quantity, Medicine.price)
        .join(Medicine, PrescriptionDetail.medicine_id == Medicine.id)
        .where(PrescriptionDetail.medical_record_id == medical_record_id)
    )
    return sum((Decimal(price) * quantity for quantity, price in rows.all()), Decimal("0"))


# ============================================================
# ✅ Create Invoice
# ============================================================
async def create_invoice(db: AsyncSession, data: InvoiceCreate) -> Invoice:
    result = await db.execute(
        select(DailyAppointment).where(
            DailyAppointment.id == data.daily_appointment_id,
            DailyAppointment.patient_id == data.patient_id,
        )
    )
    appointment = result.scalars().first()
    if appointment is None:
        raise NotFoundError("Appointment not found")
    if appointment.status != "examined":
        logger.warning(
            f"Invoice refused for appointment {appointment.id} in status {appointment.status}"
        )
        raise InvalidStateError("Patient must be examined before an invoice can be created")

    existing = await db.execute(select(Invoice.id).where(Invoice.daily_appointment_id == appointment.id))
    if existing.first() is not None:
        raise ConflictError(INVOICE_EXISTS)

    record = await db.execute(
        select(MedicalRecord.id).where(
            MedicalRecord.id == data.medical_record_id,
            MedicalRecord.patient_id == data.patient_id,
        )
    )
    if record.first() is None:
        raise NotFoundError("Medical record not found")
    # A manually advanced appointment may carry no record; otherwise bill only the visit's own
    if appointment.medical_record_id is not None and appointment.medical_record_id != data.medical_record_id:
        raise ValidationError(
            "Medical record does not belong to this appointment",
            errors=[{"field": "medical_record_id", "message": f"Expected record {appointment.medical_record_id}"}],
        )

    consultation_fee = await get_consultation_fee(db)
    medicine_fee = await medicine_fee_for_record(db, data.medical_record_id)

    invoice = Invoice(
        patient_id=data.patient_id,
        medical_record_id=data.medical_record_id,
        daily_appointment_id=appointment.id,
        consultation_fee=consultation_fee,
        medicine_fee=medicine_fee,
        total_amount=consultation_fee + medicine_fee,
        payment_status="pending",
    )
    db.add(invoice)
    await commit_or_conflict(db, INVOICE_EXISTS)
    await db.refresh(invoice)

    logger.info(f"Invoice {invoice.id} created for appointment {appointment.id}: total {invoice.total_amount}")
    return invoice


# ============================================================
# ✅ Get Invoice
# ============================================================
async def get_invoice(db: AsyncSession, invoice_id: int) -> InvoiceDetail:
    result = await db.execute(
        select(Invoice)
        .where(Invoice.id == invoice_id)
        .options(
            selectinload(Invoice.patient),
            selectinload(Invoice.medical_record).selectinload(MedicalRecord.disease),
            selectinload(Invoice.medical_record).selectinload(MedicalRecord.doctor),
            selectinload(Invoice.medical_record)
            .selectinload(MedicalRecord.prescriptions)
            .selectinload(PrescriptionDetail.medicine),
            selectinload(Invoice.medical_record)
            .selectinload(MedicalRecord.prescriptions)
            .selectinload(PrescriptionDetail.usage_method),
        )
        .execution_options(populate_existing=True)
    )
    invoice = result.scalars().first()
    if invoice is None:
        raise NotFoundError("Invoice not found")

    record = invoice.medical_record
    return InvoiceDetail(
        id=invoice.id,
        patient_id=invoice.patient_id,
        medical_record_id=invoice.medical_record_id,
        daily_appointment_id=invoice.daily_appointment_id,
        consultation_fee=invoice.consultation_fee,
        medicine_fee=invoice.medicine_fee,
        total_amount=invoice.total_amount,
        payment_status=invoice.payment_status,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
        patient_name=invoice.patient.full_name,
        phone_number=invoice.patient.phone_number,
        address=invoice.patient.address,
        symptoms=record.symptoms,
        diagnosis=record.diagnosis,
        disease_name=record.disease.name if record.disease else None,
        doctor_name=record.doctor.username if record.doctor else None,
        prescriptions=prescription_lines(record),
    )


# ============================================================
# ✅ Pay Invoice
# ============================================================
async def _complete_appointment(db: AsyncSession, appointment_id: int) -> None:
    await db.execute(
        update(DailyAppointment)
        .where(DailyAppointment.id == appointment_id)
        .values(status="completed", updated_at=utcnow())
    )


async def pay_invoice(db: AsyncSession, invoice_id: int) -> Invoice:
    invoice = await get_or_404(db, Invoice, invoice_id, "Invoice")
    if invoice.payment_status == "paid":
        raise InvalidStateError("Invoice already paid")

    try:
        # Only a still-pending invoice is flipped; a concurrent payment sees rowcount 0
        result = await db.execute(
            update(Invoice)
            .where(Invoice.id == invoice_id, Invoice.payment_status == "pending")
            .values(payment_status="paid", updated_at=utcnow())
        )
        if result.rowcount == 0:
            raise InvalidStateError("Invoice already paid")

        await _complete_appointment(db, invoice.daily_appointment_id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(invoice)
    logger.info(f"Invoice {invoice_id} paid; appointment {invoice.daily_appointment_id} completed")
    return invoice


# ============================================================
# ✅ List Invoices
# ============================================================
async def list_invoices(
    db: AsyncSession,
    params: PageParams,
    patient_id: Optional[int] = None,
    payment_status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Tuple[List[InvoiceListItem], int, InvoiceSummary]:
    query = select(Invoice, Patient.full_name, Patient.phone_number).join(Patient, Invoice.patient_id == Patient.id)
    if patient_id is not None:
        query = query.where(Invoice.patient_id == patient_id)
    if payment_status:
        query = query.where(Invoice.payment_status == payment_status)
    # Date filters are clinic-local days, inclusive
    if start_date:
        query = query.where(Invoice.created_at >= clinic_day_start(start_date))
    if end_date:
        query = query.where(Invoice.created_at < clinic_day_start(end_date + timedelta(days=1)))

    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    rows = (await db.execute(
        query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).offset(params.offset).limit(params.limit)
    )).all()

    items = []
    for invoice, full_name, phone_number in rows:
        item = InvoiceResponse.model_validate(invoice).model_dump()
        items.append(InvoiceListItem(**{**item, "patient_name": full_name, "phone_number": phone_number}))

    summary = InvoiceSummary(
        total_invoices=len(items),
        total_revenue=sum((i.total_amount for i in items if i.payment_status == "paid"), Decimal("0")),
        pending_count=sum(1 for i in items if i.payment_status == "pending"),
        paid_count=sum(1 for i in items if i.payment_status == "paid"),
    )
    return items, total, summary
