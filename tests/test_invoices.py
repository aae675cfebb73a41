# tests/test_invoices.py
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.helpers.db import commit_or_conflict
from app.helpers.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from app.helpers.responses import PageParams
from app.model_registry import DailyAppointment, Invoice, SystemSetting
from app.system_models.invoice_model.invoice_schemas import InvoiceCreate
from app.system_models.medical_record_model.medical_record_schemas import MedicalRecordCreate
from app.system_services import invoice_services
from app.system_services.appointment_services import enqueue_patient
from app.system_services.invoice_services import create_invoice, get_invoice, list_invoices, pay_invoice
from app.system_services.medical_record_services import create_medical_record


@pytest.fixture
async def examined(db, staff, patient, catalog, visit_day):
    """An examined visit: appointment plus a record with 2 paracetamol and 1 amoxicillin."""
    appointment = await enqueue_patient(db, patient.id, visit_day)
    record = await create_medical_record(
        db,
        MedicalRecordCreate(
            patient_id=patient.id,
            symptoms="fever",
            diagnosis="flu",
            prescriptions=[
                {"medicine_id": catalog["paracetamol"].id, "usage_method_id": catalog["after_meals"].id, "quantity": 2},
                {"medicine_id": catalog["amoxicillin"].id, "usage_method_id": catalog["after_meals"].id, "quantity": 1},
            ],
        ),
        doctor_id=staff["doctor"].id,
    )
    await db.refresh(appointment)
    return appointment, record


def _payload(appointment, record):
    return InvoiceCreate(
        patient_id=appointment.patient_id,
        medical_record_id=record.id,
        daily_appointment_id=appointment.id,
    )


async def test_invoice_for_waiting_appointment_is_invalid(db, patient, visit_day):
    appointment = await enqueue_patient(db, patient.id, visit_day)

    with pytest.raises(InvalidStateError):
        await create_invoice(
            db, InvoiceCreate(patient_id=patient.id, medical_record_id=1, daily_appointment_id=appointment.id)
        )


async def test_invoice_total_is_fee_plus_medicines(db, examined):
    appointment, record = examined

    invoice = await create_invoice(db, _payload(appointment, record))

    assert invoice.payment_status == "pending"
    assert invoice.consultation_fee == Decimal("100000")
    assert invoice.medicine_fee == Decimal("9000")  # 2 x 2000 + 1 x 5000
    assert invoice.total_amount == Decimal("109000")


async def test_invoice_uses_current_consultation_fee(db, examined):
    db.add(SystemSetting(setting_key="consultation_fee", setting_value="150000"))
    await db.commit()
    appointment, record = examined

    invoice = await create_invoice(db, _payload(appointment, record))

    assert invoice.consultation_fee == Decimal("150000")
    assert invoice.total_amount == Decimal("159000")


async def test_second_invoice_for_appointment_conflicts(db, examined):
    appointment, record = examined
    await create_invoice(db, _payload(appointment, record))

    with pytest.raises(ConflictError):
        await create_invoice(db, _payload(appointment, record))


async def test_invoice_requires_matching_appointment_and_record(db, examined):
    appointment, record = examined

    with pytest.raises(NotFoundError):
        await create_invoice(
            db,
            InvoiceCreate(patient_id=appointment.patient_id + 1, medical_record_id=record.id,
                          daily_appointment_id=appointment.id),
        )
    with pytest.raises(NotFoundError):
        await create_invoice(
            db,
            InvoiceCreate(patient_id=appointment.patient_id, medical_record_id=record.id + 50,
                          daily_appointment_id=appointment.id),
        )


async def test_pay_flips_invoice_and_appointment(db, examined):
    appointment, record = examined
    invoice = await create_invoice(db, _payload(appointment, record))

    paid = await pay_invoice(db, invoice.id)

    assert paid.payment_status == "paid"
    await db.refresh(appointment)
    assert appointment.status == "completed"


async def test_paying_twice_is_invalid_and_changes_nothing(db, examined):
    appointment, record = examined
    invoice = await create_invoice(db, _payload(appointment, record))
    await pay_invoice(db, invoice.id)

    with pytest.raises(InvalidStateError):
        await pay_invoice(db, invoice.id)

    await db.refresh(invoice)
    await db.refresh(appointment)
    assert invoice.payment_status == "paid"
    assert appointment.status == "completed"


async def test_pay_rolls_back_when_appointment_update_fails(db, session_factory, examined, monkeypatch):
    appointment, record = examined
    invoice = await create_invoice(db, _payload(appointment, record))
    # Rollback expires everything loaded in this session
    invoice_id, appointment_id = invoice.id, appointment.id

    async def broken(db, appointment_id):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(invoice_services, "_complete_appointment", broken)

    with pytest.raises(RuntimeError):
        await pay_invoice(db, invoice_id)

    async with session_factory() as fresh:
        assert (await fresh.get(Invoice, invoice_id)).payment_status == "pending"
        assert (await fresh.get(DailyAppointment, appointment_id)).status == "examined"


async def test_concurrent_payment_loses_and_changes_nothing(db, session_factory, examined):
    appointment, record = examined
    invoice = await create_invoice(db, _payload(appointment, record))
    invoice_id, appointment_id = invoice.id, appointment.id

    # Another desk pays first; this session still holds the pending copy
    async with session_factory() as other:
        await pay_invoice(other, invoice_id)
    assert invoice.payment_status == "pending"

    with pytest.raises(InvalidStateError):
        await pay_invoice(db, invoice_id)

    async with session_factory() as fresh:
        assert (await fresh.get(Invoice, invoice_id)).payment_status == "paid"
        assert (await fresh.get(DailyAppointment, appointment_id)).status == "completed"


async def test_racing_duplicate_invoice_maps_to_conflict(db, examined):
    appointment, record = examined
    await create_invoice(db, _payload(appointment, record))

    # Same appointment inserted past the existence check, as a racing writer would
    db.add(Invoice(
        patient_id=appointment.patient_id,
        medical_record_id=record.id,
        daily_appointment_id=appointment.id,
        consultation_fee=Decimal("100000"),
        total_amount=Decimal("100000"),
    ))
    with pytest.raises(ConflictError):
        await commit_or_conflict(db, invoice_services.INVOICE_EXISTS)

    assert await db.scalar(select(func.count()).select_from(Invoice)) == 1


async def test_invoice_must_bill_the_appointments_own_record(db, staff, patient, catalog, examined):
    appointment, record = examined
    # A later record for the same patient, not linked to this visit
    other = await create_medical_record(
        db,
        MedicalRecordCreate(
            patient_id=patient.id,
            symptoms="follow-up",
            prescriptions=[
                {"medicine_id": catalog["amoxicillin"].id, "usage_method_id": catalog["after_meals"].id, "quantity": 5},
            ],
        ),
        doctor_id=staff["doctor"].id,
    )

    with pytest.raises(ValidationError):
        await create_invoice(
            db,
            InvoiceCreate(patient_id=patient.id, medical_record_id=other.id, daily_appointment_id=appointment.id),
        )

    invoice = await create_invoice(db, _payload(appointment, record))
    assert invoice.medical_record_id == record.id


async def test_pay_missing_invoice(db):
    with pytest.raises(NotFoundError):
        await pay_invoice(db, 404)


async def test_get_invoice_detail(db, examined):
    appointment, record = examined
    invoice = await create_invoice(db, _payload(appointment, record))

    detail = await get_invoice(db, invoice.id)

    assert detail.patient_name == "Nguyen Van A"
    assert detail.diagnosis == "flu"
    assert detail.doctor_name == "doctor"
    assert sum(line.total_price for line in detail.prescriptions) == detail.medicine_fee


async def test_list_invoices_filters_and_summary(db, examined):
    appointment, record = examined
    invoice = await create_invoice(db, _payload(appointment, record))

    items, total, summary = await list_invoices(db, PageParams(), payment_status="pending")
    assert total == 1
    assert items[0].patient_name == "Nguyen Van A"
    assert summary.pending_count == 1
    assert summary.total_revenue == 0

    await pay_invoice(db, invoice.id)
    items, total, summary = await list_invoices(db, PageParams(), patient_id=appointment.patient_id)
    assert summary.paid_count == 1
    assert summary.total_revenue == Decimal("109000")

    _, total, _ = await list_invoices(db, PageParams(), payment_status="pending")
    assert total == 0


async def test_invoice_endpoints(client, tokens, examined):
    appointment, record = examined
    body = _payload(appointment, record).model_dump()

    resp = await client.post("/api/invoices", json=body, headers=tokens["doctor"])
    assert resp.status_code == 403

    resp = await client.post("/api/invoices", json=body, headers=tokens["receptionist"])
    assert resp.status_code == 201
    invoice_id = resp.json()["data"]["id"]

    resp = await client.post("/api/invoices", json=body, headers=tokens["receptionist"])
    assert resp.status_code == 409

    resp = await client.put(f"/api/invoices/{invoice_id}/pay", headers=tokens["receptionist"])
    assert resp.json()["data"]["payment_status"] == "paid"

    resp = await client.put(f"/api/invoices/{invoice_id}/pay", headers=tokens["receptionist"])
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_state"

    resp = await client.get("/api/invoices", headers=tokens["receptionist"])
    payload = resp.json()
    assert payload["pagination"]["total_items"] == 1
    assert payload["summary"]["paid_count"] == 1
