# tests/test_medical_records.py
from datetime import date

import pytest
from sqlalchemy import func, select

from app.helpers.exceptions import NotFoundError, ValidationError
from app.helpers.responses import PageParams
from app.model_registry import DailyAppointment, MedicalRecord, PrescriptionDetail
from app.system_models.medical_record_model.medical_record_schemas import MedicalRecordCreate
from app.system_services import medical_record_services
from app.system_services.appointment_services import enqueue_patient
from app.system_services.medical_record_services import (
    create_medical_record,
    get_medical_record,
    list_medical_records,
    list_patient_records,
    patient_history,
)
from conftest import VISIT_DAY


def _record(patient, catalog, medicine="paracetamol", quantity=2, **overrides):
    payload = {
        "patient_id": patient.id,
        "symptoms": "fever",
        "diagnosis": "flu",
        "disease_id": catalog["flu"].id,
        "prescriptions": [
            {
                "medicine_id": catalog[medicine].id,
                "usage_method_id": catalog["after_meals"].id,
                "quantity": quantity,
            }
        ],
    }
    payload.update(overrides)
    return MedicalRecordCreate(**payload)


async def _count(db, model):
    return await db.scalar(select(func.count()).select_from(model))


async def test_record_advances_waiting_appointment(db, staff, patient, catalog, visit_day):
    appointment = await enqueue_patient(db, patient.id, visit_day)

    record = await create_medical_record(db, _record(patient, catalog), doctor_id=staff["doctor"].id)

    await db.refresh(appointment)
    assert appointment.status == "examined"
    assert appointment.medical_record_id == record.id
    assert record.status == "completed"
    assert record.doctor_name == "doctor"
    assert record.disease_name == "Influenza"
    assert record.patient_name == "Nguyen Van A"
    [line] = record.prescriptions
    assert line.medicine_name == "Paracetamol 500mg"
    assert line.usage_method_name == "Take after meals"
    assert line.total_price == 4000


async def test_record_without_waiting_appointment_still_created(db, staff, patient, catalog, visit_day):
    # Queued for another day only
    other = await enqueue_patient(db, patient.id, date(2024, 1, 9))

    record = await create_medical_record(db, _record(patient, catalog), doctor_id=staff["doctor"].id)

    assert record.id is not None
    await db.refresh(other)
    assert other.status == "waiting"
    assert other.medical_record_id is None


async def test_blank_diagnosis_leaves_record_pending(db, staff, patient, catalog, visit_day):
    record = await create_medical_record(
        db, _record(patient, catalog, diagnosis="   ", disease_id=None), doctor_id=staff["doctor"].id
    )
    assert record.status == "pending"
    assert record.diagnosis is None
    assert record.disease_name is None


async def test_inactive_medicine_rejected_and_nothing_persisted(db, staff, patient, catalog, visit_day):
    appointment = await enqueue_patient(db, patient.id, visit_day)

    with pytest.raises(ValidationError) as exc:
        await create_medical_record(db, _record(patient, catalog, medicine="retired"), doctor_id=staff["doctor"].id)

    assert str(catalog["retired"].id) in exc.value.message
    assert await _count(db, MedicalRecord) == 0
    assert await _count(db, PrescriptionDetail) == 0
    await db.refresh(appointment)
    assert appointment.status == "waiting"


async def test_failure_after_flush_rolls_back_record_and_lines(
    db, session_factory, staff, patient, catalog, monkeypatch
):
    appointment = await enqueue_patient(db, patient.id, VISIT_DAY)
    appointment_id = appointment.id

    # Fails after the record and its lines are flushed, before the queue hop
    def lost_clock():
        raise RuntimeError("clock unavailable")

    monkeypatch.setattr(medical_record_services, "clinic_today", lost_clock)

    with pytest.raises(RuntimeError):
        await create_medical_record(db, _record(patient, catalog), doctor_id=staff["doctor"].id)

    async with session_factory() as fresh:
        assert await _count(fresh, MedicalRecord) == 0
        assert await _count(fresh, PrescriptionDetail) == 0
        assert (await fresh.get(DailyAppointment, appointment_id)).status == "waiting"


async def test_inactive_disease_and_usage_method_rejected(db, staff, patient, catalog, visit_day):
    catalog["flu"].is_active = False
    await db.commit()
    with pytest.raises(ValidationError):
        await create_medical_record(db, _record(patient, catalog), doctor_id=staff["doctor"].id)

    with pytest.raises(ValidationError):
        await create_medical_record(
            db,
            _record(patient, catalog, disease_id=None, prescriptions=[
                {"medicine_id": catalog["paracetamol"].id, "usage_method_id": 999, "quantity": 1}
            ]),
            doctor_id=staff["doctor"].id,
        )
    assert await _count(db, MedicalRecord) == 0


async def test_unknown_patient(db, staff, patient, catalog):
    with pytest.raises(NotFoundError):
        await create_medical_record(
            db, _record(patient, catalog, patient_id=patient.id + 100), doctor_id=staff["doctor"].id
        )


async def test_get_and_list_records(db, staff, patient, catalog, visit_day):
    first = await create_medical_record(db, _record(patient, catalog), doctor_id=staff["doctor"].id)
    second = await create_medical_record(
        db, _record(patient, catalog, medicine="amoxicillin", quantity=3), doctor_id=staff["doctor"].id
    )

    fetched = await get_medical_record(db, first.id)
    assert fetched.prescriptions[0].quantity == 2

    records, total = await list_patient_records(db, patient.id, PageParams(page=1, limit=1))
    assert total == 2
    assert [r.id for r in records] == [second.id]

    history = await patient_history(db, patient.id)
    assert [r.id for r in history] == [second.id, first.id]

    everything, total = await list_medical_records(db, PageParams())
    assert total == 2

    with pytest.raises(NotFoundError):
        await get_medical_record(db, 999)
    with pytest.raises(NotFoundError):
        await patient_history(db, 999)


async def test_record_endpoints_roles(client, tokens, patient, catalog, visit_day):
    payload = _record(patient, catalog).model_dump()

    resp = await client.post("/api/medical-records", json=payload, headers=tokens["receptionist"])
    assert resp.status_code == 403

    resp = await client.post("/api/medical-records", json=payload, headers=tokens["doctor"])
    assert resp.status_code == 201
    record_id = resp.json()["data"]["id"]

    resp = await client.get(f"/api/medical-records/{record_id}", headers=tokens["doctor"])
    assert resp.json()["data"]["prescriptions"][0]["quantity"] == 2

    resp = await client.get(f"/api/patients/{patient.id}/medical-history", headers=tokens["doctor"])
    assert [r["id"] for r in resp.json()["data"]] == [record_id]

    # Full listing is admin only
    resp = await client.get("/api/medical-records", headers=tokens["doctor"])
    assert resp.status_code == 403
    resp = await client.get("/api/medical-records", headers=tokens["admin"])
    assert resp.json()["pagination"]["total_items"] == 1


async def test_record_requires_positive_quantity(client, tokens, patient, catalog):
    payload = _record(patient, catalog).model_dump()
    payload["prescriptions"][0]["quantity"] = 0

    resp = await client.post("/api/medical-records", json=payload, headers=tokens["doctor"])

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "validation_error"
    assert body["errors"][0]["field"] == "prescriptions.0.quantity"
