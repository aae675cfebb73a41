# tests/test_appointments.py
from datetime import date

import pytest

from app.helpers.exceptions import (
    CapacityExceededError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from app.model_registry import DailyAppointment, Patient, SystemSetting
from app.system_services.appointment_services import (
    appointment_stats,
    dequeue_appointment,
    enqueue_patient,
    list_appointments_for_date,
    set_appointment_status,
)
from config.appconfig import settings

DAY = date(2024, 1, 10)


async def _patients(db, count):
    patients = [
        Patient(full_name=f"Patient {i}", gender="female", birth_year=1980 + i, phone_number=f"09000000{i:02d}")
        for i in range(count)
    ]
    db.add_all(patients)
    await db.commit()
    return patients


async def test_enqueue_creates_waiting_entry(db, patient):
    appointment = await enqueue_patient(db, patient.id, DAY)

    assert appointment.status == "waiting"
    assert appointment.appointment_date == DAY
    assert appointment.medical_record_id is None


async def test_enqueue_defaults_to_clinic_today(db, patient, visit_day):
    appointment = await enqueue_patient(db, patient.id)
    assert appointment.appointment_date == visit_day


async def test_enqueue_unknown_patient(db):
    with pytest.raises(NotFoundError):
        await enqueue_patient(db, 999, DAY)


async def test_duplicate_enqueue_same_date_conflicts(db, patient):
    await enqueue_patient(db, patient.id, DAY)

    with pytest.raises(ConflictError):
        await enqueue_patient(db, patient.id, DAY)

    # A different day is a different visit
    other = await enqueue_patient(db, patient.id, date(2024, 1, 11))
    assert other.id is not None


async def test_capacity_limit(db):
    db.add(SystemSetting(setting_key="max_patients_per_day", setting_value="2"))
    await db.commit()
    first, second, third = await _patients(db, 3)

    await enqueue_patient(db, first.id, DAY)
    await enqueue_patient(db, second.id, DAY)  # below max succeeds

    with pytest.raises(CapacityExceededError):
        await enqueue_patient(db, third.id, DAY)

    # Capacity is per date
    await enqueue_patient(db, third.id, date(2024, 1, 11))


async def test_capacity_reads_latest_setting(db):
    row = SystemSetting(setting_key="max_patients_per_day", setting_value="1")
    db.add(row)
    await db.commit()
    first, second = await _patients(db, 2)
    await enqueue_patient(db, first.id, DAY)

    with pytest.raises(CapacityExceededError):
        await enqueue_patient(db, second.id, DAY)

    row.setting_value = "5"
    await db.commit()
    await enqueue_patient(db, second.id, DAY)


async def test_dequeue_only_waiting(db, patient):
    appointment = await enqueue_patient(db, patient.id, DAY)
    await set_appointment_status(db, appointment.id, "examined")

    with pytest.raises(InvalidStateError):
        await dequeue_appointment(db, appointment.id)

    await set_appointment_status(db, appointment.id, "waiting")
    await dequeue_appointment(db, appointment.id)
    assert await db.get(DailyAppointment, appointment.id) is None


async def test_dequeue_missing(db):
    with pytest.raises(NotFoundError):
        await dequeue_appointment(db, 42)


async def test_set_status_rejects_unknown_value(db, patient):
    appointment = await enqueue_patient(db, patient.id, DAY)
    with pytest.raises(ValidationError):
        await set_appointment_status(db, appointment.id, "cancelled")


async def test_set_status_is_permissive_by_default(db, patient):
    appointment = await enqueue_patient(db, patient.id, DAY)
    await set_appointment_status(db, appointment.id, "completed")

    reverted = await set_appointment_status(db, appointment.id, "waiting")
    assert reverted.status == "waiting"


async def test_set_status_can_enforce_forward_only(db, patient, monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_FORWARD_STATUS_TRANSITIONS", True)
    appointment = await enqueue_patient(db, patient.id, DAY)
    await set_appointment_status(db, appointment.id, "examined")

    with pytest.raises(InvalidStateError):
        await set_appointment_status(db, appointment.id, "waiting")

    advanced = await set_appointment_status(db, appointment.id, "completed")
    assert advanced.status == "completed"


async def test_list_for_date_orders_by_arrival_and_joins_patient(db):
    first, second = await _patients(db, 2)
    await enqueue_patient(db, second.id, DAY)
    await enqueue_patient(db, first.id, DAY)
    await enqueue_patient(db, first.id, date(2024, 1, 11))

    entries = await list_appointments_for_date(db, DAY)

    assert [e.patient_id for e in entries] == [second.id, first.id]
    assert entries[0].full_name == "Patient 1"
    assert entries[0].phone_number == "0900000001"
    assert entries[0].symptoms is None


async def test_stats_counts_day_and_month(db):
    a, b, c = await _patients(db, 3)
    first = await enqueue_patient(db, a.id, DAY)
    await enqueue_patient(db, b.id, DAY)
    await enqueue_patient(db, c.id, date(2024, 1, 20))
    await enqueue_patient(db, c.id, date(2024, 2, 1))
    await set_appointment_status(db, first.id, "completed")

    stats = await appointment_stats(db, DAY)

    assert stats.today.total == 2
    assert stats.today.waiting == 1
    assert stats.today.completed == 1
    assert stats.month.total == 3
    assert stats.month.completed == 1


async def test_queue_endpoints(client, tokens, patient, visit_day):
    resp = await client.post("/api/appointments", json={"patient_id": patient.id}, headers=tokens["receptionist"])
    assert resp.status_code == 201
    appointment_id = resp.json()["data"]["id"]

    resp = await client.post("/api/appointments", json={"patient_id": patient.id}, headers=tokens["receptionist"])
    assert resp.status_code == 409
    assert resp.json()["success"] is False
    assert resp.json()["code"] == "conflict"

    resp = await client.get("/api/appointments/daily", headers=tokens["doctor"])
    assert resp.status_code == 200
    assert [e["id"] for e in resp.json()["data"]] == [appointment_id]

    resp = await client.put(
        f"/api/appointments/{appointment_id}/status", json={"status": "bogus"}, headers=tokens["doctor"]
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "validation_error"

    # Doctors cannot remove patients from the queue
    resp = await client.delete(f"/api/appointments/{appointment_id}", headers=tokens["doctor"])
    assert resp.status_code == 403

    resp = await client.delete(f"/api/appointments/{appointment_id}", headers=tokens["receptionist"])
    assert resp.status_code == 200
    assert resp.json()["message"] == "Patient removed from queue successfully"
