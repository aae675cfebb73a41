# tests/test_workflow.py
"""Full visit on 2024-01-10, driven through the HTTP API as each role would."""
from decimal import Decimal


async def test_visit_from_queue_to_payment(client, tokens, patient, catalog, visit_day):
    reception, doctor = tokens["receptionist"], tokens["doctor"]
    medicine = catalog["paracetamol"]

    # Receptionist queues the patient
    resp = await client.post(
        "/api/appointments",
        json={"patient_id": patient.id, "appointment_date": "2024-01-10"},
        headers=reception,
    )
    assert resp.status_code == 201
    appointment = resp.json()["data"]
    assert appointment["status"] == "waiting"

    # Doctor examines and prescribes
    resp = await client.post(
        "/api/medical-records",
        json={
            "patient_id": patient.id,
            "symptoms": "fever",
            "diagnosis": "flu",
            "prescriptions": [
                {"medicine_id": medicine.id, "usage_method_id": catalog["after_meals"].id, "quantity": 2}
            ],
        },
        headers=doctor,
    )
    assert resp.status_code == 201
    record = resp.json()["data"]

    resp = await client.get("/api/appointments/daily", params={"date": "2024-01-10"}, headers=reception)
    [entry] = resp.json()["data"]
    assert entry["status"] == "examined"
    assert entry["medical_record_id"] == record["id"]
    assert entry["diagnosis"] == "flu"
    assert entry["doctor_name"] == "doctor"

    # Receptionist bills the visit
    resp = await client.post(
        "/api/invoices",
        json={
            "patient_id": patient.id,
            "medical_record_id": record["id"],
            "daily_appointment_id": appointment["id"],
        },
        headers=reception,
    )
    assert resp.status_code == 201
    invoice = resp.json()["data"]
    assert invoice["payment_status"] == "pending"
    assert Decimal(invoice["total_amount"]) == Decimal("100000") + 2 * medicine.price

    # ...and takes payment
    resp = await client.put(f"/api/invoices/{invoice['id']}/pay", headers=reception)
    assert resp.status_code == 200
    assert resp.json()["data"]["payment_status"] == "paid"

    resp = await client.get("/api/appointments/daily", params={"date": "2024-01-10"}, headers=reception)
    assert resp.json()["data"][0]["status"] == "completed"

    resp = await client.get("/api/appointments/stats", params={"date": "2024-01-10"}, headers=doctor)
    stats = resp.json()["data"]
    assert stats["today"] == {"total": 1, "waiting": 0, "examined": 0, "completed": 1}
    assert stats["month"] == {"total": 1, "completed": 1}
