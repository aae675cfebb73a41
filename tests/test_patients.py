# tests/test_patients.py

PATIENT = {
    "full_name": "Tran Thi B",
    "gender": "female",
    "birth_year": 1985,
    "phone_number": "0912345678",
    "address": "12 Le Loi",
}


async def test_create_and_search_patients(client, tokens):
    resp = await client.post("/api/patients", json=PATIENT, headers=tokens["receptionist"])
    assert resp.status_code == 201
    assert resp.json()["data"]["full_name"] == "Tran Thi B"

    await client.post(
        "/api/patients",
        json={**PATIENT, "full_name": "Le Van C", "gender": "male", "phone_number": "0987654321"},
        headers=tokens["receptionist"],
    )

    resp = await client.get("/api/patients", params={"search": "tran"}, headers=tokens["doctor"])
    assert [p["phone_number"] for p in resp.json()["data"]] == ["0912345678"]

    resp = await client.get("/api/patients", params={"search": "0987"}, headers=tokens["doctor"])
    assert [p["full_name"] for p in resp.json()["data"]] == ["Le Van C"]

    resp = await client.get("/api/patients", params={"limit": 1}, headers=tokens["doctor"])
    assert resp.json()["pagination"] == {
        "current_page": 1,
        "total_pages": 2,
        "total_items": 2,
        "items_per_page": 1,
    }


async def test_duplicate_phone_conflicts(client, tokens):
    await client.post("/api/patients", json=PATIENT, headers=tokens["receptionist"])
    resp = await client.post("/api/patients", json={**PATIENT, "full_name": "Someone Else"}, headers=tokens["receptionist"])

    assert resp.status_code == 409
    assert resp.json() == {"success": False, "message": "Phone number already exists", "code": "conflict"}


async def test_update_patient(client, tokens, patient):
    resp = await client.put(
        f"/api/patients/{patient.id}", json={"address": "New street"}, headers=tokens["receptionist"]
    )
    assert resp.json()["data"]["address"] == "New street"
    assert resp.json()["data"]["full_name"] == patient.full_name

    await client.post("/api/patients", json=PATIENT, headers=tokens["receptionist"])
    resp = await client.put(
        f"/api/patients/{patient.id}", json={"phone_number": PATIENT["phone_number"]}, headers=tokens["receptionist"]
    )
    assert resp.status_code == 409


async def test_patient_validation(client, tokens):
    bad = {**PATIENT, "gender": "other", "birth_year": 1800, "phone_number": "12345"}
    resp = await client.post("/api/patients", json=bad, headers=tokens["receptionist"])

    assert resp.status_code == 400
    assert {e["field"] for e in resp.json()["errors"]} == {"gender", "birth_year", "phone_number"}


async def test_doctor_cannot_register_patients(client, tokens):
    resp = await client.post("/api/patients", json=PATIENT, headers=tokens["doctor"])
    assert resp.status_code == 403


async def test_unknown_route_uses_envelope(client):
    resp = await client.get("/api/nowhere")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Route not found"
