from decimal import Decimal
from uuid import uuid4

import pytest


@pytest.fixture
def treatment_payload(patient, doctor):
    return {
        "patientId": patient["id"],
        "doctorId": str(doctor.id),
        "type": "Ortodoncia",
        "description": "Brackets metalicos",
        "teeth": [11, 21],
        "cost": "1500.50",
        "startDate": "2024-05-01",
    }


class TestTreatments:
    async def test_create_and_read(self, client, admin_headers, treatment_payload):
        response = await client.post("/treatments/", json=treatment_payload, headers=admin_headers)
        assert response.status_code == 201
        treatment = response.json()
        assert treatment["status"] == "planned"
        assert Decimal(treatment["cost"]) == Decimal("1500.50")
        assert treatment["teeth"] == [11, 21]
        assert treatment["doctorName"] == "Luis Moreno"
        assert treatment["suggestedByOdontogram"] is False

        read = await client.get(f"/treatments/{treatment['id']}", headers=admin_headers)
        assert read.json()["description"] == "Brackets metalicos"

    async def test_negative_cost(self, client, admin_headers, treatment_payload):
        treatment_payload["cost"] = "-1"
        response = await client.post("/treatments/", json=treatment_payload, headers=admin_headers)
        assert response.status_code == 422

    async def test_end_before_start(self, client, admin_headers, treatment_payload):
        treatment_payload["endDate"] = "2024-04-01"
        response = await client.post("/treatments/", json=treatment_payload, headers=admin_headers)
        assert response.status_code == 422

    async def test_partial_update(self, client, admin_headers, treatment_payload):
        treatment = (
            await client.post("/treatments/", json=treatment_payload, headers=admin_headers)
        ).json()
        response = await client.patch(
            f"/treatments/{treatment['id']}",
            json={"status": "in-progress", "notes": "Primera fase"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "in-progress"
        assert body["notes"] == "Primera fase"
        assert body["type"] == "Ortodoncia"

        invalid = await client.patch(
            f"/treatments/{treatment['id']}",
            json={"endDate": "2024-01-01"},
            headers=admin_headers,
        )
        assert invalid.status_code == 422

    async def test_list_by_patient(self, client, admin_headers, treatment_payload, patient):
        await client.post("/treatments/", json=treatment_payload, headers=admin_headers)
        treatment_payload.update(type="Limpieza", startDate="2024-06-01", teeth=[])
        await client.post("/treatments/", json=treatment_payload, headers=admin_headers)

        response = await client.get(f"/treatments/patient/{patient['id']}", headers=admin_headers)
        assert [t["type"] for t in response.json()] == ["Limpieza", "Ortodoncia"]

        filtered = await client.get(
            "/treatments/", params={"status": "completed"}, headers=admin_headers
        )
        assert filtered.json() == []

        unknown = await client.get(f"/treatments/patient/{uuid4()}", headers=admin_headers)
        assert unknown.status_code == 404

    async def test_delete(self, client, admin_headers, treatment_payload):
        treatment = (
            await client.post("/treatments/", json=treatment_payload, headers=admin_headers)
        ).json()
        response = await client.delete(f"/treatments/{treatment['id']}", headers=admin_headers)
        assert response.status_code == 204
        missing = await client.get(f"/treatments/{treatment['id']}", headers=admin_headers)
        assert missing.status_code == 404


class TestNullFields:
    async def test_required_fields_cannot_be_cleared(self, client, admin_headers, treatment_payload):
        treatment = (
            await client.post("/treatments/", json=treatment_payload, headers=admin_headers)
        ).json()
        for field in ("startDate", "status", "type", "cost"):
            response = await client.patch(
                f"/treatments/{treatment['id']}", json={field: None}, headers=admin_headers
            )
            assert response.status_code == 422, field

    async def test_end_date_can_be_cleared(self, client, admin_headers, treatment_payload):
        treatment_payload["endDate"] = "2024-08-01"
        treatment = (
            await client.post("/treatments/", json=treatment_payload, headers=admin_headers)
        ).json()
        response = await client.patch(
            f"/treatments/{treatment['id']}", json={"endDate": None}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["endDate"] is None
