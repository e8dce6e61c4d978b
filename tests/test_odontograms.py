from decimal import Decimal

import pytest

from utils.scheduling import today_str


@pytest.fixture
def chart(patient):
    return {
        "patientId": patient["id"],
        "date": "2024-03-05",
        "teeth": {
            "14": {"status": "caries", "surfaces": ["top", "top", "left"]},
            "16": {"status": "healthy"},
            "36": {"status": "crown", "notes": "Revisar ajuste"},
        },
        "notes": "Primera revision",
    }


@pytest.fixture
def save(client, admin_headers):
    async def _save(payload):
        return await client.put("/odontograms/", json=payload, headers=admin_headers)

    return _save


class TestSaveOdontogram:
    async def test_healthy_teeth_are_not_stored(self, save, chart):
        response = await save(chart)
        assert response.status_code == 200
        body = response.json()
        assert body["teeth"] == {
            "14": {"status": "caries", "notes": None, "surfaces": ["top", "left"]},
            "36": {"status": "crown", "notes": "Revisar ajuste", "surfaces": None},
        }
        assert body["isPediatric"] is False

    async def test_same_date_replaces_chart(self, client, admin_headers, save, chart, patient):
        first = (await save(chart)).json()
        chart["teeth"] = {"21": {"status": "implant"}}
        second = (await save(chart)).json()
        assert second["id"] == first["id"]
        assert list(second["teeth"]) == ["21"]

        chart["date"] = "2024-09-10"
        third = (await save(chart)).json()
        assert third["id"] != first["id"]

        listing = await client.get(f"/odontograms/patient/{patient['id']}", headers=admin_headers)
        assert [o["date"] for o in listing.json()] == ["2024-09-10", "2024-03-05"]

    async def test_pediatric_chart_rejects_adult_teeth(self, save, chart):
        chart["isPediatric"] = True
        response = await save(chart)
        assert response.status_code == 422
        assert "pediatric" in response.json()["message"]

    async def test_adult_chart_rejects_primary_teeth(self, save, chart):
        chart["teeth"] = {"55": {"status": "caries"}}
        response = await save(chart)
        assert response.status_code == 422

    async def test_non_numeric_tooth(self, save, chart):
        chart["teeth"] = {"muela": {"status": "caries"}}
        response = await save(chart)
        assert response.status_code == 422


class TestToothEditing:
    async def test_set_and_clear_tooth(self, client, admin_headers, save, chart):
        odontogram = (await save(chart)).json()
        url = f"/odontograms/{odontogram['id']}/teeth"

        response = await client.put(
            f"{url}/11", json={"status": "filling", "surfaces": ["center"]}, headers=admin_headers
        )
        assert response.json()["teeth"]["11"]["status"] == "filling"

        response = await client.put(f"{url}/14", json={"status": "healthy"}, headers=admin_headers)
        assert "14" not in response.json()["teeth"]

        response = await client.put(f"{url}/99", json={"status": "caries"}, headers=admin_headers)
        assert response.status_code == 422

        response = await client.put(f"{url}/55", json={"status": "caries"}, headers=admin_headers)
        assert response.status_code == 422


class TestSuggestions:
    async def test_suggestions_follow_conditions(self, client, admin_headers, save, chart):
        odontogram = (await save(chart)).json()
        response = await client.get(
            f"/odontograms/{odontogram['id']}/suggestions", headers=admin_headers
        )
        suggestions = response.json()
        assert [(s["tooth"], s["type"]) for s in suggestions] == [(14, "Empaste"), (36, "Corona")]
        assert [Decimal(s["cost"]) for s in suggestions] == [Decimal("100"), Decimal("500")]

    async def test_create_suggested_treatments(
        self, client, admin_headers, admin_doctor, save, chart, patient
    ):
        odontogram = (await save(chart)).json()
        response = await client.post(
            f"/odontograms/{odontogram['id']}/treatments", json={}, headers=admin_headers
        )
        assert response.status_code == 201
        treatments = response.json()
        assert [t["description"] for t in treatments] == [
            "Empaste para diente 14",
            "Corona para diente 36",
        ]
        first = treatments[0]
        assert first["status"] == "planned"
        assert first["teeth"] == [14]
        assert first["suggestedByOdontogram"] is True
        assert first["doctorId"] == str(admin_doctor.id)
        assert first["startDate"] == today_str()
        assert treatments[1]["notes"] == "Revisar ajuste"

        listing = await client.get(f"/treatments/patient/{patient['id']}", headers=admin_headers)
        assert len(listing.json()) == 2

    async def test_nothing_to_plan(self, client, admin_headers, save, chart):
        chart["teeth"] = {"11": {"status": "filling"}}
        odontogram = (await save(chart)).json()
        response = await client.post(
            f"/odontograms/{odontogram['id']}/treatments", json={}, headers=admin_headers
        )
        assert response.json() == []


class TestCatalog:
    async def test_adult_and_pediatric(self, client, admin_headers):
        adult = (await client.get("/odontograms/teeth", headers=admin_headers)).json()
        assert adult["upper"][:3] == [18, 17, 16]
        assert len(adult["upper"] + adult["lower"]) == 32

        child = (
            await client.get("/odontograms/teeth", params={"pediatric": True}, headers=admin_headers)
        ).json()
        assert child["isPediatric"] is True
        assert child["lower"][-1] == 75
        assert len(child["upper"] + child["lower"]) == 20
