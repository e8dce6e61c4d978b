from uuid import uuid4

import pytest

from utils.scheduling import shift_date, today_str


@pytest.fixture
def book(client, admin_headers, patient, doctor, future_date):
    """Book an appointment; keyword arguments override the payload"""

    async def _book(**overrides):
        payload = {
            "patientId": patient["id"],
            "doctorId": str(doctor.id),
            "date": future_date,
            "timeBlock": "09:00-10:00",
        }
        payload.update(overrides)
        return await client.post("/appointments/", json=payload, headers=admin_headers)

    return _book


class TestBookingScenario:
    async def test_create_then_confirm(self, client, admin_headers, book, patient, doctor, future_date):
        created = await book(notes="Revision anual", treatmentType="Limpieza")
        assert created.status_code == 201
        appointment = created.json()
        assert appointment["status"] == "scheduled"
        assert appointment["date"] == future_date
        assert appointment["startTime"] == "09:00"
        assert appointment["endTime"] == "10:00"
        assert appointment["patientName"] == "Carmen Ruiz"
        assert appointment["doctorName"] == "Luis Moreno"

        changed = await client.patch(
            f"/appointments/{appointment['id']}/status",
            json={"status": "confirmed"},
            headers=admin_headers,
        )
        assert changed.status_code == 200

        read = await client.get(f"/appointments/{appointment['id']}", headers=admin_headers)
        after = read.json()
        assert after["status"] == "confirmed"
        for field in (
            "id", "patientId", "doctorId", "date", "startTime", "endTime",
            "notes", "treatmentType", "createdAt",
        ):
            assert after[field] == appointment[field]

    @pytest.mark.parametrize(
        "target", ["scheduled", "confirmed", "completed", "cancelled", "no-show"]
    )
    async def test_any_status_can_follow_completed(self, client, admin_headers, book, target):
        appointment = (await book()).json()
        await client.patch(
            f"/appointments/{appointment['id']}/status",
            json={"status": "completed"},
            headers=admin_headers,
        )
        response = await client.patch(
            f"/appointments/{appointment['id']}/status",
            json={"status": target},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == target

    async def test_unknown_status(self, client, admin_headers, book):
        appointment = (await book()).json()
        response = await client.patch(
            f"/appointments/{appointment['id']}/status",
            json={"status": "postponed"},
            headers=admin_headers,
        )
        assert response.status_code == 422


class TestTimeInput:
    async def test_start_time_only_defaults_to_one_hour(self, book):
        response = await book(timeBlock=None, startTime="9:30 AM")
        assert response.status_code == 201
        assert response.json()["startTime"] == "09:30"
        assert response.json()["endTime"] == "10:30"

    async def test_explicit_start_and_end(self, book):
        response = await book(timeBlock=None, startTime="14:00", endTime="15:30")
        assert response.status_code == 201
        assert response.json()["endTime"] == "15:30"

    async def test_last_hour_of_the_day(self, book):
        response = await book(timeBlock=None, startTime="23:00")
        assert response.status_code == 201
        assert response.json()["endTime"] == "00:00"

    async def test_inverted_block(self, book):
        response = await book(timeBlock="10:00-09:00")
        assert response.status_code == 422

    async def test_missing_time(self, book):
        response = await book(timeBlock=None)
        assert response.status_code == 422

    async def test_past_date_rejected(self, book):
        response = await book(date=shift_date(today_str(), -1))
        assert response.status_code == 422
        assert "past" in response.json()["message"]

    async def test_date_with_time_suffix_is_normalized(self, book, future_date):
        response = await book(date=f"{future_date}T00:00:00.000Z")
        assert response.status_code == 201
        assert response.json()["date"] == future_date

    async def test_unknown_patient(self, book):
        response = await book(patientId=str(uuid4()))
        assert response.status_code == 404


class TestOverlap:
    async def test_overlapping_block_is_rejected(self, book):
        assert (await book()).status_code == 201
        response = await book(timeBlock="09:30-10:30")
        assert response.status_code == 409
        body = response.json()
        assert body["category"] == "conflict"
        assert "09:00" in body["message"]

    async def test_adjacent_block_is_allowed(self, book):
        assert (await book()).status_code == 201
        assert (await book(timeBlock="10:00-11:00")).status_code == 201

    async def test_other_doctor_is_allowed(self, book, admin_doctor):
        assert (await book()).status_code == 201
        assert (await book(doctorId=str(admin_doctor.id))).status_code == 201

    async def test_other_date_is_allowed(self, book, future_date):
        assert (await book()).status_code == 201
        assert (await book(date=shift_date(future_date, 1))).status_code == 201

    async def test_cancelled_appointment_frees_the_block(self, client, admin_headers, book):
        first = (await book()).json()
        await client.patch(
            f"/appointments/{first['id']}/status",
            json={"status": "cancelled"},
            headers=admin_headers,
        )
        assert (await book()).status_code == 201

        # reviving the cancelled one would double-book
        revived = await client.patch(
            f"/appointments/{first['id']}/status",
            json={"status": "scheduled"},
            headers=admin_headers,
        )
        assert revived.status_code == 409

    async def test_update_into_occupied_block(self, client, admin_headers, book):
        assert (await book()).status_code == 201
        second = (await book(timeBlock="11:00-12:00")).json()

        moved = await client.patch(
            f"/appointments/{second['id']}",
            json={"timeBlock": "09:00-10:00"},
            headers=admin_headers,
        )
        assert moved.status_code == 409

        # moving within its own block does not conflict with itself
        stretched = await client.patch(
            f"/appointments/{second['id']}",
            json={"endTime": "12:30"},
            headers=admin_headers,
        )
        assert stretched.status_code == 200
        assert stretched.json()["endTime"] == "12:30"
        assert stretched.json()["startTime"] == "11:00"


class TestQueries:
    async def test_views(self, client, admin_headers, book):
        today = today_str()
        tomorrow = shift_date(today, 1)
        await book(date=today, timeBlock="18:00-19:00")
        await book(date=tomorrow)
        await book(date=shift_date(today, 10))

        async def dates(view):
            response = await client.get(
                "/appointments/", params={"view": view}, headers=admin_headers
            )
            return [a["date"] for a in response.json()]

        assert await dates("today") == [today]
        assert await dates("tomorrow") == [tomorrow]
        assert await dates("upcoming") == [today, tomorrow, shift_date(today, 10)]

    async def test_filters_and_ordering(self, client, admin_headers, book, doctor, future_date):
        await book(timeBlock="11:00-12:00")
        await book(timeBlock="09:00-10:00")
        await book(date=shift_date(future_date, 5))

        response = await client.get(
            "/appointments/",
            params={"doctorId": str(doctor.id), "dateFrom": future_date, "dateTo": future_date},
            headers=admin_headers,
        )
        assert [a["startTime"] for a in response.json()] == ["09:00", "11:00"]

    async def test_status_filter(self, client, admin_headers, book):
        first = (await book()).json()
        await book(timeBlock="12:00-13:00")
        await client.patch(
            f"/appointments/{first['id']}/status",
            json={"status": "no-show"},
            headers=admin_headers,
        )
        response = await client.get(
            "/appointments/", params={"status": "no-show"}, headers=admin_headers
        )
        assert [a["id"] for a in response.json()] == [first["id"]]

    async def test_invalid_date_filter(self, client, admin_headers):
        response = await client.get(
            "/appointments/", params={"dateFrom": "not-a-date"}, headers=admin_headers
        )
        assert response.status_code == 422

    async def test_upcoming_limit(self, client, admin_headers, book, future_date):
        for hour in ("09", "10", "11"):
            await book(timeBlock=f"{hour}:00-{int(hour) + 1}:00")
        response = await client.get(
            "/appointments/upcoming", params={"limit": 2}, headers=admin_headers
        )
        assert [a["startTime"] for a in response.json()] == ["09:00", "10:00"]

    async def test_range_and_patient(self, client, admin_headers, book, patient, future_date):
        await book()
        await book(date=shift_date(future_date, 3))

        in_range = await client.get(
            "/appointments/range",
            params={"startDate": future_date, "endDate": shift_date(future_date, 1)},
            headers=admin_headers,
        )
        assert len(in_range.json()) == 1

        inverted = await client.get(
            "/appointments/range",
            params={"startDate": shift_date(future_date, 1), "endDate": future_date},
            headers=admin_headers,
        )
        assert inverted.status_code == 422

        by_patient = await client.get(
            f"/appointments/patient/{patient['id']}", headers=admin_headers
        )
        assert len(by_patient.json()) == 2

    async def test_delete(self, client, admin_headers, book):
        appointment = (await book()).json()
        response = await client.delete(
            f"/appointments/{appointment['id']}", headers=admin_headers
        )
        assert response.status_code == 204
        missing = await client.delete(
            f"/appointments/{appointment['id']}", headers=admin_headers
        )
        assert missing.status_code == 404


class TestNullFields:
    async def test_required_fields_cannot_be_cleared(self, client, admin_headers, book):
        appointment = (await book()).json()
        for field in ("status", "date", "startTime", "doctorId"):
            response = await client.patch(
                f"/appointments/{appointment['id']}", json={field: None}, headers=admin_headers
            )
            assert response.status_code == 422, field
            assert response.json()["category"] == "validation"
            assert "cannot be null" in response.json()["message"]

    async def test_optional_fields_can_be_cleared(self, client, admin_headers, book):
        appointment = (await book(notes="Traer radiografias")).json()
        response = await client.patch(
            f"/appointments/{appointment['id']}",
            json={"notes": None, "timeBlock": None},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["notes"] is None
        assert response.json()["startTime"] == appointment["startTime"]
