from decimal import Decimal

from utils.scheduling import shift_date, today_str


class TestDashboard:
    async def test_mutations_refresh_cached_summary(
        self, client, admin_headers, patient, patient_payload
    ):
        summary = await client.get("/reports/dashboard", headers=admin_headers)
        assert summary.status_code == 200
        assert summary.json()["totalPatients"] == 1

        patient_payload.update(firstName="Pablo", email="pablo@correo.es")
        await client.post("/patients/", json=patient_payload, headers=admin_headers)

        summary = await client.get("/reports/dashboard", headers=admin_headers)
        assert summary.json()["totalPatients"] == 2

    async def test_empty_clinic(self, client, admin_headers):
        summary = (await client.get("/reports/dashboard", headers=admin_headers)).json()
        assert summary["totalPatients"] == 0
        assert summary["unpaidInvoices"] == 0
        assert Decimal(summary["outstandingAmount"]) == Decimal("0")


class TestRevenue:
    async def test_paid_invoices_by_month(self, client, admin_headers, patient, doctor):
        payload = {
            "patientId": patient["id"],
            "doctorId": str(doctor.id),
            "date": today_str(),
            "dueDate": today_str(),
            "items": [{"description": "Endodoncia", "quantity": 1, "unitPrice": 250}],
            "status": "sent",
        }
        invoice = (await client.post("/invoices/", json=payload, headers=admin_headers)).json()

        assert (await client.get("/reports/revenue/monthly", headers=admin_headers)).json() == []
        summary = (await client.get("/reports/dashboard", headers=admin_headers)).json()
        assert Decimal(summary["outstandingAmount"]) == Decimal("250")

        await client.post(f"/invoices/{invoice['id']}/pay", headers=admin_headers)

        monthly = (await client.get("/reports/revenue/monthly", headers=admin_headers)).json()
        assert len(monthly) == 1
        assert monthly[0]["month"] == today_str()[:7]
        assert Decimal(monthly[0]["revenue"]) == Decimal("250")

        by_doctor = (await client.get("/reports/revenue/by-doctor", headers=admin_headers)).json()
        assert by_doctor[0]["doctorName"] == "Luis Moreno"
        assert Decimal(by_doctor[0]["revenue"]) == Decimal("250")


class TestBreakdowns:
    async def test_appointments_treatments_inventory(
        self, client, admin_headers, patient, doctor, future_date
    ):
        for block in ("09:00-10:00", "10:00-11:00"):
            await client.post(
                "/appointments/",
                json={
                    "patientId": patient["id"],
                    "doctorId": str(doctor.id),
                    "date": future_date,
                    "timeBlock": block,
                    "treatmentType": "Revision",
                },
                headers=admin_headers,
            )
        for treatment_type in ("Limpieza", "Limpieza", "Empaste"):
            await client.post(
                "/treatments/",
                json={
                    "patientId": patient["id"],
                    "doctorId": str(doctor.id),
                    "type": treatment_type,
                    "description": treatment_type,
                    "cost": 60,
                    "startDate": "2024-05-01",
                },
                headers=admin_headers,
            )
        for name, category, quantity in (
            ("Guantes", "Desechables", 5),
            ("Baberos", "Desechables", 7),
            ("Lidocaina", "Farmacia", 12),
        ):
            await client.post(
                "/inventory/",
                json={"name": name, "category": category, "quantity": quantity, "unit": "caja"},
                headers=admin_headers,
            )

        appointments = (await client.get("/reports/appointments", headers=admin_headers)).json()
        assert {row["status"]: row["count"] for row in appointments} == {"scheduled": 2}

        treatments = (await client.get("/reports/treatments", headers=admin_headers)).json()
        assert treatments == [{"type": "Limpieza", "count": 2}, {"type": "Empaste", "count": 1}]

        inventory = (await client.get("/reports/inventory", headers=admin_headers)).json()
        assert inventory == [
            {"category": "Desechables", "totalQuantity": 12},
            {"category": "Farmacia", "totalQuantity": 12},
        ]


class TestDashboardDate:
    async def test_new_day_is_not_served_from_cache(
        self, client, admin_headers, patient, doctor, future_date, monkeypatch
    ):
        await client.post(
            "/appointments/",
            json={
                "patientId": patient["id"],
                "doctorId": str(doctor.id),
                "date": future_date,
                "timeBlock": "09:00-10:00",
            },
            headers=admin_headers,
        )

        before = (await client.get("/reports/dashboard", headers=admin_headers)).json()
        assert before["appointmentsToday"] == 0
        assert before["upcomingAppointments"] == 1

        # The clock moves on to the appointment day with no mutation in between
        monkeypatch.setattr("routes.reports.today_str", lambda: future_date)
        after = (await client.get("/reports/dashboard", headers=admin_headers)).json()
        assert after["appointmentsToday"] == 1
        assert after["upcomingAppointments"] == 1

        monkeypatch.setattr("routes.reports.today_str", lambda: shift_date(future_date, 1))
        later = (await client.get("/reports/dashboard", headers=admin_headers)).json()
        assert later["appointmentsToday"] == 0
        assert later["upcomingAppointments"] == 0
