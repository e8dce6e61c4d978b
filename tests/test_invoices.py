from decimal import Decimal

import pytest

from utils.scheduling import shift_date, today_str


@pytest.fixture
def invoice_payload(patient, doctor, future_date):
    return {
        "patientId": patient["id"],
        "doctorId": str(doctor.id),
        "date": today_str(),
        "dueDate": future_date,
        "items": [
            {"description": "Limpieza", "quantity": 2, "unitPrice": 50},
            {"description": "Radiografia", "quantity": 1, "unitPrice": 30},
        ],
        "tax": 10,
        "discount": 5,
        "status": "sent",
    }


@pytest.fixture
def create_invoice(client, admin_headers, invoice_payload):
    async def _create(**overrides):
        payload = {**invoice_payload, **overrides}
        return await client.post("/invoices/", json=payload, headers=admin_headers)

    return _create


class TestInvoiceTotals:
    async def test_totals_are_computed(self, create_invoice):
        response = await create_invoice()
        assert response.status_code == 201
        invoice = response.json()
        assert Decimal(invoice["subtotal"]) == Decimal("130")
        assert Decimal(invoice["total"]) == Decimal("135")
        assert [Decimal(i["total"]) for i in invoice["items"]] == [Decimal("100"), Decimal("30")]
        assert all(item["id"] for item in invoice["items"])
        assert invoice["patientName"] == "Carmen Ruiz"
        assert invoice["isOverdue"] is False

    async def test_client_totals_are_ignored(self, create_invoice):
        response = await create_invoice(
            items=[{"description": "Empaste", "quantity": 1, "unitPrice": 100, "total": 1}],
            tax=0,
            discount=0,
        )
        assert Decimal(response.json()["total"]) == Decimal("100")

    async def test_due_date_before_date(self, create_invoice):
        response = await create_invoice(dueDate=shift_date(today_str(), -1))
        assert response.status_code == 422

    async def test_items_required(self, create_invoice):
        response = await create_invoice(items=[])
        assert response.status_code == 422

    async def test_overdue_flag(self, create_invoice):
        response = await create_invoice(
            date=shift_date(today_str(), -40), dueDate=shift_date(today_str(), -10)
        )
        assert response.json()["isOverdue"] is True

    async def test_update_recomputes_totals(self, client, admin_headers, create_invoice):
        invoice = (await create_invoice()).json()
        response = await client.patch(
            f"/invoices/{invoice['id']}", json={"discount": 35}, headers=admin_headers
        )
        assert response.status_code == 200
        assert Decimal(response.json()["total"]) == Decimal("105")
        assert Decimal(response.json()["subtotal"]) == Decimal("130")

        response = await client.patch(
            f"/invoices/{invoice['id']}",
            json={"items": [{"description": "Corona", "quantity": 1, "unitPrice": 500}]},
            headers=admin_headers,
        )
        assert Decimal(response.json()["subtotal"]) == Decimal("500")
        assert Decimal(response.json()["total"]) == Decimal("475")

    async def test_notes_update_keeps_totals(self, client, admin_headers, create_invoice):
        invoice = (await create_invoice()).json()
        response = await client.patch(
            f"/invoices/{invoice['id']}", json={"notes": "Pago en dos plazos"}, headers=admin_headers
        )
        assert response.json()["notes"] == "Pago en dos plazos"
        assert Decimal(response.json()["total"]) == Decimal("135")
        assert response.json()["items"] == invoice["items"]


class TestPayments:
    async def test_unpaid_then_paid(self, client, admin_headers, create_invoice, future_date):
        late = (await create_invoice(dueDate=shift_date(future_date, 10))).json()
        soon = (await create_invoice()).json()
        await create_invoice(status="draft")

        unpaid = await client.get("/invoices/unpaid", headers=admin_headers)
        assert [i["id"] for i in unpaid.json()] == [soon["id"], late["id"]]

        paid = await client.post(
            f"/invoices/{soon['id']}/pay", json={"paidDate": "2024-07-01"}, headers=admin_headers
        )
        assert paid.status_code == 200
        body = paid.json()
        assert body["status"] == "paid"
        assert body["paidDate"] == "2024-07-01"
        assert Decimal(body["paidAmount"]) == Decimal("135")

        unpaid = await client.get("/invoices/unpaid", headers=admin_headers)
        assert [i["id"] for i in unpaid.json()] == [late["id"]]

    async def test_pay_defaults_to_today(self, client, admin_headers, create_invoice):
        invoice = (await create_invoice()).json()
        paid = await client.post(f"/invoices/{invoice['id']}/pay", headers=admin_headers)
        assert paid.json()["paidDate"] == today_str()

    async def test_cancelled_invoice_cannot_be_paid(self, client, admin_headers, create_invoice):
        invoice = (await create_invoice(status="cancelled")).json()
        response = await client.post(f"/invoices/{invoice['id']}/pay", headers=admin_headers)
        assert response.status_code == 422

    async def test_list_by_patient_and_delete(self, client, admin_headers, create_invoice, patient):
        invoice = (await create_invoice()).json()
        listing = await client.get(f"/invoices/patient/{patient['id']}", headers=admin_headers)
        assert [i["id"] for i in listing.json()] == [invoice["id"]]

        response = await client.delete(f"/invoices/{invoice['id']}", headers=admin_headers)
        assert response.status_code == 204
        assert (await client.get("/invoices/", headers=admin_headers)).json() == []


class TestNullFields:
    async def test_required_fields_cannot_be_cleared(self, client, admin_headers, create_invoice):
        invoice = (await create_invoice()).json()
        for field in ("dueDate", "date", "status", "tax", "items"):
            response = await client.patch(
                f"/invoices/{invoice['id']}", json={field: None}, headers=admin_headers
            )
            assert response.status_code == 422, field

    async def test_notes_can_be_cleared(self, client, admin_headers, create_invoice):
        invoice = (await create_invoice(notes="Enviar por correo")).json()
        response = await client.patch(
            f"/invoices/{invoice['id']}", json={"notes": None}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["notes"] is None
        assert Decimal(response.json()["total"]) == Decimal("135")
