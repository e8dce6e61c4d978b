from datetime import datetime, timedelta, timezone

from sqlalchemy import update

from conftest import DOCTOR_PASSWORD
from main import app
from models.password_reset import PasswordResetToken

NEW_PASSWORD = "nueva-clave-2024"


async def _request_token(client, email):
    response = await client.post("/password-reset/request", json={"email": email})
    assert response.status_code == 200
    return response.json()


async def _login(client, email, password):
    return await client.post("/auth/login", json={"email": email, "password": password})


class TestPasswordReset:
    async def test_reset_flow(self, client, doctor):
        body = await _request_token(client, doctor.email)
        token = body["resetToken"]
        assert token

        verified = await client.post("/password-reset/verify", json={"token": token})
        assert verified.status_code == 200

        completed = await client.post(
            "/password-reset/complete", json={"token": token, "newPassword": NEW_PASSWORD}
        )
        assert completed.status_code == 200

        assert (await _login(client, doctor.email, NEW_PASSWORD)).status_code == 200
        assert (await _login(client, doctor.email, DOCTOR_PASSWORD)).status_code == 401

    async def test_token_is_single_use(self, client, doctor):
        token = (await _request_token(client, doctor.email))["resetToken"]
        payload = {"token": token, "newPassword": NEW_PASSWORD}
        assert (await client.post("/password-reset/complete", json=payload)).status_code == 200

        again = await client.post("/password-reset/complete", json=payload)
        assert again.status_code == 400
        assert again.json()["category"] == "validation"

    async def test_new_request_revokes_earlier_token(self, client, doctor):
        first = (await _request_token(client, doctor.email))["resetToken"]
        second = (await _request_token(client, doctor.email))["resetToken"]
        assert first != second

        stale = await client.post("/password-reset/verify", json={"token": first})
        assert stale.status_code == 400
        fresh = await client.post("/password-reset/verify", json={"token": second})
        assert fresh.status_code == 200

    async def test_expired_token(self, client, doctor, session_factory):
        token = (await _request_token(client, doctor.email))["resetToken"]
        async with session_factory() as session:
            await session.execute(
                update(PasswordResetToken)
                .where(PasswordResetToken.token == token)
                .values(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
            )
            await session.commit()

        response = await client.post(
            "/password-reset/complete", json={"token": token, "newPassword": NEW_PASSWORD}
        )
        assert response.status_code == 400
        assert (await _login(client, doctor.email, DOCTOR_PASSWORD)).status_code == 200

    async def test_unknown_email_gets_the_same_answer(self, client, doctor):
        known = await _request_token(client, doctor.email)
        unknown = await _request_token(client, "nadie@clinica-dental.es")
        assert unknown["message"] == known["message"]
        assert unknown["resetToken"] is None

    async def test_short_password(self, client, doctor):
        token = (await _request_token(client, doctor.email))["resetToken"]
        response = await client.post(
            "/password-reset/complete", json={"token": token, "newPassword": "corta"}
        )
        assert response.status_code == 422

    async def test_token_not_exposed_without_debug_tooling(self, client, doctor, monkeypatch):
        monkeypatch.setattr(app.state, "debug_context", None)
        body = await _request_token(client, doctor.email)
        assert body["success"] is True
        assert body["resetToken"] is None
