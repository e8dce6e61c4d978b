from conftest import ADMIN_PASSWORD, DOCTOR_PASSWORD


class TestLogin:
    async def test_login_returns_token(self, client, admin_doctor):
        response = await client.post(
            "/auth/login",
            json={"email": "ana.garcia@clinica-dental.es", "password": ADMIN_PASSWORD},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["tokenType"] == "bearer"
        assert body["expiresIn"] > 0
        assert body["doctor"]["isAdmin"] is True
        assert body["doctor"]["name"] == "Ana Garcia"
        assert "passwordHash" not in body["doctor"]

        me = await client.get(
            "/auth/me", headers={"Authorization": f"Bearer {body['accessToken']}"}
        )
        assert me.status_code == 200
        assert me.json()["email"] == "ana.garcia@clinica-dental.es"

    async def test_email_is_case_insensitive(self, client, doctor):
        response = await client.post(
            "/auth/login",
            json={"email": "Luis.Moreno@clinica-dental.es", "password": DOCTOR_PASSWORD},
        )
        assert response.status_code == 200

    async def test_wrong_password(self, client, admin_doctor):
        response = await client.post(
            "/auth/login",
            json={"email": "ana.garcia@clinica-dental.es", "password": "wrong-password"},
        )
        assert response.status_code == 401
        body = response.json()
        assert body["category"] == "permission-denied"
        assert body["status"] == 401
        assert body["message"] == "Invalid email or password"

    async def test_unknown_email(self, client):
        response = await client.post(
            "/auth/login", json={"email": "nadie@clinica-dental.es", "password": "x"}
        )
        assert response.status_code == 401


class TestProtectedRoutes:
    async def test_missing_token(self, client):
        response = await client.get("/patients/")
        assert response.status_code == 401
        assert response.json()["type"] == "UnauthorizedException"

    async def test_garbage_token(self, client):
        response = await client.get(
            "/patients/", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401

    async def test_wrong_scheme(self, client):
        response = await client.get(
            "/patients/", headers={"Authorization": "Basic abc"}
        )
        assert response.status_code == 401


class TestDoctors:
    async def test_admin_registers_doctor(self, client, admin_headers):
        response = await client.post(
            "/doctors/",
            json={
                "firstName": "Marta",
                "lastName": "Vidal",
                "email": "marta.vidal@clinica-dental.es",
                "password": "marta-secret-1",
                "specialization": "Periodoncia",
                "color": "#3366ff",
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Marta Vidal"
        assert body["isAdmin"] is False

        listing = await client.get("/doctors/", headers=admin_headers)
        assert [d["lastName"] for d in listing.json()] == ["Garcia", "Vidal"]

    async def test_duplicate_email(self, client, admin_headers, doctor):
        response = await client.post(
            "/doctors/",
            json={
                "firstName": "Otro",
                "lastName": "Moreno",
                "email": "luis.moreno@clinica-dental.es",
                "password": "another-secret",
            },
            headers=admin_headers,
        )
        assert response.status_code == 409
        assert response.json()["category"] == "conflict"

    async def test_non_admin_cannot_register(self, client, doctor_headers):
        response = await client.post(
            "/doctors/",
            json={
                "firstName": "Marta",
                "lastName": "Vidal",
                "email": "marta.vidal@clinica-dental.es",
                "password": "marta-secret-1",
            },
            headers=doctor_headers,
        )
        assert response.status_code == 403
        assert response.json()["category"] == "permission-denied"

    async def test_doctor_edits_own_profile_only(
        self, client, doctor, doctor_headers, admin_doctor
    ):
        own = await client.patch(
            f"/doctors/{doctor.id}", json={"phone": "611222333"}, headers=doctor_headers
        )
        assert own.status_code == 200
        assert own.json()["phone"] == "611222333"

        other = await client.patch(
            f"/doctors/{admin_doctor.id}", json={"phone": "0"}, headers=doctor_headers
        )
        assert other.status_code == 403

        promote = await client.patch(
            f"/doctors/{doctor.id}", json={"isAdmin": True}, headers=doctor_headers
        )
        assert promote.status_code == 403

    async def test_required_doctor_fields_cannot_be_cleared(self, client, admin_headers, doctor):
        for field in ("isAdmin", "firstName"):
            response = await client.patch(
                f"/doctors/{doctor.id}", json={field: None}, headers=admin_headers
            )
            assert response.status_code == 422, field

        cleared = await client.patch(
            f"/doctors/{doctor.id}", json={"specialization": None}, headers=admin_headers
        )
        assert cleared.status_code == 200
        assert cleared.json()["specialization"] is None
