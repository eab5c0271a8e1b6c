"""Tests d'intégration end-to-end pour l'authentification et les rôles.

Workflow testé:
1. Inscription (utilisateur + enregistrement de rôle, token émis)
2. Connexion
3. Refus d'un endpoint réservé à un autre rôle (403)
4. Rejet d'un token valide dont l'utilisateur a disparu (401)
"""

import asyncio
import time
from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy import delete, select

from genedetective.core.data_access import DataAccess
from genedetective.core.tokens import issue_token, verify_token
from genedetective.models import patients_table, users_table


@pytest.mark.integration
@pytest.mark.asyncio
async def test_register_login_authorize_and_revoke_by_deletion(
    client, session_maker, bearer
):
    """Test E2E: register → login → 403 sur rôle → 401 après suppression."""
    # 1. Inscription
    response = await client.post(
        "/api/auth/register",
        json={
            "fullName": "Ada Lovelace",
            "email": "a@x.com",
            "password": "Secret1!",
            "dateOfBirth": "1990-12-10",
            "userRole": 1,
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    assert body["user"]["userRole"] == 1
    assert "passwordHash" not in body["user"]

    async with session_maker() as session:
        dal = DataAccess(session)
        patients = await dal.fetch_all(select(patients_table.c.user_id))
    assert patients == [{"user_id": body["user"]["id"]}]

    # 2. Connexion
    response = await client.post(
        "/api/auth/login", json={"email": "a@x.com", "password": "Secret1!"}
    )
    assert response.status_code == 200
    login = response.json()
    assert login["message"] == "Login successful"
    assert login["user"]["userRole"] == 1
    token = login["token"]
    assert verify_token(token).user_id == body["user"]["id"]

    # 3. Endpoint réservé aux conseillers
    response = await client.post(
        "/api/analysis/recommendations",
        json={"patientId": 1, "recommendations": ["x"]},
        headers=bearer(token),
    )
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied. Insufficient permissions."}

    # 4. Suppression directe de la ligne users: le token reste signé mais l'identité disparaît
    async with session_maker() as session:
        await DataAccess(session).mutate(
            delete(users_table).where(users_table.c.id == body["user"]["id"])
        )

    response = await client.get("/api/auth/profile", headers=bearer(token))
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token."}


@pytest.mark.integration
class TestRegister:
    @pytest.mark.asyncio
    async def test_default_role_is_patient(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"fullName": "Ada", "email": "a@x.com", "password": "Secret1!"},
        )

        assert response.status_code == 201
        assert response.json()["user"]["userRole"] == 1

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client, register):
        await register("a@x.com")

        response = await client.post(
            "/api/auth/register",
            json={"fullName": "Other", "email": "a@x.com", "password": "x", "userRole": 2},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "User with this email already exists"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "a@x.com", "password": "Secret1!"},
            {"fullName": "Ada", "password": "Secret1!"},
            {"fullName": "Ada", "email": "a@x.com"},
            {"fullName": "Ada", "email": "not-an-email", "password": "Secret1!"},
            {"fullName": "Ada", "email": "a@x.com", "password": "Secret1!", "userRole": 3},
        ],
    )
    async def test_invalid_payload(self, client, payload):
        response = await client.post("/api/auth/register", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing or invalid field"

    @pytest.mark.asyncio
    async def test_future_birth_date_rejected(self, client):
        response = await client.post(
            "/api/auth/register",
            json={
                "fullName": "Ada",
                "email": "a@x.com",
                "password": "Secret1!",
                "dateOfBirth": "2999-01-01",
            },
        )

        assert response.status_code == 400


@pytest.mark.integration
class TestLogin:
    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_are_indistinguishable(
        self, client, register
    ):
        await register("a@x.com")

        wrong_password = await client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "nope"}
        )
        unknown_email = await client.post(
            "/api/auth/login", json={"email": "nobody@x.com", "password": "Secret1!"}
        )

        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json() == {
            "error": "Invalid email or password"
        }

    @pytest.mark.asyncio
    async def test_missing_field(self, client):
        response = await client.post("/api/auth/login", json={"email": "a@x.com"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_password_check_runs_off_the_event_loop(self, client):
        """Le hachage tourne dans un thread: les autres requêtes continuent d'avancer."""
        gaps = []
        done = asyncio.Event()

        def slow_dummy_verify():
            time.sleep(0.3)

        async def ticker():
            last = time.perf_counter()
            while not done.is_set():
                await asyncio.sleep(0.01)
                now = time.perf_counter()
                gaps.append(now - last)
                last = now

        async def login():
            try:
                return await client.post(
                    "/api/auth/login", json={"email": "nobody@x.com", "password": "Secret1!"}
                )
            finally:
                done.set()

        with patch(
            "genedetective.services.user_service.dummy_verify", side_effect=slow_dummy_verify
        ) as mock_dummy:
            _, response = await asyncio.gather(ticker(), login())

        assert response.status_code == 400
        mock_dummy.assert_called_once()
        assert gaps
        assert max(gaps) < 0.1


@pytest.mark.integration
class TestTokenRejection:
    @pytest.mark.asyncio
    async def test_no_token(self, client):
        response = await client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json() == {"error": "Access denied. No token provided."}

    @pytest.mark.asyncio
    async def test_non_bearer_scheme(self, client):
        response = await client.get("/api/auth/profile", headers={"Authorization": "Basic abc"})

        assert response.status_code == 401
        assert response.json() == {"error": "Access denied. No token provided."}

    @pytest.mark.asyncio
    async def test_expired_token(self, client, register, bearer):
        user = (await register("a@x.com"))["user"]
        token = issue_token(user["id"], user["email"], 1, expires_delta=timedelta(seconds=-1))

        response = await client.get("/api/auth/profile", headers=bearer(token))

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token."}

    @pytest.mark.asyncio
    async def test_tampered_token(self, client, register, bearer):
        token = (await register("a@x.com"))["token"]
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, ("A" if signature[0] != "A" else "B") + signature[1:]])

        response = await client.get("/api/auth/profile", headers=bearer(tampered))

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token."}

    @pytest.mark.asyncio
    async def test_role_claim_is_not_trusted(self, client, register, bearer):
        """Un token revendiquant un autre rôle n'élève pas les droits."""
        user = (await register("a@x.com"))["user"]
        token = issue_token(user["id"], user["email"], 2)

        response = await client.post(
            "/api/analysis/recommendations",
            json={"patientId": 1, "recommendations": "x"},
            headers=bearer(token),
        )

        assert response.status_code == 403


@pytest.mark.integration
class TestProfile:
    @pytest.mark.asyncio
    async def test_patient_profile(self, client, register, bearer):
        token = (await register("a@x.com", full_name="Ada Lovelace"))["token"]

        response = await client.get("/api/auth/profile", headers=bearer(token))

        assert response.status_code == 200
        profile = response.json()["user"]
        assert profile["fullName"] == "Ada Lovelace"
        assert profile["userRole"] == 1
        assert "passwordHash" not in profile

    @pytest.mark.asyncio
    async def test_counselor_profile(self, client, register, bearer):
        token = (await register("c@x.com", role=2))["token"]

        response = await client.get("/api/auth/profile", headers=bearer(token))

        assert response.status_code == 200
        profile = response.json()["user"]
        assert profile["userRole"] == 2
        assert profile["specialization"] == ""


@pytest.mark.integration
@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
    assert response.json()["message"] == "GeneDetective API is running"


@pytest.mark.integration
class TestRouting:
    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, client):
        response = await client.patch("/api/auth/login", json={})

        assert response.status_code == 405
        assert response.json() == {"error": "Method Not Allowed"}
