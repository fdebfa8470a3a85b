from datetime import timedelta

import pytest
from httpx import AsyncClient

from instaclone.core.security import create_access_token
from instaclone.models.follow import UserFollow
from tests.conftest import TEST_PASSWORD, auth_headers


class TestRegister:
    """Account creation through /api/auth/register"""

    @pytest.mark.asyncio
    async def test_register_returns_token_and_profile(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={
            "username": "dana",
            "email": "Dana@Example.com",
            "password": "secret1",
            "password_confirmation": "secret1",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["username"] == "dana"
        assert data["user"]["email"] == "dana@example.com"
        assert "hashed_password" not in data["user"]

        me = await client.get(
            "/api/users/me/profile",
            headers={"Authorization": f"Bearer {data['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["id"] == data["user"]["id"]

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, client: AsyncClient, alice):
        response = await client.post("/api/auth/register", json={
            "username": "someone_else",
            "email": "ALICE@example.com",
            "password": "secret1",
        })
        assert response.status_code == 400
        assert response.json()["message"] == "Email already registered"

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, client: AsyncClient, alice):
        response = await client.post("/api/auth/register", json={
            "username": "alice",
            "email": "another@example.com",
            "password": "secret1",
        })
        assert response.status_code == 400
        assert response.json()["message"] == "Username already taken"

    @pytest.mark.asyncio
    async def test_password_mismatch(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={
            "username": "erin",
            "email": "erin@example.com",
            "password": "secret1",
            "password_confirmation": "secret2",
        })
        assert response.status_code == 422
        assert response.json()["message"] == "Passwords do not match"

    @pytest.mark.asyncio
    async def test_short_password(self, client: AsyncClient):
        response = await client.post("/api/auth/register", json={
            "username": "erin",
            "email": "erin@example.com",
            "password": "123",
        })
        assert response.status_code == 422
        assert response.json()["message"] == "Password must be at least 6 characters"


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_with_valid_credentials(self, client: AsyncClient, alice):
        response = await client.post("/api/auth/login", json={
            "email": "alice@example.com",
            "password": TEST_PASSWORD,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["user"]["id"] == alice.id

    @pytest.mark.asyncio
    async def test_login_with_wrong_password(self, client: AsyncClient, alice):
        response = await client.post("/api/auth/login", json={
            "email": "alice@example.com",
            "password": "not-the-password",
        })
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post("/api/auth/login", json={
            "email": "nobody@example.com",
            "password": TEST_PASSWORD,
        })
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_oauth2_token_form(self, client: AsyncClient, alice):
        response = await client.post("/api/auth/token", data={
            "username": "alice@example.com",
            "password": TEST_PASSWORD,
        })
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"

    @pytest.mark.asyncio
    async def test_login_includes_follow_edges(self, client: AsyncClient, test_db, alice, bob):
        test_db.add(UserFollow(follower_id=alice.id, followed_id=bob.id))
        await test_db.commit()

        response = await client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["user"]["following"] == [bob.id]
        assert response.json()["user"]["followers"] == []


class TestAuthenticationGate:

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/posts/feed")
        assert response.status_code == 401
        assert "message" in response.json()

    @pytest.mark.asyncio
    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/posts/feed", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_for_unknown_user(self, client: AsyncClient):
        token, _ = create_access_token("00000000-0000-0000-0000-000000000000")
        response = await client.get("/api/users/me/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_token_type(self, client: AsyncClient, alice):
        token, _ = create_access_token(alice.id, additional_claims={"type": "refresh"})
        response = await client.get("/api/users/me/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_valid_token(self, client: AsyncClient, alice):
        response = await client.get("/api/users/me/profile", headers=auth_headers(alice))
        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    @pytest.mark.asyncio
    async def test_expired_token(self, client: AsyncClient, alice):
        token, _ = create_access_token(alice.id, expires_delta=timedelta(minutes=-5))
        response = await client.get("/api/users/me/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
