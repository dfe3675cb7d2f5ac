"""Tests for authentication API endpoints."""

from httpx import AsyncClient

from reelrank.utils.security import create_access_token, decode_access_token

# Password of every user the make_user fixture creates
TEST_PASSWORD = "securepassword123"


class TestRegister:
    """Tests for user registration endpoint."""

    async def test_register_success(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register",
            json={
                "username": "NewUser",
                "email": "NewUser@Example.com",
                "password": "securepassword123",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "newuser"
        assert data["email"] == "newuser@example.com"
        assert data["is_admin"] is False
        assert "hashed_password" not in data

    async def test_register_duplicate_username(self, client: AsyncClient, make_user) -> None:
        await make_user("taken")

        response = await client.post(
            "/api/auth/register",
            json={"username": "taken", "email": "other@example.com", "password": "password1"},
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Username already registered"

    async def test_register_duplicate_email(self, client: AsyncClient, make_user) -> None:
        await make_user("someone")

        response = await client.post(
            "/api/auth/register",
            json={
                "username": "another",
                "email": "someone@example.com",
                "password": "password1",
            },
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Email already registered"

    async def test_register_invalid_username(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register",
            json={"username": "bad name!", "email": "bad@example.com", "password": "password1"},
        )

        assert response.status_code == 422

    async def test_register_short_password(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register",
            json={"username": "shorty", "email": "shorty@example.com", "password": "abc"},
        )

        assert response.status_code == 422


class TestLogin:
    """Tests for login endpoint."""

    async def test_login_with_username(self, client: AsyncClient, make_user) -> None:
        user = await make_user("loginuser")

        response = await client.post(
            "/api/auth/login", json={"username": "loginuser", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert decode_access_token(data["access_token"])["sub"] == str(user.id)

    async def test_login_with_email(self, client: AsyncClient, make_user) -> None:
        await make_user("emailuser")

        response = await client.post(
            "/api/auth/login",
            json={"username": "EmailUser@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient, make_user) -> None:
        await make_user("wrongpass")

        response = await client.post(
            "/api/auth/login", json={"username": "wrongpass", "password": "not-it"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    async def test_login_unknown_user(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/login", json={"username": "ghost", "password": TEST_PASSWORD}
        )

        assert response.status_code == 401


class TestCurrentUser:
    """Tests for /me and profile updates."""

    async def test_me(self, client: AsyncClient, make_user, auth_headers) -> None:
        user = await make_user("meuser")

        response = await client.get("/api/auth/me", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["username"] == "meuser"

    async def test_me_without_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/auth/me")

        assert response.status_code == 401

    async def test_me_with_invalid_token(self, client: AsyncClient) -> None:
        response = await client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401

    async def test_me_with_deleted_user(self, client: AsyncClient) -> None:
        token = create_access_token(data={"sub": "9999"})

        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    async def test_update_profile(self, client: AsyncClient, make_user, auth_headers) -> None:
        user = await make_user("oldname")

        response = await client.put(
            "/api/auth/profile",
            headers=auth_headers(user),
            json={"username": "NewName", "profile_pic": "https://example.com/me.png"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "newname"
        assert data["profile_pic"] == "https://example.com/me.png"

    async def test_update_profile_taken_username(
        self, client: AsyncClient, make_user, auth_headers
    ) -> None:
        user = await make_user("first")
        await make_user("second")

        response = await client.put(
            "/api/auth/profile", headers=auth_headers(user), json={"username": "second"}
        )

        assert response.status_code == 409
