"""
Integration tests for User and File API endpoints.
Tests authentication, profile updates and search over HTTP.
"""
import pytest


@pytest.mark.asyncio
class TestAuthentication:
    """Test cases for bearer-token authentication."""

    async def test_missing_token(self, unauth_client):
        response = await unauth_client.get("/api/v1/users/me")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_invalid_token(self, unauth_client):
        response = await unauth_client.get(
            "/api/v1/users/me",
            headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    async def test_first_request_creates_local_user(self, unauth_client, auth_headers):
        headers = auth_headers("auth|zoe", name="Zoe Zhang", email="zoe@example.com")

        first = await unauth_client.get("/api/v1/users/me", headers=headers)
        second = await unauth_client.get("/api/v1/users/me", headers=headers)

        assert first.status_code == 200
        assert first.json()["name"] == "Zoe Zhang"
        assert first.json()["email"] == "zoe@example.com"
        assert second.json()["id"] == first.json()["id"]

    async def test_token_maps_to_existing_user(self, unauth_client, auth_headers, alice):
        response = await unauth_client.get("/api/v1/users/me", headers=auth_headers("auth|alice"))

        assert response.status_code == 200
        assert response.json()["id"] == alice.id
        assert response.json()["nickname"] == "ali"


@pytest.mark.asyncio
class TestUserAPI:
    """Test cases for profile and search endpoints."""

    async def test_update_profile(self, as_user, bob):
        async with as_user(bob) as client:
            response = await client.put(
                "/api/v1/users/me/profile",
                json={"nickname": "bobby", "profile_photo_key": "uploads/b/1_me.png"}
            )

        assert response.status_code == 200
        data = response.json()
        assert data["nickname"] == "bobby"
        assert data["profilePhotoKey"] == "uploads/b/1_me.png"
        assert data["profilePhotoUrl"] == "https://files.test/uploads/b/1_me.png"

    async def test_blank_nickname(self, as_user, bob):
        async with as_user(bob) as client:
            response = await client.put("/api/v1/users/me/profile", json={"nickname": "  "})

        assert response.status_code == 400

    async def test_search(self, as_user, alice, carol):
        async with as_user(alice) as client:
            response = await client.get("/api/v1/users/search", params={"q": "caz"})

        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == [carol.id]


@pytest.mark.asyncio
class TestFileAPI:
    """Test cases for the upload handshake."""

    async def test_upload_url(self, as_user, alice, mock_storage):
        async with as_user(alice) as client:
            response = await client.post("/api/v1/files/upload-url", json={"file_name": "map.png"})

        assert response.status_code == 200
        data = response.json()
        assert data["uploadUrl"].startswith("https://files.test/upload/")
        assert data["fileKey"] == f"uploads/{alice.id}/0123456789abcdef_map.png"
        mock_storage.generate_upload_url.assert_called_once_with(alice.id, "map.png")


@pytest.mark.asyncio
class TestHealth:
    """Test cases for health endpoints."""

    async def test_health(self, unauth_client):
        response = await unauth_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
