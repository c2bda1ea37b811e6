"""Integration tests for Apify keys API."""

from collections.abc import Callable
from uuid import uuid4

import pytest
from httpx import AsyncClient

from infrastructure.auth.provider import TokenUser

API_KEY = "apify_api_0123456789abcd"


class TestApifyKeysAPI:
    """Integration tests for Apify key CRUD."""

    @pytest.mark.asyncio
    async def test_create_key_masks_token(self, authenticated_client: AsyncClient):
        """Test POST /api/v1/apify-keys."""
        response = await authenticated_client.post(
            "/api/v1/apify-keys",
            json={"key_name": "  Main  ", "api_key": API_KEY},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["key_name"] == "Main"
        assert data["masked_key"].endswith("abcd")
        assert data["is_active"] is True
        assert "api_key" not in data
        assert API_KEY not in response.text

    @pytest.mark.asyncio
    async def test_create_duplicate_name(self, authenticated_client: AsyncClient):
        """Test creating a key with a name already in use returns 409."""
        body = {"key_name": "Main", "api_key": API_KEY}
        await authenticated_client.post("/api/v1/apify-keys", json=body)

        response = await authenticated_client.post("/api/v1/apify-keys", json=body)

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_APIFY_KEY"

    @pytest.mark.asyncio
    async def test_blank_token_is_rejected(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            "/api/v1/apify-keys", json={"key_name": "Main", "api_key": "   "}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_keys(self, authenticated_client: AsyncClient):
        """Test GET /api/v1/apify-keys."""
        for name in ("First", "Second"):
            await authenticated_client.post(
                "/api/v1/apify-keys", json={"key_name": name, "api_key": API_KEY}
            )

        response = await authenticated_client.get("/api/v1/apify-keys")

        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["total"] == 2
        assert {k["key_name"] for k in body["data"]} == {"First", "Second"}

    @pytest.mark.asyncio
    async def test_deactivate_key(self, authenticated_client: AsyncClient):
        """Test PATCH /api/v1/apify-keys/{id}."""
        create = await authenticated_client.post(
            "/api/v1/apify-keys", json={"key_name": "Main", "api_key": API_KEY}
        )
        key_id = create.json()["data"]["id"]

        response = await authenticated_client.patch(
            f"/api/v1/apify-keys/{key_id}", json={"is_active": False}
        )

        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is False
        assert response.json()["data"]["key_name"] == "Main"

    @pytest.mark.asyncio
    async def test_delete_key(self, authenticated_client: AsyncClient):
        """Test DELETE /api/v1/apify-keys/{id}."""
        create = await authenticated_client.post(
            "/api/v1/apify-keys", json={"key_name": "Main", "api_key": API_KEY}
        )
        key_id = create.json()["data"]["id"]

        response = await authenticated_client.delete(f"/api/v1/apify-keys/{key_id}")
        listing = await authenticated_client.get("/api/v1/apify-keys")

        assert response.status_code == 204
        assert listing.json()["data"] == []

    @pytest.mark.asyncio
    async def test_delete_missing_key(self, authenticated_client: AsyncClient):
        response = await authenticated_client.delete(f"/api/v1/apify-keys/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "APIFY_KEY_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_keys_are_private_to_owner(
        self,
        authenticated_client: AsyncClient,
        client: AsyncClient,
        make_auth_headers: Callable[[TokenUser], dict[str, str]],
        other_user: TokenUser,
    ):
        create = await authenticated_client.post(
            "/api/v1/apify-keys", json={"key_name": "Main", "api_key": API_KEY}
        )
        key_id = create.json()["data"]["id"]
        headers = make_auth_headers(other_user)

        listing = await client.get("/api/v1/apify-keys", headers=headers)
        update = await client.patch(
            f"/api/v1/apify-keys/{key_id}", json={"is_active": False}, headers=headers
        )

        assert listing.json()["data"] == []
        assert update.status_code == 404
