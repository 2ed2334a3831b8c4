"""
Test contact endpoints and the meta routes.
"""
import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestContactEndpoints:
    """Test contacts CRUD over HTTP."""

    async def test_crud(self, client: AsyncClient, contact_data: dict):
        response = await client.post("/contacts", json=contact_data)
        assert response.status_code == 201
        contact = response.json()["data"]
        assert contact["firstName"] == "Alice"
        assert contact["favoriteColor"] == "Purple"

        response = await client.get(f"/contacts/{contact['id']}")
        assert response.status_code == 200

        response = await client.put(f"/contacts/{contact['id']}", json={"lastName": "Cooper"})
        assert response.status_code == 200
        assert response.json()["data"]["lastName"] == "Cooper"

        response = await client.delete(f"/contacts/{contact['id']}")
        assert response.status_code == 200
        assert response.json()["data"]["deletedContact"] == "Alice Cooper"

        response = await client.get(f"/contacts/{contact['id']}")
        assert response.status_code == 404

    async def test_list_contacts(self, client: AsyncClient, contact_data: dict):
        await client.post("/contacts", json=contact_data)

        response = await client.get("/contacts", params={"favoriteColor": "purp"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Contacts retrieved successfully"
        assert body["meta"]["total"] == 1

    async def test_invalid_contact(self, client: AsyncClient, contact_data: dict):
        response = await client.post("/contacts", json={**contact_data, "email": "nope"})

        assert response.status_code == 400
        assert response.json()["errors"] == ["Invalid email format"]

    async def test_duplicate_contact_email(self, client: AsyncClient, contact_data: dict):
        await client.post("/contacts", json=contact_data)

        response = await client.post("/contacts", json=contact_data)
        assert response.status_code == 409


class TestMetaEndpoints:
    """Test the root and health routes."""

    async def test_root(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["books"] == "/api/books"

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    async def test_request_id_header(self, client: AsyncClient):
        response = await client.get("/")
        assert "X-Request-ID" in response.headers
