"""
Test author endpoints.
"""
import pytest
from httpx import AsyncClient

from library_api.common.pagination import MAX_PAGE
from library_api.core.db import generate_id

pytestmark = pytest.mark.asyncio


async def _create_author(client: AsyncClient, data: dict) -> dict:
    response = await client.post("/api/authors", json=data)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestAuthorEndpoints:
    """Test author management API endpoints."""

    async def test_create_author(self, client: AsyncClient, author_data: dict):
        response = await client.post("/api/authors", json=author_data)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Author created successfully"
        data = body["data"]
        assert data["name"] == "Test"
        assert data["birthDate"] == "1980-01-01"
        assert data["isActive"] is True
        assert data["socialMedia"] == {
            "twitter": None,
            "instagram": None,
            "facebook": None,
            "linkedin": None,
        }
        assert "createdAt" in data

    async def test_create_author_validation(self, client: AsyncClient):
        response = await client.post("/api/authors", json={"name": "x", "email": "bad"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert body["errors"] == [
            "Bio is required",
            "Birth date is required",
            "Nationality is required",
            "Invalid email format",
        ]

    async def test_duplicate_email(self, client: AsyncClient, author_data: dict):
        await _create_author(client, {**author_data, "email": "a@b.co"})

        response = await client.post("/api/authors", json={**author_data, "email": "a@b.co"})

        assert response.status_code == 409
        assert response.json()["message"] == "Author with this email already exists"

    async def test_list_authors_with_pagination(self, client: AsyncClient, author_data: dict):
        for i in range(3):
            await _create_author(client, {**author_data, "name": f"Author {i}"})

        response = await client.get("/api/authors", params={"page": 2, "limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert [a["name"] for a in body["data"]] == ["Author 2"]
        assert body["meta"] == {"page": 2, "limit": 2, "total": 3, "totalPages": 2}
        assert body["data"][0]["bookCount"] == 0
        assert body["data"][0]["bookTitles"] == []

    async def test_limit_is_clamped(self, client: AsyncClient, author_data: dict):
        await _create_author(client, author_data)

        response = await client.get("/api/authors", params={"limit": 500, "page": 0})

        assert response.status_code == 200
        assert response.json()["meta"]["limit"] == 50
        assert response.json()["meta"]["page"] == 1

    async def test_page_beyond_range_rejected(self, client: AsyncClient):
        response = await client.get("/api/authors", params={"page": str(10**20)})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0].startswith("query.page")

    async def test_last_allowed_page_is_empty(self, client: AsyncClient, author_data: dict):
        await _create_author(client, author_data)

        response = await client.get("/api/authors", params={"page": MAX_PAGE, "limit": 50})

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["meta"]["total"] == 1

    async def test_invalid_sort_field(self, client: AsyncClient):
        response = await client.get("/api/authors", params={"sortBy": "password"})
        assert response.status_code == 400

    async def test_invalid_sort_order(self, client: AsyncClient):
        response = await client.get("/api/authors", params={"sortOrder": "sideways"})
        assert response.status_code == 422

    async def test_get_author(self, client: AsyncClient, author_data: dict):
        author = await _create_author(client, author_data)

        response = await client.get(f"/api/authors/{author['id']}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == author["id"]
        assert data["books"] == []

    async def test_get_author_not_found(self, client: AsyncClient):
        for author_id in ("not-an-id", generate_id()):
            response = await client.get(f"/api/authors/{author_id}")
            assert response.status_code == 404
            assert response.json()["message"] == "Author not found"

    async def test_update_author(self, client: AsyncClient, author_data: dict):
        author = await _create_author(client, author_data)

        response = await client.put(
            f"/api/authors/{author['id']}", json={"website": "https://example.com"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["website"] == "https://example.com"
        assert data["name"] == "Test"

    async def test_update_author_blank_name(self, client: AsyncClient, author_data: dict):
        author = await _create_author(client, author_data)

        response = await client.put(f"/api/authors/{author['id']}", json={"name": "  "})

        assert response.status_code == 400
        assert response.json()["errors"] == ["Name cannot be empty"]

    async def test_add_award(self, client: AsyncClient, author_data: dict):
        author = await _create_author(client, author_data)

        response = await client.post(
            f"/api/authors/{author['id']}/awards", json={"award": "Hugo Award"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["awards"] == ["Hugo Award"]

    async def test_delete_author(self, client: AsyncClient, author_data: dict):
        author = await _create_author(client, author_data)

        response = await client.delete(f"/api/authors/{author['id']}")

        assert response.status_code == 200
        assert response.json()["data"] == {
            "message": "Author deleted successfully",
            "deletedAuthor": "Test",
        }
        response = await client.get(f"/api/authors/{author['id']}")
        assert response.status_code == 404
