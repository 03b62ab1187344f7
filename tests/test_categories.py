"""
Tests for Categories API Endpoints

Tests for /api/categories endpoints.
"""

import uuid

from fastapi import status


class TestListCategories:
    """Tests for GET /api/categories endpoint."""

    def test_list_categories_empty(self, client):
        response = client.get("/api/categories")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "count": 0, "data": []}

    def test_list_categories_ordered_by_name(self, client, sample_category, second_category):
        response = client.get("/api/categories")

        body = response.json()
        assert body["count"] == 2
        assert [c["name"] for c in body["data"]] == ["Classics", "Science Fiction"]

    def test_list_categories_books_are_ids(self, client, sample_book):
        response = client.get("/api/categories")

        assert response.json()["data"][0]["books"] == [str(sample_book.id)]


class TestGetCategory:
    """Tests for GET /api/categories/{category_id} endpoint."""

    def test_get_category_success(self, client, sample_category):
        response = client.get(f"/api/categories/{sample_category.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["id"] == str(sample_category.id)
        assert data["name"] == "Science Fiction"
        assert data["books"] == []

    def test_get_category_not_found(self, client):
        response = client.get(f"/api/categories/{uuid.uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Category not found"

    def test_get_category_invalid_id(self, client):
        response = client.get("/api/categories/12345")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid category ID"


class TestCreateCategory:
    """Tests for POST /api/categories endpoint."""

    def test_create_category(self, client):
        response = client.post("/api/categories", json={"name": " Mystery "})

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["name"] == "Mystery"
        assert data["books"] == []

    def test_create_category_padded_name_at_length_limit(self, client):
        name = "C" * 100
        response = client.post("/api/categories", json={"name": f" {name} "})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["name"] == name

    def test_create_category_duplicate_name(self, client, sample_category):
        """Test that duplicate names are rejected and nothing is created."""
        response = client.post("/api/categories", json={"name": "Science Fiction"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            "success": False,
            "error": "Category name already exists",
        }

        listing = client.get("/api/categories").json()
        assert listing["count"] == 1

    def test_create_category_blank_name(self, client):
        response = client.post("/api/categories", json={"name": "  "})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["success"] is False


class TestUpdateCategory:
    """Tests for PUT /api/categories/{category_id} endpoint."""

    def test_rename_category(self, client, sample_category):
        response = client.put(
            f"/api/categories/{sample_category.id}",
            json={"name": "Sci-Fi"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["name"] == "Sci-Fi"

    def test_rename_to_existing_name(self, client, sample_category, second_category):
        response = client.put(
            f"/api/categories/{second_category.id}",
            json={"name": "Science Fiction"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Category name already exists"

        unchanged = client.get(f"/api/categories/{second_category.id}")
        assert unchanged.json()["data"]["name"] == "Classics"

    def test_update_category_not_found(self, client):
        response = client.put(f"/api/categories/{uuid.uuid4()}", json={"name": "Poetry"})

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteCategory:
    """Tests for DELETE /api/categories/{category_id} endpoint."""

    def test_delete_category_success(self, client, sample_category):
        category_id = str(sample_category.id)

        response = client.delete(f"/api/categories/{category_id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Category deleted successfully"
        assert client.get(f"/api/categories/{category_id}").status_code == 404

    def test_delete_category_releases_books(
        self, client, sample_book, sample_category, second_category
    ):
        """The book loses the category and is otherwise unaffected."""
        book_id = str(sample_book.id)
        client.put(
            f"/api/books/{book_id}",
            json={"categories": [str(sample_category.id), str(second_category.id)]},
        )

        response = client.delete(f"/api/categories/{sample_category.id}")
        assert response.status_code == status.HTTP_200_OK

        book = client.get(f"/api/books/{book_id}").json()["data"]
        assert [c["name"] for c in book["categories"]] == ["Classics"]
        assert book["title"] == "Dune"
        assert book["author"]["name"] == "Frank Herbert"

    def test_delete_category_not_found(self, client):
        response = client.delete(f"/api/categories/{uuid.uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
