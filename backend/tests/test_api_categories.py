"""Tests for categories API endpoints."""

import pytest


class TestCategoriesAPI:
    """Test categories CRUD endpoints."""

    def test_list_categories(self, client, auth_headers, sample_todo):
        """Should return categories with their todo counts."""
        response = client.get("/api/v1/categories", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Work"
        assert data["items"][0]["todo_count"] == 1

    def test_list_is_owner_scoped(self, client, other_headers, sample_category):
        response = client.get("/api/v1/categories", headers=other_headers)
        assert response.json()["total"] == 0

    def test_create_category(self, client, auth_headers, publisher):
        """Should create a new category."""
        response = client.post("/api/v1/categories", json={
            "name": "  Errands ",
            "color": "#ff0000",
            "icon": "star"
        }, headers=auth_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Errands"
        assert data["color"] == "#ff0000"
        assert data["is_default"] is False
        assert data["todo_count"] == 0
        assert publisher.events[0][1]["entity"] == "category"

    def test_create_duplicate_name(self, client, auth_headers, sample_category):
        response = client.post("/api/v1/categories", json={
            "name": "Work",
            "color": "#000",
        }, headers=auth_headers)
        assert response.status_code == 422
        assert response.json()["error"] == "ConstraintViolation"

    def test_create_bad_color(self, client, auth_headers):
        response = client.post("/api/v1/categories", json={
            "name": "Bad",
            "color": "blue",
        }, headers=auth_headers)
        assert response.status_code == 422

    def test_get_category(self, client, auth_headers, sample_category):
        response = client.get(f"/api/v1/categories/{sample_category.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["icon"] == "work"

    def test_get_category_not_found(self, client, other_headers, sample_category):
        response = client.get(f"/api/v1/categories/{sample_category.id}", headers=other_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_update_category(self, client, auth_headers, sample_category):
        """Should update category."""
        response = client.patch(f"/api/v1/categories/{sample_category.id}", json={
            "name": "Job"
        }, headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Job"
        assert data["color"] == "#FF9800"

    def test_rename_propagates_to_todo_projection(self, client, auth_headers, sample_todo, sample_category):
        client.put(f"/api/v1/categories/{sample_category.id}", json={
            "name": "Job",
            "color": "#000000",
        }, headers=auth_headers)

        todo = client.get(f"/api/v1/todos/{sample_todo.id}", headers=auth_headers).json()
        assert todo["category"]["name"] == "Job"
        assert todo["category"]["color"] == "#000000"

    def test_delete_category(self, client, auth_headers, sample_category):
        """Should delete category."""
        response = client.delete(f"/api/v1/categories/{sample_category.id}", headers=auth_headers)
        assert response.status_code == 204

        response = client.get(f"/api/v1/categories/{sample_category.id}", headers=auth_headers)
        assert response.status_code == 404

    def test_delete_non_empty_category(self, client, auth_headers, sample_todo, sample_category):
        response = client.delete(f"/api/v1/categories/{sample_category.id}", headers=auth_headers)
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "InvalidOperation"
        assert "1 todo(s)" in body["message"]


class TestDefaultCategoriesAPI:

    def test_create_defaults(self, client, auth_headers):
        response = client.post("/api/v1/categories/defaults", headers=auth_headers)
        assert response.status_code == 201
        data = response.json()
        assert [c["name"] for c in data] == ["General", "Work", "Personal", "Shopping"]

        listed = client.get("/api/v1/categories", headers=auth_headers).json()
        assert listed["items"][0]["is_default"] is True

    def test_defaults_only_once(self, client, auth_headers):
        client.post("/api/v1/categories/defaults", headers=auth_headers)
        response = client.post("/api/v1/categories/defaults", headers=auth_headers)
        assert response.status_code == 409

    @pytest.mark.parametrize("method", ["patch", "delete"])
    def test_default_category_protected(self, client, auth_headers, method):
        created = client.post("/api/v1/categories/defaults", headers=auth_headers).json()
        general = created[0]

        url = f"/api/v1/categories/{general['id']}"
        if method == "patch":
            response = client.patch(url, json={"name": "Misc"}, headers=auth_headers)
        else:
            response = client.delete(url, headers=auth_headers)
        assert response.status_code == 409
