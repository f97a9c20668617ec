"""
HTTP API tests
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from greyn_cart.infrastructure.container.dependency_injection import DependencyContainer
from greyn_cart.infrastructure.database.models import Cart as SQLCart
from greyn_cart.presentation.api.app import create_app, status_for_error_code


@pytest.fixture
def container(test_settings, db_manager):
    return DependencyContainer(config=test_settings, db_manager=db_manager)


@pytest.fixture
def client(container):
    return TestClient(create_app(container))


class TestHealthEndpoint:
    """Test health reporting"""

    def test_health_ok(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["database"]["status"] == "healthy"
        assert body["cart_storage_backend"] == "database"
        assert "X-Request-ID" in response.headers

    def test_health_degraded(self, container):
        container.db_manager = MagicMock()
        container.db_manager.health_check.return_value = {"status": "unhealthy", "error": "down"}

        response = TestClient(create_app(container)).get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"


class TestProjectEndpoints:
    """Test catalog endpoints"""

    def test_list_projects(self, client):
        response = client.get("/api/projects")

        assert response.status_code == 200
        body = response.json()
        assert len(body["projects"]) == 6
        assert body["projects"][0]["price_per_unit"] == "15.50"
        assert body["countries"][0] == "All Countries"

    def test_list_projects_filtered(self, client):
        response = client.get(
            "/api/projects", params={"category": "Renewable Energy", "min_price": "23"}
        )
        assert [p["id"] for p in response.json()["projects"]] == ["4"]

    def test_invalid_price_range(self, client):
        response = client.get("/api/projects", params={"min_price": "30", "max_price": "10"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_get_project(self, client):
        assert client.get("/api/projects/3").json()["name"] == "Mangrove Restoration Program"

        response = client.get("/api/projects/404")
        assert response.status_code == 404
        assert response.json()["error_code"] == "PROJECT_NOT_FOUND"


class TestCartEndpoints:
    """Test the cart workflow over HTTP"""

    def test_empty_cart(self, client):
        response = client.get("/api/cart")

        assert response.status_code == 200
        cart = response.json()["cart"]
        assert cart["items"] == []
        assert cart["total"] == "0.00"
        assert cart["version"] == 0

    def test_add_update_remove(self, client):
        response = client.post("/api/cart/items", json={"project_id": "2"})
        assert response.status_code == 200
        assert response.json()["added"] is True

        response = client.patch("/api/cart/items/2", json={"quantity": 3})
        cart = response.json()["cart"]
        assert cart["items"][0]["quantity"] == 3
        assert cart["subtotal"] == "66.00"
        assert cart["tax"] == "3.30"
        assert cart["total"] == "69.30"

        response = client.delete("/api/cart/items/2")
        assert response.status_code == 200
        assert response.json()["cart"]["items"] == []

    def test_duplicate_add(self, client):
        client.post("/api/cart/items", json={"project_id": "1"})
        response = client.post("/api/cart/items", json={"project_id": "1"})

        body = response.json()
        assert body["added"] is False
        assert body["cart"]["items"][0]["quantity"] == 1

    def test_quantity_is_clamped(self, client):
        client.post("/api/cart/items", json={"project_id": "1"})
        response = client.patch("/api/cart/items/1", json={"quantity": 99999})

        assert response.json()["cart"]["items"][0]["quantity"] == 10000

    def test_unknown_project(self, client):
        response = client.post("/api/cart/items", json={"project_id": "999"})
        assert response.status_code == 404

    def test_update_missing_item(self, client):
        response = client.patch("/api/cart/items/1", json={"quantity": 2})
        assert response.status_code == 404
        assert response.json()["error_code"] == "CART_ITEM_NOT_FOUND"

    def test_non_integer_quantity(self, client):
        client.post("/api/cart/items", json={"project_id": "1"})
        response = client.patch("/api/cart/items/1", json={"quantity": "lots"})
        assert response.status_code == 422

    def test_clear_requires_confirmation(self, client):
        client.post("/api/cart/items", json={"project_id": "1"})

        response = client.delete("/api/cart")
        assert response.status_code == 400
        assert response.json()["error_code"] == "CONFIRMATION_REQUIRED"
        assert len(client.get("/api/cart").json()["cart"]["items"]) == 1

        response = client.delete("/api/cart", params={"confirm": "true"})
        assert response.status_code == 200
        assert client.get("/api/cart").json()["cart"]["items"] == []

    def test_cart_key_header(self, client):
        client.post("/api/cart/items", json={"project_id": "1"}, headers={"X-Cart-Key": "alice"})

        assert client.get("/api/cart").json()["cart"]["items"] == []
        alice = client.get("/api/cart", headers={"X-Cart-Key": "alice"}).json()["cart"]
        assert [item["project_id"] for item in alice["items"]] == ["1"]

    def test_invalid_cart_key(self, client):
        response = client.get("/api/cart", headers={"X-Cart-Key": "../secrets"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_portfolio_stats(self, client):
        client.post("/api/cart/items", json={"project_id": "5"})
        client.patch("/api/cart/items/5", json={"quantity": 4})

        stats = client.get("/api/cart/stats").json()
        assert stats["total_credits"] == 4
        assert stats["portfolio_value"] == "48.00"

    def test_checkout_review(self, client):
        assert client.get("/api/cart/checkout-review").json()["ready"] is False

        client.post("/api/cart/items", json={"project_id": "1"})
        review = client.get("/api/cart/checkout-review").json()
        assert review["ready"] is True
        assert review["issues"] == []

    def test_damaged_stored_cart_is_still_served(self, client, db_manager):
        """Unreadable lines are dropped instead of failing every request"""
        session = db_manager.get_session()
        session.add(
            SQLCart(
                storage_key="damaged",
                items=[
                    {"id": "1", "quantity": 1, "unit_price": "15.50", "name": "A", "location": 42},
                    {"id": "2", "quantity": 1, "unit_price": "22.00", "name": "B", "currency": "EUR"},
                    {"id": "x" * 70, "quantity": 1, "unit_price": "5.00", "name": "C"},
                ],
                schema_version=2,
                version=3,
            )
        )
        session.commit()
        session.close()
        headers = {"X-Cart-Key": "damaged"}

        response = client.get("/api/cart", headers=headers)
        assert response.status_code == 200
        items = response.json()["cart"]["items"]
        assert [item["project_id"] for item in items] == ["1"]
        assert items[0]["location"] == "42"

        review = client.get("/api/cart/checkout-review", headers=headers)
        assert review.status_code == 200
        assert review.json()["ready"] is True

        stats = client.get("/api/cart/stats", headers=headers)
        assert stats.status_code == 200
        assert stats.json()["portfolio_value"] == "15.50"


class TestErrorMapping:
    """Test error code to HTTP status mapping"""

    @pytest.mark.parametrize(
        "error_code,expected",
        [
            ("VALIDATION_ERROR", 400),
            ("PROJECT_NOT_FOUND", 404),
            ("CART_ITEM_NOT_FOUND", 404),
            ("PROJECT_UNAVAILABLE", 409),
            ("CART_CONFLICT", 409),
            ("STORAGE_ERROR", 503),
            ("SOMETHING_ELSE", 500),
        ],
    )
    def test_status_for_error_code(self, error_code, expected):
        assert status_for_error_code(error_code) == expected
