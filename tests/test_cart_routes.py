"""
Tests for cart endpoints
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient


def _add(client, headers, product_id, quantity=1):
    return client.post(
        "/api/cart",
        json={"productId": product_id, "quantity": quantity},
        headers=headers,
    )


def _lines(cart):
    return {item["productId"]: item["quantity"] for item in cart["items"]}


class TestGetCart:

    def test_get_or_create_is_idempotent(self, client, auth_headers):
        first = client.get("/api/cart", headers=auth_headers)
        second = client.get("/api/cart", headers=auth_headers)

        assert first.status_code == 200
        assert first.json()["success"] is True
        assert first.json()["data"]["id"] == second.json()["data"]["id"]
        assert first.json()["data"]["items"] == []
        assert first.json()["data"]["userId"] == "user-1"

    def test_each_user_gets_own_cart(self, client, auth_headers, other_auth_headers):
        mine = client.get("/api/cart", headers=auth_headers).json()["data"]
        theirs = client.get("/api/cart", headers=other_auth_headers).json()["data"]

        assert mine["id"] != theirs["id"]


class TestAddToCart:

    def test_add_item(self, client, auth_headers):
        response = _add(client, auth_headers, "p1", 2)

        assert response.status_code == 201
        data = response.json()["data"]
        assert _lines(data) == {"p1": 2}
        assert Decimal(data["total"]) == Decimal("20.00")
        assert data["itemCount"] == 2
        assert data["items"][0]["product"]["name"] == "Desk Lamp"

    def test_add_existing_product_sums_quantity(self, client, auth_headers):
        _add(client, auth_headers, "p1", 2)
        response = _add(client, auth_headers, "p1", 3)

        assert _lines(response.json()["data"]) == {"p1": 5}

    def test_shopping_session(self, client, auth_headers):
        """Add, hit the stock limit, then remove"""
        cart = _add(client, auth_headers, "p1", 2).json()["data"]
        assert (Decimal(cart["total"]), cart["itemCount"]) == (Decimal("20.00"), 2)

        cart = _add(client, auth_headers, "p2", 1).json()["data"]
        assert (Decimal(cart["total"]), cart["itemCount"]) == (Decimal("25.00"), 3)

        rejected = _add(client, auth_headers, "p2", 1)
        assert rejected.status_code == 400
        assert rejected.json()["code"] == "out_of_stock"
        assert "Notebook" in rejected.json()["error"]

        unchanged = client.get("/api/cart", headers=auth_headers).json()["data"]
        assert (Decimal(unchanged["total"]), unchanged["itemCount"]) == (Decimal("25.00"), 3)

        response = client.delete(f"/api/cart/{cart['id']}/p1", headers=auth_headers)
        cart = response.json()["data"]
        assert response.status_code == 200
        assert _lines(cart) == {"p2": 1}
        assert (Decimal(cart["total"]), cart["itemCount"]) == (Decimal("5.00"), 1)

    def test_unknown_product(self, client, auth_headers):
        response = _add(client, auth_headers, "missing")

        assert response.status_code == 404
        assert response.json()["code"] == "product_not_found"

    def test_unavailable_product(self, client, auth_headers):
        response = _add(client, auth_headers, "p4")

        assert response.status_code == 400
        assert response.json()["code"] == "out_of_stock"

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, client, auth_headers, quantity):
        response = _add(client, auth_headers, "p1", quantity)

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_missing_product_id_rejected(self, client, auth_headers):
        response = client.post("/api/cart", json={"quantity": 1}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["success"] is False


class TestUpdateCartItem:

    def test_update_quantity(self, client, auth_headers):
        cart = _add(client, auth_headers, "p1", 1).json()["data"]

        response = client.put(f"/api/cart/{cart['id']}/p1", json={"quantity": 4}, headers=auth_headers)

        assert response.status_code == 200
        assert _lines(response.json()["data"]) == {"p1": 4}
        assert Decimal(response.json()["data"]["total"]) == Decimal("40.00")

    def test_zero_quantity_removes_line(self, client, auth_headers):
        cart = _add(client, auth_headers, "p1", 1).json()["data"]

        response = client.put(f"/api/cart/{cart['id']}/p1", json={"quantity": 0}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["items"] == []
        assert response.json()["message"] == "Item removed from cart"

    def test_update_above_stock_rejected(self, client, auth_headers):
        cart = _add(client, auth_headers, "p1", 1).json()["data"]

        response = client.put(f"/api/cart/{cart['id']}/p1", json={"quantity": 6}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "out_of_stock"

    def test_update_missing_line(self, client, auth_headers):
        cart = client.get("/api/cart", headers=auth_headers).json()["data"]

        response = client.put(f"/api/cart/{cart['id']}/p1", json={"quantity": 1}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_other_users_cart_rejected(self, client, auth_headers, other_auth_headers):
        cart = _add(client, auth_headers, "p1", 1).json()["data"]

        response = client.put(
            f"/api/cart/{cart['id']}/p1",
            json={"quantity": 3},
            headers=other_auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "ownership_error"
        mine = client.get("/api/cart", headers=auth_headers).json()["data"]
        assert _lines(mine) == {"p1": 1}


class TestRemoveAndClear:

    def test_remove_absent_line_is_noop(self, client, auth_headers):
        cart = _add(client, auth_headers, "p1", 1).json()["data"]

        response = client.delete(f"/api/cart/{cart['id']}/p3", headers=auth_headers)

        assert response.status_code == 200
        assert _lines(response.json()["data"]) == {"p1": 1}

    def test_remove_from_other_users_cart(self, client, auth_headers, other_auth_headers):
        cart = _add(client, auth_headers, "p1", 1).json()["data"]

        response = client.delete(f"/api/cart/{cart['id']}/p1", headers=other_auth_headers)

        assert response.json()["code"] == "ownership_error"

    def test_clear(self, client, auth_headers):
        _add(client, auth_headers, "p1", 2)
        cart = _add(client, auth_headers, "p3", 4).json()["data"]

        response = client.delete(f"/api/cart/{cart['id']}", headers=auth_headers)

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["id"] == cart["id"]
        assert data["items"] == []
        assert Decimal(data["total"]) == Decimal("0.00")
        assert data["itemCount"] == 0

    def test_clear_unknown_cart(self, client, auth_headers):
        response = client.delete("/api/cart/does-not-exist", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "ownership_error"


class TestSyncCart:

    def _payload(self, *lines):
        return {
            "items": [
                {"product": {"id": product_id, "name": ""}, "quantity": quantity}
                for product_id, quantity in lines
            ],
            "total": "0",
            "itemCount": sum(quantity for _, quantity in lines),
        }

    def test_sync_replaces_lines(self, client, auth_headers):
        _add(client, auth_headers, "p3", 1)

        response = client.post(
            "/api/cart/sync",
            json=self._payload(("p1", 2), ("p2", 1)),
            headers=auth_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert _lines(data) == {"p1": 2, "p2": 1}
        assert Decimal(data["total"]) == Decimal("25.00")
        assert data["itemCount"] == 3

    def test_sync_recomputes_totals_from_catalog(self, client, auth_headers):
        payload = self._payload(("p1", 1))
        payload["total"] = "999.00"

        data = client.post("/api/cart/sync", json=payload, headers=auth_headers).json()["data"]

        assert Decimal(data["total"]) == Decimal("10.00")

    def test_sync_stock_failure_leaves_cart_untouched(self, client, auth_headers):
        _add(client, auth_headers, "p3", 2)

        response = client.post(
            "/api/cart/sync",
            json=self._payload(("p1", 1), ("p2", 5)),
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "out_of_stock"
        cart = client.get("/api/cart", headers=auth_headers).json()["data"]
        assert _lines(cart) == {"p3": 2}

    def test_sync_unknown_product(self, client, auth_headers):
        response = client.post("/api/cart/sync", json=self._payload(("nope", 1)), headers=auth_headers)

        assert response.status_code == 404

    def test_sync_duplicate_products_rejected(self, client, auth_headers):
        response = client.post(
            "/api/cart/sync",
            json=self._payload(("p1", 1), ("p1", 2)),
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_sync_empty_clears(self, client, auth_headers):
        _add(client, auth_headers, "p1", 1)

        response = client.post("/api/cart/sync", json=self._payload(), headers=auth_headers)

        assert response.json()["data"]["items"] == []

    def test_sync_requires_token(self, client):
        response = client.post("/api/cart/sync", json=self._payload(("p1", 1)))

        assert response.status_code == 401

    def test_sync_storage_failure(self, client, auth_headers, cart_db, monkeypatch):
        def broken_replace_lines(cart_id, lines):
            raise RuntimeError("storage unavailable")

        monkeypatch.setattr(cart_db, "replace_lines", broken_replace_lines)

        response = client.post("/api/cart/sync", json=self._payload(("p1", 1)), headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Failed to sync cart",
            "code": "sync_failed",
        }


class TestUnexpectedErrors:

    def test_unhandled_error_uses_envelope(self, app, product_db, monkeypatch):
        def broken_get_product(product_id):
            raise RuntimeError("catalog unavailable")

        monkeypatch.setattr(product_db, "get_product", broken_get_product)
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/products/p1")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Internal server error",
            "code": "internal_error",
        }
