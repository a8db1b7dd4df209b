"""
Tests for diner order submission and tracking endpoints.
"""

from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from tests.conftest import selection


def _add_burger(client, headers, seed_dish, seed_groups):
    return client.post(
        "/api/diner/cart/items",
        headers=headers,
        json={
            "dishId": seed_dish.id,
            "selections": [
                selection(seed_groups, "Cooking", "Well done"),
                selection(seed_groups, "Extras", "Bacon"),
            ],
        },
    )


class TestSubmit:

    def test_submit_clears_cart(self, client, table_headers, seed_dish, seed_groups):
        _add_burger(client, table_headers, seed_dish, seed_groups)

        response = client.post("/api/diner/orders", headers=table_headers, json={"expectedTotal": 5500})
        assert response.status_code == 201
        data = response.json()
        assert data["orderId"] > 0
        assert data["status"] == "received"
        assert data["total"] == 5500
        assert data["createdAt"]

        cart = client.get("/api/diner/cart", headers=table_headers).json()
        assert cart["lines"] == []

    def test_submit_without_body(self, client, table_headers, seed_plain_dish):
        client.post("/api/diner/cart/items", headers=table_headers, json={"dishId": seed_plain_dish.id})
        response = client.post("/api/diner/orders", headers=table_headers)
        assert response.status_code == 201
        assert response.json()["total"] == 1200

    def test_empty_cart(self, client, table_headers):
        response = client.post("/api/diner/orders", headers=table_headers, json={})
        assert response.status_code == 400
        assert response.json()["code"] == "EMPTY_CART"

    def test_total_mismatch(self, client, table_headers, seed_plain_dish):
        client.post("/api/diner/cart/items", headers=table_headers, json={"dishId": seed_plain_dish.id})
        response = client.post("/api/diner/orders", headers=table_headers, json={"expectedTotal": 1000})
        assert response.status_code == 409
        assert response.json()["code"] == "TOTAL_MISMATCH"

    def test_idempotent_retry(self, client, table_headers, seed_plain_dish):
        client.post("/api/diner/cart/items", headers=table_headers, json={"dishId": seed_plain_dish.id})
        first = client.post("/api/diner/orders", headers=table_headers, json={"idempotencyKey": "k1"})
        second = client.post("/api/diner/orders", headers=table_headers, json={"idempotencyKey": "k1"})

        assert first.status_code == second.status_code == 201
        assert first.json()["orderId"] == second.json()["orderId"]

    def test_store_failure_keeps_cart(self, client, table_headers, seed_plain_dish):
        client.post("/api/diner/cart/items", headers=table_headers, json={"dishId": seed_plain_dish.id})

        with patch(
            "tableside_api.services.domain.order_service.write_order_outbox_event",
            side_effect=SQLAlchemyError("connection reset"),
        ):
            response = client.post("/api/diner/orders", headers=table_headers, json={})

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "DATABASE_ERROR"
        assert body["error"].startswith("Internal server error: ")
        assert "connection reset" in body["error"]

        cart = client.get("/api/diner/cart", headers=table_headers).json()
        assert cart["itemCount"] == 1


class TestTracking:

    def test_list_and_detail(self, client, table_headers, seed_dish, seed_groups):
        _add_burger(client, table_headers, seed_dish, seed_groups)
        order_id = client.post("/api/diner/orders", headers=table_headers).json()["orderId"]

        orders = client.get("/api/diner/orders", headers=table_headers).json()
        assert [o["id"] for o in orders] == [order_id]

        detail = client.get(f"/api/diner/orders/{order_id}", headers=table_headers).json()
        assert detail["tableNumber"] == 1
        line = detail["lines"][0]
        assert line["dishName"] == "Classic Burger"
        assert line["customizationText"] == "Cooking: Well done; Extras: Bacon"

    def test_other_session_order_hidden(self, client, table_headers, seed_plain_dish):
        client.post("/api/diner/cart/items", headers=table_headers, json={"dishId": seed_plain_dish.id})
        order_id = client.post("/api/diner/orders", headers=table_headers).json()["orderId"]

        other = client.post("/api/diner/sessions", json={"tableNumber": 2}).json()
        response = client.get(
            f"/api/diner/orders/{order_id}",
            headers={"X-Table-Token": other["tableToken"]},
        )
        assert response.status_code == 404

    def test_non_numeric_order_id(self, client, table_headers):
        response = client.get("/api/diner/orders/abc", headers=table_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"
