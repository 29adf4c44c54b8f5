"""Tests for the cart store and the session-backed cart endpoints."""

import json

from wigshop.model import Cart, get_product
from wigshop.services.cart_service import MemoryCartStorage


class TestCartStore:
    def test_add_then_reload_round_trip(self):
        backing = {}
        cart = Cart.load(MemoryCartStorage(backing))
        cart.add(get_product("1"))

        reloaded = Cart.load(MemoryCartStorage(backing))
        assert reloaded.to_json() == cart.to_json()
        assert json.loads(reloaded.to_json()) == [
            {"id": "1", "quantity": 1, "price": 549.99, "image": "product1.jpg"}
        ]

    def test_every_mutation_is_persisted(self):
        storage = MemoryCartStorage()
        cart = Cart.load(storage)
        cart.add(get_product("1"))
        cart.add(get_product("1"), 2)
        cart.add(get_product("3"))
        assert json.loads(storage.load())[0]["quantity"] == 3

        cart.remove("3")
        assert [row["id"] for row in json.loads(storage.load())] == ["1"]

    def test_zero_quantity_removes_line(self):
        cart = Cart.load(MemoryCartStorage())
        cart.add(get_product("2"), 2)
        assert cart.set_quantity("2", 0) is None
        assert cart.is_empty()
        assert cart.to_json() == "[]"

    def test_totals(self):
        cart = Cart.load(MemoryCartStorage())
        cart.add(get_product("1"), 2)
        cart.add(get_product("2"))
        assert cart.item_count() == 3
        assert str(cart.total_dec()) == "1599.97"
        assert cart.checkout_items() == [
            {"id": "1", "quantity": 2},
            {"id": "2", "quantity": 1},
        ]

    def test_corrupt_storage_loads_empty(self):
        storage = MemoryCartStorage({"cart": "{not json"})
        assert Cart.load(storage).is_empty()

    def test_stored_non_positive_lines_are_dropped(self):
        raw = json.dumps([
            {"id": "1", "quantity": 0, "price": 549.99, "image": "product1.jpg"},
            {"id": "2", "quantity": 1, "price": 499.99, "image": "product2.jpg"},
        ])
        cart = Cart.load(MemoryCartStorage({"cart": raw}))
        assert list(cart.lines) == ["2"]


class TestCartRoutes:
    def test_empty_cart(self, client):
        response = client.get("/api/cart")
        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["items"] == []
        assert data["count"] == 0

    def test_add_update_remove(self, client):
        response = client.post("/api/cart/items", json={"id": "1", "quantity": 2})
        assert response.status_code == 201
        assert response.get_json()["data"]["total"] == 1099.98

        response = client.put("/api/cart/items/1", json={"quantity": 1})
        assert response.get_json()["data"]["count"] == 1

        response = client.delete("/api/cart/items/1")
        assert response.status_code == 200
        assert client.get("/api/cart").get_json()["data"]["items"] == []

    def test_cart_survives_between_requests(self, client):
        client.post("/api/cart/items", json={"id": "4"})
        client.post("/api/cart/items", json={"id": "4"})
        items = client.get("/api/cart").get_json()["data"]["items"]
        assert items == [{"id": "4", "quantity": 2, "price": 499.99, "image": "product4.jpg"}]

    def test_update_to_zero_removes(self, client):
        client.post("/api/cart/items", json={"id": "2"})
        response = client.put("/api/cart/items/2", json={"quantity": 0})
        assert response.get_json()["data"]["items"] == []

    def test_unknown_product(self, client):
        response = client.post("/api/cart/items", json={"id": "99"})
        assert response.status_code == 404
        assert response.get_json()["status"] is False

    def test_bad_quantity(self, client):
        response = client.post("/api/cart/items", json={"id": "1", "quantity": -1})
        assert response.status_code == 422

    def test_fractional_quantity_rejected(self, client):
        response = client.post("/api/cart/items", json={"id": "1", "quantity": 1.5})
        assert response.status_code == 422
        client.post("/api/cart/items", json={"id": "1"})
        response = client.put("/api/cart/items/1", json={"quantity": 2.5})
        assert response.status_code == 422
        assert client.get("/api/cart").get_json()["data"]["count"] == 1

    def test_clear(self, client):
        client.post("/api/cart/items", json={"id": "1"})
        response = client.delete("/api/cart")
        assert response.get_json()["data"]["count"] == 0
