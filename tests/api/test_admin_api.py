"""Catalog and admin panel endpoints via TestClient."""
from datetime import datetime, timezone

import pytest


class TestPublicCatalog:
    def test_list_and_get(self, client, seed_product):
        seed_product("a", 10, category="Books", is_new=True)
        seed_product("b", 20, category="Toys", is_sale=True)

        assert [p["id"] for p in client.get("/products").json()] == ["b", "a"]
        assert [p["id"] for p in client.get("/products", params={"category": "Books"}).json()] == ["a"]
        assert [p["id"] for p in client.get("/products", params={"is_sale": "true"}).json()] == ["b"]

        product = client.get("/products/a").json()
        assert product["name"] == "Product a"
        assert product["is_new"] is True
        assert client.get("/products/zzz").status_code == 404


class TestAdminProducts:
    @pytest.fixture(autouse=True)
    def admin(self, login):
        return login("admin-1", role="admin")

    def test_crud(self, client):
        created = client.post(
            "/admin/products",
            json={"name": "Desk Lamp", "price": 45.5, "category": "Home", "image": "https://img/lamp.jpg"},
        )
        assert created.status_code == 201, created.text
        pid = created.json()["id"]

        updated = client.put(f"/admin/products/{pid}", json={"price": 39.0, "is_sale": True})
        assert updated.status_code == 200
        assert updated.json()["price"] == 39.0
        assert updated.json()["name"] == "Desk Lamp"

        assert client.delete(f"/admin/products/{pid}").json() == {"detail": "Product soft-deleted"}
        assert client.get(f"/products/{pid}").status_code == 404
        assert client.put(f"/admin/products/{pid}", json={"price": 1}).status_code == 404

    def test_negative_price_rejected(self, client):
        response = client.post("/admin/products", json={"name": "X", "price": -1, "category": "Home"})
        assert response.status_code == 422

    def test_delete_missing(self, client):
        assert client.delete("/admin/products/none").status_code == 404

    def test_customers_are_forbidden(self, client, login):
        login("user-1")
        response = client.post("/admin/products", json={"name": "X", "price": 1, "category": "Home"})
        assert response.status_code == 403


class TestAdminOrders:
    @pytest.fixture()
    def orders(self, db):
        col = db.collection("orders")
        base = {
            "user_id": "user-1",
            "payment_method": "cod",
            "payment_status": "pending",
            "shipping_address": "1 Main St, Pune, MH 411001",
            "items": [],
        }
        col.document("o1").set({
            **base, "status": "delivered",
            "totals": {"item_count": 1, "subtotal": 300, "shipping_cost": 100, "tax": 54, "total": 454, "currency": "INR"},
            "created_at": datetime(2024, 1, 15, tzinfo=timezone.utc),
        })
        col.document("o2").set({
            **base, "status": "pending",
            "totals": {"item_count": 2, "subtotal": 1000, "shipping_cost": 0, "tax": 180, "total": 1180, "currency": "INR"},
            "created_at": datetime(2024, 2, 3, tzinfo=timezone.utc),
        })
        col.document("o3").set({
            **base, "status": "cancelled",
            "totals": {"item_count": 1, "subtotal": 50, "shipping_cost": 100, "tax": 9, "total": 159, "currency": "INR"},
            "created_at": datetime(2024, 2, 4, tzinfo=timezone.utc),
        })

    def test_list_and_filter(self, client, login, orders):
        login("admin-1", role="admin")
        assert [o["id"] for o in client.get("/admin/orders").json()] == ["o3", "o2", "o1"]
        assert [o["id"] for o in client.get("/admin/orders", params={"status": "pending"}).json()] == ["o2"]

    def test_update_status(self, client, login, orders):
        login("admin-1", role="admin")
        response = client.patch("/admin/orders/o2/status", json={"status": "shipped"})
        assert response.status_code == 200
        assert response.json()["status"] == "shipped"
        assert client.patch("/admin/orders/o2/status", json={"status": "lost"}).status_code == 422
        assert client.patch("/admin/orders/nope/status", json={"status": "shipped"}).status_code == 404

    def test_dashboard_stats(self, client, login, orders, seed_product):
        seed_product("a", 10)
        seed_product("b", 10, is_deleted=True)
        login("admin-1", role="admin")

        stats = client.get("/admin/dashboard/stats").json()
        assert stats["total_orders"] == 3
        assert stats["pending_orders"] == 1
        assert stats["total_revenue"] == 1634.0
        assert stats["total_products"] == 1
        assert stats["sales_by_month"] == [
            {"month": "2024-01", "sales": 454.0},
            {"month": "2024-02", "sales": 1180.0},
        ]

    def test_pending_count_drops_once_order_moves_on(self, client, login, orders):
        login("admin-1", role="admin")
        client.patch("/admin/orders/o2/status", json={"status": "processing"})
        stats = client.get("/admin/dashboard/stats").json()
        assert stats["pending_orders"] == 0
        assert stats["total_orders"] == 3

    def test_non_admin_forbidden(self, client, login, orders):
        login("user-1")
        assert client.get("/admin/orders").status_code == 403
        assert client.get("/admin/dashboard/stats").status_code == 403
