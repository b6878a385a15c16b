"""
HTTP-level tests; each test gets its own in-memory store.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app, get_repos
from app.repositories import Repositories
from app.store import RecordStore


@pytest.fixture
def repos():
    repos = Repositories(RecordStore())
    app.dependency_overrides[get_repos] = lambda: repos
    yield repos
    app.dependency_overrides.clear()


@pytest.fixture
def client(repos):
    # no context manager: the startup seed is not wanted here
    return TestClient(app)


NEW_PRODUCT = {
    "name": "Acoustic Guitar",
    "price": 8500,
    "description": "Solid top",
    "imageUrl": "https://example.com/g.jpg",
    "sellerId": "s1",
}

BUYER = {
    "id": "b1", "name": "Asha", "email": "asha@example.com",
    "mobile": "9800000201", "address": "12 MG Road", "role": "buyer",
}


class TestProducts:
    def test_add_then_get(self, client):
        created = client.post("/api/v1/products", json=NEW_PRODUCT)
        assert created.status_code == 201
        body = created.json()
        assert body["id"]
        assert body["price"] == 8500

        fetched = client.get(f"/api/v1/products/{body['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == body

    def test_invalid_product_rejected(self, client):
        resp = client.post("/api/v1/products", json={**NEW_PRODUCT, "price": -1})
        assert resp.status_code == 422

    def test_unknown_product_is_404(self, client):
        resp = client.get("/api/v1/products/nonexistent")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Product Not Found"

    def test_browse_with_query_and_seller(self, client):
        client.post("/api/v1/products", json={**NEW_PRODUCT, "name": "Bass Guitar"})
        all_guitars = client.get("/api/v1/products", params={"q": "guitar"}).json()["products"]
        assert [p["name"] for p in all_guitars] == ["Bass Guitar", "Acoustic Guitar"]

        mine = client.get("/api/v1/products", params={"seller_id": "s1"}).json()["products"]
        assert [p["name"] for p in mine] == ["Bass Guitar"]

    def test_seller_listings_exclude_demo_catalog(self, client):
        empty = client.get("/api/v1/products", params={"seller_id": "101"}).json()["products"]
        assert empty == []

        client.post("/api/v1/products", json={**NEW_PRODUCT, "sellerId": "101", "name": "Bass Guitar"})
        client.post("/api/v1/products", json={**NEW_PRODUCT, "sellerId": "101", "name": "Cajon"})
        mine = client.get("/api/v1/products",
                          params={"seller_id": "101", "q": "guitar"}).json()["products"]
        assert [p["name"] for p in mine] == ["Bass Guitar"]

    def test_delete_is_idempotent(self, client, repos):
        pid = client.post("/api/v1/products", json=NEW_PRODUCT).json()["id"]
        assert client.delete(f"/api/v1/products/{pid}").status_code == 204
        assert client.delete(f"/api/v1/products/{pid}").status_code == 204
        assert repos.products.get_products() == []


class TestCheckoutAndOrders:
    def test_checkout_and_filters(self, client, repos):
        resp = client.post("/api/v1/checkout", json={
            "productId": "1", "buyerId": "b1", "address": "12 MG Road", "paymentMethod": "upi",
        })
        assert resp.status_code == 201
        order = resp.json()
        assert order["totalAmount"] == 8500
        assert order["status"] == "pending"
        assert order["productDetails"]["name"] == "Acoustic Guitar"

        by_buyer = client.get("/api/v1/orders", params={"buyer_id": "b1"}).json()["orders"]
        assert [o["id"] for o in by_buyer] == [order["id"]]
        assert client.get("/api/v1/orders", params={"buyer_id": "b2"}).json()["orders"] == []
        by_seller = client.get("/api/v1/orders", params={"seller_id": "101"}).json()["orders"]
        assert len(by_seller) == 1

        assert client.get(f"/api/v1/orders/{order['id']}").json() == order
        assert client.get("/api/v1/orders/missing").status_code == 404

    def test_checkout_errors(self, client):
        missing = client.post("/api/v1/checkout", json={
            "productId": "nonexistent", "buyerId": "b1", "address": "12 MG Road",
        })
        assert missing.status_code == 404
        no_address = client.post("/api/v1/checkout", json={
            "productId": "1", "buyerId": "b1", "address": "",
        })
        assert no_address.status_code == 400
        assert no_address.json()["detail"] == "Address required"

    def test_summaries(self, client):
        client.put("/api/v1/profiles/b1", json=BUYER)
        client.post("/api/v1/checkout", json={
            "productId": "3", "buyerId": "b1", "address": "12 MG Road",
        })

        buyer_rows = client.get("/api/v1/orders/summaries",
                                params={"role": "buyer", "user_id": "b1"}).json()["orders"]
        assert buyer_rows[0]["productName"] == "Professional Drum Set"
        assert buyer_rows[0]["sellerId"] == "101"

        seller_rows = client.get("/api/v1/orders/summaries",
                                 params={"role": "seller", "user_id": "101"}).json()["orders"]
        assert seller_rows[0]["buyerName"] == "Asha"
        assert seller_rows[0]["buyerAddress"] == "12 MG Road"


class TestProfilesAndSession:
    def test_profile_round_trip(self, client):
        assert client.get("/api/v1/profiles/b1").status_code == 404
        assert client.put("/api/v1/profiles/b1", json=BUYER).status_code == 200
        assert client.get("/api/v1/profiles/b1").json() == BUYER

    def test_profile_id_mismatch(self, client):
        assert client.put("/api/v1/profiles/other", json=BUYER).status_code == 400

    def test_sign_in_and_out(self, client):
        client.put("/api/v1/profiles/b1", json=BUYER)
        assert client.get("/api/v1/session").status_code == 404
        assert client.post("/api/v1/session", json={"userId": "ghost"}).status_code == 404

        session = client.post("/api/v1/session", json={"userId": "b1"}).json()
        assert session["role"] == "buyer"
        assert client.get("/api/v1/session").json() == session

        assert client.delete("/api/v1/session").status_code == 204
        assert client.get("/api/v1/session").status_code == 404


class TestAdmin:
    def test_reseed(self, client):
        body = client.post("/api/v1/admin/seed").json()
        assert body == {"status": "seeded", "products": 4, "orders": 6}

    def test_migrate(self, client, repos):
        repos.store.write("products", [{
            "id": "p-9", "name": "Tabla", "price": 6400,
            "image_url": "https://cdn.example.com/tabla.jpg", "seller_id": "s1",
        }])
        report = client.post("/api/v1/admin/migrate").json()
        assert report["products_kept"] == 1
        assert repos.store.read_collection("products")[0]["sellerId"] == "s1"
