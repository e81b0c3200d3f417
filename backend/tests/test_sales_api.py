"""HTTP tests for /api/sales."""

from __future__ import annotations

from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from backend.app.core.database import get_db
from backend.app.main import app
from backend.app.models.inventory import Product
from backend.app.models.user import User
from backend.tests.conftest import auth


class TestCreateSale:

    def test_sale_returns_camel_case_receipt(
        self, client: TestClient, db: Session, cashier_token: str, rice: Product
    ) -> None:
        resp = client.post(
            "/api/sales",
            json={"items": [{"productId": rice.id, "quantity": 2}], "paymentMethod": "cash"},
            headers=auth(cashier_token),
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["message"] == "Sale completed successfully"
        assert data["totalAmount"] == 110.0
        assert data["transactionId"].startswith("TXN")
        assert isinstance(data["saleId"], int)

        db.refresh(rice)
        assert rice.stock == 48

    def test_insufficient_stock_is_reported(
        self, client: TestClient, db: Session, cashier_token: str, rice: Product
    ) -> None:
        resp = client.post(
            "/api/sales",
            json={"items": [{"productId": rice.id, "quantity": 1000}]},
            headers=auth(cashier_token),
        )
        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Insufficient stock for Rice (1kg). Available: 50, Required: 1000"
        }

        db.refresh(rice)
        assert rice.stock == 50

    def test_empty_items_rejected(
        self, client: TestClient, cashier_token: str
    ) -> None:
        resp = client.post("/api/sales", json={"items": []}, headers=auth(cashier_token))
        assert resp.status_code == 400
        assert "Items are required" in resp.json()["error"]

    def test_missing_items_rejected(
        self, client: TestClient, cashier_token: str
    ) -> None:
        resp = client.post("/api/sales", json={}, headers=auth(cashier_token))
        assert resp.status_code == 400
        assert resp.json() == {"error": "Items are required"}

    def test_non_positive_quantity_rejected(
        self, client: TestClient, cashier_token: str, rice: Product
    ) -> None:
        resp = client.post(
            "/api/sales",
            json={"items": [{"productId": rice.id, "quantity": 0}]},
            headers=auth(cashier_token),
        )
        assert resp.status_code == 400
        assert "Quantity must be greater than zero" in resp.json()["error"]

    def test_unknown_product_is_404(
        self, client: TestClient, cashier_token: str
    ) -> None:
        resp = client.post(
            "/api/sales",
            json={"items": [{"productId": 4242, "quantity": 1}]},
            headers=auth(cashier_token),
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "Product with ID 4242 not found"}

    def test_requires_token(self, client: TestClient, rice: Product) -> None:
        resp = client.post(
            "/api/sales", json={"items": [{"productId": rice.id, "quantity": 1}]}
        )
        assert resp.status_code == 401
        assert resp.json() == {"error": "Access token required"}


class TestPreview:

    def test_preview_prices_cart(
        self, client: TestClient, db: Session, cashier_token: str, rice: Product
    ) -> None:
        resp = client.post(
            "/api/sales/preview",
            json={"items": [{"productId": rice.id, "quantity": 2}]},
            headers=auth(cashier_token),
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["subtotal"] == 110.0
        assert data["tax"] == 13.2
        assert data["total"] == 123.2
        assert data["items"][0]["lineTotal"] == 110.0

        db.refresh(rice)
        assert rice.stock == 50


class TestSaleHistory:

    def _sell(self, client: TestClient, token: str, product_id: int, qty: int) -> int:
        resp = client.post(
            "/api/sales",
            json={"items": [{"productId": product_id, "quantity": qty}]},
            headers=auth(token),
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["saleId"]

    def test_history_newest_first(
        self,
        client: TestClient,
        cashier_token: str,
        cashier_user: User,
        rice: Product,
        cola: Product,
    ) -> None:
        first = self._sell(client, cashier_token, rice.id, 1)
        second = self._sell(client, cashier_token, cola.id, 2)

        resp = client.get("/api/sales", headers=auth(cashier_token))
        assert resp.status_code == 200
        rows = resp.json()
        assert [r["id"] for r in rows] == [second, first]
        assert rows[0]["cashier_name"] == cashier_user.username
        assert rows[0]["total_amount"] == 50.0

    def test_history_pagination(
        self, client: TestClient, cashier_token: str, rice: Product
    ) -> None:
        ids = [self._sell(client, cashier_token, rice.id, 1) for _ in range(3)]

        resp = client.get("/api/sales?page=2&limit=2", headers=auth(cashier_token))
        assert resp.status_code == 200
        assert [r["id"] for r in resp.json()] == [ids[0]]

    def test_history_date_filter_excludes_other_days(
        self, client: TestClient, cashier_token: str, rice: Product
    ) -> None:
        self._sell(client, cashier_token, rice.id, 1)

        resp = client.get(
            "/api/sales?startDate=2000-01-01&endDate=2000-01-31",
            headers=auth(cashier_token),
        )
        assert resp.status_code == 200
        assert resp.json() == []

    def test_detail_lists_items(
        self, client: TestClient, cashier_token: str, rice: Product, cola: Product
    ) -> None:
        resp = client.post(
            "/api/sales",
            json={
                "items": [
                    {"productId": rice.id, "quantity": 1},
                    {"productId": cola.id, "quantity": 2},
                ]
            },
            headers=auth(cashier_token),
        )
        sale_id = resp.json()["saleId"]

        resp = client.get(f"/api/sales/{sale_id}", headers=auth(cashier_token))
        assert resp.status_code == 200
        data = resp.json()
        assert data["total_amount"] == 105.0
        assert [(i["product_name"], i["quantity"]) for i in data["items"]] == [
            ("Rice (1kg)", 1),
            ("Coca Cola 350ml", 2),
        ]
        assert data["items"][1]["barcode"] == "7901234567892"
        assert data["items"][1]["total_price"] == 50.0

    def test_detail_unknown_sale(self, client: TestClient, cashier_token: str) -> None:
        resp = client.get("/api/sales/999", headers=auth(cashier_token))
        assert resp.status_code == 404
        assert resp.json() == {"error": "Sale not found"}


def test_unknown_route(client: TestClient) -> None:
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Route not found"}


def test_pool_exhaustion_is_503(client: TestClient, cashier_token: str) -> None:
    def _exhausted_pool() -> Generator[Session, None, None]:
        raise PoolTimeoutError("QueuePool limit of size 10 overflow 0 reached")
        yield  # pragma: no cover

    app.dependency_overrides[get_db] = _exhausted_pool
    resp = client.get("/api/sales", headers=auth(cashier_token))
    assert resp.status_code == 503
    assert resp.json() == {"error": "Server is busy, please retry"}
