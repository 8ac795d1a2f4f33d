"""Integration tests for inventory, sales and report endpoints."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

RICE_BOWL = {
    "name": "Rice Bowl",
    "price": 200,
    "recipe": [{"ingredient_name": "Rice", "quantity_needed": 4}],
}


def _future(days: int) -> str:
    return (datetime.now() + timedelta(days=days)).date().isoformat()


@pytest.fixture
def stocked(api_client: TestClient):
    """Rice in two batches: 10 kg for 800 (expires first) and 5 kg for 450."""
    api_client.post("/api/v1/inventory/ingredients", json={"name": "Rice", "unit": "kg"})
    first = api_client.post("/api/v1/inventory/batches", json={
        "ingredient_name": "Rice", "quantity": 10, "total_cost": 800,
        "expiry": _future(5), "actor": "Chef",
    }).json()["value"]
    second = api_client.post("/api/v1/inventory/batches", json={
        "ingredient_name": "Rice", "quantity": 5, "total_cost": 450,
        "expiry": _future(20), "actor": "Chef",
    }).json()["value"]
    return first, second


class TestInventoryEndpoints:

    def test_define_ingredient(self, api_client: TestClient):
        response = api_client.post("/api/v1/inventory/ingredients", json={"name": "Milk", "unit": "l"})

        assert response.status_code == 201
        assert response.json()["value"] == {"name": "Milk", "unit": "l"}
        assert api_client.get("/api/v1/inventory/ingredients").json() == [{"name": "Milk", "unit": "l"}]

    def test_duplicate_ingredient_conflict(self, api_client: TestClient):
        api_client.post("/api/v1/inventory/ingredients", json={"name": "Milk", "unit": "l"})
        response = api_client.post("/api/v1/inventory/ingredients", json={"name": "milk", "unit": "l"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_restock_unknown_ingredient(self, api_client: TestClient):
        response = api_client.post("/api/v1/inventory/batches", json={
            "ingredient_name": "Saffron", "quantity": 1, "actor": "Chef",
        })

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_stock_level_in_fefo_order(self, api_client: TestClient, stocked):
        first, second = stocked
        data = api_client.get("/api/v1/inventory/ingredients/rice/stock").json()

        assert data["total_stock"] == 15
        assert data["unit"] == "kg"
        assert [b["batch_id"] for b in data["batches"]] == [first["batch_id"], second["batch_id"]]

    def test_batches_show_days_remaining(self, api_client: TestClient, stocked):
        batches = api_client.get("/api/v1/inventory/batches").json()

        assert [b["days_remaining"] for b in batches] == [5, 20]

    def test_adjust_batch(self, api_client: TestClient, stocked):
        first, _ = stocked
        response = api_client.post(f"/api/v1/inventory/batches/{first['batch_id']}/adjust", json={
            "quantity": 2, "reason": "Spoilage/Wastage", "actor": "Chef",
        })

        assert response.status_code == 200
        assert response.json()["value"] == -2
        batch = api_client.get(f"/api/v1/inventory/batches/{first['batch_id']}").json()
        assert batch["current_qty"] == 8

    def test_unknown_batch_not_found(self, api_client: TestClient):
        response = api_client.get("/api/v1/inventory/batches/b_missing")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_audit_newest_first(self, api_client: TestClient, stocked):
        _, second = stocked
        entries = api_client.get("/api/v1/inventory/audit").json()

        assert len(entries) == 2
        assert entries[0]["batch_id"] == second["batch_id"]
        assert entries[0]["reason"] == "Regular Restock"

    def test_audit_filtered_by_ingredient(self, api_client: TestClient, stocked):
        api_client.post("/api/v1/inventory/ingredients", json={"name": "Milk", "unit": "l"})
        api_client.post("/api/v1/inventory/batches", json={
            "ingredient_name": "Milk", "quantity": 2, "actor": "Chef",
        })

        entries = api_client.get("/api/v1/inventory/audit", params={"ingredient": "rice"}).json()

        assert len(entries) == 2
        assert {e["ingredient_name"] for e in entries} == {"Rice"}

    def test_restock_with_utc_expiry(self, api_client: TestClient):
        api_client.post("/api/v1/inventory/ingredients", json={"name": "Milk", "unit": "l"})
        created = api_client.post("/api/v1/inventory/batches", json={
            "ingredient_name": "Milk", "quantity": 5, "expiry": "2099-02-01T00:00:00Z", "actor": "Chef",
        })

        assert created.status_code == 201
        response = api_client.get("/api/v1/inventory/ingredients/Milk/stock")
        assert response.status_code == 200
        assert response.json()["total_stock"] == 5

    def test_non_finite_quantity_rejected(self, api_client: TestClient):
        api_client.post("/api/v1/inventory/ingredients", json={"name": "Salt", "unit": "kg"})
        response = api_client.post(
            "/api/v1/inventory/batches",
            content='{"ingredient_name": "Salt", "quantity": Infinity, "actor": "Chef"}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert api_client.get("/api/v1/inventory/batches").json() == []


class TestSalesEndpoints:

    def test_availability(self, api_client: TestClient, stocked):
        response = api_client.post("/api/v1/sales/availability", json={
            "recipe": RICE_BOWL["recipe"], "quantity": 4,
        })

        assert response.json() == {"servings": 3, "quantity": 4, "available": False}

    def test_deduct_for_dish(self, api_client: TestClient, stocked):
        response = api_client.post("/api/v1/sales/deductions/dish", json={
            "dish": {"name": "Feast", "recipe": [{"ingredient_name": "Rice", "quantity_needed": 12}]},
            "quantity": 1,
        })

        assert response.status_code == 200
        assert response.json()["value"]["cost"] == pytest.approx(980)

    def test_insufficient_stock(self, api_client: TestClient, stocked):
        response = api_client.post("/api/v1/sales/deductions/order", json={
            "items": [{"dish": RICE_BOWL, "quantity": 4}],
        })

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "INSUFFICIENT_STOCK"
        assert error["details"]["shortfalls"]["Rice"] == pytest.approx(1)

    def test_record_sale_and_reports(self, api_client: TestClient, stocked):
        response = api_client.post("/api/v1/sales", json={
            "order": {
                "lines": [{"dish_name": "Rice Bowl", "unit_price": 200, "quantity": 2}],
                "tax_amount": 20,
                "payment_mode": "Card",
            },
            "dishes": [RICE_BOWL],
        })

        assert response.status_code == 201
        record = response.json()["value"]
        assert record["grand_total"] == 420
        assert record["cost_of_goods_sold"] == pytest.approx(640)

        history = api_client.get("/api/v1/sales").json()
        assert [r["sale_id"] for r in history] == [record["sale_id"]]

        top = api_client.get("/api/v1/reports/top-items").json()
        assert top == [{"dish_name": "Rice Bowl", "quantity": 2}]

        overview = api_client.get("/api/v1/reports/overview").json()
        assert overview["today_profit"] == pytest.approx(-220)
        assert len(overview["monthly"]) == 1

    def test_empty_cart_rejected(self, api_client: TestClient):
        response = api_client.post("/api/v1/sales", json={"order": {"lines": []}, "dishes": []})

        assert response.status_code == 400
