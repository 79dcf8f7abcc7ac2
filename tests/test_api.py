"""
Tests for the HTTP API.
"""
from fastapi.testclient import TestClient

from leafy.models.order import InventoryDeductionOutbox


class TestHealth:
    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_api_health_checks_database(self, client: TestClient):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["services"]["database"]["status"] == "ok"
        assert response.json()["services"]["inventory_deductions"] == {"status": "ok", "pending": 0}

    def test_api_health_reports_pending_deductions(self, client: TestClient, store):
        store.insert(InventoryDeductionOutbox, [{
            "order_id": "order-1",
            "order_number": "LL-20240115-001",
            "items": [],
            "status": "pending",
            "last_error": "connection reset",
        }])

        deductions = client.get("/api/health").json()["services"]["inventory_deductions"]

        assert deductions == {"status": "degraded", "pending": 1}

    def test_root(self, client: TestClient):
        assert client.get("/").json()["docs"] == "/docs"


class TestOrdersApi:
    def order_payload(self, menu_item_id: str) -> dict:
        return {
            "items": [{
                "menu_item_id": menu_item_id,
                "menu_item_name": "Aloo Masti",
                "size": "Regular",
                "quantity": 1,
                "unit_price": "50",
                "line_total": "50",
            }],
            "payment_method": "Cash",
            "order_type": "DineIn",
            "order_date": "2024-01-15",
        }

    def test_place_and_list(self, client: TestClient, salad_setup):
        response = client.post("/api/orders", json=self.order_payload(salad_setup["salad"]))

        assert response.status_code == 201
        assert response.json()["order_number"] == "LL-20240115-001"

        listing = client.get("/api/orders", params={"date": "2024-01-15"}).json()
        assert listing["total"] == 1
        assert listing["orders"][0]["items"][0]["menu_item_name"] == "Aloo Masti"

    def test_invalid_payment_method(self, client: TestClient, salad_setup):
        payload = self.order_payload(salad_setup["salad"])
        payload["payment_method"] = "Cheque"

        assert client.post("/api/orders", json=payload).status_code == 422

    def test_export_download(self, client: TestClient, salad_setup):
        client.post("/api/orders", json=self.order_payload(salad_setup["salad"]))

        response = client.get("/api/orders/export", params={"start": "2024-01-15"})

        assert response.status_code == 200
        assert "Leafy-Orders-2024-01-15.xlsx" in response.headers["content-disposition"]
        assert response.content[:2] == b"PK"

    def test_export_empty_range(self, client: TestClient):
        response = client.get("/api/orders/export", params={"start": "2024-01-15"})

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_export_end_before_start(self, client: TestClient):
        response = client.get("/api/orders/export", params={"start": "2024-01-15", "end": "2024-01-01"})

        assert response.status_code == 400

    def test_no_pending_deductions(self, client: TestClient):
        assert client.get("/api/orders/deductions/pending").json() == []


class TestFinanceApi:
    def test_pnl_takes_one_based_month(self, client: TestClient):
        response = client.get("/api/finance/pnl", params={"year": 2024, "month": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["month"] == "2024-02"
        assert len(data["daily_breakdown"]) == 29

    def test_pnl_rejects_month_zero(self, client: TestClient):
        response = client.get("/api/finance/pnl", params={"year": 2024, "month": 0})

        assert response.status_code == 422

    def test_revenue_share(self, client: TestClient):
        response = client.get("/api/finance/revenue-share", params={"year": 2024, "month": 3})

        assert response.status_code == 200
        assert response.json()["rent_type"] == "Minimum Guarantee"

    def test_expense_crud(self, client: TestClient):
        created = client.post("/api/finance/expenses", json={
            "date": "2024-03-01",
            "category": "Electricity",
            "description": "March bill",
            "amount": "3200",
        })
        assert created.status_code == 201
        expense_id = created.json()["id"]

        listed = client.get("/api/finance/expenses", params={"year": 2024, "month": 3}).json()
        assert [e["id"] for e in listed] == [expense_id]

        assert client.delete(f"/api/finance/expenses/{expense_id}").status_code == 204


class TestAlertsApi:
    def test_rule_with_invalid_parameters_is_rejected(self, client: TestClient):
        response = client.post("/api/alerts/rules", json={
            "name": "Budget",
            "type": "HighExpense",
            "condition": "expense_exceeds_budget",
            "parameters": {},
        })

        assert response.status_code == 422

    def test_sweep_and_resolve(self, client: TestClient):
        client.post("/api/alerts/rules", json={
            "name": "Low Stock Warning",
            "type": "LowStock",
            "condition": "stock_below_threshold",
        })
        client.post("/api/inventory/ingredients", json={
            "name": "Spinach",
            "category": "Greens",
            "unit": "kg",
            "current_stock": "1",
            "minimum_threshold": "5",
        })

        assert client.post("/api/alerts/run").json() == {"inserted": 1}

        listing = client.get("/api/alerts").json()
        assert listing["unread_count"] == 1
        alert_id = listing["alerts"][0]["id"]

        resolved = client.post(f"/api/alerts/{alert_id}/resolve").json()
        assert resolved["resolved_at"] is not None
        assert client.get("/api/alerts").json()["alerts"] == []

    def test_missing_alert(self, client: TestClient):
        response = client.post("/api/alerts/missing/read")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestInventoryApi:
    def test_missing_ingredient(self, client: TestClient):
        response = client.post("/api/inventory/ingredients/missing/restock", json={"quantity": "1"})

        assert response.status_code == 404

    def test_restock(self, client: TestClient):
        created = client.post("/api/inventory/ingredients", json={
            "name": "Paneer",
            "category": "Proteins",
            "unit": "kg",
            "current_stock": "1",
        }).json()

        response = client.post(f"/api/inventory/ingredients/{created['id']}/restock", json={"quantity": "2.5"})

        assert response.status_code == 200
        assert float(response.json()["current_stock"]) == 3.5


class TestTasksApi:
    def test_complete_task(self, client: TestClient):
        task = client.post("/api/tasks", json={"title": "Clean fridge", "priority": "high"}).json()

        response = client.patch(f"/api/tasks/{task['id']}/status", json={"status": "completed"})

        assert response.status_code == 200
        assert response.json()["completed_at"] is not None
        assert client.get("/api/tasks", params={"status": "completed"}).json()[0]["id"] == task["id"]


class TestSettingsApi:
    def test_put_and_get(self, client: TestClient):
        assert client.put("/api/settings/revenueSharePercent", json={"value": 25}).status_code == 200

        response = client.get("/api/settings/revenueSharePercent")

        assert response.json() == {"key": "revenueSharePercent", "value": 25}
        assert client.get("/api/settings").json() == {"revenueSharePercent": 25}

    def test_missing_setting(self, client: TestClient):
        assert client.get("/api/settings/nope").status_code == 404
