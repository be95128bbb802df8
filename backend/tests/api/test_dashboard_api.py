"""Tests for the dashboard, job card lookup and reports."""

import asyncio

import pytest

from orderdesk.api.deps import get_current_user
from orderdesk.main import app, hydrate_state_store
from orderdesk.services.events import Collection
from orderdesk.services.state_store import LiveStateStore

from factories import product_document


@pytest.fixture
def sales_order(client):
    product = client.post("/api/products", json=product_document("CS-001-STL")).json()
    other = client.post("/api/products", json=product_document("ES-003-AS", "ES")).json()
    return client.post("/api/sales-orders", json={
        "customer_name": "Global Springs Ltd",
        "items": [{"product_id": product["id"], "quantity": 500}, {"product_id": other["id"], "quantity": 20}],
    }).json()


class TestJobCardLookup:
    def test_found(self, client, sales_order):
        response = client.get("/api/dashboard/job-card", params={"q": "  SO-0001/2 "})

        assert response.status_code == 200
        body = response.json()
        assert body["job_card_number"] == "SO-0001/2"
        assert body["sales_order"]["customer_name"] == "Global Springs Ltd"
        assert body["item"]["product_type"] == "ES"

    def test_unknown_item(self, client, sales_order):
        response = client.get("/api/dashboard/job-card", params={"q": "SO-0001/99"})
        assert response.status_code == 404
        assert "no item 99" in response.json()["detail"]

    def test_unknown_sales_order(self, client, sales_order):
        assert client.get("/api/dashboard/job-card", params={"q": "SO-0404/1"}).status_code == 404

    @pytest.mark.parametrize("q", ["SO-0001", "SO-0001/x", "a/b/c"])
    def test_malformed(self, client, q):
        assert client.get("/api/dashboard/job-card", params={"q": q}).status_code == 422


class TestSummaryAndActivity:
    def test_summary(self, client, sales_order):
        client.put("/api/orders/ORD-1001/status", json={"status": "COMPLETED"})

        summary = client.get("/api/dashboard/summary").json()

        assert summary["total_orders"] == 2
        assert summary["completed_orders"] == 1
        assert summary["pending_orders"] == 1
        assert summary["total_products"] == 2
        assert summary["total_sales_orders"] == 1

    def test_activity_newest_first(self, client, sales_order):
        client.put("/api/orders/ORD-1002/status", json={"status": "IN_PRODUCTION"})

        activity = client.get("/api/dashboard/activity", params={"limit": 2}).json()

        assert [(a["collection"], a["key"]) for a in activity] == [("job_cards", "JC-5002"), ("orders", "ORD-1002")]

    def test_activity_without_live_state(self, anonymous_client, current_user):
        app.dependency_overrides[get_current_user] = lambda: current_user
        assert anonymous_client.get("/api/dashboard/activity").status_code == 503


class TestReports:
    def test_job_card_report(self, client, sales_order):
        response = client.get("/api/reports/job-card/SO-0001/1")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "JOB CARD DETAIL REPORT" in response.text
        assert "CS-001-STL" in response.text

    def test_pdi_report(self, client, sales_order):
        response = client.get("/api/reports/pdi/SO-0001/2")

        assert response.status_code == 200
        assert "PDI REPORTS / INSPECTION REPORTS" in response.text

    def test_report_for_missing_job_card(self, client, sales_order):
        assert client.get("/api/reports/pdi/SO-0001/7").status_code == 404
        assert client.get("/api/reports/job-card/nonsense").status_code == 422


class TestStateStoreHydration:
    def test_loads_users_and_catalog(self, client, session_factory, add_user, sales_order):
        add_user("operator", "operator123")
        store = LiveStateStore()

        asyncio.run(hydrate_state_store(store, session_factory))

        assert list(store.snapshot(Collection.USERS)) == ["operator"]
        assert "password_hash" not in store.records(Collection.USERS)[0]
        assert store.count(Collection.PRODUCTS) == 2
        assert list(store.snapshot(Collection.SALES_ORDERS)) == [sales_order["sales_order_id"]]
        assert store.count(Collection.JOB_CARDS) == 2
