"""Tests for sales order endpoints."""

import pytest

from orderdesk.services.events import Collection

from factories import product_document


@pytest.fixture
def product_ids(client):
    ids = []
    for part_no in ("CS-001-STL", "CCS-002-SS", "ES-003-AS"):
        response = client.post("/api/products", json=product_document(part_no))
        ids.append(response.json()["id"])
    return ids


def create_order(client, *product_ids, **fields):
    payload = {
        "customer_name": "ABC Manufacturing",
        "completion_target_date": "2024-02-15",
        "items": [{"product_id": pid, "quantity": 100, "unit_price": 1.5} for pid in product_ids],
    }
    payload.update(fields)
    response = client.post("/api/sales-orders", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestSalesOrdersApi:
    def test_next_id(self, client):
        assert client.get("/api/sales-orders/next-id").json() == {"sales_order_id": "SO-0001"}

    def test_create(self, client, product_ids, state_store):
        order = create_order(client, product_ids[0], product_ids[1])

        assert order["sales_order_id"] == "SO-0001"
        assert order["status"] == "DRAFT"
        assert order["total_amount"] == 300.0
        assert [i["job_card_number"] for i in order["items"]] == ["SO-0001/1", "SO-0001/2"]
        assert state_store.count(Collection.SALES_ORDERS) == 1
        assert state_store.count(Collection.ORDERS) == 2
        assert state_store.count(Collection.JOB_CARDS) == 2

    def test_create_requires_items(self, client):
        response = client.post("/api/sales-orders", json={"customer_name": "ABC", "items": []})
        assert response.status_code == 422

    def test_create_rejects_duplicate_products(self, client, product_ids):
        response = client.post("/api/sales-orders", json={
            "customer_name": "ABC",
            "items": [{"product_id": product_ids[0]}, {"product_id": product_ids[0]}],
        })
        assert response.status_code == 400

    def test_list_search_and_sort(self, client, product_ids):
        create_order(client, product_ids[0], customer_name="ABC Manufacturing")
        create_order(client, product_ids[0], customer_name="XYZ Industries", status="CONFIRMED")

        assert client.get("/api/sales-orders", params={"search": "xyz"}).json()["total"] == 1
        assert client.get("/api/sales-orders", params={"status": "DRAFT"}).json()["items"][0]["sales_order_id"] == "SO-0001"

        ordered = client.get("/api/sales-orders", params={"sort_by": "customer_name", "sort_order": "asc"}).json()
        assert [o["customer_name"] for o in ordered["items"]] == ["ABC Manufacturing", "XYZ Industries"]

    def test_invalid_sort_field(self, client):
        assert client.get("/api/sales-orders", params={"sort_by": "password"}).status_code == 422

    def test_get_update_delete(self, client, product_ids, state_store):
        order = create_order(client, product_ids[0])

        assert client.get(f"/api/sales-orders/{order['id']}").json()["customer_name"] == "ABC Manufacturing"

        updated = client.put(f"/api/sales-orders/{order['id']}", json={"status": "CONFIRMED"}).json()
        assert updated["status"] == "CONFIRMED"

        assert client.delete(f"/api/sales-orders/{order['id']}").status_code == 200
        assert client.get(f"/api/sales-orders/{order['id']}").status_code == 404
        assert state_store.count(Collection.JOB_CARDS) == 0

    def test_update_ignores_null_for_required_fields(self, client, product_ids):
        order = create_order(client, product_ids[0], remarks="Rush")

        response = client.put(f"/api/sales-orders/{order['id']}", json={
            "status": None,
            "customer_name": None,
            "completion_target_date": None,
            "remarks": None,
        })

        assert response.status_code == 200, response.text
        updated = response.json()
        assert updated["status"] == "DRAFT"
        assert updated["customer_name"] == "ABC Manufacturing"
        assert updated["completion_target_date"] == "2024-02-15"
        assert updated["remarks"] is None

    def test_available_products_exclude_items_on_order(self, client, product_ids):
        order = create_order(client, product_ids[0])
        client.post(f"/api/products/{product_ids[2]}/archive")

        body = client.get(f"/api/sales-orders/{order['id']}/available-products").json()

        assert [p["id"] for p in body["items"]] == [product_ids[1]]

    def test_item_lifecycle(self, client, product_ids):
        order = create_order(client, product_ids[0], product_ids[1])

        assert client.delete(f"/api/sales-orders/{order['id']}/items/2").status_code == 200

        added = client.post(f"/api/sales-orders/{order['id']}/items", json={"product_id": product_ids[2], "quantity": 7})
        assert added.status_code == 201
        assert added.json()["item_serial_no"] == 3
        assert added.json()["job_card_number"] == "SO-0001/3"

        changed = client.put(f"/api/sales-orders/{order['id']}/items/3", json={"quantity": 10, "unit_price": 2.5})
        assert changed.json()["total_price"] == 25.0

        job_cards = client.get("/api/job-cards", params={"sales_order_id": "SO-0001"}).json()
        assert sorted(j["job_card_number"] for j in job_cards) == ["SO-0001/1", "SO-0001/3"]

    def test_item_errors(self, client, product_ids):
        order = create_order(client, product_ids[0])

        duplicate = client.post(f"/api/sales-orders/{order['id']}/items", json={"product_id": product_ids[0]})
        assert duplicate.status_code == 400
        missing_order = client.post("/api/sales-orders/999/items", json={"product_id": product_ids[1]})
        assert missing_order.status_code == 404
        assert client.put(f"/api/sales-orders/{order['id']}/items/9", json={"quantity": 1}).status_code == 404
        assert client.delete(f"/api/sales-orders/{order['id']}/items/9").status_code == 404
