"""Tests for production order status changes."""

from datetime import datetime

import pytest

from orderdesk.models.production import JobCard, ProductionOrder
from orderdesk.schemas.sales_order import SalesOrderCreate, SalesOrderItemCreate
from orderdesk.services.events import Collection
from orderdesk.services.production_service import ProductionService, apply_status
from orderdesk.services.sales_order_service import SalesOrderService


def order_with_card():
    order = ProductionOrder(order_number="ORD-1001", quantity=1)
    order.job_card = JobCard(job_card_id="JC-5001", quantity=1)
    return order


class TestApplyStatus:
    def test_in_production_starts_job_card_once(self):
        order = order_with_card()
        first = datetime(2024, 1, 15, 8)

        apply_status(order, "IN_PRODUCTION", now=first)
        apply_status(order, "IN_PRODUCTION", now=datetime(2024, 1, 16, 8))

        assert order.job_card.status == "IN_PROGRESS"
        assert order.job_card.start_date == first

    def test_completed_sets_completion_dates(self):
        order = order_with_card()
        now = datetime(2024, 1, 20, 17)

        apply_status(order, "COMPLETED", now=now)

        assert order.status == "COMPLETED"
        assert order.completion_date == now
        assert order.job_card.status == "COMPLETED"
        assert order.job_card.completion_date == now

    def test_unknown_status(self):
        with pytest.raises(ValueError):
            apply_status(order_with_card(), "SHIPPED")


@pytest.fixture
async def seeded(test_session, emitter, make_product):
    product = await make_product("CS-001")
    await SalesOrderService(test_session, emitter).create_sales_order(SalesOrderCreate(
        customer_name="ABC Manufacturing",
        items=[SalesOrderItemCreate(product_id=product.id, quantity=50)],
    ))
    emitter.events.clear()
    return ProductionService(test_session, emitter)


class TestProductionService:
    @pytest.mark.asyncio
    async def test_update_status(self, seeded, emitter):
        order = await seeded.update_status("ORD-1001", "COMPLETED", assigned_to="line-2")

        assert order.status == "COMPLETED"
        assert order.assigned_to == "line-2"
        assert order.completion_date is not None
        assert order.job_card.status == "COMPLETED"
        assert [e.collection for e in emitter.events] == [Collection.ORDERS, Collection.JOB_CARDS]
        assert emitter.events[0].data["status"] == "COMPLETED"

    @pytest.mark.asyncio
    async def test_update_missing_order(self, seeded):
        assert await seeded.update_status("ORD-9999", "COMPLETED") is None

    @pytest.mark.asyncio
    async def test_list_job_cards_by_sales_order(self, seeded):
        assert [j.job_card_id for j in await seeded.list_job_cards("SO-0001")] == ["JC-5001"]
        assert len(await seeded.list_orders()) == 1
