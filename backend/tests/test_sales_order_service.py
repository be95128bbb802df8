"""Tests for the sales order workflow."""

from datetime import date

import pytest
from sqlalchemy import event, func, select

from orderdesk.models.production import JobCard, ProductionOrder
from orderdesk.schemas.sales_order import (
    SalesOrderCreate,
    SalesOrderItemCreate,
    SalesOrderItemUpdate,
    SalesOrderUpdate,
)
from orderdesk.services.events import ChangeAction, Collection
from orderdesk.services.job_card_locator import JobCardFound, JobCardNotFound
from orderdesk.services.sales_order_service import SalesOrderService


def order_request(*product_ids, **overrides):
    data = {
        "customer_name": "ABC Manufacturing",
        "customer_id": "CUST-001",
        "created_date": date(2024, 1, 15),
        "completion_target_date": date(2024, 2, 15),
        "items": [SalesOrderItemCreate(product_id=pid, quantity=100, unit_price=1.5) for pid in product_ids],
    }
    data.update(overrides)
    return SalesOrderCreate(**data)


@pytest.fixture
async def products(make_product):
    return [await make_product(f"CS-00{n}") for n in range(1, 4)]


@pytest.fixture
def service(test_session, emitter):
    return SalesOrderService(test_session, emitter)


async def count(session, model):
    return (await session.execute(select(func.count()).select_from(model))).scalar()


class TestCreateSalesOrder:
    @pytest.mark.asyncio
    async def test_creates_items_and_derived_records(self, service, products, test_session):
        sales_order = await service.create_sales_order(order_request(products[0].id, products[1].id))

        assert sales_order.sales_order_id == "SO-0001"
        assert [i.item_serial_no for i in sales_order.items] == [1, 2]
        assert [i.job_card_number for i in sales_order.items] == ["SO-0001/1", "SO-0001/2"]
        assert sales_order.total_amount == 300.0
        assert sales_order.items[0].product_snapshot["general"]["symag_part_no"] == "CS-001"

        orders = sorted(sales_order.production_orders, key=lambda o: o.item_serial_no)
        assert [o.order_number for o in orders] == ["ORD-1001", "ORD-1002"]
        assert [o.job_card.job_card_id for o in orders] == ["JC-5001", "JC-5002"]
        assert orders[1].job_card.job_card_number == "SO-0001/2"
        assert await count(test_session, JobCard) == 2

    @pytest.mark.asyncio
    async def test_written_in_one_commit(self, service, products, test_session):
        commits = []
        event.listen(test_session.sync_session, "after_commit", lambda s: commits.append(s))

        await service.create_sales_order(order_request(products[0].id, products[1].id, products[2].id))

        assert len(commits) == 1

    @pytest.mark.asyncio
    async def test_events_published_after_write(self, service, products, emitter):
        await service.create_sales_order(order_request(products[0].id))

        assert [(e.collection, e.action, e.key) for e in emitter.events] == [
            (Collection.SALES_ORDERS, ChangeAction.CREATE, "SO-0001"),
            (Collection.ORDERS, ChangeAction.CREATE, "ORD-1001"),
            (Collection.JOB_CARDS, ChangeAction.CREATE, "JC-5001"),
        ]
        assert emitter.events[0].data["items"][0]["job_card_number"] == "SO-0001/1"

    @pytest.mark.asyncio
    async def test_ids_continue_across_orders(self, service, products):
        await service.create_sales_order(order_request(products[0].id))
        second = await service.create_sales_order(order_request(products[0].id, products[1].id))

        assert second.sales_order_id == "SO-0002"
        assert sorted(o.order_number for o in second.production_orders) == ["ORD-1002", "ORD-1003"]

    @pytest.mark.asyncio
    async def test_duplicate_product_rejected(self, service, products, emitter, test_session):
        with pytest.raises(ValueError, match="only once"):
            await service.create_sales_order(order_request(products[0].id, products[0].id))
        assert emitter.events == []
        assert await count(test_session, ProductionOrder) == 0

    @pytest.mark.asyncio
    async def test_archived_product_rejected(self, service, make_product):
        archived = await make_product("CS-OLD", status="ARCHIVED")
        with pytest.raises(ValueError, match="ARCHIVED"):
            await service.create_sales_order(order_request(archived.id))

    @pytest.mark.asyncio
    async def test_unknown_product_rejected(self, service):
        with pytest.raises(ValueError, match="not found"):
            await service.create_sales_order(order_request(404))


class TestLineItems:
    @pytest.mark.asyncio
    async def test_add_item_uses_next_serial(self, service, products):
        sales_order = await service.create_sales_order(order_request(products[0].id))

        item = await service.add_item(sales_order.id, SalesOrderItemCreate(product_id=products[1].id, quantity=5))

        assert item.item_serial_no == 2
        assert item.job_card_number == "SO-0001/2"
        refreshed = await service.get(sales_order.id)
        assert len(refreshed.production_orders) == 2

    @pytest.mark.asyncio
    async def test_removed_serials_are_not_reused(self, service, products, test_session):
        sales_order = await service.create_sales_order(order_request(products[0].id, products[1].id))

        assert await service.remove_item(sales_order.id, 2)
        assert await count(test_session, ProductionOrder) == 1
        assert await count(test_session, JobCard) == 1

        item = await service.add_item(sales_order.id, SalesOrderItemCreate(product_id=products[2].id))
        assert item.item_serial_no == 3
        assert item.job_card_number == "SO-0001/3"

    @pytest.mark.asyncio
    async def test_add_duplicate_product(self, service, products):
        sales_order = await service.create_sales_order(order_request(products[0].id))
        with pytest.raises(ValueError, match="already on this sales order"):
            await service.add_item(sales_order.id, SalesOrderItemCreate(product_id=products[0].id))

    @pytest.mark.asyncio
    async def test_add_to_missing_order(self, service, products):
        assert await service.add_item(999, SalesOrderItemCreate(product_id=products[0].id)) is None

    @pytest.mark.asyncio
    async def test_update_item_syncs_derived_quantity(self, service, products):
        sales_order = await service.create_sales_order(order_request(products[0].id))

        item = await service.update_item(sales_order.id, 1, SalesOrderItemUpdate(quantity=40, unit_price=2.0))

        assert item.total_price == 80.0
        refreshed = await service.get(sales_order.id)
        assert refreshed.total_amount == 80.0
        order = refreshed.production_orders[0]
        assert order.quantity == 40
        assert order.job_card.quantity == 40

    @pytest.mark.asyncio
    async def test_update_missing_item(self, service, products):
        sales_order = await service.create_sales_order(order_request(products[0].id))
        assert await service.update_item(sales_order.id, 9, SalesOrderItemUpdate(quantity=1)) is None
        assert await service.remove_item(sales_order.id, 9) is False


class TestSalesOrderLifecycle:
    @pytest.mark.asyncio
    async def test_update_header(self, service, products, emitter):
        sales_order = await service.create_sales_order(order_request(products[0].id))

        updated = await service.update_sales_order(sales_order.id, SalesOrderUpdate(status="CONFIRMED", remarks="Rush"))

        assert updated.status == "CONFIRMED"
        assert updated.remarks == "Rush"
        assert updated.customer_name == "ABC Manufacturing"
        assert emitter.events[-1].action == ChangeAction.UPDATE

    @pytest.mark.asyncio
    async def test_update_missing(self, service):
        assert await service.update_sales_order(999, SalesOrderUpdate(remarks="x")) is None

    @pytest.mark.asyncio
    async def test_delete_cascades(self, service, products, emitter, test_session):
        sales_order = await service.create_sales_order(order_request(products[0].id, products[1].id))
        emitter.events.clear()

        assert await service.delete_sales_order(sales_order.id)

        assert await count(test_session, ProductionOrder) == 0
        assert await count(test_session, JobCard) == 0
        assert {e.action for e in emitter.events} == {ChangeAction.DELETE}
        assert len(emitter.events) == 5
        assert await service.delete_sales_order(sales_order.id) is False

    @pytest.mark.asyncio
    async def test_locate_job_card(self, service, products):
        await service.create_sales_order(order_request(products[0].id, products[1].id))

        found = await service.locate_job_card("SO-0001/2")
        assert isinstance(found, JobCardFound)
        assert found.item.product_id == products[1].id

        assert isinstance(await service.locate_job_card("SO-0001/99"), JobCardNotFound)
