"""Sales-order workflow.

Every line item gets one production order and one job card. The sales
order, its items and those derived records are always written in the same
commit; change events are published only after that commit succeeds.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.models.product import Product, ProductStatus
from orderdesk.models.production import (
    JOB_CARD_ID_PREFIX,
    ORDER_NUMBER_PREFIX,
    JobCard,
    ProductionOrder,
)
from orderdesk.models.sales_order import SalesOrder, SalesOrderItem
from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.repositories.production_repository import ProductionOrderRepository
from orderdesk.repositories.sales_order_repository import SalesOrderRepository
from orderdesk.schemas.production import JobCardResponse, ProductionOrderResponse
from orderdesk.schemas.sales_order import (
    SalesOrderCreate,
    SalesOrderItemCreate,
    SalesOrderItemUpdate,
    SalesOrderResponse,
    SalesOrderUpdate,
)
from orderdesk.services.events import (
    ChangeAction,
    ChangeEvent,
    ChangeEventEmitter,
    Collection,
    change_emitter,
)
from orderdesk.services.job_card_locator import JobCardLookup, locate_job_card

logger = logging.getLogger(__name__)

# Header fields that may be cleared with an explicit null
CLEARABLE_HEADER_FIELDS = ("customer_id", "remarks")


def sales_order_record(sales_order: SalesOrder) -> dict[str, Any]:
    return SalesOrderResponse.model_validate(sales_order).model_dump(mode="json")


def production_order_record(order: ProductionOrder) -> dict[str, Any]:
    return ProductionOrderResponse.model_validate(order).model_dump(mode="json")


def job_card_record(job_card: JobCard) -> dict[str, Any]:
    return JobCardResponse.model_validate(job_card).model_dump(mode="json")


class _Counters:
    """Hands out consecutive order numbers and job card IDs within one write."""

    def __init__(self, next_order_number: int, next_job_card_id: int):
        self.order_number = next_order_number
        self.job_card_id = next_job_card_id

    def take(self) -> tuple[str, str]:
        numbers = f"{ORDER_NUMBER_PREFIX}{self.order_number}", f"{JOB_CARD_ID_PREFIX}{self.job_card_id}"
        self.order_number += 1
        self.job_card_id += 1
        return numbers


class SalesOrderService:
    """Sales orders, their line items and the derived production records."""

    def __init__(self, session: AsyncSession, emitter: ChangeEventEmitter = change_emitter):
        self.session = session
        self.sales_orders = SalesOrderRepository(session)
        self.products = ProductRepository(session)
        self.production = ProductionOrderRepository(session)
        self.emitter = emitter

    async def next_sales_order_id(self) -> str:
        return await self.sales_orders.next_sales_order_id()

    async def get(self, sales_order_pk: int) -> Optional[SalesOrder]:
        return await self.sales_orders.get_by_id(sales_order_pk)

    async def list_all(self) -> List[SalesOrder]:
        return await self.sales_orders.list_all()

    async def locate_job_card(self, job_card_number: str) -> JobCardLookup:
        return await locate_job_card(job_card_number, self.sales_orders.get_by_sales_order_id)

    async def _counters(self) -> _Counters:
        return _Counters(
            await self.production.next_order_number_value(),
            await self.production.next_job_card_id_value(),
        )

    @staticmethod
    def _check_orderable(product: Optional[Product], product_id: int) -> Product:
        if product is None:
            raise ValueError(f"Product {product_id} not found")
        if product.status != ProductStatus.ACTIVE:
            raise ValueError(f"Product {product.product_name} is {product.status} and cannot be ordered")
        return product

    @staticmethod
    def _attach_item(
        sales_order: SalesOrder,
        product: Product,
        data: SalesOrderItemCreate,
        counters: _Counters,
    ) -> SalesOrderItem:
        """Add one line item plus its production order and job card to the graph."""
        snapshot = product.to_document()
        item = sales_order.add_item(SalesOrderItem(
            product_id=product.id,
            product_name=product.product_name,
            product_type=product.product_type,
            product_snapshot=snapshot,
            quantity=data.quantity,
            unit_price=data.unit_price,
        ))
        order_number, job_card_id = counters.take()
        production_order = ProductionOrder(
            order_number=order_number,
            sales_order_id=sales_order.sales_order_id,
            item_serial_no=item.item_serial_no,
            job_card_number=item.job_card_number,
            job_card_id=job_card_id,
            product_type=product.product_type,
            item_details=snapshot,
            quantity=item.quantity,
        )
        production_order.job_card = JobCard(
            job_card_id=job_card_id,
            job_card_number=item.job_card_number,
            order_number=order_number,
            sales_order_id=sales_order.sales_order_id,
            part_details=snapshot,
            quantity=item.quantity,
        )
        sales_order.production_orders.append(production_order)
        return item

    def _derived_for(self, sales_order: SalesOrder, item_serial_no: int) -> Optional[ProductionOrder]:
        for order in sales_order.production_orders:
            if order.item_serial_no == item_serial_no:
                return order
        return None

    def _publish(self, events: List[ChangeEvent]) -> None:
        self.emitter.emit_many(events)

    def _derived_events(self, action: ChangeAction, orders: List[ProductionOrder]) -> List[ChangeEvent]:
        events = []
        for order in orders:
            data = production_order_record(order) if action != ChangeAction.DELETE else None
            events.append(ChangeEvent(Collection.ORDERS, action, order.order_number, data))
            if order.job_card is not None:
                data = job_card_record(order.job_card) if action != ChangeAction.DELETE else None
                events.append(ChangeEvent(Collection.JOB_CARDS, action, order.job_card.job_card_id, data))
        return events

    def _sales_order_event(self, action: ChangeAction, sales_order: SalesOrder) -> ChangeEvent:
        data = sales_order_record(sales_order) if action != ChangeAction.DELETE else None
        return ChangeEvent(Collection.SALES_ORDERS, action, sales_order.sales_order_id, data)

    async def create_sales_order(self, data: SalesOrderCreate) -> SalesOrder:
        """Create a sales order with its items, production orders and job cards.

        Args:
            data: Header fields and at least one line item

        Returns:
            The saved SalesOrder

        Raises:
            ValueError: No items, an unknown or inactive product, or the same
                product listed twice.
        """
        if not data.items:
            raise ValueError("A sales order needs at least one item")
        product_ids = [i.product_id for i in data.items]
        if len(set(product_ids)) != len(product_ids):
            raise ValueError("Each product can appear only once per sales order")

        products = {p.id: p for p in await self.products.list_by_ids(product_ids)}
        for product_id in product_ids:
            self._check_orderable(products.get(product_id), product_id)

        sales_order = SalesOrder(
            sales_order_id=await self.sales_orders.next_sales_order_id(),
            customer_id=data.customer_id,
            customer_name=data.customer_name,
            created_date=data.created_date,
            completion_target_date=data.completion_target_date,
            status=data.status,
            remarks=data.remarks,
            items=[],
            production_orders=[],
        )
        counters = await self._counters()
        for item_data in data.items:
            self._attach_item(sales_order, products[item_data.product_id], item_data, counters)

        sales_order = await self.sales_orders.create(sales_order)
        logger.info(
            f"Created sales order {sales_order.sales_order_id} with {len(sales_order.items)} job cards"
        )
        self._publish(
            [self._sales_order_event(ChangeAction.CREATE, sales_order)]
            + self._derived_events(ChangeAction.CREATE, sales_order.production_orders)
        )
        return sales_order

    async def update_sales_order(self, sales_order_pk: int, data: SalesOrderUpdate) -> Optional[SalesOrder]:
        """Update header fields. Items are changed through the item operations.

        A null for a required field leaves it unchanged.
        """
        sales_order = await self.sales_orders.get_by_id(sales_order_pk)
        if sales_order is None:
            return None
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field not in CLEARABLE_HEADER_FIELDS:
                continue
            if field == "customer_name" and not value:
                raise ValueError("Customer name is required")
            setattr(sales_order, field, value)
        sales_order = await self.sales_orders.save(sales_order)
        self._publish([self._sales_order_event(ChangeAction.UPDATE, sales_order)])
        return sales_order

    async def delete_sales_order(self, sales_order_pk: int) -> bool:
        """Delete a sales order together with its production orders and job cards."""
        sales_order = await self.sales_orders.get_by_id(sales_order_pk)
        if sales_order is None:
            return False
        events = [self._sales_order_event(ChangeAction.DELETE, sales_order)]
        events += self._derived_events(ChangeAction.DELETE, list(sales_order.production_orders))
        await self.sales_orders.delete(sales_order)
        logger.info(f"Deleted sales order {sales_order.sales_order_id}")
        self._publish(events)
        return True

    async def add_item(self, sales_order_pk: int, data: SalesOrderItemCreate) -> Optional[SalesOrderItem]:
        """Add a line item under the next serial number.

        Args:
            sales_order_pk: Database ID of the sales order
            data: Product, quantity and unit price

        Returns:
            The new SalesOrderItem, or None if the sales order does not exist

        Raises:
            ValueError: Unknown or inactive product, or product already on the order.
        """
        sales_order = await self.sales_orders.get_by_id(sales_order_pk)
        if sales_order is None:
            return None
        product = self._check_orderable(await self.products.get_by_id(data.product_id), data.product_id)
        if any(item.product_id == product.id for item in sales_order.items):
            raise ValueError(f"Product {product.product_name} is already on this sales order")

        counters = await self._counters()
        item = self._attach_item(sales_order, product, data, counters)
        serial = item.item_serial_no
        sales_order = await self.sales_orders.save(sales_order)
        logger.info(f"Added item {serial} to {sales_order.sales_order_id}")

        self._publish(
            [self._sales_order_event(ChangeAction.UPDATE, sales_order)]
            + self._derived_events(ChangeAction.CREATE, [self._derived_for(sales_order, serial)])
        )
        return sales_order.get_item(serial)

    async def update_item(
        self, sales_order_pk: int, item_serial_no: int, data: SalesOrderItemUpdate
    ) -> Optional[SalesOrderItem]:
        """Change quantity and/or unit price of a line item.

        The derived production order and job card follow the new quantity.
        """
        sales_order = await self.sales_orders.get_by_id(sales_order_pk)
        if sales_order is None:
            return None
        item = sales_order.get_item(item_serial_no)
        if item is None:
            return None

        if data.quantity is not None:
            item.quantity = data.quantity
        if data.unit_price is not None:
            item.unit_price = data.unit_price
        item.recalculate_total()
        sales_order.recalculate_total()

        production_order = self._derived_for(sales_order, item_serial_no)
        if production_order is not None:
            production_order.quantity = item.quantity
            if production_order.job_card is not None:
                production_order.job_card.quantity = item.quantity

        sales_order = await self.sales_orders.save(sales_order)
        events = [self._sales_order_event(ChangeAction.UPDATE, sales_order)]
        if production_order is not None:
            events += self._derived_events(
                ChangeAction.UPDATE, [self._derived_for(sales_order, item_serial_no)]
            )
        self._publish(events)
        return sales_order.get_item(item_serial_no)

    async def remove_item(self, sales_order_pk: int, item_serial_no: int) -> bool:
        """Remove a line item and its production order and job card."""
        sales_order = await self.sales_orders.get_by_id(sales_order_pk)
        if sales_order is None:
            return False
        item = sales_order.get_item(item_serial_no)
        if item is None:
            return False

        sales_order.items.remove(item)
        production_order = self._derived_for(sales_order, item_serial_no)
        events = []
        if production_order is not None:
            events = self._derived_events(ChangeAction.DELETE, [production_order])
            sales_order.production_orders.remove(production_order)
        sales_order.recalculate_total()

        sales_order = await self.sales_orders.save(sales_order)
        logger.info(f"Removed item {item_serial_no} from {sales_order.sales_order_id}")
        self._publish([self._sales_order_event(ChangeAction.UPDATE, sales_order)] + events)
        return True
