"""Production order status changes and the linked job card."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.models.production import (
    JobCard,
    JobCardStatus,
    ProductionOrder,
    ProductionOrderStatus,
)
from orderdesk.repositories.production_repository import ProductionOrderRepository
from orderdesk.services.events import (
    ChangeAction,
    ChangeEvent,
    ChangeEventEmitter,
    Collection,
    change_emitter,
)
from orderdesk.services.sales_order_service import job_card_record, production_order_record

logger = logging.getLogger(__name__)

JOB_CARD_STATUS_FOR_ORDER = {
    ProductionOrderStatus.PENDING: JobCardStatus.PENDING,
    ProductionOrderStatus.IN_PRODUCTION: JobCardStatus.IN_PROGRESS,
    ProductionOrderStatus.COMPLETED: JobCardStatus.COMPLETED,
    ProductionOrderStatus.CANCELLED: JobCardStatus.CANCELLED,
}


def apply_status(order: ProductionOrder, status: str, now: Optional[datetime] = None) -> None:
    """Move a production order and its job card to a new status.

    Raises:
        ValueError: If the status is not a production order status.
    """
    if status not in ProductionOrderStatus.all():
        raise ValueError(f"Unknown production order status: {status}")
    now = now or datetime.utcnow()
    order.status = status
    if status == ProductionOrderStatus.COMPLETED:
        order.completion_date = now

    job_card = order.job_card
    if job_card is None:
        return
    job_card.status = JOB_CARD_STATUS_FOR_ORDER[status]
    if status == ProductionOrderStatus.IN_PRODUCTION and job_card.start_date is None:
        job_card.start_date = now
    if status == ProductionOrderStatus.COMPLETED:
        job_card.completion_date = now


class ProductionService:
    def __init__(self, session: AsyncSession, emitter: ChangeEventEmitter = change_emitter):
        self.repo = ProductionOrderRepository(session)
        self.emitter = emitter

    async def list_orders(self) -> List[ProductionOrder]:
        return await self.repo.list_all()

    async def list_job_cards(self, sales_order_id: Optional[str] = None) -> List[JobCard]:
        return await self.repo.list_job_cards(sales_order_id)

    async def update_status(
        self, order_number: str, status: str, assigned_to: Optional[str] = None
    ) -> Optional[ProductionOrder]:
        """Change a production order's status.

        Args:
            order_number: e.g. "ORD-1001"
            status: New ProductionOrderStatus
            assigned_to: Optional operator to assign

        Returns:
            The updated ProductionOrder, or None if it does not exist
        """
        order = await self.repo.get_by_order_number(order_number)
        if order is None:
            return None
        previous = order.status
        apply_status(order, status)
        if assigned_to is not None:
            order.assigned_to = assigned_to
        order = await self.repo.save(order)
        logger.info(f"Production order {order_number}: {previous} -> {status}")

        events = [ChangeEvent(Collection.ORDERS, ChangeAction.UPDATE, order.order_number,
                              production_order_record(order))]
        if order.job_card is not None:
            events.append(ChangeEvent(Collection.JOB_CARDS, ChangeAction.UPDATE,
                                      order.job_card.job_card_id, job_card_record(order.job_card)))
        self.emitter.emit_many(events)
        return order
