"""Repository for production orders and job cards."""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from orderdesk.models.production import (
    JOB_CARD_ID_BASE,
    JOB_CARD_ID_PREFIX,
    ORDER_NUMBER_BASE,
    ORDER_NUMBER_PREFIX,
    JobCard,
    ProductionOrder,
)
from orderdesk.repositories.sequences import next_sequence_value


class ProductionOrderRepository:
    """Repository for ProductionOrder and JobCard database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_by_order_number(self, order_number: str) -> Optional[ProductionOrder]:
        """Get a production order by its order number.

        Args:
            order_number: e.g. "ORD-1001"

        Returns:
            ProductionOrder instance or None
        """
        result = await self.session.execute(
            select(ProductionOrder).where(ProductionOrder.order_number == order_number)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[ProductionOrder]:
        """List all production orders.

        Returns:
            List of all ProductionOrder instances
        """
        result = await self.session.execute(
            select(ProductionOrder).order_by(ProductionOrder.id)
        )
        return list(result.scalars().all())

    async def list_job_cards(self, sales_order_id: Optional[str] = None) -> List[JobCard]:
        """List job cards, optionally for one sales order.

        Args:
            sales_order_id: Sales order business key to filter by

        Returns:
            List of JobCard instances
        """
        query = select(JobCard).order_by(JobCard.id)
        if sales_order_id:
            query = query.where(JobCard.sales_order_id == sales_order_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def save(self, order: ProductionOrder) -> ProductionOrder:
        """Commit pending changes on a loaded production order.

        Args:
            order: ProductionOrder modified in this session

        Returns:
            The reloaded ProductionOrder, job card included
        """
        await self.session.commit()
        result = await self.session.execute(
            select(ProductionOrder)
            .where(ProductionOrder.id == order.id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def next_order_number_value(self) -> int:
        """Next numeric counter for production order numbers."""
        return await next_sequence_value(
            self.session, ProductionOrder.order_number, ORDER_NUMBER_PREFIX, ORDER_NUMBER_BASE
        )

    async def next_job_card_id_value(self) -> int:
        """Next numeric counter for job card IDs."""
        return await next_sequence_value(
            self.session, JobCard.job_card_id, JOB_CARD_ID_PREFIX, JOB_CARD_ID_BASE
        )
