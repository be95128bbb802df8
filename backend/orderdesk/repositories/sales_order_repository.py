"""Repository for sales orders and their line items."""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from orderdesk.models.sales_order import SalesOrder
from orderdesk.repositories.sequences import next_sequence_value

SALES_ORDER_ID_PREFIX = "SO-"


class SalesOrderRepository:
    """Repository for SalesOrder database operations.

    A sales order is saved together with everything attached to it
    (line items, production orders, job cards), so each write below is a
    single commit.
    """

    def __init__(self, session: AsyncSession):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def create(self, sales_order: SalesOrder) -> SalesOrder:
        """Persist a new sales order and its attached records.

        Args:
            sales_order: Unsaved SalesOrder with items attached

        Returns:
            The saved SalesOrder
        """
        self.session.add(sales_order)
        await self.session.commit()
        return await self.get_by_id(sales_order.id)

    async def get_by_id(self, sales_order_pk: int) -> Optional[SalesOrder]:
        """Get a sales order by its database ID.

        Args:
            sales_order_pk: Database ID

        Returns:
            SalesOrder instance or None
        """
        result = await self.session.execute(
            select(SalesOrder)
            .where(SalesOrder.id == sales_order_pk)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_sales_order_id(self, sales_order_id: str) -> Optional[SalesOrder]:
        """Get a sales order by its business key (e.g. "SO-0001").

        The comparison is case-sensitive.

        Args:
            sales_order_id: Business key

        Returns:
            SalesOrder instance or None
        """
        result = await self.session.execute(
            select(SalesOrder).where(SalesOrder.sales_order_id == sales_order_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[SalesOrder]:
        """List all sales orders.

        Returns:
            List of all SalesOrder instances
        """
        result = await self.session.execute(select(SalesOrder).order_by(SalesOrder.id))
        return list(result.scalars().all())

    async def save(self, sales_order: SalesOrder) -> SalesOrder:
        """Commit pending changes on a loaded sales order.

        Args:
            sales_order: SalesOrder modified in this session

        Returns:
            The reloaded SalesOrder
        """
        await self.session.commit()
        return await self.get_by_id(sales_order.id)

    async def delete(self, sales_order: SalesOrder) -> None:
        """Delete a sales order with its items, production orders and job cards.

        Args:
            sales_order: SalesOrder to delete
        """
        await self.session.delete(sales_order)
        await self.session.commit()

    async def next_sales_order_id(self) -> str:
        """Generate the next sales order business key.

        Returns:
            Key of the form "SO-0001"
        """
        value = await next_sequence_value(
            self.session, SalesOrder.sales_order_id, SALES_ORDER_ID_PREFIX
        )
        return f"{SALES_ORDER_ID_PREFIX}{value:04d}"
