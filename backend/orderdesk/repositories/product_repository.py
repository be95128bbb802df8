"""Repository for product master database operations."""

from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from orderdesk.models.product import Product
from orderdesk.models.sales_order import SalesOrderItem


class ProductRepository:
    """Repository for Product database operations.

    Provides CRUD operations for the product/part master.
    """

    def __init__(self, session: AsyncSession):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def create(self, product: Product) -> Product:
        """Persist a new product.

        Args:
            product: Unsaved Product instance

        Returns:
            The saved Product with its id assigned
        """
        self.session.add(product)
        await self.session.commit()
        await self.session.refresh(product)
        return product

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get a product by ID.

        Args:
            product_id: Product ID

        Returns:
            Product instance or None
        """
        result = await self.session.execute(
            select(Product).where(Product.id == product_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[Product]:
        """List all products in creation order.

        Returns:
            List of all Product instances
        """
        result = await self.session.execute(select(Product).order_by(Product.id))
        return list(result.scalars().all())

    async def list_by_ids(self, product_ids: list[int]) -> List[Product]:
        """List the products with the given IDs.

        Args:
            product_ids: Product IDs to fetch

        Returns:
            Matching Product instances; unknown IDs are skipped
        """
        if not product_ids:
            return []
        result = await self.session.execute(
            select(Product).where(Product.id.in_(product_ids))
        )
        return list(result.scalars().all())

    async def save(self, product: Product) -> Product:
        """Commit pending changes on a loaded product.

        Args:
            product: Product modified in this session

        Returns:
            The refreshed Product
        """
        await self.session.commit()
        await self.session.refresh(product)
        return product

    async def delete(self, product: Product) -> None:
        """Physically delete a product.

        Args:
            product: Product to delete
        """
        await self.session.delete(product)
        await self.session.commit()

    async def count_references(self, product_id: int) -> int:
        """Count sales-order items that reference a product.

        Args:
            product_id: Product ID

        Returns:
            Number of referencing line items
        """
        result = await self.session.execute(
            select(func.count()).select_from(SalesOrderItem).where(
                SalesOrderItem.product_id == product_id
            )
        )
        return result.scalar() or 0
