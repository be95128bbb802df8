"""Product master lifecycle: create, update, archive, delete."""

import logging
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.models.product import Product, ProductStatus
from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from orderdesk.services.events import (
    ChangeAction,
    ChangeEvent,
    ChangeEventEmitter,
    Collection,
    change_emitter,
)

logger = logging.getLogger(__name__)


class ProductInUseError(Exception):
    """Raised when deleting a product that sales-order items still reference."""

    def __init__(self, product_id: int, references: int):
        self.product_id = product_id
        self.references = references
        super().__init__(
            f"Product {product_id} is used by {references} sales order item(s); archive it instead"
        )


def product_record(product: Product) -> dict[str, Any]:
    return ProductResponse.model_validate(product).model_dump(mode="json")


class ProductService:
    def __init__(self, session: AsyncSession, emitter: ChangeEventEmitter = change_emitter):
        self.repo = ProductRepository(session)
        self.emitter = emitter

    def _emit(self, action: ChangeAction, product: Product) -> None:
        data = product_record(product) if action != ChangeAction.DELETE else None
        self.emitter.emit(ChangeEvent(Collection.PRODUCTS, action, str(product.id), data))

    async def get(self, product_id: int) -> Optional[Product]:
        return await self.repo.get_by_id(product_id)

    async def list_all(self) -> List[Product]:
        return await self.repo.list_all()

    async def create_product(self, data: ProductCreate, author: Optional[str] = None) -> Product:
        """Create a product. New products always start ACTIVE."""
        document = data.model_dump(exclude_none=True)
        product = Product(
            product_name=document["product_name"],
            product_type=document["product_type"],
            general=document.get("general", {}),
            material_and_dimensions=document.get("material_and_dimensions", {}),
            loads_rates_deflection=document.get("loads_rates_deflection", {}),
            images=document.get("images", []),
            status=ProductStatus.ACTIVE,
            created_by=author,
            updated_by=author,
        )
        product = await self.repo.create(product)
        logger.info(f"Created product {product.id} ({product.symag_part_no})")
        self._emit(ChangeAction.CREATE, product)
        return product

    async def update_product(
        self, product_id: int, data: ProductUpdate, author: Optional[str] = None
    ) -> Optional[Product]:
        """Merge the given fields into a product; unset fields are kept."""
        product = await self.repo.get_by_id(product_id)
        if product is None:
            return None
        # Whole groups are replaced so the JSON columns register the change
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(product, field, value)
        product.updated_by = author
        product = await self.repo.save(product)
        self._emit(ChangeAction.UPDATE, product)
        return product

    async def archive_product(self, product_id: int) -> Optional[Product]:
        """Set status to ARCHIVED. Nothing else on the product changes."""
        product = await self.repo.get_by_id(product_id)
        if product is None:
            return None
        product.status = ProductStatus.ARCHIVED
        product = await self.repo.save(product)
        logger.info(f"Archived product {product.id}")
        self._emit(ChangeAction.UPDATE, product)
        return product

    async def delete_product(self, product_id: int) -> bool:
        """Physically delete a product that no sales order uses.

        Raises:
            ProductInUseError: If any sales-order item references the product.
        """
        product = await self.repo.get_by_id(product_id)
        if product is None:
            return False
        references = await self.repo.count_references(product_id)
        if references:
            raise ProductInUseError(product_id, references)
        await self.repo.delete(product)
        logger.info(f"Deleted product {product_id}")
        self._emit(ChangeAction.DELETE, product)
        return True
