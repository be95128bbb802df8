# backend/orderdesk/models/product.py
from datetime import datetime
from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column
from orderdesk.core.database import Base


class ProductType:
    COMPRESSION_SPRING = "CS"
    CONICAL_COMPRESSION_SPRING = "CCS"
    EXTENSION_SPRING = "ES"
    TORSION_SPRING = "TS"
    DOUBLE_TORSION_SPRING = "DTS"
    WIRE_FORM = "WF"
    PRESS_PART = "PP"

    @classmethod
    def all(cls) -> list[str]:
        return ["CS", "CCS", "ES", "TS", "DTS", "WF", "PP"]


class ProductStatus:
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.ACTIVE, cls.INACTIVE, cls.ARCHIVED]


MAX_PRODUCT_IMAGES = 6


class Product(Base):
    """Product/part master record.

    The three attribute groups keep their nested document shape in JSON
    columns; see orderdesk.schemas.product for the field layout.
    """
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    general: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    material_and_dimensions: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    loads_rates_deflection: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ProductStatus.ACTIVE, index=True)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __init__(self, **kwargs):
        kwargs.setdefault("status", ProductStatus.ACTIVE)
        kwargs.setdefault("general", {})
        kwargs.setdefault("material_and_dimensions", {})
        kwargs.setdefault("loads_rates_deflection", {})
        kwargs.setdefault("images", [])
        super().__init__(**kwargs)

    @property
    def symag_part_no(self) -> str:
        return (self.general or {}).get("symag_part_no") or ""

    def to_document(self) -> dict:
        """Snapshot of the product as stored on sales-order items and job cards."""
        return {
            "id": self.id,
            "product_name": self.product_name,
            "product_type": self.product_type,
            "general": dict(self.general or {}),
            "material_and_dimensions": dict(self.material_and_dimensions or {}),
            "loads_rates_deflection": dict(self.loads_rates_deflection or {}),
            "status": self.status,
            "images": list(self.images or []),
        }
