# backend/orderdesk/models/production.py
from datetime import datetime
from sqlalchemy import String, Text, Integer, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from orderdesk.core.database import Base


class ProductionOrderStatus:
    PENDING = "PENDING"
    IN_PRODUCTION = "IN_PRODUCTION"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.PENDING, cls.IN_PRODUCTION, cls.COMPLETED, cls.CANCELLED]


class JobCardStatus:
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"
    CANCELLED = "CANCELLED"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.PENDING, cls.IN_PROGRESS, cls.COMPLETED, cls.ON_HOLD, cls.CANCELLED]


ORDER_NUMBER_PREFIX = "ORD-"
ORDER_NUMBER_BASE = 1000
JOB_CARD_ID_PREFIX = "JC-"
JOB_CARD_ID_BASE = 5000


class ProductionOrder(Base):
    """Manufacturing order generated for one sales-order line item."""
    __tablename__ = "production_orders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    order_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)  # e.g. "ORD-1001"
    sales_order_pk: Mapped[int] = mapped_column(
        ForeignKey("sales_orders.id", ondelete="CASCADE"), nullable=False
    )
    sales_order_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    item_serial_no: Mapped[int] = mapped_column(Integer, nullable=False)
    job_card_number: Mapped[str] = mapped_column(String(80), nullable=False)
    job_card_id: Mapped[str] = mapped_column(String(50), nullable=False)
    product_type: Mapped[str] = mapped_column(String(10), nullable=False)
    item_details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    created_date: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    completion_date: Mapped[datetime | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=ProductionOrderStatus.PENDING, nullable=False)
    assigned_to: Mapped[str | None] = mapped_column(String(100), nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    sales_order: Mapped["SalesOrder"] = relationship(  # noqa: F821
        "SalesOrder", back_populates="production_orders"
    )
    job_card: Mapped["JobCard | None"] = relationship(
        "JobCard",
        back_populates="production_order",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="selectin",
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("status", ProductionOrderStatus.PENDING)
        super().__init__(**kwargs)


class JobCard(Base):
    """Shop-floor work instruction tied to a production order."""
    __tablename__ = "job_cards"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    job_card_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)  # e.g. "JC-5001"
    job_card_number: Mapped[str] = mapped_column(String(80), nullable=False, index=True)
    production_order_pk: Mapped[int] = mapped_column(
        ForeignKey("production_orders.id", ondelete="CASCADE"), nullable=False
    )
    order_number: Mapped[str] = mapped_column(String(50), nullable=False)
    sales_order_id: Mapped[str] = mapped_column(String(50), nullable=False)
    part_details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    created_date: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    start_date: Mapped[datetime | None] = mapped_column(nullable=True)
    completion_date: Mapped[datetime | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=JobCardStatus.PENDING, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    production_order: Mapped["ProductionOrder"] = relationship(
        "ProductionOrder", back_populates="job_card"
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("status", JobCardStatus.PENDING)
        super().__init__(**kwargs)
