# backend/orderdesk/models/sales_order.py
from datetime import date, datetime
from sqlalchemy import String, Text, Integer, Float, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from orderdesk.core.database import Base


class SalesOrderStatus:
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.DRAFT, cls.CONFIRMED, cls.IN_PROGRESS, cls.COMPLETED, cls.CANCELLED]


def format_job_card_number(sales_order_id: str, item_serial_no: int) -> str:
    return f"{sales_order_id}/{item_serial_no}"


class SalesOrder(Base):
    __tablename__ = "sales_orders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    sales_order_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)  # e.g. "SO-0001"
    customer_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_date: Mapped[date] = mapped_column(default=date.today)
    completion_target_date: Mapped[date] = mapped_column(default=date.today)
    status: Mapped[str] = mapped_column(String(20), default=SalesOrderStatus.DRAFT, nullable=False)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_amount: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    # Highest serial ever issued; serials of removed items are not reused
    last_item_serial_no: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    items: Mapped[list["SalesOrderItem"]] = relationship(
        "SalesOrderItem",
        back_populates="sales_order",
        cascade="all, delete-orphan",
        order_by="SalesOrderItem.item_serial_no",
        lazy="selectin",
    )
    production_orders: Mapped[list["ProductionOrder"]] = relationship(  # noqa: F821
        "ProductionOrder",
        back_populates="sales_order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("status", SalesOrderStatus.DRAFT)
        kwargs.setdefault("total_amount", 0.0)
        kwargs.setdefault("last_item_serial_no", 0)
        super().__init__(**kwargs)

    @property
    def next_item_serial_no(self) -> int:
        highest = max((item.item_serial_no for item in self.items), default=0)
        return max(highest, self.last_item_serial_no or 0) + 1

    def add_item(self, item: "SalesOrderItem") -> "SalesOrderItem":
        """Attach a line item under the next serial number."""
        item.item_serial_no = self.next_item_serial_no
        item.job_card_number = format_job_card_number(self.sales_order_id, item.item_serial_no)
        self.items.append(item)
        self.last_item_serial_no = item.item_serial_no
        self.recalculate_total()
        return item

    def get_item(self, item_serial_no: int) -> "SalesOrderItem | None":
        for item in self.items:
            if item.item_serial_no == item_serial_no:
                return item
        return None

    def recalculate_total(self) -> float:
        self.total_amount = sum(item.total_price or 0.0 for item in self.items)
        return self.total_amount


class SalesOrderItem(Base):
    """One line item of a sales order; each line becomes one job card."""
    __tablename__ = "sales_order_items"
    __table_args__ = (
        UniqueConstraint("sales_order_pk", "item_serial_no", name="uq_sales_order_item_serial"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    sales_order_pk: Mapped[int] = mapped_column(
        ForeignKey("sales_orders.id", ondelete="CASCADE"), nullable=False
    )
    item_serial_no: Mapped[int] = mapped_column(Integer, nullable=False)
    product_id: Mapped[int | None] = mapped_column(ForeignKey("products.id"), nullable=True)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_type: Mapped[str] = mapped_column(String(10), nullable=False)
    product_snapshot: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    unit_price: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    job_card_number: Mapped[str] = mapped_column(String(80), nullable=False, index=True)

    sales_order: Mapped["SalesOrder"] = relationship("SalesOrder", back_populates="items")

    def __init__(self, **kwargs):
        kwargs.setdefault("quantity", 1)
        kwargs.setdefault("unit_price", 0.0)
        super().__init__(**kwargs)
        self.recalculate_total()

    def recalculate_total(self) -> float:
        self.total_price = (self.quantity or 0) * (self.unit_price or 0.0)
        return self.total_price
