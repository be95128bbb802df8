# backend/orderdesk/schemas/sales_order.py
from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

SalesOrderStatusName = Literal["DRAFT", "CONFIRMED", "IN_PROGRESS", "COMPLETED", "CANCELLED"]


class SalesOrderItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(default=1, gt=0)
    unit_price: float = Field(default=0.0, ge=0)


class SalesOrderItemUpdate(BaseModel):
    quantity: int | None = Field(default=None, gt=0)
    unit_price: float | None = Field(default=None, ge=0)


class SalesOrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_serial_no: int
    product_id: int | None
    product_name: str
    product_type: str
    quantity: int
    unit_price: float
    total_price: float
    job_card_number: str
    product_snapshot: dict[str, Any] | None = None


class SalesOrderCreate(BaseModel):
    customer_name: str = Field(..., min_length=1)
    customer_id: str | None = None
    created_date: date = Field(default_factory=date.today)
    completion_target_date: date = Field(default_factory=date.today)
    status: SalesOrderStatusName = "DRAFT"
    remarks: str | None = None
    items: list[SalesOrderItemCreate] = Field(..., min_length=1)


class SalesOrderUpdate(BaseModel):
    customer_name: str | None = Field(default=None, min_length=1)
    customer_id: str | None = None
    created_date: date | None = None
    completion_target_date: date | None = None
    status: SalesOrderStatusName | None = None
    remarks: str | None = None


class SalesOrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sales_order_id: str
    customer_id: str | None
    customer_name: str
    created_date: date
    completion_target_date: date
    status: str
    remarks: str | None
    total_amount: float
    items: list[SalesOrderItemResponse]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SalesOrderListResponse(BaseModel):
    items: list[SalesOrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class NextSalesOrderIdResponse(BaseModel):
    sales_order_id: str


class JobCardLookupResponse(BaseModel):
    job_card_number: str
    sales_order: SalesOrderResponse
    item: SalesOrderItemResponse
