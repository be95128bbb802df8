# backend/orderdesk/schemas/production.py
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

ProductionOrderStatusName = Literal["PENDING", "IN_PRODUCTION", "COMPLETED", "CANCELLED"]


class JobCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    job_card_id: str
    job_card_number: str
    order_number: str
    sales_order_id: str
    part_details: dict[str, Any]
    quantity: int
    created_date: datetime
    start_date: datetime | None = None
    completion_date: datetime | None = None
    status: str
    notes: str | None = None


class ProductionOrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_number: str
    sales_order_id: str
    item_serial_no: int
    job_card_number: str
    job_card_id: str
    product_type: str
    item_details: dict[str, Any]
    quantity: int
    created_date: datetime
    completion_date: datetime | None = None
    status: str
    assigned_to: str | None = None
    remarks: str | None = None


class ProductionOrderListResponse(BaseModel):
    items: list[ProductionOrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class ProductionOrderStatusUpdate(BaseModel):
    status: ProductionOrderStatusName
    assigned_to: str | None = None
