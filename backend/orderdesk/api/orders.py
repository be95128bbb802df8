# backend/orderdesk/api/orders.py
"""Production orders and job cards."""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from orderdesk.api.deps import get_current_user
from orderdesk.core.config import settings
from orderdesk.core.database import get_db
from orderdesk.models.user import User
from orderdesk.schemas.production import (
    JobCardResponse,
    ProductionOrderListResponse,
    ProductionOrderResponse,
    ProductionOrderStatusUpdate,
)
from orderdesk.services.csv_export import export_filename, production_orders_to_csv
from orderdesk.services.listing import filter_production_orders, paginate
from orderdesk.services.production_service import ProductionService

router = APIRouter(prefix="/api", tags=["orders"])


class ProductionOrderFilters:
    def __init__(
        self,
        status: Optional[str] = None,
        order_number: str = "",
        sales_order_id: str = "",
        job_card_id: str = "",
        created_from: Optional[date] = None,
        created_to: Optional[date] = None,
        completed_from: Optional[date] = None,
        completed_to: Optional[date] = None,
    ):
        self.params = dict(
            status=status,
            order_number=order_number,
            sales_order_id=sales_order_id,
            job_card_id=job_card_id,
            created_from=created_from,
            created_to=created_to,
            completed_from=completed_from,
            completed_to=completed_to,
        )


@router.get("/orders", response_model=ProductionOrderListResponse)
async def list_production_orders(
    filters: ProductionOrderFilters = Depends(),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    orders = filter_production_orders(await ProductionService(db).list_orders(), **filters.params)
    result = paginate(orders, page, page_size)
    return ProductionOrderListResponse(
        items=[ProductionOrderResponse.model_validate(o) for o in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.get("/orders/export.csv")
async def export_production_orders(
    filters: ProductionOrderFilters = Depends(),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Filtered production orders as a CSV download."""
    orders = filter_production_orders(await ProductionService(db).list_orders(), **filters.params)
    return Response(
        content=production_orders_to_csv(orders),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.put("/orders/{order_number}/status", response_model=ProductionOrderResponse)
async def update_production_order_status(
    order_number: str,
    data: ProductionOrderStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    order = await ProductionService(db).update_status(order_number, data.status, data.assigned_to)
    if not order:
        raise HTTPException(status_code=404, detail="Production order not found")
    return ProductionOrderResponse.model_validate(order)


@router.get("/job-cards", response_model=list[JobCardResponse])
async def list_job_cards(
    sales_order_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    job_cards = await ProductionService(db).list_job_cards(sales_order_id)
    return [JobCardResponse.model_validate(j) for j in job_cards]
