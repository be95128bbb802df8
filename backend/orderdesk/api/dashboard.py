# backend/orderdesk/api/dashboard.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from orderdesk.api.deps import get_current_user
from orderdesk.core.database import get_db
from orderdesk.models.user import User
from orderdesk.schemas.sales_order import JobCardLookupResponse, SalesOrderItemResponse, SalesOrderResponse
from orderdesk.services.job_card_locator import JobCardFound, JobCardNotFound
from orderdesk.services.order_summary import summarize_orders, summarize_products, summarize_sales_orders
from orderdesk.services.product_service import ProductService
from orderdesk.services.production_service import ProductionService
from orderdesk.services.sales_order_service import SalesOrderService
from orderdesk.services.state_store import LiveStateStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

# Global state store instance (initialized in main.py)
_state_store: Optional[LiveStateStore] = None


def init_dashboard_api(state_store: LiveStateStore) -> None:
    global _state_store
    _state_store = state_store


def get_state_store() -> LiveStateStore:
    if _state_store is None:
        raise HTTPException(status_code=503, detail="Live state not initialized")
    return _state_store


@router.get("/summary")
async def get_summary(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Order, product and sales-order statistics."""
    return {
        **summarize_orders(await ProductionService(db).list_orders()),
        **summarize_products(await ProductService(db).list_all()),
        **summarize_sales_orders(await SalesOrderService(db).list_all()),
    }


@router.get("/job-card", response_model=JobCardLookupResponse)
async def find_job_card(
    q: str = Query(..., description="Job card number, e.g. SO-0001/1"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Job Card Locator: resolve a job card number to its order and item."""
    result = await SalesOrderService(db).locate_job_card(q.strip())
    if isinstance(result, JobCardFound):
        return JobCardLookupResponse(
            job_card_number=result.job_card_number,
            sales_order=SalesOrderResponse.model_validate(result.sales_order),
            item=SalesOrderItemResponse.model_validate(result.item),
        )
    if isinstance(result, JobCardNotFound):
        raise HTTPException(status_code=404, detail=result.message)
    raise HTTPException(status_code=422, detail=result.message)


@router.get("/activity")
async def get_activity(
    limit: int = Query(20, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    store: LiveStateStore = Depends(get_state_store),
):
    """Most recent changes, newest first."""
    return [
        {
            "collection": e.collection.value,
            "action": e.action.value,
            "key": e.key,
            "occurred_at": e.occurred_at.isoformat(),
        }
        for e in store.recent_activity(limit)
    ]
