# backend/orderdesk/api/sales_orders.py
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from orderdesk.api.deps import get_current_user
from orderdesk.core.config import settings
from orderdesk.core.database import get_db
from orderdesk.models.user import User
from orderdesk.schemas.product import ProductListResponse, ProductResponse
from orderdesk.schemas.sales_order import (
    SalesOrderCreate,
    SalesOrderUpdate,
    SalesOrderResponse,
    SalesOrderListResponse,
    SalesOrderItemCreate,
    SalesOrderItemUpdate,
    SalesOrderItemResponse,
    NextSalesOrderIdResponse,
)
from orderdesk.services.listing import (
    SALES_ORDER_SORT_FIELDS,
    filter_available_products,
    filter_sales_orders,
    paginate,
    sort_sales_orders,
)
from orderdesk.services.product_service import ProductService
from orderdesk.services.sales_order_service import SalesOrderService

router = APIRouter(prefix="/api/sales-orders", tags=["sales-orders"])


@router.get("", response_model=SalesOrderListResponse)
async def list_sales_orders(
    search: str = "",
    status: Optional[str] = None,
    sort_by: str = Query("created_date", pattern=f"^({'|'.join(SALES_ORDER_SORT_FIELDS)})$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    orders = await SalesOrderService(db).list_all()
    orders = sort_sales_orders(filter_sales_orders(orders, search, status), sort_by, sort_order)
    result = paginate(orders, page, page_size)
    return SalesOrderListResponse(
        items=[SalesOrderResponse.model_validate(o) for o in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.get("/next-id", response_model=NextSalesOrderIdResponse)
async def get_next_sales_order_id(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Preview of the ID the next sales order will get."""
    return NextSalesOrderIdResponse(sales_order_id=await SalesOrderService(db).next_sales_order_id())


@router.post("", response_model=SalesOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_sales_order(
    data: SalesOrderCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        sales_order = await SalesOrderService(db).create_sales_order(data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SalesOrderResponse.model_validate(sales_order)


@router.get("/{sales_order_pk}", response_model=SalesOrderResponse)
async def get_sales_order(
    sales_order_pk: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    sales_order = await SalesOrderService(db).get(sales_order_pk)
    if not sales_order:
        raise HTTPException(status_code=404, detail="Sales order not found")
    return SalesOrderResponse.model_validate(sales_order)


@router.put("/{sales_order_pk}", response_model=SalesOrderResponse)
async def update_sales_order(
    sales_order_pk: int,
    data: SalesOrderUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        sales_order = await SalesOrderService(db).update_sales_order(sales_order_pk, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not sales_order:
        raise HTTPException(status_code=404, detail="Sales order not found")
    return SalesOrderResponse.model_validate(sales_order)


@router.delete("/{sales_order_pk}")
async def delete_sales_order(
    sales_order_pk: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await SalesOrderService(db).delete_sales_order(sales_order_pk):
        raise HTTPException(status_code=404, detail="Sales order not found")
    return {"message": "Sales order deleted"}


@router.get("/{sales_order_pk}/available-products", response_model=ProductListResponse)
async def list_available_products(
    sales_order_pk: int,
    search: str = "",
    product_type: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """ACTIVE products not yet on this sales order."""
    sales_order = await SalesOrderService(db).get(sales_order_pk)
    if not sales_order:
        raise HTTPException(status_code=404, detail="Sales order not found")
    products = await ProductService(db).list_all()
    on_order = [item.product_id for item in sales_order.items]
    result = paginate(filter_available_products(products, search, product_type, on_order), page, page_size)
    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.post("/{sales_order_pk}/items", response_model=SalesOrderItemResponse, status_code=status.HTTP_201_CREATED)
async def add_sales_order_item(
    sales_order_pk: int,
    data: SalesOrderItemCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        item = await SalesOrderService(db).add_item(sales_order_pk, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not item:
        raise HTTPException(status_code=404, detail="Sales order not found")
    return SalesOrderItemResponse.model_validate(item)


@router.put("/{sales_order_pk}/items/{item_serial_no}", response_model=SalesOrderItemResponse)
async def update_sales_order_item(
    sales_order_pk: int,
    item_serial_no: int,
    data: SalesOrderItemUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    item = await SalesOrderService(db).update_item(sales_order_pk, item_serial_no, data)
    if not item:
        raise HTTPException(status_code=404, detail="Sales order item not found")
    return SalesOrderItemResponse.model_validate(item)


@router.delete("/{sales_order_pk}/items/{item_serial_no}")
async def remove_sales_order_item(
    sales_order_pk: int,
    item_serial_no: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await SalesOrderService(db).remove_item(sales_order_pk, item_serial_no):
        raise HTTPException(status_code=404, detail="Sales order item not found")
    return {"message": "Item removed"}
