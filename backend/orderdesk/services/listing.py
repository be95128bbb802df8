"""Filtering, sorting and pagination of catalog and order listings.

All functions work on already loaded model objects and return new lists;
the inputs are never mutated.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Generic, Iterable, List, Optional, TypeVar

from orderdesk.models.product import Product, ProductStatus
from orderdesk.models.production import ProductionOrder
from orderdesk.models.sales_order import SalesOrder

T = TypeVar("T")

SALES_ORDER_SORT_FIELDS = ("sales_order_id", "customer_name", "total_amount", "status", "created_date")


@dataclass
class Page(Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int


def paginate(items: List[T], page: int = 1, page_size: int = 10) -> Page[T]:
    """Slice one page out of a list.

    Pages are 1-based; a page past the end is empty.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    page = max(page, 1)
    total = len(items)
    start = (page - 1) * page_size
    return Page(
        items=items[start:start + page_size],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )


def _contains(value: Optional[str], term: str) -> bool:
    return term in (value or "").lower()


def filter_products(
    products: Iterable[Product],
    search: str = "",
    status: Optional[str] = None,
    product_type: Optional[str] = None,
) -> List[Product]:
    """Catalog filter.

    The search term matches the product name, part number or customer part
    number, case-insensitively. Status and type must match exactly.
    """
    term = (search or "").strip().lower()
    result = []
    for product in products:
        general = product.general or {}
        if term and not (
            _contains(product.product_name, term)
            or _contains(general.get("symag_part_no"), term)
            or _contains(general.get("customer_part_no"), term)
        ):
            continue
        if status and product.status != status:
            continue
        if product_type and product.product_type != product_type:
            continue
        result.append(product)
    return result


def filter_available_products(
    products: Iterable[Product],
    search: str = "",
    product_type: Optional[str] = None,
    exclude_ids: Iterable[int] = (),
) -> List[Product]:
    """Products that can still be added to a sales order.

    Only ACTIVE products are offered, minus those already on the order.
    """
    excluded = set(exclude_ids)
    candidates = [p for p in products if p.id not in excluded]
    return filter_products(candidates, search, ProductStatus.ACTIVE, product_type)


def filter_sales_orders(
    orders: Iterable[SalesOrder],
    search: str = "",
    status: Optional[str] = None,
) -> List[SalesOrder]:
    term = (search or "").strip().lower()
    return [
        o for o in orders
        if (not term or _contains(o.sales_order_id, term) or _contains(o.customer_name, term))
        and (not status or o.status == status)
    ]


def _sales_order_sort_key(sort_by: str):
    if sort_by == "total_amount":
        return lambda o: o.total_amount or 0.0
    if sort_by in ("sales_order_id", "customer_name", "status"):
        return lambda o: getattr(o, sort_by) or ""
    # created_date and anything unknown: creation time
    return lambda o: o.created_at or datetime.min


def sort_sales_orders(
    orders: Iterable[SalesOrder],
    sort_by: str = "created_date",
    sort_order: str = "desc",
) -> List[SalesOrder]:
    """Sort sales orders; the default is newest first."""
    return sorted(orders, key=_sales_order_sort_key(sort_by), reverse=sort_order != "asc")


def _day(value: Any) -> Optional[date]:
    if value is None:
        return None
    return value.date() if isinstance(value, datetime) else value


def filter_production_orders(
    orders: Iterable[ProductionOrder],
    status: Optional[str] = None,
    order_number: str = "",
    sales_order_id: str = "",
    job_card_id: str = "",
    created_from: Optional[date] = None,
    created_to: Optional[date] = None,
    completed_from: Optional[date] = None,
    completed_to: Optional[date] = None,
) -> List[ProductionOrder]:
    """Production order filter.

    Text filters are case-insensitive substring matches. A date range is
    applied only when both ends are given; orders without a completion date
    never match a completion range.
    """
    result = []
    for order in orders:
        if status and order.status != status:
            continue
        if order_number and not _contains(order.order_number, order_number.lower()):
            continue
        if sales_order_id and not _contains(order.sales_order_id, sales_order_id.lower()):
            continue
        if job_card_id and not _contains(order.job_card_id, job_card_id.lower()):
            continue
        if created_from and created_to:
            created = _day(order.created_date)
            if created is None or not created_from <= created <= created_to:
                continue
        if completed_from and completed_to:
            completed = _day(order.completion_date)
            if completed is None or not completed_from <= completed <= completed_to:
                continue
        result.append(order)
    return result
