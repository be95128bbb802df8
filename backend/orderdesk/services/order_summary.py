"""Dashboard summary statistics."""

from collections import Counter
from datetime import datetime
from typing import Any, Iterable

from orderdesk.models.product import Product
from orderdesk.models.production import ProductionOrder, ProductionOrderStatus
from orderdesk.models.sales_order import SalesOrder


def _counts(values: Iterable[str], key: str) -> list[dict[str, Any]]:
    # Counter keeps first-seen order
    return [{key: value, "count": count} for value, count in Counter(values).items()]


def _product_type(order: ProductionOrder) -> str:
    return order.product_type or (order.item_details or {}).get("product_type", "")


def summarize_orders(orders: Iterable[ProductionOrder]) -> dict[str, Any]:
    """Summary of production orders for the dashboard.

    Returns:
        Totals per status, counts by status and by product type, the
        average completion time in days and the number of orders created
        per month (YYYY-MM)
    """
    orders = list(orders)
    statuses = [o.status for o in orders]

    durations = [
        (o.completion_date - o.created_date).total_seconds() / 86400
        for o in orders
        if o.completion_date and o.created_date
    ]
    monthly = Counter(
        o.created_date.strftime("%Y-%m") for o in orders if isinstance(o.created_date, datetime)
    )

    return {
        "total_orders": len(orders),
        "completed_orders": statuses.count(ProductionOrderStatus.COMPLETED),
        "pending_orders": statuses.count(ProductionOrderStatus.PENDING),
        "in_production_orders": statuses.count(ProductionOrderStatus.IN_PRODUCTION),
        "cancelled_orders": statuses.count(ProductionOrderStatus.CANCELLED),
        "orders_by_status": _counts(statuses, "status"),
        "orders_by_product_type": _counts((_product_type(o) for o in orders), "product_type"),
        "average_completion_days": round(sum(durations) / len(durations), 2) if durations else None,
        "orders_by_month": [{"month": m, "count": c} for m, c in sorted(monthly.items())],
    }


def summarize_products(products: Iterable[Product]) -> dict[str, Any]:
    products = list(products)
    return {
        "total_products": len(products),
        "products_by_status": _counts((p.status for p in products), "status"),
    }


def summarize_sales_orders(orders: Iterable[SalesOrder]) -> dict[str, Any]:
    orders = list(orders)
    return {
        "total_sales_orders": len(orders),
        "sales_orders_by_status": _counts((o.status for o in orders), "status"),
        "total_value": round(sum(o.total_amount or 0.0 for o in orders), 2),
    }
