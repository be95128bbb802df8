"""CSV export of production orders."""

import csv
import io
from datetime import datetime
from typing import Iterable, Optional

from orderdesk.models.production import ProductionOrder

CSV_HEADER = ["Order ID", "Sales Order ID", "Job Card ID", "Product Type", "Quantity", "Created Date", "Status"]


def export_filename(now: Optional[datetime] = None) -> str:
    """Download name, e.g. orders-1718000000000.csv (epoch milliseconds)."""
    now = now or datetime.now()
    return f"orders-{int(now.timestamp() * 1000)}.csv"


def production_orders_to_csv(orders: Iterable[ProductionOrder]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for order in orders:
        created = order.created_date.strftime("%Y-%m-%d") if order.created_date else ""
        writer.writerow([
            order.order_number,
            order.sales_order_id,
            order.job_card_id,
            order.product_type or (order.item_details or {}).get("product_type", ""),
            order.quantity,
            created,
            order.status,
        ])
    return buffer.getvalue()
