"""Repository layer for database operations.

This module provides repository classes for the product master, sales
orders, production orders/job cards and user accounts.
"""

from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.repositories.production_repository import ProductionOrderRepository
from orderdesk.repositories.sales_order_repository import SalesOrderRepository
from orderdesk.repositories.user_repository import UserRepository

__all__ = [
    "ProductRepository",
    "ProductionOrderRepository",
    "SalesOrderRepository",
    "UserRepository",
]
