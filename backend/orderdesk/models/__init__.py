# Database models
from orderdesk.models.user import User, UserRole
from orderdesk.models.product import Product, ProductStatus, ProductType
from orderdesk.models.sales_order import SalesOrder, SalesOrderItem, SalesOrderStatus
from orderdesk.models.production import (
    JobCard,
    JobCardStatus,
    ProductionOrder,
    ProductionOrderStatus,
)

__all__ = [
    "User",
    "UserRole",
    "Product",
    "ProductStatus",
    "ProductType",
    "SalesOrder",
    "SalesOrderItem",
    "SalesOrderStatus",
    "ProductionOrder",
    "ProductionOrderStatus",
    "JobCard",
    "JobCardStatus",
]
