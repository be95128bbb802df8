"""Display lookups shared by the API, reports and CSV export."""

from orderdesk.models.product import ProductStatus, ProductType
from orderdesk.models.production import ProductionOrderStatus
from orderdesk.models.sales_order import SalesOrderStatus

DEFAULT_STATUS_COLOR = "#999999"

PRODUCT_STATUS_COLORS = {
    ProductStatus.ACTIVE: "#4CAF50",
    ProductStatus.INACTIVE: "#FF9800",
    ProductStatus.ARCHIVED: "#F44336",
}

SALES_ORDER_STATUS_COLORS = {
    SalesOrderStatus.DRAFT: "#FFC107",
    SalesOrderStatus.CONFIRMED: "#2196F3",
    SalesOrderStatus.IN_PROGRESS: "#FF9800",
    SalesOrderStatus.COMPLETED: "#4CAF50",
    SalesOrderStatus.CANCELLED: "#f44336",
}

PRODUCTION_ORDER_STATUS_COLORS = {
    ProductionOrderStatus.COMPLETED: "#4CAF50",
    ProductionOrderStatus.PENDING: "#FF9800",
    ProductionOrderStatus.IN_PRODUCTION: "#2196F3",
    ProductionOrderStatus.CANCELLED: "#F44336",
}

PRODUCT_TYPE_NAMES = {
    ProductType.COMPRESSION_SPRING: "Compression Spring",
    ProductType.CONICAL_COMPRESSION_SPRING: "Conical Compression Spring",
    ProductType.EXTENSION_SPRING: "Extension Spring",
    ProductType.TORSION_SPRING: "Torsion Spring",
    ProductType.DOUBLE_TORSION_SPRING: "Double Torsion Spring",
    ProductType.WIRE_FORM: "WireForm",
    ProductType.PRESS_PART: "Press Part",
}

HELIX_OPTIONS = ["RHS", "LHS"]
SURFACE_TREATMENTS = ["Zinc", "Nickle", "Powder Coating", "EP"]


def product_status_color(status: str) -> str:
    return PRODUCT_STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


def sales_order_status_color(status: str) -> str:
    return SALES_ORDER_STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


def production_order_status_color(status: str) -> str:
    return PRODUCTION_ORDER_STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


def product_type_full_name(product_type: str) -> str:
    return PRODUCT_TYPE_NAMES.get(product_type, product_type)


def product_options() -> dict:
    """Choice lists for the product editor and catalog filters."""
    return {
        "product_types": [
            {"value": t, "label": product_type_full_name(t)} for t in ProductType.all()
        ],
        "statuses": ProductStatus.all(),
        "helix": HELIX_OPTIONS,
        "surface_treatments": SURFACE_TREATMENTS,
        "status_colors": dict(PRODUCT_STATUS_COLORS),
    }
