"""Tests for listing filters, sorting and pagination."""

from datetime import date, datetime

import pytest

from orderdesk.models.product import Product
from orderdesk.models.production import ProductionOrder
from orderdesk.models.sales_order import SalesOrder
from orderdesk.services.listing import (
    filter_available_products,
    filter_production_orders,
    filter_products,
    filter_sales_orders,
    paginate,
    sort_sales_orders,
)


def product(id, name, part_no, status="ACTIVE", product_type="CS", customer_part_no=None):
    return Product(
        id=id,
        product_name=name,
        product_type=product_type,
        status=status,
        general={"symag_part_no": part_no, "customer_part_no": customer_part_no},
    )


@pytest.fixture
def catalog():
    return [
        product(1, "Standard Compression Spring - Steel", "CS-001-STL"),
        product(2, "Heavy Duty Compression Spring", "CS-008-HD", status="ARCHIVED"),
        product(3, "Extension Spring - Alloy Steel", "ES-003-AS", product_type="ES", customer_part_no="CP-003"),
        product(4, "Torsion Spring", "TS-004-HCS", status="INACTIVE", product_type="TS"),
    ]


def production_order(number, status="PENDING", created=None, completed=None, sales_order_id="SO-0001"):
    return ProductionOrder(
        order_number=number,
        sales_order_id=sales_order_id,
        job_card_id=number.replace("ORD-", "JC-"),
        status=status,
        created_date=created,
        completion_date=completed,
    )


class TestPaginate:
    def test_first_page(self):
        page = paginate(list(range(25)), 1, 10)
        assert page.items == list(range(10))
        assert page.total == 25
        assert page.total_pages == 3

    def test_last_partial_page(self):
        assert paginate(list(range(25)), 3, 10).items == [20, 21, 22, 23, 24]

    def test_page_past_end_is_empty(self):
        assert paginate(list(range(5)), 4, 10).items == []

    def test_page_below_one_is_clamped(self):
        assert paginate([1, 2, 3], 0, 2).page == 1

    def test_empty_list(self):
        page = paginate([], 1, 10)
        assert page.total == 0
        assert page.total_pages == 0

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            paginate([1], 1, 0)


class TestFilterProducts:
    def test_status_and_search_both_apply(self, catalog):
        result = filter_products(catalog, search="COMPRESSION", status="ACTIVE")
        assert [p.id for p in result] == [1]

    def test_search_matches_part_numbers(self, catalog):
        assert [p.id for p in filter_products(catalog, search="es-003")] == [3]
        assert [p.id for p in filter_products(catalog, search="cp-003")] == [3]

    def test_type_filter(self, catalog):
        assert [p.id for p in filter_products(catalog, product_type="TS")] == [4]

    def test_no_filters_returns_everything(self, catalog):
        assert len(filter_products(catalog)) == 4

    def test_available_products_are_active_and_not_on_order(self, catalog):
        result = filter_available_products(catalog, exclude_ids=[1])
        assert [p.id for p in result] == [3]


class TestSalesOrders:
    @pytest.fixture
    def orders(self):
        return [
            SalesOrder(id=1, sales_order_id="SO-0001", customer_name="ABC Manufacturing", status="DRAFT",
                       total_amount=300.0, created_at=datetime(2024, 1, 15)),
            SalesOrder(id=2, sales_order_id="SO-0002", customer_name="XYZ Industries", status="CONFIRMED",
                       total_amount=100.0, created_at=datetime(2024, 1, 17)),
            SalesOrder(id=3, sales_order_id="SO-0003", customer_name="Global Springs Ltd", status="DRAFT",
                       total_amount=200.0, created_at=datetime(2024, 1, 16)),
        ]

    def test_search_by_customer(self, orders):
        assert [o.id for o in filter_sales_orders(orders, search="xyz")] == [2]

    def test_search_by_id_and_status(self, orders):
        assert [o.id for o in filter_sales_orders(orders, search="so-000", status="DRAFT")] == [1, 3]

    def test_default_sort_is_newest_first(self, orders):
        assert [o.id for o in sort_sales_orders(orders)] == [2, 3, 1]

    def test_sort_by_amount_ascending(self, orders):
        assert [o.id for o in sort_sales_orders(orders, "total_amount", "asc")] == [2, 3, 1]

    def test_sort_does_not_mutate_input(self, orders):
        sort_sales_orders(orders, "customer_name")
        assert [o.id for o in orders] == [1, 2, 3]


class TestFilterProductionOrders:
    @pytest.fixture
    def orders(self):
        return [
            production_order("ORD-1001", "COMPLETED", datetime(2024, 1, 15), datetime(2024, 1, 20)),
            production_order("ORD-1002", "PENDING", datetime(2024, 2, 1), sales_order_id="SO-0002"),
            production_order("ORD-1003", "IN_PRODUCTION", datetime(2024, 2, 10)),
        ]

    def test_status(self, orders):
        assert [o.order_number for o in filter_production_orders(orders, status="PENDING")] == ["ORD-1002"]

    def test_text_filters_are_substring_matches(self, orders):
        assert len(filter_production_orders(orders, order_number="ord-100")) == 3
        assert [o.order_number for o in filter_production_orders(orders, sales_order_id="0002")] == ["ORD-1002"]
        assert [o.order_number for o in filter_production_orders(orders, job_card_id="JC-1003")] == ["ORD-1003"]

    def test_created_range(self, orders):
        result = filter_production_orders(orders, created_from=date(2024, 2, 1), created_to=date(2024, 2, 5))
        assert [o.order_number for o in result] == ["ORD-1002"]

    def test_half_open_range_is_ignored(self, orders):
        assert len(filter_production_orders(orders, created_from=date(2024, 2, 1))) == 3

    def test_completion_range_skips_open_orders(self, orders):
        result = filter_production_orders(orders, completed_from=date(2024, 1, 1), completed_to=date(2024, 12, 31))
        assert [o.order_number for o in result] == ["ORD-1001"]
