from datetime import datetime

from orderdesk.models.production import ProductionOrder
from orderdesk.services.csv_export import CSV_HEADER, export_filename, production_orders_to_csv


def test_csv_rows():
    orders = [
        ProductionOrder(order_number="ORD-1001", sales_order_id="SO-0001", job_card_id="JC-5001",
                        product_type="CS", quantity=500, created_date=datetime(2024, 1, 15, 9, 30),
                        status="COMPLETED"),
        ProductionOrder(order_number="ORD-1002", sales_order_id="SO-0001", job_card_id="JC-5002",
                        product_type="", item_details={"product_type": "CCS"}, quantity=600,
                        created_date=datetime(2024, 1, 16), status="PENDING"),
    ]

    lines = production_orders_to_csv(orders).splitlines()

    assert lines[0] == ",".join(CSV_HEADER)
    assert lines[1] == "ORD-1001,SO-0001,JC-5001,CS,500,2024-01-15,COMPLETED"
    assert lines[2] == "ORD-1002,SO-0001,JC-5002,CCS,600,2024-01-16,PENDING"


def test_values_with_commas_are_quoted():
    order = ProductionOrder(order_number="ORD-1,2", sales_order_id="SO-0001", job_card_id="JC-1",
                            product_type="CS", quantity=1, created_date=None, status="PENDING")
    assert '"ORD-1,2"' in production_orders_to_csv([order])


def test_export_filename():
    name = export_filename(datetime(2024, 1, 15))
    assert name.startswith("orders-")
    assert name.endswith(".csv")
    assert name[len("orders-"):-len(".csv")].isdigit()
