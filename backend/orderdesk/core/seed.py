# backend/orderdesk/core/seed.py
"""Load demo data into an empty database.

Usage:
    python -m orderdesk.core.seed [--database-url URL]

The database is taken from --database-url, else DATABASE_URL, else the
POSTGRES_* variables. Tables are created when missing. Products and sales
orders are only inserted while the products table is empty, so running the
script twice is harmless.
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import date
from typing import Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from orderdesk.core.config import settings
from orderdesk.core.database import create_engine_for_url
from orderdesk.core.init_db import init_db
from orderdesk.core.security import hash_password
from orderdesk.models import Product, User, UserRole
from orderdesk.schemas.product import ProductCreate
from orderdesk.schemas.sales_order import SalesOrderCreate, SalesOrderItemCreate
from orderdesk.services.events import ChangeEventEmitter
from orderdesk.services.product_service import ProductService
from orderdesk.services.sales_order_service import SalesOrderService

logger = logging.getLogger(__name__)

SEED_AUTHOR = "System"
DEMO_USER = ("operator", "operator123")


def resolve_database_url(explicit: Optional[str] = None, environ: Mapping[str, str] = os.environ) -> str:
    """Pick the database to seed.

    Args:
        explicit: URL given on the command line
        environ: Environment to read DATABASE_URL / POSTGRES_* from

    Returns:
        Database URL; falls back to the configured default
    """
    if explicit:
        return explicit
    if environ.get("DATABASE_URL"):
        return environ["DATABASE_URL"]
    if environ.get("POSTGRES_HOST"):
        return (
            f"postgresql+asyncpg://{environ.get('POSTGRES_USER', 'postgres')}:"
            f"{environ.get('POSTGRES_PASSWORD', 'postgres')}@{environ['POSTGRES_HOST']}:"
            f"{environ.get('POSTGRES_PORT', '5432')}/{environ.get('POSTGRES_DB', 'orderdesk')}"
        )
    return settings.effective_database_url


def _dim(value: float, tolerance: float) -> dict:
    return {"value_mm": value, "tolerance_mm": tolerance}


def _spring(
    name, product_type, part_no, weight, customer, moq,
    material, spec, wire, outside, free_length, configuration,
    rate, temp, cycles, surface, remark, load1=None, **extra,
) -> dict:
    number = customer.split("-")[-1]
    loads = {
        "spring_rate": {"value_n_per_mm": rate[0], "tolerance_n_per_mm": rate[1]},
        "operating_temp_c": temp,
        "cycles": cycles,
        "surface_treatment": surface,
        "remark": remark,
    }
    if load1:
        loads.update(length_at_load1_mm=load1[0], load1_n=load1[1], deflection_at_load1_mm=load1[2])
    return {
        "product_name": name,
        "product_type": product_type,
        "general": {
            "symag_part_no": part_no,
            "part_weight_net": weight,
            "customer_code": customer,
            "customer_part_no": f"CP-{number}",
            "customer_part_name_no": f"Spring Type {chr(ord('A') + int(number) - 1)}",
            "moq": moq,
        },
        "material_and_dimensions": {
            "material_type": material,
            "mtl_spec": spec,
            "wire_dia": _dim(*wire),
            "outside_dia": _dim(*outside),
            "free_length": _dim(*free_length),
            "configuration": configuration,
            **extra,
        },
        "loads_rates_deflection": loads,
    }


PRODUCTS = [
    _spring("Standard Compression Spring - Steel", "CS", "CS-001-STL", 50, "CUST-001", 100,
            "Steel", "SAE 1070", (2.0, 0.1), (10.0, 0.2), (25.0, 0.5), "Closed and Ground",
            (15.5, 0.5), 80, 1000000, "Zinc", "Suitable for automotive applications", load1=(20, 100, 5)),
    _spring("Complex Coil Spring - Stainless Steel", "CCS", "CCS-002-SS", 75, "CUST-002", 150,
            "Stainless Steel", "ASTM A228", (2.5, 0.15), (12.0, 0.25), (30.0, 0.6), "Closed and Ground",
            (18.2, 0.6), 120, 2000000, "Nickle", "Corrosion resistant for chemical industry",
            load1=(25, 150, 6), total_coils=8, active_coils=6),
    _spring("Extension Spring - Alloy Steel", "ES", "ES-003-AS", 40, "CUST-003", 200,
            "Alloy Steel", "SAE 1095", (1.8, 0.08), (9.0, 0.18), (50.0, 1.0), "Extended Length",
            (12.8, 0.4), 100, 500000, "Powder Coating", "Used in machinery and mechanical systems",
            load1=(45, 80, 4), end_type="Open Loop"),
    _spring("Torsion Spring - High Carbon Steel", "TS", "TS-004-HCS", 35, "CUST-004", 120,
            "High Carbon Steel", "ASTM A227", (2.2, 0.12), (11.0, 0.22), (28.0, 0.5), "Torque Spring",
            (14.5, 0.5), 90, 1500000, "Zinc", "Suitable for rotational applications", helix="RHS"),
    _spring("Double Torsion Spring - Titanium", "DTS", "DTS-005-TI", 55, "CUST-005", 80,
            "Titanium Alloy", "ASTM B348", (2.3, 0.12), (10.5, 0.21), (32.0, 0.6), "Double Torsion",
            (16.8, 0.5), 150, 3000000, "EP", "Premium material for aerospace applications"),
    _spring("Wave Form Spring - Stainless", "WF", "WF-006-SS", 30, "CUST-006", 250,
            "Stainless Steel", "ASTM A313", (1.5, 0.08), (8.0, 0.15), (20.0, 0.4), "Wave Form",
            (11.2, 0.4), 110, 2500000, "Nickle", "Compact design for space-constrained applications"),
    _spring("Planar Spring - Chrome Steel", "PP", "PP-007-CS", 45, "CUST-007", 100,
            "Chrome Steel", "SAE 1060", (2.1, 0.1), (11.5, 0.23), (27.0, 0.5), "Planar Configuration",
            (17.3, 0.5), 95, 1800000, "Zinc", "High performance general-purpose spring", load1=(22, 120, 5.5)),
    _spring("Heavy Duty Compression Spring", "CS", "CS-008-HD", 120, "CUST-008", 50,
            "Steel", "SAE 1065", (3.5, 0.2), (18.0, 0.35), (45.0, 1.0), "Closed and Ground",
            (28.5, 1.0), 85, 500000, "Zinc", "Heavy load industrial spring",
            load1=(35, 300, 10), total_coils=10, active_coils=8),
    _spring("Precision Spring - Medical Grade", "ES", "ES-009-MED", 12, "CUST-009", 500,
            "Stainless Steel", "ASTM F138", (0.8, 0.05), (5.0, 0.1), (15.0, 0.3), "Precision Coil",
            (5.2, 0.2), 37, 10000000, "Nickle", "Medical/surgical device applications"),
    _spring("Custom Spring - Application Specific", "CCS", "CCS-010-CUST", 65, "CUST-010", 100,
            "Steel", "SAE 1074", (2.8, 0.14), (14.0, 0.28), (35.0, 0.7), "Custom Design",
            (19.5, 0.7), 105, 1200000, "Powder Coating", "Customized for specific application requirements",
            load1=(28, 180, 7)),
]

# (customer id, customer name, created, target, status, remarks, [(part no, quantity, unit price)])
SALES_ORDERS = [
    ("CUST-001", "ABC Manufacturing", date(2024, 1, 15), date(2024, 2, 15), "COMPLETED",
     "Completed ahead of schedule", [("CS-001-STL", 500, 1.2), ("CCS-002-SS", 600, 2.4)]),
    ("CUST-002", "XYZ Industries", date(2024, 1, 17), date(2024, 2, 20), "IN_PROGRESS",
     "In production", [("ES-003-AS", 700, 1.5), ("TS-004-HCS", 400, 1.8)]),
    ("CUST-003", "Global Springs Ltd", date(2024, 1, 19), date(2024, 2, 25), "IN_PROGRESS",
     None, [("DTS-005-TI", 550, 6.5), ("WF-006-SS", 650, 0.9)]),
    ("CUST-004", "Tech Components Inc", date(2024, 1, 21), date(2024, 3, 1), "CONFIRMED",
     None, [("PP-007-CS", 580, 1.1), ("CS-008-HD", 480, 3.2)]),
    ("CUST-005", "Industrial Solutions", date(2024, 1, 23), date(2024, 3, 5), "DRAFT",
     "Awaiting customer drawing approval", [("ES-009-MED", 620, 4.0), ("CCS-010-CUST", 720, 2.7)]),
]


async def seed_users(session: AsyncSession) -> int:
    result = await session.execute(select(User).where(User.username == DEMO_USER[0]))
    if result.scalar_one_or_none():
        return 0
    session.add(User(
        username=DEMO_USER[0],
        password_hash=hash_password(DEMO_USER[1]),
        role=UserRole.USER,
    ))
    await session.commit()
    return 1


async def seed_catalog(session: AsyncSession) -> tuple[int, int]:
    """Insert fixture products and sales orders into an empty catalog.

    Returns:
        (products created, sales orders created)
    """
    existing = (await session.execute(select(func.count(Product.id)))).scalar_one()
    if existing:
        logger.info(f"Found {existing} products, skipping catalog fixtures")
        return 0, 0

    # Nothing is listening during a seed run
    emitter = ChangeEventEmitter()
    products = ProductService(session, emitter)
    part_ids = {}
    for document in PRODUCTS:
        product = await products.create_product(ProductCreate.model_validate(document), author=SEED_AUTHOR)
        part_ids[product.symag_part_no] = product.id

    sales_orders = SalesOrderService(session, emitter)
    for customer_id, customer_name, created, target, status, remarks, lines in SALES_ORDERS:
        await sales_orders.create_sales_order(SalesOrderCreate(
            customer_id=customer_id,
            customer_name=customer_name,
            created_date=created,
            completion_target_date=target,
            status=status,
            remarks=remarks,
            items=[
                SalesOrderItemCreate(product_id=part_ids[part_no], quantity=quantity, unit_price=price)
                for part_no, quantity, price in lines
            ],
        ))
    return len(PRODUCTS), len(SALES_ORDERS)


async def seed(database_url: str) -> None:
    db_engine = create_engine_for_url(database_url)
    session_factory = sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    try:
        await init_db(db_engine, session_factory)
        async with session_factory() as session:
            users = await seed_users(session)
            product_count, sales_order_count = await seed_catalog(session)
    finally:
        await db_engine.dispose()

    print(f"Users created:        {users}")
    print(f"Products created:     {product_count}")
    print(f"Sales orders created: {sales_order_count}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load demo data into the order desk database.")
    parser.add_argument("--database-url", help="Overrides DATABASE_URL and POSTGRES_* settings")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)
    try:
        asyncio.run(seed(resolve_database_url(args.database_url)))
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
