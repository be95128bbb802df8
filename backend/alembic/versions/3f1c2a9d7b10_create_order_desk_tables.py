"""create_order_desk_tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, products, sales orders and production tables."""

    conn = op.get_bind()
    inspector = sa.inspect(conn)

    def table_exists(name):
        return inspector.has_table(name)

    if not table_exists('users'):
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('username', sa.String(length=100), nullable=False),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('role', sa.String(length=20), nullable=False, server_default='user'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('email', sa.String(length=255), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('username')
        )

    if not table_exists('products'):
        op.create_table(
            'products',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('product_name', sa.String(length=255), nullable=False),
            sa.Column('product_type', sa.String(length=10), nullable=False),
            sa.Column('general', sa.JSON(), nullable=False),
            sa.Column('material_and_dimensions', sa.JSON(), nullable=False),
            sa.Column('loads_rates_deflection', sa.JSON(), nullable=False),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('images', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.Column('created_by', sa.String(length=100), nullable=True),
            sa.Column('updated_by', sa.String(length=100), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_products_product_type', 'products', ['product_type'])
        op.create_index('ix_products_status', 'products', ['status'])

    if not table_exists('sales_orders'):
        op.create_table(
            'sales_orders',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('sales_order_id', sa.String(length=50), nullable=False),
            sa.Column('customer_id', sa.String(length=100), nullable=True),
            sa.Column('customer_name', sa.String(length=255), nullable=False),
            sa.Column('created_date', sa.Date(), nullable=False),
            sa.Column('completion_target_date', sa.Date(), nullable=False),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('remarks', sa.Text(), nullable=True),
            sa.Column('total_amount', sa.Float(), nullable=False),
            sa.Column('last_item_serial_no', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_sales_orders_sales_order_id', 'sales_orders', ['sales_order_id'], unique=True)

    if not table_exists('sales_order_items'):
        op.create_table(
            'sales_order_items',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('sales_order_pk', sa.Integer(), nullable=False),
            sa.Column('item_serial_no', sa.Integer(), nullable=False),
            sa.Column('product_id', sa.Integer(), nullable=True),
            sa.Column('product_name', sa.String(length=255), nullable=False),
            sa.Column('product_type', sa.String(length=10), nullable=False),
            sa.Column('product_snapshot', sa.JSON(), nullable=True),
            sa.Column('quantity', sa.Integer(), nullable=False),
            sa.Column('unit_price', sa.Float(), nullable=False),
            sa.Column('total_price', sa.Float(), nullable=False),
            sa.Column('job_card_number', sa.String(length=80), nullable=False),
            sa.ForeignKeyConstraint(['sales_order_pk'], ['sales_orders.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['product_id'], ['products.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('sales_order_pk', 'item_serial_no', name='uq_sales_order_item_serial')
        )
        op.create_index('ix_sales_order_items_job_card_number', 'sales_order_items', ['job_card_number'])

    if not table_exists('production_orders'):
        op.create_table(
            'production_orders',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('order_number', sa.String(length=50), nullable=False),
            sa.Column('sales_order_pk', sa.Integer(), nullable=False),
            sa.Column('sales_order_id', sa.String(length=50), nullable=False),
            sa.Column('item_serial_no', sa.Integer(), nullable=False),
            sa.Column('job_card_number', sa.String(length=80), nullable=False),
            sa.Column('job_card_id', sa.String(length=50), nullable=False),
            sa.Column('product_type', sa.String(length=10), nullable=False),
            sa.Column('item_details', sa.JSON(), nullable=False),
            sa.Column('quantity', sa.Integer(), nullable=False),
            sa.Column('created_date', sa.DateTime(), nullable=False),
            sa.Column('completion_date', sa.DateTime(), nullable=True),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('assigned_to', sa.String(length=100), nullable=True),
            sa.Column('remarks', sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(['sales_order_pk'], ['sales_orders.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_production_orders_order_number', 'production_orders', ['order_number'], unique=True)
        op.create_index('ix_production_orders_sales_order_id', 'production_orders', ['sales_order_id'])

    if not table_exists('job_cards'):
        op.create_table(
            'job_cards',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('job_card_id', sa.String(length=50), nullable=False),
            sa.Column('job_card_number', sa.String(length=80), nullable=False),
            sa.Column('production_order_pk', sa.Integer(), nullable=False),
            sa.Column('order_number', sa.String(length=50), nullable=False),
            sa.Column('sales_order_id', sa.String(length=50), nullable=False),
            sa.Column('part_details', sa.JSON(), nullable=False),
            sa.Column('quantity', sa.Integer(), nullable=False),
            sa.Column('created_date', sa.DateTime(), nullable=False),
            sa.Column('start_date', sa.DateTime(), nullable=True),
            sa.Column('completion_date', sa.DateTime(), nullable=True),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(['production_order_pk'], ['production_orders.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_job_cards_job_card_id', 'job_cards', ['job_card_id'], unique=True)
        op.create_index('ix_job_cards_job_card_number', 'job_cards', ['job_card_number'])


def downgrade() -> None:
    """Drop all order desk tables."""
    op.drop_table('job_cards')
    op.drop_table('production_orders')
    op.drop_table('sales_order_items')
    op.drop_table('sales_orders')
    op.drop_table('products')
    op.drop_table('users')
