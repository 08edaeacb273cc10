"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum labels are the Python member names, as SQLAlchemy persists them
table_status = sa.Enum('FREE', 'OCCUPIED', 'RESERVED', name='tablestatus')
order_status = sa.Enum(
    'PENDING', 'PREPARING', 'READY', 'SERVED', 'DELIVERED', 'CANCELLED',
    name='orderstatus',
)
item_status = sa.Enum('PENDING', 'PREPARING', 'READY', 'SERVED', 'CANCELLED', name='itemstatus')
discount_type = sa.Enum('PERCENTAGE', 'AMOUNT', name='discounttype')
payment_method = sa.Enum('CASH', 'CARD', 'UPI', name='paymentmethod')
payment_status = sa.Enum('COMPLETED', 'REFUNDED', name='paymentstatus')


def upgrade() -> None:
    # Create tables table
    op.create_table(
        'tables',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('number', sa.Integer(), unique=True, nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False, default=4),
        sa.Column('status', table_status, nullable=False, server_default='FREE'),
        sa.Column('current_order_id', postgresql.UUID(as_uuid=True)),
        sa.Column('group_id', sa.String(64)),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reserved_by', sa.String(255)),
        sa.Column('reserved_time', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    op.create_index('ix_tables_number', 'tables', ['number'])
    op.create_index('ix_tables_group_id', 'tables', ['group_id'])

    # Create menu_items table
    op.create_table(
        'menu_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('category', sa.String(100)),
        sa.Column('is_available', sa.Boolean(), default=True),
        sa.Column('preparation_time_minutes', sa.Integer()),
        sa.Column('sort_order', sa.Integer(), default=0),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create orders table
    op.create_table(
        'orders',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('order_number', sa.Integer(), unique=True, nullable=False),
        sa.Column('table_number', sa.Integer()),
        sa.Column('status', order_status, nullable=False, server_default='PENDING'),
        sa.Column('hold_status', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('cancel_reason', sa.Text()),
        sa.Column('total', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('discount_type', discount_type),
        sa.Column('discount_value', sa.Numeric(10, 2)),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('payment_method', payment_method),
        sa.Column('parent_order_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('orders.id')),
        sa.Column('created_by', sa.String(255)),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    op.create_index('ix_orders_order_number', 'orders', ['order_number'])
    op.create_index('ix_orders_table_number', 'orders', ['table_number'])

    # Create order_items table
    op.create_table(
        'order_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('menu_item_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('menu_items.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('notes', sa.Text()),
        sa.Column('modifiers', sa.JSON()),
        sa.Column('status', item_status, nullable=False, server_default='PENDING'),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    # Create payment_transactions table
    op.create_table(
        'payment_transactions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('method', payment_method, nullable=False),
        sa.Column('status', payment_status, nullable=False, server_default='COMPLETED'),
        sa.Column('transaction_id', sa.String(255)),
        sa.Column('ledger_date', sa.Date()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('refunded_at', sa.DateTime()),
    )
    op.create_index('ix_payment_transactions_order_id', 'payment_transactions', ['order_id'])

    # Create daily_sales table
    op.create_table(
        'daily_sales',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('date', sa.Date(), unique=True, nullable=False),
        sa.Column('total_sales', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_orders', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('average_order_value', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    op.create_index('ix_daily_sales_date', 'daily_sales', ['date'])

    # Create restaurant_settings table
    op.create_table(
        'restaurant_settings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('restaurant_name', sa.String(255)),
        sa.Column('tax_rate', sa.Numeric(5, 2), nullable=False, server_default='5.00'),
        sa.Column('tax_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('currency', sa.String(10), nullable=False, server_default='₹'),
        sa.Column('discount_presets', sa.JSON()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create counters table
    op.create_table(
        'counters',
        sa.Column('name', sa.String(64), primary_key=True),
        sa.Column('value', sa.Integer(), nullable=False, server_default='0'),
    )


def downgrade() -> None:
    op.drop_table('counters')
    op.drop_table('restaurant_settings')
    op.drop_table('daily_sales')
    op.drop_table('payment_transactions')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('menu_items')
    op.drop_table('tables')

    bind = op.get_bind()
    for enum_type in (payment_status, payment_method, discount_type, item_status, order_status, table_status):
        enum_type.drop(bind, checkfirst=True)
