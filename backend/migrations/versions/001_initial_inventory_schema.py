"""Initial inventory schema

Creates the six tables of the back office:
- products (versioned for optimistic locking)
- stock_transactions (append-only ledger)
- shopify_orders (raw webhook log)
- bom_components (per-variant BOM lines)
- users
- attachments

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_inventory_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all inventory tables."""

    # 1. Products
    op.create_table(
        'products',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('tag', sa.String(length=50), nullable=True),
        sa.Column('product_code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=30), nullable=False,
                  comment='OILS, MACHINES_SPARES or RAW_MATERIALS'),
        sa.Column('unit', sa.String(length=20), nullable=False),
        sa.Column('current_stock', sa.Integer(), nullable=False),
        sa.Column('min_stock_level', sa.Integer(), nullable=False),
        sa.Column('unit_per_box', sa.Integer(), nullable=True),
        sa.Column('stock_boxes', sa.Integer(), nullable=True),
        sa.Column('shopify_skus', sa.JSON(), nullable=False,
                  comment='Variant key -> Shopify SKU'),
        sa.Column('supplier', sa.String(length=255), nullable=True),
        sa.Column('supplier_code', sa.String(length=100), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_products_product_code', 'products', ['product_code'])
    op.create_index('ix_products_category', 'products', ['category'])

    # 2. Ledger
    op.create_table(
        'stock_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('product_id', sa.String(length=50), nullable=False),
        sa.Column('product_code', sa.String(length=50), nullable=True),
        sa.Column('product_name', sa.String(length=255), nullable=True),
        sa.Column('category', sa.String(length=30), nullable=True),
        sa.Column('type', sa.String(length=10), nullable=False, comment='add or remove'),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=True),
        sa.Column('balance_after', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('shopify_order_id', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_stock_transactions_product_id', 'stock_transactions', ['product_id'])
    op.create_index('ix_stock_transactions_shopify_order_id', 'stock_transactions', ['shopify_order_id'])

    # 3. Webhook log
    op.create_table(
        'shopify_orders',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('shopify_order_id', sa.String(length=50), nullable=False),
        sa.Column('order_number', sa.String(length=50), nullable=True),
        sa.Column('fulfillment_status', sa.String(length=50), nullable=True),
        sa.Column('line_items', sa.JSON(), nullable=True),
        sa.Column('received_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_shopify_orders_shopify_order_id', 'shopify_orders', ['shopify_order_id'])

    # 4. BOM lines
    op.create_table(
        'bom_components',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('variant_key', sa.String(length=50), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('component_code', sa.String(length=100), nullable=True),
        sa.Column('component_name', sa.String(length=255), nullable=True),
        sa.Column('quantity', sa.JSON(), nullable=True, comment='Quantity as entered'),
        sa.Column('quantity_units', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_bom_components_variant_key', 'bom_components', ['variant_key'])

    # 5. Users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_name', 'users', ['name'], unique=True)

    # 6. Attachments
    op.create_table(
        'attachments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('stored_file_name', sa.String(length=255), nullable=False),
        sa.Column('file_type', sa.String(length=100), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False, comment='File size in bytes'),
        sa.Column('file_path', sa.String(length=500), nullable=False),
        sa.Column('associated_oil_id', sa.String(length=50), nullable=False),
        sa.Column('associated_oil_name', sa.String(length=255), nullable=False),
        sa.Column('uploaded_by', sa.String(length=100), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('upload_date', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('stored_file_name')
    )
    op.create_index('ix_attachments_associated_oil_id', 'attachments', ['associated_oil_id'])


def downgrade() -> None:
    """Drop all inventory tables."""
    op.drop_index('ix_attachments_associated_oil_id', table_name='attachments')
    op.drop_table('attachments')

    op.drop_index('ix_users_name', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

    op.drop_index('ix_bom_components_variant_key', table_name='bom_components')
    op.drop_table('bom_components')

    op.drop_index('ix_shopify_orders_shopify_order_id', table_name='shopify_orders')
    op.drop_table('shopify_orders')

    op.drop_index('ix_stock_transactions_shopify_order_id', table_name='stock_transactions')
    op.drop_index('ix_stock_transactions_product_id', table_name='stock_transactions')
    op.drop_table('stock_transactions')

    op.drop_index('ix_products_category', table_name='products')
    op.drop_index('ix_products_product_code', table_name='products')
    op.drop_table('products')
