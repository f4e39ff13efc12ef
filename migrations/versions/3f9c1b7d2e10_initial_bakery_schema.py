"""initial bakery schema: catalog, sizes, size options, images, carts

Revision ID: 3f9c1b7d2e10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9c1b7d2e10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.Text()),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True)),
    )
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id', ondelete='SET NULL')),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('offer_price', sa.Numeric(10, 2)),
        sa.Column('is_offer', sa.Boolean(), nullable=False),
        sa.Column('offer_end_date', sa.DateTime(timezone=True)),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('preparation_time', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.CheckConstraint('price >= 0', name='ck_product_price_non_negative'),
    )
    op.create_index('ix_products_slug', 'products', ['slug'], unique=True)
    op.create_index('ix_products_category_id', 'products', ['category_id'])
    op.create_index('ix_products_is_offer', 'products', ['is_offer'])
    op.create_index('ix_products_is_active', 'products', ['is_active'])

    op.create_table(
        'product_sizes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('person_capacity', sa.Integer(), nullable=False),
        sa.Column('additional_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.CheckConstraint('person_capacity > 0', name='ck_size_capacity_positive'),
        sa.CheckConstraint('additional_price >= 0', name='ck_size_price_non_negative'),
    )
    op.create_index('ix_product_sizes_is_active', 'product_sizes', ['is_active'])

    op.create_table(
        'product_size_options',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('size_id', sa.Integer(), sa.ForeignKey('product_sizes.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True)),
        sa.UniqueConstraint('product_id', 'size_id', name='uq_product_size'),
    )
    op.create_index('ix_product_size_options_product_id', 'product_size_options', ['product_id'])
    op.create_index('ix_product_size_options_size_id', 'product_size_options', ['size_id'])
    # At most one default size per product
    op.create_index(
        'uq_product_single_default',
        'product_size_options',
        ['product_id'],
        unique=True,
        sqlite_where=sa.text('is_default'),
        postgresql_where=sa.text('is_default'),
    )

    op.create_table(
        'product_images',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('storage_key', sa.String(512), nullable=False),
        sa.Column('thumbnail_key', sa.String(512)),
        sa.Column('url', sa.String(1024), nullable=False),
        sa.Column('thumbnail_url', sa.String(1024)),
        sa.Column('image_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_product_images_product_id', 'product_images', ['product_id'])

    op.create_table(
        'carts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('session_key', sa.String(64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_carts_session_key', 'carts', ['session_key'], unique=True)

    op.create_table(
        'cart_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('cart_id', sa.Integer(), sa.ForeignKey('carts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('size_id', sa.Integer(), sa.ForeignKey('product_sizes.id', ondelete='SET NULL')),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.CheckConstraint('quantity > 0', name='ck_cart_item_quantity_positive'),
    )
    op.create_index('ix_cart_items_cart_id', 'cart_items', ['cart_id'])


def downgrade():
    op.drop_table('cart_items')
    op.drop_table('carts')
    op.drop_table('product_images')
    op.drop_index('uq_product_single_default', table_name='product_size_options')
    op.drop_table('product_size_options')
    op.drop_table('product_sizes')
    op.drop_table('products')
    op.drop_table('categories')
