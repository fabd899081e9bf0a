"""Create brands, products and generated_catalogs tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create brands, products and generated_catalogs tables."""
    # Brands table
    op.create_table(
        'brands',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # Case-insensitive lookups by brand name
    op.create_index('ix_brands_name_lower', 'brands', [sa.text('lower(name)')])

    # Products table
    op.create_table(
        'products',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('brand_id', sa.String(36),
                  sa.ForeignKey('brands.id'), nullable=False, index=True),
        sa.Column('brand_name', sa.String(200), nullable=False),
        sa.Column('image_ref', sa.String(1000), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # Generated catalog PDFs
    op.create_table(
        'generated_catalogs',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('filename', sa.String(255), nullable=False, unique=True),
        sa.Column('download_url', sa.String(1000), nullable=False),
        sa.Column('product_ids', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    """Drop brands, products and generated_catalogs tables."""
    op.drop_table('generated_catalogs')
    op.drop_table('products')
    op.drop_index('ix_brands_name_lower', table_name='brands')
    op.drop_table('brands')
