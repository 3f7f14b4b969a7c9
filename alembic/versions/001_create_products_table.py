"""Create products table.

Revision ID: 001
Revises:
Create Date: 2026-10-19

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
    """Create products table."""
    op.create_table(
        'products',
        sa.Column('product_id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('author', sa.String(255), nullable=False),
        sa.Column('price', sa.String(50), nullable=False),
        sa.Column('category', sa.String(255), nullable=False),
        sa.Column('introduction', sa.Text(), nullable=False),
        sa.Column('img_url', sa.String(1000), nullable=False),
        sa.Column('publisher', sa.String(255), nullable=False),
        sa.Column('best_seller', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('new_book', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('recommend', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Category index is a distinct scan over this column
    op.create_index('ix_products_category', 'products', ['category'])


def downgrade() -> None:
    """Drop products table."""
    op.drop_index('ix_products_category', table_name='products')
    op.drop_table('products')
