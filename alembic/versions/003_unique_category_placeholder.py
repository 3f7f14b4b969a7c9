"""Allow at most one placeholder per category.

Revision ID: 003
Revises: 002
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '003'
down_revision: Union[str, None] = '002'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Drop duplicate placeholders and add the partial unique index."""
    # Keep the newest placeholder of each category
    op.execute(
        """
        DELETE FROM products
        WHERE product_id <= 0
          AND product_id NOT IN (
              SELECT keep_id FROM (
                  SELECT MIN(product_id) AS keep_id
                  FROM products
                  WHERE product_id <= 0
                  GROUP BY category
              ) AS placeholders
          )
        """
    )
    op.create_index(
        'uq_products_category_placeholder',
        'products',
        ['category'],
        unique=True,
        postgresql_where=sa.text('product_id <= 0'),
        sqlite_where=sa.text('product_id <= 0'),
    )


def downgrade() -> None:
    """Drop the partial unique index."""
    op.drop_index('uq_products_category_placeholder', table_name='products')
