"""Create product id counters table.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create product_id_counters and seed it from existing products."""
    op.create_table(
        'product_id_counters',
        sa.Column('name', sa.String(32), primary_key=True),
        sa.Column('value', sa.Integer(), nullable=False),
    )

    # Counters hold the last allocated id; an empty range starts before 1 / 0
    op.execute(
        """
        INSERT INTO product_id_counters (name, value)
        SELECT 'real', COALESCE(MAX(product_id), 0)
        FROM products WHERE product_id > 0
        """
    )
    op.execute(
        """
        INSERT INTO product_id_counters (name, value)
        SELECT 'placeholder', COALESCE(MIN(product_id), 1)
        FROM products WHERE product_id <= 0
        """
    )


def downgrade() -> None:
    """Drop product_id_counters table."""
    op.drop_table('product_id_counters')
