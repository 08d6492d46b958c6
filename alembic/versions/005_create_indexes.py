"""005: indexes for the order execution and history hot paths

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Locked cash / position aggregation on every execution
    op.execute("CREATE INDEX idx_orders_user_status ON orders (user_id, status);")
    # Latest snapshot per instrument (MARKET pricing, valuation, search)
    op.execute("CREATE INDEX idx_marketdata_instrument_date ON marketdata (instrument_id, date DESC);")
    # Cursor pagination of order history
    op.execute("CREATE INDEX idx_orders_user_created ON orders (user_id, created_at DESC);")
    # Order -> instrument join
    op.execute("CREATE INDEX idx_orders_instrument ON orders (instrument_id);")


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS idx_orders_instrument;")
    op.execute("DROP INDEX IF EXISTS idx_orders_user_created;")
    op.execute("DROP INDEX IF EXISTS idx_marketdata_instrument_date;")
    op.execute("DROP INDEX IF EXISTS idx_orders_user_status;")
