"""004: create orders table

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id              BIGSERIAL       PRIMARY KEY,
            instrument_id   INT             NOT NULL REFERENCES instruments (id),
            user_id         INT             NOT NULL REFERENCES users (id),
            size            INT             NOT NULL,
            price           NUMERIC(12,2)   NOT NULL,
            kind            VARCHAR(10)     NOT NULL,
            side            VARCHAR(10)     NOT NULL,
            status          VARCHAR(20)     NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_size   CHECK (size >= 0),
            CONSTRAINT ck_orders_price  CHECK (price >= 0),
            CONSTRAINT ck_orders_kind   CHECK (kind IN ('MARKET', 'LIMIT')),
            CONSTRAINT ck_orders_side   CHECK (side IN ('BUY', 'SELL', 'CASH_IN', 'CASH_OUT')),
            CONSTRAINT ck_orders_status CHECK (status IN ('NEW', 'FILLED', 'REJECTED', 'CANCELLED'))
        );
    """)
    op.execute("COMMENT ON TABLE orders IS 'Order ledger; cash and positions are folded from FILLED rows';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
