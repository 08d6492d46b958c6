"""003: create marketdata table

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE marketdata (
            id              BIGSERIAL       PRIMARY KEY,
            instrument_id   INT             NOT NULL REFERENCES instruments (id),
            date            DATE            NOT NULL,
            open            NUMERIC(12,2)   NOT NULL,
            high            NUMERIC(12,2)   NOT NULL,
            low             NUMERIC(12,2)   NOT NULL,
            close           NUMERIC(12,2)   NOT NULL,
            previous_close  NUMERIC(12,2)   NOT NULL,
            CONSTRAINT uq_marketdata_instrument_date UNIQUE (instrument_id, date)
        );
    """)
    op.execute("COMMENT ON TABLE marketdata IS 'Daily price snapshots; latest close prices MARKET orders';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS marketdata CASCADE;")
