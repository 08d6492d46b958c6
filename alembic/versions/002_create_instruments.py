"""002: create instruments table

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE instruments (
            id      SERIAL          PRIMARY KEY,
            ticker  VARCHAR(10)     NOT NULL,
            name    VARCHAR(255)    NOT NULL,
            kind    VARCHAR(10)     NOT NULL,
            CONSTRAINT uq_instruments_ticker UNIQUE (ticker),
            CONSTRAINT ck_instruments_kind   CHECK (kind IN ('STOCK', 'CURRENCY'))
        );
    """)
    op.execute("CREATE INDEX idx_instruments_kind ON instruments (kind);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS instruments CASCADE;")
