"""001: create users table

Revision ID: 001
Revises: 
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              SERIAL          PRIMARY KEY,
            email           VARCHAR(255)    NOT NULL,
            account_number  VARCHAR(20)     NOT NULL,
            CONSTRAINT uq_users_email           UNIQUE (email),
            CONSTRAINT uq_users_account_number  UNIQUE (account_number)
        );
    """)
    op.execute("COMMENT ON TABLE users IS 'Account holders; read-only to the order engine';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
