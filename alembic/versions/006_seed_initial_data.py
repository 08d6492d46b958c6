"""006: seed initial data

Revision ID: 006
Revises: 005
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Sample stocks
    op.execute("""
        INSERT INTO instruments (id, ticker, name, kind) VALUES
            (1, 'DYCA',  'Dycasa S.A.',                 'STOCK'),
            (2, 'CAPX',  'Capex S.A.',                  'STOCK'),
            (3, 'PAMP',  'Pampa Holding S.A.',          'STOCK'),
            (4, 'METR',  'MetroGAS S.A.',               'STOCK'),
            (5, 'TECO2', 'Telecom Argentina S.A.',      'STOCK'),
            (6, 'GGAL',  'Grupo Financiero Galicia',    'STOCK');
    """)
    # Cash instrument: id must match settings.CASH_INSTRUMENT_ID
    op.execute("""
        INSERT INTO instruments (id, ticker, name, kind)
        VALUES (66, 'ARS', 'PESOS', 'CURRENCY');
    """)
    op.execute("SELECT setval('instruments_id_seq', (SELECT MAX(id) FROM instruments));")

    # Sample users
    op.execute("""
        INSERT INTO users (id, email, account_number) VALUES
            (1, 'emiliano@test.com', '10001'),
            (2, 'jose@test.com',     '10002'),
            (3, 'francisco@test.com','10003'),
            (4, 'juan@test.com',     '10004');
    """)
    op.execute("SELECT setval('users_id_seq', (SELECT MAX(id) FROM users));")

    # Two days of prices per stock
    op.execute("""
        INSERT INTO marketdata (instrument_id, date, open, high, low, close, previous_close) VALUES
            (1, '2026-10-15', 240.00, 252.00, 238.00, 248.00, 240.00),
            (1, '2026-10-16', 248.00, 260.00, 246.00, 258.00, 248.00),
            (2, '2026-10-15', 1450.00, 1500.00, 1440.00, 1490.00, 1450.00),
            (2, '2026-10-16', 1490.00, 1495.00, 1400.00, 1420.00, 1490.00),
            (3, '2026-10-15', 920.00, 935.00, 910.00, 925.50, 920.00),
            (3, '2026-10-16', 925.50, 940.00, 920.00, 930.00, 925.50),
            (4, '2026-10-15', 229.50, 232.00, 226.00, 230.00, 229.50),
            (4, '2026-10-16', 230.00, 236.00, 229.00, 235.00, 230.00),
            (5, '2026-10-15', 1810.00, 1830.00, 1790.00, 1820.00, 1810.00),
            (5, '2026-10-16', 1820.00, 1825.00, 1780.00, 1795.00, 1820.00),
            (6, '2026-10-15', 3150.00, 3200.00, 3120.00, 3180.00, 3150.00),
            (6, '2026-10-16', 3180.00, 3260.00, 3170.00, 3250.00, 3180.00);
    """)

    # Opening deposits
    op.execute("""
        INSERT INTO orders (instrument_id, user_id, size, price, kind, side, status, created_at) VALUES
            (66, 1, 1000000, 1, 'MARKET', 'CASH_IN', 'FILLED', '2026-10-14T10:00:00Z'),
            (66, 2, 500000,  1, 'MARKET', 'CASH_IN', 'FILLED', '2026-10-14T10:00:00Z'),
            (66, 3, 250000,  1, 'MARKET', 'CASH_IN', 'FILLED', '2026-10-14T10:00:00Z');
    """)


def downgrade() -> None:
    op.execute("DELETE FROM orders WHERE user_id IN (1, 2, 3, 4);")
    op.execute("DELETE FROM marketdata WHERE instrument_id IN (1, 2, 3, 4, 5, 6);")
    op.execute("DELETE FROM users WHERE id IN (1, 2, 3, 4);")
    op.execute("DELETE FROM instruments WHERE id IN (1, 2, 3, 4, 5, 6, 66);")
