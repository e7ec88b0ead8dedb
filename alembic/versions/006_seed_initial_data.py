"""006: seed initial data

Revision ID: 006
Revises: 005
Create Date: 2025-11-04
"""

from typing import Sequence, Union

from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SEED_ACCOUNT_ID = "11111111-1111-1111-1111-111111111111"
SEED_CLIENT_ID = "22222222-2222-2222-2222-222222222222"


def upgrade() -> None:
    op.execute(f"""
        INSERT INTO accounts (account_id, client_id, cash_balance, currency)
        VALUES ('{SEED_ACCOUNT_ID}', '{SEED_CLIENT_ID}', 50000.00, 'EUR');
    """)
    op.execute(f"""
        INSERT INTO stock_positions (position_id, account_id, symbol, quantity, average_price)
        VALUES (gen_random_uuid(), '{SEED_ACCOUNT_ID}', 'AAPL', 10, 150.0000);
    """)


def downgrade() -> None:
    op.execute(f"DELETE FROM stock_positions WHERE account_id = '{SEED_ACCOUNT_ID}';")
    op.execute(f"DELETE FROM accounts WHERE account_id = '{SEED_ACCOUNT_ID}';")
