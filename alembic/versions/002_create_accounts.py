"""002: create accounts table

Revision ID: 002
Revises: 001
Create Date: 2025-11-04
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # cash_balance >= 0 is enforced by the trading engine, not by a CHECK here
    op.execute("""
        CREATE TABLE accounts (
            account_id      UUID            PRIMARY KEY,
            client_id       UUID            NOT NULL,
            cash_balance    NUMERIC(15, 2)  NOT NULL DEFAULT 0,
            currency        VARCHAR(3)      NOT NULL DEFAULT 'EUR',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_accounts_currency CHECK (currency ~ '^[A-Z]{3}$')
        );
    """)
    op.execute("CREATE INDEX idx_accounts_client_id ON accounts (client_id);")
    op.execute("""
        CREATE TRIGGER trg_accounts_updated_at
            BEFORE UPDATE ON accounts
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE accounts IS 'Client cash accounts: balances in the account currency, 2 dp';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS accounts CASCADE;")
