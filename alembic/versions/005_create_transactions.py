"""005: create transactions table

Revision ID: 005
Revises: 004
Create Date: 2025-11-04
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            transaction_id      UUID            PRIMARY KEY,
            account_id          UUID            NOT NULL REFERENCES accounts (account_id),
            order_id            UUID            NOT NULL
                REFERENCES orders (order_id) ON DELETE RESTRICT,
            transaction_type    VARCHAR(10)     NOT NULL,
            amount              NUMERIC(15, 2)  NOT NULL,
            balance_before      NUMERIC(15, 2)  NOT NULL,
            balance_after       NUMERIC(15, 2)  NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_type         CHECK (transaction_type IN ('Debit', 'Credit')),
            CONSTRAINT ck_transactions_amount_gt_0  CHECK (amount > 0),
            CONSTRAINT ck_transactions_conservation CHECK (
                (transaction_type = 'Debit'  AND balance_after = balance_before - amount) OR
                (transaction_type = 'Credit' AND balance_after = balance_before + amount)
            )
        );
    """)
    op.execute(
        "CREATE INDEX idx_transactions_account_created ON transactions (account_id, created_at DESC);"
    )
    op.execute("CREATE INDEX idx_transactions_order ON transactions (order_id);")
    op.execute("COMMENT ON TABLE transactions IS 'Balance-change ledger: Append-Only, never updated or deleted';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
