"""003: create stock_positions table

Revision ID: 003
Revises: 002
Create Date: 2025-11-04
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE stock_positions (
            position_id     UUID            PRIMARY KEY,
            account_id      UUID            NOT NULL
                REFERENCES accounts (account_id) ON DELETE CASCADE,
            symbol          VARCHAR(10)     NOT NULL,
            quantity        INT             NOT NULL DEFAULT 0,
            average_price   NUMERIC(15, 4)  NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_stock_positions_account_symbol UNIQUE (account_id, symbol),
            CONSTRAINT ck_stock_positions_quantity_gte_0 CHECK (quantity >= 0),
            CONSTRAINT ck_stock_positions_symbol         CHECK (symbol ~ '^[A-Z]{1,10}$')
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_stock_positions_updated_at
            BEFORE UPDATE ON stock_positions
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE stock_positions IS 'One row per (account, symbol); zero-quantity rows are kept';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS stock_positions CASCADE;")
