"""004: create orders table

Revision ID: 004
Revises: 003
Create Date: 2025-11-04
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
            order_id            UUID            PRIMARY KEY,
            account_id          UUID            NOT NULL REFERENCES accounts (account_id),
            symbol              VARCHAR(10)     NOT NULL,
            order_type          VARCHAR(10)     NOT NULL,
            quantity            INT             NOT NULL,
            price_per_share     NUMERIC(15, 4)  NOT NULL,
            total_amount        NUMERIC(15, 2)  NOT NULL,
            status              VARCHAR(20)     NOT NULL DEFAULT 'Pending',
            exchange_order_id   VARCHAR(100),
            error_message       VARCHAR(500),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            executed_at         TIMESTAMPTZ,
            idempotency_key     UUID            NOT NULL,
            CONSTRAINT uq_orders_idempotency_key    UNIQUE (idempotency_key),
            CONSTRAINT ck_orders_order_type         CHECK (order_type IN ('Buy', 'Sell')),
            CONSTRAINT ck_orders_quantity           CHECK (quantity > 0),
            CONSTRAINT ck_orders_status             CHECK (
                status IN ('Pending', 'Executed', 'Failed', 'Cancelled')
            ),
            CONSTRAINT ck_orders_executed_has_ids   CHECK (
                status <> 'Executed' OR (exchange_order_id IS NOT NULL AND executed_at IS NOT NULL)
            )
        );
    """)
    op.execute(
        "CREATE INDEX idx_orders_account_created ON orders (account_id, created_at DESC, order_id DESC);"
    )
    op.execute("COMMENT ON TABLE orders IS 'Client orders: idempotency_key is unique across all orders';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
