"""Ledger domain model — append-only balance-change records."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from src.tp_common.enums import TransactionType


@dataclass(frozen=True)
class Transaction:
    transaction_id: UUID
    account_id: UUID
    order_id: UUID
    transaction_type: TransactionType
    amount: Decimal          # always positive; direction is in transaction_type
    balance_before: Decimal  # point-in-time snapshot
    balance_after: Decimal
    created_at: datetime
