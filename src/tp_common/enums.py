"""Global enums — values must match DB CHECK constraints exactly.

Values are the strings returned to callers (e.g. ``status="Executed"``).
"""

from enum import Enum


class OrderType(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    EXECUTED = "Executed"
    FAILED = "Failed"
    CANCELLED = "Cancelled"


class TransactionType(str, Enum):
    DEBIT = "Debit"
    CREDIT = "Credit"
