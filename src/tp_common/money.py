"""Fixed-point money arithmetic.

All balances, prices and amounts are ``Decimal``. No float anywhere.
Amounts are kept at the currency minor unit (NUMERIC(15,2)),
prices per share at four decimals (NUMERIC(15,4)).
"""

from decimal import ROUND_HALF_UP, Decimal

from config.settings import settings

MONEY_QUANT = Decimal("0.01")
PRICE_QUANT = Decimal("0.0001")

_CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£"}


def to_money(value: Decimal | int | str) -> Decimal:
    """Quantize to the currency minor unit: Decimal('1500.005') -> Decimal('1500.01')."""
    return Decimal(value).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def to_price(value: Decimal | int | str) -> Decimal:
    """Quantize a per-share price to four decimals."""
    return Decimal(value).quantize(PRICE_QUANT, rounding=ROUND_HALF_UP)


def money_to_display(amount: Decimal, currency: str | None = None) -> str:
    """Format for messages: Decimal('15000') -> '€15,000.00', Decimal('-12') -> '-€12.00'."""
    code = (currency or settings.DEFAULT_CURRENCY).upper()
    symbol = _CURRENCY_SYMBOLS.get(code, f"{code} ")
    quantized = to_money(amount)
    if quantized < 0:
        return f"-{symbol}{-quantized:,.2f}"
    return f"{symbol}{quantized:,.2f}"
