"""Position cost-basis arithmetic. Pure functions, Decimal only."""

from decimal import Decimal

from src.tp_common.money import to_price


def weighted_average_price(
    held_quantity: int, held_average: Decimal, bought_quantity: int, price: Decimal
) -> Decimal:
    """Total cost over total shares after a buy.

    (10 @ 150.00) + (5 @ 160.00) -> 2300.00 / 15 -> 153.3333
    """
    total_shares = held_quantity + bought_quantity
    if total_shares <= 0:
        raise ValueError("Total shares must be positive")
    total_cost = held_quantity * held_average + bought_quantity * price
    return to_price(total_cost / total_shares)
