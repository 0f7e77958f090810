"""Deal price arithmetic.

Money is handled as :class:`~decimal.Decimal` with two places. The discounted
price is rounded down to the cent, so for any positive list price and any
discount of at least one percent the deal price stays strictly below the
original price.
"""

from datetime import datetime, timedelta
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
HUNDRED = Decimal(100)


def to_money(value: Decimal | int | float | str) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_deal_price(base_price: Decimal, discount_percentage: Decimal) -> Decimal:
    """``base_price * (1 - discount / 100)``, rounded down to the cent."""
    base = Decimal(str(base_price))
    discount = Decimal(str(discount_percentage))
    if not 0 < discount < HUNDRED:
        raise ValueError("Discount percentage must be between 0 and 100 exclusive.")
    return (base * (1 - discount / HUNDRED)).quantize(CENT, rounding=ROUND_DOWN)


def compute_end_date(start: datetime, duration_hours: int) -> datetime:
    return start + timedelta(hours=duration_hours)


def projected_savings(
    original_price: Decimal, deal_price: Decimal, quantity: int
) -> Decimal:
    return to_money((Decimal(str(original_price)) - Decimal(str(deal_price))) * quantity)


def completion_percentage(current: int, target: int) -> Decimal:
    if target <= 0:
        return Decimal("0.0")
    return (Decimal(current) / Decimal(target) * HUNDRED).quantize(
        Decimal("0.1"), rounding=ROUND_HALF_UP
    )
