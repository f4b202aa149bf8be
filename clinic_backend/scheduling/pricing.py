"""Conversions between major currency units and stored cents."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS_PER_UNIT = 100
_TWO_PLACES = Decimal('0.01')


def to_decimal(price: Decimal | float | int | str) -> Decimal:
    try:
        # str() keeps float input such as 0.29 from picking up binary noise.
        return price if isinstance(price, Decimal) else Decimal(str(price))
    except InvalidOperation as exc:
        raise ValueError(f'Invalid price: {price!r}') from exc


def to_cents(price: Decimal | float | int | str) -> int:
    amount = to_decimal(price) * CENTS_PER_UNIT
    return int(amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / CENTS_PER_UNIT).quantize(_TWO_PLACES)
