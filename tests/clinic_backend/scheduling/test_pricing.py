from decimal import Decimal

import pytest

from clinic_backend.scheduling.pricing import from_cents, to_cents


@pytest.mark.parametrize(
    ('price', 'expected'),
    [
        (Decimal('100.00'), 10000),
        (Decimal('0.29'), 29),
        (0.29, 29),
        (19.99, 1999),
        (150, 15000),
        ('1.1', 110),
    ],
)
def test_to_cents_converts_major_units(price, expected: int) -> None:
    assert to_cents(price) == expected


@pytest.mark.parametrize('price', ['0.01', '0.10', '1.05', '99.99', '1234.56', '100'])
def test_price_round_trips_through_cents(price: str) -> None:
    assert from_cents(to_cents(Decimal(price))) == Decimal(price)


def test_from_cents_keeps_two_decimal_places() -> None:
    assert str(from_cents(10000)) == '100.00'


def test_to_cents_rejects_non_numeric_input() -> None:
    with pytest.raises(ValueError):
        to_cents('ten dollars')
