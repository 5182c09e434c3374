# rasoi/services/money.py

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Client totals may differ from the server's by at most this much
TOLERANCE = Decimal("0.01")


def to_money(value) -> Decimal:
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity: int, rate) -> Decimal:
    return to_money(Decimal(quantity) * to_money(rate))
