# -*- coding: utf-8 -*-
# 金額一律用 Decimal，兩位小數，四捨五入
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
# orders.price 是 Numeric(10, 2)
MAX_PRICE = Decimal("1e8")


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_money(value) -> Decimal:
    """Convert user input (str, int, Decimal, float) to a 2-place Decimal.

    Floats go through ``str`` first so 3.5 becomes Decimal("3.50"), not its binary expansion.
    Raises ValueError for anything that is not a finite number.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"not a monetary amount: {value!r}")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        if not d.is_finite():
            raise ValueError(f"not a monetary amount: {value!r}")
        return quantize(d)
    except (InvalidOperation, TypeError):
        raise ValueError(f"not a monetary amount: {value!r}")
