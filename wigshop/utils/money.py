# wigshop/utils/money.py

from decimal import Decimal, ROUND_HALF_UP

Money = Decimal

CENTS = Decimal("100")

def D(x) -> Money:
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))

def round_money(x: Money) -> Money:
    return D(x).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

def to_major(minor: int) -> Money:
    # 54999 -> Decimal("549.99")
    return round_money(D(int(minor or 0)) / CENTS)

def format_minor(minor: int) -> str:
    return f"${to_major(minor)}"
