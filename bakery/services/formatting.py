from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def format_amount(amount):
    """Plain two-decimal string, e.g. ``"65.00"``."""
    return str(Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP))


def format_price(amount, symbol="S/"):
    """Display price with thousands separators, e.g. ``"S/ 1,234.50"``."""
    value = Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)
    return f"{symbol} {value:,.2f}"
