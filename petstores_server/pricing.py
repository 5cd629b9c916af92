"""Cart arithmetic."""

from decimal import ROUND_HALF_UP, Decimal

from .models import Cart

CENTS = Decimal("0.01")


def cart_total(cart: Cart) -> Decimal:
    """Sum of unit price times quantity, unrounded."""
    return sum((item.price * item.quantity for item in cart.items), Decimal("0"))


def cart_item_count(cart: Cart) -> int:
    """Sum of quantities (not the number of distinct line items)."""
    return sum(item.quantity for item in cart.items)


def format_price(amount: Decimal) -> str:
    """Format an amount for display, e.g. ``$269.97``."""
    return f"${amount.quantize(CENTS, rounding=ROUND_HALF_UP)}"
