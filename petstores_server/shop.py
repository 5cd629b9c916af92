"""Shop operations: browse, add, remove, update quantity and checkout.

Every operation returns a ShopState. Logical failures (missing product ID,
unknown product, item not in cart, empty cart) never raise; they come back as
a normal shop state whose message tells the caller what to do next, and the
cart is left untouched.
"""

import logging
import threading
import time
from typing import Callable, Optional

from .cart_store import CartStore
from .catalog import Catalog
from .composer import ShopStateComposer
from .models import CartItem, OrderConfirmation, ShopState
from .pricing import cart_item_count, cart_total, format_price

logger = logging.getLogger(__name__)

SHOP_NAME = "Petstores"
ORDER_PREFIX = "PB-"

WELCOME_MESSAGE = f"Welcome to {SHOP_NAME}! Browse our selection of premium pet food."
MISSING_PRODUCT_ID = "Missing product ID."
ITEM_NOT_IN_CART = "Item not found in cart."
INVALID_QUANTITY = "Quantity must be at least 1."
EMPTY_CART = "Your cart is empty. Add some items before checkout!"

BASE36_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def to_base36(value: int) -> str:
    """Encode a non-negative integer in upper-case base 36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    digits = []
    while True:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_DIGITS[remainder])
        if value == 0:
            break
    return "".join(reversed(digits))


class OrderIdGenerator:
    """Generates short order IDs from a millisecond clock.

    IDs are strictly increasing within one generator: a checkout landing in
    the same millisecond as the previous one is bumped to the next value.
    """

    def __init__(self, prefix: str = ORDER_PREFIX, clock: Optional[Callable[[], int]] = None) -> None:
        self.prefix = prefix
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._last = -1
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            stamp = max(self._clock(), self._last + 1)
            self._last = stamp
        return f"{self.prefix}{to_base36(stamp)}"


class Shop:
    """Cart state machine for all sessions of one store."""

    def __init__(
        self,
        catalog: Catalog,
        store: CartStore,
        order_ids: Optional[Callable[[], str]] = None,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.composer = ShopStateComposer(catalog, store)
        self.order_ids = order_ids or OrderIdGenerator()

    def browse(self, session_id: str, category: Optional[str] = None) -> ShopState:
        """Show the catalog, optionally filtered by category."""
        return self.composer.compose(session_id, WELCOME_MESSAGE, category)

    def add(self, session_id: str, product_id: Optional[str], quantity: Optional[int] = None) -> ShopState:
        """Add a product to the cart, merging with an existing line item."""
        if quantity is None:
            quantity = 1

        if not product_id:
            return self.composer.compose(session_id, MISSING_PRODUCT_ID)

        product = self.catalog.find(product_id)
        if product is None:
            return self.composer.compose(session_id, f"Product {product_id} not found.")

        if quantity < 1:
            return self.composer.compose(session_id, INVALID_QUANTITY)

        with self.store.session(session_id) as cart:
            item = cart.find(product_id)
            if item is not None:
                item.quantity += quantity
            else:
                cart.items.append(CartItem.from_product(product, quantity))
            logger.info(f"Session {session_id}: added {quantity}x {product_id}")
            return self.composer.compose(session_id, f"Added {quantity}x {product.name} to cart.")

    def remove(self, session_id: str, product_id: Optional[str]) -> ShopState:
        """Remove a product's line item from the cart."""
        if not product_id:
            return self.composer.compose(session_id, MISSING_PRODUCT_ID)

        with self.store.session(session_id) as cart:
            item = cart.remove(product_id)
            if item is None:
                return self.composer.compose(session_id, ITEM_NOT_IN_CART)
            logger.info(f"Session {session_id}: removed {product_id}")
            return self.composer.compose(session_id, f"Removed {item.name} from cart.")

    def update_quantity(
        self, session_id: str, product_id: Optional[str], quantity: Optional[int] = None
    ) -> ShopState:
        """Set a line item's quantity; zero or less removes it.

        A missing quantity counts as zero.
        """
        if quantity is None:
            quantity = 0

        if not product_id:
            return self.composer.compose(session_id, MISSING_PRODUCT_ID)

        with self.store.session(session_id) as cart:
            item = cart.find(product_id)
            if item is None:
                return self.composer.compose(session_id, ITEM_NOT_IN_CART)

            if quantity <= 0:
                cart.remove(product_id)
                logger.info(f"Session {session_id}: removed {product_id}")
                return self.composer.compose(session_id, f"Removed {item.name} from cart.")

            item.quantity = quantity
            logger.info(f"Session {session_id}: set {product_id} quantity to {quantity}")
            return self.composer.compose(session_id, f"Updated {item.name} quantity to {quantity}.")

    def checkout(self, session_id: str) -> ShopState:
        """Place an order for everything in the cart and empty it."""
        with self.store.session(session_id) as cart:
            if cart.is_empty:
                return self.composer.compose(session_id, EMPTY_CART)

            total = cart_total(cart)
            item_count = cart_item_count(cart)
            order_id = self.order_ids()
            cart.clear()

            logger.info(f"Session {session_id}: order {order_id} confirmed ({item_count} item(s), {total})")
            confirmation = OrderConfirmation(order_id=order_id, total=total, item_count=item_count)
            message = (
                f"🎉 Order confirmed! Order ID: {order_id}. Total: {format_price(total)} "
                f"for {item_count} item(s). Thank you for shopping at {SHOP_NAME}!"
            )
            return self.composer.compose(session_id, message, order_confirmation=confirmation)
