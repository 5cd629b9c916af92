"""Builds the shop state returned by every operation."""

import logging
from typing import Optional

from .cart_store import CartStore
from .catalog import ALL_CATEGORIES, Catalog
from .models import CartSnapshot, OrderConfirmation, ShopState
from .pricing import cart_item_count, cart_total

logger = logging.getLogger(__name__)


class ShopStateComposer:
    """Composes the filtered catalog, a cart snapshot and a message."""

    def __init__(self, catalog: Catalog, store: CartStore) -> None:
        self.catalog = catalog
        self.store = store

    def resolve_category(self, category: Optional[str]) -> str:
        """Map a requested category onto one the catalog knows.

        Missing values mean "all". Values outside the category list are
        normally rejected by the tool input schema; anything that still gets
        here falls back to "all".
        """
        if not category:
            return ALL_CATEGORIES
        if category not in self.catalog.categories:
            logger.warning(f"Unknown category {category!r}, showing all products")
            return ALL_CATEGORIES
        return category

    def compose(
        self,
        session_id: str,
        message: Optional[str] = None,
        category: Optional[str] = None,
        order_confirmation: Optional[OrderConfirmation] = None,
    ) -> ShopState:
        """Build the shop state for a session. Read-only."""
        applied = self.resolve_category(category)

        with self.store.session(session_id) as cart:
            snapshot = CartSnapshot(
                items=[item.model_copy() for item in cart.items],
                total=cart_total(cart),
                item_count=cart_item_count(cart),
            )

        return ShopState(
            message=message,
            products=list(self.catalog.filter(applied)),
            cart=snapshot,
            categories=self.catalog.categories,
            current_category=applied,
            order_confirmation=order_confirmation,
        )
