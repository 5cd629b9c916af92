"""In-memory cart storage keyed by session."""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from .models import Cart

logger = logging.getLogger(__name__)


class CartStore:
    """Owns every session's cart for the lifetime of the process.

    Carts are created on first access and never deleted individually; a
    checkout clears a cart but keeps it for the next order. Each session has
    its own re-entrant lock so mutations of one cart are serialized while
    different sessions proceed independently. Carts and locks are not dropped
    when an MCP session ends (``DELETE /mcp``); they accumulate until
    ``close()`` at process shutdown.
    """

    def __init__(self) -> None:
        self._carts: dict[str, Cart] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> Cart:
        """Get the cart for a session, creating an empty one if needed."""
        with self._lock:
            cart = self._carts.get(session_id)
            if cart is None:
                cart = Cart()
                self._carts[session_id] = cart
                self._locks[session_id] = threading.RLock()
                logger.debug(f"Created new cart for session {session_id}")
            return cart

    def _session_lock(self, session_id: str) -> threading.RLock:
        self.get(session_id)
        with self._lock:
            return self._locks[session_id]

    @contextmanager
    def session(self, session_id: str) -> Iterator[Cart]:
        """Hold the session's lock and yield its cart."""
        with self._session_lock(session_id):
            yield self.get(session_id)

    def close(self) -> None:
        """Drop all carts."""
        with self._lock:
            count = len(self._carts)
            self._carts.clear()
            self._locks.clear()
        logger.info(f"Cart store closed ({count} cart(s) dropped)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._carts)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._carts
