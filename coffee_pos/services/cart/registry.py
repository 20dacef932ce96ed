import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional, Tuple
from uuid import uuid4

from coffee_pos.core.config import settings
from coffee_pos.schemas.promotions import Promotion

from .exceptions import CartSessionNotFoundError
from .store import CartStore, Clock, utc_now

logger = logging.getLogger(__name__)


class CartRegistry:
    """In-process map of cashier session id -> CartStore.

    Carts are never persisted; a restart starts every till empty.
    Sessions idle longer than ``idle_timeout`` are dropped, and once
    ``max_sessions`` are open the least recently used one is evicted
    to make room for a new one.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        idle_timeout: Optional[timedelta] = None,
        max_sessions: Optional[int] = None,
    ):
        self._carts: Dict[str, CartStore] = {}
        self._last_seen: Dict[str, datetime] = {}
        self._clock = clock
        self.idle_timeout = idle_timeout or timedelta(minutes=settings.CART_SESSION_IDLE_MINUTES)
        self.max_sessions = max(1, max_sessions or settings.CART_SESSION_MAX_COUNT)

    def _now(self) -> datetime:
        return (self._clock or utc_now)()

    def _forget(self, session_id: str) -> None:
        self._carts.pop(session_id, None)
        self._last_seen.pop(session_id, None)

    def _is_stale(self, session_id: str, now: datetime) -> bool:
        return now - self._last_seen[session_id] > self.idle_timeout

    def prune(self) -> int:
        """drop idle sessions; returns how many went."""
        now = self._now()
        stale = [sid for sid in self._carts if self._is_stale(sid, now)]
        for sid in stale:
            self._forget(sid)
        if stale:
            logger.info("expired %d idle cart session(s)", len(stale))
        return len(stale)

    def create(self, promotions: Optional[Iterable[Promotion]] = None) -> Tuple[str, CartStore]:
        self.prune()
        while len(self._carts) >= self.max_sessions:
            oldest = min(self._last_seen, key=self._last_seen.get)
            logger.warning("cart session limit %d reached, evicting %s", self.max_sessions, oldest)
            self._forget(oldest)

        session_id = uuid4().hex
        store = CartStore(promotions=promotions, clock=self._clock)
        self._carts[session_id] = store
        self._last_seen[session_id] = self._now()
        logger.info("opened cart session %s", session_id)
        return session_id, store

    def get(self, session_id: str) -> CartStore:
        store = self._carts.get(session_id)
        if store is None:
            raise CartSessionNotFoundError(f"Cart session {session_id} not found")

        now = self._now()
        if self._is_stale(session_id, now):
            self._forget(session_id)
            logger.info("cart session %s expired", session_id)
            raise CartSessionNotFoundError(f"Cart session {session_id} not found")

        self._last_seen[session_id] = now
        return store

    def drop(self, session_id: str) -> None:
        if session_id not in self._carts:
            raise CartSessionNotFoundError(f"Cart session {session_id} not found")
        self._forget(session_id)
        logger.info("closed cart session %s", session_id)

    def __len__(self) -> int:
        return len(self._carts)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._carts
