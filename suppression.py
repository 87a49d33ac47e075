"""Time-keyed suppression of aircraft that have already alerted."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SuppressionStore:
    """Hexes that must not alert again until their expiry passes.

    Expired entries are dropped lazily on lookup; there is no background
    sweep, which is fine for the few dozen aircraft visible at once.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._expires_at: dict[str, datetime] = {}

    def suppress(
        self, hexes: Iterable[str], ttl: timedelta, now: datetime | None = None
    ) -> datetime:
        """Suppress every hex until ``now + ttl``; returns that expiry."""
        expires_at = (now or self._clock()) + ttl
        with self._lock:
            for hex_id in hexes:
                self._expires_at[hex_id] = expires_at
        return expires_at

    def is_suppressed(self, hex_id: str) -> bool:
        """True while ``hex_id`` is inside its suppression window."""
        with self._lock:
            expires_at = self._expires_at.get(hex_id)
            if expires_at is None:
                return False
            if self._clock() >= expires_at:
                del self._expires_at[hex_id]
                return False
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._expires_at)
