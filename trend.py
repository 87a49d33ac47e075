"""Per-aircraft range history used to detect a closing trend."""

from __future__ import annotations

import dataclasses
import threading
from datetime import datetime, timedelta

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_RANGE_NOISE_NM = 0.02
DEFAULT_RETENTION = timedelta(hours=1)


@dataclasses.dataclass(frozen=True)
class TrendEntry:
    range_nm: float
    observed_at: datetime


@dataclasses.dataclass(frozen=True)
class TrendSample:
    """Result of comparing one observation with the previous one for a hex."""

    is_first_sample: bool
    delta_range_nm: float = 0.0
    delta_time_sec: float = 0.0
    previous_range_nm: float | None = None

    @property
    def is_valid_interval(self) -> bool:
        return self.delta_time_sec > 0

    def is_closing(self, noise_nm: float = DEFAULT_RANGE_NOISE_NM) -> bool:
        """Positive delta beyond jitter; equal to the threshold is not closing."""
        return self.delta_range_nm > noise_nm


class TrendTracker:
    """Last known range and time for every recently seen hex."""

    def __init__(self, retention: timedelta = DEFAULT_RETENTION) -> None:
        self.retention = retention
        self._lock = threading.Lock()
        self._entries: dict[str, TrendEntry] = {}

    def observe(self, hex_id: str, range_nm: float, now: datetime) -> TrendSample:
        """Record a new range for ``hex_id`` and report the change since the last one."""
        with self._lock:
            prior = self._entries.get(hex_id)
            self._entries[hex_id] = TrendEntry(range_nm=range_nm, observed_at=now)

        if prior is None:
            return TrendSample(is_first_sample=True)

        return TrendSample(
            is_first_sample=False,
            delta_range_nm=prior.range_nm - range_nm,
            delta_time_sec=(now - prior.observed_at).total_seconds(),
            previous_range_nm=prior.range_nm,
        )

    def prune(self, now: datetime, retention: timedelta | None = None) -> int:
        """Drop entries older than the retention horizon; returns how many went."""
        horizon = self.retention if retention is None else retention
        with self._lock:
            stale = [h for h, e in self._entries.items() if now - e.observed_at > horizon]
            for hex_id in stale:
                del self._entries[hex_id]

        if stale:
            logger.debug("trend_state_pruned", removed=len(stale), tracked=len(self))
        return len(stale)

    def get(self, hex_id: str) -> TrendEntry | None:
        with self._lock:
            return self._entries.get(hex_id)

    def __contains__(self, hex_id: object) -> bool:
        with self._lock:
            return hex_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
