"""Daily quiet-hours window during which no alerts go out."""

from __future__ import annotations

import dataclasses
import time as _time
from collections.abc import Callable
from datetime import datetime, time, timedelta, timezone

import structlog

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclasses.dataclass(frozen=True)
class QuietWindow:
    """Wall-clock start/end in UTC; ``end < start`` wraps past midnight."""

    start: time | None = None
    end: time | None = None

    @property
    def configured(self) -> bool:
        return self.start is not None and self.end is not None

    def anchored(self, now: datetime) -> tuple[datetime, datetime]:
        """Start and end placed on ``now``'s calendar date and timezone."""
        if self.start is None or self.end is None:
            raise ValueError("quiet window is not configured")
        start = now.replace(hour=self.start.hour, minute=self.start.minute, second=0, microsecond=0)
        end = now.replace(hour=self.end.hour, minute=self.end.minute, second=0, microsecond=0)
        return start, end

    def describe(self) -> dict:
        return {
            "quiet_start_utc": self.start.strftime("%H:%M") if self.start else None,
            "quiet_end_utc": self.end.strftime("%H:%M") if self.end else None,
        }


def is_quiet(window: QuietWindow, now: datetime) -> bool:
    """True while ``now`` falls strictly inside the quiet window."""
    if not window.configured:
        return False

    start, end = window.anchored(now)

    # Crosses midnight, e.g. 22:00-06:00
    if end < start:
        return now > start or now < end
    return start < now < end


def sleep_duration(window: QuietWindow, now: datetime) -> timedelta:
    """Time left until the next end of the quiet window, never negative."""
    if not window.configured:
        return timedelta(0)

    _, end = window.anchored(now)
    if end < now:
        end += timedelta(days=1)
    return max(end - now, timedelta(0))


def sleep_until_quiet_ends(
    window: QuietWindow,
    *,
    clock: Callable[[], datetime] = _utcnow,
    sleep: Callable[[float], None] = _time.sleep,
) -> timedelta:
    """Block until the quiet window is over; returns the time slept."""
    now = clock()
    duration = sleep_duration(window, now)
    resume_at = now + duration

    logger.info(
        "quiet_hours_active",
        sleep_duration=str(timedelta(seconds=round(duration.total_seconds()))),
        resume_at_utc=resume_at.astimezone(timezone.utc).isoformat(timespec="seconds"),
    )

    sleep(duration.total_seconds())

    logger.info(
        "quiet_hours_end",
        now_utc=clock().astimezone(timezone.utc).isoformat(timespec="seconds"),
    )
    return duration
