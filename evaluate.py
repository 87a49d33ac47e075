"""Decide which aircraft in a feed batch are genuinely inbound.

Every aircraft produces exactly one decision event. The event name is
``skip_<reason>`` or ``match_closing_range`` and always carries a ``reason``
field, so the log alone is enough to explain why an aircraft did not alert.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timezone

import structlog

from geometry import heading_deviation, is_inbound
from models import AircraftObservation
from suppression import SuppressionStore
from trend import DEFAULT_RANGE_NOISE_NM, TrendTracker

logger = structlog.get_logger(__name__)


class Reason:
    """Reason codes carried by every per-aircraft decision event."""

    SUPPRESSED = "suppressed"
    CATEGORY_MISMATCH = "category_mismatch"
    FIRST_SAMPLE = "first_sample"
    INVALID_TIME_DELTA = "invalid_time_delta"
    RANGE_NOT_DECREASING = "range_not_decreasing"
    GEOMETRY_REJECT = "geometry_reject"
    CLOSING_RANGE = "closing_range"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_categories(categories: Iterable[str]) -> frozenset[str]:
    """Trimmed, upper-cased allowlist with blank entries dropped."""
    return frozenset(c.strip().upper() for c in categories if c and c.strip())


class AircraftEvaluator:
    """Suppression, category, trend and (optionally) geometry checks for a batch."""

    def __init__(
        self,
        suppression: SuppressionStore,
        tracker: TrendTracker,
        categories: Iterable[str],
        *,
        require_inbound_heading: bool = False,
        range_noise_nm: float = DEFAULT_RANGE_NOISE_NM,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.suppression = suppression
        self.tracker = tracker
        self.categories = normalize_categories(categories)
        self.require_inbound_heading = require_inbound_heading
        self.range_noise_nm = range_noise_nm
        self._clock = clock

    def evaluate(
        self,
        aircraft: Iterable[AircraftObservation] | None,
        now: datetime | None = None,
    ) -> set[str]:
        """Return the hexes in ``aircraft`` that match as inbound."""
        now = now or self._clock()

        # Bound memory once per batch, not per aircraft
        self.tracker.prune(now)

        matches: set[str] = set()
        for ac in aircraft or ():
            if self._evaluate_one(ac, now):
                matches.add(ac.hex)
        return matches

    def _evaluate_one(self, ac: AircraftObservation, now: datetime) -> bool:
        category = ac.normalized_category
        log = logger.bind(hex=ac.hex, flight=ac.flight, category=category)

        if self.suppression.is_suppressed(ac.hex):
            log.info("skip_suppressed", reason=Reason.SUPPRESSED)
            return False

        if category not in self.categories:
            log.info("skip_category_mismatch", reason=Reason.CATEGORY_MISMATCH)
            return False

        sample = self.tracker.observe(ac.hex, ac.range_nm, now)

        # Need two samples to know which way the range is going
        if sample.is_first_sample:
            log.info(
                "skip_first_sample",
                reason=Reason.FIRST_SAMPLE,
                distance_nm=ac.range_nm,
            )
            return False

        if not sample.is_valid_interval:
            log.info(
                "skip_invalid_time_delta",
                reason=Reason.INVALID_TIME_DELTA,
                delta_time_sec=sample.delta_time_sec,
            )
            return False

        if not sample.is_closing(self.range_noise_nm):
            log.info(
                "skip_range_not_decreasing",
                reason=Reason.RANGE_NOT_DECREASING,
                distance_nm=ac.range_nm,
                previous_distance_nm=sample.previous_range_nm,
                delta_distance_nm=sample.delta_range_nm,
                delta_time_sec=sample.delta_time_sec,
            )
            return False

        deviation = heading_deviation(ac.track, ac.bearing_to_observer)
        if self.require_inbound_heading and not is_inbound(deviation):
            log.info(
                "skip_geometry_reject",
                reason=Reason.GEOMETRY_REJECT,
                track_deg=ac.track,
                bearing_to_observer_deg=ac.bearing_to_observer,
                angle_off_bearing_deg=deviation,
            )
            return False

        log.info(
            "match_closing_range",
            reason=Reason.CLOSING_RANGE,
            distance_nm=ac.range_nm,
            track_deg=ac.track,
            bearing_to_observer_deg=ac.bearing_to_observer,
            angle_off_bearing_deg=deviation,
            delta_distance_nm=sample.delta_range_nm,
            delta_time_sec=sample.delta_time_sec,
        )
        return True
