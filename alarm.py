#!/usr/bin/env python3
"""Poll the ADS-B feed and fire the webhook when an aircraft is inbound."""

from __future__ import annotations

import sys
import time
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

import structlog

from config import Settings, load_settings
from errors import ConfigError
from evaluate import AircraftEvaluator
from feed import fetch_aircraft
from logging_config import configure_logging
from models import AircraftObservation
from quiet import QuietWindow, is_quiet, sleep_until_quiet_ends
from suppression import SuppressionStore
from trend import TrendTracker
from webhook import trigger_webhook

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Alarm:
    """Owns the per-process stores and runs one poll cycle at a time."""

    def __init__(
        self,
        settings: Settings,
        *,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], None] = time.sleep,
        fetch: Callable[[], Iterable[AircraftObservation]] | None = None,
        notify: Callable[[], object] | None = None,
    ) -> None:
        self.settings = settings
        self._clock = clock
        self._sleep = sleep
        self._fetch = fetch or self._fetch_from_feed
        self._notify = notify or self._post_webhook

        self.quiet_window = QuietWindow(settings.quiet_start, settings.quiet_end)
        self.suppression = SuppressionStore(clock=clock)
        self.tracker = TrendTracker(retention=settings.trend_retention)
        self.evaluator = AircraftEvaluator(
            self.suppression,
            self.tracker,
            settings.categories,
            require_inbound_heading=settings.require_inbound_heading,
            range_noise_nm=settings.range_noise_nm,
            clock=clock,
        )

    def _fetch_from_feed(self) -> list[AircraftObservation]:
        return fetch_aircraft(
            self.settings.adsb_url,
            timeout=self.settings.http_timeout.total_seconds(),
        )

    def _post_webhook(self) -> int | None:
        return trigger_webhook(
            self.settings.webhook_url,
            self.settings.api_key,
            timeout=self.settings.http_timeout.total_seconds(),
        )

    def poll_once(self, now: datetime | None = None) -> set[str]:
        """Fetch, evaluate, and alert once for whatever matched."""
        now = now or self._clock()
        aircraft = list(self._fetch() or [])
        matches = self.evaluator.evaluate(aircraft, now)

        if matches:
            logger.info("alert_triggered", matches=sorted(matches), count=len(matches))
            self._notify()
            expires_at = self.suppression.suppress(matches, self.settings.suppression_ttl, now)
            for hex_id in sorted(matches):
                logger.info("hex_suppressed", hex=hex_id, expires_at_utc=expires_at.isoformat())

        logger.debug("poll_complete", aircraft=len(aircraft), matches=len(matches), tracked=len(self.tracker))
        return matches

    def step(self) -> set[str]:
        """One loop iteration: wait out quiet hours, or poll then wait an interval."""
        if is_quiet(self.quiet_window, self._clock()):
            sleep_until_quiet_ends(self.quiet_window, clock=self._clock, sleep=self._sleep)
            return set()

        matches = self.poll_once()
        self._sleep(self.settings.poll_interval.total_seconds())
        return matches

    def run_forever(self) -> None:
        while True:
            self.step()


def main() -> None:
    """Load settings, then poll until interrupted."""
    try:
        settings = load_settings()
    except ConfigError as e:
        configure_logging()
        logger.error("config_error", error=str(e), problems=e.problems)
        sys.exit(1)

    configure_logging(settings.log_level)
    alarm = Alarm(settings)

    logger.info(
        "adsb_monitor_start",
        adsb_url=settings.adsb_url,
        categories=sorted(settings.categories),
        poll_interval_sec=settings.poll_interval.total_seconds(),
        suppression_ttl_sec=settings.suppression_ttl.total_seconds(),
        require_inbound_heading=settings.require_inbound_heading,
    )
    logger.info("quiet_hours_configured", **alarm.quiet_window.describe())

    if not settings.categories:
        logger.warning("no_categories_configured")

    try:
        alarm.run_forever()
    except KeyboardInterrupt:
        logger.info("adsb_monitor_stop")


if __name__ == "__main__":
    main()
