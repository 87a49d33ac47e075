# config.py
"""Shared configuration for the skyalarm inbound-aircraft monitor."""

from __future__ import annotations

import dataclasses
import math
import os
import re
from collections.abc import Mapping
from datetime import time, timedelta

from dotenv import load_dotenv

from errors import ConfigError

# ─── Data Fetching ─────────────────────────────────
API_URL = "https://opendata.adsb.fi/api/v3/lat/{lat}/lon/{lon}/dist/{dist}"
POLL_INTERVAL = "30s"
HTTP_TIMEOUT = "10s"

# ─── Alerting ──────────────────────────────────────
SUPPRESSION_TTL = "30m"
REQUIRE_INBOUND_HEADING = False

# ─── Trend Tracking ────────────────────────────────
RANGE_NOISE_NM = 0.02  # ~120 ft of ADS-B position jitter
TREND_RETENTION = "1h"

# ─── Logging ───────────────────────────────────────
LOG_LEVEL = "INFO"

REQUIRED_VARS = ("API_KEY", "LATITUDE", "LONGITUDE", "DISTANCE", "WEBHOOK_URL")

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_QUIET_TIME = re.compile(r"(\d{1,2}):(\d{2})")


def parse_duration(value: str) -> timedelta:
    """Parse ``1h30m``/``45s``/``500ms`` style durations, or bare seconds."""
    text = value.strip()
    if not text:
        raise ValueError("empty duration")

    try:
        return timedelta(seconds=float(text))
    except (ValueError, OverflowError):
        pass

    seconds = 0.0
    pos = 0
    for part in _DURATION_PART.finditer(text):
        if part.start() != pos:
            break
        seconds += float(part.group(1)) * _DURATION_UNITS[part.group(2)]
        pos = part.end()
    if pos != len(text) or pos == 0:
        raise ValueError(f"invalid duration {value!r}")
    return timedelta(seconds=seconds)


def parse_quiet_time(value: str | None) -> time | None:
    """Parse an ``HH:MM`` wall-clock time; blank means unset."""
    if value is None or not value.strip():
        return None
    match = _QUIET_TIME.fullmatch(value.strip())
    if match is None:
        raise ConfigError(f"quiet time must be HH:MM, got {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ConfigError(f"quiet time must be HH:MM, got {value!r}")
    return time(hour, minute)


def parse_categories(value: str | None) -> frozenset[str]:
    """Split a comma list of emitter categories into a normalized set."""
    if not value:
        return frozenset()
    return frozenset(c.strip().upper() for c in value.split(",") if c.strip())


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"invalid boolean {value!r}")


@dataclasses.dataclass(frozen=True)
class Settings:
    """Flat runtime settings for the alarm loop."""

    api_key: str
    latitude: float
    longitude: float
    distance_nm: float
    webhook_url: str
    adsb_url: str
    categories: frozenset[str] = frozenset()
    poll_interval: timedelta = timedelta(seconds=30)
    suppression_ttl: timedelta = timedelta(minutes=30)
    quiet_start: time | None = None
    quiet_end: time | None = None
    require_inbound_heading: bool = REQUIRE_INBOUND_HEADING
    range_noise_nm: float = RANGE_NOISE_NM
    trend_retention: timedelta = timedelta(hours=1)
    http_timeout: timedelta = timedelta(seconds=10)
    log_level: str = LOG_LEVEL


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from the environment (and ``.env``).

    Every problem found is collected and reported in a single
    :class:`ConfigError`; nothing falls back to a default when a value is
    present but malformed.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    problems: list[str] = []

    def get(name: str, default: str = "") -> str:
        return (environ.get(name) or default).strip()

    for name in REQUIRED_VARS:
        if not get(name):
            problems.append(f"{name} is required")

    def number(name: str, default: str = "") -> float:
        raw = get(name, default)
        if not raw:
            return 0.0
        try:
            value = float(raw)
        except ValueError:
            problems.append(f"{name} must be a number, got {raw!r}")
            return 0.0
        if not math.isfinite(value):
            problems.append(f"{name} must be a finite number, got {raw!r}")
            return 0.0
        return value

    def duration(name: str, default: str) -> timedelta:
        raw = get(name, default)
        try:
            value = parse_duration(raw)
        except ValueError:
            problems.append(f"{name} must be a duration like 30s or 1h30m, got {raw!r}")
            return parse_duration(default)
        if value <= timedelta(0):
            problems.append(f"{name} must be positive, got {raw!r}")
        return value

    def quiet(name: str) -> time | None:
        try:
            return parse_quiet_time(environ.get(name))
        except ConfigError as e:
            problems.append(f"{name}: {e}")
            return None

    latitude = number("LATITUDE")
    longitude = number("LONGITUDE")
    distance = number("DISTANCE")
    if get("LATITUDE") and not -90 <= latitude <= 90:
        problems.append("LATITUDE must be between -90 and 90")
    if get("LONGITUDE") and not -180 <= longitude <= 180:
        problems.append("LONGITUDE must be between -180 and 180")
    if get("DISTANCE") and distance <= 0:
        problems.append("DISTANCE must be positive")
    range_noise = number("RANGE_NOISE_NM", str(RANGE_NOISE_NM))
    if range_noise < 0:
        problems.append("RANGE_NOISE_NM must not be negative")

    poll_interval = duration("POLL_INTERVAL", POLL_INTERVAL)
    suppression_ttl = duration("SUPPRESSION_TTL", SUPPRESSION_TTL)
    trend_retention = duration("TREND_RETENTION", TREND_RETENTION)
    http_timeout = duration("HTTP_TIMEOUT", HTTP_TIMEOUT)

    require_inbound = REQUIRE_INBOUND_HEADING
    if get("REQUIRE_INBOUND_HEADING"):
        try:
            require_inbound = _parse_bool(get("REQUIRE_INBOUND_HEADING"))
        except ValueError as e:
            problems.append(f"REQUIRE_INBOUND_HEADING: {e}")

    quiet_start = quiet("QUIET_START")
    quiet_end = quiet("QUIET_END")

    if problems:
        raise ConfigError("; ".join(problems), problems=problems)

    adsb_url = get("ADSB_URL") or API_URL.format(
        lat=get("LATITUDE"),
        lon=get("LONGITUDE"),
        dist=get("DISTANCE"),
    )

    return Settings(
        api_key=get("API_KEY"),
        latitude=latitude,
        longitude=longitude,
        distance_nm=distance,
        webhook_url=get("WEBHOOK_URL"),
        adsb_url=adsb_url,
        categories=parse_categories(environ.get("CATEGORIES")),
        poll_interval=poll_interval,
        suppression_ttl=suppression_ttl,
        quiet_start=quiet_start,
        quiet_end=quiet_end,
        require_inbound_heading=require_inbound,
        range_noise_nm=range_noise,
        trend_retention=trend_retention,
        http_timeout=http_timeout,
        log_level=get("LOG_LEVEL", LOG_LEVEL).upper(),
    )
