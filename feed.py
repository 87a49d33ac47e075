"""Fetch aircraft near the observer from the adsb.fi open data API."""

from __future__ import annotations

import requests
import structlog

from models import AircraftObservation

logger = structlog.get_logger(__name__)


def parse_aircraft(payload: dict) -> list[AircraftObservation]:
    """Decode the ``ac`` list of a feed response, dropping unusable records."""
    records = payload.get("ac") or []
    if not isinstance(records, list):
        logger.error("adsb_json_decode_failed", error="ac is not a list", ac_type=type(records).__name__)
        return []

    aircraft = []
    dropped = 0
    for record in records:
        ac = AircraftObservation.from_feed(record) if isinstance(record, dict) else None
        if ac is None:
            dropped += 1
            continue
        aircraft.append(ac)

    if dropped:
        logger.debug("adsb_records_dropped", dropped=dropped, kept=len(aircraft))
    return aircraft


def fetch_aircraft(url: str, timeout: float = 10.0) -> list[AircraftObservation]:
    """Fetch current aircraft; any upstream failure yields an empty batch."""
    try:
        response = requests.get(url, headers={"Accept": "application/json"}, timeout=timeout)
    except requests.RequestException as e:
        logger.error("adsb_request_failed", error=str(e), url=url)
        return []

    if response.status_code != 200:
        logger.error("adsb_bad_status_code", status_code=response.status_code, url=url)
        return []

    try:
        payload = response.json()
    except ValueError as e:
        logger.error("adsb_json_decode_failed", error=str(e), raw_body=response.text[:2000])
        return []

    if not isinstance(payload, dict):
        logger.error("adsb_json_decode_failed", error="payload is not an object", raw_body=response.text[:2000])
        return []

    return parse_aircraft(payload)
