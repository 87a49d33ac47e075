"""Outbound alert webhook."""

from __future__ import annotations

import requests
import structlog

logger = structlog.get_logger(__name__)


def trigger_webhook(url: str, api_key: str, timeout: float = 10.0) -> int | None:
    """POST to the alert webhook; returns the status code, or None on failure."""
    try:
        response = requests.post(url, headers={"X-API-KEY": api_key}, timeout=timeout)
    except requests.RequestException as e:
        logger.error("webhook_request_failed", url=url, error=str(e))
        return None

    response.close()
    logger.info("webhook_triggered", url=url, status_code=response.status_code)
    return response.status_code
