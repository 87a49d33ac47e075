"""Exception hierarchy for skyalarm."""

from __future__ import annotations


class SkyAlarmError(Exception):
    """Base exception for all skyalarm errors."""


class ConfigError(SkyAlarmError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, *, problems: list[str] | None = None) -> None:
        self.problems = problems or [message]
        super().__init__(message)
