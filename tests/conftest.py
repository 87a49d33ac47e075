from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from models import AircraftObservation


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


def make_ac(**kwargs) -> AircraftObservation:
    defaults = dict(
        hex="abc123",
        category="MIL",
        flight="RCH123",
        track=180.0,
        bearing_to_observer=180.0,
        range_nm=12.0,
    )
    defaults.update(kwargs)
    return AircraftObservation(**defaults)
