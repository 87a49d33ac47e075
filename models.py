"""Aircraft records decoded from the ADS-B feed."""

from __future__ import annotations

import dataclasses
import math
from typing import Any


def _as_float(value: Any) -> float | None:
    """Coerce a feed value to a finite float; strings like ``"ground"`` yield None."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _as_text(value: Any) -> str:
    """Trimmed text for string fields; anything else is treated as missing."""
    return value.strip() if isinstance(value, str) else ""


@dataclasses.dataclass(frozen=True)
class AircraftObservation:
    """One aircraft as seen in a single feed poll."""

    hex: str
    category: str
    flight: str
    track: float
    bearing_to_observer: float
    range_nm: float

    @property
    def normalized_category(self) -> str:
        return self.category.strip().upper()

    @classmethod
    def from_feed(cls, record: dict[str, Any]) -> AircraftObservation | None:
        """Build an observation from a readsb-style ``ac`` entry.

        Returns None when the record has no hex or no distance to the
        observer, since neither can be trend-evaluated.
        """
        hex_id = _as_text(record.get("hex"))
        if not hex_id:
            return None

        range_nm = _as_float(record.get("dst"))
        if range_nm is None or range_nm < 0:
            return None

        return cls(
            hex=hex_id,
            category=_as_text(record.get("category")),
            flight=_as_text(record.get("flight")),
            track=_as_float(record.get("track")) or 0.0,
            bearing_to_observer=_as_float(record.get("dir")) or 0.0,
            range_nm=range_nm,
        )
