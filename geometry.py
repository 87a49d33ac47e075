"""Heading geometry relative to the observer."""


def heading_deviation(track: float, bearing: float) -> float:
    """Absolute circular difference between two headings, in [0, 180]."""
    diff = abs(track - bearing) % 360
    if diff > 180:
        diff = 360 - diff
    return diff


def is_inbound(deviation: float) -> bool:
    """True when the track points into the forward hemisphere toward the observer."""
    # Anything 90 degrees or more off is lateral or outbound
    return deviation < 90
