import pytest

from geometry import heading_deviation, is_inbound


@pytest.mark.parametrize("angle", [0.0, 45.0, 180.0, 359.9])
def test_same_heading_has_no_deviation(angle):
    assert heading_deviation(angle, angle) == 0


def test_opposite_headings():
    assert heading_deviation(0, 180) == 180


def test_wraps_around_north():
    assert heading_deviation(350, 10) == pytest.approx(20)
    assert heading_deviation(10, 350) == pytest.approx(20)


@pytest.mark.parametrize("a,b", [(0, 90), (30, 300), (359, 1), (123.4, 321.0)])
def test_symmetric(a, b):
    assert heading_deviation(a, b) == pytest.approx(heading_deviation(b, a))


def test_inbound_hemisphere():
    assert is_inbound(0)
    assert is_inbound(89.9)
    assert not is_inbound(90)
    assert not is_inbound(180)
