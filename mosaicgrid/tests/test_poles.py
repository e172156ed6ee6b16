"""Tests for pole enclosure detection."""

import numpy as np
import numpy.testing as npt
import pytest

from mosaicgrid.curve import GeneralCurve, PoleEnclosure, check_pole_enclosure, winding_angle


def ring(z, radius, n=4, face=0):
    """Closed loop of ``n`` arcs on the circle at height ``z``."""
    r = np.sqrt(radius ** 2 - z ** 2)
    angles = np.radians(45.0) + np.arange(n) * 2 * np.pi / n
    pts = [np.array([r * np.cos(a), r * np.sin(a), z]) for a in angles]
    return [GeneralCurve(face, pts[k], pts[(k + 1) % n], radius) for k in range(n)]


@pytest.fixture
def corner_loop():
    s = np.sqrt(2.25 - 1.28)
    a = [s, 0.8, 0.8]
    b = [0.8, s, 0.8]
    c = [0.8, 0.8, s]
    return [GeneralCurve(0, a, b, 1.5), GeneralCurve(4, b, c, 1.5), GeneralCurve(2, c, a, 1.5)]


class TestPoleEnclosure:
    def test_enum_values(self):
        assert PoleEnclosure.NONE == 0
        assert PoleEnclosure.NORTH_ENCLOSED == 1
        assert PoleEnclosure.SOUTH_ENCLOSED == 2
        assert PoleEnclosure.NORTH_ON_BOUNDARY == -1
        assert PoleEnclosure.SOUTH_ON_BOUNDARY == -2

    def test_empty(self):
        assert check_pole_enclosure([]) is PoleEnclosure.NONE

    def test_no_pole(self, corner_loop):
        assert check_pole_enclosure(corner_loop) is PoleEnclosure.NONE
        npt.assert_allclose(winding_angle(corner_loop), 0.0, atol=1e-9)

    def test_north_enclosed(self):
        loop = ring(1.2, 1.5, face=1)
        npt.assert_allclose(winding_angle(loop), 2 * np.pi)
        result = check_pole_enclosure(loop)
        assert result is PoleEnclosure.NORTH_ENCLOSED
        assert result.encloses_pole
        assert not result.pole_on_boundary

    def test_south_enclosed(self):
        loop = ring(-1.2, 1.5, face=0)
        assert check_pole_enclosure(loop) is PoleEnclosure.SOUTH_ENCLOSED

    def test_reversed_loop_still_enclosed(self):
        loop = [c.reversed() for c in reversed(ring(1.2, 1.5))]
        npt.assert_allclose(winding_angle(loop), -2 * np.pi)
        assert check_pole_enclosure(loop) is PoleEnclosure.NORTH_ENCLOSED

    def test_north_on_boundary(self):
        # meridian arc on x = 0 passing through (0, 0, 1) at t = 0.5
        curve = GeneralCurve(4, [0.0, -0.6, 0.8], [0.0, 0.6, 0.8], 1.0)
        npt.assert_allclose(curve.theta(0.5), 0.0, atol=1e-6)
        result = check_pole_enclosure([curve])
        assert result is PoleEnclosure.NORTH_ON_BOUNDARY
        assert result.pole_on_boundary

    def test_south_on_boundary(self):
        curve = GeneralCurve(4, [0.0, -0.6, -0.8], [0.0, 0.6, -0.8], 1.0)
        assert check_pole_enclosure([curve]) is PoleEnclosure.SOUTH_ON_BOUNDARY
