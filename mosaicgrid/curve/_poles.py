"""
Does a closed boundary loop pass through or wind around a pole?

The loop is sampled curve by curve. A sample at ``theta ~ 0`` or
``theta ~ pi`` means a pole lies on the boundary. Otherwise the azimuth
winding number is accumulated from unwrapped ``phi`` increments; a total of
``+-2 pi`` means the loop encircles the z axis, and the hemisphere of the
mean polar angle says which pole is inside.
"""

import enum
import logging
from typing import Sequence

import numpy as np

from mosaicgrid._spherical import TWO_PI, wrap_angle

logger = logging.getLogger(__name__)

# Samples per curve for the on-boundary scan
BOUNDARY_SAMPLES = 101

# Steps per curve for the winding sum
WINDING_STEPS = 100

POLE_TOL = 1e-6
WINDING_TOL = 0.1


class PoleEnclosure(enum.IntEnum):
    """Pole status of a closed boundary loop."""
    SOUTH_ON_BOUNDARY = -2
    NORTH_ON_BOUNDARY = -1
    NONE = 0
    NORTH_ENCLOSED = 1
    SOUTH_ENCLOSED = 2

    @property
    def encloses_pole(self) -> bool:
        return self in (PoleEnclosure.NORTH_ENCLOSED, PoleEnclosure.SOUTH_ENCLOSED)

    @property
    def pole_on_boundary(self) -> bool:
        return self.value < 0


def winding_angle(curves: Sequence, steps: int = WINDING_STEPS) -> float:
    """Total azimuth swept by the loop, in radians."""
    t = np.linspace(0.0, 1.0, steps + 1)
    total = 0.0
    for curve in curves:
        total += float(np.sum(wrap_angle(np.diff(curve.phi(t)))))
    return total


def check_pole_enclosure(curves: Sequence) -> PoleEnclosure:
    """Classify the loop formed by ``curves`` (consecutive, closed).

    Parameters
    ----------
    curves : sequence of GeneralCurve
        Boundary arcs in loop order.

    Returns
    -------
    PoleEnclosure
    """
    if len(curves) == 0:
        return PoleEnclosure.NONE

    t = np.linspace(0.0, 1.0, BOUNDARY_SAMPLES)
    mean_thetas = []
    for curve in curves:
        theta = curve.theta(t)
        if np.any(np.abs(theta) < POLE_TOL):
            return PoleEnclosure.NORTH_ON_BOUNDARY
        if np.any(np.abs(theta - np.pi) < POLE_TOL):
            return PoleEnclosure.SOUTH_ON_BOUNDARY
        mean_thetas.append(np.mean(theta))

    winding = winding_angle(curves)
    if abs(abs(winding) - TWO_PI) >= WINDING_TOL:
        return PoleEnclosure.NONE

    if np.mean(mean_thetas) < 0.5 * np.pi:
        logger.debug("loop winds %.6f rad around the north pole", winding)
        return PoleEnclosure.NORTH_ENCLOSED
    logger.debug("loop winds %.6f rad around the south pole", winding)
    return PoleEnclosure.SOUTH_ENCLOSED
