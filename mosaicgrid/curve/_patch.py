"""
Spherical patches: the piece of the sphere inside one Cartesian cell.

A patch is identified by a :class:`Fivetuple` (three Cartesian cell indices
plus two angular indices; the angular ones are ``-1`` while unassigned) and
is bounded by a closed loop of :class:`GeneralCurve` arcs.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from mosaicgrid._errors import OpenLoopError
from mosaicgrid.curve._area import area_methods, sample_loop, spherical_polygon_area
from mosaicgrid._spherical import to_cartesian

# Endpoint matching tolerance between consecutive curves, in grid length units
CLOSURE_TOL = 1e-6


@dataclass(frozen=True, order=True)
class Fivetuple:
    """Cell key ``(nx, ny, nz, ntheta, nphi)``; ``-1`` marks an unset angular index."""
    nx: int
    ny: int
    nz: int
    ntheta: int = -1
    nphi: int = -1

    @property
    def cartesian(self) -> tuple:
        return self.nx, self.ny, self.nz

    def __str__(self) -> str:
        return f"({self.nx}, {self.ny}, {self.nz}, {self.ntheta}, {self.nphi})"


class Patch:
    """A closed boundary loop on the sphere tagged with its cell key.

    Parameters
    ----------
    curves : sequence of GeneralCurve
        Boundary arcs in loop order; ``curves[k].p1`` must coincide with
        ``curves[k + 1].p0`` and the last must close onto the first.
    nx, ny, nz : int
        Cartesian cell indices.
    ntheta, nphi : int, optional
        Angular cell indices (``-1`` when not assigned).

    Raises
    ------
    OpenLoopError
        If there are fewer than three arcs or consecutive arcs do not meet.
    """

    def __init__(self, curves: Sequence, nx: int, ny: int, nz: int,
                 ntheta: int = -1, nphi: int = -1):
        self.curves = list(curves)
        if len(self.curves) < 3:
            raise OpenLoopError(
                f"A closed patch needs at least 3 boundary curves, got {len(self.curves)}."
            )
        self.radius = self.curves[0].radius
        self.key = Fivetuple(nx, ny, nz, ntheta, nphi)
        self._check_closed()

    def _check_closed(self):
        n = len(self.curves)
        for k, curve in enumerate(self.curves):
            nxt = self.curves[(k + 1) % n]
            gap = np.max(np.abs(curve.p1 - nxt.p0))
            if gap > CLOSURE_TOL:
                raise OpenLoopError(
                    f"Curve {k} ends {gap:.3g} away from the start of curve {(k + 1) % n}."
                )

    @property
    def id(self) -> Fivetuple:
        return self.key

    @property
    def num_curves(self) -> int:
        return len(self.curves)

    def perimeter(self) -> float:
        """Sum of the boundary arc lengths."""
        return float(sum(c.path_length() for c in self.curves))

    def spherical_vertices(self, n: int = 10):
        """``(theta, phi)`` arrays with ``n`` samples per curve in loop order."""
        return sample_loop(self.curves, n)

    def cartesian_vertices(self, n: int = 10) -> np.ndarray:
        """The same samples as :meth:`spherical_vertices` on the sphere, ``(n * k, 3)``."""
        theta, phi = self.spherical_vertices(n)
        return to_cartesian(self.radius, theta, phi)

    def area_estimate(self, n: int = 10) -> float:
        """Spherical-excess area of the polygon through ``n`` samples per curve."""
        return spherical_polygon_area(self.cartesian_vertices(n) / self.radius, self.radius)

    def area(self, method: Optional[str] = None, **options) -> float:
        """Patch area using a registered estimator (default ``refinement``)."""
        return area_methods.get(method)(self.curves, self.radius, **options)

    def __repr__(self) -> str:
        return f"Patch({self.key}, curves={len(self.curves)})"
