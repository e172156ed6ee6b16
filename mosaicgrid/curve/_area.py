"""
Area of a spherical patch bounded by a closed loop of GeneralCurve arcs.

Four estimators are registered in ``area_methods``; all share the call
signature ``method(curves, radius, **options) -> float``.

``refinement`` (default)
    Adaptive geodesic polygon. Starts from the curve end points and keeps
    bisecting the polygon edges that deviate most from the true boundary,
    until the area stops changing.
``refinement-geodesic``
    The same loop bisecting at great-circle midpoints of the polygon
    edges; it settles at the area of the starting sample polygon.
``excess``
    Fixed sampling of every curve, then the spherical excess of the
    resulting geodesic polygon (signed fan of L'Huilier triangles).
``line-integral``
    ``R^2 * sum of integral (1 - cos(theta)) phi'(t) dt`` along the loop
    (Green's theorem in (theta, phi)), complemented when the loop
    encircles the south pole.

Usage
-----
    area = area_methods.get()(patch.curves, patch.radius)
    area = area_methods["excess"](patch.curves, patch.radius, n=40)
"""

import heapq
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy.integrate import simpson

from mosaicgrid._errors import DegenerateGeometryError
from mosaicgrid._registry import MethodRegistry
from mosaicgrid._spherical import central_angle, to_cartesian
from mosaicgrid.curve._poles import PoleEnclosure, check_pole_enclosure

logger = logging.getLogger(__name__)

area_methods = MethodRegistry("area", default="refinement")


@dataclass
class RefinementParams:
    """Stopping rules for the adaptive polygon refinement.

    Parameters
    ----------
    tol : float
        Stop once ``|A_new - A_old| / A_old`` drops below this.
    max_points : int
        Stop (with a warning) once the polygon has more vertices than this.
    refinement_fraction : float
        Fraction of edges bisected per iteration (at least one).
    max_iterations : int
        Upper bound on refinement rounds.
    """
    tol: float = 1e-6
    max_points: int = 10000
    refinement_fraction: float = 0.2
    max_iterations: int = 500

    def __post_init__(self):
        if self.tol <= 0:
            raise ValueError(f"tol must be positive, got {self.tol}")
        if self.max_points < 3:
            raise ValueError(f"max_points must be at least 3, got {self.max_points}")
        if not 0.0 < self.refinement_fraction <= 1.0:
            raise ValueError(
                f"refinement_fraction must be in (0, 1], got {self.refinement_fraction}"
            )
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")


# ---------------------------------------------------------------------------
# Geodesic polygon area
# ---------------------------------------------------------------------------

def triangle_excess(a, b, c):
    """Spherical excess of the triangle(s) with unit-sphere vertices a, b, c.

    L'Huilier's formula on the three central angles. Degenerate triangles
    (collinear or coincident vertices) give 0, never NaN.
    """
    sa = central_angle(b, c)
    sb = central_angle(a, c)
    sc = central_angle(a, b)
    s = 0.5 * (sa + sb + sc)
    prod = (np.tan(0.5 * s) * np.tan(0.5 * (s - sa))
            * np.tan(0.5 * (s - sb)) * np.tan(0.5 * (s - sc)))
    prod = np.where(np.isfinite(prod), np.maximum(prod, 0.0), 0.0)
    return 4.0 * np.arctan(np.sqrt(prod))


def spherical_polygon_area(vertices, radius: float) -> float:
    """Area of the geodesic polygon through ``vertices`` (``(n, 3)``, any length).

    The polygon is fanned from vertex 0; each triangle's excess is signed by
    its orientation, so non-convex loops are handled as long as the loop is
    simple and lies within a hemisphere.
    """
    v = np.asarray(vertices, dtype=np.float64)
    if len(v) < 3:
        return 0.0
    a = np.broadcast_to(v[0], v[1:-1].shape)
    b = v[1:-1]
    c = v[2:]
    excess = triangle_excess(a, b, c)
    sign = np.sign(np.einsum('ij,ij->i', a, np.cross(b, c)))
    return float(radius * radius * abs(np.sum(sign * excess)))


# ---------------------------------------------------------------------------
# Registered estimators
# ---------------------------------------------------------------------------

def sample_loop(curves: Sequence, n: int):
    """``(theta, phi)`` at ``t = i/n, i = 0..n-1`` on each curve, concatenated."""
    if n < 1:
        raise ValueError(f"Need at least one sample per curve, got {n}")
    t = np.arange(n) / n
    theta = np.concatenate([np.broadcast_to(c.theta(t), t.shape) for c in curves])
    phi = np.concatenate([np.broadcast_to(c.phi(t), t.shape) for c in curves])
    return theta, phi


@area_methods.register("excess")
def sampled_excess_area(curves: Sequence, radius: float, n: int = 10) -> float:
    """Spherical excess of the polygon through ``n`` samples per curve."""
    if len(curves) == 0:
        return 0.0
    theta, phi = sample_loop(curves, n)
    return spherical_polygon_area(to_cartesian(1.0, theta, phi), radius)


def _worst_edges(errors, fraction):
    """Indices of the ``max(1, int(fraction * n))`` largest edge errors."""
    count = max(1, int(fraction * len(errors)))
    return set(heapq.nlargest(count, range(len(errors)), key=errors.__getitem__))


def _insert_after(values, inserts, selected):
    """Copy of ``values`` with ``inserts[i]`` placed after each selected index ``i``."""
    out = []
    for i in range(len(values)):
        out.append(values[i])
        if i in selected:
            out.append(inserts[i])
    return np.array(out)


def _edge_targets(owner, params):
    """Parameter interval ``[t, t_next]`` of each polygon edge on its curve."""
    nxt_owner = np.roll(owner, -1)
    nxt_param = np.roll(params, -1)
    return np.where(nxt_owner == owner, nxt_param, 1.0)


@area_methods.register("refinement")
def refined_area(curves: Sequence, radius: float,
                 params: Optional[RefinementParams] = None) -> float:
    """Adaptive geodesic-polygon area.

    Every polygon vertex is a point ``curve_k(t)``; the polygon edge leaving
    it follows curve ``k`` up to the next vertex. An edge's error is how much
    longer the path through the curve midpoint is than the direct geodesic,
    ``d(a, m) + d(m, b) - d(a, b)``. Each round bisects the worst
    ``refinement_fraction`` of edges at their curve midpoints and recomputes
    the polygon area.

    Raises
    ------
    DegenerateGeometryError
        If the polygon area becomes NaN.
    """
    if params is None:
        params = RefinementParams()
    if len(curves) == 0:
        return 0.0

    owner = np.arange(len(curves))
    tpar = np.zeros(len(curves))
    points = np.array([c.p0 for c in curves]) / radius

    area = spherical_polygon_area(points, radius)
    if np.isnan(area):
        raise DegenerateGeometryError("Initial polygon area is NaN.")

    for iteration in range(params.max_iterations):
        n = len(points)
        if n > params.max_points:
            logger.warning(
                "Area refinement stopped at %d vertices (limit %d); returning %.12g",
                n, params.max_points, area,
            )
            return area

        t_next = _edge_targets(owner, tpar)
        t_mid = 0.5 * (tpar + t_next)
        mids = np.array([curves[k].get_point(tm) for k, tm in zip(owner, t_mid)]) / radius
        ends = np.roll(points, -1, axis=0)
        errors = (central_angle(points, mids) + central_angle(mids, ends)
                  - central_angle(points, ends))

        worst = _worst_edges(errors, params.refinement_fraction)
        owner = _insert_after(owner, owner, worst)
        tpar = _insert_after(tpar, t_mid, worst)
        points = _insert_after(points, mids, worst)

        new_area = spherical_polygon_area(points, radius)
        if np.isnan(new_area):
            raise DegenerateGeometryError("Polygon area became NaN during refinement.")

        change = abs(new_area - area)
        area = new_area
        if change <= params.tol * abs(area):
            logger.debug("refinement converged after %d rounds with %d vertices",
                         iteration + 1, len(points))
            return area

    logger.warning("Area refinement hit %d iterations without converging",
                   params.max_iterations)
    return area


@area_methods.register("refinement-geodesic")
def geodesic_refined_area(curves: Sequence, radius: float,
                          params: Optional[RefinementParams] = None, n: int = 10) -> float:
    """Refinement that bisects polygon edges at their great-circle midpoints.

    Starts from ``n`` samples per curve and ranks edges with the same
    ``d(a, m) + d(m, b) - d(a, b)`` error as ``refinement``, but ``m`` is the chord
    midpoint projected onto the sphere. Such points lie on the existing
    geodesic edges, so the polygon never moves toward the curved boundary and
    the result stays at the sampled polygon's area.
    """
    if params is None:
        params = RefinementParams()
    if len(curves) == 0:
        return 0.0

    theta, phi = sample_loop(curves, n)
    points = to_cartesian(1.0, theta, phi)
    area = spherical_polygon_area(points, radius)
    if np.isnan(area):
        raise DegenerateGeometryError("Initial polygon area is NaN.")

    for iteration in range(params.max_iterations):
        if len(points) > params.max_points:
            logger.warning(
                "Area refinement stopped at %d vertices (limit %d); returning %.12g",
                len(points), params.max_points, area,
            )
            return area

        ends = np.roll(points, -1, axis=0)
        chords = points + ends
        lengths = np.linalg.norm(chords, axis=1)
        if np.any(lengths == 0.0):
            raise DegenerateGeometryError("Antipodal polygon vertices have no unique midpoint.")
        mids = chords / lengths[:, None]
        errors = (central_angle(points, mids) + central_angle(mids, ends)
                  - central_angle(points, ends))

        worst = _worst_edges(errors, params.refinement_fraction)
        points = _insert_after(points, mids, worst)

        new_area = spherical_polygon_area(points, radius)
        if np.isnan(new_area):
            raise DegenerateGeometryError("Polygon area became NaN during refinement.")

        change = abs(new_area - area)
        area = new_area
        if change <= params.tol * abs(area):
            logger.debug("geodesic refinement converged after %d rounds with %d vertices",
                         iteration + 1, len(points))
            return area

    logger.warning("Area refinement hit %d iterations without converging",
                   params.max_iterations)
    return area


@area_methods.register("line-integral")
def line_integral_area(curves: Sequence, radius: float,
                       intervals: int = 1000) -> float:
    """Area from ``R^2 * sum of integral (1 - cos(theta)) dphi`` (Simpson's rule).

    Raises
    ------
    DegenerateGeometryError
        If a pole lies on the boundary, where ``phi`` is undefined.
    """
    if len(curves) == 0:
        return 0.0
    pole = check_pole_enclosure(curves)
    if pole.pole_on_boundary:
        raise DegenerateGeometryError(
            f"Line-integral area is undefined with a pole on the boundary ({pole.name})."
        )

    t = np.linspace(0.0, 1.0, intervals + 1)
    total = 0.0
    for curve in curves:
        integrand = (1.0 - np.cos(curve.theta(t))) * curve.dphi(t)
        total += float(simpson(integrand, x=t))

    area = radius * radius * abs(total)
    if pole is PoleEnclosure.SOUTH_ENCLOSED:
        area = 4.0 * np.pi * radius * radius - area
    return float(area)
