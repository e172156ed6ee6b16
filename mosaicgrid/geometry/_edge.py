"""
Cell edges and their crossing point with the sphere.

An edge is a segment between two adjacent cell corners. For an intersecting
edge exactly one corner is inside the sphere, so the segment crosses the
sphere surface exactly once.
"""

import numpy as np

from mosaicgrid._errors import DegenerateGeometryError, GeometryInconsistencyError
from mosaicgrid.grid import _topology

# Roots this far outside [0, 1] are rounding, not a miss
SEGMENT_TOL = 1e-12


def find_sphere_intersection(p0, p1, radius: float) -> np.ndarray:
    """Point where segment ``p0 -> p1`` crosses a sphere centred at the origin.

    Solves ``|p0 + t (p1 - p0)|^2 = R^2`` for ``t`` in ``[0, 1]``. When ``p0``
    is the inside point the larger root is taken (leaving the sphere),
    otherwise the smaller one.

    Parameters
    ----------
    p0, p1 : array_like of shape (3,)
        Segment end points; exactly one must be strictly inside the sphere
        (``|p|^2 < R^2``, the same test as ``_topology.inside_mask``).
    radius : float
        Sphere radius.

    Returns
    -------
    numpy.ndarray of shape (3,)

    Raises
    ------
    GeometryInconsistencyError
        Both points on the same side, no real root, or root outside [0, 1].
    DegenerateGeometryError
        Zero-length segment.
    """
    p0 = np.asarray(p0, dtype=np.float64)
    p1 = np.asarray(p1, dtype=np.float64)
    d = p1 - p0
    a = float(np.dot(d, d))
    if a == 0.0:
        raise DegenerateGeometryError("Zero-length edge has no sphere crossing.")

    r2 = radius * radius
    d0 = float(_topology.squared_distance(p0))
    d1 = float(_topology.squared_distance(p1))
    inside0 = d0 < r2
    if inside0 == (d1 < r2):
        raise GeometryInconsistencyError(
            f"One point must be inside and one outside the sphere "
            f"(|p0|^2 = {d0:.17g}, |p1|^2 = {d1:.17g}, R^2 = {r2:.17g})."
        )

    b = 2.0 * float(np.dot(p0, d))
    c = d0 - r2

    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        raise GeometryInconsistencyError(
            f"No intersection between the line and the sphere (discriminant {disc:.6g})."
        )
    sqrt_disc = np.sqrt(disc)
    if inside0:
        t = (-b + sqrt_disc) / (2.0 * a)
    else:
        t = (-b - sqrt_disc) / (2.0 * a)

    if t < -SEGMENT_TOL or t > 1.0 + SEGMENT_TOL:
        raise GeometryInconsistencyError(f"The intersection (t = {t:.12g}) does not lie on the segment.")
    t = min(max(t, 0.0), 1.0)

    return p0 + t * d


class Edge:
    """A canonical cell edge together with its sphere crossing.

    Parameters
    ----------
    corners : array_like of shape (8, 3)
        Cell corners in canonical order.
    edge : int
        Canonical edge index (0-11).
    radius : float
        Sphere radius.
    """

    def __init__(self, corners, edge: int, radius: float):
        self.index = edge
        self.corner_indices = _topology.corners_of_edge(edge)
        self.faces = _topology.faces_of_edge(edge)
        corners = np.asarray(corners, dtype=np.float64)
        self.start_point = corners[self.corner_indices[0]].copy()
        self.end_point = corners[self.corner_indices[1]].copy()
        self.intersection = find_sphere_intersection(self.start_point, self.end_point, radius)

    def shares_face(self, other: 'Edge') -> bool:
        return self.common_face(other) >= 0

    def common_face(self, other: 'Edge') -> int:
        """First face shared with ``other``, or ``-1``."""
        for f in self.faces:
            if f in other.faces:
                return f
        return -1

    def __repr__(self) -> str:
        return f"Edge({self.index}, corners={self.corner_indices}, faces={self.faces})"
