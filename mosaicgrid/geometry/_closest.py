"""
Closest point of a cell face to the sphere centre ("kiss" detection).

A cell whose eight corners are all outside the sphere may still be entered by
it through a face or an edge without any edge being crossed an odd number of
times. Such a cell is a *kiss*. Both tests below look at the face nearest to
the origin (smallest mean squared corner distance) and ask whether some
point of it lies strictly inside the sphere.

Two variants are registered in ``kiss_tests``:

``clamp`` (default)
    Clamp the origin into the face rectangle; catches contact through a face
    interior, an edge, or a corner neighbourhood.
``projection``
    Project the origin orthogonally onto the face plane and accept only when
    the projection falls inside the face; misses edge contact.

Usage
-----
    test = kiss_tests.get()              # clamp
    point = test(corners, radius)        # ndarray or None
"""

import logging

import numpy as np

from mosaicgrid._errors import DegenerateGeometryError
from mosaicgrid._registry import MethodRegistry
from mosaicgrid.grid._topology import FACE_AXIS, NUM_FACES, face_average_distance_squared, face_corners

logger = logging.getLogger(__name__)

kiss_tests = MethodRegistry("kiss test", default="clamp")

# Relative tolerance for deciding that a face is axis-aligned
_AXIS_TOL = 1e-9


def closest_face(corners) -> int:
    """Face with the smallest mean squared corner distance from the origin."""
    d2 = [face_average_distance_squared(corners, f) for f in range(NUM_FACES)]
    return int(np.argmin(d2))


def _face_axis(fc) -> int:
    """Axis normal to the face spanned by the ``(4, 3)`` corners ``fc``."""
    normal = np.cross(fc[1] - fc[0], fc[3] - fc[0])
    norm = np.linalg.norm(normal)
    if norm == 0.0:
        raise DegenerateGeometryError("Face corners are collinear.")
    normal = np.abs(normal / norm)
    axis = int(np.argmax(normal))
    if normal[axis] < 1.0 - _AXIS_TOL:
        raise DegenerateGeometryError(
            f"Face normal {normal} is not parallel to a coordinate axis."
        )
    return axis


def clamped_face_point(corners, face: int) -> np.ndarray:
    """Point of ``face`` nearest to the origin.

    The fixed coordinate is the face plane; the two free coordinates are the
    origin clamped into the face's bounding rectangle.
    """
    fc = face_corners(corners, face)
    axis = _face_axis(fc)
    if axis != FACE_AXIS[face]:
        raise DegenerateGeometryError(f"Face {face} corners do not lie on its canonical plane.")
    lo = fc.min(axis=0)
    hi = fc.max(axis=0)
    point = np.clip(np.zeros(3), lo, hi)
    point[axis] = fc[0, axis]
    return point


def projected_face_point(corners, face: int):
    """Orthogonal projection of the origin onto ``face``, or None if it falls outside."""
    fc = face_corners(corners, face)
    axis = _face_axis(fc)
    point = np.zeros(3)
    point[axis] = fc[0, axis]
    lo = fc.min(axis=0)
    hi = fc.max(axis=0)
    free = [k for k in range(3) if k != axis]
    if np.all(point[free] >= lo[free]) and np.all(point[free] <= hi[free]):
        return point
    return None


@kiss_tests.register("clamp")
def clamp_kiss(corners, radius: float):
    """Closest point of the nearest face if it lies inside the sphere, else None."""
    face = closest_face(corners)
    point = clamped_face_point(corners, face)
    if np.dot(point, point) < radius * radius:
        logger.debug("kiss on face %d at %s", face, point)
        return point
    return None


@kiss_tests.register("projection")
def projection_kiss(corners, radius: float):
    """Origin projected onto the nearest face, if inside it and inside the sphere."""
    face = closest_face(corners)
    point = projected_face_point(corners, face)
    if point is not None and np.dot(point, point) < radius * radius:
        logger.debug("kiss on face %d at %s", face, point)
        return point
    return None
