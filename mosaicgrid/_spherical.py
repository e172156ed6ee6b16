"""
Spherical-coordinate helpers shared by the grid, curve and area code.

Conventions: ``theta`` is the polar angle measured from +z in ``[0, pi]``,
``phi`` the azimuth from +x in ``(-pi, pi]``. All functions accept scalars or
numpy arrays.
"""

import numpy as np

from mosaicgrid._errors import DegenerateGeometryError

TWO_PI = 2.0 * np.pi


def wrap_angle(angle):
    """Wrap an angle (or angle difference) into ``(-pi, pi]``."""
    a = np.asarray(angle, dtype=np.float64)
    w = np.pi - np.mod(np.pi - a, TWO_PI)
    if w.ndim == 0:
        return float(w)
    return w


def to_spherical(p):
    """Cartesian point(s) ``(..., 3)`` to ``(r, theta, phi)``."""
    p = np.asarray(p, dtype=np.float64)
    r = np.linalg.norm(p, axis=-1)
    if np.any(r == 0.0):
        raise DegenerateGeometryError("Spherical angles are undefined at the origin.")
    theta = np.arccos(np.clip(p[..., 2] / r, -1.0, 1.0))
    phi = np.arctan2(p[..., 1], p[..., 0])
    return r, theta, phi


def to_cartesian(radius, theta, phi):
    """``(radius, theta, phi)`` to Cartesian, stacked on the last axis."""
    theta = np.asarray(theta, dtype=np.float64)
    phi = np.asarray(phi, dtype=np.float64)
    st = np.sin(theta)
    return np.stack((radius * st * np.cos(phi),
                     radius * st * np.sin(phi),
                     radius * np.cos(theta)), axis=-1)


def normalize(v, eps: float = 1e-12):
    """Unit vector along ``v``; degenerate (near-zero) vectors raise."""
    v = np.asarray(v, dtype=np.float64)
    n = np.linalg.norm(v)
    if n < eps:
        raise DegenerateGeometryError("Cannot normalize a zero-length vector.")
    return v / n


def central_angle(p, q):
    """Great-circle angle between direction vector(s) ``p`` and ``q``.

    Uses ``atan2(|p x q|, p . q)``, which stays accurate for nearly
    coincident and nearly antipodal points.
    """
    p = np.asarray(p, dtype=np.float64)
    q = np.asarray(q, dtype=np.float64)
    cross = np.linalg.norm(np.cross(p, q), axis=-1)
    dot = np.sum(p * q, axis=-1)
    return np.arctan2(cross, dot)


def random_theta_phi(rng: np.random.Generator, size=None):
    """Directions uniformly distributed on the sphere.

    ``theta = arccos(2v - 1)`` with ``v ~ U[0, 1)`` and ``phi ~ U[-pi, pi)``.
    """
    v = rng.random(size)
    theta = np.arccos(2.0 * v - 1.0)
    phi = rng.random(size) * TWO_PI - np.pi
    return theta, phi
