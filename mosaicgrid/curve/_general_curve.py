"""
Boundary arcs lying on both the sphere and one planar cell face.

The intersection of a sphere of radius R (centred at the origin) with an
axis-aligned plane ``x_k = h`` is a circle of radius ``r = sqrt(R^2 - h^2)``
centred on the k axis. Between two points of that circle the arc is
parametrised by an in-plane angle ``psi`` interpolated linearly along the
shorter way round. From ``psi(t)`` the spherical angles follow in closed form:

    Z_NORMAL (faces 0, 1):  theta = acos(h / R)              (constant)
                            phi   = psi = atan2(y, x)
    X_NORMAL (faces 4, 5):  psi   = atan2(z, y)
                            theta = acos(r sin(psi) / R)
                            phi   = atan2(r cos(psi), h)
    Y_NORMAL (faces 2, 3):  psi   = atan2(z, x)
                            theta = acos(r sin(psi) / R)
                            phi   = atan2(h, r cos(psi))

Derivatives are taken numerically from these closed forms, never
symbolically.

Usage
-----
    curve = GeneralCurve(face=0, p0=a, p1=b, radius=1.5)
    curve.theta(0.5), curve.phi(0.5)
    curve.get_point(np.linspace(0, 1, 20))   # (20, 3)
    curve.path_length()
"""

import enum

import numpy as np
from scipy.integrate import simpson

from mosaicgrid._errors import GeometryInconsistencyError
from mosaicgrid._spherical import to_spherical, wrap_angle
from mosaicgrid.grid._topology import FACE_AXIS, NUM_FACES

# Finite-difference step for the 5-point stencil
FD_STEP = 1e-5

# Simpson subdivisions for the general arc-length integral
SIMPSON_INTERVALS = 1000

# Endpoint tolerance (length units) for sphere and face membership
ENDPOINT_TOL = 1e-6


class FaceOrientation(enum.Enum):
    """Which coordinate axis a face is normal to."""
    Z_NORMAL = 2
    Y_NORMAL = 1
    X_NORMAL = 0

    @classmethod
    def from_face(cls, face: int) -> 'FaceOrientation':
        if face < 0 or face >= NUM_FACES:
            raise ValueError(f"Invalid face index: {face}")
        return cls(FACE_AXIS[face])

    @property
    def axis(self) -> int:
        return self.value


def _stencil(f, t, h, wrap=False):
    """Centred 5-point first derivative of ``f`` at ``t``."""
    d1 = f(t + h) - f(t - h)
    d2 = f(t + 2 * h) - f(t - 2 * h)
    if wrap:
        d1 = wrap_angle(d1)
        d2 = wrap_angle(d2)
    return (8.0 * d1 - d2) / (12.0 * h)


class GeneralCurve:
    """Arc from ``p0`` to ``p1`` on the sphere and on cell face ``face``.

    Parameters
    ----------
    face : int
        Canonical face index (0-5) shared by both end points.
    p0, p1 : array_like of shape (3,)
        End points, on the sphere and on the face plane.
    radius : float
        Sphere radius.

    Raises
    ------
    GeometryInconsistencyError
        If an end point is off the sphere or the two disagree on the face
        coordinate.
    """

    def __init__(self, face: int, p0, p1, radius: float):
        self.orientation = FaceOrientation.from_face(face)
        self.face = face
        self.radius = float(radius)
        self.p0 = np.array(p0, dtype=np.float64)
        self.p1 = np.array(p1, dtype=np.float64)

        tol = ENDPOINT_TOL * max(1.0, self.radius)
        for name, p in (("p0", self.p0), ("p1", self.p1)):
            if abs(np.linalg.norm(p) - self.radius) > tol:
                raise GeometryInconsistencyError(
                    f"{name} = {p} is not on the sphere of radius {self.radius}"
                )
        axis = self.orientation.axis
        if abs(self.p0[axis] - self.p1[axis]) > tol:
            raise GeometryInconsistencyError(
                f"End points disagree on the {'xyz'[axis]} coordinate for face {face}"
            )

        self.plane = float(self.p0[axis])
        self.circle_radius = float(np.sqrt(max(self.radius ** 2 - self.plane ** 2, 0.0)))

        u, v = self._in_plane_axes()
        self.psi0 = float(np.arctan2(self.p0[v], self.p0[u]))
        psi1 = float(np.arctan2(self.p1[v], self.p1[u]))
        self.delta_psi = wrap_angle(psi1 - self.psi0)

        _, self.theta0, self.phi0 = (float(a) for a in to_spherical(self.p0))
        _, self.theta1, self.phi1 = (float(a) for a in to_spherical(self.p1))

        self._length = None

    def _in_plane_axes(self):
        """Coordinate indices (u, v) with ``psi = atan2(v, u)``."""
        if self.orientation is FaceOrientation.Z_NORMAL:
            return 0, 1
        if self.orientation is FaceOrientation.X_NORMAL:
            return 1, 2
        return 0, 2

    # Parametrisation

    def psi(self, t):
        """In-plane angle, linear in ``t`` along the shorter arc."""
        return self.psi0 + np.asarray(t, dtype=np.float64) * self.delta_psi

    def theta(self, t):
        """Polar angle at parameter ``t`` (scalar or array)."""
        t = np.asarray(t, dtype=np.float64)
        if self.orientation is FaceOrientation.Z_NORMAL:
            c = np.clip(self.plane / self.radius, -1.0, 1.0)
            out = np.full(t.shape, np.arccos(c))
        else:
            s = self.circle_radius * np.sin(self.psi(t)) / self.radius
            out = np.arccos(np.clip(s, -1.0, 1.0))
        return float(out) if out.ndim == 0 else out

    def phi(self, t):
        """Azimuth in ``(-pi, pi]`` at parameter ``t`` (scalar or array)."""
        psi = self.psi(t)
        if self.orientation is FaceOrientation.Z_NORMAL:
            out = wrap_angle(psi)
        elif self.orientation is FaceOrientation.X_NORMAL:
            out = np.arctan2(self.circle_radius * np.cos(psi), self.plane)
        else:
            out = np.arctan2(self.plane, self.circle_radius * np.cos(psi))
        return float(out) if np.ndim(out) == 0 else out

    def dtheta(self, t):
        """d(theta)/dt by a centred 5-point stencil."""
        return _stencil(self.theta, np.asarray(t, dtype=np.float64), FD_STEP)

    def dphi(self, t):
        """d(phi)/dt by a centred 5-point stencil, unwrapped across the +-pi cut."""
        return _stencil(self.phi, np.asarray(t, dtype=np.float64), FD_STEP, wrap=True)

    def get_point(self, t):
        """Cartesian point(s) at ``t``; shape ``(3,)`` or ``(len(t), 3)``."""
        psi = self.psi(t)
        a = self.circle_radius * np.cos(psi)
        b = self.circle_radius * np.sin(psi)
        h = np.full(np.shape(psi), self.plane)
        if self.orientation is FaceOrientation.Z_NORMAL:
            return np.stack((a, b, h), axis=-1)
        if self.orientation is FaceOrientation.X_NORMAL:
            return np.stack((h, a, b), axis=-1)
        return np.stack((a, h, b), axis=-1)

    def polyline(self, n: int = 20) -> np.ndarray:
        """``n`` evenly spaced points from ``p0`` to ``p1`` as an ``(n, 3)`` array."""
        if n < 2:
            raise ValueError(f"A polyline needs at least 2 points, got {n}")
        return self.get_point(np.linspace(0.0, 1.0, n))

    # Length

    @property
    def is_meridian(self) -> bool:
        """True when the face plane contains the z axis (arc of constant phi)."""
        return (self.orientation is not FaceOrientation.Z_NORMAL
                and abs(self.plane) <= 1e-12 * self.radius)

    def path_length(self) -> float:
        """Arc length on the sphere (cached)."""
        if self._length is None:
            if self.orientation is FaceOrientation.Z_NORMAL:
                self._length = self.radius * np.sin(self.theta0) * abs(self.delta_psi)
            elif self.is_meridian:
                self._length = self.radius * abs(self.delta_psi)
            else:
                self._length = self.integrated_length()
        return float(self._length)

    def integrated_length(self, intervals: int = SIMPSON_INTERVALS) -> float:
        """Arc length from ``R * sqrt(theta'^2 + sin^2(theta) phi'^2)`` by Simpson's rule."""
        t = np.linspace(0.0, 1.0, intervals + 1)
        th = self.theta(t)
        speed = self.radius * np.sqrt(self.dtheta(t) ** 2 + (np.sin(th) * self.dphi(t)) ** 2)
        return float(simpson(speed, x=t))

    def reversed(self) -> 'GeneralCurve':
        """The same arc traversed from ``p1`` to ``p0``."""
        return GeneralCurve(self.face, self.p1, self.p0, self.radius)

    def __repr__(self) -> str:
        return (f"GeneralCurve(face={self.face}, {self.orientation.name}, "
                f"p0={np.round(self.p0, 6).tolist()}, p1={np.round(self.p1, 6).tolist()})")
