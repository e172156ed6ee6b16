"""
Angular (theta, phi) grid on a sphere of fixed radius.

The grid may be rotated relative to the global frame: first by ``alpha``
about the x axis, then by ``beta`` about the rotated z axis. The rotation only
affects :meth:`SphericalGrid.get_indices`, which maps a global direction into
the grid's local angular frame before locating it. The intersection and curve
code only uses the radius.
"""

import numpy as np

from mosaicgrid._spherical import to_cartesian, wrap_angle
from mosaicgrid.grid._grid1d import Grid1D


class SphericalGrid:
    """Uniform theta/phi grid with a radius and two rotation angles.

    Parameters
    ----------
    num_theta : int
        Number of theta grid points on ``[0, pi]``.
    num_phi : int
        Number of phi grid points on ``[-pi, pi]``.
    radius : float
        Sphere radius (same length units as the Cartesian grid).
    alpha : float
        Rotation about the x axis [rad].
    beta : float
        Rotation about the rotated z axis [rad].
    """

    def __init__(self, num_theta: int, num_phi: int, radius: float,
                 alpha: float = 0.0, beta: float = 0.0):
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.theta_grid = Grid1D.uniform(0.0, np.pi, num_theta)
        self.phi_grid = Grid1D.uniform(-np.pi, np.pi, num_phi)
        self.radius = float(radius)
        self.alpha = float(alpha)
        self.beta = float(beta)

    def copy(self) -> 'SphericalGrid':
        return SphericalGrid(self.num_theta, self.num_phi, self.radius,
                             self.alpha, self.beta)

    @property
    def num_theta(self) -> int:
        return self.theta_grid.num_points

    @property
    def num_phi(self) -> int:
        return self.phi_grid.num_points

    @property
    def theta_spacing(self) -> float:
        return self.theta_grid.average_spacing

    @property
    def phi_spacing(self) -> float:
        return self.phi_grid.average_spacing

    @property
    def is_rotated(self) -> bool:
        return self.alpha != 0.0 or self.beta != 0.0

    def rotate_global_to_local(self, theta, phi):
        """Map global ``(theta, phi)`` into the grid's rotated frame."""
        x, y, z = np.moveaxis(to_cartesian(1.0, theta, phi), -1, 0)
        ca, sa = np.cos(self.alpha), np.sin(self.alpha)
        cb, sb = np.cos(self.beta), np.sin(self.beta)

        # about x by alpha
        y1 = z * sa + y * ca
        z1 = z * ca - y * sa
        x1 = x

        # about the new z by beta
        x2 = x1 * cb - y1 * sb
        y2 = x1 * sb + y1 * cb

        theta_r = np.arccos(np.clip(z1, -1.0, 1.0))
        phi_r = wrap_angle(np.arctan2(y2, x2))
        if np.ndim(theta_r) == 0:
            return float(theta_r), float(phi_r)
        return theta_r, phi_r

    def get_indices(self, theta: float, phi: float) -> tuple[int, int]:
        """Grid indices ``(itheta, iphi)`` of a global direction.

        Out-of-range angles give ``-1`` for that index.
        """
        if self.is_rotated:
            theta, phi = self.rotate_global_to_local(theta, phi)
        else:
            phi = wrap_angle(phi)
        return self.theta_grid.locate_interval(theta), self.phi_grid.locate_interval(phi)

    def __repr__(self) -> str:
        return (f"SphericalGrid(num_theta={self.num_theta}, num_phi={self.num_phi}, "
                f"radius={self.radius:g}, alpha={self.alpha:g}, beta={self.beta:g})")
