"""
One-dimensional axis grids.

A ``Grid1D`` is a strictly increasing sequence of coordinates. It is the
building block for the three Cartesian axes and for the angular (theta, phi)
axes of the spherical grid.

Usage
-----
    from mosaicgrid.grid import Grid1D

    g = Grid1D([0.0, 0.5, 2.0, 3.0])
    g.locate_interval(1.0)      # 1, since 0.5 <= 1.0 < 2.0
    g.locate_interval(5.0)      # -1, out of range

    u = Grid1D.uniform(-2.0, 2.0, 6)
"""

import numpy as np


class Grid1D:
    """Sorted, immutable, possibly non-uniform 1D grid.

    Parameters
    ----------
    points : array_like
        Grid coordinates. They are copied and sorted; they must be non-empty
        and contain no duplicates.
    """

    def __init__(self, points):
        pts = np.sort(np.asarray(points, dtype=np.float64).ravel())
        if pts.size == 0:
            raise ValueError("Grid1D cannot be initialized with an empty array.")
        if not np.all(np.isfinite(pts)):
            raise ValueError("Grid1D points must be finite.")
        if np.any(np.diff(pts) <= 0.0):
            raise ValueError("Grid1D points must be strictly increasing (duplicate values found).")
        pts.setflags(write=False)
        self._pts = pts

    @classmethod
    def uniform(cls, vmin: float, vmax: float, num: int) -> 'Grid1D':
        """Uniformly spaced grid of ``num`` points on ``[vmin, vmax]``."""
        if num < 2:
            raise ValueError(f"A uniform grid needs at least 2 points, got {num}")
        if not vmax > vmin:
            raise ValueError(f"Uniform grid needs vmax > vmin, got [{vmin}, {vmax}]")
        return cls(np.linspace(vmin, vmax, num))

    def copy(self) -> 'Grid1D':
        return Grid1D(self._pts)

    @property
    def min(self) -> float:
        return float(self._pts[0])

    @property
    def max(self) -> float:
        return float(self._pts[-1])

    @property
    def num_points(self) -> int:
        return int(self._pts.size)

    @property
    def num_cells(self) -> int:
        """Number of intervals between consecutive grid points."""
        return max(self.num_points - 1, 0)

    @property
    def points(self) -> np.ndarray:
        """A writable copy of the grid coordinates."""
        return self._pts.copy()

    @property
    def average_spacing(self) -> float:
        if self.num_points < 2:
            return 0.0
        return float((self._pts[-1] - self._pts[0]) / (self.num_points - 1))

    def value_at(self, index: int) -> float:
        if index < 0 or index >= self.num_points:
            raise IndexError(f"Index {index} is out of bounds for Grid1D of size {self.num_points}.")
        return float(self._pts[index])

    def locate_interval(self, value: float) -> int:
        """Index ``n`` with ``pts[n] <= value < pts[n+1]``.

        The upper end point belongs to the last interval. Values outside
        ``[min, max]`` (and single-point grids) give ``-1``.
        """
        if self.num_points < 2:
            return -1
        if value < self._pts[0] or value > self._pts[-1]:
            return -1
        n = int(np.searchsorted(self._pts, value, side='right')) - 1
        return min(n, self.num_points - 2)

    def bulk_filter_limits(self, radius: float, offset: float = 0.0) -> tuple[int, int]:
        """Inclusive range of cell indices whose interval overlaps ``(-radius, radius)``.

        Cells outside this range cannot meet a sphere of the given radius
        centred at the origin, so a grid scan may skip them. ``offset`` shifts
        the grid into the global frame first. When no cell qualifies the
        returned range is empty (``lo > hi``).
        """
        lo_edges = self._pts[:-1] + offset
        hi_edges = self._pts[1:] + offset
        hits = np.nonzero((lo_edges < radius) & (hi_edges > -radius))[0]
        if hits.size == 0:
            return 0, -1
        return int(hits[0]), int(hits[-1])

    def __len__(self) -> int:
        return self.num_points

    def __eq__(self, other) -> bool:
        if not isinstance(other, Grid1D):
            return NotImplemented
        return np.array_equal(self._pts, other._pts)

    def __hash__(self):
        return hash(self._pts.tobytes())

    def __repr__(self) -> str:
        return f"Grid1D(n={self.num_points}, min={self.min:g}, max={self.max:g})"
