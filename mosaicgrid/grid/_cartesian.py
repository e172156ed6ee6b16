"""
Axis-aligned Cartesian lattice of rectangular cells.

Cells are indexed by ``(ix, iy, iz)``; the cell ``(ix, iy, iz)`` spans
``[x[ix], x[ix+1]] x [y[iy], y[iy+1]] x [z[iz], z[iz+1]]`` (plus the per-axis
offsets). Its 8 corners follow the canonical numbering used everywhere in
mosaicgrid: bit 0 of the corner index selects the high x, bit 1 the high y,
bit 2 the high z::

    corner 0 (x0, y0, z0)    corner 4 (x0, y0, z1)
    corner 1 (x1, y0, z0)    corner 5 (x1, y0, z1)
    corner 2 (x0, y1, z0)    corner 6 (x0, y1, z1)
    corner 3 (x1, y1, z0)    corner 7 (x1, y1, z1)
"""

import numpy as np

from mosaicgrid.grid._grid1d import Grid1D


class CartesianGrid:
    """Three independent ``Grid1D`` axes plus per-axis offsets.

    Parameters
    ----------
    x, y, z : array_like or Grid1D
        Axis coordinates (must not be empty).
    offset : sequence of 3 floats
        Offset of the local grid from the global origin (the sphere centre).
    """

    def __init__(self, x, y, z, offset=(0.0, 0.0, 0.0)):
        self.x_grid = x.copy() if isinstance(x, Grid1D) else Grid1D(x)
        self.y_grid = y.copy() if isinstance(y, Grid1D) else Grid1D(y)
        self.z_grid = z.copy() if isinstance(z, Grid1D) else Grid1D(z)
        offset = np.asarray(offset, dtype=np.float64)
        if offset.shape != (3,):
            raise ValueError(f"offset must have 3 components, got shape {offset.shape}")
        offset.setflags(write=False)
        self.offset = offset

    @classmethod
    def uniform(cls, bounds, counts, offset=(0.0, 0.0, 0.0)) -> 'CartesianGrid':
        """Uniform grid with ``counts[i]`` cells along axis ``i``.

        Parameters
        ----------
        bounds : sequence of 3 (min, max) pairs
        counts : sequence of 3 ints
            Number of *cells* (not points) per axis.
        """
        axes = [Grid1D.uniform(lo, hi, n + 1) for (lo, hi), n in zip(bounds, counts)]
        return cls(*axes, offset=offset)

    def copy(self) -> 'CartesianGrid':
        return CartesianGrid(self.x_grid, self.y_grid, self.z_grid, offset=self.offset)

    @property
    def axes(self) -> tuple[Grid1D, Grid1D, Grid1D]:
        return self.x_grid, self.y_grid, self.z_grid

    @property
    def shape(self) -> tuple[int, int, int]:
        """Number of cells along x, y, z."""
        return tuple(g.num_cells for g in self.axes)

    @property
    def num_cells(self) -> int:
        nx, ny, nz = self.shape
        return nx * ny * nz

    @property
    def bounds(self) -> np.ndarray:
        """Global ``[[xmin, xmax], [ymin, ymax], [zmin, zmax]]``."""
        return np.array([[g.min + o, g.max + o] for g, o in zip(self.axes, self.offset)])

    def get_indices(self, point) -> tuple[int, int, int]:
        """Cell indices containing a global point, ``-1`` on out-of-range axes."""
        p = np.asarray(point, dtype=np.float64)
        if p.shape != (3,):
            raise ValueError(f"point must have 3 components, got shape {p.shape}")
        local = p - self.offset
        return tuple(g.locate_interval(float(v)) for g, v in zip(self.axes, local))

    def get_coordinates(self, ix: int, iy: int, iz: int) -> np.ndarray:
        """Global coordinates of grid node ``(ix, iy, iz)``."""
        return np.array([g.value_at(i) for g, i in zip(self.axes, (ix, iy, iz))]) + self.offset

    def _check_cell(self, ix, iy, iz):
        for name, i, n in zip("xyz", (ix, iy, iz), self.shape):
            if i < 0 or i >= n:
                raise IndexError(f"Cell {name} index {i} is out of bounds [0, {n}).")

    def cell_corners(self, ix: int, iy: int, iz: int) -> np.ndarray:
        """The 8 corners of cell ``(ix, iy, iz)`` as an ``(8, 3)`` array in canonical order."""
        self._check_cell(ix, iy, iz)
        xs = (self.x_grid.value_at(ix), self.x_grid.value_at(ix + 1))
        ys = (self.y_grid.value_at(iy), self.y_grid.value_at(iy + 1))
        zs = (self.z_grid.value_at(iz), self.z_grid.value_at(iz + 1))
        corners = np.empty((8, 3))
        for k in range(8):
            corners[k] = (xs[k & 1], ys[(k >> 1) & 1], zs[(k >> 2) & 1])
        return corners + self.offset

    def iter_cells(self):
        """Yield every ``(ix, iy, iz)`` with x varying fastest."""
        nx, ny, nz = self.shape
        for iz in range(nz):
            for iy in range(ny):
                for ix in range(nx):
                    yield ix, iy, iz

    def __repr__(self) -> str:
        return f"CartesianGrid(shape={self.shape}, offset={tuple(self.offset)})"
