"""
MosaicGrid: scan a Cartesian grid for the cells a sphere passes through.

For every cell the corners are tested against the sphere. Cells with both
inside and outside corners become intersecting :class:`Cell` objects with a
boundary :class:`Patch`; cells with no inside corner go through the kiss
test; cells entirely inside are skipped.

Usage
-----
    from mosaicgrid import CartesianGrid, SphericalGrid, MosaicGrid, ScanParams

    cart = CartesianGrid.uniform([(-2, 2)] * 3, (5, 5, 5))
    sph = SphericalGrid(num_theta=19, num_phi=37, radius=1.5)
    result = MosaicGrid(cart, sph, params=ScanParams(n_workers=4)).scan()
    result.counts            # {'cornerIn': 24, ...}
    result.total_area        # ~ 4 pi R^2
"""

import dataclasses
import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from mosaicgrid._cell import Cell
from mosaicgrid._errors import MosaicError
from mosaicgrid.curve._area import area_methods
from mosaicgrid.geometry._closest import kiss_tests
from mosaicgrid.grid import _topology

logger = logging.getLogger(__name__)


@dataclass
class ScanParams:
    """Parameters for a grid scan.

    Attributes
    ----------
    area_method : str
        Key into ``area_methods`` (``refinement``, ``refinement-geodesic``,
        ``excess``, ``line-integral``).
    area_options : dict
        Keyword arguments forwarded to the area method (e.g. ``{'n': 40}``
        for ``excess`` or ``{'params': RefinementParams(...)}``).
    kiss_test : str
        Key into ``kiss_tests`` (``clamp`` or ``projection``).
    compute_patches : bool
        Build a Patch for every intersecting cell.
    compute_area : bool
        Estimate each patch's area (requires ``compute_patches``).
    n_workers : int
        Worker processes; z-slabs are distributed when greater than 1.
    skip_failed_cells : bool
        Log and record cells whose geometry fails instead of aborting.
    use_bulk_filter : bool
        Skip whole index ranges whose cells lie outside ``[-R, R]`` per axis.
    """
    area_method: str = "refinement"
    area_options: dict = field(default_factory=dict)
    kiss_test: str = "clamp"
    compute_patches: bool = True
    compute_area: bool = True
    n_workers: int = 1
    skip_failed_cells: bool = False
    use_bulk_filter: bool = True

    def __post_init__(self):
        if self.area_method not in area_methods:
            raise ValueError(
                f"Unknown area method {self.area_method!r}; "
                f"available: {area_methods.available()}"
            )
        if self.kiss_test not in kiss_tests:
            raise ValueError(
                f"Unknown kiss test {self.kiss_test!r}; available: {kiss_tests.available()}"
            )
        if self.n_workers < 1:
            raise ValueError(f"n_workers must be at least 1, got {self.n_workers}")


@dataclass
class ScanResult:
    """Output of :meth:`MosaicGrid.scan`.

    Attributes
    ----------
    cells : list of Cell
        Intersecting and kiss cells, z-major with x varying fastest.
    patches : list of Patch
        One per non-kiss cell when patches were requested.
    areas : dict
        Patch area keyed by ``Fivetuple`` (empty unless areas were computed).
    counts : dict
        Cells per intersection-type label.
    kiss_count : int
    total_area : float
        Sum of all patch areas.
    failed : list of tuple
        ``(ix, iy, iz, message)`` for cells skipped after a geometry error.
    """
    cells: list = field(default_factory=list)
    patches: list = field(default_factory=list)
    areas: dict = field(default_factory=dict)
    counts: dict = field(default_factory=dict)
    kiss_count: int = 0
    total_area: float = 0.0
    failed: list = field(default_factory=list)

    @property
    def num_cells(self) -> int:
        return len(self.cells)


def _scan_cell(grid, ix, iy, iz, radius, params):
    """Cell (with patch and area) for one grid cell, or None if the sphere misses it."""
    corners = grid.cell_corners(ix, iy, iz)
    mask = _topology.inside_mask(corners, radius)

    if mask == 0:
        point = kiss_tests[params.kiss_test](corners, radius)
        if point is None:
            return None, None
        return Cell(grid, ix, iy, iz, radius, inside_corners=mask, closest_point=point), None
    if mask == 0xFF:
        return None, None

    cell = Cell(grid, ix, iy, iz, radius, inside_corners=mask)
    area = None
    if params.compute_patches:
        patch = cell.make_patch()
        if params.compute_area:
            area = patch.area(params.area_method, **params.area_options)
    return cell, area


def _scan_slab(grid, radius, iz, x_range, y_range, params):
    """Scan one z-layer of cells; module level so worker processes can pickle it."""
    cells, areas, failed = [], [], []
    for iy in range(y_range[0], y_range[1] + 1):
        for ix in range(x_range[0], x_range[1] + 1):
            try:
                cell, area = _scan_cell(grid, ix, iy, iz, radius, params)
            except MosaicError as exc:
                if not params.skip_failed_cells:
                    raise
                logger.warning("Skipping cell (%d, %d, %d): %s", ix, iy, iz, exc)
                failed.append((ix, iy, iz, str(exc)))
                continue
            if cell is None:
                continue
            logger.debug("cell %s", cell)
            cells.append(cell)
            areas.append(area)
    return cells, areas, failed


class MosaicGrid:
    """A Cartesian grid paired with a spherical grid (the sphere to intersect).

    Parameters
    ----------
    cartesian_grid : CartesianGrid
    spherical_grid : SphericalGrid
        Supplies the sphere radius.
    params : ScanParams, optional
    """

    def __init__(self, cartesian_grid, spherical_grid, params: Optional[ScanParams] = None):
        self.cartesian_grid = cartesian_grid
        self.spherical_grid = spherical_grid
        self.params = params if params is not None else ScanParams()

    @property
    def radius(self) -> float:
        return self.spherical_grid.radius

    def _index_ranges(self, params):
        ranges = []
        for axis, offset in zip(self.cartesian_grid.axes, self.cartesian_grid.offset):
            if params.use_bulk_filter:
                ranges.append(axis.bulk_filter_limits(self.radius, float(offset)))
            else:
                ranges.append((0, axis.num_cells - 1))
        return ranges

    def _run(self, params: ScanParams) -> ScanResult:
        x_range, y_range, z_range = self._index_ranges(params)
        slabs = list(range(z_range[0], z_range[1] + 1))
        n = len(slabs)
        args = ([self.cartesian_grid] * n, [self.radius] * n, slabs,
                [x_range] * n, [y_range] * n, [params] * n)

        if params.n_workers > 1 and n > 1:
            with ProcessPoolExecutor(max_workers=params.n_workers) as executor:
                slab_results = list(executor.map(_scan_slab, *args))
        else:
            slab_results = list(map(_scan_slab, *args))

        result = ScanResult()
        for cells, areas, failed in slab_results:
            for cell, area in zip(cells, areas):
                result.cells.append(cell)
                if cell.patch is not None:
                    result.patches.append(cell.patch)
                if area is not None:
                    result.areas[cell.patch.key] = area
            result.failed.extend(failed)

        result.counts = Cell.report(result.cells)
        result.kiss_count = result.counts["kiss"]
        result.total_area = float(sum(result.areas.values()))
        logger.info("Scanned %d z-slabs: %d cells, %d patches, total area %.12g",
                    n, len(result.cells), len(result.patches), result.total_area)
        if result.failed:
            logger.warning("%d cells failed and were skipped", len(result.failed))
        return result

    def scan(self) -> ScanResult:
        """Classify every cell and build patches and areas as configured."""
        return self._run(self.params)

    def find_intersecting_cells(self) -> list:
        """Intersecting and kiss cells only, without patches or areas."""
        params = dataclasses.replace(self.params, compute_patches=False, compute_area=False)
        return self._run(params).cells
