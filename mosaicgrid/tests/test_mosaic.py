"""End-to-end tests for MosaicGrid scans."""

import logging

import numpy as np
import numpy.testing as npt
import pytest

from mosaicgrid import (
    CartesianGrid,
    DegenerateGeometryError,
    Fivetuple,
    IntersectionType,
    MosaicGrid,
    PoleEnclosure,
    ScanParams,
    SphericalGrid,
    area_methods,
)

R = 1.5

EXPECTED_COUNTS = {
    "cornerIn": 24,
    "cornerOut": 0,
    "doubleCornerIn": 24,
    "doubleCornerOut": 12,
    "faceCut": 6,
    "cornerPull": 0,
    "cornerPush": 0,
    "skewCut": 8,
    "kiss": 0,
}


def cube_grid():
    return CartesianGrid.uniform([(-2, 2)] * 3, (5, 5, 5))


def sphere(radius=R):
    return SphericalGrid(num_theta=19, num_phi=37, radius=radius)


@pytest.fixture(scope="module")
def result():
    return MosaicGrid(cube_grid(), sphere()).scan()


# Classification over the whole grid

class TestScanCounts:
    def test_counts(self, result):
        assert result.counts == EXPECTED_COUNTS
        assert result.num_cells == 74
        assert result.kiss_count == 0
        assert len(result.patches) == 74
        assert result.failed == []

    def test_cell_order_is_z_major(self, result):
        keys = [(c.iz, c.iy, c.ix) for c in result.cells]
        assert keys == sorted(keys)

    def test_polar_cells(self, result):
        by_index = {c.indices: c for c in result.cells}
        assert by_index[(2, 2, 4)].pole_enclosure is PoleEnclosure.NORTH_ENCLOSED
        assert by_index[(2, 2, 0)].pole_enclosure is PoleEnclosure.SOUTH_ENCLOSED
        polar = [c for c in result.cells if c.is_polar]
        assert len(polar) == 2

    def test_offset_grid_same_counts(self):
        grid = CartesianGrid.uniform([(0, 4)] * 3, (5, 5, 5), offset=(-2, -2, -2))
        cells = MosaicGrid(grid, sphere()).find_intersecting_cells()
        assert len(cells) == 74
        counts = {}
        for c in cells:
            counts[c.intersection_type_label] = counts.get(c.intersection_type_label, 0) + 1
        assert counts == {k: v for k, v in EXPECTED_COUNTS.items() if v}

    def test_without_bulk_filter(self):
        params = ScanParams(use_bulk_filter=False, compute_area=False)
        res = MosaicGrid(cube_grid(), sphere(), params=params).scan()
        assert res.counts == EXPECTED_COUNTS

    def test_find_intersecting_cells(self):
        mosaic = MosaicGrid(cube_grid(), sphere())
        cells = mosaic.find_intersecting_cells()
        assert len(cells) == 74
        assert all(c.patch is None for c in cells)
        # the configured parameters are left untouched
        assert mosaic.params.compute_patches

    def test_corners_on_sphere(self):
        # unit spacing with R = sqrt(2) puts grid corners on the sphere to within rounding
        radius = np.sqrt(2.0)
        grid = CartesianGrid.uniform([(-2, 2)] * 3, (4, 4, 4))
        res = MosaicGrid(grid, sphere(radius)).scan()
        assert res.failed == []
        assert len(res.patches) > 0
        npt.assert_allclose(res.total_area, 4 * np.pi * radius ** 2, rtol=1e-4)

    def test_report_logged(self, caplog):
        params = ScanParams(compute_area=False)
        with caplog.at_level(logging.INFO, logger="mosaicgrid"):
            MosaicGrid(cube_grid(), sphere(), params=params).scan()
        assert "skewCut" in caplog.text
        assert "z-slabs" in caplog.text


# Areas

class TestScanAreas:
    def test_patches_tile_the_sphere(self, result):
        npt.assert_allclose(result.total_area, 4 * np.pi * R ** 2, rtol=1e-4)

    def test_area_keys(self, result):
        assert len(result.areas) == 74
        assert all(isinstance(k, Fivetuple) for k in result.areas)
        assert all(a > 0.0 for a in result.areas.values())

    def test_top_face_cut(self, result):
        area = result.areas[Fivetuple(2, 2, 4)]
        assert 0.64 < area < 0.692

    def test_symmetry(self, result):
        # mirror images through the centre cell have equal areas
        npt.assert_allclose(result.areas[Fivetuple(2, 2, 4)],
                            result.areas[Fivetuple(2, 2, 0)], rtol=1e-5)
        npt.assert_allclose(result.areas[Fivetuple(1, 1, 0)],
                            result.areas[Fivetuple(3, 3, 4)], rtol=1e-5)

    def test_no_areas_when_disabled(self):
        params = ScanParams(compute_area=False)
        res = MosaicGrid(cube_grid(), sphere(), params=params).scan()
        assert res.areas == {}
        assert res.total_area == 0.0
        assert len(res.patches) == 74

    def test_excess_method(self):
        params = ScanParams(area_method="excess", area_options={"n": 40})
        res = MosaicGrid(cube_grid(), sphere(), params=params).scan()
        npt.assert_allclose(res.total_area, 4 * np.pi * R ** 2, rtol=1e-3)

    def test_parallel_matches_serial(self):
        serial = ScanParams(area_method="excess")
        parallel = ScanParams(area_method="excess", n_workers=2)
        a = MosaicGrid(cube_grid(), sphere(), params=serial).scan()
        b = MosaicGrid(cube_grid(), sphere(), params=parallel).scan()
        assert a.counts == b.counts
        assert [c.indices for c in a.cells] == [c.indices for c in b.cells]
        assert a.areas.keys() == b.areas.keys()
        for key in a.areas:
            npt.assert_allclose(b.areas[key], a.areas[key], rtol=1e-12)


# Kiss cells

class TestKissScan:
    def test_face_kiss(self):
        grid = CartesianGrid([-0.5, 0.5], [-0.5, 0.5], [1.0, 2.0])
        res = MosaicGrid(grid, sphere(1.2)).scan()
        assert res.kiss_count == 1
        cell = res.cells[0]
        assert cell.intersection_type is IntersectionType.KISS
        npt.assert_allclose(cell.closest_point, [0.0, 0.0, 1.0])
        assert res.patches == []

    def test_edge_kiss_depends_on_test(self):
        grid = CartesianGrid([0.9, 2.0], [0.9, 2.0], [-0.5, 0.5])
        clamp = MosaicGrid(grid, sphere(1.3), ScanParams(kiss_test="clamp")).scan()
        projection = MosaicGrid(grid, sphere(1.3), ScanParams(kiss_test="projection")).scan()
        assert clamp.kiss_count == 1
        assert projection.kiss_count == 0
        assert projection.cells == []

    def test_fully_inside_cells_skipped(self):
        grid = CartesianGrid.uniform([(-0.3, 0.3)] * 3, (3, 3, 3))
        res = MosaicGrid(grid, sphere(2.0)).scan()
        assert res.cells == []
        assert res.total_area == 0.0


# Parameters and failure handling

def _broken_area(curves, radius, **kwargs):
    raise DegenerateGeometryError("no area for this loop")


class TestScanParams:
    def test_validation(self):
        with pytest.raises(ValueError, match="area method"):
            ScanParams(area_method="simplex")
        with pytest.raises(ValueError, match="kiss test"):
            ScanParams(kiss_test="nearest")
        with pytest.raises(ValueError):
            ScanParams(n_workers=0)

    def test_defaults(self):
        params = ScanParams()
        assert params.area_method == area_methods.default
        assert params.kiss_test == "clamp"
        assert params.n_workers == 1

    def test_failure_propagates(self, monkeypatch):
        monkeypatch.setitem(area_methods._methods, "broken", _broken_area)
        params = ScanParams(area_method="broken")
        with pytest.raises(DegenerateGeometryError):
            MosaicGrid(cube_grid(), sphere(), params=params).scan()

    def test_skip_failed_cells(self, monkeypatch, caplog):
        monkeypatch.setitem(area_methods._methods, "broken", _broken_area)
        params = ScanParams(area_method="broken", skip_failed_cells=True)
        with caplog.at_level(logging.WARNING, logger="mosaicgrid._mosaic"):
            res = MosaicGrid(cube_grid(), sphere(), params=params).scan()
        assert len(res.failed) == 74
        assert res.cells == []
        ix, iy, iz, message = res.failed[0]
        assert (ix, iy, iz) == (1, 1, 0)
        assert "no area" in message
        assert "Skipping cell" in caplog.text
