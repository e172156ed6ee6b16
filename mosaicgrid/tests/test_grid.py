"""Tests for mosaicgrid.grid (Grid1D, CartesianGrid, SphericalGrid)."""

import numpy as np
import numpy.testing as npt
import pytest

from mosaicgrid.grid import CartesianGrid, Grid1D, SphericalGrid


AXIS = [-2.0, -1.2, -0.4, 0.4, 1.2, 2.0]


# Grid1D

class TestGrid1D:
    def test_input_is_sorted_and_copied(self):
        src = np.array([3.0, 0.0, 2.0, 0.5])
        g = Grid1D(src)
        src[0] = 100.0
        npt.assert_array_equal(g.points, [0.0, 0.5, 2.0, 3.0])

    def test_points_returns_copy(self):
        g = Grid1D([0.0, 1.0])
        pts = g.points
        pts[0] = -5.0
        assert g.min == 0.0

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="empty"):
            Grid1D([])

    def test_duplicates_raise(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            Grid1D([0.0, 1.0, 1.0, 2.0])

    def test_non_finite_raises(self):
        with pytest.raises(ValueError):
            Grid1D([0.0, np.nan])

    def test_locate_interval(self):
        g = Grid1D([0.0, 0.5, 2.0, 3.0])
        assert g.locate_interval(0.0) == 0
        assert g.locate_interval(0.25) == 0
        assert g.locate_interval(0.5) == 1
        assert g.locate_interval(1.0) == 1
        assert g.locate_interval(2.5) == 2

    def test_locate_upper_end_is_last_interval(self):
        g = Grid1D([0.0, 0.5, 2.0, 3.0])
        assert g.locate_interval(3.0) == 2

    def test_locate_out_of_range(self):
        g = Grid1D([0.0, 0.5, 2.0, 3.0])
        assert g.locate_interval(-0.1) == -1
        assert g.locate_interval(3.1) == -1

    def test_single_point_grid(self):
        g = Grid1D([1.0])
        assert g.num_cells == 0
        assert g.locate_interval(1.0) == -1
        assert g.average_spacing == 0.0

    def test_uniform(self):
        g = Grid1D.uniform(-2.0, 2.0, 6)
        npt.assert_allclose(g.points, AXIS)
        npt.assert_allclose(g.average_spacing, 0.8)
        assert g.num_points == 6
        assert g.num_cells == 5

    def test_uniform_rejects_bad_arguments(self):
        with pytest.raises(ValueError):
            Grid1D.uniform(0.0, 1.0, 1)
        with pytest.raises(ValueError):
            Grid1D.uniform(1.0, 1.0, 3)

    def test_value_at(self):
        g = Grid1D(AXIS)
        assert g.value_at(0) == -2.0
        assert g.value_at(5) == 2.0
        with pytest.raises(IndexError):
            g.value_at(6)
        with pytest.raises(IndexError):
            g.value_at(-1)

    def test_copy_is_equal(self):
        g = Grid1D(AXIS)
        c = g.copy()
        assert c == g
        assert hash(c) == hash(g)
        assert c is not g

    def test_bulk_filter_limits(self):
        g = Grid1D(AXIS)
        assert g.bulk_filter_limits(1.5) == (0, 4)
        assert g.bulk_filter_limits(1.0) == (1, 3)

    def test_bulk_filter_with_offset(self):
        g = Grid1D(AXIS)
        # shifted to [3, 7]; nothing overlaps (-0.1, 0.1)
        lo, hi = g.bulk_filter_limits(0.1, offset=5.0)
        assert lo > hi
        # shifted to [-1, 3]; only cells with global x < 0.5 qualify
        assert g.bulk_filter_limits(0.5, offset=1.0) == (0, 1)


# CartesianGrid

@pytest.fixture
def grid5():
    return CartesianGrid.uniform([(-2.0, 2.0)] * 3, (5, 5, 5))


class TestCartesianGrid:
    def test_shape(self, grid5):
        assert grid5.shape == (5, 5, 5)
        assert grid5.num_cells == 125
        npt.assert_allclose(grid5.bounds, [[-2.0, 2.0]] * 3)

    def test_canonical_corner_order(self, grid5):
        corners = grid5.cell_corners(0, 0, 0)
        expected = np.array([
            [-2.0, -2.0, -2.0],
            [-1.2, -2.0, -2.0],
            [-2.0, -1.2, -2.0],
            [-1.2, -1.2, -2.0],
            [-2.0, -2.0, -1.2],
            [-1.2, -2.0, -1.2],
            [-2.0, -1.2, -1.2],
            [-1.2, -1.2, -1.2],
        ])
        npt.assert_allclose(corners, expected)

    def test_corner_bits(self, grid5):
        corners = grid5.cell_corners(2, 3, 1)
        for k in range(8):
            lo_hi = [(k >> b) & 1 for b in range(3)]
            for axis in range(3):
                others = corners[[j for j in range(8) if ((j >> axis) & 1) != lo_hi[axis]], axis]
                if lo_hi[axis]:
                    assert corners[k, axis] > others.max() - 1e-12
                else:
                    assert corners[k, axis] < others.min() + 1e-12

    def test_cell_index_out_of_bounds(self, grid5):
        with pytest.raises(IndexError):
            grid5.cell_corners(5, 0, 0)
        with pytest.raises(IndexError):
            grid5.cell_corners(0, -1, 0)

    def test_get_indices(self, grid5):
        assert grid5.get_indices([0.0, 0.0, 0.0]) == (2, 2, 2)
        assert grid5.get_indices([-1.9, 1.3, 2.0]) == (0, 4, 4)
        assert grid5.get_indices([3.0, 0.0, 0.0]) == (-1, 2, 2)

    def test_offset(self):
        g = CartesianGrid([0.0, 1.0], [0.0, 1.0], [0.0, 1.0], offset=(10.0, 0.0, -1.0))
        npt.assert_allclose(g.cell_corners(0, 0, 0)[7], [11.0, 1.0, 0.0])
        assert g.get_indices([10.5, 0.5, -0.5]) == (0, 0, 0)
        assert g.get_indices([0.5, 0.5, 0.5]) == (-1, 0, -1)
        npt.assert_allclose(g.get_coordinates(1, 1, 1), [11.0, 1.0, 0.0])

    def test_iter_cells_x_fastest(self):
        g = CartesianGrid.uniform([(0, 1), (0, 1), (0, 1)], (2, 2, 2))
        cells = list(g.iter_cells())
        assert len(cells) == 8
        assert cells[:3] == [(0, 0, 0), (1, 0, 0), (0, 1, 0)]

    def test_copy_independent(self, grid5):
        c = grid5.copy()
        assert c.x_grid == grid5.x_grid
        assert c.x_grid is not grid5.x_grid

    def test_bad_offset_shape(self):
        with pytest.raises(ValueError):
            CartesianGrid([0, 1], [0, 1], [0, 1], offset=(0.0, 0.0))


# SphericalGrid

class TestSphericalGrid:
    def test_axes(self):
        s = SphericalGrid(4, 4, radius=1.5)
        npt.assert_allclose(s.theta_grid.points, [0.0, np.pi / 3, 2 * np.pi / 3, np.pi])
        npt.assert_allclose(s.phi_grid.points, [-np.pi, -np.pi / 3, np.pi / 3, np.pi])
        npt.assert_allclose(s.theta_spacing, np.pi / 3)
        assert not s.is_rotated

    def test_radius_must_be_positive(self):
        with pytest.raises(ValueError):
            SphericalGrid(4, 4, radius=0.0)

    def test_get_indices(self):
        s = SphericalGrid(4, 4, radius=1.0)
        assert s.get_indices(0.1, 0.1) == (0, 1)
        assert s.get_indices(np.pi / 2, np.pi / 2) == (1, 2)

    def test_get_indices_wraps_phi(self):
        s = SphericalGrid(4, 4, radius=1.0)
        assert s.get_indices(0.1, 0.1 + 2 * np.pi) == (0, 1)

    def test_rotation_moves_north_pole_to_equator(self):
        s = SphericalGrid(4, 4, radius=1.0, alpha=np.pi / 2)
        assert s.is_rotated
        theta, phi = s.rotate_global_to_local(0.0, 0.0)
        npt.assert_allclose(theta, np.pi / 2, atol=1e-12)
        npt.assert_allclose(phi, np.pi / 2, atol=1e-12)
        assert s.get_indices(0.0, 0.0) == (1, 2)

    def test_rotation_preserves_arrays(self):
        s = SphericalGrid(4, 4, radius=1.0, alpha=0.3, beta=-0.7)
        rng = np.random.default_rng(0)
        from mosaicgrid._spherical import random_theta_phi, to_cartesian
        theta, phi = random_theta_phi(rng, 50)
        t2, p2 = s.rotate_global_to_local(theta, phi)
        assert t2.shape == (50,)
        # rotations preserve angles between directions
        a = to_cartesian(1.0, theta, phi)
        b = to_cartesian(1.0, t2, p2)
        npt.assert_allclose(a @ a[0], b @ b[0], atol=1e-10)

    def test_copy(self):
        s = SphericalGrid(7, 9, radius=2.0, alpha=0.1)
        c = s.copy()
        assert (c.num_theta, c.num_phi, c.radius, c.alpha) == (7, 9, 2.0, 0.1)
