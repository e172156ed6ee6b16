"""
Grids: 1D axes, the Cartesian cell lattice, the angular sphere grid, and the
static cell topology tables.

Submodules
----------
_grid1d         : Grid1D (non-uniform or uniform sorted axis)
_cartesian      : CartesianGrid (three axes plus offsets, canonical corners)
_spherical_grid : SphericalGrid (theta/phi grid, radius, rotation)
_topology       : corner/edge/face tables and inside-mask helpers
"""

from mosaicgrid.grid._grid1d import Grid1D
from mosaicgrid.grid._cartesian import CartesianGrid
from mosaicgrid.grid._spherical_grid import SphericalGrid
from mosaicgrid.grid import _topology as topology

__all__ = ['Grid1D', 'CartesianGrid', 'SphericalGrid', 'topology']
