"""Visualization utilities for sphere/grid intersections (matplotlib, optional).

Submodules
----------
matplotlib_3d : plot_cell, plot_cells
"""

from mosaicgrid.visualization.matplotlib_3d import plot_cell, plot_cells

__all__ = ['plot_cell', 'plot_cells']
