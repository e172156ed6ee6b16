"""3D views of intersected cells: box wireframe, edge crossings and boundary arcs."""

import numpy as np

from mosaicgrid.grid import _topology


def _draw_box(ax, corners, color='0.6', lw=0.8):
    for e in range(_topology.NUM_EDGES):
        a, b = _topology.corners_of_edge(e)
        seg = corners[[a, b]]
        ax.plot(seg[:, 0], seg[:, 1], seg[:, 2], color=color, lw=lw)


def plot_cell(
    cell,
    ax=None,
    n: int = 50,
    show_corners: bool = True,
    curve_color: str = 'C0',
    title: str = None,
):
    """Draw one cell with its sphere crossings and boundary curves.

    Parameters
    ----------
    cell : Cell
    ax : mpl_toolkits.mplot3d.Axes3D or None
        If None, a new 3D figure is created.
    n : int
        Points per boundary curve.
    show_corners : bool
        Mark corners inside (filled) and outside (hollow) the sphere.
    curve_color : str
        Colour of the boundary arcs.
    title : str or None
        Plot title; defaults to the cell indices and type.

    Returns
    -------
    fig, ax
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.get_figure()

    corners = cell.corners
    _draw_box(ax, corners)

    if show_corners:
        inside = np.array([_topology.corner_is_set(cell.inside_corners, k)
                           for k in range(_topology.NUM_CORNERS)])
        ax.scatter(*corners[inside].T, color='k', s=20)
        ax.scatter(*corners[~inside].T, facecolors='none', edgecolors='k', s=20)

    if cell.edges:
        pts = np.array([e.intersection for e in cell.edges])
        ax.scatter(*pts.T, color='C3', s=15)

    for curve in cell.boundary_curves:
        line = curve.polyline(n)
        ax.plot(line[:, 0], line[:, 1], line[:, 2], color=curve_color, lw=1.5)

    if cell.closest_point is not None:
        ax.scatter(*cell.closest_point, color='C2', marker='x', s=30)

    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_zlabel('z')
    if title is None:
        title = f"({cell.ix}, {cell.iy}, {cell.iz}) {cell.intersection_type_label}"
    ax.set_title(title)

    return fig, ax


def plot_cells(cells, ax=None, n: int = 30, show_boxes: bool = False):
    """Draw the boundary curves of many cells, coloured by intersection type.

    Returns
    -------
    fig, ax
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.get_figure()

    for cell in cells:
        color = f"C{int(cell.intersection_type) % 10}"
        if show_boxes:
            _draw_box(ax, cell.corners, color='0.85', lw=0.5)
        for curve in cell.boundary_curves:
            line = curve.polyline(n)
            ax.plot(line[:, 0], line[:, 1], line[:, 2], color=color, lw=1.0)
        if cell.closest_point is not None:
            ax.scatter(*cell.closest_point, color=color, marker='x', s=20)

    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_zlabel('z')
    return fig, ax
