"""
Classification of a single Cartesian cell against the sphere.

A cell is classified by the pair (number of corners inside the sphere,
number of edges crossing it). Only nine pairs can occur for a sphere and an
axis-aligned box; each names an intersection type:

    type              inside  edges
    cornerIn             1      3
    cornerOut            7      3
    doubleCornerIn       2      4
    doubleCornerOut      6      4
    faceCut              4      4
    cornerPull           3      5
    cornerPush           5      5
    skewCut              4      6
    kiss              0 or 8    0

For every non-kiss cell the crossing edges are ordered into a loop, one
``GeneralCurve`` is built on the face shared by each consecutive pair, and
the loop is checked for an enclosed pole.

Usage
-----
    cell = Cell(grid, ix, iy, iz, radius)
    cell.intersection_type          # IntersectionType.CORNER_IN
    cell.boundary_curves            # [GeneralCurve, ...] in loop order
    counts = Cell.report(cells)     # {'cornerIn': 24, ...}
"""

import enum
import logging
from typing import Iterable, Optional

import numpy as np

from mosaicgrid._errors import UnknownTopologyError
from mosaicgrid._spherical import normalize
from mosaicgrid.curve._general_curve import GeneralCurve
from mosaicgrid.curve._patch import Patch
from mosaicgrid.curve._poles import PoleEnclosure, check_pole_enclosure
from mosaicgrid.geometry._edge import Edge
from mosaicgrid.geometry._ordering import reorder_edges
from mosaicgrid.grid import _topology

logger = logging.getLogger(__name__)


class IntersectionType(enum.IntEnum):
    """The nine ways a sphere can meet an axis-aligned cell."""
    CORNER_IN = 0
    CORNER_OUT = 1
    DOUBLE_CORNER_IN = 2
    DOUBLE_CORNER_OUT = 3
    FACE_CUT = 4
    CORNER_PULL = 5
    CORNER_PUSH = 6
    SKEW_CUT = 7
    KISS = 8

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    IntersectionType.CORNER_IN: "cornerIn",
    IntersectionType.CORNER_OUT: "cornerOut",
    IntersectionType.DOUBLE_CORNER_IN: "doubleCornerIn",
    IntersectionType.DOUBLE_CORNER_OUT: "doubleCornerOut",
    IntersectionType.FACE_CUT: "faceCut",
    IntersectionType.CORNER_PULL: "cornerPull",
    IntersectionType.CORNER_PUSH: "cornerPush",
    IntersectionType.SKEW_CUT: "skewCut",
    IntersectionType.KISS: "kiss",
}

# (inside corners, intersecting edges) -> type
SIGNATURES = {
    (1, 3): IntersectionType.CORNER_IN,
    (7, 3): IntersectionType.CORNER_OUT,
    (2, 4): IntersectionType.DOUBLE_CORNER_IN,
    (6, 4): IntersectionType.DOUBLE_CORNER_OUT,
    (4, 4): IntersectionType.FACE_CUT,
    (3, 5): IntersectionType.CORNER_PULL,
    (5, 5): IntersectionType.CORNER_PUSH,
    (4, 6): IntersectionType.SKEW_CUT,
    (0, 0): IntersectionType.KISS,
    (8, 0): IntersectionType.KISS,
}


def classify(num_inside: int, num_edges: int) -> IntersectionType:
    """Intersection type for a corner/edge count pair."""
    try:
        return SIGNATURES[(num_inside, num_edges)]
    except KeyError:
        raise UnknownTopologyError(
            f"No intersection type has {num_inside} inside corners "
            f"and {num_edges} intersecting edges."
        ) from None


class Cell:
    """One Cartesian cell met by the sphere.

    Parameters
    ----------
    grid : CartesianGrid
        Grid the cell belongs to.
    ix, iy, iz : int
        Cell indices.
    radius : float
        Sphere radius.
    inside_corners : int, optional
        8-bit mask of corners inside the sphere; computed from the corner
        distances when omitted.
    closest_point : array_like, optional
        Nearest face point to the origin, recorded for kiss cells.

    Raises
    ------
    UnknownTopologyError
        If the corner/edge counts match no intersection type.
    """

    def __init__(self, grid, ix: int, iy: int, iz: int, radius: float,
                 inside_corners: Optional[int] = None, closest_point=None):
        self.ix = ix
        self.iy = iy
        self.iz = iz
        self.radius = float(radius)
        self.corners = grid.cell_corners(ix, iy, iz)
        if inside_corners is None:
            inside_corners = _topology.inside_mask(self.corners, self.radius)
        self.inside_corners = int(inside_corners)
        self.closest_point = None if closest_point is None else np.asarray(closest_point, dtype=np.float64)
        self.patch: Optional[Patch] = None

        self.edge_indices = _topology.intersecting_edges(self.inside_corners)
        self.intersection_type = classify(self.num_inside_corners, len(self.edge_indices))

        if self.intersection_type is IntersectionType.KISS:
            self.edges = []
            self.boundary_curves = []
            self.pole_enclosure = PoleEnclosure.NONE
            return

        edges = [Edge(self.corners, e, self.radius) for e in self.edge_indices]
        self.edges = reorder_edges(edges)
        self.boundary_curves = self._build_curves()
        self.pole_enclosure = check_pole_enclosure(self.boundary_curves)
        if self.pole_enclosure.encloses_pole:
            logger.warning("Cell (%d, %d, %d) encloses the %s pole", ix, iy, iz,
                           "north" if self.pole_enclosure is PoleEnclosure.NORTH_ENCLOSED else "south")

    def _build_curves(self):
        curves = []
        n = len(self.edges)
        for k, edge in enumerate(self.edges):
            nxt = self.edges[(k + 1) % n]
            face = edge.common_face(nxt)
            curves.append(GeneralCurve(face, edge.intersection, nxt.intersection, self.radius))
        return curves

    def make_patch(self) -> Optional[Patch]:
        """Build (and keep) the patch bounded by this cell's curves; None for kiss cells."""
        if self.boundary_curves:
            self.patch = Patch(self.boundary_curves, self.ix, self.iy, self.iz)
        return self.patch

    # Counts and labels

    @property
    def indices(self) -> tuple:
        return self.ix, self.iy, self.iz

    @property
    def num_inside_corners(self) -> int:
        return _topology.count_bits(self.inside_corners)

    @property
    def num_outside_corners(self) -> int:
        return _topology.NUM_CORNERS - self.num_inside_corners

    @property
    def num_edge_intersections(self) -> int:
        return len(self.edge_indices)

    @property
    def intersection_type_label(self) -> str:
        return self.intersection_type.label

    @property
    def is_polar(self) -> bool:
        """True if a pole is enclosed by, or lies on, the boundary loop."""
        return self.pole_enclosure is not PoleEnclosure.NONE

    # Geometry

    @property
    def center(self) -> np.ndarray:
        return self.corners.mean(axis=0)

    def unit_normal(self, face: int) -> np.ndarray:
        """Outward unit normal of ``face``."""
        fc = _topology.face_corners(self.corners, face)
        n = normalize(np.cross(fc[1] - fc[0], fc[3] - fc[0]))
        if np.dot(n, fc.mean(axis=0) - self.center) < 0.0:
            n = -n
        return n

    def __eq__(self, other) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self.indices == other.indices

    def __hash__(self):
        return hash(self.indices)

    def __repr__(self) -> str:
        return (f"Cell({self.ix}, {self.iy}, {self.iz}, {self.intersection_type_label}, "
                f"inside={self.inside_corners:08b})")

    @staticmethod
    def report(cells: Iterable['Cell']) -> dict:
        """Count cells per intersection type (keyed by label, in type order) and log it."""
        counts = {t.label: 0 for t in IntersectionType}
        for cell in cells:
            counts[cell.intersection_type_label] += 1
        for label, count in counts.items():
            logger.info("%-16s %d", label, count)
        logger.info("%-16s %d", "total", sum(counts.values()))
        return counts
