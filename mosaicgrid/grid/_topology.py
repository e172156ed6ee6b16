"""
Static corner/edge/face tables for a rectangular cell.

Corner numbering (bit 0 = x-high, bit 1 = y-high, bit 2 = z-high)::

    0 (x0, y0, z0)   1 (x1, y0, z0)   2 (x0, y1, z0)   3 (x1, y1, z0)
    4 (x0, y0, z1)   5 (x1, y0, z1)   6 (x0, y1, z1)   7 (x1, y1, z1)

Face numbering::

    0: z = z0  {0, 1, 3, 2}      1: z = z1  {4, 5, 7, 6}
    2: y = y0  {0, 1, 5, 4}      3: y = y1  {2, 3, 7, 6}
    4: x = x0  {0, 2, 6, 4}      5: x = x1  {1, 3, 7, 5}

Edge numbering is the lexicographic order of the corner pairs below. All
tables are derived once at import; nothing here holds runtime state.
"""

import numpy as np

NUM_CORNERS = 8
NUM_EDGES = 12
NUM_FACES = 6

CORNER_BITS = tuple(1 << k for k in range(NUM_CORNERS))

_EDGE_CORNERS = np.array([
    (0, 1), (0, 2), (0, 4), (1, 3), (1, 5), (2, 3),
    (2, 6), (3, 7), (4, 5), (4, 6), (5, 7), (6, 7),
], dtype=np.int8)

# Corners listed cyclically around each face
_FACE_CORNERS = np.array([
    (0, 1, 3, 2),
    (4, 5, 7, 6),
    (0, 1, 5, 4),
    (2, 3, 7, 6),
    (0, 2, 6, 4),
    (1, 3, 7, 5),
], dtype=np.int8)

# Coordinate held constant on each face (0 = x, 1 = y, 2 = z)
FACE_AXIS = (2, 2, 1, 1, 0, 0)


def _check(index, n, what):
    if index < 0 or index >= n:
        raise ValueError(f"Invalid {what} index {index}, must be in [0, {n - 1}].")


def corners_of_edge(edge: int) -> tuple[int, int]:
    """The two corner indices of a canonical edge."""
    _check(edge, NUM_EDGES, "edge")
    a, b = _EDGE_CORNERS[edge]
    return int(a), int(b)


def faces_of_corner(corner: int) -> tuple[int, int, int]:
    """The three faces meeting at a corner, ordered (z face, y face, x face)."""
    _check(corner, NUM_CORNERS, "corner")
    face_z = 1 if corner & 4 else 0
    face_y = 3 if corner & 2 else 2
    face_x = 5 if corner & 1 else 4
    return face_z, face_y, face_x


def _derive_edge_faces(edge):
    a, b = corners_of_edge(edge)
    faces_b = faces_of_corner(b)
    common = [f for f in faces_of_corner(a) if f in faces_b]
    if len(common) != 2:
        raise ValueError(f"Edge {edge} does not lie on exactly two faces.")
    return tuple(common)


_EDGE_FACES = np.array([_derive_edge_faces(e) for e in range(NUM_EDGES)], dtype=np.int8)

_EDGE_INDEX = np.full((NUM_CORNERS, NUM_CORNERS), -1, dtype=np.int8)
for _e, (_a, _b) in enumerate(_EDGE_CORNERS):
    _EDGE_INDEX[_a, _b] = _e
    _EDGE_INDEX[_b, _a] = _e
del _e, _a, _b

for _table in (_EDGE_CORNERS, _FACE_CORNERS, _EDGE_FACES, _EDGE_INDEX):
    _table.setflags(write=False)
del _table


def faces_of_edge(edge: int) -> tuple[int, int]:
    """The two faces an edge lies on."""
    _check(edge, NUM_EDGES, "edge")
    f0, f1 = _EDGE_FACES[edge]
    return int(f0), int(f1)


def corner_indices_of_face(face: int) -> tuple[int, int, int, int]:
    """The four corners of a face, in cyclic order around it."""
    _check(face, NUM_FACES, "face")
    return tuple(int(c) for c in _FACE_CORNERS[face])


def edge_index(corner_a: int, corner_b: int) -> int:
    """Canonical edge joining two corners, or ``-1`` if they are not adjacent."""
    if not (0 <= corner_a < NUM_CORNERS and 0 <= corner_b < NUM_CORNERS):
        return -1
    return int(_EDGE_INDEX[corner_a, corner_b])


def common_face(edge_a: int, edge_b: int) -> int:
    """First face shared by two edges, or ``-1`` if none."""
    faces_b = faces_of_edge(edge_b)
    for f in faces_of_edge(edge_a):
        if f in faces_b:
            return f
    return -1


def count_bits(mask: int) -> int:
    """Number of corners set in an inside-corner mask."""
    return bin(mask & 0xFF).count("1")


def corner_is_set(mask: int, corner: int) -> bool:
    return bool(mask & CORNER_BITS[corner])


def squared_distance(points) -> np.ndarray:
    """``|p|^2`` along the last axis; the single inside/outside measure used everywhere."""
    return np.sum(np.asarray(points, dtype=np.float64) ** 2, axis=-1)


def inside_mask(corners, radius: float) -> int:
    """Bitmask of the corners strictly inside a sphere centred at the origin."""
    d2 = squared_distance(corners)
    mask = 0
    for k in np.nonzero(d2 < radius * radius)[0]:
        mask |= CORNER_BITS[k]
    return mask


def intersecting_edges(mask: int) -> list[int]:
    """Edges whose two corners differ in inside/outside status, in canonical order."""
    if mask < 0 or mask > 0xFF:
        raise ValueError(f"Inside-corner mask must fit in 8 bits, got {mask}")
    return [e for e in range(NUM_EDGES)
            if corner_is_set(mask, _EDGE_CORNERS[e, 0]) != corner_is_set(mask, _EDGE_CORNERS[e, 1])]


def face_corners(corners, face: int) -> np.ndarray:
    """The ``(4, 3)`` coordinates of a face's corners taken from the 8 cell corners."""
    return np.asarray(corners, dtype=np.float64)[list(corner_indices_of_face(face))]


def face_average_distance_squared(corners, face: int) -> float:
    """Mean squared distance of a face's corners from the origin."""
    return float(np.mean(np.sum(face_corners(corners, face) ** 2, axis=1)))
