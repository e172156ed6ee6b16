"""
Edge-level geometry: sphere crossings, loop ordering and near-tangency.

Submodules
----------
_edge     : find_sphere_intersection, Edge
_ordering : reorder_edges (cyclic face-sharing order)
_closest  : closest face point and the kiss_tests registry
"""

from mosaicgrid.geometry._edge import Edge, find_sphere_intersection
from mosaicgrid.geometry._ordering import reorder_edges
from mosaicgrid.geometry._closest import (
    kiss_tests,
    closest_face,
    clamped_face_point,
    projected_face_point,
    clamp_kiss,
    projection_kiss,
)

__all__ = [
    'Edge',
    'find_sphere_intersection',
    'reorder_edges',
    'kiss_tests',
    'closest_face',
    'clamped_face_point',
    'projected_face_point',
    'clamp_kiss',
    'projection_kiss',
]
