"""
Boundary curves on the sphere, pole enclosure, patches and patch area.

Submodules
----------
_general_curve : GeneralCurve (sphere/face arc), FaceOrientation
_poles         : PoleEnclosure, check_pole_enclosure
_area          : area_methods registry, RefinementParams, polygon excess
_patch         : Fivetuple, Patch
"""

from mosaicgrid.curve._general_curve import FaceOrientation, GeneralCurve
from mosaicgrid.curve._poles import PoleEnclosure, check_pole_enclosure, winding_angle
from mosaicgrid.curve._area import (
    RefinementParams,
    area_methods,
    geodesic_refined_area,
    line_integral_area,
    refined_area,
    sampled_excess_area,
    spherical_polygon_area,
    triangle_excess,
)
from mosaicgrid.curve._patch import Fivetuple, Patch

__all__ = [
    'FaceOrientation',
    'GeneralCurve',
    'PoleEnclosure',
    'check_pole_enclosure',
    'winding_angle',
    'RefinementParams',
    'area_methods',
    'geodesic_refined_area',
    'line_integral_area',
    'refined_area',
    'sampled_excess_area',
    'spherical_polygon_area',
    'triangle_excess',
    'Fivetuple',
    'Patch',
]
