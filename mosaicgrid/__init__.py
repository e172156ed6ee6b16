"""
mosaicgrid: intersection of a sphere with a 3D Cartesian grid.

Submodules
----------
grid          : Grid1D, CartesianGrid, SphericalGrid, cell topology tables
geometry      : edge/sphere crossings, edge ordering, kiss tests
curve         : GeneralCurve, pole enclosure, Patch and area estimators
visualization : matplotlib views of cells (optional dependency)
_cell         : Cell, IntersectionType
_mosaic       : MosaicGrid, ScanParams, ScanResult
_errors       : exception hierarchy
"""

from mosaicgrid._errors import (
    MosaicError,
    GeometryInconsistencyError,
    UnknownTopologyError,
    OrderingFailureError,
    OpenLoopError,
    DegenerateGeometryError,
)
from mosaicgrid.grid import Grid1D, CartesianGrid, SphericalGrid
from mosaicgrid.curve import (
    GeneralCurve,
    PoleEnclosure,
    Patch,
    Fivetuple,
    RefinementParams,
    area_methods,
)
from mosaicgrid.geometry import kiss_tests
from mosaicgrid._cell import Cell, IntersectionType
from mosaicgrid._mosaic import MosaicGrid, ScanParams, ScanResult

__version__ = '0.1.0'

__all__ = [
    'MosaicError',
    'GeometryInconsistencyError',
    'UnknownTopologyError',
    'OrderingFailureError',
    'OpenLoopError',
    'DegenerateGeometryError',
    'Grid1D',
    'CartesianGrid',
    'SphericalGrid',
    'GeneralCurve',
    'PoleEnclosure',
    'Patch',
    'Fivetuple',
    'RefinementParams',
    'area_methods',
    'kiss_tests',
    'Cell',
    'IntersectionType',
    'MosaicGrid',
    'ScanParams',
    'ScanResult',
]
