"""
Exception taxonomy for sphere/grid intersection failures.

All of these signal programmer or data errors (inconsistent grid and sphere
parameters, malformed topology tables, corrupted input) rather than expected
runtime conditions. They are raised immediately and never retried.
"""


class MosaicError(Exception):
    """Base class for all mosaicgrid geometry errors."""


class GeometryInconsistencyError(MosaicError, ValueError):
    """A point or segment contradicts the inside/outside classification.

    Raised when both ends of an edge lie on the same side of the sphere, the
    edge/sphere quadratic has no real root, or the root falls outside [0, 1].
    """


class UnknownTopologyError(MosaicError, ValueError):
    """(inside corners, intersecting edges) matches no known cell signature."""


class OrderingFailureError(MosaicError, RuntimeError):
    """No cyclic ordering of intersecting edges shares faces pairwise."""


class OpenLoopError(MosaicError, ValueError):
    """Boundary curves do not chain into a closed loop."""


class DegenerateGeometryError(MosaicError, ValueError):
    """Zero-length vector, degenerate face, or non-finite numeric result."""
