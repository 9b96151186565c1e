"""
Exceptions raised by pysphericalvoronoi.

Every error derives from :class:`SphericalVoronoiError` and from the builtin
exception a caller would reach for first (``ValueError`` for bad input,
``IndexError`` for bad lookups, ...), so both ``except`` styles work.
"""


class SphericalVoronoiError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SphericalVoronoiError, ValueError):
    """An option (tolerance, step count) was rejected before any geometry ran."""


class DegenerateInputError(SphericalVoronoiError, ValueError):
    """The site set cannot be triangulated (too few, coplanar, duplicated...)."""


class TopologyError(SphericalVoronoiError, RuntimeError):
    """The hull or the triangle fans violate the sphere triangulation contract."""


class DegenerateGeometryError(SphericalVoronoiError, ArithmeticError):
    """A zero-length or non-finite vector could not be projected onto the sphere."""


class IndexRangeError(SphericalVoronoiError, IndexError):
    """
    A lookup index fell outside its valid range.

    Parameters
    ----------
    what : str
        Name of the indexed collection, used in the message (e.g. "cell").
    index : int
        The offending index.
    size : int
        Number of valid entries; the valid range is ``[0, size)``.
    """

    def __init__(self, what: str, index: int, size: int):
        self.what = what
        self.index = index
        self.size = size
        super().__init__(f"{what} index {index} out of range [0, {size})")
