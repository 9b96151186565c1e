import logging

from pysphericalvoronoi.config import DEFAULT_EPS, DiagramOptions
from pysphericalvoronoi.exceptions import (
    SphericalVoronoiError,
    ConfigurationError,
    DegenerateInputError,
    TopologyError,
    DegenerateGeometryError,
    IndexRangeError
)
from pysphericalvoronoi.sphere_utils import (
    latlon_to_unit_vectors,
    unit_vectors_to_latlon,
    random_unit_vectors
)
from pysphericalvoronoi.SphericalDelaunay import SphericalDelaunay
from pysphericalvoronoi.SphericalVoronoi import SphericalVoronoi
from pysphericalvoronoi.VoronoiCell import VoronoiCell
from pysphericalvoronoi.relaxation import lloyd_relaxation
from pysphericalvoronoi.plotting import (
    plot_spherical_triangulation,
    plot_spherical_voronoi
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_EPS",
    "DiagramOptions",
    "SphericalVoronoiError",
    "ConfigurationError",
    "DegenerateInputError",
    "TopologyError",
    "DegenerateGeometryError",
    "IndexRangeError",
    "latlon_to_unit_vectors",
    "unit_vectors_to_latlon",
    "random_unit_vectors",
    "SphericalDelaunay",
    "SphericalVoronoi",
    "VoronoiCell",
    "lloyd_relaxation",
    "plot_spherical_triangulation",
    "plot_spherical_voronoi",
]
