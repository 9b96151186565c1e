"""Lloyd relaxation of spherical Voronoi diagrams."""

import logging
from typing import TYPE_CHECKING

from pysphericalvoronoi.config import validate_steps

if TYPE_CHECKING:
    from pysphericalvoronoi.SphericalVoronoi import SphericalVoronoi

logger = logging.getLogger(__name__)


def lloyd_relaxation(diagram: "SphericalVoronoi", steps: int) -> "SphericalVoronoi":
    """
    Move every site to its cell centroid and rebuild, ``steps`` times.

    Each round computes all centroids from the current diagram before any site
    moves, then builds a fresh diagram from them with the same ``eps``. The
    input diagram is never modified.

    Parameters
    ----------
    diagram : SphericalVoronoi
        The diagram to relax.
    steps : int
        Number of rounds, >= 0. Zero returns ``diagram`` itself.

    Returns
    -------
    SphericalVoronoi
        The relaxed diagram.

    Raises
    ------
    ConfigurationError
        If ``steps`` is negative or not an integer.
    SphericalVoronoiError
        Any failure of a rebuild is propagated as is.
    """
    steps = validate_steps(steps)
    for step in range(steps):
        centroids = diagram.centroids()
        diagram = type(diagram)(centroids, eps=diagram.eps)
        logger.debug("Lloyd relaxation step %d/%d done", step + 1, steps)
    return diagram
