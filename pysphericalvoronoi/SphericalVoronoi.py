"""
Spherical Voronoi module
========================

The Voronoi diagram of sites on the unit sphere is the dual of their
spherical Delaunay triangulation: each Delaunay triangle contributes one
Voronoi vertex (its circumcenter projected onto the sphere) and each site owns
one cell whose boundary runs through the circumcenters of the triangles
around it.

Cells are not stored as objects. The diagram keeps three flat arrays in
compressed-sparse-row (CSR) layout, and cell ``i`` is the slice
``[cell_offsets[i], cell_offsets[i + 1])`` of both ``cell_vertices`` and
``cell_neighbors``. :class:`~pysphericalvoronoi.VoronoiCell.VoronoiCell` wraps
such a slice for convenient read access.
"""

import logging
from typing import Dict, Iterator

import numpy as np

from pysphericalvoronoi.config import DEFAULT_EPS
from pysphericalvoronoi.exceptions import DegenerateGeometryError, IndexRangeError
from pysphericalvoronoi.relaxation import lloyd_relaxation
from pysphericalvoronoi.SphericalDelaunay import SphericalDelaunay
from pysphericalvoronoi.sphere_utils import (
    latlon_to_unit_vectors,
    normalize_rows,
    unit_vectors_to_latlon
)
from pysphericalvoronoi.VoronoiCell import VoronoiCell

logger = logging.getLogger(__name__)


def triangle_circumcenter(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> np.ndarray:
    """
    Un-normalized circumcenter direction of a spherical triangle.

    The circumcenter is perpendicular to both ``a - b`` and ``b - c``; of the
    two candidates, the one on the same side as ``a + b + c`` is returned.
    No division takes place, so a degenerate triangle yields a (near) zero
    vector rather than NaN.

    Parameters
    ----------
    a, b, c : np.ndarray
        Triangle corners as 3D unit vectors.

    Returns
    -------
    np.ndarray
        A (3,) vector pointing at the circumcenter.
    """
    center = np.cross(a - b, b - c)
    if np.dot(center, a + b + c) < 0:
        center = -center
    return center


def triangle_circumcenters(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Vectorized :func:`triangle_circumcenter` over an (F, 3) triangle array."""
    a = points[triangles[:, 0]]
    b = points[triangles[:, 1]]
    c = points[triangles[:, 2]]
    centers = np.cross(a - b, b - c)
    flip = np.einsum("ij,ij->i", centers, a + b + c) < 0
    centers[flip] *= -1
    return centers


def cell_neighbor_indices(
    triangles: np.ndarray,
    incident_indices: np.ndarray,
    incident_offsets: np.ndarray
) -> np.ndarray:
    """
    Neighbor sites aligned with a fan-sorted triangle incidence.

    For site ``s`` and its ``j``-th incident triangle ``T``, the ``j``-th
    neighbor is the corner following ``s`` in ``T``. That corner shares the
    Delaunay edge dual to the cell edge leaving the ``j``-th boundary vertex.

    Returns
    -------
    np.ndarray
        Neighbor site indices, same length and layout as ``incident_indices``.
    """
    owners = np.repeat(np.arange(len(incident_offsets) - 1), np.diff(incident_offsets))
    corners = triangles[incident_indices]
    position = np.argmax(corners == owners[:, np.newaxis], axis=1)
    return corners[np.arange(len(corners)), (position + 1) % 3]


class SphericalVoronoi:
    """
    Voronoi diagram of sites on the unit sphere.

    Parameters
    ----------
    sites : np.ndarray
        An (N, 3) array of unit vectors, N >= 4, not all coplanar. The array is
        copied; the diagram never aliases caller data.
    eps : float, default 1e-12
        Coplanarity tolerance. Must be positive.

    Attributes
    ----------
    sites : np.ndarray
        (N, 3) sites.
    vertices : np.ndarray
        (2N - 4, 3) Voronoi vertices, one per Delaunay triangle.
    cell_vertices : np.ndarray
        CSR values: boundary vertex indices of every cell, in fan order.
    cell_neighbors : np.ndarray
        CSR values: neighbor site indices of every cell, in fan order, aligned with
        ``cell_vertices``.
    cell_offsets : np.ndarray
        CSR offsets, length N + 1.
    triangulation : SphericalDelaunay
        The triangulation the diagram was derived from.
    options : DiagramOptions
        The validated options.

    All arrays are read-only. A diagram never changes after construction;
    :meth:`relax` returns a new one.

    Raises
    ------
    ConfigurationError
        If ``eps`` is not positive.
    DegenerateInputError
        If there are fewer than 4 sites, or they are coplanar or duplicated.
    TopologyError
        If the hull does not form a closed sphere triangulation.
    DegenerateGeometryError
        If a triangle is too degenerate to have a circumcenter direction.
    """

    def __init__(self, sites: np.ndarray, eps: float = DEFAULT_EPS):
        dt = SphericalDelaunay(sites, eps=eps)

        centers = triangle_circumcenters(dt.points_xyz, dt.triangles)
        try:
            vertices = normalize_rows(centers)
        except DegenerateGeometryError as exc:
            raise DegenerateGeometryError(
                f"degenerate Delaunay triangle, no circumcenter: {exc}"
            ) from exc

        neighbors = cell_neighbor_indices(
            dt.triangles, dt.incident_triangle_indices, dt.incident_triangle_offsets
        )
        vertices.setflags(write=False)
        neighbors.setflags(write=False)

        self.triangulation = dt
        self.options = dt.options
        self.sites = dt.points_xyz
        self.vertices = vertices
        self.cell_vertices = dt.incident_triangle_indices
        self.cell_neighbors = neighbors
        self.cell_offsets = dt.incident_triangle_offsets

        logger.debug("Built Voronoi diagram with %d cells and %d vertices",
                     len(self.sites), len(self.vertices))

    @classmethod
    def from_latlon(cls, latlon_coords: np.ndarray, eps: float = DEFAULT_EPS) -> "SphericalVoronoi":
        """Build a diagram from an (N, 2) array of (lat, lon) degrees."""
        return cls(latlon_to_unit_vectors(latlon_coords), eps=eps)

    @property
    def eps(self) -> float:
        return self.options.eps

    @property
    def site_latlon(self) -> np.ndarray:
        """(N, 2) array of the sites as (lat, lon) degrees."""
        return unit_vectors_to_latlon(self.sites)

    def num_cells(self) -> int:
        return len(self.sites)

    def cell(self, i: int) -> VoronoiCell:
        """
        View of the cell generated by site ``i``.

        Raises
        ------
        IndexRangeError
            If ``i`` is outside ``[0, num_cells())``.
        """
        n = len(self.sites)
        if not 0 <= i < n:
            raise IndexRangeError("cell", i, n)
        return VoronoiCell(self, i)

    def centroids(self) -> np.ndarray:
        """
        Spherical centroid of every cell, computed in one pass.

        Returns
        -------
        np.ndarray
            (N, 3) array; row ``i`` equals ``self.cell(i).centroid``.

        Raises
        ------
        DegenerateGeometryError
            If a cell has no vertices or its vertices average to the origin.
        """
        counts = np.diff(self.cell_offsets)
        if np.any(counts == 0):
            empty = np.flatnonzero(counts == 0)
            raise DegenerateGeometryError(f"cells without vertices: {empty[:5].tolist()}")
        sums = np.add.reduceat(self.vertices[self.cell_vertices], self.cell_offsets[:-1], axis=0)
        return normalize_rows(sums / counts[:, np.newaxis])

    def relax(self, steps: int = 1) -> "SphericalVoronoi":
        """
        Apply ``steps`` rounds of Lloyd relaxation.

        See :func:`~pysphericalvoronoi.relaxation.lloyd_relaxation`. The diagram
        itself is left untouched; rebind to the returned one.
        """
        return lloyd_relaxation(self, steps)

    def to_dict(self) -> Dict[str, np.ndarray]:
        """
        The diagram's arrays keyed by attribute name.

        Suitable for ``np.savez``; feeding ``sites`` back into the constructor
        with the same ``eps`` reproduces every other array exactly.
        """
        return {
            "sites": self.sites,
            "vertices": self.vertices,
            "cell_vertices": self.cell_vertices,
            "cell_neighbors": self.cell_neighbors,
            "cell_offsets": self.cell_offsets,
        }

    def __len__(self) -> int:
        return len(self.sites)

    def __getitem__(self, i: int) -> VoronoiCell:
        return self.cell(i)

    def __iter__(self) -> Iterator[VoronoiCell]:
        for i in range(len(self.sites)):
            yield VoronoiCell(self, i)

    def __repr__(self):
        return (f"<SphericalVoronoi(n_cells={len(self.sites)}, "
                f"n_vertices={len(self.vertices)}, eps={self.eps:g})>")
