"""
Spherical Delaunay module
=========================

For points on the unit sphere the Delaunay triangulation coincides with the
convex hull of the points: every hull face is a triangle whose circumscribed
circle on the sphere contains no other site. This module lifts a Qhull convex
hull into such a triangulation and indexes it for Voronoi construction.

This module provides:

* ``next_vertex`` / ``prev_vertex`` helpers that walk a triangle's corners in
  counter-clockwise (CCW) order;
* ``orient_triangles_ccw`` which rewinds hull faces so every triangle reads
  CCW when the sphere is seen from outside;
* ``build_incidence`` which indexes, for every site, the triangles touching
  it as a compressed-sparse-row (CSR) layout;
* ``sort_incident_triangles_ccw`` which orders one site's triangles into its
  fan, counter-clockwise when looking out from the centre of the sphere
  (clockwise seen from outside); and
* the :class:`SphericalDelaunay` class tying these together.
"""

import logging
from typing import MutableSequence, Sequence, Tuple

import numpy as np

from pysphericalvoronoi.config import DEFAULT_EPS, DiagramOptions
from pysphericalvoronoi.exceptions import (
    DegenerateInputError,
    IndexRangeError,
    TopologyError
)
from pysphericalvoronoi.hull import convex_hull_faces
from pysphericalvoronoi.sphere_utils import latlon_to_unit_vectors, unit_vectors_to_latlon

logger = logging.getLogger(__name__)

# sites further than this from the unit sphere trigger a warning
UNIT_NORM_ATOL = 1e-6


def next_vertex(tri: Sequence[int], v: int) -> int:
    """
    Return the corner that follows ``v`` in the CCW triangle ``tri``.

    Raises
    ------
    ValueError
        If ``v`` is not a corner of ``tri``.
    """
    a, b, c = tri
    if v == a:
        return b
    if v == b:
        return c
    if v == c:
        return a
    raise ValueError(f"vertex {v} is not in triangle {tuple(tri)}")


def prev_vertex(tri: Sequence[int], v: int) -> int:
    """
    Return the corner that precedes ``v`` in the CCW triangle ``tri``.

    Raises
    ------
    ValueError
        If ``v`` is not a corner of ``tri``.
    """
    a, b, c = tri
    if v == a:
        return c
    if v == b:
        return a
    if v == c:
        return b
    raise ValueError(f"vertex {v} is not in triangle {tuple(tri)}")


def orient_triangles_ccw(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Rewind triangles so they are counter-clockwise seen from outside the sphere.

    A triangle (i, j, k) is CCW when ``cross(p_j - p_i, p_k - p_i) . p_i >= 0``.
    Triangles failing the test get their second and third corners swapped.

    Parameters
    ----------
    points : np.ndarray
        An (N, 3) array of sites.
    triangles : np.ndarray
        An (F, 3) integer array of triangle corners.

    Returns
    -------
    np.ndarray
        A new (F, 3) array with consistent CCW winding.
    """
    triangles = np.array(triangles, dtype=np.intp)
    a = points[triangles[:, 0]]
    b = points[triangles[:, 1]]
    c = points[triangles[:, 2]]
    normals = np.cross(b - a, c - a)
    flip = np.einsum("ij,ij->i", normals, a) < 0
    triangles[flip] = triangles[flip][:, [0, 2, 1]]
    return triangles


def build_incidence(triangles: np.ndarray, n_points: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Index the triangles incident to every point in CSR layout.

    Point ``v`` owns ``indices[offsets[v]:offsets[v + 1]]``. Within a point's
    slice the triangles appear in ascending triangle order; they are not yet
    sorted around the point.

    Parameters
    ----------
    triangles : np.ndarray
        An (F, 3) integer array of triangle corners.
    n_points : int
        Number of points N.

    Returns
    -------
    indices : np.ndarray
        Triangle indices, length 3F.
    offsets : np.ndarray
        Slice boundaries, length N + 1.
    """
    corners = np.asarray(triangles, dtype=np.intp).ravel()
    counts = np.bincount(corners, minlength=n_points)
    offsets = np.zeros(n_points + 1, dtype=np.intp)
    np.cumsum(counts, out=offsets[1:])
    # stable sort keeps each point's triangles in ascending order
    indices = np.argsort(corners, kind="stable") // 3
    return indices.astype(np.intp), offsets


def sort_incident_triangles_ccw(
    v: int,
    incident: MutableSequence[int],
    triangles: Sequence[Sequence[int]]
) -> None:
    """
    Sort the triangles around ``v`` into fan order, in place.

    Two triangles A, B are consecutive around ``v`` when
    ``next_vertex(A, v) == prev_vertex(B, v)``: A's far edge ends where B's
    far edge begins. With outward-wound triangles this walks the fan
    counter-clockwise looking out from the centre of the sphere. Each position
    is filled by scanning the remaining triangles for that match, which is
    quadratic in the degree of ``v``.

    Parameters
    ----------
    v : int
        The point index.
    incident : MutableSequence[int]
        Indices of the triangles touching ``v``. Permuted in place.
    triangles : Sequence[Sequence[int]]
        All triangles, CCW oriented.

    Raises
    ------
    TopologyError
        If some triangle has no successor or the fan does not close. Either
        means the hull is not a closed manifold triangulation.
    """
    k = len(incident)
    for i in range(1, k):
        target = next_vertex(triangles[incident[i - 1]], v)
        for j in range(i, k):
            if prev_vertex(triangles[incident[j]], v) == target:
                incident[i], incident[j] = incident[j], incident[i]
                break
        else:
            raise TopologyError(
                f"no triangle follows triangle {incident[i - 1]} around vertex {v}"
            )
    if k and next_vertex(triangles[incident[k - 1]], v) != prev_vertex(triangles[incident[0]], v):
        raise TopologyError(f"triangle fan around vertex {v} does not close")


class SphericalDelaunay:
    """
    Delaunay triangulation of points on the unit sphere.

    Parameters
    ----------
    points_xyz : np.ndarray
        An (N, 3) array of unit vectors, N >= 4, not all coplanar.
    eps : float, default 1e-12
        Coplanarity tolerance. Must be positive.

    Attributes
    ----------
    points_xyz : np.ndarray
        Read-only copy of the input points.
    triangles : np.ndarray
        Read-only (2N - 4, 3) array of CCW triangles.
    incident_triangle_indices : np.ndarray
        Read-only CSR values: the triangles around each point in fan order.
    incident_triangle_offsets : np.ndarray
        Read-only CSR offsets, length N + 1.
    options : DiagramOptions
        The validated options.

    Raises
    ------
    ConfigurationError
        If ``eps`` is not positive.
    DegenerateInputError
        If there are fewer than 4 points or the hull cannot be built.
    TopologyError
        If the hull is not a closed triangulation with 2N - 4 faces.
    """

    def __init__(self, points_xyz: np.ndarray, eps: float = DEFAULT_EPS):
        self.options = DiagramOptions(eps=eps)

        points = np.array(points_xyz, dtype=float)
        if points.ndim != 2 or points.shape[1] != 3:
            raise DegenerateInputError(
                f"points must be an (N, 3) array, got shape {points.shape}"
            )
        n = len(points)
        if n < 4:
            raise DegenerateInputError(
                f"insufficient points for triangulation: got {n}, minimum 4 required"
            )
        if not np.all(np.isfinite(points)):
            raise DegenerateInputError("points contain non-finite coordinates")

        off_sphere = np.abs(np.linalg.norm(points, axis=1) - 1.0) > UNIT_NORM_ATOL
        if np.any(off_sphere):
            logger.warning(
                "%d of %d points are not unit vectors; the triangulation assumes "
                "points on the unit sphere", int(off_sphere.sum()), n
            )

        faces = convex_hull_faces(points, self.options.eps)
        n_triangles = 2 * n - 4
        if len(faces) != n_triangles:
            raise TopologyError(
                f"convex hull returned {len(faces)} triangles, expected {n_triangles} "
                f"for {n} points"
            )

        triangles = orient_triangles_ccw(points, faces)
        indices, offsets = build_incidence(triangles, n)

        tri_list = triangles.tolist()
        for v in range(n):
            fan = indices[offsets[v]:offsets[v + 1]].tolist()
            sort_incident_triangles_ccw(v, fan, tri_list)
            indices[offsets[v]:offsets[v + 1]] = fan

        for arr in (points, triangles, indices, offsets):
            arr.setflags(write=False)
        self.points_xyz = points
        self.triangles = triangles
        self.incident_triangle_indices = indices
        self.incident_triangle_offsets = offsets

        logger.debug("Triangulated %d points into %d triangles", n, n_triangles)

    @classmethod
    def from_latlon(cls, latlon_coords: np.ndarray, eps: float = DEFAULT_EPS) -> "SphericalDelaunay":
        """Build a triangulation from an (N, 2) array of (lat, lon) degrees."""
        return cls(latlon_to_unit_vectors(latlon_coords), eps=eps)

    @property
    def eps(self) -> float:
        return self.options.eps

    @property
    def simplices(self):
        return self.triangles

    def get_triangles(self):
        """Alias for compatibility with scipy.spatial.Delaunay."""
        return self.triangles

    @property
    def points_latlon(self) -> np.ndarray:
        """(N, 2) array of the points as (lat, lon) degrees."""
        return unit_vectors_to_latlon(self.points_xyz)

    def incident_triangles(self, v: int) -> np.ndarray:
        """
        Triangles touching point ``v``, in fan order.

        The result is a read-only view into ``incident_triangle_indices``.

        Raises
        ------
        IndexRangeError
            If ``v`` is not a valid point index.
        """
        n = len(self.points_xyz)
        if not 0 <= v < n:
            raise IndexRangeError("vertex", v, n)
        off = self.incident_triangle_offsets
        return self.incident_triangle_indices[off[v]:off[v + 1]]

    def triangle_vertices(self, t: int) -> np.ndarray:
        """
        Coordinates of the three corners of triangle ``t`` as a (3, 3) array.

        Raises
        ------
        IndexRangeError
            If ``t`` is not a valid triangle index.
        """
        if not 0 <= t < len(self.triangles):
            raise IndexRangeError("triangle", t, len(self.triangles))
        return self.points_xyz[self.triangles[t]]

    def __len__(self) -> int:
        return len(self.points_xyz)

    def __repr__(self):
        return (f"<SphericalDelaunay(n_points={len(self.points_xyz)}, "
                f"n_triangles={len(self.triangles)})>")
