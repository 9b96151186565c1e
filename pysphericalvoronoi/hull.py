"""
Convex hull of a point cloud on the sphere.

Thin adapter around :class:`scipy.spatial.ConvexHull` (Qhull). It turns Qhull's
failure modes and its silent omissions (coplanar or interior points that are
not hull vertices) into :class:`DegenerateInputError`, and returns the hull as
a plain ``(F, 3)`` array of triangle indices.
"""

import logging

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from pysphericalvoronoi.exceptions import DegenerateInputError

logger = logging.getLogger(__name__)


def plane_deviation(points: np.ndarray) -> float:
    """
    Largest distance from any point to the best-fit plane through the cloud.

    Parameters
    ----------
    points : np.ndarray
        An (N, 3) array of points.

    Returns
    -------
    float
        Zero for a coplanar cloud, positive otherwise.
    """
    centered = points - points.mean(axis=0)
    # last right-singular vector is the normal of the least-squares plane
    _, _, vt = np.linalg.svd(centered, full_matrices=False)
    return float(np.max(np.abs(centered @ vt[-1])))


def convex_hull_faces(points: np.ndarray, eps: float) -> np.ndarray:
    """
    Triangulated convex hull of a 3D point cloud.

    Parameters
    ----------
    points : np.ndarray
        An (N, 3) array, N >= 4.
    eps : float
        Coplanarity tolerance: a cloud whose points all lie within ``eps`` of
        a common plane is rejected before Qhull runs.

    Returns
    -------
    np.ndarray
        An (F, 3) integer array of hull triangles. Orientation is arbitrary.

    Raises
    ------
    DegenerateInputError
        If the cloud is coplanar, Qhull fails, or some input point is not a
        vertex of the hull (duplicate, near-coincident or interior point).
    """
    points = np.asarray(points, dtype=float)
    if points.ndim != 2 or points.shape[1] != 3 or len(points) < 4:
        raise DegenerateInputError(
            f"convex hull needs an (N, 3) array with N >= 4, got shape {points.shape}"
        )

    deviation = plane_deviation(points)
    if deviation <= eps:
        raise DegenerateInputError(
            f"points are coplanar (max plane deviation {deviation:.3g} <= eps {eps:.3g})"
        )

    try:
        hull = ConvexHull(points)
    except QhullError as exc:
        raise DegenerateInputError(f"convex hull failed: {exc}") from exc

    if len(hull.vertices) != len(points):
        missing = np.setdiff1d(np.arange(len(points)), hull.vertices)
        raise DegenerateInputError(
            f"{len(missing)} point(s) are not hull vertices (duplicate or "
            f"off-sphere input), first indices: {missing[:5].tolist()}"
        )

    logger.debug("Convex hull of %d points has %d faces", len(points), len(hull.simplices))
    return np.asarray(hull.simplices, dtype=np.intp)
