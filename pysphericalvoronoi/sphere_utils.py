import numpy as np
from typing import Optional

from pysphericalvoronoi.exceptions import DegenerateGeometryError


def normalize(v: np.ndarray, tol: float = 0.0) -> np.ndarray:
    """
    Scale a 3D vector to unit length.

    Raises DegenerateGeometryError instead of returning NaN when the vector
    has a norm ``<= tol`` or contains non-finite values.
    """
    v = np.asarray(v, dtype=float)
    n = np.linalg.norm(v)
    if not np.isfinite(n) or n <= tol:
        raise DegenerateGeometryError(f"cannot normalize vector {v} with norm {n}")
    return v / n


def normalize_rows(vectors: np.ndarray, tol: float = 0.0) -> np.ndarray:
    """
    Scale every row of an (N, 3) array to unit length.

    Parameters
    ----------
    vectors : np.ndarray
        An (N, 3) array of vectors.
    tol : float, optional
        Rows with a norm at or below this value are rejected. Default is 0.

    Returns
    -------
    np.ndarray
        An (N, 3) array of unit vectors.

    Raises
    ------
    DegenerateGeometryError
        If any row has a norm ``<= tol`` or is not finite. The message lists
        the first offending rows.
    """
    vectors = np.asarray(vectors, dtype=float)
    norms = np.linalg.norm(vectors, axis=1)
    bad = ~np.isfinite(norms) | (norms <= tol)
    if np.any(bad):
        rows = np.flatnonzero(bad)
        raise DegenerateGeometryError(
            f"cannot normalize {len(rows)} zero-length or non-finite vector(s), "
            f"first rows: {rows[:5].tolist()}"
        )
    return vectors / norms[:, np.newaxis]


def latlon_to_unit_vectors(latlon):
    """Convert lat/lon in degrees to 3D Cartesian coordinates on unit sphere."""
    latlon = np.asarray(latlon, dtype=float)
    lat = np.radians(latlon[:, 0])
    lon = np.radians(latlon[:, 1])
    x = np.cos(lat) * np.cos(lon)
    y = np.cos(lat) * np.sin(lon)
    z = np.sin(lat)
    return np.stack([x, y, z], axis=1)


def unit_vectors_to_latlon(points_xyz):
    """Convert 3D unit vectors to (lat, lon) in degrees."""
    points_xyz = np.asarray(points_xyz, dtype=float)
    x, y, z = points_xyz[:, 0], points_xyz[:, 1], points_xyz[:, 2]
    lat = np.degrees(np.arcsin(np.clip(z, -1.0, 1.0)))
    lon = np.degrees(np.arctan2(y, x))
    return np.stack([lat, lon], axis=1)


def random_unit_vectors(n: int, seed: Optional[int] = None) -> np.ndarray:
    """
    Draw ``n`` points on the unit sphere from uniform latitude/longitude.

    Latitude is uniform in [-pi/2, pi/2) and longitude in [-pi, pi), so the
    points cluster towards the poles. That unevenness is what Lloyd relaxation
    is meant to smooth out.

    Parameters
    ----------
    n : int
        Number of points.
    seed : int, optional
        Seed for ``numpy.random.default_rng``. The same seed gives the same points.

    Returns
    -------
    np.ndarray
        An (n, 3) array of unit vectors.
    """
    rng = np.random.default_rng(seed)
    lat = (rng.random(n) - 0.5) * np.pi
    lon = (rng.random(n) * 2 - 1) * np.pi
    return np.stack([
        np.cos(lat) * np.cos(lon),
        np.cos(lat) * np.sin(lon),
        np.sin(lat)
    ], axis=1)


def spherical_distance(u: np.ndarray, v: np.ndarray) -> float:
    """Great-arc distance between unit vectors u and v."""
    return float(np.arccos(np.clip(np.dot(u, v), -1.0, 1.0)))


def ccw_angle(ref: np.ndarray, vec: np.ndarray, normal: np.ndarray) -> float:
    """
    Angle swept counter-clockwise from ``ref`` to ``vec`` around ``normal``.

    Viewed from the tip of ``normal`` looking back at the origin, a positive
    rotation is counter-clockwise.

    Returns
    -------
    float
        The angle in radians, in [0, 2*pi).
    """
    cross = np.cross(ref, vec)
    angle = np.arctan2(
        np.copysign(np.linalg.norm(cross), np.dot(cross, normal)),
        np.dot(ref, vec)
    )
    if angle < 0:
        angle += 2 * np.pi
    return float(angle)
