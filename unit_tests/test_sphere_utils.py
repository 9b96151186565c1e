import numpy as np
import pytest
from pysphericalvoronoi.exceptions import DegenerateGeometryError
from pysphericalvoronoi.sphere_utils import (
    normalize,
    normalize_rows,
    latlon_to_unit_vectors,
    unit_vectors_to_latlon,
    random_unit_vectors,
    spherical_distance,
    ccw_angle
)


def test_normalize_unit_length():
    v = np.array([3.0, 4.0, 0.0])
    v_norm = normalize(v)
    assert np.isclose(np.linalg.norm(v_norm), 1.0)
    assert np.allclose(v_norm, [0.6, 0.8, 0.0])


def test_normalize_zero_vector_raises():
    with pytest.raises(DegenerateGeometryError):
        normalize(np.zeros(3))


def test_normalize_non_finite_raises():
    with pytest.raises(DegenerateGeometryError):
        normalize(np.array([np.nan, 1.0, 0.0]))


def test_normalize_respects_tolerance():
    with pytest.raises(DegenerateGeometryError):
        normalize(np.array([1e-9, 0.0, 0.0]), tol=1e-6)


def test_degenerate_geometry_error_is_arithmetic_error():
    with pytest.raises(ArithmeticError):
        normalize(np.zeros(3))


def test_normalize_rows():
    vecs = np.array([[2.0, 0.0, 0.0], [0.0, 0.0, -5.0], [1.0, 1.0, 1.0]])
    out = normalize_rows(vecs)
    assert out.shape == (3, 3)
    assert np.allclose(np.linalg.norm(out, axis=1), 1.0)
    assert np.allclose(out[1], [0.0, 0.0, -1.0])


def test_normalize_rows_reports_zero_row():
    vecs = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 0.0]])
    with pytest.raises(DegenerateGeometryError, match=r"\[1\]"):
        normalize_rows(vecs)


def test_latlon_unit_vector_round_trip():
    latlon = np.array([[0, 0], [90, 0], [0, 90], [-45, 45]])
    vecs = latlon_to_unit_vectors(latlon)
    latlon_roundtrip = unit_vectors_to_latlon(vecs)
    assert np.allclose(latlon, latlon_roundtrip, atol=1e-6)


def test_random_unit_vectors_on_sphere():
    pts = random_unit_vectors(200, seed=0)
    assert pts.shape == (200, 3)
    assert np.allclose(np.linalg.norm(pts, axis=1), 1.0, atol=1e-12)


def test_random_unit_vectors_reproducible():
    a = random_unit_vectors(50, seed=7)
    b = random_unit_vectors(50, seed=7)
    c = random_unit_vectors(50, seed=8)
    assert np.array_equal(a, b)
    assert not np.array_equal(a, c)


def test_spherical_distance_orthogonal():
    u = np.array([1.0, 0.0, 0.0])
    v = np.array([0.0, 1.0, 0.0])
    assert np.isclose(spherical_distance(u, v), np.pi / 2, atol=1e-8)


def test_ccw_angle_quarter_turns():
    x = np.array([1.0, 0.0, 0.0])
    y = np.array([0.0, 1.0, 0.0])
    z = np.array([0.0, 0.0, 1.0])
    assert np.isclose(ccw_angle(x, y, z), np.pi / 2)
    assert np.isclose(ccw_angle(y, x, z), 3 * np.pi / 2)
    # looking from the other side flips the sense of rotation
    assert np.isclose(ccw_angle(x, y, -z), 3 * np.pi / 2)


def test_ccw_angle_range():
    rng = np.random.default_rng(3)
    for _ in range(20):
        a, b, n = rng.normal(size=(3, 3))
        angle = ccw_angle(a, b, n)
        assert 0.0 <= angle < 2 * np.pi
