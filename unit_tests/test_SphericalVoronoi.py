import numpy as np
import pytest
from pysphericalvoronoi.exceptions import (
    ConfigurationError,
    DegenerateGeometryError,
    DegenerateInputError,
    IndexRangeError
)
from pysphericalvoronoi.SphericalDelaunay import next_vertex
from pysphericalvoronoi.SphericalVoronoi import (
    SphericalVoronoi,
    cell_neighbor_indices,
    triangle_circumcenter,
    triangle_circumcenters
)
from pysphericalvoronoi.VoronoiCell import VoronoiCell
from pysphericalvoronoi.sphere_utils import normalize, random_unit_vectors


def make_diagram(n, seed=0, **kwargs):
    return SphericalVoronoi(random_unit_vectors(n, seed=seed), **kwargs)


def make_tetrahedron():
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
        -np.ones(3) / np.sqrt(3.0),
    ])


@pytest.mark.parametrize("a, b, c", [
    ([1, 0, 0], [0, 1, 0], [0, 0, 1]),
    ([0, 0, 1], [0, 1, 0], [1, 0, 0]),
])
def test_triangle_circumcenter_orthonormal(a, b, c):
    a, b, c = (np.array(p, dtype=float) for p in (a, b, c))
    center = normalize(triangle_circumcenter(a, b, c))
    assert np.allclose(center, np.ones(3) / np.sqrt(3.0), atol=1e-12)


def test_triangle_circumcenter_is_equidistant():
    a, b, c = random_unit_vectors(3, seed=5)
    center = normalize(triangle_circumcenter(a, b, c))
    da, db, dc = (np.dot(center, p) for p in (a, b, c))
    assert np.isclose(da, db) and np.isclose(db, dc)
    assert np.dot(center, a + b + c) > 0


def test_triangle_circumcenter_degenerate_is_zero_not_nan():
    a, b = random_unit_vectors(2, seed=1)
    center = triangle_circumcenter(a, a, b)
    assert np.allclose(center, 0.0)
    with pytest.raises(DegenerateGeometryError):
        normalize(center)


def test_vectorized_circumcenters_match_scalar():
    pts = random_unit_vectors(30, seed=2)
    vd = SphericalVoronoi(pts)
    tris = vd.triangulation.triangles
    centers = triangle_circumcenters(vd.sites, tris)
    for t, (i, j, k) in enumerate(tris):
        assert np.allclose(centers[t], triangle_circumcenter(pts[i], pts[j], pts[k]))


def test_cell_neighbor_indices_follow_next_vertex():
    vd = make_diagram(50)
    tris = vd.triangulation.triangles
    neighbors = cell_neighbor_indices(tris, vd.cell_vertices, vd.cell_offsets)
    assert np.array_equal(neighbors, vd.cell_neighbors)
    for s in range(len(vd)):
        start, end = vd.cell_offsets[s], vd.cell_offsets[s + 1]
        for pos in range(start, end):
            assert vd.cell_neighbors[pos] == next_vertex(tris[vd.cell_vertices[pos]], s)


@pytest.mark.parametrize("size", [4, 10, 100, 1000])
def test_diagram_invariants(size):
    vd = make_diagram(size)
    assert len(vd.vertices) == 2 * size - 4
    assert len(vd.sites) == size
    assert vd.num_cells() == size == len(vd)
    assert len(vd.cell_offsets) == size + 1
    assert len(vd.cell_vertices) == len(vd.cell_neighbors) == 3 * (2 * size - 4)
    assert sum(cell.num_vertices for cell in vd) == 3 * (2 * size - 4)


def test_tetrahedron_scenario():
    vd = SphericalVoronoi(make_tetrahedron())
    assert len(vd.triangulation.triangles) == 4
    assert len(vd.vertices) == 4
    for cell in vd:
        assert cell.num_neighbors == 3
        assert set(cell.neighbor_indices.tolist()) == {0, 1, 2, 3} - {cell.site_index}
    # the vertex of the three basis vectors sits opposite the fourth site
    assert np.any(np.all(np.isclose(vd.vertices, np.ones(3) / np.sqrt(3.0)), axis=1))


def test_vertices_on_unit_sphere():
    vd = make_diagram(100)
    assert np.all(np.abs(np.linalg.norm(vd.vertices, axis=1) - 1.0) <= vd.eps)
    assert np.all(np.abs(np.linalg.norm(vd.sites, axis=1) - 1.0) <= vd.eps)


def test_vertices_are_circumcenters():
    vd = make_diagram(100)
    for t, tri in enumerate(vd.triangulation.triangles):
        dots = vd.sites[tri] @ vd.vertices[t]
        assert np.allclose(dots, dots[0], atol=1e-9)


def test_voronoi_vertex_closer_to_own_sites_than_any_other():
    vd = make_diagram(200, seed=3)
    for t, tri in enumerate(vd.triangulation.triangles):
        dots = vd.sites @ vd.vertices[t]
        assert np.max(dots) <= dots[tri[0]] + 1e-9


def test_boundary_reuses_triangulation_arrays():
    vd = make_diagram(20)
    assert vd.cell_vertices is vd.triangulation.incident_triangle_indices
    assert vd.cell_offsets is vd.triangulation.incident_triangle_offsets


def test_cells_turn_one_way():
    vd = make_diagram(100)
    for cell in vd:
        k = cell.num_vertices
        center = cell.site
        for j in range(k):
            c, n = cell.vertex(j), cell.vertex((j + 1) % k)
            assert np.dot(np.cross(c, n), center) < 0
            c, n = cell.neighbor(j).site, cell.neighbor((j + 1) % k).site
            assert np.dot(np.cross(c, n), center) < 0


def test_cell_edges_are_dual_to_neighbor_edges():
    vd = make_diagram(100)
    for cell in vd:
        k = cell.num_vertices
        for j in range(k):
            a, b = cell.vertex(j), cell.vertex((j + 1) % k)
            nb = cell.neighbor(j).site
            # both ends of the shared edge are equidistant from the two sites
            for p in (a, b):
                assert np.isclose(np.dot(p, cell.site), np.dot(p, nb), atol=1e-9)


def test_neighbor_relation_is_symmetric():
    vd = make_diagram(100)
    for cell in vd:
        for nb in cell.neighbors():
            assert cell.site_index in nb.neighbor_indices


def test_deterministic():
    pts = random_unit_vectors(300, seed=11)
    a = SphericalVoronoi(pts)
    b = SphericalVoronoi(pts.copy())
    for key, arr in a.to_dict().items():
        assert arr.tobytes() == b.to_dict()[key].tobytes()


def test_arrays_read_only():
    vd = make_diagram(10)
    for arr in vd.to_dict().values():
        with pytest.raises(ValueError):
            arr[0] = 0


def test_does_not_alias_input():
    pts = random_unit_vectors(10, seed=0)
    vd = SphericalVoronoi(pts)
    pts[:] = 0.0
    assert np.allclose(np.linalg.norm(vd.sites, axis=1), 1.0)


def test_to_dict_round_trip():
    vd = make_diagram(40)
    arrays = vd.to_dict()
    assert set(arrays) == {"sites", "vertices", "cell_vertices", "cell_neighbors", "cell_offsets"}
    rebuilt = SphericalVoronoi(arrays["sites"], eps=vd.eps)
    for key, arr in rebuilt.to_dict().items():
        assert np.array_equal(arr, arrays[key])


def test_three_coplanar_sites_rejected():
    with pytest.raises(DegenerateInputError):
        SphericalVoronoi(np.eye(3))


def test_coplanar_sites_rejected():
    theta = np.linspace(0, 2 * np.pi, 12, endpoint=False)
    pts = np.stack([np.cos(theta), np.zeros(12), np.sin(theta)], axis=1)
    with pytest.raises(DegenerateInputError):
        SphericalVoronoi(pts)


@pytest.mark.parametrize("eps, ok", [(0.01, True), (0, False), (-0.01, False)])
def test_eps_option(eps, ok):
    pts = random_unit_vectors(10, seed=0)
    if ok:
        assert SphericalVoronoi(pts, eps=eps).eps == eps
    else:
        with pytest.raises(ConfigurationError):
            SphericalVoronoi(pts, eps=eps)


def test_cell_lookup():
    vd = make_diagram(10)
    for i in range(vd.num_cells()):
        cell = vd.cell(i)
        assert isinstance(cell, VoronoiCell)
        assert cell == VoronoiCell(vd, i)
        assert vd[i] == cell


@pytest.mark.parametrize("index", [-1, 10, 100])
def test_cell_out_of_range(index):
    vd = make_diagram(10)
    with pytest.raises(IndexRangeError) as excinfo:
        vd.cell(index)
    assert excinfo.value.index == index
    assert excinfo.value.size == 10
    assert "[0, 10)" in str(excinfo.value)
    with pytest.raises(IndexError):
        vd[index]


def test_centroids_match_cells():
    vd = make_diagram(50)
    centroids = vd.centroids()
    assert centroids.shape == (50, 3)
    for cell in vd:
        assert np.allclose(centroids[cell.site_index], cell.centroid, atol=1e-12)


def test_from_latlon_and_site_latlon():
    latlon = np.array([[10, 0], [20, 20], [-30, -30], [40, 60], [-50, -60], [25, 120],
                       [15, 150], [-35, 170], [5, -90], [-45, 10]])
    vd = SphericalVoronoi.from_latlon(latlon)
    assert len(vd) == len(latlon)
    assert np.allclose(vd.site_latlon, latlon, atol=1e-9)


def test_repr():
    vd = make_diagram(10)
    assert repr(vd) == "<SphericalVoronoi(n_cells=10, n_vertices=16, eps=1e-12)>"
