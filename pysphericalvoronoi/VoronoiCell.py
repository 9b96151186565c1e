from typing import TYPE_CHECKING, Iterator

import numpy as np

from pysphericalvoronoi.exceptions import DegenerateGeometryError, IndexRangeError
from pysphericalvoronoi.sphere_utils import normalize

if TYPE_CHECKING:
    from pysphericalvoronoi.SphericalVoronoi import SphericalVoronoi


class VoronoiCell:
    """
    Read-only view of one cell of a :class:`SphericalVoronoi` diagram.

    A cell holds nothing but its site index and a reference to the diagram;
    every accessor reads straight from the diagram's CSR arrays. Cells are
    obtained with ``diagram.cell(i)`` rather than built directly.

    Boundary vertices and neighbors are both listed counter-clockwise when
    looking out from the centre of the sphere (clockwise seen from outside),
    and are index-aligned: the edge between
    ``vertex(j)`` and ``vertex(j + 1)`` is shared with ``neighbor(j)``.
    """

    __slots__ = ("_diagram", "_index")

    def __init__(self, diagram: "SphericalVoronoi", index: int):
        self._diagram = diagram
        self._index = int(index)

    @property
    def diagram(self) -> "SphericalVoronoi":
        return self._diagram

    @property
    def site_index(self) -> int:
        """Index of this cell's site in ``diagram.sites``."""
        return self._index

    @property
    def site(self) -> np.ndarray:
        """The generating site as a unit vector."""
        return self._diagram.sites[self._index]

    def _bounds(self):
        off = self._diagram.cell_offsets
        return off[self._index], off[self._index + 1]

    @property
    def num_vertices(self) -> int:
        """Number of boundary vertices; always equal to ``num_neighbors``."""
        start, end = self._bounds()
        return int(end - start)

    @property
    def num_neighbors(self) -> int:
        """Number of neighboring cells; always equal to ``num_vertices``."""
        return self.num_vertices

    @property
    def vertex_indices(self) -> np.ndarray:
        """
        Indices into ``diagram.vertices`` of the cell boundary, in fan order.

        Returns
        -------
        np.ndarray
            A read-only view into ``diagram.cell_vertices``; no copy is made.
        """
        start, end = self._bounds()
        return self._diagram.cell_vertices[start:end]

    @property
    def vertices(self) -> np.ndarray:
        """(k, 3) array of the boundary vertex coordinates, in fan order."""
        return self._diagram.vertices[self.vertex_indices]

    def vertex(self, i: int) -> np.ndarray:
        """
        Coordinates of the ``i``-th boundary vertex.

        Raises
        ------
        IndexRangeError
            If ``i`` is outside ``[0, num_vertices)``.
        """
        start, end = self._bounds()
        if not 0 <= i < end - start:
            raise IndexRangeError("vertex", i, int(end - start))
        return self._diagram.vertices[self._diagram.cell_vertices[start + i]]

    @property
    def neighbor_indices(self) -> np.ndarray:
        """
        Site indices of the neighboring cells, in fan order.

        Returns
        -------
        np.ndarray
            A read-only view into ``diagram.cell_neighbors``; no copy is made.
        """
        start, end = self._bounds()
        return self._diagram.cell_neighbors[start:end]

    def neighbor(self, i: int) -> "VoronoiCell":
        """
        The ``i``-th neighboring cell.

        Raises
        ------
        IndexRangeError
            If ``i`` is outside ``[0, num_neighbors)``.
        """
        start, end = self._bounds()
        if not 0 <= i < end - start:
            raise IndexRangeError("neighbor", i, int(end - start))
        return VoronoiCell(self._diagram, self._diagram.cell_neighbors[start + i])

    def neighbors(self) -> Iterator["VoronoiCell"]:
        for idx in self.neighbor_indices:
            yield VoronoiCell(self._diagram, idx)

    @property
    def centroid(self) -> np.ndarray:
        """
        Mean of the boundary vertices projected back onto the sphere.

        Raises
        ------
        DegenerateGeometryError
            If the cell has no vertices or its vertices average to the origin.
        """
        if self.num_vertices == 0:
            raise DegenerateGeometryError(f"cell {self._index} has no vertices")
        return normalize(np.mean(self.vertices, axis=0))

    def __len__(self) -> int:
        return self.num_vertices

    def __eq__(self, other):
        if not isinstance(other, VoronoiCell):
            return NotImplemented
        return self._diagram is other._diagram and self._index == other._index

    def __hash__(self):
        return hash((id(self._diagram), self._index))

    def __repr__(self):
        return f"<VoronoiCell(site_index={self._index}, n_vertices={self.num_vertices})>"
