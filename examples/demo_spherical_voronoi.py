import logging

import matplotlib.pyplot as plt

from pysphericalvoronoi import (
    SphericalVoronoi,
    plot_spherical_voronoi,
    random_unit_vectors
)

logging.basicConfig(level=logging.INFO)

sites = random_unit_vectors(200, seed=42)
diagram = SphericalVoronoi(sites)
print(diagram)

cell = diagram.cell(0)
print(cell, "neighbors:", cell.neighbor_indices.tolist())
print("centroid:", cell.centroid)

# interactive plotly view
plot_spherical_voronoi(diagram, title="Spherical Voronoi (plotly)").show()

# static matplotlib view
fig = plt.figure(figsize=(7, 7))
ax = fig.add_subplot(111, projection="3d")
plot_spherical_voronoi(diagram, title="Spherical Voronoi (matplotlib)", ax=ax)
plt.show()
