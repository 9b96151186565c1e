import logging

import matplotlib.pyplot as plt
import numpy as np

from pysphericalvoronoi import (
    SphericalVoronoi,
    plot_spherical_voronoi,
    random_unit_vectors
)

logging.basicConfig(level=logging.INFO)

diagram = SphericalVoronoi(random_unit_vectors(300, seed=7))
relaxed = diagram.relax(steps=20)


def cell_sizes(vd):
    return np.bincount(np.diff(vd.cell_offsets))


print("cell sizes before:", cell_sizes(diagram))
print("cell sizes after: ", cell_sizes(relaxed))

fig = plt.figure(figsize=(12, 6))
for k, (vd, title) in enumerate([(diagram, "Random sites"), (relaxed, "After 20 Lloyd steps")]):
    ax = fig.add_subplot(1, 2, k + 1, projection="3d")
    plot_spherical_voronoi(vd, title=title, ax=ax)
plt.show()
