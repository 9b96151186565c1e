import logging

import numpy as np

from pysphericalvoronoi import SphericalDelaunay, plot_spherical_triangulation

logging.basicConfig(level=logging.INFO)

# Hemispherical test dataset: cluster in northern hemisphere
latlon_hemisphere = np.array([
    [10, 0], [20, 20], [30, -30], [40, 60], [50, -60], [25, 120],
    [15, 150], [35, 170], [5, 90], [45, 10]
])

# Global test dataset: spread around the globe
latlon_global = np.array([
    [-45, -120], [60, -90], [30, 0], [-10, 60], [45, 90], [-60, 150],
    [20, -150], [-30, 170], [0, 180], [75, -45], [-75, 45]
])

tri_hemisphere = SphericalDelaunay.from_latlon(latlon_hemisphere)
tri_global = SphericalDelaunay.from_latlon(latlon_global)
print(tri_hemisphere, tri_global)

plot_spherical_triangulation(tri_hemisphere, title="Hemispherical Triangulation").show()
plot_spherical_triangulation(tri_global, title="Global Triangulation").show()
