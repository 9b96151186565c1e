from typing import Any, Iterable, Optional, Tuple

import numpy as np
import plotly.graph_objects as go
from matplotlib.axes import Axes
from mpl_toolkits.mplot3d import Axes3D  # noqa

from pysphericalvoronoi.SphericalDelaunay import SphericalDelaunay
from pysphericalvoronoi.SphericalVoronoi import SphericalVoronoi


def interpolate_great_arc(A: np.ndarray, B: np.ndarray, num_points: int = 100) -> np.ndarray:
    """
    Compute evenly spaced points along the great arc connecting two points on the unit sphere.

    Parameters
    ----------
    A : np.ndarray
        A 3D unit vector representing the starting point.
    B : np.ndarray
        A 3D unit vector representing the ending point.
    num_points : int, optional
        Number of interpolation points along the arc, by default 100.

    Returns
    -------
    np.ndarray
        Array of shape (num_points, 3) containing interpolated points on the unit sphere.
    """

    A = A / np.linalg.norm(A)
    B = B / np.linalg.norm(B)
    theta = np.arccos(np.clip(np.dot(A, B), -1.0, 1.0))

    if theta < 1e-6:
        return np.repeat(A[None, :], num_points, axis=0)

    t_vals = np.linspace(0, 1, num_points)
    return (np.sin((1 - t_vals) * theta)[:, None] * A +
            np.sin(t_vals * theta)[:, None] * B) / np.sin(theta)


def _sphere_mesh() -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    u, v = np.mgrid[0:2*np.pi:60j, 0:np.pi:30j]
    return np.cos(u) * np.sin(v), np.sin(u) * np.sin(v), np.cos(v)


def _triangle_edges(triangulation: SphericalDelaunay) -> Iterable[Tuple[np.ndarray, np.ndarray]]:
    # every undirected edge once: CCW triangles traverse each edge i -> j exactly once
    pts = triangulation.points_xyz
    for tri in triangulation.triangles:
        for i, j in ((tri[0], tri[1]), (tri[1], tri[2]), (tri[2], tri[0])):
            if i < j:
                yield pts[i], pts[j]


def _voronoi_edges(diagram: SphericalVoronoi) -> Iterable[Tuple[np.ndarray, np.ndarray]]:
    # the edge leaving vertex j of cell s is shared with neighbor j; draw it from the lower site
    verts = diagram.vertices
    for cell in diagram:
        idx = cell.vertex_indices
        k = len(idx)
        for j, nb in enumerate(cell.neighbor_indices):
            if cell.site_index < nb:
                yield verts[idx[j]], verts[idx[(j + 1) % k]]


def _draw_matplotlib(
    ax: Axes,
    title: str,
    edges: Iterable[Tuple[np.ndarray, np.ndarray]],
    points: np.ndarray,
    marker_size: float,
    marker_color: Any,
    line_width: float,
    line_color: Any,
    line_style: str
) -> Axes:
    ax.set_title(title)
    ax.set_box_aspect([1, 1, 1])
    ax.grid(False)

    xs, ys, zs = _sphere_mesh()
    ax.plot_surface(xs, ys, zs, color="lightgrey", alpha=0.15, linewidth=0)

    for A, B in edges:
        arc_pts = interpolate_great_arc(A, B)
        ax.plot(arc_pts[:, 0], arc_pts[:, 1], arc_pts[:, 2],
                color=line_color, linewidth=line_width, linestyle=line_style)

    ax.scatter(points[:, 0], points[:, 1], points[:, 2], color=marker_color, s=marker_size**2)
    return ax


def _draw_plotly(
    fig: Optional[go.Figure],
    title: str,
    edges: Iterable[Tuple[np.ndarray, np.ndarray]],
    points: np.ndarray,
    marker_size: float,
    marker_color: Any,
    marker_symbol: Optional[str],
    line_width: float,
    line_color: Any
) -> go.Figure:
    """
    Render arcs and points into a Plotly figure.

    All arcs go into a single trace, separated by ``None`` gaps, so large
    diagrams stay responsive.

    Parameters
    ----------
    fig : plotly.graph_objects.Figure or None
        Existing figure to modify, or None to create a new one with a sphere surface.
    title : str
        Title for the plot.
    edges : Iterable[Tuple[np.ndarray, np.ndarray]]
        Arc end points as pairs of unit vectors.
    points : np.ndarray
        (N, 3) points to mark.
    marker_size, marker_color, marker_symbol
        Marker styling.
    line_width, line_color
        Arc styling.

    Returns
    -------
    plotly.graph_objects.Figure
        The updated or newly created Plotly figure.
    """

    if fig is None:
        fig = go.Figure()
        xs, ys, zs = _sphere_mesh()
        fig.add_trace(go.Surface(
            x=xs, y=ys, z=zs,
            opacity=0.15,
            showscale=False,
            colorscale='Greys',
            name='Sphere'
        ))

    segments = []
    for A, B in edges:
        segments.append(interpolate_great_arc(A, B, num_points=30))
        segments.append(np.full((1, 3), np.nan))
    if segments:
        arcs = np.vstack(segments)
        fig.add_trace(go.Scatter3d(
            x=arcs[:, 0], y=arcs[:, 1], z=arcs[:, 2],
            mode='lines',
            line=dict(color=line_color, width=line_width),
            connectgaps=False,
            showlegend=False
        ))

    fig.add_trace(go.Scatter3d(
        x=points[:, 0], y=points[:, 1], z=points[:, 2],
        mode='markers',
        marker=dict(size=marker_size, color=marker_color, symbol=marker_symbol),
        name='Sites'
    ))

    fig.update_layout(
        title=title,
        scene=dict(xaxis=dict(showgrid=False),
                   yaxis=dict(showgrid=False),
                   zaxis=dict(showgrid=False),
                   aspectmode='data'),
        margin=dict(l=0, r=0, b=0, t=30)
    )
    return fig


def plot_spherical_triangulation(
    triangulation: SphericalDelaunay,
    title: str = "Spherical Triangulation",
    fig: Optional[go.Figure] = None,
    ax: Optional[Axes] = None,
    marker_size: float = 5,
    marker_color: Any = "black",
    marker_symbol: Optional[str] = "circle",
    line_width: float = 1.5,
    line_color: Any = "blue",
    line_style: str = "-"
):
    """
    Visualize a spherical Delaunay triangulation using either Matplotlib or Plotly.

    Parameters
    ----------
    triangulation : SphericalDelaunay
        The triangulation to draw.
    title : str, optional
        Title of the plot. Default is "Spherical Triangulation".
    fig : plotly.graph_objects.Figure, optional
        A Plotly figure to add to. If None, a new figure is created.
    ax : matplotlib.axes.Axes, optional
        A Matplotlib 3D axis object to plot on. If provided, Matplotlib is used.
    marker_size : float, optional
        Size of the point markers. Default is 5.
    marker_color : Any, optional
        Color of the point markers. Default is "black".
    marker_symbol : str, optional
        Marker style for Plotly (e.g., "circle", "square"). Ignored in Matplotlib.
    line_width : float, optional
        Width of triangle edge lines. Default is 1.5.
    line_color : Any, optional
        Color of triangle edges. Default is "blue".
    line_style : str, optional
        Line style for Matplotlib (e.g., "-", "--"). Ignored in Plotly.

    Returns
    -------
    plotly.graph_objects.Figure or matplotlib.axes.Axes
        The figure or axis object used for plotting.
    """

    edges = _triangle_edges(triangulation)
    if ax is not None:
        return _draw_matplotlib(ax, title, edges, triangulation.points_xyz,
                                marker_size, marker_color, line_width, line_color, line_style)
    return _draw_plotly(fig, title, edges, triangulation.points_xyz,
                        marker_size, marker_color, marker_symbol, line_width, line_color)


def plot_spherical_voronoi(
    diagram: SphericalVoronoi,
    title: str = "Spherical Voronoi Diagram",
    fig: Optional[go.Figure] = None,
    ax: Optional[Axes] = None,
    marker_size: float = 3,
    marker_color: Any = "red",
    marker_symbol: Optional[str] = "circle",
    line_width: float = 1.5,
    line_color: Any = "dimgray",
    line_style: str = "-"
):
    """
    Visualize the cell boundaries and sites of a spherical Voronoi diagram.

    Each shared cell edge is drawn once. Styling parameters behave as in
    :func:`plot_spherical_triangulation`; markers are placed on the sites.

    Parameters
    ----------
    diagram : SphericalVoronoi
        The diagram to draw.
    fig : plotly.graph_objects.Figure, optional
        A Plotly figure to add to. If None, a new figure is created.
    ax : matplotlib.axes.Axes, optional
        A Matplotlib 3D axis object to plot on. If provided, Matplotlib is used.

    Returns
    -------
    plotly.graph_objects.Figure or matplotlib.axes.Axes
        The figure or axis object used for plotting.
    """

    edges = _voronoi_edges(diagram)
    if ax is not None:
        return _draw_matplotlib(ax, title, edges, diagram.sites,
                                marker_size, marker_color, line_width, line_color, line_style)
    return _draw_plotly(fig, title, edges, diagram.sites,
                        marker_size, marker_color, marker_symbol, line_width, line_color)
