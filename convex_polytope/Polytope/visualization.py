"""Plotting of 2-D and 3-D polytopes."""

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from ..Geometry import build_hull
from .convex_polytope import ConvexPolytope


def _polygon_order(vertices: np.ndarray) -> np.ndarray:
    """Counter-clockwise order of the vertices of a convex polygon."""
    rel = vertices - vertices.mean(axis=0)
    return np.argsort(np.arctan2(rel[:, 1], rel[:, 0]))


def _plot_2d(polytope: ConvexPolytope, ax, color: str, alpha: float, show_vertices: bool):
    V = polytope.vertices
    order = _polygon_order(V)
    ax.fill(V[order, 0], V[order, 1], facecolor=color, alpha=alpha, edgecolor='k')
    if show_vertices:
        ax.scatter(V[:, 0], V[:, 1], color='black', s=15, zorder=3)
    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_aspect('equal', adjustable='datalim')


def _plot_3d(polytope: ConvexPolytope, ax, color: str, alpha: float, show_vertices: bool):
    V = polytope.vertices
    if polytope.has_topology:
        faces = polytope.facet_vertex_indices
    else:
        faces = build_hull(V, simplicial_facets=False).faces

    poly3d = Poly3DCollection([V[face] for face in faces], alpha=alpha, facecolor=color, edgecolor='k')
    ax.add_collection3d(poly3d)
    if show_vertices:
        ax.scatter(V[:, 0], V[:, 1], V[:, 2], color='black', s=15)

    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_zlabel('Z')

    # Equal scale on all axes
    max_range = np.ptp(V, axis=0).max() / 2.0
    mid = 0.5 * (V.max(axis=0) + V.min(axis=0))
    ax.set_xlim(mid[0] - max_range, mid[0] + max_range)
    ax.set_ylim(mid[1] - max_range, mid[1] + max_range)
    ax.set_zlim(mid[2] - max_range, mid[2] + max_range)


def plot_polytope(
    polytope: ConvexPolytope,
    ax=None,
    color: str = 'orange',
    alpha: float = 0.3,
    show_vertices: bool = True,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    show: bool = False
):
    """Draw a bounded 2-D or 3-D polytope.

    Parameters
    ----------
    polytope : ConvexPolytope
        Polytope to draw
    ax : matplotlib Axes, optional
        Axes to draw into (a 3-D Axes for 3-D polytopes). A new figure is
        created if omitted.
    color : str
        Face color
    alpha : float
        Face transparency
    show_vertices : bool
        Mark the vertices
    title : str, optional
        Axes title
    save_path : str, optional
        Path to save figure
    show : bool
        Whether to display the figure

    Returns
    -------
    matplotlib Axes or None
        The axes drawn into, or None if there was nothing to draw

    Raises
    ------
    ValueError
        If the polytope is neither 2-D nor 3-D
    """
    if polytope.dim not in (2, 3):
        raise ValueError(f"Only 2-D and 3-D polytopes can be plotted, got dimension {polytope.dim}")

    if polytope.is_empty or not polytope.is_bounded:
        print(f"Nothing to plot: polytope is {polytope.state.name.lower()}")
        return None

    if ax is None:
        fig = plt.figure(figsize=(6, 6))
        if polytope.dim == 3:
            ax = fig.add_subplot(111, projection='3d')
        else:
            ax = fig.add_subplot(111)

    if polytope.dim == 2:
        _plot_2d(polytope, ax, color, alpha, show_vertices)
    else:
        _plot_3d(polytope, ax, color, alpha, show_vertices)

    if title:
        ax.set_title(title)
    ax.grid(alpha=0.3)

    if save_path:
        ax.figure.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Figure saved to {save_path}")

    if show:
        plt.show()

    return ax
