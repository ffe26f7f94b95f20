"""Polytope facade, duality conversion and plotting."""

from .duality import DualHullResult, vertices_from_halfspaces
from .convex_polytope import ConvexPolytope, PolytopeState
from .flat_hull import FlatConvexHull
from .visualization import plot_polytope

__all__ = [
    'DualHullResult',
    'vertices_from_halfspaces',
    'ConvexPolytope',
    'PolytopeState',
    'FlatConvexHull',
    'plot_polytope',
]
