"""Convex polytopes in vertex and halfspace representation."""

from .configs import DEFAULT_DIST_TOL, PolytopeConfig
from .Geometry import DegenerateConstraintError
from .Polytope import ConvexPolytope, FlatConvexHull, PolytopeState, plot_polytope

__all__ = [
    'DEFAULT_DIST_TOL',
    'PolytopeConfig',
    'DegenerateConstraintError',
    'ConvexPolytope',
    'FlatConvexHull',
    'PolytopeState',
    'plot_polytope',
]
