"""Vertices of a halfspace intersection through polar duality.

With the region recentred so that an interior point sits at the origin, every
halfspace n . x + o <= 0 (o < 0) maps to the dual point -n / o. The convex hull of
the dual points is the polar of the region: each of its facets a . y + b <= 0 is
the primal vertex -a / b, and a facet through (or behind) the origin stands for a
vertex at infinity.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import warnings

import numpy as np

from ..configs import DEFAULT_DIST_TOL
from ..Geometry import build_hull, normalize_halfspaces, translate_halfspaces
from ..Solvers import QPSolver, find_feasible_point

# Relative tolerances for dual facets through the origin and for the dual rank
_INFINITE_OFFSET_RATIO = 1e-12
_RANK_TOL = 1e-10


@dataclass
class DualHullResult:
    """Outcome of a halfspace-to-vertex conversion.

    Attributes
    ----------
    vertices : np.ndarray
        Finite vertices, shape (k, d). For an unbounded region only the
        vertices that could be recovered are listed.
    halfspaces : np.ndarray
        The normalized input halfspaces, shape (m, d+1)
    interior_point : np.ndarray
        Point the duality was centred at, shape (d,); NaN for an empty region
    is_bounded : bool
    is_empty : bool
    """
    vertices: np.ndarray
    halfspaces: np.ndarray
    interior_point: np.ndarray
    is_bounded: bool
    is_empty: bool


def _affine_rank(points: np.ndarray) -> int:
    """Rank of the linear span of `points` (SVD, relative threshold)."""
    if points.shape[0] == 0:
        return 0
    S = np.linalg.svd(points, compute_uv=False)
    if not S[0] > 0.0:
        return 0
    return int(np.sum(S > _RANK_TOL * S[0]))


def _unique_rows(X: np.ndarray, tol: float) -> np.ndarray:
    """Drop rows within `tol` (max-norm) of an earlier row."""
    kept = []
    for x in X:
        if kept and np.min(np.max(np.abs(np.asarray(kept) - x), axis=1)) <= tol:
            continue
        kept.append(x)
    return np.asarray(kept, dtype=float).reshape(-1, X.shape[1])


def vertices_from_halfspaces(halfspaces, interior_point=None,
                             dist_tol: float = DEFAULT_DIST_TOL,
                             merge_tol: float = 0.0,
                             solver: Optional[QPSolver] = None) -> DualHullResult:
    """Compute the vertices of the intersection of halfspaces.

    Parameters
    ----------
    halfspaces : array_like
        Halfspaces [n, o] meaning n . x + o <= 0, shape (m, d+1)
    interior_point : array_like, optional
        A strictly interior point. If omitted, one is searched for with
        find_feasible_point.
    dist_tol : float
        Distance tolerance for feasibility and for merging duplicate vertices
    merge_tol : float
        Qhull merge tolerance for the dual hull
    solver : QPSolver, optional
        QP solver used by the interior point search

    Returns
    -------
    DualHullResult
    """
    H = normalize_halfspaces(halfspaces)
    d = H.shape[1] - 1
    no_vertices = np.empty((0, d))

    if interior_point is None:
        feasible = find_feasible_point(H, dist_tol, True, solver)
        if not feasible.success or feasible.slack < dist_tol:
            return DualHullResult(no_vertices, H, np.full(d, np.nan), True, True)
        c = feasible.point
    else:
        c = np.asarray(interior_point, dtype=float).reshape(d)

    R = translate_halfspaces(H, -c)
    finite = R[:, d] < 0.0
    is_bounded = bool(np.all(finite))
    dual = -R[finite, :d] / R[finite, d][:, None]

    # A bounded region needs a full-dimensional polar
    if dual.shape[0] < d + 1 or _affine_rank(dual) < d:
        return DualHullResult(no_vertices, H, c, False, False)

    hull = build_hull(dual, simplicial_facets=False, merge_tol=merge_tol)
    if hull is None:
        warnings.warn(
            "Dual hull construction failed; treating the halfspace intersection as empty.",
            RuntimeWarning
        )
        return DualHullResult(no_vertices, H, np.full(d, np.nan), True, True)

    normals, offsets = hull.halfspaces[:, :d], hull.halfspaces[:, d]
    cutoff = -_INFINITE_OFFSET_RATIO * max(1.0, float(np.abs(dual).max()))
    at_infinity = ~(offsets < cutoff)
    if np.any(at_infinity):
        is_bounded = False

    vertices = -normals[~at_infinity] / offsets[~at_infinity][:, None] + c
    vertices = _unique_rows(vertices, max(merge_tol, dist_tol))

    return DualHullResult(vertices, H, c, is_bounded, False)
