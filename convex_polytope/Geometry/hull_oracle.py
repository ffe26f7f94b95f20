"""Hull Oracle adapter.

Wraps scipy.spatial.ConvexHull (Qhull) and translates its output into dense,
0-based index lists that refer to this package's own vertex and facet order:

- hull vertices are listed in Qhull's vertex order, each carrying the index of the
  input point it came from (vertex_point_indices);
- facets are vertex-index lists wound consistently outward;
- per-vertex and per-facet neighbor lists refer to facet positions, never to
  Qhull's simplex ids.

SciPy always returns a triangulated hull. When general (non-simplicial) facets are
requested, triangles sharing one hyperplane are grouped back into a single facet.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from scipy.spatial import ConvexHull, QhullError

# Hyperplanes closer than this belong to the same facet
_COPLANAR_TOL = 1e-10


@dataclass
class HullData:
    """Result of a hull computation.

    Attributes
    ----------
    vertices : np.ndarray
        Hull vertices, shape (k, d)
    halfspaces : np.ndarray
        One unit-normal outward hyperplane per facet, shape (f, d+1)
    faces : list of list of int
        Vertex indices of each facet, consistently wound
    vertex_neighbor_faces : list of list of int
        Facets incident to each vertex
    face_neighbor_faces : list of list of int
        Facets sharing a ridge with each facet
    vertex_point_indices : np.ndarray
        Index of the input point each vertex came from, shape (k,)
    area : float
        Boundary measure (perimeter in 2-D)
    volume : float
        Enclosed measure (area in 2-D)
    """
    vertices: np.ndarray
    halfspaces: np.ndarray
    faces: List[List[int]]
    vertex_neighbor_faces: List[List[int]]
    face_neighbor_faces: List[List[int]]
    vertex_point_indices: np.ndarray
    area: float
    volume: float

    @property
    def num_vertices(self) -> int:
        return self.vertices.shape[0]

    @property
    def num_facets(self) -> int:
        return self.halfspaces.shape[0]


def _qhull_options(dim: int, merge_tol: float) -> Optional[str]:
    options = []
    if dim > 4:
        options.append("Qx")
    if merge_tol > 0.0:
        options.append(f"C-{merge_tol!r}")
    return " ".join(options) if options else None


def _as_point_array(points) -> np.ndarray:
    X = np.asarray(points, dtype=float)
    if X.ndim != 2 or X.shape[1] < 1:
        raise ValueError(f"Points must have shape (k, d) with d >= 1, got {X.shape}")
    return X


def _unique_in_order(values, exclude: int) -> List[int]:
    seen = set()
    out = []
    for v in values:
        v = int(v)
        if v != exclude and v not in seen:
            seen.add(v)
            out.append(v)
    return out


def _group_coplanar_simplices(equations: np.ndarray, merge_tol: float) -> List[np.ndarray]:
    """Group simplices whose hyperplanes coincide.

    Offsets are compared relative to their magnitude so the grouping does not depend
    on how far the hull sits from the origin.
    """
    tol = max(merge_tol, _COPLANAR_TOL)
    reps = np.empty_like(equations)
    groups: List[List[int]] = []

    for s, eq in enumerate(equations):
        k = len(groups)
        if k:
            diff = np.abs(reps[:k] - eq)
            diff[:, -1] /= max(1.0, abs(eq[-1]))
            hit = np.flatnonzero(np.all(diff <= tol, axis=1))
            if hit.size:
                groups[hit[0]].append(s)
                continue
        reps[k] = eq
        groups.append([s])

    return [np.asarray(g, dtype=int) for g in groups]


def _orient_simplex(points: np.ndarray, simplex: np.ndarray, normal: np.ndarray) -> List[int]:
    """Wind a simplicial facet so that det[n, v1 - v0, ..., v_{d-1} - v0] > 0.

    A negative determinant marks a reverse-oriented facet, which is flipped by
    swapping its first two vertices.
    """
    simplex = [int(i) for i in simplex]
    pts = points[simplex]
    frame = np.vstack([normal, pts[1:] - pts[0]])
    if np.linalg.det(frame) < 0.0:
        simplex[0], simplex[1] = simplex[1], simplex[0]
    return simplex


def _order_facet(points: np.ndarray, vertex_ids: np.ndarray, normal: np.ndarray) -> List[int]:
    """Order the vertices of a general facet.

    2-D: along the edge direction that matches the simplicial winding.
    3-D: counter-clockwise around the outward normal.
    Higher dimensions have no cyclic order; vertices are sorted by index.
    """
    d = normal.shape[0]
    pts = points[vertex_ids]

    if d == 2:
        direction = np.array([-normal[1], normal[0]])
        order = np.argsort(pts @ direction, kind="stable")
    elif d == 3:
        rel = pts - pts.mean(axis=0)
        u = rel[np.argmax(np.linalg.norm(rel, axis=1))]
        u = u - (u @ normal) * normal
        u = u / np.linalg.norm(u)
        w = np.cross(normal, u)
        order = np.argsort(np.arctan2(rel @ w, rel @ u), kind="stable")
    else:
        order = np.argsort(vertex_ids, kind="stable")

    return [int(i) for i in vertex_ids[order]]


def _build_hull_1d(X: np.ndarray) -> Optional[HullData]:
    """Qhull has no 1-D mode: the hull of scalars is the segment [min, max]."""
    x = X[:, 0]
    lo, hi = int(np.argmin(x)), int(np.argmax(x))
    if not x[hi] > x[lo]:
        return None

    return HullData(
        vertices=X[[lo, hi]].copy(),
        halfspaces=np.array([[-1.0, x[lo]], [1.0, -x[hi]]]),
        faces=[[0], [1]],
        vertex_neighbor_faces=[[0], [1]],
        face_neighbor_faces=[[1], [0]],
        vertex_point_indices=np.array([lo, hi], dtype=int),
        area=2.0,
        volume=float(x[hi] - x[lo]),
    )


def build_hull(points, simplicial_facets: bool = True,
               merge_tol: float = 0.0) -> Optional[HullData]:
    """Compute the convex hull of a point set.

    Parameters
    ----------
    points : array_like
        Input points, shape (n, d). Every point is a hull candidate; only
        non-extreme points end up outside the vertex list.
    simplicial_facets : bool
        Keep Qhull's triangulated facets instead of grouping coplanar triangles
    merge_tol : float
        Qhull premerge centrum radius ('C-n'), also used when grouping facets

    Returns
    -------
    Optional[HullData]
        The hull, or None if it cannot be built (fewer than d+1 affinely
        independent points, non-finite input, Qhull failure)
    """
    X = _as_point_array(points)
    n, d = X.shape
    if n < d + 1 or not np.all(np.isfinite(X)):
        return None
    if d == 1:
        return _build_hull_1d(X)

    try:
        hull = ConvexHull(X, qhull_options=_qhull_options(d, merge_tol))
    except (QhullError, ValueError):
        return None

    # Dense lookup tables: input point -> hull vertex, Qhull simplex -> facet
    vertex_ids = np.asarray(hull.vertices, dtype=int)
    point_to_vertex = np.full(n, -1, dtype=int)
    point_to_vertex[vertex_ids] = np.arange(vertex_ids.size)

    if simplicial_facets:
        groups = [np.array([s]) for s in range(hull.simplices.shape[0])]
    else:
        groups = _group_coplanar_simplices(hull.equations, merge_tol)

    simplex_to_facet = np.empty(hull.simplices.shape[0], dtype=int)
    for f, group in enumerate(groups):
        simplex_to_facet[group] = f

    halfspaces = np.array([hull.equations[group[0]] for group in groups])

    faces = []
    for f, group in enumerate(groups):
        normal = halfspaces[f, :d]
        if simplicial_facets:
            face = _orient_simplex(X, hull.simplices[group[0]], normal)
        else:
            face = _order_facet(X, np.unique(hull.simplices[group]), normal)
        faces.append([int(point_to_vertex[i]) for i in face])

    face_neighbor_faces = []
    for f, group in enumerate(groups):
        neighbors = hull.neighbors[group].ravel()
        neighbors = neighbors[neighbors >= 0]
        face_neighbor_faces.append(_unique_in_order(simplex_to_facet[neighbors], exclude=f))

    vertex_neighbor_faces: List[List[int]] = [[] for _ in range(vertex_ids.size)]
    for f, face in enumerate(faces):
        for v in face:
            vertex_neighbor_faces[v].append(f)

    return HullData(
        vertices=X[vertex_ids].copy(),
        halfspaces=halfspaces,
        faces=faces,
        vertex_neighbor_faces=vertex_neighbor_faces,
        face_neighbor_faces=face_neighbor_faces,
        vertex_point_indices=vertex_ids,
        area=float(hull.area),
        volume=float(hull.volume),
    )


def hull_area_and_volume(points, merge_tol: float = 0.0) -> Optional[Tuple[float, float]]:
    """Return (area, volume) of the hull of `points`, or None if there is no hull."""
    X = _as_point_array(points)
    n, d = X.shape
    if n < d + 1 or not np.all(np.isfinite(X)):
        return None

    if d == 1:
        extent = float(X[:, 0].max() - X[:, 0].min())
        return (2.0, extent) if extent > 0.0 else None

    try:
        hull = ConvexHull(X, qhull_options=_qhull_options(d, merge_tol))
    except (QhullError, ValueError):
        return None
    return float(hull.area), float(hull.volume)
