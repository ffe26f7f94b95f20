"""Convex polytopes kept in vertex and halfspace form at the same time.

A ConvexPolytope is built either from a point cloud (its convex hull) or from a
set of halfspaces (their intersection). Whichever form is given, the other one is
derived: hulls through Qhull, vertices of halfspace intersections through a QP
interior point, QP redundancy pruning and polar duality.
"""

from __future__ import annotations
from enum import Enum
from typing import List, Optional
import warnings

import numpy as np

from ..configs import DEFAULT_DIST_TOL, PolytopeConfig
from ..Geometry import (
    HullData,
    as_halfspace_array,
    build_hull,
    empty_slab,
    hull_area_and_volume,
    normalize_halfspaces,
    signed_distances,
)
from ..Solvers import QPSolver, default_solver, find_feasible_point, remove_redundant_halfspaces
from .duality import vertices_from_halfspaces


class PolytopeState(Enum):
    """Which representations a polytope carries."""
    EMPTY = "empty"
    BOUNDED_WITH_TOPOLOGY = "bounded_with_topology"
    BOUNDED_NO_TOPOLOGY = "bounded_no_topology"
    UNBOUNDED = "unbounded"


class ConvexPolytope:
    """A convex polytope in R^d.

    Parameters
    ----------
    data : array_like, optional
        Either points, shape (k, dim), or halfspaces [n, o] meaning
        n . x + o <= 0, shape (m, dim+1). If omitted the polytope is empty.
    dim : int, optional
        Ambient dimension; defaults to the column count of `data` (2 without data)
    compute_topology : bool
        Build facet/vertex incidence and adjacency lists
    simplicial_facets : bool
        Keep triangulated facets instead of merged ones (topology only)
    merge_tol : float
        Qhull merge tolerance
    dist_tol : float
        Distance tolerance of the QP based solvers
    qp_backend : str
        qpsolvers backend used when no solver is injected
    solver : QPSolver, optional
        QP solver to use instead of the qpsolvers backend

    Raises
    ------
    ValueError
        If `data` has neither dim nor dim+1 columns
    DegenerateConstraintError
        If a halfspace has a zero normal
    """

    def __init__(self, data=None, dim: Optional[int] = None,
                 compute_topology: bool = False,
                 simplicial_facets: bool = False,
                 merge_tol: float = 0.0,
                 dist_tol: float = DEFAULT_DIST_TOL,
                 qp_backend: str = "quadprog",
                 solver: Optional[QPSolver] = None):
        self.config = PolytopeConfig(
            compute_topology=compute_topology,
            simplicial_facets=simplicial_facets,
            merge_tol=merge_tol,
            dist_tol=dist_tol,
            qp_backend=qp_backend,
        )
        self._solver = solver

        if data is None:
            self._reset(2 if dim is None else int(dim))
            return

        X = np.asarray(data, dtype=float)
        if X.ndim != 2:
            raise ValueError(f"Polytope data must be a 2-D array, got shape {X.shape}")
        dim = X.shape[1] if dim is None else int(dim)
        if dim < 1:
            raise ValueError(f"Dimension must be at least 1, got {dim}")

        if X.shape[1] == dim:
            self._init_from_points(X, dim)
        elif X.shape[1] == dim + 1:
            self._init_from_halfspaces(X, dim)
        else:
            raise ValueError(
                f"Data with {X.shape[1]} columns is neither points nor halfspaces in dimension {dim}"
            )

    @classmethod
    def from_points(cls, points, **kwargs) -> ConvexPolytope:
        """Convex hull of a point cloud, shape (k, d)."""
        X = np.asarray(points, dtype=float)
        if X.ndim != 2:
            raise ValueError(f"Points must have shape (k, d), got {X.shape}")
        return cls(X, dim=X.shape[1], **kwargs)

    @classmethod
    def from_halfspaces(cls, halfspaces, **kwargs) -> ConvexPolytope:
        """Intersection of halfspaces, shape (m, d+1)."""
        H = as_halfspace_array(halfspaces)
        return cls(H, dim=H.shape[1] - 1, **kwargs)

    @classmethod
    def empty(cls, dim: int = 2, **kwargs) -> ConvexPolytope:
        return cls(None, dim=dim, **kwargs)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _reset(self, dim: int):
        """Empty placeholder state."""
        self._dim = dim
        self._is_empty = True
        self._is_bounded = True
        self._has_topology = False
        self._area = 0.0
        self._volume = 0.0
        self._vertices = np.empty((0, dim))
        self._halfspaces = empty_slab(dim)
        self._interior_point = np.full(dim, np.nan)
        self._faces: List[List[int]] = []
        self._vertex_neighbor_faces: List[List[int]] = []
        self._face_neighbor_faces: List[List[int]] = []
        self._vertex_point_indices = np.empty(0, dtype=int)

    @property
    def solver(self) -> QPSolver:
        if self._solver is None:
            self._solver = default_solver(self.config.qp_backend)
        return self._solver

    def _set_from_hull(self, hull: HullData, with_topology: bool):
        self._is_empty = False
        self._is_bounded = True
        self._vertices = hull.vertices
        self._halfspaces = hull.halfspaces
        self._interior_point = hull.vertices.mean(axis=0)
        self._area = hull.area
        self._volume = hull.volume
        self._vertex_point_indices = hull.vertex_point_indices

        if with_topology:
            self._has_topology = True
            self._faces = hull.faces
            self._vertex_neighbor_faces = hull.vertex_neighbor_faces
            self._face_neighbor_faces = hull.face_neighbor_faces

    def _init_from_points(self, X: np.ndarray, dim: int):
        self._reset(dim)
        cfg = self.config

        simplicial = cfg.simplicial_facets if cfg.compute_topology else False
        hull = build_hull(X, simplicial_facets=simplicial, merge_tol=cfg.merge_tol)
        if hull is None:
            return
        self._set_from_hull(hull, cfg.compute_topology)

    def _init_from_halfspaces(self, H: np.ndarray, dim: int):
        self._reset(dim)
        cfg = self.config

        H = normalize_halfspaces(as_halfspace_array(H, dim=dim))
        self._halfspaces = H

        feasible = find_feasible_point(H, cfg.dist_tol, True, self.solver)
        if not feasible.success or feasible.slack < cfg.dist_tol:
            return
        c = feasible.point

        if cfg.compute_topology:
            keep = remove_redundant_halfspaces(H, c, cfg.dist_tol, self.solver)
            dual = vertices_from_halfspaces(H[keep], c, cfg.dist_tol, cfg.merge_tol, self.solver)
        else:
            dual = vertices_from_halfspaces(H, c, cfg.dist_tol, cfg.merge_tol, self.solver)
        if dual.is_empty:
            return

        if not dual.is_bounded:
            self._is_empty = False
            self._is_bounded = False
            self._vertices = dual.vertices
            self._interior_point = c
            self._area = np.inf
            self._volume = np.inf
            return

        if cfg.compute_topology:
            hull = build_hull(dual.vertices, cfg.simplicial_facets, cfg.merge_tol)
            if hull is None:
                _warn_hull_failure()
                return
            self._set_from_hull(hull, True)
            return

        measures = hull_area_and_volume(dual.vertices, cfg.merge_tol)
        if measures is None:
            _warn_hull_failure()
            return
        self._is_empty = False
        self._vertices = dual.vertices
        self._interior_point = c
        self._area, self._volume = measures

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def is_empty(self) -> bool:
        return self._is_empty

    @property
    def is_bounded(self) -> bool:
        return self._is_bounded

    @property
    def has_topology(self) -> bool:
        return self._has_topology

    @property
    def state(self) -> PolytopeState:
        if self._is_empty:
            return PolytopeState.EMPTY
        if not self._is_bounded:
            return PolytopeState.UNBOUNDED
        if self._has_topology:
            return PolytopeState.BOUNDED_WITH_TOPOLOGY
        return PolytopeState.BOUNDED_NO_TOPOLOGY

    @property
    def area(self) -> float:
        """Boundary measure (perimeter in 2-D, inf if unbounded)."""
        return self._area

    @property
    def volume(self) -> float:
        """Enclosed measure (area in 2-D, inf if unbounded)."""
        return self._volume

    @property
    def vertices(self) -> np.ndarray:
        return self._vertices

    @property
    def num_vertices(self) -> int:
        return self._vertices.shape[0]

    @property
    def halfspaces(self) -> np.ndarray:
        """Unit-normal halfspaces [n, o], shape (m, d+1)."""
        return self._halfspaces

    @property
    def facet_hyperplanes(self) -> np.ndarray:
        return self._halfspaces

    @property
    def num_facets(self) -> int:
        return self._halfspaces.shape[0]

    @property
    def interior_point(self) -> np.ndarray:
        return self._interior_point

    @property
    def facet_vertex_indices(self) -> List[List[int]]:
        return self._faces

    @property
    def vertex_neighbor_facets(self) -> List[List[int]]:
        return self._vertex_neighbor_faces

    @property
    def facet_neighbor_facets(self) -> List[List[int]]:
        return self._face_neighbor_faces

    @property
    def vertex_point_indices(self) -> np.ndarray:
        """Input point index of each vertex (point-built polytopes only)."""
        return self._vertex_point_indices

    def __repr__(self) -> str:
        return (
            f"ConvexPolytope(dim={self._dim}, state={self.state.name}, "
            f"num_vertices={self.num_vertices}, num_facets={self.num_facets}, "
            f"volume={self._volume:.6g})"
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def signed_distances_from_facets(self, points) -> np.ndarray:
        """Signed distance of each point from each facet hyperplane, shape (m, k)."""
        return signed_distances(self._halfspaces, points)

    def interior_points_mask(self, points, offset: float = 0.0) -> np.ndarray:
        """Boolean mask of the points with n . x + o <= -offset for every facet.

        A negative offset also accepts points up to |offset| outside the facets.
        """
        D = self.signed_distances_from_facets(points)
        if self._is_empty:
            return np.zeros(D.shape[1], dtype=bool)
        return np.all(D <= -offset, axis=0)

    def interior_point_indices(self, points, offset: float = 0.0) -> np.ndarray:
        return np.flatnonzero(self.interior_points_mask(points, offset))

    def contains_point(self, point, offset: float = 0.0) -> bool:
        p = np.asarray(point, dtype=float).reshape(1, self._dim)
        return bool(self.interior_points_mask(p, offset)[0])

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def transform(self, rotation, translation=None) -> ConvexPolytope:
        """Apply x -> R x + t in place and return self.

        Parameters
        ----------
        rotation : array_like
            Invertible linear part R, shape (d, d), or a homogeneous matrix
            [[R, t], [0, 1]] of shape (d+1, d+1) when `translation` is None
        translation : array_like, optional
            Translation t, shape (d,)

        Returns
        -------
        ConvexPolytope
            self, with vertices, halfspaces and interior point mapped. The
            topology is kept; area and volume are recomputed unless R is orthogonal.

        Raises
        ------
        ValueError
            If the shapes do not match or R is singular
        """
        if self._is_empty:
            return self

        d = self._dim
        M = np.asarray(rotation, dtype=float)
        if translation is None:
            if M.shape != (d + 1, d + 1):
                raise ValueError(f"Homogeneous transform must have shape {(d + 1, d + 1)}, got {M.shape}")
            R, t = M[:d, :d], M[:d, d]
        else:
            R, t = M, np.asarray(translation, dtype=float)
            if R.shape != (d, d) or t.shape != (d,):
                raise ValueError(f"Expected a ({d}, {d}) matrix and a ({d},) vector, got {R.shape} and {t.shape}")

        det = np.linalg.det(R)
        if not abs(det) > np.finfo(float).eps:
            raise ValueError("Linear part of the transform must be invertible")

        self._vertices = self._vertices @ R.T + t
        self._interior_point = R @ self._interior_point + t

        # Normals map by the inverse transpose
        normals = self._halfspaces[:, :d] @ np.linalg.inv(R)
        offsets = self._halfspaces[:, d] - normals @ t
        norms = np.linalg.norm(normals, axis=1)
        self._halfspaces = np.column_stack([normals, offsets]) / norms[:, None]

        # Reflections reverse the facet windings
        if det < 0.0 and self._has_topology:
            self._faces = [_reverse_winding(face, d) for face in self._faces]

        if self._is_bounded and not np.allclose(R.T @ R, np.eye(d)):
            measures = hull_area_and_volume(self._vertices, self.config.merge_tol)
            if measures is not None:
                self._area, self._volume = measures

        return self

    def intersection_with(self, other: ConvexPolytope,
                          compute_topology: bool = False,
                          simplicial_facets: bool = False,
                          merge_tol: float = 0.0,
                          dist_tol: float = DEFAULT_DIST_TOL) -> ConvexPolytope:
        """Polytope bounded by the halfspaces of both operands."""
        if other.dim != self._dim:
            raise ValueError(f"Dimension mismatch: {self._dim} vs {other.dim}")

        H = np.vstack([self._halfspaces, other.halfspaces])
        return ConvexPolytope(
            H, dim=self._dim,
            compute_topology=compute_topology,
            simplicial_facets=simplicial_facets,
            merge_tol=merge_tol,
            dist_tol=dist_tol,
            qp_backend=self.config.qp_backend,
            solver=self._solver,
        )


def _warn_hull_failure():
    warnings.warn(
        "Hull of the derived vertices could not be built; treating the polytope as empty.",
        RuntimeWarning
    )


def _reverse_winding(face: List[int], dim: int) -> List[int]:
    if dim <= 3:
        return face[::-1]
    if len(face) == dim:
        return [face[1], face[0]] + face[2:]
    # Higher dimensional general facets are listed by index and carry no winding
    return face
