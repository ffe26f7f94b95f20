"""Convex hulls of point clouds lying on a hyperplane."""

from __future__ import annotations

import numpy as np

from .convex_polytope import ConvexPolytope


class FlatConvexHull:
    """Hull of points in R^d that span only a (d-1)-dimensional hyperplane.

    Qhull cannot build a full-dimensional hull of such a cloud, so the points are
    projected onto their principal plane and the hull is computed there.

    Attributes
    ----------
    centroid : np.ndarray
        Mean of the input points, shape (d,)
    basis : np.ndarray
        Orthonormal in-plane directions as columns, shape (d, d-1)
    plane_normal : np.ndarray
        Unit normal of the fitted plane, shape (d,)
    plane_offset : float
        Offset o of the plane plane_normal . x + o = 0
    polytope : ConvexPolytope
        Hull in in-plane coordinates (with topology)
    ambient_vertices : np.ndarray
        Input points that are hull vertices, in polytope vertex order, shape (k, d)
    """

    def __init__(self, points, simplicial_facets: bool = False, merge_tol: float = 0.0):
        X = np.asarray(points, dtype=float)
        if X.ndim != 2 or X.shape[1] < 2:
            raise ValueError(f"Points must have shape (k, d) with d >= 2, got {X.shape}")
        if X.shape[0] == 0:
            raise ValueError("At least one point is required")
        d = X.shape[1]

        self.centroid = X.mean(axis=0)
        centered = X - self.centroid

        # Principal directions by decreasing spread; the last one is normal to the plane
        _, _, Vt = np.linalg.svd(centered, full_matrices=True)
        self.basis = Vt[:d - 1].T
        self.plane_normal = Vt[d - 1]
        self.plane_offset = -float(self.plane_normal @ self.centroid)

        self.polytope = ConvexPolytope.from_points(
            centered @ self.basis,
            compute_topology=True,
            simplicial_facets=simplicial_facets,
            merge_tol=merge_tol,
        )
        self.ambient_vertices = X[self.polytope.vertex_point_indices]

    def to_ambient(self, coords) -> np.ndarray:
        """Map in-plane coordinates, shape (k, d-1), back to R^d."""
        return self.centroid + np.atleast_2d(np.asarray(coords, dtype=float)) @ self.basis.T

    def plane_distances(self, points) -> np.ndarray:
        """Signed distance of points from the fitted plane, shape (k,)."""
        X = np.atleast_2d(np.asarray(points, dtype=float))
        return X @ self.plane_normal + self.plane_offset

    @property
    def is_empty(self) -> bool:
        return self.polytope.is_empty

    @property
    def area(self) -> float:
        """Boundary measure of the flat hull within its plane."""
        return self.polytope.area

    @property
    def volume(self) -> float:
        """Measure of the flat hull within its plane (the polygon area in 3-D)."""
        return self.polytope.volume
