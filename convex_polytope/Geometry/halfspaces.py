"""Halfspace arrays and their unit-normal form.

A halfspace set is stored as an (m, d+1) array whose rows are [n_1, ..., n_d, o],
each row describing the closed halfspace { x : n . x + o <= 0 }. This is the layout
used by scipy.spatial.ConvexHull.equations and HalfspaceIntersection.
"""

from __future__ import annotations
from typing import Optional

import numpy as np


class DegenerateConstraintError(ValueError):
    """Raised when a halfspace has a (numerically) zero normal.

    Attributes
    ----------
    indices : np.ndarray
        Row indices of the offending halfspaces
    """

    def __init__(self, indices):
        self.indices = np.asarray(indices, dtype=int)
        super().__init__(
            f"Halfspaces with zero-norm normals at rows {self.indices.tolist()}"
        )


def as_halfspace_array(halfspaces, dim: Optional[int] = None) -> np.ndarray:
    """Return halfspaces as a float (m, d+1) array, validating its shape."""
    H = np.asarray(halfspaces, dtype=float)
    if H.ndim == 1:
        H = H.reshape(1, -1) if H.size else H.reshape(0, (dim + 1) if dim is not None else 0)
    if H.ndim != 2 or H.shape[1] < 2:
        raise ValueError(f"Halfspaces must have shape (m, d+1) with d >= 1, got {H.shape}")
    if dim is not None and H.shape[1] != dim + 1:
        raise ValueError(f"Halfspaces must have {dim + 1} columns, got {H.shape[1]}")
    return H


def normalize_halfspaces(halfspaces, tol: float = 0.0) -> np.ndarray:
    """Rescale every halfspace to unit-normal form.

    (n, o) becomes (n / |n|, o / |n|), which makes n . x + o the signed Euclidean
    distance of x from the boundary hyperplane.

    Parameters
    ----------
    halfspaces : array_like
        Halfspaces, shape (m, d+1)
    tol : float
        Normals with norm <= tol are rejected

    Returns
    -------
    np.ndarray
        Normalized copy, shape (m, d+1)

    Raises
    ------
    DegenerateConstraintError
        If some normal has norm <= tol
    """
    H = as_halfspace_array(halfspaces)
    norms = np.linalg.norm(H[:, :-1], axis=1)
    bad = np.flatnonzero(~(norms > tol))
    if bad.size:
        raise DegenerateConstraintError(bad)
    return H / norms[:, None]


def translate_halfspaces(halfspaces, translation) -> np.ndarray:
    """Halfspaces of the region moved by `translation`.

    If x satisfies n . x + o <= 0 then y = x + t satisfies n . y + (o - n . t) <= 0.
    Recentring a region at c is translate_halfspaces(H, -c).
    """
    H = as_halfspace_array(halfspaces)
    t = np.asarray(translation, dtype=float)
    out = H.copy()
    out[:, -1] = H[:, -1] - H[:, :-1] @ t
    return out


def signed_distances(halfspaces, points) -> np.ndarray:
    """Evaluate n . x + o for every halfspace and point.

    Parameters
    ----------
    halfspaces : array_like
        Halfspaces, shape (m, d+1)
    points : array_like
        Points, shape (k, d) or a single point of shape (d,)

    Returns
    -------
    np.ndarray
        Matrix of shape (m, k); negative entries are inside the halfspace
    """
    H = as_halfspace_array(halfspaces)
    X = np.atleast_2d(np.asarray(points, dtype=float))
    if X.shape[1] != H.shape[1] - 1:
        raise ValueError(f"Points must have {H.shape[1] - 1} columns, got {X.shape[1]}")
    return H[:, :-1] @ X.T + H[:, -1][:, None]


def empty_slab(dim: int) -> np.ndarray:
    """Placeholder halfspaces {x_0 + 1 <= 0} and {-x_0 + 1 <= 0}; their intersection is empty."""
    H = np.zeros((2, dim + 1))
    H[0, 0] = 1.0
    H[0, dim] = 1.0
    H[1, 0] = -1.0
    H[1, dim] = 1.0
    return H
