"""Strictly interior points of halfspace intersections.

The interior point is the solution of a small, preconditioned quadratic program
that maximizes a common margin s to all (unit-normal) halfspaces:

    variables  z = [x (d), w, s],  w = 1 (homogeneous coordinate)
    minimize   1/2 |H [x; w]|^2 + 1/2 s^2 - s
    subject to n_i . x + o_i w + s <= 0,  s >= 0

The quadratic term keeps the problem bounded for unbounded intersections; its
spectrum is floored so that the active-set solver sees a positive definite matrix.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..configs import DEFAULT_DIST_TOL
from ..Geometry import normalize_halfspaces, signed_distances
from .qp_solver import QPSolver, default_solver, floor_spectrum


@dataclass
class FeasibilityResult:
    """Outcome of an interior point search.

    Attributes
    ----------
    success : bool
        False if the solver diverged (empty intersection) or there were no halfspaces
    point : np.ndarray
        The feasible point, shape (d,); NaN when the search failed
    slack : float
        Smallest margin -(n . x + o) of `point` over the normalized halfspaces
    """
    success: bool
    point: np.ndarray
    slack: float


def _center_and_scale(H: np.ndarray, tol: float):
    """Translate offsets towards zero and rescale them to O(1).

    Returns (t, scale, Hs) where Hs holds the halfspaces in coordinates
    y = scale * (x + t).
    """
    d = H.shape[1] - 1
    normals, offsets = H[:, :d], H[:, d]

    t = (normals * np.abs(offsets)[:, None]).mean(axis=0)
    centered = offsets - normals @ t
    max_abs = np.abs(centered).max()
    scale = 1.0 if max_abs < tol else 1.0 / max_abs

    return t, scale, np.column_stack([normals, centered * scale])


def _solve_margin_qp(H: np.ndarray, tol: float, force_strictly_interior: bool,
                     solver: QPSolver) -> Optional[np.ndarray]:
    m, d = H.shape[0], H.shape[1] - 1
    t, scale, Hs = _center_and_scale(H, tol)

    # Objective: preconditioned Gram matrix of the halfspaces, plus the margin
    P = np.zeros((d + 2, d + 2))
    P[:d + 1, :d + 1] = Hs.T @ Hs
    P[d + 1, d + 1] = 1.0
    P = floor_spectrum(P, tol * tol)
    q = np.zeros(d + 2)
    q[d + 1] = -1.0

    # w = 1
    A = np.zeros((1, d + 2))
    A[0, d] = 1.0
    b = np.array([1.0])

    # n_i . x + o_i w + s <= 0 and s >= 0
    G = np.zeros((m + 1, d + 2))
    G[:m, :d + 1] = Hs
    G[:m, d + 1] = 1.0
    G[m, d + 1] = -1.0
    h = np.zeros(m + 1)

    res = solver.solve(P, q, G, h, A, b)
    if not res.success:
        return None

    z = res.x
    point = z[:d] / scale - t

    # Zero margin: typically an unbounded intersection whose center is at infinity.
    # Mirror every tight halfspace at a fixed distance and solve once more; the inner
    # call never tightens again.
    if force_strictly_interior and z[d + 1] < tol:
        residuals = Hs @ np.append(z[:d], 1.0)
        tight = np.flatnonzero(np.abs(residuals) < tol)
        if tight.size:
            band = float(max(m - 1, 1))
            mirrored = -Hs[tight]
            mirrored[:, d] -= band
            inner = _solve_margin_qp(np.vstack([Hs, mirrored]), tol, False, solver)
            if inner is None:
                return None
            point = inner / scale - t

    return point


def find_feasible_point(halfspaces, dist_tol: float = DEFAULT_DIST_TOL,
                        force_strictly_interior: bool = True,
                        solver: Optional[QPSolver] = None) -> FeasibilityResult:
    """Find a point deep inside the intersection of halfspaces.

    Parameters
    ----------
    halfspaces : array_like
        Halfspaces [n, o] meaning n . x + o <= 0, shape (m, d+1)
    dist_tol : float
        Distance tolerance; also floors the QP spectrum at dist_tol**2
    force_strictly_interior : bool
        Re-solve once on a tightened system when the optimal margin is below
        dist_tol
    solver : QPSolver, optional
        QP solver to use (default: quadprog through qpsolvers)

    Returns
    -------
    FeasibilityResult
        success is False for an empty halfspace set and when the QP diverges
        (empty intersection)

    Raises
    ------
    DegenerateConstraintError
        If a halfspace has a zero normal
    """
    H = normalize_halfspaces(halfspaces)
    d = H.shape[1] - 1

    if H.shape[0] == 0:
        return FeasibilityResult(success=False, point=np.zeros(d), slack=0.0)

    if solver is None:
        solver = default_solver()

    point = _solve_margin_qp(H, dist_tol, force_strictly_interior, solver)
    if point is None:
        return FeasibilityResult(success=False, point=np.full(d, np.nan), slack=-np.inf)

    slack = float(-np.max(signed_distances(H, point)))
    return FeasibilityResult(success=True, point=point, slack=slack)
