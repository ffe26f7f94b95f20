"""Redundancy test for linear inequality constraints.

A halfspace h is redundant with respect to a set S when every point of the
intersection of S already satisfies h. The test maximizes the penetration
r = n_h . x + o_h past h's boundary over S with the same normalize / center /
precondition pipeline as the interior point search:

    variables  z = [x (d), w],  w = 1
    minimize   1/2 (h^T [x; w])^2 - n_h . x     ( = 1/2 r^2 - r + const )
    subject to S [x; w] <= 0

The optimum is r = min(1, r_max) in scaled units, so h is not implied by S
exactly when the returned penetration exceeds the distance tolerance.
"""

from __future__ import annotations
from typing import Optional
import warnings

import numpy as np

from ..configs import DEFAULT_DIST_TOL
from ..Geometry import as_halfspace_array, normalize_halfspaces, translate_halfspaces
from .qp_solver import QPSolver, default_solver, floor_spectrum


def max_penetration(halfspace, candidates, feasible_point,
                    dist_tol: float = DEFAULT_DIST_TOL,
                    solver: Optional[QPSolver] = None) -> Optional[float]:
    """Largest distance past `halfspace`'s boundary reachable inside `candidates`.

    The value is capped at the largest absolute recentred offset, which is all the
    test needs. Returns None if the candidate intersection is empty (the QP diverges).
    """
    h = normalize_halfspaces(np.atleast_2d(np.asarray(halfspace, dtype=float)))
    d = h.shape[1] - 1
    S = normalize_halfspaces(as_halfspace_array(candidates, dim=d))
    c = np.asarray(feasible_point, dtype=float)

    # Center halfspaces around the feasible point and then scale offsets
    h = translate_halfspaces(h, -c)[0]
    S = translate_halfspaces(S, -c)
    max_abs = max(abs(h[d]), np.abs(S[:, d]).max() if S.shape[0] else 0.0)
    scale = 1.0 if max_abs < dist_tol else 1.0 / max_abs
    h[d] *= scale
    S[:, d] *= scale

    # Objective: preconditioned outer product of the tested halfspace
    P = floor_spectrum(np.outer(h, h), dist_tol * dist_tol)
    q = np.zeros(d + 1)
    q[:d] = -h[:d]

    # w = 1
    A = np.zeros((1, d + 1))
    A[0, d] = 1.0
    b = np.array([1.0])

    G = S if S.shape[0] else None
    hs = np.zeros(S.shape[0]) if S.shape[0] else None

    if solver is None:
        solver = default_solver()
    res = solver.solve(P, q, G, hs, A, b)
    if not res.success:
        return None

    x = res.x[:d]
    return float(h[:d] @ x + h[d]) / scale


def is_halfspace_non_redundant(halfspace, candidates, feasible_point,
                               dist_tol: float = DEFAULT_DIST_TOL,
                               solver: Optional[QPSolver] = None) -> bool:
    """Check whether `halfspace` cuts into the intersection of `candidates`.

    Parameters
    ----------
    halfspace : array_like
        Halfspace to test [n, o], shape (d+1,)
    candidates : array_like
        Other halfspaces, shape (m, d+1)
    feasible_point : array_like
        A point inside the intersection of `candidates`, shape (d,)
    dist_tol : float
        Minimum penetration for `halfspace` to count as non-redundant
    solver : QPSolver, optional
        QP solver to use

    Returns
    -------
    bool
        True iff some point of the candidates' intersection lies farther than
        dist_tol beyond the boundary of `halfspace`
    """
    penetration = max_penetration(halfspace, candidates, feasible_point, dist_tol, solver)
    if penetration is None:
        warnings.warn(
            "Redundancy QP diverged; treating the tested halfspace as implied.",
            RuntimeWarning
        )
        return False
    return penetration > dist_tol


def remove_redundant_halfspaces(halfspaces, feasible_point,
                                dist_tol: float = DEFAULT_DIST_TOL,
                                solver: Optional[QPSolver] = None) -> np.ndarray:
    """Indices (in input order) of a non-redundant subset of `halfspaces`.

    Halfspaces are eliminated one at a time, each tested against the ones still
    kept, so duplicated constraints keep exactly one copy.
    """
    H = normalize_halfspaces(halfspaces)
    if solver is None:
        solver = default_solver()

    keep = list(range(H.shape[0]))
    for i in range(H.shape[0]):
        others = [j for j in keep if j != i]
        if not is_halfspace_non_redundant(H[i], H[others], feasible_point, dist_tol, solver):
            keep.remove(i)

    return np.asarray(keep, dtype=int)
