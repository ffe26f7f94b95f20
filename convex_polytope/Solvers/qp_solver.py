"""Quadratic program solver capability."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np
import qpsolvers
from qpsolvers.exceptions import QPError

# Smallest eigenvalue kept by floor_spectrum, relative to the largest one
_MIN_RELATIVE_EIGENVALUE = 1e-12


@dataclass
class QPResult:
    """QP solver result."""
    status: str
    obj: Optional[float]
    x: Optional[np.ndarray]

    @property
    def success(self) -> bool:
        return self.status == "optimal"


class QPSolver(Protocol):
    """Protocol for QP solvers.

    Solves  min 1/2 z^T P z + q^T z  s.t.  G z <= h,  A z = b.
    """
    def solve(
        self,
        P: np.ndarray,
        q: np.ndarray,
        G: Optional[np.ndarray] = None,
        h: Optional[np.ndarray] = None,
        A: Optional[np.ndarray] = None,
        b: Optional[np.ndarray] = None,
    ) -> QPResult:
        ...


class QpSolversQPSolver:
    """QP solver using qpsolvers.solve_qp.

    The default backend, quadprog, is the Goldfarb-Idnani dual active-set method and
    needs a strictly positive definite P. A failed, infeasible or non-finite solve is
    reported as status "divergent".
    """

    def __init__(self, backend: str = "quadprog"):
        if backend not in qpsolvers.available_solvers:
            raise ValueError(
                f"QP backend '{backend}' is not available. "
                f"Installed backends: {qpsolvers.available_solvers}"
            )
        self.backend = backend

    def solve(self, P, q, G=None, h=None, A=None, b=None) -> QPResult:
        P = np.array(P, dtype=float)
        q = np.array(q, dtype=float)

        try:
            x = qpsolvers.solve_qp(
                P, q,
                G=None if G is None else np.array(G, dtype=float),
                h=None if h is None else np.array(h, dtype=float),
                A=None if A is None else np.array(A, dtype=float),
                b=None if b is None else np.array(b, dtype=float),
                solver=self.backend,
            )
        except (QPError, ValueError):
            return QPResult(status="divergent", obj=None, x=None)

        if x is None or not np.all(np.isfinite(x)):
            return QPResult(status="divergent", obj=None, x=None)

        obj = float(0.5 * x @ P @ x + q @ x)
        if not np.isfinite(obj):
            return QPResult(status="divergent", obj=None, x=None)
        return QPResult(status="optimal", obj=obj, x=np.asarray(x, dtype=float))


def default_solver(backend: str = "quadprog") -> QPSolver:
    """Return default QP solver."""
    return QpSolversQPSolver(backend)


def floor_spectrum(P: np.ndarray, floor: float) -> np.ndarray:
    """Raise the singular values of a symmetric PSD matrix to at least `floor`.

    Gram matrices of near-parallel constraints are close to singular; flooring
    their spectrum makes them strictly positive definite for the solver. The
    largest singular value also bounds the floor from below so that it stays
    representable next to it in double precision.
    """
    U, S, _ = np.linalg.svd(P)
    floor = max(floor, _MIN_RELATIVE_EIGENVALUE * (S[0] if S.size else 0.0))
    S = np.maximum(S, floor)
    G = (U * S) @ U.T
    return 0.5 * (G + G.T)

