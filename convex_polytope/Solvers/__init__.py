"""QP based solvers: interior points and constraint redundancy."""

from .qp_solver import QPResult, QPSolver, QpSolversQPSolver, default_solver, floor_spectrum
from .feasibility import FeasibilityResult, find_feasible_point
from .redundancy import max_penetration, is_halfspace_non_redundant, remove_redundant_halfspaces

__all__ = [
    'QPResult',
    'QPSolver',
    'QpSolversQPSolver',
    'default_solver',
    'floor_spectrum',
    'FeasibilityResult',
    'find_feasible_point',
    'max_penetration',
    'is_halfspace_non_redundant',
    'remove_redundant_halfspaces',
]
