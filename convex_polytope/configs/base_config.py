"""Configuration for polytope construction."""

from dataclasses import dataclass

# Distance below which two hyperplanes, a margin or a penetration count as zero
DEFAULT_DIST_TOL = 1e-8


@dataclass
class PolytopeConfig:
    """Flags and tolerances shared by every polytope construction path."""

    # Topology (facet/vertex adjacency) is only built when requested
    compute_topology: bool = False
    simplicial_facets: bool = False

    # Qhull premerge radius for near-coplanar facets
    merge_tol: float = 0.0

    # Distance tolerance for the QP based solvers and the duality step
    dist_tol: float = DEFAULT_DIST_TOL

    # qpsolvers backend used when no solver is injected
    qp_backend: str = "quadprog"

    def __post_init__(self):
        if not self.dist_tol > 0.0:
            raise ValueError(f"dist_tol must be positive, got {self.dist_tol}")
        if self.merge_tol < 0.0:
            raise ValueError(f"merge_tol must be non-negative, got {self.merge_tol}")
