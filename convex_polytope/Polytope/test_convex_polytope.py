"""Tests for the ConvexPolytope facade."""

import itertools

import numpy as np

from convex_polytope.Geometry import DegenerateConstraintError
from convex_polytope.Polytope import ConvexPolytope, PolytopeState
from convex_polytope.Solvers import default_solver


def unit_square_points() -> np.ndarray:
    return np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.3, 0.6]])


def unit_cube_points() -> np.ndarray:
    return np.array(list(itertools.product([0.0, 1.0], repeat=3)))


def box_halfspaces(lower, upper) -> np.ndarray:
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)
    I = np.eye(lower.shape[0])
    return np.vstack([np.column_stack([I, -upper]), np.column_stack([-I, lower])])


def same_point_set(A, B, tol: float = 1e-6) -> bool:
    A = np.asarray(A, dtype=float)
    B = np.asarray(B, dtype=float)
    if A.shape != B.shape:
        return False
    return all(np.min(np.max(np.abs(B - a), axis=1)) < tol for a in A)


def newell_normal(P: np.ndarray) -> np.ndarray:
    n = np.zeros(3)
    for i in range(len(P)):
        n += np.cross(P[i], P[(i + 1) % len(P)])
    return n


class CountingSolver:
    """QP solver that records how often it is called."""

    def __init__(self):
        self.inner = default_solver()
        self.calls = 0

    def solve(self, P, q, G=None, h=None, A=None, b=None):
        self.calls += 1
        return self.inner.solve(P, q, G, h, A, b)


# ----------------------------------------------------------------------
# Construction
# ----------------------------------------------------------------------

def test_default_is_empty_placeholder():
    print("Testing default construction...")

    P = ConvexPolytope()

    assert P.is_empty
    assert P.is_bounded
    assert P.state == PolytopeState.EMPTY
    assert P.dim == 2
    assert P.area == 0.0 and P.volume == 0.0
    assert np.all(np.isnan(P.interior_point))
    assert P.halfspaces.shape == (2, 3)
    assert P.vertices.shape == (0, 2)
    assert not P.contains_point([0.0, 0.0])
    assert ConvexPolytope.empty(3).dim == 3
    print(f"  ✓ {P}")


def test_square_from_points():
    P = ConvexPolytope(unit_square_points())

    assert P.state == PolytopeState.BOUNDED_NO_TOPOLOGY
    assert P.num_vertices == 4
    assert P.num_facets == 4
    assert np.isclose(P.volume, 1.0)
    assert np.isclose(P.area, 4.0)
    np.testing.assert_allclose(P.interior_point, [0.5, 0.5])
    assert 4 not in P.vertex_point_indices.tolist()
    assert P.facet_vertex_indices == []


def test_point_cloud_membership():
    """Every input point satisfies every facet and every vertex is an input point."""
    rng = np.random.default_rng(5)
    for d in [2, 3, 4]:
        points = rng.uniform(-1.0, 1.0, size=(40, d))
        P = ConvexPolytope(points)

        assert not P.is_empty
        assert P.signed_distances_from_facets(points).max() < 1e-9
        np.testing.assert_allclose(P.vertices, points[P.vertex_point_indices])


def test_cube_topology_from_points():
    """Merged facets of the cube: 6 squares, 3 per vertex, 4 neighbors each."""
    print("\nTesting cube topology...")

    P = ConvexPolytope.from_points(unit_cube_points(), compute_topology=True)

    assert P.state == PolytopeState.BOUNDED_WITH_TOPOLOGY
    assert P.num_vertices == 8
    assert len(P.facet_vertex_indices) == 6
    assert all(len(face) == 4 for face in P.facet_vertex_indices)
    assert all(len(faces) == 3 for faces in P.vertex_neighbor_facets)
    assert all(len(neighbors) == 4 for neighbors in P.facet_neighbor_facets)
    assert np.isclose(P.area, 6.0)
    assert np.isclose(P.volume, 1.0)

    for f, face in enumerate(P.facet_vertex_indices):
        n = newell_normal(P.vertices[face])
        assert n @ P.facet_hyperplanes[f, :3] > 0.0
    print("  ✓ 6 outward-wound facets")


def test_cube_simplicial_topology():
    P = ConvexPolytope.from_points(unit_cube_points(), compute_topology=True, simplicial_facets=True)

    assert len(P.facet_vertex_indices) == 12
    assert all(len(neighbors) == 3 for neighbors in P.facet_neighbor_facets)


def test_merge_tolerance_restores_cube_facets():
    """Corners jittered by 1e-7 merge back into 6 square facets."""
    rng = np.random.default_rng(3)
    points = unit_cube_points() + rng.uniform(-1e-7, 1e-7, size=(8, 3))
    P = ConvexPolytope.from_points(points, compute_topology=True, merge_tol=1e-4)

    assert P.state == PolytopeState.BOUNDED_WITH_TOPOLOGY
    assert P.num_vertices == 8
    assert P.num_facets == 6
    assert all(len(face) == 4 for face in P.facet_vertex_indices)
    assert np.isclose(P.volume, 1.0, atol=1e-5)


def test_too_few_points_is_empty():
    P = ConvexPolytope.from_points(np.array([[0.0, 0.0], [1.0, 1.0]]))

    assert P.is_empty
    assert P.halfspaces.shape == (2, 3)


def test_simplex_from_halfspaces():
    """x >= 0, y >= 0, x + y <= 1 is a bounded triangle."""
    print("\nTesting simplex from halfspaces...")

    H = np.array([[-1.0, 0.0, 0.0], [0.0, -1.0, 0.0], [1.0, 1.0, -1.0]])
    P = ConvexPolytope.from_halfspaces(H)

    assert P.state == PolytopeState.BOUNDED_NO_TOPOLOGY
    assert same_point_set(P.vertices, [[0, 0], [1, 0], [0, 1]])
    assert np.isclose(P.volume, 0.5)
    assert np.isclose(P.area, 2.0 + np.sqrt(2.0))
    assert P.contains_point(P.interior_point)
    print(f"  ✓ {P}")


def test_halfspaces_without_topology_keep_input_order():
    """Normalized input halfspaces are stored as given, redundant ones included."""
    H = np.vstack([box_halfspaces([0, 0], [1, 1]), [[2.0, 0.0, -4.0]]])
    P = ConvexPolytope.from_halfspaces(H)

    assert P.num_facets == 5
    np.testing.assert_allclose(P.halfspaces[4], [1.0, 0.0, -2.0])
    assert P.num_vertices == 4


def test_halfspaces_with_topology_prune_redundant():
    H = np.vstack([box_halfspaces([0, 0, 0], [1, 1, 1]), [[1.0, 0.0, 0.0, -5.0]]])
    P = ConvexPolytope.from_halfspaces(H, compute_topology=True)

    assert P.state == PolytopeState.BOUNDED_WITH_TOPOLOGY
    assert P.num_facets == 6
    assert len(P.facet_vertex_indices) == 6
    assert np.isclose(P.volume, 1.0)


def test_every_vertex_satisfies_every_halfspace():
    rng = np.random.default_rng(3)
    normals = rng.normal(size=(20, 3))
    H = np.column_stack([normals, -np.ones(20)])
    P = ConvexPolytope.from_halfspaces(H, compute_topology=True)

    assert P.is_bounded and not P.is_empty
    assert P.signed_distances_from_facets(P.vertices).max() < 1e-7

    # Every stored halfspace touches the hull
    D = P.signed_distances_from_facets(P.vertices)
    assert np.all(np.abs(D).min(axis=1) < 1e-7)


def test_single_halfspace_is_unbounded():
    print("\nTesting unbounded construction...")

    P = ConvexPolytope.from_halfspaces(np.array([[1.0, 0.0, -1.0]]))

    assert P.state == PolytopeState.UNBOUNDED
    assert not P.is_empty
    assert not P.is_bounded
    assert np.isinf(P.area) and np.isinf(P.volume)
    assert P.contains_point([-100.0, 7.0])
    print(f"  ✓ {P}")


def test_unbounded_corner_cut_vertices():
    H = np.array([[1.0, 0.0, -1.0], [0.0, 1.0, -1.0], [1.0, 1.0, -1.5]])
    P = ConvexPolytope.from_halfspaces(H, compute_topology=True)

    assert P.state == PolytopeState.UNBOUNDED
    assert same_point_set(P.vertices, [[1.0, 0.5], [0.5, 1.0]])
    assert P.facet_vertex_indices == []


def test_infeasible_halfspaces_are_empty():
    H = np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 1.0]])
    P = ConvexPolytope.from_halfspaces(H, compute_topology=True)

    assert P.state == PolytopeState.EMPTY
    assert P.area == 0.0 and P.volume == 0.0
    np.testing.assert_allclose(P.halfspaces, H)
    assert not P.contains_point([0.5, 0.0])


def test_one_dimensional():
    P = ConvexPolytope.from_points(np.array([[0.0], [2.0], [1.0]]))
    assert np.isclose(P.volume, 2.0)
    assert P.num_vertices == 2

    Q = ConvexPolytope.from_halfspaces(np.array([[1.0, -2.0], [-1.0, 0.0]]), compute_topology=True)
    assert same_point_set(Q.vertices, [[0.0], [2.0]])
    assert np.isclose(Q.volume, 2.0)
    assert Q.contains_point([1.5])
    assert not Q.contains_point([2.5])


def test_invalid_input():
    try:
        ConvexPolytope(np.zeros((3, 5)), dim=2)
        assert False, "Should have raised ValueError"
    except ValueError:
        pass

    try:
        ConvexPolytope(np.array([[1.0, 0.0, -1.0], [0.0, 0.0, 1.0]]), dim=2)
        assert False, "Should have raised DegenerateConstraintError"
    except DegenerateConstraintError:
        pass

    try:
        ConvexPolytope(unit_square_points(), dist_tol=0.0)
        assert False, "Should have raised ValueError"
    except ValueError:
        pass


def test_injected_solver_is_used():
    solver = CountingSolver()
    P = ConvexPolytope.from_halfspaces(box_halfspaces([0, 0], [1, 1]), compute_topology=True, solver=solver)

    assert not P.is_empty
    assert solver.calls > 0


def test_round_trip():
    """Points -> halfspaces -> vertices recovers the extreme points."""
    print("\nTesting round trip...")

    rng = np.random.default_rng(7)
    points = rng.uniform(-1.0, 1.0, size=(25, 3))
    P = ConvexPolytope.from_points(points, compute_topology=True)
    Q = ConvexPolytope.from_halfspaces(P.halfspaces, compute_topology=True)

    assert same_point_set(P.vertices, Q.vertices, tol=1e-5)
    assert np.isclose(P.volume, Q.volume)
    print(f"  ✓ {P.num_vertices} vertices recovered")


# ----------------------------------------------------------------------
# Queries
# ----------------------------------------------------------------------

def test_point_queries():
    P = ConvexPolytope(unit_square_points())
    points = np.array([[0.5, 0.5], [2.0, 2.0], [0.1, 0.9], [1.0, 1.0]])

    assert P.contains_point([0.5, 0.5])
    assert not P.contains_point([2.0, 2.0])
    # Boundary points need a small negative offset
    assert P.contains_point([1.0, 1.0], offset=-1e-9)
    # A positive offset requires depth
    assert not P.contains_point([0.95, 0.5], offset=0.1)

    assert P.signed_distances_from_facets(points).shape == (4, 4)
    assert P.interior_points_mask(points).tolist()[:3] == [True, False, True]
    assert P.interior_point_indices(points, offset=-1e-9).tolist() == [0, 2, 3]


# ----------------------------------------------------------------------
# Transform
# ----------------------------------------------------------------------

def test_identity_transform_is_idempotent():
    P = ConvexPolytope.from_points(unit_cube_points(), compute_topology=True)
    vertices = P.vertices.copy()
    halfspaces = P.halfspaces.copy()
    area, volume = P.area, P.volume

    P.transform(np.eye(3), np.zeros(3))

    np.testing.assert_allclose(P.vertices, vertices)
    np.testing.assert_allclose(P.halfspaces, halfspaces)
    assert np.isclose(P.area, area) and np.isclose(P.volume, volume)


def test_rigid_transform():
    print("\nTesting rigid transform...")

    theta = np.pi / 3
    R = np.array([[np.cos(theta), -np.sin(theta)], [np.sin(theta), np.cos(theta)]])
    t = np.array([2.0, -1.0])
    P = ConvexPolytope(unit_square_points())

    P.transform(R, t)

    assert np.isclose(P.volume, 1.0)
    assert np.isclose(P.area, 4.0)
    np.testing.assert_allclose(P.interior_point, R @ [0.5, 0.5] + t)
    assert P.contains_point(R @ [0.2, 0.8] + t)
    assert not P.contains_point(R @ [1.2, 0.5] + t)
    assert P.signed_distances_from_facets(P.vertices).max() < 1e-9
    print(f"  ✓ {P}")


def test_homogeneous_transform():
    P = ConvexPolytope(unit_square_points())
    M = np.array([[1.0, 0.0, 1.0], [0.0, 1.0, 2.0], [0.0, 0.0, 1.0]])

    P.transform(M)

    assert P.contains_point([1.5, 2.5])
    assert not P.contains_point([0.5, 0.5])


def test_scaling_transform_recomputes_measures():
    P = ConvexPolytope(unit_square_points())

    P.transform(np.diag([2.0, 3.0]), np.zeros(2))

    assert np.isclose(P.volume, 6.0)
    assert np.isclose(P.area, 10.0)
    np.testing.assert_allclose(np.linalg.norm(P.halfspaces[:, :2], axis=1), 1.0)
    assert P.contains_point([1.9, 2.9])
    assert not P.contains_point([2.1, 1.0])


def test_reflection_keeps_outward_winding():
    P = ConvexPolytope.from_points(unit_cube_points(), compute_topology=True)

    P.transform(np.diag([-1.0, 1.0, 1.0]), np.zeros(3))

    for f, face in enumerate(P.facet_vertex_indices):
        n = newell_normal(P.vertices[face])
        assert n @ P.facet_hyperplanes[f, :3] > 0.0


def test_singular_transform_raises():
    P = ConvexPolytope(unit_square_points())
    try:
        P.transform(np.array([[1.0, 0.0], [2.0, 0.0]]), np.zeros(2))
        assert False, "Should have raised ValueError"
    except ValueError:
        pass


def test_empty_transform_is_noop():
    P = ConvexPolytope.empty(2)
    assert P.transform(np.eye(2), np.ones(2)) is P
    assert P.is_empty


# ----------------------------------------------------------------------
# Intersection
# ----------------------------------------------------------------------

def test_intersection_with_halfspace():
    """Unit square cut by x >= 0.5: area 0.5, perimeter 3."""
    print("\nTesting intersection...")

    square = ConvexPolytope(unit_square_points())
    right_half = ConvexPolytope.from_halfspaces(np.array([[-1.0, 0.0, 0.5]]))

    P = square.intersection_with(right_half)

    assert not P.is_empty
    assert P.is_bounded
    assert np.isclose(P.volume, 0.5)
    assert np.isclose(P.area, 3.0)
    assert same_point_set(P.vertices, [[0.5, 0.0], [1.0, 0.0], [1.0, 1.0], [0.5, 1.0]])
    print(f"  ✓ {P}")


def test_intersection_with_topology():
    square = ConvexPolytope(unit_square_points())
    right_half = ConvexPolytope.from_halfspaces(np.array([[-1.0, 0.0, 0.5]]))

    P = square.intersection_with(right_half, compute_topology=True)

    assert P.state == PolytopeState.BOUNDED_WITH_TOPOLOGY
    assert P.num_facets == 4
    assert len(P.facet_vertex_indices) == 4


def test_disjoint_intersection_is_empty():
    A = ConvexPolytope.from_halfspaces(box_halfspaces([0, 0], [1, 1]))
    B = ConvexPolytope.from_halfspaces(box_halfspaces([2, 2], [3, 3]))

    assert A.intersection_with(B).is_empty
    assert A.intersection_with(ConvexPolytope.empty(2)).is_empty


def test_intersection_dimension_mismatch():
    try:
        ConvexPolytope(unit_square_points()).intersection_with(ConvexPolytope(unit_cube_points()))
        assert False, "Should have raised ValueError"
    except ValueError:
        pass


if __name__ == "__main__":
    print("=" * 60)
    print("ConvexPolytope Test Suite")
    print("=" * 60)

    test_default_is_empty_placeholder()
    test_square_from_points()
    test_point_cloud_membership()
    test_cube_topology_from_points()
    test_cube_simplicial_topology()
    test_merge_tolerance_restores_cube_facets()
    test_too_few_points_is_empty()
    test_simplex_from_halfspaces()
    test_halfspaces_without_topology_keep_input_order()
    test_halfspaces_with_topology_prune_redundant()
    test_every_vertex_satisfies_every_halfspace()
    test_single_halfspace_is_unbounded()
    test_unbounded_corner_cut_vertices()
    test_infeasible_halfspaces_are_empty()
    test_one_dimensional()
    test_invalid_input()
    test_injected_solver_is_used()
    test_round_trip()
    test_point_queries()
    test_identity_transform_is_idempotent()
    test_rigid_transform()
    test_homogeneous_transform()
    test_scaling_transform_recomputes_measures()
    test_reflection_keeps_outward_winding()
    test_singular_transform_raises()
    test_empty_transform_is_noop()
    test_intersection_with_halfspace()
    test_intersection_with_topology()
    test_disjoint_intersection_is_empty()
    test_intersection_dimension_mismatch()

    print("\n" + "=" * 60)
    print("All tests passed! ✓")
    print("=" * 60)
