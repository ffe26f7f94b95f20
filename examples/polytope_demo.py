"""Example: build, cut, move and plot convex polytopes.

This script demonstrates:
1. Building a polytope from a point cloud with topology
2. Building a polytope from halfspaces
3. Intersecting two polytopes
4. Applying a rigid transform
5. Plotting the result
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np

from convex_polytope import ConvexPolytope, plot_polytope


def cloud_hull():
    """Hull of a random point cloud."""
    print("=" * 60)
    print("Hull of a Point Cloud")
    print("=" * 60)

    rng = np.random.default_rng(0)
    points = rng.normal(size=(200, 3))
    P = ConvexPolytope.from_points(points, compute_topology=True)

    print(f"  {P}")
    print(f"  Facets: {len(P.facet_vertex_indices)}")
    print(f"  Surface area: {P.area:.4f}")
    print(f"  Volume: {P.volume:.4f}")
    return P


def cut_cube():
    """Unit cube with one corner cut off."""
    print("\n" + "=" * 60)
    print("Halfspace Intersection")
    print("=" * 60)

    I = np.eye(3)
    cube = np.vstack([
        np.column_stack([I, -np.ones(3)]),
        np.column_stack([-I, np.zeros(3)]),
    ])
    corner_cut = ConvexPolytope.from_halfspaces(np.array([[1.0, 1.0, 1.0, -2.5]]))
    print(f"  Corner cut alone: {corner_cut.state.name}")

    P = ConvexPolytope.from_halfspaces(cube).intersection_with(corner_cut, compute_topology=True)
    print(f"  {P}")
    print(f"  Vertices:\n{P.vertices}")
    return P


def move(P: ConvexPolytope):
    """Rotate about the z axis and shift."""
    print("\n" + "=" * 60)
    print("Rigid Transform")
    print("=" * 60)

    theta = np.pi / 4
    R = np.array([
        [np.cos(theta), -np.sin(theta), 0.0],
        [np.sin(theta), np.cos(theta), 0.0],
        [0.0, 0.0, 1.0],
    ])
    P.transform(R, np.array([1.0, 0.0, 0.0]))
    print(f"  Interior point after transform: {P.interior_point}")
    print(f"  Volume unchanged: {P.volume:.4f}")
    return P


if __name__ == "__main__":
    cloud_hull()
    P = move(cut_cube())
    plot_polytope(P, title="Cut cube", save_path="cut_cube.png", show=False)
