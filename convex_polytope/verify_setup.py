#!/usr/bin/env python3
"""Check that convex_polytope and its numerical stack work on this machine.

Run with ``python -m convex_polytope.verify_setup``. Exits non-zero if any
dependency is missing, the quadprog backend is not registered with qpsolvers,
or a unit square cannot be round-tripped through both representations.
"""

import sys
from importlib import import_module

DEPENDENCIES = ['numpy', 'scipy', 'matplotlib', 'qpsolvers', 'quadprog']
SUBPACKAGES = ['configs', 'Geometry', 'Solvers', 'Polytope']


def _report(ok: bool, label: str, detail: str = "") -> bool:
    mark = "✓" if ok else "✗"
    print(f"{mark} {label:28s} {detail}".rstrip())
    return ok


def _section(title: str):
    print()
    print(title)
    print("-" * 50)


def dependencies_ok() -> bool:
    _section("Third-party libraries")
    ok = True
    for name in DEPENDENCIES:
        try:
            mod = import_module(name)
        except ImportError as e:
            ok = _report(False, name, f"not importable: {e}") and ok
            continue
        _report(True, name, getattr(mod, '__version__', ''))
    return ok


def qp_backend_ok() -> bool:
    _section("qpsolvers backends")
    try:
        from qpsolvers import available_solvers
    except ImportError:
        return _report(False, "quadprog", "qpsolvers missing")
    return _report('quadprog' in available_solvers, "quadprog",
                   f"registered: {', '.join(available_solvers) or 'none'}")


def subpackages_ok() -> bool:
    _section("convex_polytope subpackages")
    ok = True
    for sub in SUBPACKAGES:
        try:
            mod = import_module(f"convex_polytope.{sub}")
        except ImportError as e:
            ok = _report(False, sub, str(e)) and ok
            continue
        _report(True, sub, f"{len(getattr(mod, '__all__', []))} public names")
    return ok


def round_trip_ok() -> bool:
    """Unit square from points, then again from its own halfspaces."""
    _section("Unit square round trip")
    try:
        import numpy as np
        from convex_polytope import ConvexPolytope

        square = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
        P = ConvexPolytope.from_points(square, compute_topology=True)
        Q = ConvexPolytope.from_halfspaces(P.halfspaces, compute_topology=True)
    except Exception as e:
        return _report(False, "construction", f"{type(e).__name__}: {e}")

    ok = Q.num_vertices == 4 and abs(Q.volume - 1.0) < 1e-6
    return _report(ok, "vertices -> halfspaces -> vertices",
                   f"{Q.num_vertices} vertices, volume {Q.volume:.6f}")


def main() -> int:
    results = [dependencies_ok(), qp_backend_ok(), subpackages_ok()]
    # The round trip needs everything above
    if all(results):
        results.append(round_trip_ok())

    print()
    print("-" * 50)
    if all(results):
        print("✓ Environment is ready.")
        return 0
    print("✗ Environment is incomplete, see the failures above.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
