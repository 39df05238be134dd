"""Example: Delaunay triangulation of random points.

Triangulates a jittered grid and a cloud of uniform random points and plots
both results.
"""

import numpy as np

from pydt.build import build_triangulation


def main():
    """Example: random point clouds."""
    print("\n" + "=" * 70)
    print("RANDOM POINTS EXAMPLE")
    print("=" * 70 + "\n")

    rng = np.random.default_rng(0)

    # Create a jittered 6x6 grid of points
    n = 6
    x = np.linspace(0, 5, n)
    y = np.linspace(0, 5, n)
    xx, yy = np.meshgrid(x, y)
    grid = np.column_stack([xx.ravel(), yy.ravel()])
    grid += rng.uniform(-0.2, 0.2, size=grid.shape)

    print(f"Number of points: {len(grid)} ({n}×{n} jittered grid)")
    tri = build_triangulation(grid)
    print(f"Number of triangles: {len(tri.triangles)}")
    tri.plot(show=True, title="Jittered Grid", point_labels=True, fontsize=8)

    points = rng.random((100, 2))
    print(f"\nNumber of points: {len(points)} (uniform)")
    tri = build_triangulation(points)
    print(f"Number of triangles: {len(tri.triangles)}")
    tri.plot(show=True, title="Uniform Random Points")


if __name__ == "__main__":
    main()
