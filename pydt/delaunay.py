from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from pydt.geometry import Point, Triangle, ensure_ccw_triangle


@dataclass
class Triangulation:
    super_triangle: Triangle
    triangles: set[Triangle] = field(default_factory=set)
    points: list[Point] = field(default_factory=list)
    finalized: bool = False
    debug_plots: list[NDArray[np.floating]] = field(default_factory=list)

    def all_points(self) -> list[Point]:
        """Inserted points, followed by the super-triangle vertices until finalized."""
        if self.finalized:
            return list(self.points)
        return list(self.points) + list(self.super_triangle.vertices)

    def to_arrays(self) -> tuple[NDArray[np.floating], NDArray[np.integer]]:
        """
        Export the triangulation as index arrays.

        :return: (points, triangle_vertices) where points has shape (n, 2) and
            every row of triangle_vertices holds three indices into points, in
            counterclockwise order. Rows are sorted by their vertices.
        """
        all_points = self.all_points()
        index = {p: i for i, p in enumerate(all_points)}

        coords = np.array([[p.x, p.y] for p in all_points], dtype=float).reshape(-1, 2)
        rows = [
            [index[v] for v in ensure_ccw_triangle(t)]
            for t in sorted(self.triangles, key=lambda t: t.key)
        ]
        triangle_vertices = np.array(rows, dtype=int).reshape(-1, 3)
        return coords, triangle_vertices

    def plot(
        self,
        show: bool = False,
        title: str = "Triangulation",
        point_labels: bool = False,
        exclude_super_t: bool = False,
        fontsize: int = 7,
    ) -> None:
        """
        Draw the triangle mesh with matplotlib and keep the frame as an RGB
        array in ``debug_plots``.

        :param exclude_super_t: hide triangles with a super-triangle vertex
        """
        import matplotlib.pyplot as plt

        coords, triangle_vertices = self.to_arrays()
        if exclude_super_t and not self.finalized:
            n_points = len(self.points)
            triangle_vertices = triangle_vertices[np.all(triangle_vertices < n_points, axis=1)]
            coords = coords[:n_points]

        fig, ax = plt.subplots()
        if len(triangle_vertices):
            ax.triplot(coords[:, 0], coords[:, 1], triangle_vertices, "b-", linewidth=1.0, alpha=0.6)
        ax.scatter(coords[:, 0], coords[:, 1], c="k", s=12, zorder=3)

        if point_labels:
            for idx, (x, y) in enumerate(coords):
                ax.annotate(
                    str(idx), (x, y), xytext=(3, 3), textcoords="offset points", fontsize=fontsize
                )

        ax.set_aspect("equal")
        ax.set_title(title)
        if show:
            plt.show()

        fig.canvas.draw()
        frame = np.asarray(fig.canvas.buffer_rgba())[:, :, :3]  # type: ignore[reportAttributeAccessIssue]
        plt.close(fig)
        self.debug_plots.append(frame.copy())
