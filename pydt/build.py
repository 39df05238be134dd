from collections import Counter
from collections.abc import Iterable, Sequence

import numpy as np
from loguru import logger
from numpy.typing import NDArray
from shewchuk import incircle_test

from pydt.delaunay import Triangulation
from pydt.geometry import (
    DegenerateTriangle,
    InvalidCoordinate,
    Point,
    Segment,
    Triangle,
    ensure_ccw_triangle,
    orient2d,
)
from pydt.utils import MAX_DOUBLINGS, SUPER_TRIANGLE_MARGIN, Vec2d


class DegenerateInput(ValueError): ...


class SuperTriangleError(RuntimeError): ...


class PointOutsideSuperTriangle(SuperTriangleError): ...


PointsLike = Sequence[Point] | Sequence[Vec2d] | NDArray[np.floating]


def as_points(points: PointsLike) -> list[Point]:
    """
    Convert the accepted input forms into a list of Points.

    :param points: Points, (x, y) pairs or an array of shape (n, 2)
    :return: list of Points in input order
    :raises InvalidCoordinate: naming the first point with a non-finite coordinate
    """
    if isinstance(points, np.ndarray):
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"Expected an array of shape (n, 2), got {points.shape}")
        points = points.tolist()

    result = []
    for idx, p in enumerate(points):
        if isinstance(p, Point):
            result.append(p)
            continue
        x, y = p
        try:
            result.append(Point(x, y))
        except InvalidCoordinate as exc:
            raise InvalidCoordinate(f"Input point {idx} is invalid: {exc}") from exc
    return result


def unique_points(points: list[Point]) -> list[Point]:
    """Drop repeated points, keeping the first occurrence and the input order."""
    unique = list(dict.fromkeys(points))
    if len(unique) < len(points):
        logger.debug(
            f"Skipping {len(points) - len(unique)} duplicate point(s), not adding them again"
        )
    return unique


def check_input(points: list[Point]) -> None:
    """
    Make sure the distinct points span a proper triangle.

    :raises DegenerateInput: fewer than 3 points, or all points collinear
    """
    if len(points) < 3:
        raise DegenerateInput(
            f"At least 3 distinct points are required, got {len(points)}"
        )
    # exact predicate, so nearly collinear input is not rejected by rounding
    a, b = points[0], points[1]
    if all(orient2d(a, b, p) == 0 for p in points[2:]):
        raise DegenerateInput(f"All {len(points)} points are collinear")


def initial_super_triangle() -> Triangle:
    """Unit-area triangle around the origin: top, left and right vertices."""
    return Triangle(Point(0.0, 0.5), Point(-1.0, -0.5), Point(1.0, -0.5))


def scale_triangle(triangle: Triangle, factor: float) -> Triangle:
    return Triangle(triangle.a * factor, triangle.b * factor, triangle.c * factor)


def build_super_triangle(
    points: Iterable[Point],
    margin: int = SUPER_TRIANGLE_MARGIN,
    max_doublings: int = MAX_DOUBLINGS,
) -> Triangle:
    """
    Grow the initial super triangle until it contains every point.

    The triangle is doubled until ``Triangle.contains`` holds for all points,
    then doubled ``margin`` more times. Doubling is exact in binary floating
    point, so the shape never drifts.

    :param points: points to enclose
    :param margin: extra doublings once every point is enclosed
    :param max_doublings: bound on the doublings needed to enclose the points
    :return: the super triangle
    :raises SuperTriangleError: if the bound is exceeded or the vertices overflow
    """
    if margin < 0:
        raise ValueError(f"margin must be non-negative, got {margin}")

    points = list(points)
    super_t = initial_super_triangle()
    doublings = 0
    try:
        while not all(super_t.contains(p) for p in points):
            if doublings >= max_doublings:
                raise SuperTriangleError(
                    f"Super triangle does not contain all points after {doublings} doublings"
                )
            super_t = scale_triangle(super_t, 2.0)
            doublings += 1

        for _ in range(margin):
            super_t = scale_triangle(super_t, 2.0)
    except InvalidCoordinate as exc:
        raise SuperTriangleError(
            f"Super triangle vertices overflowed after {doublings} doublings"
        ) from exc

    logger.debug(
        f"Super triangle {super_t.vertices} after {doublings} + {margin} doublings"
    )
    return super_t


def initialize_triangulation(super_triangle: Triangle) -> Triangulation:
    """Triangulation holding only the super triangle."""
    return Triangulation(super_triangle=super_triangle, triangles={super_triangle})


def find_invalidated_triangles(
    triangulation: Triangulation, point: Point
) -> list[Triangle]:
    """
    Triangles whose circumcircle contains the point, boundary included.

    The circle test uses the exact incircle predicate on the counterclockwise
    vertex order, so nearly cocircular points are classified consistently
    across neighbouring triangles.

    :raises DegenerateTriangle: if a triangle has no circumcircle
    """
    invalidated = []
    for t in triangulation.triangles:
        t.circumcircle()
        a, b, c = ensure_ccw_triangle(t)
        # incircle_test returns positive if point is inside, zero if on the circle
        if incircle_test(*point, *a, *b, *c) >= 0:
            invalidated.append(t)
    return invalidated


def cavity_boundary(invalidated: Iterable[Triangle]) -> list[Segment]:
    """
    Edges belonging to exactly one of the invalidated triangles.

    An edge shared by two invalidated triangles lies inside the cavity. Edges
    are compared as canonical segments, so the vertex order in which each
    triangle lists them does not matter.
    """
    counts = Counter(edge for t in invalidated for edge in t.edges())
    return [edge for edge, count in counts.items() if count == 1]


def insert_point(point: Point, triangulation: Triangulation) -> Triangulation:
    """
    Insert a point into the triangulation (Bowyer-Watson step).

    :param point: point to insert, must lie inside the super triangle
    :param triangulation: modified in-place
    :return: the updated triangulation
    :raises DegenerateTriangle: if re-triangulating the cavity yields a
        triangle with collinear vertices
    :raises PointOutsideSuperTriangle: if no circumcircle contains the point
    """
    invalidated = find_invalidated_triangles(triangulation, point)
    if not invalidated:
        raise PointOutsideSuperTriangle(
            f"No triangle circumcircle contains {point}, it lies outside the super triangle"
        )

    boundary = cavity_boundary(invalidated)
    logger.trace(
        f"Point {point}: {len(invalidated)} invalidated triangles, {len(boundary)} boundary edges"
    )

    triangulation.triangles.difference_update(invalidated)

    for edge in boundary:
        p, q = edge.endpoints()
        new_triangle = Triangle(point, p, q)
        try:
            new_triangle.circumcircle()
        except DegenerateTriangle as exc:
            raise DegenerateTriangle(
                f"Inserting {point} against edge ({p}, {q}) gives a degenerate triangle",
                triangle=new_triangle,
            ) from exc
        triangulation.triangles.add(new_triangle)

    triangulation.points.append(point)
    return triangulation


def remove_super_triangle_triangles(triangulation: Triangulation) -> None:
    """
    Modify the Triangulation object in-place by removing triangles
    that share an edge or a vertex with the super triangle.

    :param triangulation: The Triangulation object to modify.
    """
    super_t = triangulation.super_triangle

    def touches_super_triangle(t: Triangle) -> bool:
        # a triangle can hold a synthetic vertex without sharing a super edge
        return t.shares_edge_with(super_t) or any(
            t.has_vertex(v) for v in super_t.vertices
        )

    to_remove = {t for t in triangulation.triangles if touches_super_triangle(t)}
    logger.debug(f"Removing {len(to_remove)} triangles touching the super triangle")

    triangulation.triangles -= to_remove
    triangulation.finalized = True


def build_triangulation(
    points: PointsLike,
    margin: int = SUPER_TRIANGLE_MARGIN,
    max_doublings: int = MAX_DOUBLINGS,
    debug: bool = False,
) -> Triangulation:
    """
    Compute the Delaunay triangulation with the Bowyer-Watson algorithm.

    :param points: Input points to triangulate
    :param margin: extra doublings of the super triangle
    :param max_doublings: bound on super triangle growth
    :param debug: plot the triangulation after each insertion
    :return: finalized Triangulation
    """
    input_points = unique_points(as_points(points))
    check_input(input_points)

    super_t = build_super_triangle(input_points, margin, max_doublings)
    triangulation = initialize_triangulation(super_t)

    for point_idx, point in enumerate(input_points):
        logger.trace(f"Inserting point {point_idx}: {point}")
        insert_point(point, triangulation)

        if debug:
            triangulation.plot(
                show=True, exclude_super_t=True, title=f"After inserting P{point_idx}"
            )

    remove_super_triangle_triangles(triangulation)
    logger.debug(
        f"Triangulated {len(input_points)} points into {len(triangulation.triangles)} triangles"
    )
    return triangulation


def triangulate(
    points: PointsLike,
    margin: int = SUPER_TRIANGLE_MARGIN,
    max_doublings: int = MAX_DOUBLINGS,
) -> frozenset[Triangle]:
    """
    Delaunay triangulation of a planar point set.

    :param points: Points, (x, y) pairs or an array of shape (n, 2)
    :return: set of triangles covering the convex hull of the points
    """
    triangulation = build_triangulation(points, margin=margin, max_doublings=max_doublings)
    return frozenset(triangulation.triangles)
