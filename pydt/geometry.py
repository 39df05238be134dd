import math
from dataclasses import dataclass
from functools import cached_property
from numbers import Real

import numpy as np
from numpy.typing import NDArray
from shewchuk import orientation


class InvalidCoordinate(ValueError): ...


class DegenerateSegment(ValueError): ...


class DegenerateTriangle(ValueError):
    """Raised when a triangle has collinear or coincident vertices."""

    def __init__(self, message: str, triangle: "Triangle | None" = None) -> None:
        super().__init__(message)
        self.triangle = triangle


@dataclass(frozen=True, order=True)
class Point:
    """
    A point in the 2-dimensional XY plane.

    Both coordinates are finite floats, checked at construction and after every
    arithmetic operation. Points are ordered lexicographically by (x, y).
    Equality and hashing are exact on the float values.
    """

    x: float
    y: float

    def __post_init__(self) -> None:
        x, y = float(self.x), float(self.y)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidCoordinate(
                f"Point coordinates must be finite, got ({self.x}, {self.y})"
            )
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    def __iter__(self):
        yield self.x
        yield self.y

    def __add__(self, other: "Point") -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Point":
        if not isinstance(factor, Real):
            return NotImplemented
        if not math.isfinite(factor):
            raise InvalidCoordinate(f"Cannot scale {self} by non-finite {factor}")
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point") -> float:
        """z-component of the cross product of the two position vectors"""
        return self.x * other.y - self.y * other.x

    def distance(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_array(self) -> NDArray[np.floating]:
        return np.array([self.x, self.y])


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return a.distance(b)


def orient2d(pa: Point, pb: Point, pc: Point) -> int:
    """
    Shewchuk's exact 2D orientation predicate.
    Returns 1 if points are in counterclockwise order
    Returns -1 if points are in clockwise order
    Returns 0 if points are collinear
    """
    return orientation(pa.x, pa.y, pb.x, pb.y, pc.x, pc.y)


@dataclass(frozen=True)
class Segment:
    """
    Undirected edge between two distinct points.

    The endpoints are stored in canonical order (smaller point first), so the
    same edge read from two triangles in opposite directions compares equal.
    """

    start: Point
    end: Point

    def __post_init__(self) -> None:
        if self.start == self.end:
            raise DegenerateSegment(
                f"Segment endpoints must differ, got {self.start} twice"
            )
        if self.end < self.start:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    def endpoints(self) -> tuple[Point, Point]:
        return self.start, self.end

    def length(self) -> float:
        return self.start.distance(self.end)


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.radius) or self.radius < 0:
            raise InvalidCoordinate(
                f"Circle radius must be finite and non-negative, got {self.radius}"
            )

    def contains(self, point: Point) -> bool:
        # Boundary is inclusive: cocircular points invalidate the triangle
        return self.center.distance(point) <= self.radius


@dataclass(frozen=True, eq=False)
class Triangle:
    """
    A triangle connecting three points.

    Vertices are kept in the order given, since ``contains`` treats vertex ``a``
    specially. Identity ignores the order: two triangles over the same three
    points are equal and hash alike.
    """

    a: Point
    b: Point
    c: Point

    @cached_property
    def key(self) -> tuple[Point, Point, Point]:
        a, b, c = sorted((self.a, self.b, self.c))
        return a, b, c

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Triangle):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    @property
    def vertices(self) -> tuple[Point, Point, Point]:
        return self.a, self.b, self.c

    def has_vertex(self, point: Point) -> bool:
        return point in self.vertices

    def edges(self) -> tuple[Segment, Segment, Segment]:
        """The canonical edges (a, b), (b, c) and (c, a)."""
        return (
            Segment(self.a, self.b),
            Segment(self.b, self.c),
            Segment(self.c, self.a),
        )

    def shares_edge_with(self, other: "Triangle") -> bool:
        # every edge against every edge, not position by position
        return any(edge in other.edges() for edge in self.edges())

    def is_degenerate(self) -> bool:
        return orient2d(self.a, self.b, self.c) == 0

    def area(self) -> float:
        return abs((self.b - self.a).cross(self.c - self.a)) / 2

    def contains(self, point: Point) -> bool:
        """
        Barycentric point-in-triangle test.

        The two edges through vertex ``a`` are inclusive, the edge (b, c)
        opposite to it is exclusive: a point lying exactly on (b, c) is
        reported as outside.

        :param point: query point
        :return: True if the point is inside according to the rule above
        :raises DegenerateTriangle: if the vertices are collinear
        """
        v0 = self.c - self.a
        v1 = self.b - self.a
        v2 = point - self.a

        dot00 = v0.dot(v0)
        dot01 = v0.dot(v1)
        dot02 = v0.dot(v2)
        dot11 = v1.dot(v1)
        dot12 = v1.dot(v2)

        denom = dot00 * dot11 - dot01 * dot01
        if denom == 0:
            raise DegenerateTriangle(
                f"Cannot locate {point}: {self} has collinear vertices",
                triangle=self,
            )
        u = (dot11 * dot02 - dot01 * dot12) / denom
        v = (dot00 * dot12 - dot01 * dot02) / denom
        return u >= 0 and v >= 0 and u + v < 1

    def circumcircle(self) -> Circle:
        """
        Circle passing through the three vertices.

        Raises DegenerateTriangle for collinear vertices instead of returning a
        circle with a non-finite center or radius.
        """
        return self._circumcircle

    @cached_property
    def _circumcircle(self) -> Circle:
        b = self.b - self.a
        c = self.c - self.a
        d = 2 * b.cross(c)
        if d == 0:
            raise DegenerateTriangle(
                f"Vertices of {self} are collinear, circumcircle is undefined",
                triangle=self,
            )

        b_sq = b.dot(b)
        c_sq = c.dot(c)
        ux = (c.y * b_sq - b.y * c_sq) / d
        uy = (b.x * c_sq - c.x * b_sq) / d
        cx, cy = self.a.x + ux, self.a.y + uy
        radius = math.hypot(ux, uy)
        if not all(math.isfinite(v) for v in (cx, cy, radius)):
            raise DegenerateTriangle(
                f"Circumcircle of {self} is not finite (nearly collinear vertices)",
                triangle=self,
            )
        return Circle(Point(cx, cy), radius)


def ensure_ccw_triangle(triangle: Triangle) -> tuple[Point, Point, Point]:
    """Vertices of the triangle in counterclockwise order"""
    a, b, c = triangle.vertices
    if orient2d(a, b, c) < 0:
        return a, c, b
    return a, b, c
