"""
Convex polygons in 3D space.
"""
from itertools import combinations
from math import atan2, pi
from typing import Iterable, List, Tuple, TypeVar, Union

from attr import attrib, attrs
from attr.validators import instance_of

from ishihara.errors import DegenerateGeometryError
from ishihara.geometry.primitives import Plane, Point, Segment
from ishihara.geometry.vector import Vector
from ishihara.math_utils import approx_less

_T = TypeVar("_T")


def unique(items: Iterable[_T]) -> Tuple[_T, ...]:
    """
    Drop items which compare (approximately) equal to an earlier item, preserving order.

    Hashing cannot be trusted for approximate equality, so this is quadratic;
    the inputs are polygon vertices and edges, which are few.
    """
    ret: List[_T] = []
    for item in items:
        if not any(item == seen for seen in ret):
            ret.append(item)
    return tuple(ret)


def _polygon_points(points: Iterable[Point]) -> Tuple[Point, ...]:
    ret = unique(points)
    if len(ret) < 3:
        raise DegenerateGeometryError(
            f"Cannot construct a polygon with fewer than 3 distinct points: {ret}"
        )
    return ret


def centroid(points: Iterable[Point]) -> Point:
    points = tuple(points)
    num_points = len(points)
    return Point(
        sum(point.x for point in points) / num_points,
        sum(point.y for point in points) / num_points,
        sum(point.z for point in points) / num_points,
    )


@attrs(frozen=True, slots=True, eq=False)
class Polygon:
    r"""
    A convex polygon.

    *points* need not be in any particular order; they are de-duplicated and sorted by angle
    around their centroid, counter-clockwise when seen from the tip of the plane normal,
    to give `vertices`.  If no *plane* is given, it is derived from the points,
    with its normal following the right-hand rule over the first non-collinear triple.

    Convexity is not verified; a concave input gives meaningless containment results.
    """

    points: Tuple[Point, ...] = attrib(converter=_polygon_points)
    plane: Plane = attrib(validator=instance_of(Plane), kw_only=True)
    center: Point = attrib(init=False)
    vertices: Tuple[Point, ...] = attrib(init=False)
    segments: Tuple[Segment, ...] = attrib(init=False)

    @plane.default
    def _init_plane(self) -> Plane:
        anchor = self.points[0]
        for (first, second) in combinations(self.points[1:], 2):
            normal = (first.vector - anchor.vector).cross(second.vector - anchor.vector)
            if not normal.is_zero():
                return Plane(anchor, normal)
        raise DegenerateGeometryError(
            f"Cannot construct a polygon from collinear points {self.points}"
        )

    @center.default
    def _init_center(self) -> Point:
        return centroid(self.points)

    @vertices.default
    def _init_vertices(self) -> Tuple[Point, ...]:
        reference = self.points[0].vector - self.center.vector
        perpendicular = self.plane.normal.cross(reference)

        def angle_around_center(point: Point) -> float:
            if not self.plane.contains(point):
                raise DegenerateGeometryError(
                    f"Convex check failed because point {point} is not on the plane {self.plane}"
                )
            offset = point.vector - self.center.vector
            angle = atan2(offset.dot(perpendicular), offset.dot(reference))
            return angle + 2 * pi if angle < 0 else angle

        return tuple(sorted(self.points, key=angle_around_center))

    @segments.default
    def _init_segments(self) -> Tuple[Segment, ...]:
        return tuple(
            Segment(vertex, self.vertices[(i + 1) % len(self.vertices)])
            for (i, vertex) in enumerate(self.vertices)
        )

    def contains(self, other: Union[Point, Segment]) -> bool:
        """
        Whether *other* lies in this polygon, boundary included.
        """
        if isinstance(other, Point):
            if not self.plane.contains(other):
                return False
            for segment in self.segments:
                inward = self.plane.normal.cross(segment.vector)
                if approx_less((other.vector - segment.start.vector).dot(inward), 0.0):
                    return False
            return True
        elif isinstance(other, Segment):
            return self.contains(other.start) and self.contains(other.end)
        raise TypeError(f"Cannot test whether a polygon contains {other!r}")

    def area(self) -> float:
        twice_area = Vector.zero()
        for segment in self.segments:
            twice_area = twice_area + segment.start.vector.cross(segment.end.vector)
        return abs(twice_area.dot(self.plane.normal)) / 2.0

    def negated(self) -> "Polygon":
        """
        The same polygon with its normal reversed, which also reverses the vertex order.
        """
        return Polygon(self.vertices, plane=self.plane.negated())

    def translated(self, offset: Vector) -> "Polygon":
        return Polygon(
            [vertex.translated(offset) for vertex in self.vertices],
            plane=self.plane.translated(offset),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return (
            self.plane == other.plane
            and len(self.vertices) == len(other.vertices)
            and all(vertex in other.vertices for vertex in self.vertices)
        )

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        return f"Polygon({list(self.vertices)!r})"


def parallelogram(origin: Point, first: Vector, second: Vector) -> Polygon:
    """
    The parallelogram with a corner at *origin* spanned by two edge vectors.
    """
    if first.is_zero() or second.is_zero():
        raise DegenerateGeometryError("The edge vectors of a parallelogram must not be zero")
    if first.parallel(second):
        raise DegenerateGeometryError(
            f"The edge vectors of a parallelogram must not be parallel: {first}, {second}"
        )
    return Polygon(
        [
            origin,
            origin.translated(first),
            origin.translated(second),
            origin.translated(first + second),
        ]
    )
