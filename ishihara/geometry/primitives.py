"""
Points, lines, planes and segments in 3D space.

All of these are immutable: operations such as `Point.translated` return new instances
rather than moving the receiver, so primitives can be shared freely between polygons and polyhedra.
"""
from typing import Union

from attr import attrib, attrs
from attr.validators import instance_of

from ishihara.errors import DegenerateGeometryError
from ishihara.geometry.vector import Vector
from ishihara.math_utils import approx_greater, approx_less, approx_zero


@attrs(frozen=True, slots=True, eq=False)
class Point:
    """
    A point in 3D space.
    """

    x: float = attrib(  # pylint:disable=invalid-name
        validator=instance_of(float), converter=float
    )
    y: float = attrib(  # pylint:disable=invalid-name
        validator=instance_of(float), converter=float
    )
    z: float = attrib(  # pylint:disable=invalid-name
        validator=instance_of(float), converter=float
    )

    @staticmethod
    def origin() -> "Point":
        return Point(0.0, 0.0, 0.0)

    @staticmethod
    def at(vector: Vector) -> "Point":
        """
        The point whose position vector is *vector*.
        """
        return Point(vector.x, vector.y, vector.z)

    @property
    def vector(self) -> Vector:
        return Vector(self.x, self.y, self.z)

    def translated(self, offset: Vector) -> "Point":
        return Point(self.x + offset.x, self.y + offset.y, self.z + offset.z)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.vector == other.vector

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        return f"Point({self.x!r}, {self.y!r}, {self.z!r})"


def _to_direction(direction: Vector) -> Vector:
    if direction.is_zero():
        raise DegenerateGeometryError(
            "A line cannot be initialized with a direction vector of (0, 0, 0)"
        )
    return direction.normalized()


@attrs(frozen=True, slots=True, eq=False)
class Line:
    """
    An infinite line through *position* along the unit vector *direction*.

    Use `Line.through` to build a line from two points.
    """

    position: Vector = attrib(validator=instance_of(Vector))
    direction: Vector = attrib(converter=_to_direction)

    @staticmethod
    def through(start: Point, end: Point) -> "Line":
        return Line(start.vector, end.vector - start.vector)

    @staticmethod
    def from_point(point: Point, direction: Vector) -> "Line":
        return Line(point.vector, direction)

    @staticmethod
    def x_axis() -> "Line":
        return Line(Vector.zero(), Vector.x_unit())

    @staticmethod
    def y_axis() -> "Line":
        return Line(Vector.zero(), Vector.y_unit())

    @staticmethod
    def z_axis() -> "Line":
        return Line(Vector.zero(), Vector.z_unit())

    def point_at(self, parameter: float) -> Point:
        return Point.at(self.position + self.direction * parameter)

    def contains(self, other: Union[Point, "Segment"]) -> bool:
        if isinstance(other, Point):
            # direction is a unit vector, so this is the distance from the line
            return approx_zero(
                (other.vector - self.position).cross(self.direction).length()
            )
        elif isinstance(other, Segment):
            return self.contains(other.start) and self.contains(other.end)
        raise TypeError(f"Cannot test whether a line contains {other!r}")

    def translated(self, offset: Vector) -> "Line":
        return Line(self.position + offset, self.direction)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self.contains(Point.at(other.position)) and self.direction.parallel(
            other.direction
        )

    __hash__ = None  # type: ignore


def _to_normal(normal: Vector) -> Vector:
    if normal.is_zero():
        raise DegenerateGeometryError("A plane cannot have a zero normal vector")
    return normal.normalized()


@attrs(frozen=True, slots=True, eq=False)
class Plane:
    """
    A plane in point-normal form.

    Two planes compare equal if they describe the same set of points,
    regardless of their representation or the sense of their normals.
    """

    position: Point = attrib(validator=instance_of(Point))
    normal: Vector = attrib(converter=_to_normal)

    @staticmethod
    def through_points(first: Point, second: Point, third: Point) -> "Plane":
        return Plane.from_vectors(
            first, second.vector - first.vector, third.vector - first.vector
        )

    @staticmethod
    def from_vectors(point: Point, first: Vector, second: Vector) -> "Plane":
        """
        The plane through *point* spanned by two vectors lying in it.
        """
        normal = first.cross(second)
        if normal.is_zero():
            raise DegenerateGeometryError(
                f"Vectors {first} and {second} do not span a plane"
            )
        return Plane(point, normal)

    @staticmethod
    def xy_plane() -> "Plane":
        return Plane(Point.origin(), Vector.z_unit())

    @staticmethod
    def yz_plane() -> "Plane":
        return Plane(Point.origin(), Vector.x_unit())

    @staticmethod
    def xz_plane() -> "Plane":
        return Plane(Point.origin(), Vector.y_unit())

    def signed_distance(self, point: Point) -> float:
        return (point.vector - self.position.vector).dot(self.normal)

    def contains(self, other) -> bool:
        """
        Whether *other* (a `Point`, `Segment`, `Line` or `Polygon`) lies in this plane.
        """
        # pylint:disable=import-outside-toplevel
        from ishihara.geometry.polygon import Polygon

        if isinstance(other, Point):
            return approx_zero(self.signed_distance(other))
        elif isinstance(other, Segment):
            return self.contains(other.start) and self.contains(other.end)
        elif isinstance(other, Line):
            return self.contains(Point.at(other.position)) and self.parallel(other)
        elif isinstance(other, Polygon):
            return self == other.plane
        raise TypeError(f"Cannot test whether a plane contains {other!r}")

    def parallel(self, other: Union[Line, "Plane"]) -> bool:
        if isinstance(other, Line):
            return other.direction.orthogonal(self.normal)
        elif isinstance(other, Plane):
            return other.normal.parallel(self.normal)
        raise TypeError(f"Cannot test whether a plane is parallel to {other!r}")

    def negated(self) -> "Plane":
        """
        The same plane with its normal reversed.
        """
        return Plane(self.position, -self.normal)

    def translated(self, offset: Vector) -> "Plane":
        return Plane(self.position.translated(offset), self.normal)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Plane):
            return NotImplemented
        return other.contains(self.position) and self.normal.parallel(other.normal)

    __hash__ = None  # type: ignore


@attrs(frozen=True, slots=True, eq=False)
class Segment:
    """
    The part of a line between two distinct endpoints.
    """

    start: Point = attrib(validator=instance_of(Point))
    end: Point = attrib(validator=instance_of(Point))
    line: Line = attrib(init=False)

    @line.default
    def _init_line(self) -> Line:
        if self.start == self.end:
            raise DegenerateGeometryError(
                f"Cannot initialize a segment with two identical points {self.start}"
            )
        return Line.through(self.start, self.end)

    @staticmethod
    def from_point(start: Point, offset: Vector) -> "Segment":
        return Segment(start, start.translated(offset))

    @property
    def vector(self) -> Vector:
        return self.end.vector - self.start.vector

    def length(self) -> float:
        return self.vector.length()

    def contains(self, other: Union[Point, "Segment"]) -> bool:
        """
        Whether *other* lies on this segment, endpoints included.
        """
        if isinstance(other, Point):
            if not self.line.contains(other):
                return False
            along = self.vector
            offset = other.vector - self.start.vector
            if approx_zero(offset.length()):
                return True
            relative_length = offset.dot(along) / along.dot(along)
            return not approx_less(relative_length, 0.0) and not approx_greater(
                relative_length, 1.0
            )
        elif isinstance(other, Segment):
            return self.contains(other.start) and self.contains(other.end)
        raise TypeError(f"Cannot test whether a segment contains {other!r}")

    def translated(self, offset: Vector) -> "Segment":
        return Segment(self.start.translated(offset), self.end.translated(offset))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return (self.start == other.start and self.end == other.end) or (
            self.start == other.end and self.end == other.start
        )

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        return f"Segment({self.start!r}, {self.end!r})"
