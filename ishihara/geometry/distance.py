"""
Euclidean distances between points, lines and planes.
"""
from typing import Union

from ishihara.geometry.primitives import Line, Plane, Point

_Measurable = Union[Point, Line, Plane]


def distance_point_point(first: Point, second: Point) -> float:
    return (second.vector - first.vector).length()


def distance_point_line(point: Point, line: Line) -> float:
    offset = point.vector - line.position
    return offset.cross(line.direction).length()


def distance_point_plane(point: Point, plane: Plane) -> float:
    return abs(plane.signed_distance(point))


def distance_line_line(first: Line, second: Line) -> float:
    if first.direction.parallel(second.direction):
        return distance_point_line(Point.at(second.position), first)
    common_normal = first.direction.cross(second.direction).normalized()
    return abs((second.position - first.position).dot(common_normal))


def distance_line_plane(line: Line, plane: Plane) -> float:
    # a line which is not parallel to a plane always crosses it
    if not plane.parallel(line):
        return 0.0
    return distance_point_plane(Point.at(line.position), plane)


def distance(first: _Measurable, second: _Measurable) -> float:
    """
    The shortest distance between two points, lines or planes, in either order.

    Plane-to-plane distances are not supported.
    """
    if isinstance(first, Point):
        if isinstance(second, Point):
            return distance_point_point(first, second)
        elif isinstance(second, Line):
            return distance_point_line(first, second)
        elif isinstance(second, Plane):
            return distance_point_plane(first, second)
    elif isinstance(first, Line):
        if isinstance(second, Point):
            return distance_point_line(second, first)
        elif isinstance(second, Line):
            return distance_line_line(first, second)
        elif isinstance(second, Plane):
            return distance_line_plane(first, second)
    elif isinstance(first, Plane):
        if isinstance(second, Point):
            return distance_point_plane(second, first)
        elif isinstance(second, Line):
            return distance_line_plane(second, first)
    raise TypeError(f"Cannot compute the distance between {first!r} and {second!r}")
