"""
Intersections between any two geometric primitives.

`intersection` classifies both arguments into a `GeometryKind`, orders the pair canonically and
dispatches to one pairwise routine.  Each routine is an independent function which returns
``None`` when the primitives do not meet.
"""
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np
from immutablecollections import ImmutableDict, immutabledict

from ishihara.errors import IntersectionInvariantError
from ishihara.geometry.polygon import Polygon, unique
from ishihara.geometry.polyhedron import Polyhedron
from ishihara.geometry.primitives import Line, Plane, Point, Segment

Geometry = Union[Point, Line, Plane, Segment, Polygon, Polyhedron]


class GeometryKind(Enum):
    """
    The primitive kinds, in the order used to canonicalize argument pairs.
    """

    POINT = 0
    LINE = 1
    PLANE = 2
    SEGMENT = 3
    POLYGON = 4
    POLYHEDRON = 5

    @staticmethod
    def of(geometry: Geometry) -> "GeometryKind":
        kind = _TYPE_TO_KIND.get(type(geometry))
        if kind is None:
            raise TypeError(f"{geometry!r} is not a geometric primitive")
        return kind


_TYPE_TO_KIND: ImmutableDict[type, GeometryKind] = immutabledict(
    [
        (Point, GeometryKind.POINT),
        (Line, GeometryKind.LINE),
        (Plane, GeometryKind.PLANE),
        (Segment, GeometryKind.SEGMENT),
        (Polygon, GeometryKind.POLYGON),
        (Polyhedron, GeometryKind.POLYHEDRON),
    ]
)


def _relative_projection_length(vector, onto) -> float:
    return vector.dot(onto) / onto.dot(onto)


def longest_segment(points: Sequence[Point]) -> Optional[Segment]:
    """
    The shortest segment covering every one of *points*, which must be collinear.

    Returns ``None`` for fewer than two points.
    """
    if len(points) < 2:
        return None
    anchor = points[0]
    along = points[1].vector - anchor.vector
    relative_lengths = [0.0, 1.0]
    for point in points[2:]:
        offset = point.vector - anchor.vector
        if not offset.parallel(along):
            raise IntersectionInvariantError(
                f"Expected the points {points} to lie on a line but they do not"
            )
        relative_lengths.append(_relative_projection_length(offset, along))
    return Segment(
        anchor.translated(along * min(relative_lengths)),
        anchor.translated(along * max(relative_lengths)),
    )


def _collinear(points: Sequence[Point]) -> bool:
    if len(points) < 3:
        return True
    line = Line.through(points[0], points[1])
    return all(line.contains(point) for point in points[2:])


def _at_most_two_points(points: Sequence[Point], description: str):
    points = unique(points)
    if len(points) > 2:
        raise IntersectionInvariantError(
            f"{description} should never have more than 2 intersection points but got {points}"
        )
    if len(points) == 2:
        return Segment(points[0], points[1])
    if len(points) == 1:
        return points[0]
    return None


def intersect_point_point(first: Point, second: Point) -> Optional[Point]:
    return first if first == second else None


def intersect_point_line(point: Point, line: Line) -> Optional[Point]:
    return point if line.contains(point) else None


def intersect_point_plane(point: Point, plane: Plane) -> Optional[Point]:
    return point if plane.contains(point) else None


def intersect_point_segment(point: Point, segment: Segment) -> Optional[Point]:
    return point if segment.contains(point) else None


def intersect_point_polygon(point: Point, polygon: Polygon) -> Optional[Point]:
    return point if polygon.contains(point) else None


def intersect_point_polyhedron(point: Point, polyhedron: Polyhedron) -> Optional[Point]:
    return point if polyhedron.contains(point) else None


def intersect_line_line(first: Line, second: Line) -> Union[Line, Point, None]:
    if first == second:
        return first
    if first.direction.parallel(second.direction):
        return None
    # Solve first.position + s * first.direction = second.position + t * second.direction
    # in the least-squares sense; the lines meet only if both closest points coincide.
    system = np.column_stack([first.direction.to_array(), -second.direction.to_array()])
    target = (second.position - first.position).to_array()
    (first_parameter, second_parameter), *_ = np.linalg.lstsq(system, target, rcond=None)
    on_first = first.point_at(float(first_parameter))
    on_second = second.point_at(float(second_parameter))
    return on_first if on_first == on_second else None


def intersect_line_plane(line: Line, plane: Plane) -> Union[Line, Point, None]:
    if plane.contains(line):
        return line
    if plane.parallel(line):
        return None
    parameter = (
        plane.normal.dot(plane.position.vector) - plane.normal.dot(line.position)
    ) / plane.normal.dot(line.direction)
    return line.point_at(parameter)


def intersect_line_segment(line: Line, segment: Segment) -> Union[Segment, Point, None]:
    crossing = intersect_line_line(line, segment.line)
    if isinstance(crossing, Line):
        return segment
    elif isinstance(crossing, Point):
        return intersect_point_segment(crossing, segment)
    return None


def intersect_line_polygon(line: Line, polygon: Polygon) -> Union[Segment, Point, None]:
    crossing = intersect_line_plane(line, polygon.plane)
    if isinstance(crossing, Line):
        points = []
        for edge in polygon.segments:
            edge_crossing = intersect_line_segment(line, edge)
            if isinstance(edge_crossing, Segment):
                # the line runs along this edge
                return edge_crossing
            elif isinstance(edge_crossing, Point):
                points.append(edge_crossing)
        return _at_most_two_points(points, "A line and a polygon")
    elif isinstance(crossing, Point):
        return intersect_point_polygon(crossing, polygon)
    return None


def intersect_line_polyhedron(
    line: Line, polyhedron: Polyhedron
) -> Union[Segment, Point, None]:
    points = []
    for face in polyhedron.faces:
        crossing = intersect_line_polygon(line, face)
        if isinstance(crossing, Segment):
            return crossing
        elif isinstance(crossing, Point):
            points.append(crossing)
    points = list(unique(points))
    if len(points) == 1:
        return points[0]
    return longest_segment(points)


def intersect_plane_plane(first: Plane, second: Plane) -> Union[Plane, Line, None]:
    if first == second:
        return first
    if first.normal.parallel(second.normal):
        return None
    direction = first.normal.cross(second.normal).normalized()
    # a line in the first plane perpendicular to the intersection must cross the second plane
    auxiliary = Line(first.position.vector, direction.cross(first.normal))
    crossing = intersect_line_plane(auxiliary, second)
    if isinstance(crossing, Point):
        return Line(crossing.vector, direction)
    return None


def intersect_plane_segment(plane: Plane, segment: Segment) -> Union[Segment, Point, None]:
    crossing = intersect_line_plane(segment.line, plane)
    if isinstance(crossing, Point):
        return intersect_point_segment(crossing, segment)
    elif isinstance(crossing, Line):
        return segment
    return None


def intersect_plane_polygon(
    plane: Plane, polygon: Polygon
) -> Union[Polygon, Segment, Point, None]:
    crossing = intersect_plane_plane(plane, polygon.plane)
    if isinstance(crossing, Plane):
        return polygon
    elif isinstance(crossing, Line):
        return intersect_line_polygon(crossing, polygon)
    return None


def _points_to_geometry(points: Sequence[Point]) -> Union[Polygon, Segment, Point, None]:
    points = unique(points)
    if not points:
        return None
    if len(points) == 1:
        return points[0]
    if _collinear(points):
        return longest_segment(points)
    return Polygon(points)


def intersect_plane_polyhedron(
    plane: Plane, polyhedron: Polyhedron
) -> Union[Polygon, Segment, Point, None]:
    for face in polyhedron.faces:
        if plane.contains(face):
            return face
    points = []
    for edge in polyhedron.edges:
        crossing = intersect_plane_segment(plane, edge)
        if isinstance(crossing, Point):
            points.append(crossing)
        elif isinstance(crossing, Segment):
            points.extend([crossing.start, crossing.end])
    return _points_to_geometry(points)


def intersect_segment_segment(first: Segment, second: Segment) -> Union[Segment, Point, None]:
    if first.line == second.line:
        points = [
            point
            for (point, other) in [
                (first.start, second),
                (first.end, second),
                (second.start, first),
                (second.end, first),
            ]
            if other.contains(point)
        ]
        return _at_most_two_points(points, "Two collinear segments")
    crossing = intersect_line_line(first.line, second.line)
    if (
        isinstance(crossing, Point)
        and first.contains(crossing)
        and second.contains(crossing)
    ):
        return crossing
    return None


def intersect_segment_polygon(
    segment: Segment, polygon: Polygon
) -> Union[Segment, Point, None]:
    crossing = intersect_line_plane(segment.line, polygon.plane)
    if isinstance(crossing, Point):
        if segment.contains(crossing) and polygon.contains(crossing):
            return crossing
    elif isinstance(crossing, Line):
        in_plane = intersect_line_polygon(segment.line, polygon)
        if isinstance(in_plane, Point):
            return intersect_point_segment(in_plane, segment)
        elif isinstance(in_plane, Segment):
            return intersect_segment_segment(in_plane, segment)
    return None


def intersect_segment_polyhedron(
    segment: Segment, polyhedron: Polyhedron
) -> Union[Segment, Point, None]:
    start_inside = polyhedron.contains(segment.start)
    end_inside = polyhedron.contains(segment.end)
    if start_inside and end_inside:
        return segment

    points = []
    for face in polyhedron.faces:
        crossing = intersect_segment_polygon(segment, face)
        if isinstance(crossing, Point):
            points.append(crossing)
        elif isinstance(crossing, Segment):
            points.extend([crossing.start, crossing.end])
    for edge in polyhedron.edges:
        crossing = intersect_segment_segment(segment, edge)
        if isinstance(crossing, Point):
            points.append(crossing)
    if start_inside:
        points.append(segment.start)
    elif end_inside:
        points.append(segment.end)
    return _at_most_two_points(points, "A segment and a polyhedron")


def intersect_polygon_polygon(
    first: Polygon, second: Polygon
) -> Union[Polygon, Segment, Point, None]:
    crossing = intersect_plane_plane(first.plane, second.plane)
    if isinstance(crossing, Line):
        on_first = intersect_line_polygon(crossing, first)
        on_second = intersect_line_polygon(crossing, second)
        if on_first is None or on_second is None:
            return None
        return intersection(on_first, on_second)
    elif isinstance(crossing, Plane):
        points = [vertex for vertex in first.vertices if second.contains(vertex)]
        points.extend(vertex for vertex in second.vertices if first.contains(vertex))
        for first_edge in first.segments:
            for second_edge in second.segments:
                edge_crossing = intersect_segment_segment(first_edge, second_edge)
                if isinstance(edge_crossing, Point):
                    points.append(edge_crossing)
        return _points_to_geometry(points)
    return None


def intersect_polygon_polyhedron(
    polygon: Polygon, polyhedron: Polyhedron
) -> Union[Polygon, Segment, Point, None]:
    section = intersect_plane_polyhedron(polygon.plane, polyhedron)
    if isinstance(section, Point):
        return intersect_point_polygon(section, polygon)
    elif isinstance(section, Segment):
        return intersect_segment_polygon(section, polygon)
    elif isinstance(section, Polygon):
        return intersect_polygon_polygon(section, polygon)
    return None


def intersect_polyhedron_polyhedron(
    first: Polyhedron, second: Polyhedron
) -> Union[Polyhedron, Polygon, Segment, Point, None]:
    polygons = []
    segments = []
    points = []
    for (faces, other) in [(first.faces, second), (second.faces, first)]:
        for face in faces:
            crossing = intersect_polygon_polyhedron(face, other)
            if isinstance(crossing, Polygon):
                polygons.append(crossing)
            elif isinstance(crossing, Segment):
                segments.append(crossing)
            elif isinstance(crossing, Point):
                points.append(crossing)

    polygons = list(unique(polygons))
    if len(polygons) > 1:
        return Polyhedron(polygons)
    if len(polygons) == 1:
        return polygons[0]
    segments = list(unique(segments))
    if len(segments) > 1:
        raise IntersectionInvariantError(
            f"Two polyhedra cannot touch along several separate segments: {segments}"
        )
    if segments:
        return segments[0]
    points = list(unique(points))
    if len(points) > 1:
        raise IntersectionInvariantError(
            f"Two polyhedra cannot touch at several separate points: {points}"
        )
    return points[0] if points else None


_PAIRWISE_INTERSECTIONS: ImmutableDict[
    Tuple[GeometryKind, GeometryKind], Callable[..., Optional[Geometry]]
] = immutabledict(
    [
        ((GeometryKind.POINT, GeometryKind.POINT), intersect_point_point),
        ((GeometryKind.POINT, GeometryKind.LINE), intersect_point_line),
        ((GeometryKind.POINT, GeometryKind.PLANE), intersect_point_plane),
        ((GeometryKind.POINT, GeometryKind.SEGMENT), intersect_point_segment),
        ((GeometryKind.POINT, GeometryKind.POLYGON), intersect_point_polygon),
        ((GeometryKind.POINT, GeometryKind.POLYHEDRON), intersect_point_polyhedron),
        ((GeometryKind.LINE, GeometryKind.LINE), intersect_line_line),
        ((GeometryKind.LINE, GeometryKind.PLANE), intersect_line_plane),
        ((GeometryKind.LINE, GeometryKind.SEGMENT), intersect_line_segment),
        ((GeometryKind.LINE, GeometryKind.POLYGON), intersect_line_polygon),
        ((GeometryKind.LINE, GeometryKind.POLYHEDRON), intersect_line_polyhedron),
        ((GeometryKind.PLANE, GeometryKind.PLANE), intersect_plane_plane),
        ((GeometryKind.PLANE, GeometryKind.SEGMENT), intersect_plane_segment),
        ((GeometryKind.PLANE, GeometryKind.POLYGON), intersect_plane_polygon),
        ((GeometryKind.PLANE, GeometryKind.POLYHEDRON), intersect_plane_polyhedron),
        ((GeometryKind.SEGMENT, GeometryKind.SEGMENT), intersect_segment_segment),
        ((GeometryKind.SEGMENT, GeometryKind.POLYGON), intersect_segment_polygon),
        ((GeometryKind.SEGMENT, GeometryKind.POLYHEDRON), intersect_segment_polyhedron),
        ((GeometryKind.POLYGON, GeometryKind.POLYGON), intersect_polygon_polygon),
        ((GeometryKind.POLYGON, GeometryKind.POLYHEDRON), intersect_polygon_polyhedron),
        (
            (GeometryKind.POLYHEDRON, GeometryKind.POLYHEDRON),
            intersect_polyhedron_polyhedron,
        ),
    ]
)


def intersection(first: Geometry, second: Geometry) -> Optional[Geometry]:
    """
    The intersection of any two primitives, or ``None`` if they do not meet.

    Argument order does not matter.
    """
    first_kind = GeometryKind.of(first)
    second_kind = GeometryKind.of(second)
    if first_kind.value > second_kind.value:
        (first, second) = (second, first)
        (first_kind, second_kind) = (second_kind, first_kind)
    return _PAIRWISE_INTERSECTIONS[(first_kind, second_kind)](first, second)
