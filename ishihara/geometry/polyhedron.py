"""
Closed convex polyhedra.
"""
from typing import Iterable, Tuple, Union

from attr import attrib, attrs
from more_itertools import flatten

from ishihara.errors import DegenerateGeometryError
from ishihara.geometry.polygon import Polygon, centroid, parallelogram, unique
from ishihara.geometry.primitives import Point, Segment
from ishihara.geometry.vector import Vector
from ishihara.math_utils import approx_greater, approx_less


def _to_polygons(polygons: Iterable[Polygon]) -> Tuple[Polygon, ...]:
    ret = tuple(polygons)
    for polygon in ret:
        if not isinstance(polygon, Polygon):
            raise TypeError(f"Polyhedron faces must be polygons but got {polygon!r}")
    return ret


@attrs(frozen=True, slots=True, eq=False)
class Polyhedron:
    """
    A closed convex polyhedron bounded by *polygons*.

    Each face is re-oriented if necessary so its normal points away from the centroid,
    and Euler's formula V - E + F = 2 is checked so that open or malformed shells are rejected.
    Faces are held in a canonical order (by the z, y then x coordinate of their centers).
    """

    polygons: Tuple[Polygon, ...] = attrib(converter=_to_polygons)
    vertices: Tuple[Point, ...] = attrib(init=False)
    edges: Tuple[Segment, ...] = attrib(init=False)
    center: Point = attrib(init=False)
    faces: Tuple[Polygon, ...] = attrib(init=False)

    @vertices.default
    def _init_vertices(self) -> Tuple[Point, ...]:
        return unique(flatten(polygon.vertices for polygon in self.polygons))

    @edges.default
    def _init_edges(self) -> Tuple[Segment, ...]:
        return unique(flatten(polygon.segments for polygon in self.polygons))

    @center.default
    def _init_center(self) -> Point:
        if not self.vertices:
            raise DegenerateGeometryError("A polyhedron needs at least one face")
        return centroid(self.vertices)

    @faces.default
    def _init_faces(self) -> Tuple[Polygon, ...]:
        outward = [
            polygon.negated()
            if approx_less(self._outwardness(polygon), 0.0)
            else polygon
            for polygon in self.polygons
        ]
        return tuple(
            sorted(
                outward,
                key=lambda polygon: (polygon.center.z, polygon.center.y, polygon.center.x),
            )
        )

    def __attrs_post_init__(self) -> None:
        for face in self.faces:
            if not approx_greater(self._outwardness(face), 0.0):
                raise DegenerateGeometryError(
                    f"Face {face} of the polyhedron does not face outward"
                )
        euler_characteristic = len(self.vertices) - len(self.edges) + len(self.faces)
        if euler_characteristic != 2:
            raise DegenerateGeometryError(
                f"Check for the number of vertices, edges and faces failed "
                f"(V={len(self.vertices)}, E={len(self.edges)}, F={len(self.faces)}); "
                f"the polyhedron may not be closed"
            )

    def _outwardness(self, polygon: Polygon) -> float:
        return (polygon.plane.position.vector - self.center.vector).dot(
            polygon.plane.normal
        )

    def contains(self, other: Union[Point, Segment, Polygon]) -> bool:
        """
        Whether *other* lies inside this polyhedron, boundary included.
        """
        if isinstance(other, Point):
            return all(
                not approx_greater(
                    (other.vector - face.center.vector).dot(face.plane.normal), 0.0
                )
                for face in self.faces
            )
        elif isinstance(other, Segment):
            return self.contains(other.start) and self.contains(other.end)
        elif isinstance(other, Polygon):
            return all(self.contains(vertex) for vertex in other.vertices)
        raise TypeError(f"Cannot test whether a polyhedron contains {other!r}")

    def translated(self, offset: Vector) -> "Polyhedron":
        return Polyhedron(face.translated(offset) for face in self.faces)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polyhedron):
            return NotImplemented
        return len(self.faces) == len(other.faces) and all(
            face in other.faces for face in self.faces
        )

    __hash__ = None  # type: ignore


def parallelepiped(origin: Point, first: Vector, second: Vector, third: Vector) -> Polyhedron:
    """
    The parallelepiped with a corner at *origin* spanned by three edge vectors.
    """
    if first.is_zero() or second.is_zero() or third.is_zero():
        raise DegenerateGeometryError(
            "The edge vectors of a parallelepiped must not be zero"
        )
    if first.parallel(second) or first.parallel(third) or second.parallel(third):
        raise DegenerateGeometryError(
            "The edge vectors of a parallelepiped must not be parallel to each other"
        )
    opposite = origin.translated(first + second + third)
    return Polyhedron(
        [
            parallelogram(origin, first, second),
            parallelogram(origin, second, third),
            parallelogram(origin, first, third),
            parallelogram(opposite, -first, -second),
            parallelogram(opposite, -second, -third),
            parallelogram(opposite, -first, -third),
        ]
    )
