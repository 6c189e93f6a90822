import pytest

from ishihara.errors import DegenerateGeometryError
from ishihara.geometry import Plane, Point, Polygon, Vector, parallelogram


def _unit_square() -> Polygon:
    return Polygon([Point(0, 0, 0), Point(1, 1, 0), Point(1, 0, 0), Point(0, 1, 0)])


def test_vertices_are_ordered_around_the_center():
    square = _unit_square()
    assert square.center == Point(0.5, 0.5, 0)
    assert len(square.vertices) == 4
    # no diagonals among the edges
    assert all(segment.length() == pytest.approx(1.0) for segment in square.segments)
    assert square.area() == pytest.approx(1.0)
    assert square.plane == Plane.xy_plane()


def test_degenerate_polygons():
    with pytest.raises(DegenerateGeometryError):
        Polygon([Point(0, 0, 0), Point(1, 0, 0), Point(1, 0, 0)])
    with pytest.raises(DegenerateGeometryError):
        Polygon([Point(0, 0, 0), Point(1, 0, 0), Point(2, 0, 0)])
    with pytest.raises(DegenerateGeometryError):
        Polygon([Point(0, 0, 0), Point(1, 0, 0), Point(0, 1, 1)], plane=Plane.xy_plane())


def test_contains():
    square = _unit_square()
    assert square.contains(Point(0.5, 0.5, 0))
    assert square.contains(Point(1, 0.5, 0))
    assert square.contains(Point(1, 1, 0))
    assert not square.contains(Point(2, 2, 0))
    assert not square.contains(Point(0.5, 0.5, 1))


def test_negated_and_translated():
    square = _unit_square()
    negated = square.negated()
    assert negated == square
    assert negated.plane.normal == -square.plane.normal
    moved = square.translated(Vector(0, 0, 3))
    assert moved.contains(Point(0.5, 0.5, 3))
    assert not moved.contains(Point(0.5, 0.5, 0))


def test_parallelogram():
    shape = parallelogram(Point.origin(), Vector(2, 0, 0), Vector(1, 1, 0))
    assert shape.area() == pytest.approx(2.0)
    assert shape.contains(Point(1.5, 0.5, 0))
    assert not shape.contains(Point(0.2, 0.8, 0))
    with pytest.raises(DegenerateGeometryError):
        parallelogram(Point.origin(), Vector(2, 0, 0), Vector(1, 0, 0))
