import pytest

from ishihara.errors import DegenerateGeometryError
from ishihara.geometry import Line, Plane, Point, Segment, Vector


def test_line_direction_is_normalized():
    assert Line.through(Point.origin(), Point(2, 0, 0)).direction == Vector.x_unit()
    assert Line(Vector(1, 0, 0), Vector(2, 0, 0)) == Line.x_axis()
    # direction sense does not matter
    assert Line(Vector.zero(), Vector(-1, 0, 0)) == Line.x_axis()


def test_degenerate_line():
    with pytest.raises(DegenerateGeometryError):
        Line(Vector(1, 2, 3), Vector.zero())
    with pytest.raises(ValueError):
        Line.through(Point(1, 1, 1), Point(1, 1, 1))


def test_line_contains():
    assert Line.x_axis().contains(Point(5, 0, 0))
    assert not Line.x_axis().contains(Point(0, 1, 0))
    assert Line.x_axis().point_at(3.0) == Point(3, 0, 0)


def test_plane_through_points():
    plane = Plane.through_points(Point.origin(), Point(1, 0, 0), Point(0, 1, 0))
    assert plane == Plane.xy_plane()
    assert plane == plane.negated()
    assert plane.contains(Point(3, 4, 0))
    assert not plane.contains(Point(3, 4, 1))
    assert plane.signed_distance(Point(0, 0, 2)) == pytest.approx(
        2.0 if plane.normal == Vector.z_unit() else -2.0
    )
    with pytest.raises(DegenerateGeometryError):
        Plane.through_points(Point.origin(), Point(1, 0, 0), Point(2, 0, 0))


def test_plane_from_parallel_vectors():
    with pytest.raises(DegenerateGeometryError):
        Plane.from_vectors(Point.origin(), Vector.x_unit(), Vector(3, 0, 0))


def test_plane_contains_line():
    assert Plane.xy_plane().contains(Line.x_axis())
    assert not Plane.xy_plane().contains(Line.z_axis())
    assert not Plane.xy_plane().contains(Line(Vector(0, 0, 1), Vector.x_unit()))
    assert Plane.xy_plane().parallel(Line(Vector(0, 0, 1), Vector.x_unit()))


def test_segment():
    segment = Segment(Point.origin(), Point(2, 0, 0))
    assert segment.length() == 2.0
    assert segment.vector == Vector(2, 0, 0)
    assert segment.line == Line.x_axis()
    assert segment.contains(Point(1, 0, 0))
    assert segment.contains(Point(2, 0, 0))
    assert not segment.contains(Point(3, 0, 0))
    assert not segment.contains(Point(1, 1, 0))
    assert segment.contains(Segment(Point(0.5, 0, 0), Point(1.5, 0, 0)))


def test_segment_equality_ignores_direction():
    forward = Segment(Point.origin(), Point(1, 2, 3))
    backward = Segment(Point(1, 2, 3), Point.origin())
    assert forward == backward
    with pytest.raises(TypeError):
        hash(forward)
    with pytest.raises(TypeError):
        {Point.origin()}  # pylint:disable=expression-not-assigned
    assert Segment.from_point(Point.origin(), Vector(1, 2, 3)) == forward


def test_degenerate_segment():
    with pytest.raises(DegenerateGeometryError):
        Segment(Point(1, 1, 1), Point(1, 1, 1))


def test_translation_returns_new_values():
    point = Point(1, 2, 3)
    assert point.translated(Vector(1, 1, 1)) == Point(2, 3, 4)
    assert point == Point(1, 2, 3)
    assert Line.x_axis().translated(Vector(0, 1, 0)).contains(Point(7, 1, 0))
    assert Plane.xy_plane().translated(Vector(0, 0, 1)).contains(Point(7, 1, 1))
