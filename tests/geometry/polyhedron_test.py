import pytest

from ishihara.errors import DegenerateGeometryError
from ishihara.geometry import Point, Polyhedron, Vector, parallelepiped


def _unit_cube() -> Polyhedron:
    return parallelepiped(Point.origin(), Vector.x_unit(), Vector.y_unit(), Vector.z_unit())


def test_cube_structure():
    cube = _unit_cube()
    assert len(cube.vertices) == 8
    assert len(cube.edges) == 12
    assert len(cube.faces) == 6
    assert cube.center == Point(0.5, 0.5, 0.5)


def test_faces_point_outward():
    cube = _unit_cube()
    for face in cube.faces:
        assert (face.center.vector - cube.center.vector).dot(face.plane.normal) > 0


def test_contains():
    cube = _unit_cube()
    assert cube.contains(Point(0.5, 0.5, 0.5))
    assert cube.contains(Point(1, 1, 1))
    assert cube.contains(Point(0.5, 0.5, 0))
    assert not cube.contains(Point(2, 0, 0))
    assert not cube.contains(Point(0.5, 0.5, -0.01))


def test_skewed_parallelepiped():
    skewed = parallelepiped(
        Point(1, 2, 3), Vector(2, 0, 0), Vector(1, 1, 0), Vector(0.5, 0.5, 3)
    )
    assert len(skewed.vertices) == 8
    assert len(skewed.edges) == 12
    assert len(skewed.faces) == 6
    assert skewed.contains(skewed.center)
    assert not skewed.contains(Point(0, 0, 0))


def test_open_shell_is_rejected():
    cube = _unit_cube()
    with pytest.raises(DegenerateGeometryError):
        Polyhedron(cube.faces[:5])


def test_flat_parallelepiped_is_rejected():
    with pytest.raises(DegenerateGeometryError):
        parallelepiped(Point.origin(), Vector.x_unit(), Vector.y_unit(), Vector(2, 0, 0))


def test_translated():
    cube = _unit_cube()
    moved = cube.translated(Vector(1, 0, 0))
    assert moved.contains(Point(1.5, 0.5, 0.5))
    assert not moved.contains(Point(0.5, 0.5, 0.5))
    assert moved != cube
    assert moved.translated(Vector(-1, 0, 0)) == cube
