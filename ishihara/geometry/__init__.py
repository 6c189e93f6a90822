"""
A small 3D geometry kernel with tolerance-aware comparisons.

It exists to find where a line through LMS colour space leaves the sRGB gamut,
but the primitives are general.
"""
from ishihara.geometry.distance import distance
from ishihara.geometry.intersection import GeometryKind, intersection
from ishihara.geometry.polygon import Polygon, parallelogram
from ishihara.geometry.polyhedron import Polyhedron, parallelepiped
from ishihara.geometry.primitives import Line, Plane, Point, Segment
from ishihara.geometry.vector import Vector
