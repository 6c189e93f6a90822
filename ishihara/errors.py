"""
Exceptions raised by the geometry kernel and the colour model.
"""
from attr import attrs


@attrs(auto_exc=True, auto_attribs=True)
class DegenerateGeometryError(ValueError):
    """
    A geometric primitive was constructed from inputs which do not define it,
    e.g. a line with a zero direction vector or a polyhedron which is not closed.
    """

    msg: str


@attrs(auto_exc=True, auto_attribs=True)
class IntersectionInvariantError(RuntimeError):
    """
    An intersection produced a result which is structurally impossible,
    such as a line meeting a convex polygon in three points.

    This always indicates a bug in the geometry kernel.
    """

    msg: str


@attrs(auto_exc=True, auto_attribs=True)
class OutOfGamutError(RuntimeError):
    """
    A colour's confusion line does not cross the sRGB gamut in a proper segment.
    """

    msg: str
