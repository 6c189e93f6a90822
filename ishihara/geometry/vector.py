"""
Three-dimensional vectors with tolerance-aware comparisons.

We only deal with a handful of vectors at a time (the corners of the RGB gamut in LMS space),
so this favors clarity over speed.
"""
from math import sqrt
from typing import Iterator, Sequence, Tuple, Union

import numpy as np
from attr import attrib, attrs
from attr.validators import instance_of

from ishihara.math_utils import approx_equal, approx_zero


@attrs(frozen=True, slots=True, eq=False)
class Vector:
    """
    A vector in 3D space.

    Equality is approximate; see `ishihara.math_utils.approx_equal`.
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
    def of(coords: Union[Sequence[float], np.ndarray]) -> "Vector":
        if len(coords) != 3:
            raise ValueError(f"A vector needs exactly three coordinates but got {coords}")
        return Vector(coords[0], coords[1], coords[2])

    @staticmethod
    def between(start, end) -> "Vector":
        """
        The vector from point *start* to point *end*.
        """
        return end.vector - start.vector

    @staticmethod
    def zero() -> "Vector":
        return Vector(0.0, 0.0, 0.0)

    @staticmethod
    def x_unit() -> "Vector":
        return Vector(1.0, 0.0, 0.0)

    @staticmethod
    def y_unit() -> "Vector":
        return Vector(0.0, 1.0, 0.0)

    @staticmethod
    def z_unit() -> "Vector":
        return Vector(0.0, 0.0, 1.0)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index: int) -> float:
        return self.to_tuple()[index]

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector":
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector":
        return Vector(-self.x, -self.y, -self.z)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return (
            approx_equal(self.x, other.x)
            and approx_equal(self.y, other.y)
            and approx_equal(self.z, other.z)
        )

    # equality is approximate, so there is no hash consistent with it
    __hash__ = None  # type: ignore

    def dot(self, other: "Vector") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector") -> "Vector":
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return sqrt(self.dot(self))

    def is_zero(self) -> bool:
        return self == Vector.zero()

    def normalized(self) -> "Vector":
        """
        A vector pointing in the same direction with length 1.
        """
        length = self.length()
        if approx_zero(length):
            raise ValueError("Cannot normalize the zero vector")
        return self * (1.0 / length)

    def parallel(self, other: "Vector") -> bool:
        """
        Whether the two vectors point along the same line, in either sense.

        The zero vector is parallel to everything.
        """
        if self.is_zero() or other.is_zero():
            return True
        # sine of the angle between them
        sine = self.cross(other).length() / (self.length() * other.length())
        return approx_zero(sine)

    def orthogonal(self, other: "Vector") -> bool:
        return approx_zero(self.dot(other))

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_array(self) -> np.ndarray:
        return np.array(self.to_tuple(), dtype=float)
