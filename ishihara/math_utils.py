"""
Numeric helpers shared by the geometry kernel and the colour model.

All "equality" in the geometry kernel goes through `approx_equal` and friends so that a single
tolerance governs point coincidence, parallelism and containment tests.
"""
import math
from typing import Optional

from vistautils.preconditions import check_arg

DEFAULT_EPSILON = 1e-10

_epsilon = DEFAULT_EPSILON


def get_epsilon() -> float:
    return _epsilon


def set_epsilon(epsilon: float) -> None:
    """
    Change the tolerance used by every approximate comparison in this package.
    """
    global _epsilon  # pylint:disable=global-statement
    check_arg(epsilon > 0, "Epsilon must be positive but got %s", (epsilon,))
    _epsilon = float(epsilon)


def approx_equal(a: float, b: float, epsilon: Optional[float] = None) -> bool:
    """
    Whether *a* and *b* agree to within *epsilon*.

    The tolerance is absolute for values of magnitude below one and relative above,
    so coordinates near the origin are not compared more loosely than large ones.
    """
    tolerance = _epsilon if epsilon is None else epsilon
    return math.isclose(a, b, rel_tol=tolerance, abs_tol=tolerance)


def approx_zero(value: float, epsilon: Optional[float] = None) -> bool:
    return approx_equal(value, 0.0, epsilon)


def approx_less(a: float, b: float, epsilon: Optional[float] = None) -> bool:
    """
    Whether *a* is smaller than *b* by more than the tolerance.
    """
    return a < b and not approx_equal(a, b, epsilon)


def approx_greater(a: float, b: float, epsilon: Optional[float] = None) -> bool:
    """
    Whether *a* is larger than *b* by more than the tolerance.
    """
    return a > b and not approx_equal(a, b, epsilon)


def clip(value: float, low: float, high: float) -> float:
    check_arg(low <= high, "Empty clipping range [%s, %s]", (low, high))
    return low if value < low else high if value > high else value


def lerp(start: float, end: float, fraction: float) -> float:
    return start * (1.0 - fraction) + end * fraction


def round_to(value: float, digits: int) -> float:
    # floor(x + 0.5) instead of round() to avoid banker's rounding on hex channels
    scale = 10.0 ** digits
    return math.floor(value * scale + 0.5) / scale
