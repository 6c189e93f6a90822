"""
CIE xy chromaticity coordinates and the copunctal points of the dichromacies.
"""
from typing import Tuple

import numpy as np
from immutablecollections import ImmutableDict, immutabledict
from vistautils.preconditions import check_arg

from ishihara.color import Deficiency
from ishihara.color.confusion_lines import CONFUSION_AXES
from ishihara.color.conversion import (
    DEFAULT_LMS_MODEL,
    Color,
    ColorLike,
    LMSModel,
    lms_to_xyz,
)
from ishihara.math_utils import approx_zero

Chromaticity = Tuple[float, float]

# xyY coordinates of the sRGB primaries
SRGB_RED_XYY = (0.64, 0.33, 0.2126)
SRGB_GREEN_XYY = (0.3, 0.6, 0.7152)
SRGB_BLUE_XYY = (0.15, 0.06, 0.0722)

# Published values disagree for the deutan point (1.08, -0.8 is also quoted);
# this one agrees with the Smith & Pokorny cone fundamentals used for the confusion lines.
COPUNCTAL_POINTS: ImmutableDict[Deficiency, Chromaticity] = immutabledict(
    [
        (Deficiency.PROTAN, (0.747, 0.253)),
        (Deficiency.DEUTAN, (1.40, -0.40)),
        (Deficiency.TRITAN, (0.171, 0.0)),
    ]
)


def xyz_to_xy(xyz: ColorLike) -> Chromaticity:
    (x, y, z) = (float(value) for value in xyz)  # pylint:disable=invalid-name
    total = x + y + z
    check_arg(not approx_zero(total), "Black has no chromaticity: %s", (xyz,))
    return (x / total, y / total)


def barycentric(
    point: Chromaticity, triangle: Tuple[Chromaticity, Chromaticity, Chromaticity]
) -> Color:
    """
    The barycentric coordinates of *point* with respect to *triangle*.
    """
    ((x1, y1), (x2, y2), (x3, y3)) = triangle  # pylint:disable=invalid-name
    determinant = (y2 - y3) * (x1 - x3) + (x3 - x2) * (y1 - y3)
    check_arg(not approx_zero(determinant), "Degenerate triangle %s", (triangle,))
    first = ((y2 - y3) * (point[0] - x3) + (x3 - x2) * (point[1] - y3)) / determinant
    second = ((y3 - y1) * (point[0] - x3) + (x1 - x3) * (point[1] - y3)) / determinant
    return (first, second, 1.0 - first - second)


def xy_to_xyz(xy: Chromaticity) -> Color:  # pylint:disable=invalid-name
    """
    Lift a chromaticity back to XYZ.

    Chromaticity alone does not determine luminance, so Y is interpolated from the luminances
    of the sRGB primaries using the barycentric coordinates of *xy* in the sRGB gamut triangle.
    """
    (x, y) = xy  # pylint:disable=invalid-name
    check_arg(not approx_zero(y), "Cannot lift a chromaticity with y == 0: %s", (xy,))
    weights = barycentric(
        (x, y),
        (SRGB_RED_XYY[:2], SRGB_GREEN_XYY[:2], SRGB_BLUE_XYY[:2]),
    )
    luminance = float(
        np.dot(weights, (SRGB_RED_XYY[2], SRGB_GREEN_XYY[2], SRGB_BLUE_XYY[2]))
    )
    return (luminance * x / y, luminance, luminance * (1.0 - x - y) / y)


def copunctal_point(
    deficiency: Deficiency, model: LMSModel = DEFAULT_LMS_MODEL
) -> Chromaticity:
    """
    The chromaticity at which all of *deficiency*'s confusion lines meet, according to *model*.

    This is the chromaticity of the missing cone's axis in LMS space.
    """
    return xyz_to_xy(lms_to_xyz(CONFUSION_AXES[deficiency], model))


def line_intersection_2d(
    first: Tuple[Chromaticity, Chromaticity], second: Tuple[Chromaticity, Chromaticity]
) -> Chromaticity:
    """
    The point where the line through the two points of *first* crosses the line through
    the two points of *second*.
    """
    ((x1, y1), (x2, y2)) = first  # pylint:disable=invalid-name
    ((x3, y3), (x4, y4)) = second  # pylint:disable=invalid-name
    denominator = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    check_arg(
        not approx_zero(denominator), "Lines %s and %s are parallel", (first, second)
    )
    first_cross = x1 * y2 - y1 * x2
    second_cross = x3 * y4 - y3 * x4
    return (
        (first_cross * (x3 - x4) - (x1 - x2) * second_cross) / denominator,
        (first_cross * (y3 - y4) - (y1 - y2) * second_cross) / denominator,
    )
