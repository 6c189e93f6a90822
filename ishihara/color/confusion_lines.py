"""
Confusion lines: ramps of colours which a dichromat cannot tell apart.

For a given deficiency, every colour on a line through LMS space parallel to the missing cone's
axis excites the two remaining cone types identically.  We clip such lines to the sRGB gamut,
which is a parallelepiped in LMS space, using the geometry kernel.
"""
import logging
from typing import Optional, Tuple

import numpy as np
from attr import attrib, attrs
from attr.validators import in_, instance_of
from immutablecollections import ImmutableDict, immutabledict
from vistautils.preconditions import check_arg

from ishihara.color import Deficiency
from ishihara.color.conversion import (
    DEFAULT_LMS_MODEL,
    PRIMARIES,
    Color,
    ColorLike,
    ColorSpace,
    LMSModel,
    convert,
    to_hex_string,
)
from ishihara.errors import OutOfGamutError
from ishihara.geometry import (
    Line,
    Point,
    Polyhedron,
    Segment,
    Vector,
    intersection,
    parallelepiped,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFUSION_LINE_COUNT = 11

# The LMS axis along which each dichromat confuses colours.
CONFUSION_AXES: ImmutableDict[Deficiency, Color] = immutabledict(
    [
        (Deficiency.PROTAN, (1.0, 0.0, 0.0)),
        (Deficiency.DEUTAN, (0.0, 1.0, 0.0)),
        (Deficiency.TRITAN, (0.0, 0.0, 1.0)),
    ]
)

# Seed colours for each deficiency's lines are interpolated (in XYZ) between two primaries,
# over a sub-range which keeps the seeds off the edges of the gamut.
SEED_PRIMARIES: ImmutableDict[Deficiency, Tuple[str, str]] = immutabledict(
    [
        (Deficiency.PROTAN, ("blue", "green")),
        (Deficiency.DEUTAN, ("blue", "green")),
        (Deficiency.TRITAN, ("green", "red")),
    ]
)
SEED_BOUNDS: ImmutableDict[Deficiency, Tuple[float, float]] = immutabledict(
    [
        (Deficiency.PROTAN, (0.15, 0.98)),
        (Deficiency.DEUTAN, (0.2, 0.98)),
        (Deficiency.TRITAN, (0.1, 0.9)),
    ]
)


def srgb_gamut_in_lms(model: LMSModel = DEFAULT_LMS_MODEL) -> Polyhedron:
    """
    The RGB unit cube mapped into LMS space.

    The mapping is linear, so the cube becomes the parallelepiped spanned by the images of
    the red, green and blue corners, with its origin at the image of black.
    """
    black = Vector.of(convert(PRIMARIES["black"], ColorSpace.LINEAR_RGB, ColorSpace.LMS, model))
    (red, green, blue) = (
        Vector.of(convert(PRIMARIES[primary], ColorSpace.LINEAR_RGB, ColorSpace.LMS, model))
        for primary in ("red", "green", "blue")
    )
    return parallelepiped(Point.at(black), red - black, green - black, blue - black)


def lms_confusion_segment(
    lms: ColorLike,
    deficiency: Deficiency,
    model: LMSModel = DEFAULT_LMS_MODEL,
    *,
    gamut: Optional[Polyhedron] = None,
) -> Tuple[Vector, Vector]:
    """
    The endpoints of the confusion line through the LMS colour *lms*, clipped to the sRGB gamut.

    The endpoint nearer the LMS origin comes first.  Raises `OutOfGamutError` if the line
    does not cross the gamut in a proper segment.
    """
    if gamut is None:
        gamut = srgb_gamut_in_lms(model)
    line = Line(Vector.of(lms), Vector.of(CONFUSION_AXES[deficiency]))
    clipped = intersection(line, gamut)
    if not isinstance(clipped, Segment):
        raise OutOfGamutError(
            f"The {deficiency.value} confusion line through LMS colour {tuple(lms)} "
            f"meets the RGB gamut in {clipped!r} rather than a segment"
        )
    start = clipped.start.vector
    end = clipped.end.vector
    return (start, end) if start.length() < end.length() else (end, start)


def _check_percentage(percentage: float) -> None:
    check_arg(
        0.0 <= percentage <= 1.0, "Percentage must be in [0, 1] but got %s", (percentage,)
    )


@attrs(frozen=True, slots=True, eq=False)
class ConfusionLine:
    """
    A ramp of colours along one confusion line.

    Calling it with a percentage in [0, 1] gives the hex colour that far along the line,
    interpolating linearly in LMS space from `start` to `end`.
    """

    deficiency: Deficiency = attrib(validator=in_(Deficiency))
    start: Vector = attrib(validator=instance_of(Vector))
    end: Vector = attrib(validator=instance_of(Vector))
    model: LMSModel = attrib(validator=instance_of(LMSModel), default=DEFAULT_LMS_MODEL)

    def lms_at(self, percentage: float) -> Color:
        _check_percentage(percentage)
        return (self.start * (1.0 - percentage) + self.end * percentage).to_tuple()

    def coords(self, percentage: float, space: ColorSpace = ColorSpace.SRGB) -> Color:
        """
        The colour *percentage* of the way along this line, as coordinates in *space*.
        """
        return convert(self.lms_at(percentage), ColorSpace.LMS, space, self.model)

    def __call__(self, percentage: float) -> str:
        return to_hex_string(self.coords(percentage))


def create_confusion_line(
    srgb: ColorLike,
    deficiency: Deficiency,
    model: LMSModel = DEFAULT_LMS_MODEL,
    *,
    gamut: Optional[Polyhedron] = None,
) -> ConfusionLine:
    """
    The confusion line for *deficiency* passing through the sRGB colour *srgb*.
    """
    lms = convert(srgb, ColorSpace.SRGB, ColorSpace.LMS, model)
    (start, end) = lms_confusion_segment(lms, deficiency, model, gamut=gamut)
    return ConfusionLine(deficiency, start, end, model)


def confusion_line_seeds(
    deficiency: Deficiency, count: int = DEFAULT_CONFUSION_LINE_COUNT
) -> Tuple[Color, ...]:
    """
    *count* evenly spaced seed colours, in linear RGB, for *deficiency*'s confusion lines.

    Both ends of the deficiency's seed range are included.
    """
    check_arg(count > 0, "Need a positive number of confusion lines but got %s", (count,))
    (first, second) = (np.array(PRIMARIES[name]) for name in SEED_PRIMARIES[deficiency])
    # XYZ is a linear image of linear RGB, so this is the same ramp as one interpolated in XYZ
    (low, high) = SEED_BOUNDS[deficiency]
    return tuple(
        tuple(float(channel) for channel in first * (1.0 - fraction) + second * fraction)
        for fraction in np.linspace(low, high, count)
    )


def generate_confusion_lines(
    deficiency: Deficiency,
    count: int = DEFAULT_CONFUSION_LINE_COUNT,
    model: LMSModel = DEFAULT_LMS_MODEL,
) -> Tuple[ConfusionLine, ...]:
    """
    *count* confusion lines for *deficiency*, spread across the gamut.
    """
    deficiency = Deficiency.parse(deficiency)
    gamut = srgb_gamut_in_lms(model)
    ret = tuple(
        create_confusion_line(
            convert(seed, ColorSpace.LINEAR_RGB, ColorSpace.SRGB, model),
            deficiency,
            model,
            gamut=gamut,
        )
        for seed in confusion_line_seeds(deficiency, count)
    )
    logger.debug("Generated %s %s confusion lines", len(ret), deficiency.value)
    return ret
