"""
Conversions between the sRGB, linear RGB, CIE XYZ and LMS colour spaces.

Colours are plain 3-tuples of floats.  Conversions involving LMS depend on a cone-response model
(`LMSModel`); `SMITH_POKORNY_75` is used unless another is requested.
"""
from enum import Enum
from typing import Sequence, Tuple, Union

import numpy as np
from attr import attrib, attrs
from attr.validators import instance_of
from immutablecollections import ImmutableDict, immutabledict
from vistautils.preconditions import check_arg

from ishihara.math_utils import clip, round_to

Color = Tuple[float, float, float]
ColorLike = Union[Sequence[float], np.ndarray]


class ColorSpace(Enum):
    SRGB = "srgb"
    LINEAR_RGB = "linear-rgb"
    LMS = "lms"
    XYZ = "xyz"


def _to_matrix(values) -> np.ndarray:
    ret = np.array(values, dtype=float)
    check_arg(ret.shape == (3, 3), "Expected a 3x3 matrix but got shape %s", (ret.shape,))
    ret.setflags(write=False)
    return ret


def _frozen(matrix: np.ndarray) -> np.ndarray:
    matrix.setflags(write=False)
    return matrix


@attrs(frozen=True, slots=True, eq=False)
class LMSModel:
    """
    A model of the cone responses, relating LMS to CIE XYZ and linear RGB.

    Only *lms_from_xyz* and *xyz_from_linear_rgb* are specified; the other matrices are derived
    when the model is constructed.  All matrices are read-only.
    """

    name: str = attrib(validator=instance_of(str))
    lms_from_xyz: np.ndarray = attrib(converter=_to_matrix)
    xyz_from_linear_rgb: np.ndarray = attrib(converter=_to_matrix)
    xyz_from_lms: np.ndarray = attrib(init=False)
    linear_rgb_from_xyz: np.ndarray = attrib(init=False)
    lms_from_linear_rgb: np.ndarray = attrib(init=False)
    linear_rgb_from_lms: np.ndarray = attrib(init=False)

    @xyz_from_lms.default
    def _init_xyz_from_lms(self) -> np.ndarray:
        return _frozen(np.linalg.inv(self.lms_from_xyz))

    @linear_rgb_from_xyz.default
    def _init_linear_rgb_from_xyz(self) -> np.ndarray:
        return _frozen(np.linalg.inv(self.xyz_from_linear_rgb))

    @lms_from_linear_rgb.default
    def _init_lms_from_linear_rgb(self) -> np.ndarray:
        return _frozen(self.lms_from_xyz @ self.xyz_from_linear_rgb)

    @linear_rgb_from_lms.default
    def _init_linear_rgb_from_lms(self) -> np.ndarray:
        return _frozen(np.linalg.inv(self.lms_from_linear_rgb))

    def __repr__(self) -> str:
        return f"LMSModel({self.name})"


SMITH_POKORNY_75 = LMSModel(
    "Smith & Pokorny 1975",
    lms_from_xyz=[
        [0.15514, 0.54312, -0.03286],
        [-0.15514, 0.45684, 0.03286],
        [0.0, 0.0, 0.01608],
    ],
    xyz_from_linear_rgb=[
        [0.409568, 0.355041, 0.179167],
        [0.213389, 0.706743, 0.079868],
        [0.0186297, 0.11462, 0.912367],
    ],
)

HUNT_POINTER_ESTEVEZ = LMSModel(
    "Hunt-Pointer-Estevez",
    lms_from_xyz=[[0.4002, 0.7076, -0.0808], [-0.2263, 1.1653, 0.0457], [0.0, 0.0, 0.9182]],
    xyz_from_linear_rgb=[
        [0.412456, 0.3575761, 0.1804375],
        [0.212672, 0.7151522, 0.072175],
        [0.019333, 0.119192, 0.9503041],
    ],
)

DEFAULT_LMS_MODEL = SMITH_POKORNY_75


def _as_array(color: ColorLike) -> np.ndarray:
    ret = np.asarray(color, dtype=float)
    check_arg(ret.shape == (3,), "A colour needs exactly three channels but got %s", (color,))
    return ret


def _as_color(values: np.ndarray) -> Color:
    return (float(values[0]), float(values[1]), float(values[2]))


def srgb_to_linear_rgb(rgb: ColorLike) -> Color:
    """
    Removes the sRGB gamma correction.
    """
    values = _as_array(rgb)
    return _as_color(
        np.where(values > 0.04045, ((values + 0.055) / 1.055) ** 2.4, values / 12.92)
    )


def linear_rgb_to_srgb(rgb: ColorLike) -> Color:
    """
    Applies the sRGB gamma correction.
    """
    values = _as_array(rgb)
    # clamped so that the unused branch stays finite for negative channels
    powered = np.power(np.maximum(values, 0.0031308), 1.0 / 2.4) * 1.055 - 0.055
    return _as_color(np.where(values > 0.0031308, powered, values * 12.92))


def linear_rgb_to_lms(rgb: ColorLike, model: LMSModel = DEFAULT_LMS_MODEL) -> Color:
    return _as_color(model.lms_from_linear_rgb @ _as_array(rgb))


def lms_to_linear_rgb(lms: ColorLike, model: LMSModel = DEFAULT_LMS_MODEL) -> Color:
    """
    Converts LMS to linear RGB, forcing the result into the RGB gamut.

    Colours with a negative channel are desaturated (moved towards white by subtracting the
    most negative channel from all three) instead of just being clipped.
    The result is then clipped to [0, 1].
    """
    rgb = model.linear_rgb_from_lms @ _as_array(lms)
    shift = min(0.0, float(rgb.min()))
    return _as_color(np.clip(rgb - shift, 0.0, 1.0))


def linear_rgb_to_xyz(rgb: ColorLike, model: LMSModel = DEFAULT_LMS_MODEL) -> Color:
    return _as_color(model.xyz_from_linear_rgb @ _as_array(rgb))


def xyz_to_linear_rgb(xyz: ColorLike, model: LMSModel = DEFAULT_LMS_MODEL) -> Color:
    return _as_color(model.linear_rgb_from_xyz @ _as_array(xyz))


def xyz_to_lms(xyz: ColorLike, model: LMSModel = DEFAULT_LMS_MODEL) -> Color:
    return _as_color(model.lms_from_xyz @ _as_array(xyz))


def lms_to_xyz(lms: ColorLike, model: LMSModel = DEFAULT_LMS_MODEL) -> Color:
    return _as_color(model.xyz_from_lms @ _as_array(lms))


def _to_linear_rgb(color: ColorLike, source: ColorSpace, model: LMSModel) -> Color:
    if source is ColorSpace.SRGB:
        return srgb_to_linear_rgb(color)
    elif source is ColorSpace.LMS:
        return lms_to_linear_rgb(color, model)
    elif source is ColorSpace.XYZ:
        return xyz_to_linear_rgb(color, model)
    return _as_color(_as_array(color))


def _from_linear_rgb(rgb: Color, target: ColorSpace, model: LMSModel) -> Color:
    if target is ColorSpace.SRGB:
        return linear_rgb_to_srgb(rgb)
    elif target is ColorSpace.LMS:
        return linear_rgb_to_lms(rgb, model)
    elif target is ColorSpace.XYZ:
        return linear_rgb_to_xyz(rgb, model)
    return rgb


def convert(
    color: ColorLike,
    source: ColorSpace,
    target: ColorSpace,
    model: LMSModel = DEFAULT_LMS_MODEL,
) -> Color:
    """
    Convert *color* from the *source* colour space to the *target* one.

    Every conversion passes through linear RGB except the one between XYZ and LMS,
    which is a direct matrix product.  Leaving LMS for any RGB space desaturates
    out-of-gamut colours (see `lms_to_linear_rgb`).
    """
    if source is target:
        return _as_color(_as_array(color))
    if source is ColorSpace.XYZ and target is ColorSpace.LMS:
        return xyz_to_lms(color, model)
    if source is ColorSpace.LMS and target is ColorSpace.XYZ:
        return lms_to_xyz(color, model)
    return _from_linear_rgb(_to_linear_rgb(color, source, model), target, model)


@attrs(frozen=True, slots=True)
class ColorSpaceConverter:
    """
    `convert` bound to a particular `LMSModel`.
    """

    model: LMSModel = attrib(validator=instance_of(LMSModel), default=DEFAULT_LMS_MODEL)

    def __call__(self, color: ColorLike, source: ColorSpace, target: ColorSpace) -> Color:
        return convert(color, source, target, self.model)


def to_hex_string(rgb: ColorLike) -> str:
    """
    Format an sRGB colour with channels in [0, 1] as ``#rrggbb``.

    Channels outside [0, 1] are clipped.
    """
    return "#" + "".join(
        f"{int(round_to(clip(value, 0.0, 1.0) * 255, 0)):02x}" for value in _as_array(rgb)
    )


_HEX_DIGITS = frozenset("0123456789abcdef")


def parse_hex_color(hex_string: str) -> Color:
    """
    Parse ``#rrggbb`` or the short form ``#rgb`` into an sRGB colour with channels in [0, 1].
    """
    digits = hex_string.strip().lower()
    if digits.startswith("#"):
        digits = digits[1:]
    if len(digits) == 3:
        digits = "".join(digit * 2 for digit in digits)
    if len(digits) != 6 or not set(digits) <= _HEX_DIGITS:
        raise ValueError(f"Not a hex colour: {hex_string!r}")
    return (
        int(digits[0:2], 16) / 255.0,
        int(digits[2:4], 16) / 255.0,
        int(digits[4:6], 16) / 255.0,
    )


# Reference primaries of the sRGB gamut, in linear RGB.
PRIMARIES: ImmutableDict[str, Color] = immutabledict(
    [
        ("black", (0.0, 0.0, 0.0)),
        ("red", (1.0, 0.0, 0.0)),
        ("green", (0.0, 1.0, 0.0)),
        ("blue", (0.0, 0.0, 1.0)),
        ("white", (1.0, 1.0, 1.0)),
    ]
)
