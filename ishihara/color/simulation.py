"""
Simulation of colour vision deficiencies.

Dichromacies are simulated with the method of Brettel, Viénot and Mollon (1997), using the
precomputed linear RGB projections published by libDaltonLens
(https://github.com/DaltonLens/libDaltonLens).  Anomalous trichromacy is approximated by
blending the dichromat's view with the original colour according to a severity in [0, 1].
"""
from enum import Enum
from functools import partial
from typing import Callable, Optional, Union

import numpy as np
from attr import attrib, attrs
from immutablecollections import ImmutableDict, immutabledict

from ishihara.color import Deficiency
from ishihara.color.conversion import (
    Color,
    ColorLike,
    linear_rgb_to_srgb,
    parse_hex_color,
    srgb_to_linear_rgb,
    to_hex_string,
)
from ishihara.math_utils import clip

ColorInput = Union[str, ColorLike]

# Rec. 709 weights for the luminance of a linear RGB colour
LUMINANCE_WEIGHTS = (0.2126, 0.7152, 0.0722)


def _read_only_array(values) -> np.ndarray:
    ret = np.array(values, dtype=float)
    ret.setflags(write=False)
    return ret


@attrs(frozen=True, slots=True, eq=False)
class BrettelParameters:
    """
    The two half-plane projections for one dichromacy, in linear RGB.

    `first_projection` applies to colours on the non-negative side of the plane separating
    the two half-planes, `second_projection` to the rest.
    """

    first_projection: np.ndarray = attrib(converter=_read_only_array)
    second_projection: np.ndarray = attrib(converter=_read_only_array)
    separation_plane_normal: np.ndarray = attrib(converter=_read_only_array)

    def projection_for(self, linear_rgb: np.ndarray) -> np.ndarray:
        if float(np.dot(linear_rgb, self.separation_plane_normal)) >= 0.0:
            return self.first_projection
        return self.second_projection


BRETTEL_PARAMETERS: ImmutableDict[Deficiency, BrettelParameters] = immutabledict(
    [
        (
            Deficiency.PROTAN,
            BrettelParameters(
                first_projection=[
                    [0.1451, 1.20165, -0.34675],
                    [0.10447, 0.85316, 0.04237],
                    [0.00429, -0.00603, 1.00174],
                ],
                second_projection=[
                    [0.14115, 1.16782, -0.30897],
                    [0.10495, 0.8573, 0.03776],
                    [0.00431, -0.00586, 1.00155],
                ],
                separation_plane_normal=[0.00048, 0.00416, -0.00464],
            ),
        ),
        (
            Deficiency.DEUTAN,
            BrettelParameters(
                first_projection=[
                    [0.36198, 0.86755, -0.22953],
                    [0.26099, 0.64512, 0.09389],
                    [-0.01975, 0.02686, 0.99289],
                ],
                second_projection=[
                    [0.37009, 0.8854, -0.25549],
                    [0.25767, 0.63782, 0.10451],
                    [-0.0195, 0.02741, 0.99209],
                ],
                separation_plane_normal=[-0.00293, -0.00645, 0.00938],
            ),
        ),
        (
            Deficiency.TRITAN,
            BrettelParameters(
                first_projection=[
                    [1.01354, 0.14268, -0.15622],
                    [-0.01181, 0.87561, 0.13619],
                    [0.07707, 0.81208, 0.11085],
                ],
                second_projection=[
                    [0.93337, 0.19999, -0.13336],
                    [0.05809, 0.82565, 0.11626],
                    [-0.37923, 1.13825, 0.24098],
                ],
                separation_plane_normal=[0.0396, -0.02831, -0.01129],
            ),
        ),
    ]
)


def _blend_to_srgb(simulated: np.ndarray, original: np.ndarray, severity: float) -> Color:
    blended = simulated * severity + original * (1.0 - severity)
    (red, green, blue) = linear_rgb_to_srgb(blended)
    return (clip(red, 0.0, 1.0), clip(green, 0.0, 1.0), clip(blue, 0.0, 1.0))


def brettel(srgb: ColorLike, deficiency: Deficiency, severity: float = 1.0) -> Color:
    """
    How the sRGB colour *srgb* appears to someone with *deficiency* at the given *severity*.

    A severity of 0 gives back the original colour and 1 gives the full dichromat simulation.
    """
    severity = clip(severity, 0.0, 1.0)
    linear_rgb = np.array(srgb_to_linear_rgb(srgb))
    projection = BRETTEL_PARAMETERS[Deficiency.parse(deficiency)].projection_for(linear_rgb)
    return _blend_to_srgb(projection @ linear_rgb, linear_rgb, severity)


def monochrome(srgb: ColorLike, severity: float = 1.0) -> Color:
    """
    The sRGB colour *srgb* as seen with (partial, for *severity* < 1) monochromacy.

    Full monochromacy maps each colour to the grey of equal luminance.
    """
    severity = clip(severity, 0.0, 1.0)
    linear_rgb = np.array(srgb_to_linear_rgb(srgb))
    luminance = float(np.dot(LUMINANCE_WEIGHTS, linear_rgb))
    return _blend_to_srgb(np.full(3, luminance), linear_rgb, severity)


def _preserving_representation(
    color: ColorInput, transform: Callable[[ColorLike], Color]
) -> Union[str, Color]:
    if isinstance(color, str):
        return to_hex_string(transform(parse_hex_color(color)))
    return transform(color)


def simulate_color_blindness(
    color: ColorInput, deficiency: Union[Deficiency, str], severity: float = 1.0
) -> Union[str, Color]:
    """
    Apply `brettel` to *color*, which may be a hex string or an sRGB triple.

    The result has the same representation as the input.
    """
    deficiency = Deficiency.parse(deficiency)
    return _preserving_representation(
        color, partial(brettel, deficiency=deficiency, severity=severity)
    )


class Simulation(Enum):
    """
    The commonly named colour vision deficiencies.

    The "-omaly" forms are partial deficiencies, simulated at a severity of 0.6.
    """

    NORMAL = "normal"
    PROTANOPIA = "protanopia"
    PROTANOMALY = "protanomaly"
    DEUTERANOPIA = "deuteranopia"
    DEUTERANOMALY = "deuteranomaly"
    TRITANOPIA = "tritanopia"
    TRITANOMALY = "tritanomaly"
    ACHROMATOPSIA = "achromatopsia"
    ACHROMATOMALY = "achromatomaly"

    def apply(self, color: ColorInput) -> Union[str, Color]:
        """
        *color* (a hex string or an sRGB triple) as seen with this deficiency.
        """
        transform = _SIMULATION_TRANSFORMS[self]
        if transform is None:
            return color if isinstance(color, str) else tuple(float(v) for v in color)
        return _preserving_representation(color, transform)


ANOMALY_SEVERITY = 0.6

_SIMULATION_TRANSFORMS: ImmutableDict[
    Simulation, Optional[Callable[[ColorLike], Color]]
] = immutabledict(
    [
        (Simulation.NORMAL, None),
        (Simulation.PROTANOPIA, partial(brettel, deficiency=Deficiency.PROTAN, severity=1.0)),
        (
            Simulation.PROTANOMALY,
            partial(brettel, deficiency=Deficiency.PROTAN, severity=ANOMALY_SEVERITY),
        ),
        (Simulation.DEUTERANOPIA, partial(brettel, deficiency=Deficiency.DEUTAN, severity=1.0)),
        (
            Simulation.DEUTERANOMALY,
            partial(brettel, deficiency=Deficiency.DEUTAN, severity=ANOMALY_SEVERITY),
        ),
        (Simulation.TRITANOPIA, partial(brettel, deficiency=Deficiency.TRITAN, severity=1.0)),
        (
            Simulation.TRITANOMALY,
            partial(brettel, deficiency=Deficiency.TRITAN, severity=ANOMALY_SEVERITY),
        ),
        (Simulation.ACHROMATOPSIA, partial(monochrome, severity=1.0)),
        (Simulation.ACHROMATOMALY, partial(monochrome, severity=ANOMALY_SEVERITY)),
    ]
)
