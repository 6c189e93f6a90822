from random import Random

import numpy as np
import pytest

from ishihara.color.conversion import (
    HUNT_POINTER_ESTEVEZ,
    SMITH_POKORNY_75,
    ColorSpace,
    ColorSpaceConverter,
    LMSModel,
    convert,
    linear_rgb_to_lms,
    lms_to_linear_rgb,
    parse_hex_color,
    srgb_to_linear_rgb,
    to_hex_string,
)


def _random_colors(count: int):
    rng = Random(0)
    return [(rng.random(), rng.random(), rng.random()) for _ in range(count)]


@pytest.mark.parametrize("intermediate", [ColorSpace.LINEAR_RGB, ColorSpace.LMS, ColorSpace.XYZ])
def test_srgb_round_trips(intermediate):
    for color in _random_colors(1000):
        there = convert(color, ColorSpace.SRGB, intermediate)
        back = convert(there, intermediate, ColorSpace.SRGB)
        assert back == pytest.approx(color, abs=1e-6)


def test_srgb_transfer_function():
    assert srgb_to_linear_rgb((0.5, 0.0, 1.0)) == pytest.approx((0.21404, 0.0, 1.0), abs=1e-5)
    assert srgb_to_linear_rgb((0.02, 0.02, 0.02)) == pytest.approx((0.02 / 12.92,) * 3)


def test_leaving_lms_desaturates_out_of_gamut_colors():
    lms = linear_rgb_to_lms((-0.2, 0.5, 0.3))
    assert lms_to_linear_rgb(lms) == pytest.approx((0.0, 0.7, 0.5), abs=1e-9)
    too_bright = linear_rgb_to_lms((1.5, 0.5, 0.5))
    assert lms_to_linear_rgb(too_bright) == pytest.approx((1.0, 0.5, 0.5), abs=1e-9)


def test_xyz_of_white():
    white = convert((1.0, 1.0, 1.0), ColorSpace.SRGB, ColorSpace.XYZ, HUNT_POINTER_ESTEVEZ)
    assert white == pytest.approx((0.9505, 1.0, 1.089), abs=1e-3)


def test_models_are_consistent():
    for model in (SMITH_POKORNY_75, HUNT_POINTER_ESTEVEZ):
        assert np.allclose(model.lms_from_linear_rgb @ model.linear_rgb_from_lms, np.eye(3))
        assert np.allclose(model.xyz_from_lms @ model.lms_from_xyz, np.eye(3))
        with pytest.raises(ValueError):
            model.lms_from_xyz[0, 0] = 1.0


def test_model_needs_square_matrices():
    with pytest.raises(ValueError):
        LMSModel("broken", lms_from_xyz=[[1.0, 0.0], [0.0, 1.0]], xyz_from_linear_rgb=np.eye(3))


def test_converter_is_bound_to_its_model():
    converter = ColorSpaceConverter(HUNT_POINTER_ESTEVEZ)
    color = (0.2, 0.4, 0.6)
    assert converter(color, ColorSpace.SRGB, ColorSpace.LMS) == pytest.approx(
        convert(color, ColorSpace.SRGB, ColorSpace.LMS, HUNT_POINTER_ESTEVEZ)
    )
    assert converter(color, ColorSpace.LMS, ColorSpace.LMS) == color


def test_hex_strings():
    assert to_hex_string((1.0, 0.0, 0.5)) == "#ff0080"
    assert to_hex_string((1.2, -0.1, 0.0)) == "#ff0000"
    assert parse_hex_color("#ff0080") == pytest.approx((1.0, 0.0, 128 / 255))
    assert parse_hex_color("#FFF") == (1.0, 1.0, 1.0)
    assert to_hex_string(parse_hex_color("#12ab34")) == "#12ab34"
    for bad in ("#12345", "zzzzzz", ""):
        with pytest.raises(ValueError):
            parse_hex_color(bad)
