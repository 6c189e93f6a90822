import re

import pytest

from ishihara.color import Deficiency
from ishihara.color.confusion_lines import (
    DEFAULT_CONFUSION_LINE_COUNT,
    confusion_line_seeds,
    create_confusion_line,
    generate_confusion_lines,
    lms_confusion_segment,
)
from ishihara.color.conversion import DEFAULT_LMS_MODEL, ColorSpace, convert
from ishihara.errors import OutOfGamutError

_HEX_COLOR = re.compile("^#[0-9a-f]{6}$")


def test_tritan_lines():
    lines = generate_confusion_lines(Deficiency.TRITAN, 6)
    assert len(lines) == 6
    for line in lines:
        assert line.deficiency is Deficiency.TRITAN
        assert _HEX_COLOR.match(line(0.0))
        assert _HEX_COLOR.match(line(1.0))
        assert line(0.0) != line(1.0)


def test_default_line_count():
    assert len(generate_confusion_lines("protan")) == DEFAULT_CONFUSION_LINE_COUNT


@pytest.mark.parametrize("deficiency", list(Deficiency))
def test_lines_stay_in_gamut(deficiency):
    for line in generate_confusion_lines(deficiency, 5):
        for percentage in (0.0, 0.5, 1.0):
            # before any clipping or desaturation
            rgb = DEFAULT_LMS_MODEL.linear_rgb_from_lms @ line.lms_at(percentage)
            assert all(-1e-6 <= channel <= 1 + 1e-6 for channel in rgb)
            assert all(
                0.0 <= channel <= 1.0
                for channel in line.coords(percentage, ColorSpace.LINEAR_RGB)
            )


@pytest.mark.parametrize("deficiency", list(Deficiency))
def test_lines_vary_only_the_missing_cone(deficiency):
    axis = list(Deficiency).index(deficiency)
    for line in generate_confusion_lines(deficiency, 5):
        for channel in range(3):
            if channel != axis:
                assert line.start[channel] == pytest.approx(line.end[channel], abs=1e-12)
        assert line.start.length() <= line.end.length()


def test_line_passes_through_its_color():
    color = (0.4, 0.5, 0.6)
    line = create_confusion_line(color, Deficiency.DEUTAN)
    (long, medium, short) = convert(color, ColorSpace.SRGB, ColorSpace.LMS)
    assert long == pytest.approx(line.start.x)
    assert short == pytest.approx(line.start.z)
    assert line.start.y <= medium <= line.end.y


def test_seeds():
    (first, second) = confusion_line_seeds(Deficiency.PROTAN, 2)
    assert first == pytest.approx((0.0, 0.15, 0.85))
    assert second == pytest.approx((0.0, 0.98, 0.02))
    with pytest.raises(ValueError):
        confusion_line_seeds(Deficiency.PROTAN, 0)


def test_out_of_gamut():
    with pytest.raises(OutOfGamutError):
        lms_confusion_segment((10.0, 10.0, 10.0), Deficiency.PROTAN)


def test_percentage_must_be_in_unit_interval():
    line = generate_confusion_lines(Deficiency.DEUTAN, 1)[0]
    with pytest.raises(ValueError):
        line(1.5)
    with pytest.raises(ValueError):
        line.lms_at(-0.1)
