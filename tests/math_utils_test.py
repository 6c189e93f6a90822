import pytest

from ishihara.math_utils import (
    DEFAULT_EPSILON,
    approx_equal,
    approx_greater,
    approx_less,
    approx_zero,
    clip,
    get_epsilon,
    lerp,
    round_to,
    set_epsilon,
)


def test_approx_equal():
    assert approx_equal(1.0, 1.0 + 1e-12)
    assert not approx_equal(1.0, 1.0 + 1e-6)
    # relative for large magnitudes
    assert approx_equal(1e6, 1e6 + 1e-5)
    assert approx_zero(-1e-11)
    assert not approx_zero(1e-3)


def test_approx_less_and_greater():
    assert approx_less(1.0, 2.0)
    assert not approx_less(1.0, 1.0 + 1e-12)
    assert approx_greater(2.0, 1.0)
    assert not approx_greater(1.0 + 1e-12, 1.0)


def test_set_epsilon():
    try:
        set_epsilon(1e-3)
        assert get_epsilon() == 1e-3
        assert approx_equal(1.0, 1.0005)
    finally:
        set_epsilon(DEFAULT_EPSILON)
    assert not approx_equal(1.0, 1.0005)


def test_set_epsilon_rejects_non_positive():
    with pytest.raises(ValueError):
        set_epsilon(0.0)
    assert get_epsilon() == DEFAULT_EPSILON


def test_clip():
    assert clip(2.0, 0.0, 1.0) == 1.0
    assert clip(-1.0, 0.0, 1.0) == 0.0
    assert clip(0.25, 0.0, 1.0) == 0.25
    with pytest.raises(ValueError):
        clip(0.5, 1.0, 0.0)


def test_lerp():
    assert lerp(2.0, 4.0, 0.5) == 3.0
    assert lerp(2.0, 4.0, 0.0) == 2.0


def test_round_to_rounds_halves_up():
    assert round_to(0.5, 0) == 1.0
    assert round_to(2.5, 0) == 3.0
    assert round_to(1.23456, 2) == pytest.approx(1.23)
