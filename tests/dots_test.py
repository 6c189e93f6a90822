import math
from itertools import combinations
from random import Random

import numpy as np
import pytest

from ishihara.dots import Dot, DotGeneratorConfig, NeighborIndex, iter_dots, pack_dots

SMALL_PLATE = DotGeneratorConfig(
    width=200, height=200, min_radius=3, max_radius=8, max_iterations=300
)


class _CountingRandom(Random):
    def __init__(self, seed: int) -> None:
        super().__init__(seed)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return super().random()


def test_config_validation():
    with pytest.raises(ValueError):
        DotGeneratorConfig(width=100, height=100, min_radius=5, max_radius=3, max_iterations=10)
    with pytest.raises(ValueError):
        DotGeneratorConfig(width=0, height=100, min_radius=1, max_radius=3, max_iterations=10)
    with pytest.raises(ValueError):
        DotGeneratorConfig(width=100, height=100, min_radius=1, max_radius=3, max_iterations=0)
    with pytest.raises(TypeError):
        DotGeneratorConfig(
            width=100, height=100, min_radius=1, max_radius=3, max_iterations=10.5
        )


def test_config_derived_values():
    config = DotGeneratorConfig(
        width=700, height=500, min_radius=3.5, max_radius=15, max_iterations=10
    )
    assert config.center == (350.0, 250.0)
    assert config.disk_radius == 350.0
    assert config.neighbor_count == 22


def test_dot():
    dot = Dot(1, 2, 3, 4)
    assert dot.to_dict() == {"id": 1, "x": 2.0, "y": 3.0, "radius": 4.0}
    colored = dot.with_color("#ff0000")
    assert colored.to_dict()["color"] == "#ff0000"
    assert dot.color is None
    assert colored.id == dot.id


def test_packed_dots_do_not_overlap():
    dots = pack_dots(SMALL_PLATE, Random(0))
    assert len(dots) > 10
    for (first, second) in combinations(dots, 2):
        assert math.hypot(first.x - second.x, first.y - second.y) >= (
            first.radius + second.radius - 1e-9
        )


def test_packed_dots_lie_in_the_disk():
    (center_x, center_y) = SMALL_PLATE.center
    dots = pack_dots(SMALL_PLATE, Random(0))
    assert [dot.id for dot in dots] == list(range(1, len(dots) + 1))
    for dot in dots:
        assert SMALL_PLATE.min_radius <= dot.radius <= SMALL_PLATE.max_radius
        assert math.hypot(dot.x - center_x, dot.y - center_y) + dot.radius <= (
            SMALL_PLATE.disk_radius + 1e-9
        )


def test_packing_is_reproducible():
    assert pack_dots(SMALL_PLATE, Random(11)) == pack_dots(SMALL_PLATE, Random(11))
    assert pack_dots(SMALL_PLATE, Random(11)) != pack_dots(SMALL_PLATE, Random(12))


def test_packing_stops_after_max_iterations_failures():
    rng = _CountingRandom(3)
    calls_at_last_acceptance = 0
    for _ in iter_dots(SMALL_PLATE, rng):
        calls_at_last_acceptance = rng.calls
    # three draws per candidate
    assert rng.calls - calls_at_last_acceptance == 3 * SMALL_PLATE.max_iterations


def test_disk_too_small_for_any_dot():
    config = DotGeneratorConfig(width=4, height=4, min_radius=3, max_radius=5, max_iterations=50)
    rng = _CountingRandom(0)
    assert pack_dots(config, rng) == ()
    assert rng.calls == 3 * config.max_iterations


def test_packing_stops_when_asked():
    accepted = []
    for dot in iter_dots(SMALL_PLATE, Random(3), should_stop=lambda: len(accepted) >= 5):
        accepted.append(dot)
    assert tuple(accepted) == pack_dots(SMALL_PLATE, Random(3))[:5]


def test_packing_stops_when_asked_during_rejections():
    config = DotGeneratorConfig(width=4, height=4, min_radius=3, max_radius=5, max_iterations=50)
    rng = _CountingRandom(0)
    assert tuple(iter_dots(config, rng, should_stop=lambda: rng.calls >= 30)) == ()
    assert rng.calls == 30


def test_full_size_plate_is_reproducible():
    # a full-size plate, with fewer iterations so the test stays quick
    config = DotGeneratorConfig(
        width=700, height=700, min_radius=3.5, max_radius=15, max_iterations=300
    )
    first = pack_dots(config, Random(2020))
    second = pack_dots(config, Random(2020))
    assert len(first) > 100
    assert first == second
    (center_x, center_y) = config.center
    for dot in first:
        assert math.hypot(dot.x - center_x, dot.y - center_y) + dot.radius <= (
            config.disk_radius + 1e-9
        )


def test_neighbor_index_matches_brute_force():
    rng = Random(0)
    index = NeighborIndex(min_rebuild_size=4)
    circles = []
    for _ in range(50):
        circle = (rng.uniform(0, 100), rng.uniform(0, 100), rng.uniform(1, 3))
        circles.append(circle)
        index.insert(*circle)
    assert len(index) == 50

    for _ in range(10):
        (x, y) = (rng.uniform(0, 100), rng.uniform(0, 100))  # pylint:disable=invalid-name
        expected = sorted(math.hypot(cx - x, cy - y) for (cx, cy, _) in circles)[:5]
        (centers, radii, distances) = index.nearest(x, y, 5)
        assert len(centers) == len(radii) == 5
        assert np.allclose(sorted(distances), expected)

    (centers, _, _) = index.nearest(50, 50, 100)
    assert len(centers) == 50


def test_neighbor_index_overlaps():
    index = NeighborIndex()
    assert not index.overlaps(0, 0, 1, k=3, max_radius=1)
    assert len(index.nearest(0, 0, 3)[0]) == 0
    index.insert(0, 0, 1)
    assert index.overlaps(1.5, 0, 1, k=3, max_radius=1)
    assert not index.overlaps(2.5, 0, 1, k=3, max_radius=1)
    # touching is not overlapping
    assert not index.overlaps(2, 0, 1, k=3, max_radius=1)


def test_overlap_search_widens_past_k():
    index = NeighborIndex(min_rebuild_size=1)
    # a ring of small circles close to the origin, and one big circle further out
    for step in range(8):
        angle = step * math.pi / 4
        index.insert(3 * math.cos(angle), 3 * math.sin(angle), 0.5)
    index.insert(6, 0, 5)
    # the big circle is not among the 2 nearest but does overlap
    assert index.overlaps(1, 0, 0.5, k=2, max_radius=5)
