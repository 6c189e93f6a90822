import json

from PIL import Image
from vistautils.parameters import Parameters

from ishihara.color import Deficiency
from ishihara.color.simulation import Simulation
from ishihara.entry_points.render_plate import _parse_simulation, main


def _params(tmp_path, **overrides) -> Parameters:
    mapping = {
        "width": 120.0,
        "height": 120.0,
        "min_radius": 4.0,
        "max_radius": 8.0,
        "max_iterations": 200,
        "shape": "SQUARE",
        "deficiency": "TRITAN",
        "confusion_lines": 3,
        "severity": 1.0,
        "random_seed": 0,
        "output_file": str(tmp_path / "plate.png"),
        "dots_file": str(tmp_path / "plate_dots.json"),
    }
    mapping.update(overrides)
    return Parameters.from_mapping(mapping)


def test_render_plate(tmp_path):
    main(_params(tmp_path, simulate="protanomaly"))
    with Image.open(tmp_path / "plate.png") as image:
        assert image.size == (120, 120)
    with open(tmp_path / "plate_dots.json", encoding="utf-8") as dots_in:
        dots = json.load(dots_in)
    assert dots
    assert [dot["id"] for dot in dots] == list(range(1, len(dots) + 1))
    assert all(dot["color"].startswith("#") for dot in dots)


def test_render_plate_is_reproducible(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    main(_params(first))
    main(_params(second))
    assert (first / "plate_dots.json").read_text(encoding="utf-8") == (
        second / "plate_dots.json"
    ).read_text(encoding="utf-8")


def test_parse_simulation():
    assert _parse_simulation(None) is None
    assert _parse_simulation("Achromatopsia") is Simulation.ACHROMATOPSIA
    assert _parse_simulation("deutan") is Deficiency.DEUTAN
