"""
Renders an Ishihara plate to a PNG file.

All configuration comes from a parameters file; see ``parameters/render_plate.params``
for an example.
"""
import json
import logging
from typing import Optional, Union

from vistautils.parameters import Parameters
from vistautils.parameters_only_entrypoint import parameters_only_entry_point
from vistautils.range import Range

from ishihara.color import Deficiency
from ishihara.color.confusion_lines import DEFAULT_CONFUSION_LINE_COUNT
from ishihara.color.simulation import Simulation
from ishihara.dots import DotGeneratorConfig
from ishihara.math_utils import set_epsilon
from ishihara.plate import create_plate
from ishihara.random_utils import random_from_seed
from ishihara.shapes import Shape

logger = logging.getLogger(__name__)


def _parse_simulation(name: Optional[str]) -> Union[Deficiency, Simulation, None]:
    if name is None:
        return None
    for simulation in Simulation:
        if name.lower() in (simulation.value, simulation.name.lower()):
            return simulation
    return Deficiency.parse(name)


def main(params: Parameters) -> None:
    epsilon = params.optional_floating_point("epsilon")
    if epsilon is not None:
        set_epsilon(epsilon)

    config = DotGeneratorConfig(
        width=params.floating_point("width"),
        height=params.floating_point("height"),
        min_radius=params.floating_point("min_radius"),
        max_radius=params.floating_point("max_radius"),
        max_iterations=params.positive_integer("max_iterations"),
    )
    shape = params.enum("shape", Shape, default=Shape.CIRCLE)
    deficiency = params.enum("deficiency", Deficiency, default=Deficiency.PROTAN)
    confusion_line_count = params.positive_integer(
        "confusion_lines", default=DEFAULT_CONFUSION_LINE_COUNT
    )
    simulation = _parse_simulation(params.optional_string("simulate"))
    severity = params.floating_point(
        "severity", valid_range=Range.closed(0.0, 1.0), default=1.0
    )
    output_file = params.creatable_file("output_file")
    dots_file = params.optional_creatable_file("dots_file")

    rng = random_from_seed(params.optional_integer("random_seed"))
    plate = create_plate(config, rng, progress_every=100)
    logger.info("Packed %s dots", len(plate.dots))

    plate.add_shape(shape)
    plate.set_colors(deficiency, count=confusion_line_count)
    if simulation is not None:
        plate.simulate_color_blindness(simulation, severity)

    plate.render().save(output_file)
    logger.info("Wrote plate to %s", output_file)

    if dots_file:
        with open(dots_file, "w", encoding="utf-8") as dots_out:
            json.dump([dot.to_dict() for dot in plate.paint_dots()], dots_out, indent=2)
        logger.info("Wrote %s painted dots to %s", len(plate.dots), dots_file)


if __name__ == "__main__":
    parameters_only_entry_point(main)
