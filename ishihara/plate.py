"""
Assembling Ishihara plates from packed dots, a shape and a confusion line.
"""
import logging
from enum import Enum, auto
from random import Random
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from PIL import Image, ImageDraw
from vistautils.preconditions import check_arg

from ishihara.color import Deficiency
from ishihara.color.confusion_lines import (
    DEFAULT_CONFUSION_LINE_COUNT,
    ConfusionLine,
    generate_confusion_lines,
)
from ishihara.color.conversion import DEFAULT_LMS_MODEL, LMSModel
from ishihara.color.simulation import Simulation, simulate_color_blindness
from ishihara.dot_generator import DotGenerator
from ishihara.dots import Dot, DotGeneratorConfig
from ishihara.random_utils import RandomChooser, SequenceChooser, random_from_seed
from ishihara.shapes import Shape, ShapeMask

logger = logging.getLogger(__name__)

DotTransform = Callable[[Dot], Dot]

# painted colour of a dot which reaches the filter stage without one
UNCOLORED = "#000000"

DEFAULT_ON_RANGE = (0.8, 1.0)
DEFAULT_OFF_RANGE = (0.0, 0.2)

# stages are always applied in this order
_COLOR_STAGE = 0
_FILTER_STAGE = 1


class PlateState(Enum):
    EMPTY = auto()
    SHAPED = auto()
    COLORED = auto()
    SIMULATED = auto()


def _check_range(name: str, bounds: Tuple[float, float]) -> None:
    (low, high) = bounds
    check_arg(
        0.0 <= low <= high <= 1.0,
        "%s must be a sub-range of [0, 1] but got %s",
        (name, bounds),
    )


def _simulation_stage(deficiency: Deficiency, severity: float) -> DotTransform:
    def filter_stage(dot: Dot) -> Dot:
        simulated = simulate_color_blindness(dot.color or UNCOLORED, deficiency, severity)
        return dot.with_color(simulated)  # type: ignore

    return filter_stage


def _named_simulation_stage(simulation: Simulation) -> DotTransform:
    def filter_stage(dot: Dot) -> Dot:
        return dot.with_color(simulation.apply(dot.color or UNCOLORED))  # type: ignore

    return filter_stage


class IshiharaPlate:
    """
    An Ishihara plate: a fixed set of dots, coloured so that a shape shows up for normal colour
    vision but not for a given deficiency.

    The plate never modifies its dots.  Instead `paint_dots` passes each through up to two
    stages, always in the same order: a colour stage (installed by `set_colors`) and then a
    filter stage (installed by `simulate_color_blindness`).

    The colours chosen for each dot and whether each dot is inside the shape are cached by dot
    id, so repainting gives the same result.  These caches are not thread-safe.
    """

    def __init__(
        self,
        width: float,
        height: float,
        dots: Iterable[Dot] = (),
        *,
        rng: Optional[Random] = None,
    ) -> None:
        check_arg(width > 0 and height > 0, "Bad plate size %s x %s", (width, height))
        self._width = width
        self._height = height
        self._dots: Tuple[Dot, ...] = tuple(dots)
        self._rng = rng if rng is not None else random_from_seed()
        self._mask: Optional[ShapeMask] = None
        self._in_shape: Dict[int, bool] = {}
        self._stages: List[Optional[DotTransform]] = [None, None]
        self._confusion_line: Optional[ConfusionLine] = None

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def dots(self) -> Tuple[Dot, ...]:
        return self._dots

    @property
    def mask(self) -> Optional[ShapeMask]:
        return self._mask

    @property
    def confusion_line(self) -> Optional[ConfusionLine]:
        """
        The confusion line the current colours are drawn from, if any.
        """
        return self._confusion_line

    @property
    def state(self) -> PlateState:
        if self._stages[_FILTER_STAGE] is not None:
            return PlateState.SIMULATED
        if self._stages[_COLOR_STAGE] is not None:
            return PlateState.COLORED
        if self._mask is not None:
            return PlateState.SHAPED
        return PlateState.EMPTY

    def add_shape(self, shape: Union[Shape, str, Image.Image]) -> None:
        """
        Hide *shape* in the plate, replacing any previous shape.

        The shape is scaled to fit the plate, preserving its aspect ratio, and centred.
        """
        self._mask = ShapeMask.fit(shape, int(round(self._width)), int(round(self._height)))
        self._in_shape.clear()
        logger.debug("Attached shape %s to the plate", shape)

    def _is_in_shape(self, dot: Dot) -> bool:
        if self._mask is None:
            return False
        ret = self._in_shape.get(dot.id)
        if ret is None:
            ret = self._mask.covers_disk(dot.x, dot.y, dot.radius)
            self._in_shape[dot.id] = ret
        return ret

    def set_colors(
        self,
        deficiency: Union[Deficiency, str],
        *,
        chooser: Optional[SequenceChooser] = None,
        count: int = DEFAULT_CONFUSION_LINE_COUNT,
        on_range: Tuple[float, float] = DEFAULT_ON_RANGE,
        off_range: Tuple[float, float] = DEFAULT_OFF_RANGE,
        model: LMSModel = DEFAULT_LMS_MODEL,
    ) -> None:
        """
        Colour the plate using one of *deficiency*'s confusion lines.

        The line is picked by *chooser* (by default at random).  Each dot gets a colour from
        *on_range* of the line if it overlaps the shape and from *off_range* otherwise.
        """
        _check_range("on_range", on_range)
        _check_range("off_range", off_range)
        deficiency = Deficiency.parse(deficiency)
        if chooser is None:
            chooser = RandomChooser(self._rng)
        confusion_lines = generate_confusion_lines(deficiency, count, model)
        line = chooser.choice(confusion_lines)
        logger.debug(
            "Colouring plate along the %s confusion line from %s to %s",
            deficiency.value,
            line(0.0),
            line(1.0),
        )
        rng = self._rng
        generated_colors: Dict[int, Tuple[str, str]] = {}

        def color_stage(dot: Dot) -> Dot:
            colors = generated_colors.get(dot.id)
            if colors is None:
                colors = (line(rng.uniform(*on_range)), line(rng.uniform(*off_range)))
                generated_colors[dot.id] = colors
            (on_color, off_color) = colors
            return dot.with_color(on_color if self._is_in_shape(dot) else off_color)

        self._confusion_line = line
        self._stages[_COLOR_STAGE] = color_stage

    def simulate_color_blindness(
        self,
        deficiency: Union[Deficiency, Simulation, str, bool, None],
        severity: float = 1.0,
    ) -> None:
        """
        Show the plate as seen with *deficiency* at the given *severity*,
        or as normal if *deficiency* is `False` or `None`.

        *deficiency* may also be a named `Simulation`, in which case *severity* is ignored.
        """
        if deficiency is None or deficiency is False:
            self._stages[_FILTER_STAGE] = None
            return
        if isinstance(deficiency, Simulation):
            self._stages[_FILTER_STAGE] = _named_simulation_stage(deficiency)
        else:
            self._stages[_FILTER_STAGE] = _simulation_stage(
                Deficiency.parse(deficiency), severity
            )

    def paint_dots(self) -> Tuple[Dot, ...]:
        """
        The dots as they should be displayed, with every installed stage applied.
        """
        ret = []
        for dot in self._dots:
            for stage in self._stages:
                if stage is not None:
                    dot = stage(dot)
            ret.append(dot)
        return tuple(ret)

    def reset(self) -> None:
        """
        Remove the shape and both stages.
        """
        self._stages = [None, None]
        self._mask = None
        self._in_shape.clear()
        self._confusion_line = None

    def render(self, background: Union[str, Tuple[int, ...]] = "#ffffff") -> Image.Image:
        """
        Draw the painted dots onto a new RGB image the size of the plate.
        """
        image = Image.new(
            "RGB", (int(round(self._width)), int(round(self._height))), background
        )
        draw = ImageDraw.Draw(image)
        for dot in self.paint_dots():
            draw.ellipse(
                (
                    dot.x - dot.radius,
                    dot.y - dot.radius,
                    dot.x + dot.radius,
                    dot.y + dot.radius,
                ),
                fill=dot.color or UNCOLORED,
            )
        return image


def create_plate(
    config: DotGeneratorConfig, rng: Optional[Random] = None, *, progress_every: int = 100
) -> IshiharaPlate:
    """
    Pack dots for *config* on a background thread and build a plate from them.

    Blocks until packing is finished.
    """
    if rng is None:
        rng = random_from_seed()
    dots = DotGenerator(config, rng, progress_every=progress_every).start().collect()
    return IshiharaPlate(config.width, config.height, dots or (), rng=rng)
