"""
Shape masks: which parts of a plate the hidden figure covers.

A shape is first rendered by `render_shape` as a dark silhouette on a white background at its
own resolution; `ShapeMask.fit` then scales it uniformly to the plate, centred, and records
which plate pixels fall inside it.
"""
import logging
import math
from enum import Enum
from typing import Union

import numpy as np
from attr import attrib, attrs
from PIL import Image, ImageDraw
from vistautils.preconditions import check_arg

logger = logging.getLogger(__name__)

SHAPE_IMAGE_SIZE = 512
WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
# a pixel is "inside" if its alpha-weighted channel sum is below this
INSIDE_THRESHOLD = 127


class Shape(Enum):
    CIRCLE = "circle"
    SQUARE = "square"
    TRIANGLE = "triangle"

    @staticmethod
    def parse(value: Union["Shape", str]) -> "Shape":
        if isinstance(value, Shape):
            return value
        for shape in Shape:
            if value.lower() in (shape.value, shape.name.lower()):
                return shape
        raise ValueError(f"Unknown shape {value!r}")


def render_shape(shape: Union[Shape, str], size: int = SHAPE_IMAGE_SIZE) -> Image.Image:
    """
    Draw *shape* in black on a white *size* x *size* RGBA image, with a margin.
    """
    shape = Shape.parse(shape)
    check_arg(size > 0, "Shape size must be positive but got %s", (size,))
    image = Image.new("RGBA", (size, size), WHITE)
    draw = ImageDraw.Draw(image)
    margin = size // 8
    far = size - 1 - margin
    if shape is Shape.CIRCLE:
        draw.ellipse((margin, margin, far, far), fill=BLACK)
    elif shape is Shape.SQUARE:
        draw.rectangle((margin, margin, far, far), fill=BLACK)
    elif shape is Shape.TRIANGLE:
        draw.polygon([(size / 2.0, margin), (far, far), (margin, far)], fill=BLACK)
    return image


def _to_rgba_pixels(pixels) -> np.ndarray:
    ret = np.array(pixels, dtype=np.uint8)
    check_arg(
        ret.ndim == 3 and ret.shape[2] == 4,
        "Expected an RGBA pixel array but got shape %s",
        (ret.shape,),
    )
    ret.setflags(write=False)
    return ret


@attrs(frozen=True, slots=True, eq=False)
class ShapeMask:
    """
    A plate-resolution raster of a shape.

    *pixels* is a read-only height x width x 4 RGBA array.
    """

    pixels: np.ndarray = attrib(converter=_to_rgba_pixels)
    inside: np.ndarray = attrib(init=False)

    @inside.default
    def _init_inside(self) -> np.ndarray:
        channels = self.pixels.astype(float)
        weighted = channels[:, :, :3].sum(axis=2) * (channels[:, :, 3] / 255.0)
        ret = weighted < INSIDE_THRESHOLD
        ret.setflags(write=False)
        return ret

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @staticmethod
    def fit(source: Union[Image.Image, Shape, str], width: int, height: int) -> "ShapeMask":
        """
        Scale *source* (a shape or any image) uniformly to fit a *width* x *height* plate,
        centred on a white background.
        """
        check_arg(width > 0 and height > 0, "Bad plate size %s x %s", (width, height))
        image = source if isinstance(source, Image.Image) else render_shape(source)
        image = image.convert("RGBA")
        ratio = min(width / image.width, height / image.height)
        scaled_width = max(1, int(round(image.width * ratio)))
        scaled_height = max(1, int(round(image.height * ratio)))
        scaled = image.resize((scaled_width, scaled_height))
        canvas = Image.new("RGBA", (width, height), WHITE)
        canvas.paste(
            scaled,
            ((width - scaled_width) // 2, (height - scaled_height) // 2),
            scaled,
        )
        logger.debug(
            "Fitted a %sx%s shape to a %sx%s plate", image.width, image.height, width, height
        )
        return ShapeMask(np.asarray(canvas))

    def is_inside(self, x: float, y: float) -> bool:  # pylint:disable=invalid-name
        """
        Whether the pixel containing (*x*, *y*) is inside the shape.

        Points off the plate are outside.
        """
        column = int(math.floor(x))
        row = int(math.floor(y))
        if not (0 <= column < self.width and 0 <= row < self.height):
            return False
        return bool(self.inside[row, column])

    def covers_disk(self, x: float, y: float, radius: float) -> bool:  # pylint:disable=invalid-name
        """
        Whether any sampled point of the disk of *radius* around (*x*, *y*) is inside the shape.

        The centre is sampled along with eight directions on rings spaced one pixel apart
        out to *radius*.
        """
        if self.is_inside(x, y):
            return True
        ring = 1.0
        while ring <= radius:
            for step in range(8):
                angle = step * math.pi / 4.0
                if self.is_inside(x + ring * math.cos(angle), y + ring * math.sin(angle)):
                    return True
            ring += 1.0
        return False
