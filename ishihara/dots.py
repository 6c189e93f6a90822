"""
Randomized packing of non-overlapping dots into a disk.

Candidate dots are sampled uniformly by radius, angle and distance from the centre of the disk,
and are kept only if they do not overlap any dot accepted earlier.  Generation stops after
`DotGeneratorConfig.max_iterations` consecutive rejections.
"""
import math
from random import Random
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np
from attr import attrib, attrs, evolve
from attr.validators import instance_of, optional
from scipy.spatial import cKDTree
from vistautils.preconditions import check_arg

# each dot may touch at most roughly this many others of equal size
NEIGHBORS_PER_RADIUS_RATIO = 5


@attrs(frozen=True, slots=True)
class Dot:
    """
    A circular dot on a plate.

    *id* is unique within a plate and stays the same as the dot's colour changes.
    """

    id: int = attrib(validator=instance_of(int))  # pylint:disable=invalid-name
    x: float = attrib(converter=float)  # pylint:disable=invalid-name
    y: float = attrib(converter=float)  # pylint:disable=invalid-name
    radius: float = attrib(converter=float)
    color: Optional[str] = attrib(default=None, validator=optional(instance_of(str)))

    def with_color(self, color: Optional[str]) -> "Dot":
        return evolve(self, color=color)

    def to_dict(self) -> Dict[str, Any]:
        ret: Dict[str, Any] = {"id": self.id, "x": self.x, "y": self.y, "radius": self.radius}
        if self.color is not None:
            ret["color"] = self.color
        return ret


def _positive(_instance, attribute, value) -> None:
    check_arg(value > 0, "%s must be positive but got %s", (attribute.name, value))


@attrs(frozen=True, slots=True)
class DotGeneratorConfig:
    """
    Parameters of dot packing.

    Dots are packed into the disk inscribed in the *width* x *height* box: it is centred on the
    box and its radius is half the *width*.
    """

    width: float = attrib(converter=float, validator=_positive)
    height: float = attrib(converter=float, validator=_positive)
    min_radius: float = attrib(converter=float, validator=_positive)
    max_radius: float = attrib(converter=float, validator=_positive)
    max_iterations: int = attrib(validator=[instance_of(int), _positive])

    def __attrs_post_init__(self) -> None:
        check_arg(
            self.min_radius <= self.max_radius,
            "Minimum dot radius %s exceeds maximum dot radius %s",
            (self.min_radius, self.max_radius),
        )

    @property
    def center(self) -> Tuple[float, float]:
        return (self.width / 2.0, self.height / 2.0)

    @property
    def disk_radius(self) -> float:
        return self.width / 2.0

    @property
    def neighbor_count(self) -> int:
        """
        How many of the nearest accepted dots to check a candidate against initially.
        """
        return int(math.ceil(self.max_radius / self.min_radius * NEIGHBORS_PER_RADIUS_RATIO))


class NeighborIndex:
    """
    Nearest-neighbour queries over a growing set of circles.

    Most circles live in a `scipy.spatial.cKDTree`, which cannot be extended in place, so newly
    inserted circles go to a small buffer which is searched by brute force.  The tree is rebuilt
    over everything once the buffer gets large relative to it.
    """

    def __init__(self, min_rebuild_size: int = 64) -> None:
        check_arg(min_rebuild_size > 0, "Rebuild size must be positive")
        self._min_rebuild_size = min_rebuild_size
        self._tree: Optional[cKDTree] = None
        self._indexed_centers = np.empty((0, 2))
        self._indexed_radii = np.empty(0)
        self._pending_centers: List[Tuple[float, float]] = []
        self._pending_radii: List[float] = []

    def __len__(self) -> int:
        return len(self._indexed_radii) + len(self._pending_radii)

    def insert(self, x: float, y: float, radius: float) -> None:  # pylint:disable=invalid-name
        self._pending_centers.append((x, y))
        self._pending_radii.append(radius)
        if len(self._pending_radii) >= max(
            self._min_rebuild_size, len(self._indexed_radii) // 4
        ):
            self._rebuild()

    def _rebuild(self) -> None:
        self._indexed_centers = np.concatenate(
            [self._indexed_centers, np.array(self._pending_centers, dtype=float)]
        )
        self._indexed_radii = np.concatenate(
            [self._indexed_radii, np.array(self._pending_radii, dtype=float)]
        )
        self._pending_centers = []
        self._pending_radii = []
        self._tree = cKDTree(self._indexed_centers)

    def nearest(
        self, x: float, y: float, k: int  # pylint:disable=invalid-name
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        The (at most) *k* circles whose centres are nearest to (*x*, *y*).

        Returns parallel arrays of centres (one row per circle), radii and centre distances.
        """
        check_arg(k > 0, "Must request a positive number of neighbors but got %s", (k,))
        centers = []
        radii = []
        distances = []
        if self._tree is not None:
            tree_distances, tree_indices = self._tree.query(
                (x, y), k=min(k, len(self._indexed_radii))
            )
            tree_indices = np.atleast_1d(tree_indices)
            centers.append(self._indexed_centers[tree_indices])
            radii.append(self._indexed_radii[tree_indices])
            distances.append(np.atleast_1d(tree_distances))
        if self._pending_radii:
            pending_centers = np.array(self._pending_centers, dtype=float)
            centers.append(pending_centers)
            radii.append(np.array(self._pending_radii, dtype=float))
            distances.append(np.hypot(pending_centers[:, 0] - x, pending_centers[:, 1] - y))
        if not centers:
            return (np.empty((0, 2)), np.empty(0), np.empty(0))

        all_centers = np.concatenate(centers)
        all_radii = np.concatenate(radii)
        all_distances = np.concatenate(distances)
        if len(all_distances) > k:
            keep = np.argpartition(all_distances, k - 1)[:k]
            return (all_centers[keep], all_radii[keep], all_distances[keep])
        return (all_centers, all_radii, all_distances)

    def overlaps(
        self,
        x: float,  # pylint:disable=invalid-name
        y: float,  # pylint:disable=invalid-name
        radius: float,
        *,
        k: int,
        max_radius: float,
    ) -> bool:
        """
        Whether a circle at (*x*, *y*) with the given *radius* overlaps any indexed circle.

        The *k* nearest circles are checked first.  If all of them are close enough that
        a circle of up to *max_radius* beyond them could still overlap, the search is widened.
        """
        reach = radius + max_radius
        while True:
            centers, radii, distances = self.nearest(x, y, k)
            squared_distances = (centers[:, 0] - x) ** 2 + (centers[:, 1] - y) ** 2
            if np.any(squared_distances < (radii + radius) ** 2):
                return True
            if len(distances) < k or float(distances.max()) >= reach:
                return False
            k *= 2


def _never() -> bool:
    return False


def iter_dots(
    config: DotGeneratorConfig, rng: Random, *, should_stop: Callable[[], bool] = _never
) -> Iterator[Dot]:
    """
    Lazily pack dots according to *config*, yielding each dot as it is accepted.

    Dots are numbered from 1 in the order they are accepted.
    *should_stop* is checked before every candidate; packing ends early once it returns `True`.
    """
    (center_x, center_y) = config.center
    disk_radius = config.disk_radius
    index = NeighborIndex()
    next_id = 1
    failures = 0
    while failures < config.max_iterations and not should_stop():
        radius = config.min_radius + rng.random() * (config.max_radius - config.min_radius)
        angle = rng.random() * 2.0 * math.pi
        distance = rng.random() * (disk_radius - radius)
        x = center_x + distance * math.cos(angle)  # pylint:disable=invalid-name
        y = center_y + distance * math.sin(angle)  # pylint:disable=invalid-name
        if radius > disk_radius or index.overlaps(
            x, y, radius, k=config.neighbor_count, max_radius=config.max_radius
        ):
            failures += 1
            continue
        index.insert(x, y, radius)
        yield Dot(next_id, x, y, radius)
        next_id += 1
        failures = 0


def pack_dots(config: DotGeneratorConfig, rng: Random) -> Tuple[Dot, ...]:
    """
    Pack dots according to *config* synchronously.

    See `ishihara.dot_generator.DotGenerator` to do this in the background.
    """
    return tuple(iter_dots(config, rng))
