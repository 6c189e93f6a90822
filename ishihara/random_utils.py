"""
Utilities for working with random numbers.

Plate generation is randomized throughout (dot placement, which confusion line is used,
where on that line each dot's colours fall).  Everything which makes a random choice accepts
an injected source so that tests can make it deterministic.
"""
import random
from abc import ABC, abstractmethod
from random import Random
from typing import Optional, Sequence, TypeVar

from attr import attrib, attrs
from attr.validators import instance_of

T = TypeVar("T")  # pylint:disable=invalid-name


def random_from_seed(seed: Optional[int] = None) -> Random:
    """
    A standard library random number generator, seeded with *seed* if one is given
    and from system entropy otherwise.
    """
    ret = random.Random()
    ret.seed(seed)
    return ret


class SequenceChooser(ABC):
    """
    Abstraction over a strategy for selecting items from a sequence.
    """

    @abstractmethod
    def choice(self, elements: Sequence[T]) -> T:
        """
        Choose one element from *elements* using some undefined policy.

        Args:
            elements: The sequence of elements to choose from.  If this sequence is empty, an
            `IndexError` should be raised.

        Returns:
            One of the elements of *elements*; no further requirement is defined.
        """


@attrs(frozen=True, slots=True)
class FixedIndexChooser(SequenceChooser):
    """
    A `SequenceChooser` which always chooses the element at the given index.

    If the fixed index exceeds the length of the supplied (non-empty) sequence,
    then the element at the fixed index modulo the sequence length is returned.
    """

    _index_to_choose: int = attrib(validator=instance_of(int))

    # noinspection PyMethodMayBeStatic
    def choice(self, elements: Sequence[T]) -> T:
        if not elements:
            raise IndexError("Cannot choose from an empty sequence")
        return elements[self._index_to_choose % len(elements)]


@attrs(frozen=True, slots=True)
class RandomChooser(SequenceChooser):
    """
    A `SequenceChooser` which delegates the choice to a contained standard library random number
    generator.
    """

    _random: Random = attrib(validator=instance_of(Random))

    def choice(self, elements: Sequence[T]) -> T:
        return self._random.choice(elements)

    @staticmethod
    def for_seed(seed: int = 0) -> "RandomChooser":
        """
        Get a `RandomChooser` from a random number generator initialized with the specified seed.
        """
        return RandomChooser(random_from_seed(seed))
