from random import Random

import pytest

from ishihara.dot_generator import DotGenerator, MessageKind
from ishihara.dots import DotGeneratorConfig, pack_dots

SMALL_PLATE = DotGeneratorConfig(
    width=150, height=150, min_radius=4, max_radius=8, max_iterations=200
)
# large enough that packing cannot finish during a test
HUGE_PLATE = DotGeneratorConfig(
    width=5000, height=5000, min_radius=1, max_radius=2, max_iterations=100000
)
# no dot fits in its disk, so every candidate is rejected
NOTHING_FITS = DotGeneratorConfig(
    width=4, height=4, min_radius=3, max_radius=5, max_iterations=10 ** 9
)


class _BrokenRandom(Random):
    def random(self) -> float:
        raise RuntimeError("no randomness available")


def test_messages():
    generator = DotGenerator(SMALL_PLATE, Random(0)).start()
    messages = list(generator.messages())
    expected = pack_dots(SMALL_PLATE, Random(0))

    assert [message.kind for message in messages] == [MessageKind.PROGRESS] * len(
        expected
    ) + [MessageKind.DONE]
    for (count, message) in enumerate(messages[:-1], start=1):
        assert message.dots == expected[:count]
    assert messages[-1].dots == expected
    assert generator.wait() == expected
    assert generator.data == expected
    assert not generator.running


def test_progress_can_be_thinned():
    generator = DotGenerator(SMALL_PLATE, Random(0), progress_every=5).start()
    kinds = [message.kind for message in generator.messages()]
    expected = pack_dots(SMALL_PLATE, Random(0))
    assert kinds.count(MessageKind.PROGRESS) == len(expected) // 5
    assert kinds[-1] is MessageKind.DONE
    with pytest.raises(ValueError):
        DotGenerator(SMALL_PLATE, progress_every=0)


def test_wait_matches_synchronous_packing():
    result = DotGenerator(SMALL_PLATE, Random(4)).start().wait(timeout=60)
    assert result == pack_dots(SMALL_PLATE, Random(4))


def test_cancel():
    generator = DotGenerator(HUGE_PLATE, Random(0)).start()
    with pytest.raises(TimeoutError):
        generator.wait(timeout=0.01)
    generator.cancel()
    assert generator.cancelled
    assert generator.wait(timeout=60) is None
    assert list(generator.messages()) == []


def test_worker_errors_are_reraised():
    generator = DotGenerator(SMALL_PLATE, _BrokenRandom()).start()
    with pytest.raises(RuntimeError):
        generator.wait(timeout=60)
    assert list(generator.messages()) == []


def test_cancel_while_every_candidate_is_rejected():
    generator = DotGenerator(NOTHING_FITS, Random(0)).start()
    with pytest.raises(TimeoutError):
        generator.wait(timeout=0.05)
    generator.cancel()
    assert generator.wait(timeout=5) is None
    assert not generator.running
    assert generator.data == ()


def test_collect_drains_messages():
    generator = DotGenerator(SMALL_PLATE, Random(0)).start()
    assert generator.collect() == pack_dots(SMALL_PLATE, Random(0))
    assert generator.pending_messages == 0
    assert not generator.running
