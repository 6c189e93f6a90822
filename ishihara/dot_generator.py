"""
Running dot packing in the background.

Packing a large plate takes long enough that callers usually want to keep working
(or show progress) while it runs.  A `DotGenerator` packs on a worker thread and reports
over a single message channel: a `MessageKind.PROGRESS` message with the cumulative dots
after each acceptance, then one `MessageKind.DONE` message with the final dots.
"""
import logging
import queue
import threading
from enum import Enum, auto
from random import Random
from typing import Iterator, List, Optional, Tuple

from attr import attrib, attrs
from attr.validators import instance_of
from vistautils.preconditions import check_arg, check_state

from ishihara.dots import Dot, DotGeneratorConfig, iter_dots
from ishihara.random_utils import random_from_seed

logger = logging.getLogger(__name__)


class MessageKind(Enum):
    PROGRESS = auto()
    DONE = auto()


@attrs(frozen=True, slots=True)
class GeneratorMessage:
    """
    A notification from a `DotGenerator`.

    *dots* is an immutable snapshot of every dot accepted so far.
    """

    kind: MessageKind = attrib(validator=instance_of(MessageKind))
    dots: Tuple[Dot, ...] = attrib(converter=tuple)


# marks the end of the message stream
_END_OF_MESSAGES = object()


class DotGenerator:
    """
    Packs dots for *config* on a background thread.

    Call `start`, then either iterate over `messages` or block on `wait`.  `cancel` may be called
    at any time; once it has been, no further messages are delivered.
    *progress_every* thins out progress messages for callers which do not need every one.
    """

    def __init__(
        self,
        config: DotGeneratorConfig,
        rng: Optional[Random] = None,
        *,
        progress_every: int = 1,
    ) -> None:
        check_arg(
            progress_every > 0,
            "progress_every must be positive but got %s",
            (progress_every,),
        )
        self._config = config
        self._rng: Optional[Random] = rng if rng is not None else random_from_seed()
        self._progress_every = progress_every
        self._messages: "queue.Queue[object]" = queue.Queue()
        self._cancel_requested = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._result: Optional[Tuple[Dot, ...]] = None
        self._error: Optional[BaseException] = None
        self._data: Tuple[Dot, ...] = ()

    @property
    def config(self) -> DotGeneratorConfig:
        return self._config

    @property
    def data(self) -> Tuple[Dot, ...]:
        """
        The most recently published snapshot of accepted dots.
        """
        return self._data

    @property
    def cancelled(self) -> bool:
        return self._cancel_requested.is_set()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "DotGenerator":
        check_state(self._thread is None, "A dot generator can only be started once")
        self._thread = threading.Thread(
            target=self._run, name="dot-generator", daemon=True
        )
        self._thread.start()
        return self

    def cancel(self) -> None:
        if not self._cancel_requested.is_set():
            logger.info("Cancelling dot generation")
            self._cancel_requested.set()

    def messages(self) -> Iterator[GeneratorMessage]:
        """
        The messages published by the worker, in order.

        Iteration ends after the `MessageKind.DONE` message, when the worker fails
        or when the generator is cancelled.
        """
        check_state(self._thread is not None, "The dot generator has not been started")
        while True:
            message = self._messages.get()
            if message is _END_OF_MESSAGES or self.cancelled:
                return
            yield message  # type: ignore

    def wait(self, timeout: Optional[float] = None) -> Optional[Tuple[Dot, ...]]:
        """
        Block until the worker finishes and return the final dots.

        Returns `None` if generation was cancelled.  Re-raises any error raised by the worker.
        Raises `TimeoutError` if the worker is still running after *timeout* seconds.
        """
        check_state(self._thread is not None, "The dot generator has not been started")
        self._thread.join(timeout)  # type: ignore
        if self._thread.is_alive():  # type: ignore
            raise TimeoutError(f"Dot generation did not finish within {timeout} seconds")
        if self._error is not None:
            raise self._error
        if self.cancelled:
            return None
        return self._result

    def collect(self) -> Optional[Tuple[Dot, ...]]:
        """
        Consume every message until the worker finishes, then return what `wait` would.

        Use this rather than `wait` when nobody else reads `messages`, so that unread
        progress snapshots do not pile up.
        """
        for message in self.messages():
            if message.kind is MessageKind.PROGRESS:
                logger.debug("Packed %s dots so far", len(message.dots))
        return self.wait()

    @property
    def pending_messages(self) -> int:
        """
        How many published messages have not been read yet.
        """
        return self._messages.qsize()

    def _publish(self, kind: MessageKind, dots: Tuple[Dot, ...]) -> None:
        if self.cancelled:
            return
        self._data = dots
        self._messages.put(GeneratorMessage(kind, dots))

    def _run(self) -> None:
        logger.info("Starting dot generation with %s", self._config)
        accepted: List[Dot] = []
        try:
            for dot in iter_dots(  # type: ignore
                self._config, self._rng, should_stop=self._cancel_requested.is_set
            ):
                if self.cancelled:
                    break
                accepted.append(dot)
                if len(accepted) % self._progress_every == 0:
                    self._publish(MessageKind.PROGRESS, tuple(accepted))
                    logger.debug("Accepted %s dots", len(accepted))
            if self.cancelled:
                logger.info("Dot generation cancelled after %s dots", len(accepted))
            else:
                self._result = tuple(accepted)
                self._publish(MessageKind.DONE, self._result)
                logger.info("Finished dot generation with %s dots", len(accepted))
        except Exception as e:  # pylint:disable=broad-except
            # surfaced to the caller by wait()
            logger.exception("Dot generation failed")
            self._error = e
        finally:
            # the random source belongs to this generator and is not reused
            self._rng = None
            self._messages.put(_END_OF_MESSAGES)
