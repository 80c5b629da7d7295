"""Tracking of fallible asynchronous operations."""

import logging
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorObserver = Callable[[Exception], None]


class AsyncOperation(Generic[T]):
    """Pending/value/error state of a repeatable asynchronous operation.

    Only the most recent run is current. A run whose completion arrives after
    a newer run (or a reset) has started is dropped, whichever order the
    underlying calls finish in.
    """

    def __init__(self, name: str = "operation", on_error: ErrorObserver | None = None) -> None:
        """Initialize an idle operation.

        Args:
            name: Used in log messages.
            on_error: Notified of every failure of a current run.
        """
        self.name = name
        self.on_error = on_error
        self.value: T | None = None
        self.error: Exception | None = None
        self.pending = False
        self._generation = 0

    async def run(self, producer: Callable[[], Awaitable[T]]) -> bool:
        """Run the producer and record its outcome.

        Args:
            producer: Zero-argument coroutine function.

        Returns:
            True if the producer succeeded and this run is still current.
        """
        self._generation += 1
        generation = self._generation
        self.pending = True

        try:
            value = await producer()
        except Exception as e:
            if generation != self._generation:
                logger.debug(f"Ignoring failure of superseded {self.name}: {e}")
                return False
            self.error = e
            self.pending = False
            logger.warning(f"{self.name} failed: {e}")
            if self.on_error is not None:
                self.on_error(e)
            return False
        except BaseException:
            if generation == self._generation:
                self.pending = False
            raise

        if generation != self._generation:
            logger.debug(f"Ignoring result of superseded {self.name}")
            return False

        self.value = value
        self.error = None
        self.pending = False
        return True

    def set_value(self, value: T) -> None:
        """Replace the state with a known value."""
        self.reset()
        self.value = value

    def set_error(self, error: Exception) -> None:
        """Replace the state with an error without notifying the observer."""
        self.reset()
        self.error = error

    def reset(self) -> None:
        """Return to the initial state, dropping any run in flight."""
        self._generation += 1
        self.value = None
        self.error = None
        self.pending = False
