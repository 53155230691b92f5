"""Debounce scheduler on top of the asyncio event loop."""

import asyncio
from collections.abc import Callable
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar("T")

_MISSING = object()


class Debouncer(Generic[T]):
    """Propagate the latest pushed value once it has been stable for ``delay`` seconds.

    Exactly one timer is scheduled at any time: pushing a new value cancels the
    pending ``TimerHandle`` before scheduling the next one. A zero delay still
    defers to the next loop iteration, so the callback never runs inside ``push``.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[T], None],
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay!r}"
            raise ValueError(msg)
        self.delay = delay
        self._callback = callback
        self._loop = loop
        self._handle: asyncio.TimerHandle | asyncio.Handle | None = None
        self._pending: object = _MISSING
        self._value: object = _MISSING
        self._closed = False

    @property
    def pending(self) -> bool:
        """True while a value is waiting for its timer."""
        return self._handle is not None

    @property
    def value(self) -> T | None:
        """Last settled value, None before the first one."""
        if self._value is _MISSING:
            return None
        return self._value  # type: ignore[return-value]

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, value: T) -> None:
        """Restart the delay with ``value`` as the candidate to settle."""
        if self._closed:
            msg = "Debouncer is closed"
            raise RuntimeError(msg)
        self._cancel_timer()
        self._pending = value
        loop = self._loop or asyncio.get_running_loop()
        if self.delay == 0:
            self._handle = loop.call_soon(self._fire)
        else:
            self._handle = loop.call_later(self.delay, self._fire)

    def flush(self) -> bool:
        """Settle the pending value right now. Returns False if nothing was pending."""
        if self._handle is None:
            return False
        self._cancel_timer()
        self._settle()
        return True

    def cancel(self) -> None:
        """Drop the pending value without settling it."""
        self._cancel_timer()
        self._pending = _MISSING

    def close(self) -> None:
        """Cancel any pending timer and refuse further pushes."""
        self.cancel()
        self._closed = True

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._settle()

    def _settle(self) -> None:
        value = self._pending
        self._pending = _MISSING
        if value is _MISSING:
            return
        self._value = value
        logger.debug("Settled input {!r}", value)
        self._callback(value)  # type: ignore[arg-type]
