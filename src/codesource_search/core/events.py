"""Host input events and scoped subscriptions."""

from collections import defaultdict
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

from loguru import logger

E = TypeVar("E")


@dataclass(frozen=True)
class KeyEvent:
    """A key press anywhere in the host.

    ``in_search`` marks events targeting the search input; ``editable_target``
    marks events whose focused element accepts text (inputs, text areas).
    """

    key: str
    ctrl: bool = False
    meta: bool = False
    in_search: bool = False
    editable_target: bool = False


@dataclass(frozen=True)
class PointerEvent:
    """A pointer press; ``inside`` is True when it hit the search surface."""

    inside: bool


class EventBus:
    """Synchronous publish/subscribe keyed by event type."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        """Register ``handler``; the returned callable removes it (idempotent)."""
        self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    @contextmanager
    def subscribed(self, event_type: type[E], handler: Callable[[E], None]) -> Iterator[None]:
        """Keep ``handler`` registered for the duration of the block."""
        unsubscribe = self.subscribe(event_type, handler)
        try:
            yield
        finally:
            unsubscribe()

    def handler_count(self, event_type: type | None = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(h) for h in self._handlers.values())

    def emit(self, event: object) -> int:
        """Deliver ``event`` to its subscribers. Returns how many received it."""
        handlers = list(self._handlers.get(type(event), []))
        for handler in handlers:
            handler(event)
        if not handlers:
            logger.trace("No subscribers for {!r}", event)
        return len(handlers)
