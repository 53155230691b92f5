"""Keyboard/pointer selection state machine over the composite list."""

from enum import Enum

from codesource_search.core.composite import CompositeList
from codesource_search.models.search import NavigationState


class Key(str, Enum):
    """Keys the search input reacts to."""

    ARROW_DOWN = "ArrowDown"
    ARROW_UP = "ArrowUp"
    ENTER = "Enter"
    ESCAPE = "Escape"


def step_down(active_index: int, total: int) -> int:
    if total == 0:
        return -1
    return (active_index + 1) % total


def step_up(active_index: int, total: int) -> int:
    if total == 0:
        return -1
    return total - 1 if active_index <= 0 else active_index - 1


def resolve_text(composite: CompositeList, active_index: int, text: str) -> str | None:
    """Text to execute: the active item's query, else the raw input.

    None when there is nothing meaningful to execute.
    """
    item = composite.get(active_index)
    resolved = item.query if item is not None else text
    if not resolved.strip():
        return None
    return resolved


class NavigationController:
    """States: closed, or open with an active index (-1 for no selection)."""

    def __init__(self) -> None:
        self.state = NavigationState()

    @property
    def active_index(self) -> int:
        return self.state.active_index

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    def open(self) -> None:
        """Focus or typing: open with no selection."""
        self.state = NavigationState(active_index=-1, is_open=True)

    def close(self) -> None:
        self.state = NavigationState(active_index=-1, is_open=False)

    def move_down(self, total: int) -> int:
        # Arrow keys on a closed list reopen it before moving.
        start = self.state.active_index if self.state.is_open else -1
        self.state = NavigationState(active_index=step_down(start, total), is_open=True)
        return self.state.active_index

    def move_up(self, total: int) -> int:
        start = self.state.active_index if self.state.is_open else -1
        self.state = NavigationState(active_index=step_up(start, total), is_open=True)
        return self.state.active_index

    def hover(self, index: int, total: int) -> None:
        """Pointer over an item selects it; out-of-range indices are ignored."""
        if 0 <= index < total:
            self.state = NavigationState(active_index=index, is_open=True)

    def deselect(self) -> None:
        """Drop the selection, keeping the list open or closed."""
        self.state = NavigationState(active_index=-1, is_open=self.state.is_open)

    def escape(self) -> None:
        self.close()

    def pointer_outside(self) -> None:
        self.close()

    def enter(self, composite: CompositeList, text: str) -> str | None:
        """Resolve the execute-intent text; the caller performs the execution."""
        index = self.state.active_index if self.state.is_open else -1
        return resolve_text(composite, index, text)

    def handle(self, key: Key | str, composite: CompositeList, text: str) -> str | None:
        """Dispatch one key press. Returns the text to execute on Enter, else None."""
        try:
            key = Key(key)
        except ValueError:
            return None
        if key is Key.ARROW_DOWN:
            self.move_down(composite.total)
        elif key is Key.ARROW_UP:
            self.move_up(composite.total)
        elif key is Key.ENTER:
            return self.enter(composite, text)
        elif key is Key.ESCAPE:
            self.escape()
        return None
