"""Global keyboard accelerators while the search surface is mounted."""

from enum import Enum

from codesource_search.core.events import KeyEvent
from codesource_search.core.navigation import Key


class Shortcut(str, Enum):
    """What a global key press asks the search surface to do."""

    COMMAND_PALETTE = "command_palette"
    FOCUS_SEARCH = "focus_search"
    NAVIGATE = "navigate"


NAVIGATION_KEYS = frozenset(k.value for k in Key)


def classify(event: KeyEvent) -> Shortcut | None:
    """Map a key event to a shortcut, or None if the surface ignores it.

    - Ctrl/Cmd+K opens the command palette from anywhere.
    - A bare ``/`` focuses the search input unless the user is typing elsewhere.
    - Arrow keys, Enter and Escape drive navigation only inside the search input.
    """
    if (event.ctrl or event.meta) and event.key.lower() == "k":
        return Shortcut.COMMAND_PALETTE
    if event.key == "/" and not (event.ctrl or event.meta) and not event.editable_target:
        return Shortcut.FOCUS_SEARCH
    if event.in_search and event.key in NAVIGATION_KEYS:
        return Shortcut.NAVIGATE
    return None
