"""Search surface session: wires debounce, suggestions, remote search and navigation."""

import asyncio
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import ExitStack, contextmanager
from urllib.parse import quote

from loguru import logger

from codesource_search.config import DEBOUNCE_DELAY
from codesource_search.core.composite import CompositeItem, CompositeList, compose
from codesource_search.core.debounce import Debouncer
from codesource_search.core.events import EventBus, KeyEvent, PointerEvent
from codesource_search.core.filters import FilterSet
from codesource_search.core.history import HistoryStore
from codesource_search.core.keyboard import Shortcut, classify
from codesource_search.core.navigation import Key, NavigationController
from codesource_search.core.remote import RemoteSearchClient
from codesource_search.core.suggest.heuristics import generate_suggestions
from codesource_search.models.search import (
    NavigationRequest,
    OutcomeStatus,
    SearchOutcome,
    Suggestion,
    TrendingEntry,
)
from codesource_search.protocols import SearchApiProtocol

# encodeURIComponent leaves these unescaped; results-view URLs match the web client.
_URL_SAFE = "-_.!~*'()"


def search_url(text: str) -> str:
    """Results-view URL for ``text``."""
    return f"/search?q={quote(text, safe=_URL_SAFE)}"


class SearchSession:
    """State of one mounted search surface.

    Every entry point mutates state and then recomputes the composite list
    explicitly, so ``composite`` always reflects the latest
    (text, filters, suggestions, results, history, trending) tuple.
    """

    def __init__(
        self,
        api: SearchApiProtocol,
        history: HistoryStore,
        *,
        trending: Iterable[str] = (),
        filters: FilterSet | None = None,
        delay: float = DEBOUNCE_DELAY,
        on_navigate: Callable[[NavigationRequest], None] | None = None,
        on_command_palette: Callable[[], None] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.history = history
        self.filters = filters if filters is not None else FilterSet()
        self.trending: tuple[TrendingEntry, ...] = tuple(TrendingEntry(t) for t in trending)
        self.navigation = NavigationController()
        self.remote = RemoteSearchClient(api, on_change=self._on_outcome)
        self._debouncer: Debouncer[str] = Debouncer(delay, self._on_settled, loop=loop)
        self._on_navigate = on_navigate
        self._on_command_palette = on_command_palette

        self.text = ""
        self.settled_text = ""
        self.suggestions: tuple[Suggestion, ...] = ()
        self.composite = CompositeList()
        self.closed = False

        self.history.load()
        self._recompose()

    @property
    def outcome(self) -> SearchOutcome:
        return self.remote.outcome

    @property
    def active_item(self) -> CompositeItem | None:
        return self.composite.get(self.navigation.active_index)

    @property
    def status_message(self) -> str | None:
        """Inline notice under the suggestions, if any."""
        status = self.outcome.status
        if status is OutcomeStatus.PENDING:
            return "Searching for the best results..."
        if status is OutcomeStatus.ERROR:
            return self.outcome.reason or "Search failed"
        if status is OutcomeStatus.EMPTY:
            return f'No results found for "{self.settled_text}"'
        return None

    def _recompose(self) -> None:
        previous_total = self.composite.total
        self.composite = compose(
            text=self.text,
            suggestions=self.suggestions,
            outcome=self.remote.outcome,
            history=self.history.entries,
            trending=self.trending,
        )
        # Positions shift when the list shrinks.
        if self.composite.total < previous_total:
            self.navigation.deselect()

    def type_text(self, text: str) -> None:
        """Input value changed."""
        self.text = text
        self.navigation.open()
        self._debouncer.push(text)
        self._recompose()

    def focus(self) -> None:
        self.navigation.open()
        self._recompose()

    def clear_input(self) -> None:
        """Clear button: empty the input and drop everything derived from it."""
        self._debouncer.cancel()
        self.text = ""
        self.settled_text = ""
        self.suggestions = ()
        self.remote.invalidate()
        self.navigation.close()
        self._recompose()

    def flush(self) -> bool:
        """Settle pending input immediately instead of waiting out the delay."""
        return self._debouncer.flush()

    def _on_settled(self, text: str) -> None:
        self.settled_text = text
        self.suggestions = generate_suggestions(text)
        self.remote.search(text, self.filters.snapshot())
        self._recompose()

    def _on_outcome(self, _outcome: SearchOutcome) -> None:
        self._recompose()

    def set_filter(self, facet: str, value: str | None) -> None:
        self.filters.set(facet, value)
        self._refresh_remote()

    def toggle_filter(self, facet: str, value: str) -> None:
        self.filters.toggle(facet, value)
        self._refresh_remote()

    def set_filters(self, values: Mapping[str, str | None]) -> None:
        self.filters.update(values)
        self._refresh_remote()

    def reset_filters(self) -> None:
        self.filters.reset()
        self._refresh_remote()

    def _refresh_remote(self) -> None:
        # New filters make a new query; the in-flight one becomes stale.
        if self.settled_text and not self._debouncer.pending:
            self.remote.search(self.settled_text, self.filters.snapshot())
        self._recompose()

    def key(self, key: Key | str) -> NavigationRequest | None:
        """Keyboard event on the search input."""
        resolved = self.navigation.handle(key, self.composite, self.text)
        if resolved is None:
            return None
        return self.execute(resolved)

    def hover(self, index: int) -> None:
        self.navigation.hover(index, self.composite.total)

    def click(self, index: int) -> NavigationRequest | None:
        item = self.composite.get(index)
        if item is None:
            return None
        return self.execute(item.query)

    def pointer_outside(self) -> None:
        self.navigation.pointer_outside()

    def dismiss_error(self) -> None:
        self.remote.dismiss_error()

    def record_history(self, text: str) -> None:
        self.history.record(text)
        self._recompose()

    def clear_history(self) -> None:
        self.history.clear()
        self._recompose()

    def set_trending(self, texts: Iterable[str]) -> None:
        self.trending = tuple(TrendingEntry(t) for t in texts)
        self._recompose()

    def execute(self, text: str) -> NavigationRequest | None:
        """Run a search for ``text``: remember it and ask the host to navigate."""
        if not text.strip():
            return None
        self._debouncer.cancel()
        self.history.record(text)
        self.suggestions = ()
        self.settled_text = ""
        self.remote.invalidate()
        self.navigation.close()
        self._recompose()

        request = NavigationRequest(text=text, url=search_url(text), filters=self.filters.snapshot())
        logger.info("Navigating to {}", request.url)
        if self._on_navigate is not None:
            self._on_navigate(request)
        return request

    def handle_key_event(self, event: KeyEvent) -> None:
        shortcut = classify(event)
        if shortcut is Shortcut.COMMAND_PALETTE:
            if self._on_command_palette is not None:
                self._on_command_palette()
        elif shortcut is Shortcut.FOCUS_SEARCH:
            self.focus()
        elif shortcut is Shortcut.NAVIGATE:
            self.key(event.key)

    def handle_pointer_event(self, event: PointerEvent) -> None:
        if not event.inside:
            self.pointer_outside()

    @contextmanager
    def mount(self, bus: EventBus) -> Iterator["SearchSession"]:
        """Subscribe to host events for the duration of the block, then tear down."""
        with ExitStack() as stack:
            stack.callback(self.close)
            stack.enter_context(bus.subscribed(KeyEvent, self.handle_key_event))
            stack.enter_context(bus.subscribed(PointerEvent, self.handle_pointer_event))
            yield self

    async def idle(self) -> SearchOutcome:
        """Wait until input has settled and no request is in flight."""
        while self._debouncer.pending:
            await asyncio.sleep(self._debouncer.delay / 2 or 0)
        return await self.remote.wait()

    def close(self) -> None:
        """Cancel the pending timer and stop listening for responses."""
        if self.closed:
            return
        self._debouncer.close()
        self.remote.close()
        self.closed = True
