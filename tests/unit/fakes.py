"""Fake implementations for testing the search engine."""

import threading
from collections.abc import Mapping

from codesource_search.api import SearchApiError
from codesource_search.models.search import ResultItem, ResultKind


def make_result(
    title: str, *, kind: ResultKind = ResultKind.ARTICLE, item_id: str | None = None
) -> ResultItem:
    """Build a result item with a derived id and excerpt."""
    return ResultItem(
        id=item_id or title.lower().replace(" ", "-"),
        kind=kind,
        title=title,
        excerpt=f"About {title}",
    )


class FakeSearchApi:
    """In-memory fake for SearchApi.

    Stores predefined results per query text and records all calls. A text can
    be gated: its call blocks (in the worker thread) until ``release(text)``.
    """

    def __init__(self) -> None:
        self.results: dict[str, tuple[ResultItem, ...]] = {}
        self.errors: dict[str, str] = {}
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.trending_texts: tuple[str, ...] = ()
        self._gates: dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    def add_results(self, text: str, *titles: str) -> None:
        """Register the results returned for ``text``."""
        self.results[text] = tuple(make_result(t) for t in titles)

    def add_error(self, text: str, reason: str) -> None:
        self.errors[text] = reason

    def gate(self, text: str) -> None:
        """Hold responses for ``text`` until released."""
        self._gates[text] = threading.Event()

    def release(self, text: str) -> None:
        self._gates[text].set()

    def search(self, text: str, filters: Mapping[str, str]) -> tuple[ResultItem, ...]:
        """Return the predefined results and record the call."""
        with self._lock:
            self.calls.append((text, dict(filters)))
        gate = self._gates.get(text)
        if gate is not None and not gate.wait(timeout=5):
            msg = f"FakeSearchApi: gate for {text!r} never released"
            raise SearchApiError(msg)
        if text in self.errors:
            raise SearchApiError(self.errors[text])
        return self.results.get(text, ())

    def trending(self) -> tuple[str, ...]:
        if not self.trending_texts:
            msg = "no trending"
            raise SearchApiError(msg)
        return self.trending_texts

    @property
    def queried_texts(self) -> list[str]:
        return [text for text, _filters in self.calls]
