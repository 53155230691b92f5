"""Merge suggestions, results, history and trending into one flat-indexed list."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from itertools import groupby

from codesource_search.models.search import (
    HistoryEntry,
    OutcomeStatus,
    ResultItem,
    ResultKind,
    SearchOutcome,
    Suggestion,
    SuggestionKind,
    TrendingEntry,
)


class Section(str, Enum):
    """Composite sections, in display priority order."""

    SUGGESTIONS = "suggestions"
    RESULTS = "results"
    HISTORY = "history"
    TRENDING = "trending"

    @property
    def title(self) -> str:
        return _SECTION_TITLES[self]


_SECTION_TITLES = {
    Section.SUGGESTIONS: "AI Suggestions",
    Section.RESULTS: "Search Results",
    Section.HISTORY: "Recent Searches",
    Section.TRENDING: "Trending Searches",
}

_RESULT_ICONS = {
    ResultKind.ARTICLE: "📖",
    ResultKind.SNIPPET: "💻",
    ResultKind.GENERIC: "🔍",
}

ICON_HISTORY = "🕘"
ICON_TRENDING = "📈"
EXCERPT_LENGTH = 60


@dataclass(frozen=True)
class CompositeItem:
    """One selectable row; ``query`` is the text executed when it is chosen."""

    index: int
    section: Section
    label: str
    query: str
    icon: str
    detail: str = ""


class CompositeList:
    """Immutable, flat-indexed sequence of composite items."""

    def __init__(self, items: Sequence[CompositeItem] = ()) -> None:
        self._items = tuple(items)

    def __repr__(self) -> str:
        return f"CompositeList({len(self._items)} items)"

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CompositeItem]:
        return iter(self._items)

    def __getitem__(self, index: int) -> CompositeItem:
        return self._items[index]

    @property
    def total(self) -> int:
        return len(self._items)

    def get(self, index: int) -> CompositeItem | None:
        """Item at flat ``index``, None when out of range (including -1)."""
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def sections(self) -> list[tuple[Section, tuple[CompositeItem, ...]]]:
        """Non-empty sections with their items, in priority order."""
        return [(section, tuple(items)) for section, items in groupby(self._items, key=lambda i: i.section)]

    def offset(self, section: Section) -> int | None:
        """Flat index of the first item of ``section``, None if it is absent."""
        for item in self._items:
            if item.section is section:
                return item.index
        return None


def _suggestion_rows(suggestions: Sequence[Suggestion]) -> list[tuple[str, str, str, str]]:
    return [
        (
            s.label,
            s.executable_query,
            s.icon,
            "Performs a specialized semantic search" if s.kind is SuggestionKind.OPERATOR_HINT else "",
        )
        for s in suggestions
    ]


def _result_rows(results: Sequence[ResultItem]) -> list[tuple[str, str, str, str]]:
    return [(r.title, r.title, _RESULT_ICONS[r.kind], r.excerpt[:EXCERPT_LENGTH]) for r in results]


def compose(
    *,
    text: str,
    suggestions: Sequence[Suggestion] = (),
    outcome: SearchOutcome | None = None,
    history: Sequence[HistoryEntry] = (),
    trending: Sequence[TrendingEntry] = (),
) -> CompositeList:
    """Concatenate the non-empty sections and assign flat indices left to right.

    Remote results are shown only for a successful outcome; trending entries
    only while the input text is empty.
    """
    results: Sequence[ResultItem] = ()
    if outcome is not None and outcome.status is OutcomeStatus.SUCCESS:
        results = outcome.results

    sections: list[tuple[Section, list[tuple[str, str, str, str]]]] = [
        (Section.SUGGESTIONS, _suggestion_rows(suggestions)),
        (Section.RESULTS, _result_rows(results)),
        (Section.HISTORY, [(h.text, h.text, ICON_HISTORY, "") for h in history]),
        (Section.TRENDING, [(t.text, t.text, ICON_TRENDING, "") for t in trending] if not text else []),
    ]

    items: list[CompositeItem] = []
    for section, rows in sections:
        offset = len(items)
        for position, (label, query, icon, detail) in enumerate(rows):
            items.append(
                CompositeItem(
                    index=offset + position,
                    section=section,
                    label=label,
                    query=query,
                    icon=icon,
                    detail=detail,
                )
            )
    return CompositeList(items)
