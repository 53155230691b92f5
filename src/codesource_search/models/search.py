"""Domain models for the search box engine."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType


class SuggestionKind(str, Enum):
    """Heuristic suggestion categories, in generation order."""

    LANGUAGE = "language"
    ERROR_CONTEXT = "errorContext"
    TUTORIAL_CONTEXT = "tutorialContext"
    TECH_CONTEXT = "techContext"
    OPERATOR_HINT = "operatorHint"


class ResultKind(str, Enum):
    """Kind of a remote search hit."""

    ARTICLE = "article"
    SNIPPET = "snippet"
    GENERIC = "generic"

    @classmethod
    def parse(cls, raw: object) -> "ResultKind":
        try:
            return cls(raw)
        except ValueError:
            return cls.GENERIC


class OutcomeStatus(str, Enum):
    """Lifecycle of the current remote query."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class Query:
    """A dispatched remote query. ``filters`` is a read-only snapshot."""

    text: str
    filters: Mapping[str, str]
    sequence: int


@dataclass(frozen=True)
class Suggestion:
    """A synthetic suggestion derived from the settled input text."""

    kind: SuggestionKind
    label: str
    executable_query: str
    icon: str


@dataclass(frozen=True)
class ResultItem:
    """A single remote search hit."""

    id: str
    kind: ResultKind
    title: str
    excerpt: str


@dataclass(frozen=True)
class HistoryEntry:
    """A previously executed search."""

    text: str
    executed_at: datetime


@dataclass(frozen=True)
class TrendingEntry:
    """A trending search, shown only while the input is empty."""

    text: str


@dataclass(frozen=True)
class SearchOutcome:
    """What the remote client currently exposes to the display."""

    status: OutcomeStatus = OutcomeStatus.IDLE
    query: Query | None = None
    results: tuple[ResultItem, ...] = ()
    reason: str | None = None

    @classmethod
    def pending(cls, query: Query) -> "SearchOutcome":
        return cls(status=OutcomeStatus.PENDING, query=query)

    @classmethod
    def from_results(cls, query: Query, results: tuple[ResultItem, ...]) -> "SearchOutcome":
        if not results:
            return cls(status=OutcomeStatus.EMPTY, query=query)
        return cls(status=OutcomeStatus.SUCCESS, query=query, results=results)

    @classmethod
    def failed(cls, query: Query, reason: str) -> "SearchOutcome":
        return cls(status=OutcomeStatus.ERROR, query=query, reason=reason)


@dataclass(frozen=True)
class NavigationState:
    """Keyboard/pointer selection over the composite list."""

    active_index: int = -1
    is_open: bool = False


@dataclass(frozen=True)
class NavigationRequest:
    """Execute-intent handed to the host: go to the results view."""

    text: str
    url: str
    filters: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
