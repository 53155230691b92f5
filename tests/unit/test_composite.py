"""Tests for the composite list."""

from datetime import UTC, datetime

from codesource_search.core.composite import Section, compose
from codesource_search.core.suggest.heuristics import generate_suggestions
from codesource_search.models.search import (
    HistoryEntry,
    Query,
    ResultItem,
    ResultKind,
    SearchOutcome,
    TrendingEntry,
)
from tests.unit.fakes import make_result

NOW = datetime(2024, 1, 1, tzinfo=UTC)
QUERY = Query(text="python error fix", filters={}, sequence=1)
HISTORY = (HistoryEntry("react hooks", NOW), HistoryEntry("docker", NOW))
TRENDING = (TrendingEntry("GraphQL vs REST API"), TrendingEntry("Docker for developers"))


def test_sections_in_priority_order_with_cumulative_indices() -> None:
    suggestions = generate_suggestions("python error fix")
    outcome = SearchOutcome.from_results(QUERY, (make_result("Fixing Python errors"),))

    composite = compose(
        text="python error fix",
        suggestions=suggestions,
        outcome=outcome,
        history=HISTORY,
        trending=TRENDING,
    )

    assert [s for s, _items in composite.sections()] == [
        Section.SUGGESTIONS,
        Section.RESULTS,
        Section.HISTORY,
    ]
    assert [item.index for item in composite] == list(range(len(suggestions) + 1 + 2))
    assert composite.offset(Section.RESULTS) == len(suggestions)
    assert composite.offset(Section.HISTORY) == len(suggestions) + 1
    assert composite[len(suggestions)].query == "Fixing Python errors"


def test_trending_only_when_text_empty() -> None:
    empty = compose(text="", history=HISTORY, trending=TRENDING)
    typed = compose(text="d", history=HISTORY, trending=TRENDING)

    assert empty.total == 4
    assert empty.offset(Section.TRENDING) == 2
    assert typed.offset(Section.TRENDING) is None
    assert typed.total == 2


def test_results_hidden_unless_success() -> None:
    pending = SearchOutcome.pending(QUERY)
    failed = SearchOutcome.failed(QUERY, "Search failed")

    assert compose(text="x", outcome=pending).total == 0
    assert compose(text="x", outcome=failed).total == 0


def test_items_carry_executable_query() -> None:
    suggestions = generate_suggestions("learn rust")
    composite = compose(text="learn rust", suggestions=suggestions, history=HISTORY)

    assert composite[0].label == "Rust best practices"
    assert composite[1].label == "Rust beginner tutorial"
    assert composite[1].query == "Rust beginner tutorial step by step"
    assert composite[2].query == "react hooks"


def test_operator_hint_carries_detail() -> None:
    composite = compose(text="api fetchUser", suggestions=generate_suggestions("api fetchUser"))
    assert composite[0].detail == "Performs a specialized semantic search"


def test_result_excerpt_is_truncated() -> None:
    long_item = ResultItem(id="l", kind=ResultKind.SNIPPET, title="Long", excerpt="x" * 200)
    composite = compose(text="long", outcome=SearchOutcome.from_results(QUERY, (long_item,)))

    assert len(composite[0].detail) == 60


def test_get_out_of_range() -> None:
    composite = compose(text="", history=HISTORY)
    assert composite.get(-1) is None
    assert composite.get(2) is None
    assert composite.get(1).query == "docker"  # type: ignore[union-attr]


def test_empty_everything() -> None:
    composite = compose(text="")
    assert len(composite) == 0
    assert composite.sections() == []
