"""Protocols for dependency injection in the search engine."""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from codesource_search.models.search import ResultItem


@runtime_checkable
class SearchApiProtocol(Protocol):
    """Protocol for remote search backends."""

    def search(self, text: str, filters: Mapping[str, str]) -> tuple[ResultItem, ...]:
        """Run a blocking search request. Raises SearchApiError on failure."""
        ...

    def trending(self) -> tuple[str, ...]:
        """Return the served trending searches."""
        ...
