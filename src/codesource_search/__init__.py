"""Query suggestion and navigation engine for the CodeSource search box."""

from codesource_search.api import SearchApi, SearchApiError
from codesource_search.core.filters import FilterSet
from codesource_search.core.history import HistoryStore
from codesource_search.core.session import SearchSession
from codesource_search.protocols import SearchApiProtocol

__all__ = [
    "FilterSet",
    "HistoryStore",
    "SearchApi",
    "SearchApiError",
    "SearchApiProtocol",
    "SearchSession",
]
