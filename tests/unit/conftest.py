"""Shared test fixtures."""

from pathlib import Path

import pytest

from codesource_search.core.history import HistoryStore
from tests.unit.fakes import FakeSearchApi


@pytest.fixture
def fake_api() -> FakeSearchApi:
    api = FakeSearchApi()
    api.add_results("javascript", "JavaScript closures explained", "Event loop deep dive")
    api.add_results("java", "Java streams guide")
    api.add_results("react hooks", "Understanding React hooks", "Custom hooks in practice")
    return api


@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "recent-searches.json"


@pytest.fixture
def history(history_path: Path) -> HistoryStore:
    """An empty history store backed by a temp file."""
    store = HistoryStore(history_path)
    store.load()
    return store
