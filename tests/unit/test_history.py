"""Tests for the persisted search history."""

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from codesource_search.core.history import HistoryStore


def test_record_same_text_twice_keeps_one_entry_first(history: HistoryStore) -> None:
    history.record("python decorators")
    history.record("react hooks")
    history.record("python decorators")
    history.record("react hooks")

    texts = [e.text for e in history.entries]
    assert texts == ["react hooks", "python decorators"]


def test_capacity_evicts_oldest(history: HistoryStore) -> None:
    for i in range(6):
        history.record(f"query {i}")

    texts = [e.text for e in history.entries]
    assert texts == ["query 5", "query 4", "query 3", "query 2", "query 1"]


def test_dedup_is_case_sensitive(history: HistoryStore) -> None:
    history.record("React")
    history.record("react")
    assert len(history) == 2


def test_record_persists_json_array(history: HistoryStore, history_path: Path) -> None:
    now = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    history.record("docker compose", now=now)
    history.record("graphql", now=now + timedelta(minutes=1))

    data = json.loads(history_path.read_text())
    assert data == [
        {"text": "graphql", "timestamp": "2024-05-01T12:01:00+00:00"},
        {"text": "docker compose", "timestamp": "2024-05-01T12:00:00+00:00"},
    ]


def test_load_round_trips_through_new_store(history: HistoryStore, history_path: Path) -> None:
    history.record("first")
    history.record("second")

    reloaded = HistoryStore(history_path)
    reloaded.load()
    assert [e.text for e in reloaded.entries] == ["second", "first"]


def test_load_accepts_browser_style_timestamps(history_path: Path) -> None:
    history_path.parent.mkdir(parents=True)
    history_path.write_text(json.dumps([{"text": "vue", "timestamp": "2024-01-02T03:04:05.678Z"}]))

    store = HistoryStore(history_path)
    entries = store.load()

    assert entries[0].text == "vue"
    assert entries[0].executed_at.tzinfo is not None


def test_load_truncates_to_capacity(history_path: Path) -> None:
    history_path.parent.mkdir(parents=True)
    blob = [{"text": f"q{i}", "timestamp": "2024-01-01T00:00:00+00:00"} for i in range(8)]
    history_path.write_text(json.dumps(blob))

    assert len(HistoryStore(history_path).load()) == 5


def test_missing_file_loads_empty(tmp_path: Path) -> None:
    assert HistoryStore(tmp_path / "nope.json").load() == ()


@pytest.mark.parametrize(
    "blob",
    [
        "{not json",
        '{"text": "object, not array"}',
        '[{"text": 42, "timestamp": "2024-01-01T00:00:00"}]',
        '[{"text": "no timestamp"}]',
        '[{"text": "bad timestamp", "timestamp": "yesterday"}]',
        "[1, 2, 3]",
    ],
)
def test_corrupt_history_loads_empty(history_path: Path, blob: str) -> None:
    history_path.parent.mkdir(parents=True)
    history_path.write_text(blob)

    store = HistoryStore(history_path)
    assert store.load() == ()
    assert len(store) == 0


def test_clear_removes_blob(history: HistoryStore, history_path: Path) -> None:
    history.record("rust lifetimes")
    assert history_path.exists()

    history.clear()

    assert history.entries == ()
    assert not history_path.exists()


def test_clear_without_blob_is_noop(history: HistoryStore) -> None:
    history.clear()
    assert history.entries == ()


def test_clear_failure_is_logged_not_raised(history_path: Path) -> None:
    history_path.mkdir(parents=True)
    store = HistoryStore(history_path)

    store.clear()

    assert store.entries == ()
