"""Tests for the asyncio debounce scheduler."""

import asyncio

import pytest

from codesource_search.core.debounce import Debouncer

DELAY = 0.05


def test_rapid_pushes_settle_once_with_last_value() -> None:
    settled: list[str] = []

    async def scenario() -> None:
        debouncer = Debouncer(DELAY, settled.append)
        for text in ("j", "ja", "jav", "java"):
            debouncer.push(text)
            await asyncio.sleep(DELAY / 5)
        await asyncio.sleep(DELAY * 3)

    asyncio.run(scenario())

    assert settled == ["java"]


def test_runs_separated_by_delay_settle_separately() -> None:
    settled: list[str] = []

    async def scenario() -> None:
        debouncer = Debouncer(DELAY, settled.append)
        debouncer.push("re")
        debouncer.push("react")
        await asyncio.sleep(DELAY * 3)
        debouncer.push("react h")
        debouncer.push("react hooks")
        await asyncio.sleep(DELAY * 3)

    asyncio.run(scenario())

    assert settled == ["react", "react hooks"]


def test_zero_delay_defers_to_next_tick() -> None:
    settled: list[str] = []
    observed_before_yield: list[list[str]] = []

    async def scenario() -> None:
        debouncer = Debouncer(0, settled.append)
        debouncer.push("a")
        debouncer.push("ab")
        observed_before_yield.append(list(settled))
        await asyncio.sleep(0)
        await asyncio.sleep(0)

    asyncio.run(scenario())

    assert observed_before_yield == [[]]
    assert settled == ["ab"]


def test_superseded_timer_is_cancelled() -> None:
    async def scenario() -> None:
        debouncer = Debouncer(DELAY, lambda _v: None)
        debouncer.push("first")
        first_handle = debouncer._handle
        debouncer.push("second")
        assert first_handle is not None
        assert first_handle.cancelled()
        assert debouncer._handle is not first_handle
        debouncer.close()

    asyncio.run(scenario())


def test_close_cancels_pending_and_refuses_pushes() -> None:
    settled: list[str] = []

    async def scenario() -> None:
        debouncer = Debouncer(DELAY, settled.append)
        debouncer.push("python")
        debouncer.close()
        assert not debouncer.pending
        await asyncio.sleep(DELAY * 3)
        with pytest.raises(RuntimeError, match="closed"):
            debouncer.push("rust")

    asyncio.run(scenario())

    assert settled == []


def test_cancel_drops_pending_value() -> None:
    settled: list[str] = []

    async def scenario() -> None:
        debouncer = Debouncer(DELAY, settled.append)
        debouncer.push("go")
        debouncer.cancel()
        await asyncio.sleep(DELAY * 3)
        assert debouncer.value is None

    asyncio.run(scenario())

    assert settled == []


def test_flush_settles_immediately() -> None:
    settled: list[str] = []

    async def scenario() -> None:
        debouncer = Debouncer(10.0, settled.append)
        debouncer.push("kotlin")
        assert debouncer.flush() is True
        assert settled == ["kotlin"]
        assert debouncer.value == "kotlin"
        assert debouncer.flush() is False

    asyncio.run(scenario())


def test_negative_delay_rejected() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        Debouncer(-1, lambda _v: None)
