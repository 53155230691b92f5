"""Remote search dispatch with sequence-based stale response discard."""

import asyncio
import itertools
from collections.abc import Callable, Mapping
from types import MappingProxyType

from loguru import logger

from codesource_search.api import SearchApiError
from codesource_search.config import MIN_QUERY_LENGTH
from codesource_search.models.search import OutcomeStatus, Query, SearchOutcome
from codesource_search.protocols import SearchApiProtocol


class RemoteSearchClient:
    """Issue search requests and expose at most one visible outcome.

    Requests may overlap; the transport is never cancelled. A response is
    applied only when its query's sequence is still the latest dispatched one,
    so an abandoned query can never reach the display, however late it lands.

    All state lives on the event loop thread. The blocking HTTP call runs in a
    worker via ``asyncio.to_thread`` and hands its result back to the loop.
    """

    def __init__(
        self,
        api: SearchApiProtocol,
        *,
        on_change: Callable[[SearchOutcome], None] | None = None,
        min_length: int = MIN_QUERY_LENGTH,
    ) -> None:
        self._api = api
        self._on_change = on_change
        self.min_length = min_length
        self._sequence = itertools.count(1)
        self._latest: int | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self.outcome = SearchOutcome()
        self.dispatched = 0

    @property
    def latest_sequence(self) -> int | None:
        """Sequence of the current query, None when nothing is current."""
        return self._latest

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def make_query(self, text: str, filters: Mapping[str, str]) -> Query:
        """Stamp a new immutable query with the next sequence number."""
        return Query(
            text=text,
            filters=MappingProxyType(dict(filters)),
            sequence=next(self._sequence),
        )

    def search(self, text: str, filters: Mapping[str, str]) -> Query | None:
        """Dispatch ``text`` unless it is below the minimum length.

        Must be called from a running event loop. Returns the dispatched query.
        """
        if len(text) < self.min_length:
            self.invalidate()
            return None

        query = self.make_query(text, filters)
        self._latest = query.sequence
        self.dispatched += 1
        logger.debug("Dispatching query #{} {!r} {}", query.sequence, query.text, dict(query.filters))
        self._set_outcome(SearchOutcome.pending(query))

        task = asyncio.get_running_loop().create_task(self._run(query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return query

    def resolve(self, query: Query, outcome: SearchOutcome) -> bool:
        """Apply ``outcome`` if ``query`` is still current. Returns whether it was applied."""
        if query.sequence != self._latest:
            logger.debug(
                "Discarding stale response for #{} {!r} (latest is #{})",
                query.sequence,
                query.text,
                self._latest,
            )
            return False
        self._set_outcome(outcome)
        return True

    def invalidate(self) -> None:
        """Make every in-flight response stale and drop visible results."""
        self._latest = None
        if self.outcome.status is not OutcomeStatus.IDLE:
            self._set_outcome(SearchOutcome())

    def dismiss_error(self) -> None:
        """Hide an error message; the current query stays current."""
        if self.outcome.status is OutcomeStatus.ERROR:
            self._set_outcome(SearchOutcome(query=self.outcome.query))

    async def wait(self) -> SearchOutcome:
        """Wait for every in-flight request, then return the visible outcome."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        return self.outcome

    async def aclose(self) -> None:
        """Let in-flight requests finish; their results are discarded."""
        self.invalidate()
        await self.wait()

    def close(self) -> None:
        """Stop waiting for in-flight requests. The visible outcome is kept."""
        self._latest = None
        for task in list(self._tasks):
            task.cancel()

    async def _run(self, query: Query) -> None:
        try:
            results = await asyncio.to_thread(self._api.search, query.text, query.filters)
        except SearchApiError as e:
            logger.info("Search for {!r} failed: {}", query.text, e.reason)
            outcome = SearchOutcome.failed(query, e.reason)
        except Exception:
            logger.exception("Unexpected failure searching for {!r}", query.text)
            outcome = SearchOutcome.failed(query, "Search failed")
        else:
            outcome = SearchOutcome.from_results(query, tuple(results))
        self.resolve(query, outcome)

    def _set_outcome(self, outcome: SearchOutcome) -> None:
        self.outcome = outcome
        if self._on_change is not None:
            self._on_change(outcome)
