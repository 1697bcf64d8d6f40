"""Debounced search pipeline.

``SearchPipeline`` owns two pieces of observable state: the current query
text and the current result list. Every call to :meth:`SearchPipeline.set_query_text`
updates the query immediately and restarts a single debounce timer; when the
timer expires the query value at that moment is sent to the fetcher. Each
settled fetch replaces the result list wholesale, with an empty list on
failure.

In-flight fetches are never cancelled by newer input, so results are
delivered in fetch completion order. A slow, older response can therefore
overwrite a newer one. Construct the pipeline with
``drop_stale_responses=True`` to number fetches and discard completions that
are older than a result already delivered.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Set, TypeVar

from coin_search.core.contracts import CoinFetcher
from coin_search.core.errors import CoinSearchError, NetworkError
from coin_search.core.types import CoinResult

logger = logging.getLogger(__name__)

ResultsObserver = Callable[[List[CoinResult]], None]
QueryObserver = Callable[[str], None]
ErrorObserver = Callable[[Optional[CoinSearchError]], None]

V = TypeVar("V")


class SearchPipeline:
    DEFAULT_DEBOUNCE_SECONDS = 0.5

    def __init__(
        self,
        fetcher: CoinFetcher,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        *,
        drop_stale_responses: bool = False,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        delivery_loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        if debounce_seconds < 0:
            raise ValueError("debounce_seconds must be >= 0")
        self.fetcher = fetcher
        self.debounce_seconds = debounce_seconds
        self.drop_stale_responses = drop_stale_responses
        self._loop = loop or asyncio.get_running_loop()
        self._delivery_loop = delivery_loop or self._loop

        self._query = ""
        self._results: List[CoinResult] = []
        self._last_error: Optional[CoinSearchError] = None
        self._has_fetched = False

        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task[None]] = set()
        self._issued_seq = 0
        self._delivered_seq = 0
        self._pending_deliveries = 0
        self._idle = asyncio.Event()
        self._idle.set()
        self._closed = False

        self._query_observers: List[QueryObserver] = []
        self._results_observers: List[ResultsObserver] = []
        self._error_observers: List[ErrorObserver] = []

    async def __aenter__(self) -> "SearchPipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def query(self) -> str:
        return self._query

    @property
    def results(self) -> List[CoinResult]:
        return list(self._results)

    @property
    def last_error(self) -> Optional[CoinSearchError]:
        return self._last_error

    @property
    def has_fetched(self) -> bool:
        """True once any fetch has settled, so an empty response is distinguishable from no fetch."""
        return self._has_fetched

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe_query(self, callback: QueryObserver, emit_current: bool = False) -> Callable[[], None]:
        return self._subscribe(self._query_observers, callback, self._query, emit_current)

    def subscribe_results(self, callback: ResultsObserver, emit_current: bool = False) -> Callable[[], None]:
        return self._subscribe(self._results_observers, callback, self.results, emit_current)

    def subscribe_errors(self, callback: ErrorObserver, emit_current: bool = False) -> Callable[[], None]:
        return self._subscribe(self._error_observers, callback, self._last_error, emit_current)

    def set_query_text(self, text: str) -> None:
        if self._closed:
            raise RuntimeError("SearchPipeline is closed.")
        self._query = text
        self._emit(self._query_observers, text)
        if self._on_owning_loop():
            self._restart_timer()
        else:
            self._loop.call_soon_threadsafe(self._restart_timer)

    async def wait_idle(self) -> None:
        """Wait until no timer, fetch or delivery is outstanding."""
        while not self._closed:
            await self._idle.wait()
            # A keystroke may have re-armed the timer after the event fired.
            if self._is_idle():
                return

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for task in list(self._tasks):
            task.cancel()
        self._query_observers.clear()
        self._results_observers.clear()
        self._error_observers.clear()
        self._idle.set()

    async def aclose(self) -> None:
        tasks = list(self._tasks)
        self.close()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _subscribe(
        self,
        observers: List[Callable[[V], None]],
        callback: Callable[[V], None],
        current: V,
        emit_current: bool,
    ) -> Callable[[], None]:
        if self._closed:
            raise RuntimeError("SearchPipeline is closed.")
        observers.append(callback)
        if emit_current:
            callback(current)

        def unsubscribe() -> None:
            if callback in observers:
                observers.remove(callback)

        return unsubscribe

    def _on_owning_loop(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def _restart_timer(self) -> None:
        if self._closed:
            return
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self._loop.call_later(self.debounce_seconds, self._on_timer)
        self._idle.clear()
        logger.debug("debounce armed for %.3fs: %r", self.debounce_seconds, self._query)

    def _on_timer(self) -> None:
        self._timer = None
        if self._closed:
            return
        text = self._query
        self._issued_seq += 1
        seq = self._issued_seq
        logger.debug("dispatching search #%d: %r", seq, text)
        task = self._loop.create_task(self._fetch(seq, text))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        self._refresh_idle()

    async def _fetch(self, seq: int, text: str) -> None:
        try:
            results = await self.fetcher.search(text)
        except CoinSearchError as exc:
            logger.warning("search #%d for %r failed: %s", seq, text, exc)
            self._settle(seq, [], exc)
            return
        except Exception as exc:
            logger.exception("search #%d for %r raised unexpectedly", seq, text)
            self._settle(seq, [], NetworkError(str(exc) or type(exc).__name__))
            return
        self._settle(seq, list(results), None)

    def _settle(
        self,
        seq: int,
        results: List[CoinResult],
        error: Optional[CoinSearchError],
    ) -> None:
        if self._closed:
            return
        if self.drop_stale_responses:
            if seq < self._delivered_seq:
                logger.debug(
                    "dropping stale search #%d, #%d already delivered",
                    seq,
                    self._delivered_seq,
                )
                return
            self._delivered_seq = seq
        self._pending_deliveries += 1
        self._delivery_loop.call_soon_threadsafe(self._deliver, results, error)

    def _deliver(self, results: List[CoinResult], error: Optional[CoinSearchError]) -> None:
        try:
            if self._closed:
                return
            self._results = results
            self._last_error = error
            self._has_fetched = True
            self._emit(self._results_observers, self.results)
            self._emit(self._error_observers, error)
        finally:
            if self._delivery_loop is self._loop:
                self._delivery_done()
            else:
                self._loop.call_soon_threadsafe(self._delivery_done)

    def _delivery_done(self) -> None:
        self._pending_deliveries -= 1
        self._refresh_idle()

    def _is_idle(self) -> bool:
        return self._timer is None and not self._tasks and self._pending_deliveries == 0

    def _refresh_idle(self) -> None:
        if self._is_idle():
            self._idle.set()
        else:
            self._idle.clear()

    @staticmethod
    def _emit(observers: List[Callable[[V], None]], value: V) -> None:
        for callback in list(observers):
            try:
                callback(value)
            except Exception:
                logger.exception("search observer %r failed", callback)
