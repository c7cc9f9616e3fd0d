from __future__ import annotations

import asyncio
import logging
from typing import Callable

from notes_client.data_access import NotesDataAccess
from notes_client.errors import ApiError
from notes_client.models import NoteSearchHit

logger = logging.getLogger(__name__)

ResultsListener = Callable[[list[NoteSearchHit]], None]


class NoteSearch:
    """Search-as-you-type with a debounce window.

    Every keystroke cancels the search still waiting out its delay. A search
    whose request was already in flight is not interrupted, but its results
    are dropped if a newer keystroke arrived meanwhile. ``cancel()`` and
    ``aclose()`` stop every search, in flight or not.
    """

    def __init__(
        self,
        notes_store: NotesDataAccess,
        *,
        delay: float = 0.25,
        min_length: int = 2,
        max_results: int = 6,
        on_results: ResultsListener | None = None,
    ) -> None:
        self._notes_store = notes_store
        self._delay = delay
        self._min_length = min_length
        self._max_results = max_results
        self._on_results = on_results
        self._pending: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._sequence = 0
        self._suggestions: list[NoteSearchHit] = []

    @property
    def suggestions(self) -> list[NoteSearchHit]:
        return list(self._suggestions)

    def on_input(self, query: str) -> asyncio.Task[None] | None:
        self._cancel_pending()
        query = query.strip()
        if len(query) < self._min_length:
            self._deliver([])
            return None
        task = asyncio.create_task(self._run(self._sequence, query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._pending = task
        return task

    def cancel(self) -> None:
        self._sequence += 1
        for task in self._tasks:
            task.cancel()
        self._pending = None

    async def aclose(self) -> None:
        tasks = list(self._tasks)
        self.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _cancel_pending(self) -> None:
        self._sequence += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _run(self, sequence: int, query: str) -> None:
        await asyncio.sleep(self._delay)
        if self._pending is asyncio.current_task():
            self._pending = None
        try:
            hits = await self._notes_store.search_notes(query)
        except ApiError as exc:
            logger.warning("Search for %r failed: %s", query, exc.detail)
            return
        if sequence != self._sequence:
            logger.debug("Dropping results for superseded search %r.", query)
            return
        self._deliver(hits[: self._max_results])

    def _deliver(self, hits: list[NoteSearchHit]) -> None:
        self._suggestions = hits
        if self._on_results is not None:
            self._on_results(list(hits))
