"""
Catalogue synchronisation for the shop front-end.

``CatalogSync`` keeps a client-held ``Snapshot`` of the catalogue fresh:
an initial fetch on ``start()``, a fetch every ``interval`` seconds, and
an immediate fetch whenever the hosting page becomes visible again or
its window regains focus. Every trigger goes through ``request_refresh``,
which is single-flight: while a refresh is outstanding, further requests
share it instead of starting another fetch.

A refresh never fails. When the backend cannot be reached, the embedded
seed catalogue is published instead, so the UI always has books to show.
Either way the snapshot is replaced and its ``epoch`` goes up by exactly
one, which is what downstream views key their recomputation on.

``close()`` releases the poller and the page listeners. A fetch still in
flight at that point is not cancelled; its completion is ignored.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..catalog.schemas import Book
from ..config import Settings
from .api import CatalogApi
from .normalize import SEED_BOOKS, distinct_categories

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "Todas"

VISIBILITY_CHANGE = "visibilitychange"
FOCUS = "focus"


@dataclass(frozen=True)
class Snapshot:
    """One published state of the catalogue.

    ``categories`` always starts with ``ALL_CATEGORIES``. ``epoch``
    counts completed refreshes; two snapshots with equal books still
    differ by epoch. ``source`` is ``"remote"`` or ``"fallback"`` once
    published, and ``"empty"`` for the initial snapshot (epoch 0).
    """

    books: Tuple[Book, ...] = ()
    categories: Tuple[str, ...] = (ALL_CATEGORIES,)
    epoch: int = 0
    source: str = "empty"


class HostEvents:
    """Listener registry for the page hosting the catalogue.

    The host calls ``emit(VISIBILITY_CHANGE, visible)`` and ``emit(FOCUS)``.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Callable[..., None]]] = defaultdict(list)

    def on(self, event: str, callback: Callable[..., None]) -> None:
        self._listeners[event].append(callback)

    def off(self, event: str, callback: Callable[..., None]) -> None:
        try:
            self._listeners[event].remove(callback)
        except ValueError:
            pass

    def emit(self, event: str, *args) -> None:
        for callback in list(self._listeners.get(event, ())):
            callback(*args)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))


class CatalogSync:
    def __init__(
        self,
        api: CatalogApi,
        events: Optional[HostEvents] = None,
        interval: float = 5.0,
        fallback: Sequence[Book] = SEED_BOOKS,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        if not fallback:
            raise ValueError("fallback catalogue must not be empty")
        self.api = api
        self.events = events or HostEvents()
        self.interval = interval
        self.fallback = tuple(fallback)
        self._snapshot = Snapshot()
        self._inflight: Optional[asyncio.Task] = None
        self._poller: Optional[asyncio.Task] = None
        self._started = False
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings, events: Optional[HostEvents] = None) -> "CatalogSync":
        api = CatalogApi(settings.api_urls, timeout=settings.request_timeout)
        return cls(api, events=events, interval=settings.refresh_interval)

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def epoch(self) -> int:
        return self._snapshot.epoch

    @property
    def closed(self) -> bool:
        return self._closed

    def _publish(self, books: Sequence[Book], source: str) -> Snapshot:
        books = tuple(books)
        self._snapshot = Snapshot(
            books=books,
            categories=(ALL_CATEGORIES, *distinct_categories(books)),
            epoch=self._snapshot.epoch + 1,
            source=source,
        )
        logger.info(
            "Catalogue epoch %d: %d books (%s)",
            self._snapshot.epoch,
            len(books),
            source,
        )
        return self._snapshot

    async def refresh(self) -> Optional[Snapshot]:
        """Fetch the catalogue and publish it, or publish the seed catalogue.

        Returns the new snapshot, or ``None`` when the session was closed
        before the fetch completed.
        """
        try:
            books = await self.api.fetch_books()
            source = "remote"
        except Exception as exc:
            logger.warning("Catalogue refresh failed, using built-in catalogue: %s", exc)
            books = list(self.fallback)
            source = "fallback"
        if self._closed:
            logger.debug("Ignoring catalogue refresh completed after close")
            return None
        return self._publish(books, source)

    def request_refresh(self) -> Optional[asyncio.Task]:
        """Start a refresh unless one is already running; return its task."""
        if self._closed:
            return None
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.get_running_loop().create_task(self.refresh())
        return self._inflight

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.request_refresh()

    def _on_visibility_change(self, visible: bool) -> None:
        if visible:
            self.request_refresh()

    def _on_focus(self) -> None:
        self.request_refresh()

    async def start(self) -> Optional[Snapshot]:
        """Run the initial refresh, then start polling and listening."""
        if self._closed:
            raise RuntimeError("CatalogSync is closed")
        if self._started:
            return self._snapshot
        self._started = True
        self.events.on(VISIBILITY_CHANGE, self._on_visibility_change)
        self.events.on(FOCUS, self._on_focus)
        self._poller = asyncio.get_running_loop().create_task(self._poll())
        task = self.request_refresh()
        return await task if task is not None else None

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.events.off(VISIBILITY_CHANGE, self._on_visibility_change)
        self.events.off(FOCUS, self._on_focus)
        if self._poller is not None:
            self._poller.cancel()
            try:
                await self._poller
            except asyncio.CancelledError:
                pass
            self._poller = None
        await self.api.aclose()
        logger.info("Catalogue sync closed at epoch %d", self._snapshot.epoch)

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
