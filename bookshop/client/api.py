"""
Async HTTP access to the catalogue API.

``CatalogApi`` mirrors the server routes the shop front-end needs. Each
request is tried against every configured base URL in turn (a dev proxy,
then the HTTPS and HTTP ports of the backend, for example) and the first
successful JSON body wins. Every request defeats intermediate caches with
a ``_t`` timestamp parameter and ``no-cache`` headers, because the
catalogue is polled and a cached answer would hide edits.

All failures surface as ``CatalogFetchError``; deciding what to show
instead is the caller's job (see ``bookshop.client.sync``).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..catalog.schemas import Book
from ..errors import CatalogFetchError
from .normalize import distinct_categories, normalize_books

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store",
    "Pragma": "no-cache",
    "Accept": "application/json",
}


class CatalogApi:
    """Client for the ``/api`` routes of the catalogue service."""

    def __init__(
        self,
        base_urls: Sequence[str],
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            base_urls: Base URLs tried in order, e.g. ``http://localhost:8000``
            timeout: Per-request timeout in seconds
            client: Optional pre-built ``httpx.AsyncClient``; it is not
                closed by ``aclose`` since this object does not own it
        """
        if not base_urls:
            raise ValueError("CatalogApi needs at least one base URL")
        self.base_urls = [u.rstrip("/") for u in base_urls]
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        query = dict(params or {})
        last_error: Optional[BaseException] = None
        for base in self.base_urls:
            url = f"{base}{path}"
            # Fresh timestamp per attempt so no attempt can hit a cache.
            query["_t"] = str(int(time.time() * 1000))
            try:
                logger.debug("GET %s", url)
                response = await self.client.get(url, params=query, headers=NO_CACHE_HEADERS)
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Catalogue request to %s failed: %s", url, exc)
                last_error = exc
        raise CatalogFetchError(f"GET {path} failed on every base URL: {last_error}") from last_error

    async def _get_list(self, path: str, params: Optional[Dict[str, str]] = None) -> List[Any]:
        data = await self._get_json(path, params)
        if not isinstance(data, list):
            raise CatalogFetchError(f"GET {path} returned {type(data).__name__}, expected an array")
        return data

    async def fetch_books(self, title: Optional[str] = None) -> List[Book]:
        params = {"title": title} if title else None
        return normalize_books(await self._get_list("/api/books", params))

    async def fetch_categories(self) -> List[str]:
        """Category names, whether the server sends strings or whole books."""
        data = await self._get_list("/api/categories")
        if not data:
            return []
        if isinstance(data[0], str):
            return [c for c in data if isinstance(c, str)]
        return distinct_categories(normalize_books(data))

    async def fetch_category_books(self, name: str) -> List[Book]:
        data = await self._get_list("/api/categories", {"name": name} if name else None)
        if not data or isinstance(data[0], str):
            return []
        return normalize_books(data)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
