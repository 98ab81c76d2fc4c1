"""
Client-side search over the latest catalogue snapshot.
"""

from __future__ import annotations

import unicodedata
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

from ..catalog.schemas import Book
from .sync import ALL_CATEGORIES, CatalogSync


@lru_cache(maxsize=4096)
def canonical(text: Optional[str]) -> str:
    """Fold ``text`` for comparison: strip diacritics, then lower-case.

    ``"Niño"`` and ``"NIÑO"`` both become ``"nino"``. The result is only
    ever compared, never displayed.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text))
    return "".join(c for c in decomposed if not unicodedata.combining(c)).lower()


def filter_books(
    books: Iterable[Book],
    query: str = "",
    category: str = ALL_CATEGORIES,
) -> List[Book]:
    """Books whose title contains ``query`` AND whose category is ``category``.

    An empty query and the ``ALL_CATEGORIES`` sentinel each disable their
    half of the filter. Input order is preserved.
    """
    needle = canonical((query or "").strip())
    result = list(books)
    if needle:
        result = [b for b in result if needle in canonical(b.title)]
    if category and category != ALL_CATEGORIES:
        result = [b for b in result if b.category == category]
    return result


class CatalogView:
    """The visible part of a ``CatalogSync`` catalogue.

    The list is recomputed whenever the snapshot epoch, the query or the
    category changes, and only then. Keying on the epoch rather than on
    the books means a refresh that returns identical data still yields a
    fresh list.
    """

    def __init__(self, sync: CatalogSync, query: str = "", category: str = ALL_CATEGORIES):
        self.sync = sync
        self.query = query
        self.category = category
        self.recomputations = 0
        self._key: Optional[Tuple[int, str, str]] = None
        self._visible: List[Book] = []

    @property
    def categories(self) -> Tuple[str, ...]:
        return self.sync.snapshot.categories

    @property
    def visible(self) -> List[Book]:
        snapshot = self.sync.snapshot
        key = (snapshot.epoch, self.query, self.category)
        if key != self._key:
            self._visible = filter_books(snapshot.books, self.query, self.category)
            self._key = key
            self.recomputations += 1
        return list(self._visible)
