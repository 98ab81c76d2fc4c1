"""
Ingestion normaliser for catalogue payloads received over the network.

The backend may serialise a record with lower-case (``title``) or
Pascal-case (``Title``) field names. ``FIELD_ALIASES`` lists, for every
canonical field, the source names accepted in order of preference; the
normaliser applies it once at the network boundary and everything past
this module only sees canonical ``Book`` instances.
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError as SchemaError

from ..catalog.schemas import Book

logger = logging.getLogger(__name__)

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "Id"),
    "title": ("title", "Title"),
    "author": ("author", "Author"),
    "category": ("category", "Category"),
    "price": ("price", "Price"),
    "cover": ("cover", "Cover"),
}

# Placeholder value emitted by the backend's schema example for ``cover``.
COVER_SENTINEL = "string"
PLACEHOLDER_URL = "https://via.placeholder.com/120x160?text={text}"
PLACEHOLDER_FALLBACK_TEXT = "Libro"

SEED_BOOKS: Tuple[Book, ...] = (
    Book(
        id=1,
        title="El alquimista",
        author="Paulo Coelho",
        category="Ficcion",
        price=9.99,
        cover="https://via.placeholder.com/120x160?text=Alquimista",
    ),
    Book(
        id=2,
        title="Cien años de soledad",
        author="Gabriel García Márquez",
        category="Clasicos",
        price=12.5,
        cover="https://via.placeholder.com/120x160?text=Cien+A%C3%B1os",
    ),
    Book(
        id=3,
        title="Sapiens",
        author="Yuval Noah Harari",
        category="Divulgacion",
        price=15.0,
        cover="https://via.placeholder.com/120x160?text=Sapiens",
    ),
)


def _pick(raw: Mapping[str, Any], field: str) -> Any:
    """Return the first non-null value among the aliases of ``field``."""
    for name in FIELD_ALIASES[field]:
        value = raw.get(name)
        if value is not None:
            return value
    return None


def _to_price(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def placeholder_cover(title: str) -> str:
    text = title or PLACEHOLDER_FALLBACK_TEXT
    return PLACEHOLDER_URL.format(text=urllib.parse.quote_plus(text))


def normalize_book(raw: Any) -> Optional[Book]:
    """Map one raw record onto ``Book``.

    Missing strings become ``""`` and a missing or non-numeric price
    becomes ``0``. A cover that is absent, null, empty or the literal
    ``"string"`` is replaced by a placeholder built from the title.
    Records that still cannot form a valid ``Book`` (no usable id,
    negative price) are logged and dropped, returning ``None``.
    """
    if not isinstance(raw, Mapping):
        logger.warning("Skipping non-object catalogue record: %r", raw)
        return None
    title = str(_pick(raw, "title") or "")
    cover = _pick(raw, "cover")
    if not cover or cover == COVER_SENTINEL:
        cover = placeholder_cover(title)
    try:
        return Book(
            id=_pick(raw, "id"),
            title=title,
            author=str(_pick(raw, "author") or ""),
            category=str(_pick(raw, "category") or ""),
            price=_to_price(_pick(raw, "price")),
            cover=str(cover),
        )
    except SchemaError as exc:
        logger.warning("Skipping invalid catalogue record %r: %s", raw, exc)
        return None


def normalize_books(raw: Iterable[Any]) -> List[Book]:
    books = (normalize_book(entry) for entry in raw)
    return [b for b in books if b is not None]


def distinct_categories(books: Iterable[Book]) -> List[str]:
    """Non-empty categories in order of first appearance."""
    seen: Dict[str, None] = {}
    for b in books:
        if b.category:
            seen.setdefault(b.category, None)
    return list(seen)
