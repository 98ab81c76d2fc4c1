"""
Validation layer between the HTTP routes and ``CatalogStore``.

The service rejects malformed writes with ``ValidationError`` and
computes the derived views (title search, distinct categories, category
search). Absent records are reported as ``None`` / ``False`` so that the
caller decides how to present them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from ..errors import ValidationError
from .schemas import Book, BookCreate, BookUpdate

if TYPE_CHECKING:
    from ..storage import CatalogStore

logger = logging.getLogger(__name__)


def _normalize(s: Optional[str]) -> str:
    return (s or "").strip().lower()


class CatalogService:
    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def list_books(self, title: Optional[str] = None) -> List[Book]:
        """Return all books, or those whose title contains ``title``.

        Matching is a case-insensitive substring test; a blank ``title``
        returns the whole catalogue.
        """
        books = self.store.get_all()
        if title is None or not title.strip():
            return books
        needle = title.lower()
        return [b for b in books if needle in b.title.lower()]

    def get_book(self, book_id: int) -> Optional[Book]:
        return self.store.get_by_id(book_id)

    def create_book(self, data: BookCreate) -> Book:
        if not data.title.strip():
            logger.info("Rejected book without a title")
            raise ValidationError("Title required")
        return self.store.add(data)

    def update_book(self, book_id: int, data: BookUpdate) -> bool:
        """Replace the book stored under ``book_id``.

        Raises ``ValidationError`` when the path id and the body id
        disagree (a body without an id counts as id 0); returns False
        when no such book exists.
        """
        if book_id != data.id:
            logger.info("Rejected update: path id %d, body id %d", book_id, data.id)
            raise ValidationError("Id mismatch")
        if book_id <= 0:
            return False
        return self.store.update(Book(**data.model_dump()))

    def delete_book(self, book_id: int) -> bool:
        return self.store.delete(book_id)

    def categories(self) -> List[str]:
        """Distinct non-empty category names, sorted."""
        return sorted({b.category for b in self.store.get_all() if b.category.strip()})

    def books_in_category(self, name: str) -> List[Book]:
        """Books whose category contains ``name`` (case-insensitive)."""
        needle = _normalize(name)
        return [
            b
            for b in self.store.get_all()
            if b.category.strip() and needle in b.category.lower()
        ]
