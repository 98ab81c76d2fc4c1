from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..catalog.schemas import Book


@dataclass
class CartEntry:
    book: Book
    qty: int


class Cart:
    """Quantities of selected books, keyed by book id.

    The book stored in an entry is a copy taken on first add; later
    catalogue refreshes do not touch it. Unknown ids are no-ops
    everywhere.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, CartEntry] = {}

    def add(self, book: Book) -> CartEntry:
        entry = self._entries.get(book.id)
        if entry is None:
            entry = CartEntry(book=book.model_copy(), qty=1)
            self._entries[book.id] = entry
        else:
            entry.qty += 1
        return entry

    def remove(self, book_id: int) -> None:
        self._entries.pop(book_id, None)

    def set_quantity(self, book_id: int, qty: int) -> None:
        if qty <= 0:
            self.remove(book_id)
            return
        entry = self._entries.get(book_id)
        if entry is not None:
            entry.qty = int(qty)

    def total(self) -> float:
        return sum(e.book.price * e.qty for e in self._entries.values())

    def count(self) -> int:
        """Number of units across all entries."""
        return sum(e.qty for e in self._entries.values())

    def entries(self) -> List[CartEntry]:
        return list(self._entries.values())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._entries
