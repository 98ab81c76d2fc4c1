# bookshop/storage.py
"""
File-backed catalogue store.

The catalogue lives in a single JSON array on disk. Every public method
holds the store's lock for its whole read-modify-write cycle, so two
logical operations never interleave regardless of how many request
threads the server runs. The file is rewritten wholesale on every
mutation, through a temporary sibling and ``os.replace`` so that a crash
mid-write leaves either the old or the new catalogue, never a truncated
one.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError as SchemaError

from .catalog.schemas import Book, BookCreate
from .errors import StorageCorruptionError

logger = logging.getLogger(__name__)


class CatalogStore:
    """Owns the catalogue file and the lock that serialises access to it.

    Construct one per process and hand it to ``CatalogService``.

    Parameters
    ----------
    path : Union[str, Path]
        Location of the JSON file. The parent directory and an empty
        ``[]`` file are created when missing. An existing file is read
        once up front so that a corrupted catalogue stops startup.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        # Highest id handed out by this process, so deleting the newest
        # book does not free its id for the next add.
        self._last_id = 0
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._write([])
                logger.info("Created empty catalogue at %s", self.path)
            else:
                books = self._read()
                self._last_id = max((b.id for b in books), default=0)
                logger.info("Loaded %d books from %s", len(books), self.path)

    # ------------------------------------------------------------------
    # Unlocked helpers; callers must hold ``self._lock``.

    def _read(self) -> List[Book]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as exc:
            logger.error("Catalogue file %s is not valid JSON: %s", self.path, exc)
            raise StorageCorruptionError(self.path, f"invalid JSON ({exc})") from exc
        if not isinstance(raw, list):
            logger.error("Catalogue file %s does not hold a JSON array", self.path)
            raise StorageCorruptionError(self.path, "top-level value is not an array")
        try:
            return [Book.model_validate(entry) for entry in raw]
        except SchemaError as exc:
            logger.error("Catalogue file %s holds an invalid record: %s", self.path, exc)
            raise StorageCorruptionError(self.path, "invalid book record") from exc

    def _write(self, books: List[Book]) -> None:
        payload = [b.model_dump() for b in books]
        tmp = self.path.with_name(self.path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)

    # ------------------------------------------------------------------

    def get_all(self) -> List[Book]:
        """Return every book, in file order."""
        with self._lock:
            return self._read()

    def get_by_id(self, book_id: int) -> Optional[Book]:
        with self._lock:
            return next((b for b in self._read() if b.id == book_id), None)

    def add(self, data: BookCreate) -> Book:
        """Append ``data`` under the next id and persist.

        The id is ``max(existing ids) + 1`` (1 for an empty catalogue),
        raised past every id this store has already assigned so that
        deleted ids are never handed out again.
        """
        with self._lock:
            books = self._read()
            next_id = max(max((b.id for b in books), default=0), self._last_id) + 1
            self._last_id = next_id
            book = Book(id=next_id, **data.model_dump(exclude={"id"}))
            books.append(book)
            self._write(books)
            logger.info("Added book %d (%r)", book.id, book.title)
            return book.model_copy()

    def update(self, book: Book) -> bool:
        """Replace the whole record with ``book.id``; False when absent."""
        with self._lock:
            books = self._read()
            idx = next((i for i, b in enumerate(books) if b.id == book.id), -1)
            if idx == -1:
                return False
            books[idx] = book.model_copy()
            self._write(books)
            logger.info("Updated book %d", book.id)
            return True

    def delete(self, book_id: int) -> bool:
        """Remove the record with ``book_id``; False when nothing was removed."""
        with self._lock:
            books = self._read()
            idx = next((i for i, b in enumerate(books) if b.id == book_id), -1)
            if idx == -1:
                return False
            del books[idx]
            self._write(books)
            logger.info("Deleted book %d", book_id)
            return True
