"""
Pydantic schema definitions for the catalog module.

The ``Book`` model is the single record shape shared by the file-backed
store, the HTTP routes and the client. Field names are fixed lower-case
on disk and on the wire; alternate casings are only accepted by the
client normaliser (``bookshop.client.normalize``). ``BookCreate`` is the
body of ``POST /api/books``: the same record without an id, which the
store assigns. ``BookUpdate`` is the body of ``PUT /api/books/{id}``.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class BookCreate(BaseModel):
    """A book as submitted by a caller, before an id is assigned.

    The string fields default to ``""`` and a ``null`` is read as ``""``,
    so that a missing or null title reaches the service layer and is
    rejected there with a 400 rather than failing schema validation with
    a 422. ``price`` is coerced to a float and may never be negative. A
    missing ``cover`` stays ``None``.
    """

    title: str = ""
    author: str = ""
    category: str = ""
    price: float = Field(default=0.0, ge=0)
    cover: Optional[str] = None

    @field_validator("title", "author", "category", mode="before")
    @classmethod
    def null_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class BookUpdate(BookCreate):
    """Replacement record for ``PUT``.

    ``id`` defaults to 0 and is not range-checked here, so a body with a
    missing or zero id is reported as an id mismatch by the service.
    """

    id: int = 0


class Book(BookCreate):
    """A stored book. Identity is ``id``, a positive integer."""

    id: int = Field(gt=0)
