import asyncio

import httpx

from bookshop.catalog.schemas import Book
from bookshop.client.api import CatalogApi
from bookshop.client.filters import CatalogView, canonical, filter_books
from bookshop.client.sync import ALL_CATEGORIES, CatalogSync

BOOKS = [
    Book(id=1, title="El alquimista", author="Paulo Coelho", category="Ficcion", price=9.99),
    Book(id=2, title="Niño de la calle", author="Anónimo", category="Clasicos", price=5),
    Book(id=3, title="ÁLGEBRA básica", author="Baldor", category="Texto", price=20),
    Book(id=4, title="El Aleph", author="Borges", category="Ficcion", price=9),
]


def test_canonical_strips_diacritics_and_case() -> None:
    assert canonical("Ñi") == "ni"
    assert canonical("Niño") == "nino"
    assert canonical("ÁLGEBRA") == "algebra"
    assert canonical("") == ""
    assert canonical(None) == ""


def test_accented_query_matches() -> None:
    assert [b.id for b in filter_books(BOOKS, "Ñi")] == [2]
    assert [b.id for b in filter_books(BOOKS, "algebra")] == [3]
    assert filter_books(BOOKS, "xyz") == []


def test_query_and_category_combine() -> None:
    catalog = BOOKS[:1]
    assert filter_books(catalog, "alqui") == catalog
    assert filter_books(catalog, "alqui", "Divulgacion") == []
    assert [b.id for b in filter_books(BOOKS, "el", "Ficcion")] == [1, 4]


def test_pass_through_keeps_order() -> None:
    assert filter_books(BOOKS, "", ALL_CATEGORIES) == BOOKS
    assert filter_books(BOOKS, "   ") == BOOKS
    assert [b.id for b in filter_books(BOOKS, category="Ficcion")] == [1, 4]


def test_substring_not_tokens() -> None:
    assert [b.id for b in filter_books(BOOKS, "quimista")] == [1]
    assert filter_books(BOOKS, "alquimista el") == []


def _sync(payload) -> CatalogSync:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=payload)))
    return CatalogSync(CatalogApi(["http://shop.test"], client=client))


def test_view_recomputes_on_every_epoch() -> None:
    sync = _sync([b.model_dump() for b in BOOKS])
    view = CatalogView(sync)

    assert view.visible == []
    assert view.recomputations == 1
    assert view.visible == []
    assert view.recomputations == 1

    asyncio.run(sync.refresh())
    assert len(view.visible) == 4
    assert view.recomputations == 2

    # Same data, new epoch.
    asyncio.run(sync.refresh())
    assert len(view.visible) == 4
    assert view.recomputations == 3


def test_view_recomputes_on_query_and_category() -> None:
    sync = _sync([b.model_dump() for b in BOOKS])
    asyncio.run(sync.refresh())
    view = CatalogView(sync)

    view.query = "al"
    assert [b.id for b in view.visible] == [1, 2, 3, 4]
    view.category = "Ficcion"
    assert [b.id for b in view.visible] == [1, 4]
    assert view.recomputations == 2
    assert view.categories == (ALL_CATEGORIES, "Ficcion", "Clasicos", "Texto")
