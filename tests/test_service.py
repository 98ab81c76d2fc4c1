import pytest

from bookshop.catalog.schemas import BookCreate, BookUpdate
from bookshop.catalog.service import CatalogService
from bookshop.errors import ValidationError


@pytest.fixture
def service(store):
    svc = CatalogService(store)
    svc.create_book(BookCreate(title="El alquimista", author="Paulo Coelho", category="Ficcion", price=9.99))
    svc.create_book(BookCreate(title="Sapiens", author="Harari", category="Divulgacion", price=15))
    svc.create_book(BookCreate(title="El principito", author="Saint-Exupéry", category="Ficcion", price=7))
    svc.create_book(BookCreate(title="Sin categoría", author="Anónimo", category="", price=1))
    return svc


def test_list_books_by_title_is_case_insensitive(service) -> None:
    assert [b.title for b in service.list_books("EL ")] == ["El alquimista", "El principito"]
    assert len(service.list_books()) == 4
    assert len(service.list_books("   ")) == 4


def test_blank_title_is_rejected(service) -> None:
    with pytest.raises(ValidationError):
        service.create_book(BookCreate(title="   ", author="Nadie"))
    assert len(service.list_books()) == 4


def test_update_id_mismatch_is_rejected(service) -> None:
    with pytest.raises(ValidationError):
        service.update_book(1, BookUpdate(id=2, title="Otro"))
    assert service.get_book(1).title == "El alquimista"


def test_update_and_delete_missing(service) -> None:
    assert service.update_book(99, BookUpdate(id=99, title="Nada")) is False
    assert service.delete_book(99) is False


def test_categories_are_distinct_and_non_empty(service) -> None:
    assert service.categories() == ["Divulgacion", "Ficcion"]


def test_books_in_category_substring(service) -> None:
    assert [b.id for b in service.books_in_category("fic")] == [1, 3]
    assert service.books_in_category("poesia") == []


def test_update_without_body_id_is_a_mismatch(service) -> None:
    with pytest.raises(ValidationError):
        service.update_book(1, BookUpdate(title="Sin id"))
    assert service.get_book(1).title == "El alquimista"


def test_update_replaces_record(service) -> None:
    assert service.update_book(2, BookUpdate(id=2, title="Sapiens (2ª ed.)", price=18)) is True
    updated = service.get_book(2)
    assert updated.title == "Sapiens (2ª ed.)"
    assert updated.category == ""


def test_title_query_is_not_stripped(service) -> None:
    assert [b.title for b in service.list_books(" alquimista")] == ["El alquimista"]
    assert service.list_books(" sapiens") == []
    assert [b.title for b in service.list_books("sapiens")] == ["Sapiens"]


def test_null_strings_are_empty() -> None:
    data = BookCreate.model_validate({"title": None, "author": None, "category": None, "price": 1})
    assert (data.title, data.author, data.category) == ("", "", "")
