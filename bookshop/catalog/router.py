"""
Route definitions for the catalogue API.

Endpoints under /api:
- GET    /books            : list books, optional ``title`` substring
- GET    /books/{book_id}  : get one book
- POST   /books            : create a book (id assigned by the store)
- PUT    /books/{book_id}  : replace a book
- DELETE /books/{book_id}  : delete a book
- GET    /categories       : distinct categories, or books whose category
                             contains ``name`` when it is given
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ..errors import ValidationError
from .schemas import Book, BookCreate, BookUpdate
from .service import CatalogService

router = APIRouter(prefix="/api", tags=["catalog"])


def get_service(request: Request) -> CatalogService:
    """Return the service created once by the application lifespan."""
    return request.app.state.catalog_service


@router.get("/books", response_model=List[Book])
def list_books(
    title: Optional[str] = Query(default=None, description="Title substring (case-insensitive)"),
    service: CatalogService = Depends(get_service),
) -> List[Book]:
    return service.list_books(title)


@router.get("/books/{book_id}", response_model=Book)
def get_book(book_id: int, service: CatalogService = Depends(get_service)) -> Book:
    book = service.get_book(book_id)
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


@router.get("/categories", response_model=None)
def list_categories(
    name: Optional[str] = Query(default=None, description="Category substring (case-insensitive)"),
    service: CatalogService = Depends(get_service),
):
    if name is None or not name.strip():
        return service.categories()
    return service.books_in_category(name)


@router.post("/books", response_model=Book, status_code=status.HTTP_201_CREATED)
def create_book(
    data: BookCreate,
    response: Response,
    service: CatalogService = Depends(get_service),
) -> Book:
    try:
        created = service.create_book(data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    response.headers["Location"] = f"/api/books/{created.id}"
    return created


@router.put("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_book(
    book_id: int,
    book: BookUpdate,
    service: CatalogService = Depends(get_service),
) -> Response:
    try:
        updated = service.update_book(book_id, book)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not updated:
        raise HTTPException(status_code=404, detail="Book not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(book_id: int, service: CatalogService = Depends(get_service)) -> Response:
    if not service.delete_book(book_id):
        raise HTTPException(status_code=404, detail="Book not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
