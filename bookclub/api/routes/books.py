from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session
from bookclub.db.session import get_db
from bookclub.services.book_service import BookService
from bookclub.schemas.book import BookCreate, BookRead, BookUpdate
from bookclub.core.logging import get_logger
from typing import Annotated
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

router = APIRouter(prefix="/books", tags=["books"])


@router.post("", response_model=BookRead, status_code=HTTP_201_CREATED)
def create_book(
    data: BookCreate,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
):
    book = BookService.create_book(db, data)
    get_logger(__name__, request).info(
        "Created book %s for author %s", book.id, book.author_id
    )
    return book


@router.get("", response_model=list[BookRead])
def list_books(
    db: Annotated[Session, Depends(get_db)],
):
    return BookService.list_books(db)


@router.get("/{book_id}", response_model=BookRead)
def get_book(
    book_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    return BookService.get_book(db, book_id)


@router.patch("/{book_id}", response_model=BookRead)
def update_book(
    book_id: int,
    data: BookUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    return BookService.update_book(db, book_id, data)


@router.delete("/{book_id}", status_code=HTTP_204_NO_CONTENT)
def delete_book(
    book_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    BookService.delete_book(db, book_id)
    return Response(status_code=HTTP_204_NO_CONTENT)
