from __future__ import annotations
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookclub.core.errors import (
    NotFoundError,
    ReferentialIntegrityError,
    StoreUnavailableError,
)
from bookclub.core.validation import validate_payload
from bookclub.db.session import reading, transaction
from bookclub.models.book import Book
from bookclub.repos.author_repo import AuthorRepository
from bookclub.repos.book_repo import BookRepository
from bookclub.schemas.book import BookCreate, BookUpdate

# SQLSTATE foreign_key_violation
_FK_VIOLATION = "23503"


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    # psycopg 3 exposes sqlstate, psycopg2 pgcode; SQLite only has the message
    code = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if code is not None:
        return code == _FK_VIOLATION
    return "foreign key" in str(exc.orig).lower()


def _translate(exc: IntegrityError, author_id: int | None) -> Exception:
    if _is_foreign_key_violation(exc):
        return ReferentialIntegrityError(author_id)
    return StoreUnavailableError("Data integrity violation")


class BookService:
    @staticmethod
    # Create book; the author check and the insert share one transaction
    def create_book(db: Session, data: BookCreate | Mapping[str, Any]) -> Book:
        payload = validate_payload(BookCreate, data)
        try:
            with transaction(db):
                if not AuthorRepository.exists_for_update(db, payload.author_id):
                    raise ReferentialIntegrityError(payload.author_id)
                book_id = BookRepository.create(db, payload.model_dump()).id
        except IntegrityError as e:
            # Author removed between the check and the insert
            raise _translate(e, payload.author_id) from e
        return BookService.get_book(db, book_id)

    @staticmethod
    # List books with their authors
    def list_books(db: Session) -> list[Book]:
        with reading(db):
            return BookRepository.list(db)

    @staticmethod
    # Get book with its author, NotFoundError if absent
    def get_book(db: Session, book_id: int) -> Book:
        with reading(db):
            book = BookRepository.get(db, book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        return book

    @staticmethod
    # Partial update; a new authorId must name an existing author
    def update_book(
        db: Session, book_id: int, data: BookUpdate | Mapping[str, Any]
    ) -> Book:
        payload = validate_payload(BookUpdate, data)
        changes = payload.model_dump(exclude_unset=True)
        book = BookService.get_book(db, book_id)
        new_author_id = changes.get("author_id")
        try:
            with transaction(db):
                if new_author_id is not None and not AuthorRepository.exists_for_update(
                    db, new_author_id
                ):
                    raise ReferentialIntegrityError(new_author_id)
                BookRepository.update(db, book, changes)
        except IntegrityError as e:
            raise _translate(e, new_author_id) from e
        return BookService.get_book(db, book_id)

    @staticmethod
    # Delete book
    def delete_book(db: Session, book_id: int) -> None:
        book = BookService.get_book(db, book_id)
        with transaction(db):
            BookRepository.delete(db, book)
