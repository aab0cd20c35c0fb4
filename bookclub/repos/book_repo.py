from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookclub.models.base import utcnow
from bookclub.models.book import Book


class BookRepository:
    """Data access for books. Every read joins the owning author."""

    @staticmethod
    # Insert a new book
    def create(db: Session, values: Mapping[str, Any]) -> Book:
        book = Book(**values)
        db.add(book)
        db.flush()  # ensure book.id, surfaces FK violations
        return book

    @staticmethod
    # List books in id order
    def list(db: Session) -> list[Book]:
        stmt = select(Book).order_by(Book.id.asc())
        return list(db.scalars(stmt).unique().all())

    @staticmethod
    # Get a book by ID
    def get(db: Session, book_id: int) -> Book | None:
        stmt = select(Book).where(Book.id == book_id)
        return db.scalars(stmt).unique().first()

    @staticmethod
    # Overwrite the supplied columns and bump updated_at
    def update(db: Session, book: Book, changes: Mapping[str, Any]) -> Book:
        for field, value in changes.items():
            setattr(book, field, value)
        book.updated_at = utcnow()
        db.flush()
        return book

    @staticmethod
    # Delete a book
    def delete(db: Session, book: Book) -> None:
        db.delete(book)
        db.flush()
