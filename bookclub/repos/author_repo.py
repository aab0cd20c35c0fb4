from collections.abc import Mapping
from typing import Any

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from bookclub.models.author import Author
from bookclub.models.base import utcnow
from bookclub.models.book import Book


class AuthorRepository:
    """Data access for authors. Callers own the transaction."""

    @staticmethod
    # Insert a new author
    def create(db: Session, values: Mapping[str, Any]) -> Author:
        author = Author(**values)
        db.add(author)
        db.flush()  # ensure author.id
        return author

    @staticmethod
    # List authors in id order
    def list(db: Session) -> list[Author]:
        stmt = select(Author).order_by(Author.id.asc())
        return list(db.scalars(stmt).all())

    @staticmethod
    # Get an author by ID
    def get(db: Session, author_id: int) -> Author | None:
        stmt = select(Author).where(Author.id == author_id)
        return db.scalars(stmt).first()

    @staticmethod
    # Check that an author exists, locking the row where the backend can
    def exists_for_update(db: Session, author_id: int) -> bool:
        stmt = select(Author.id).where(Author.id == author_id).with_for_update()
        return db.scalars(stmt).first() is not None

    @staticmethod
    # Overwrite the supplied columns and bump updated_at
    def update(db: Session, author: Author, changes: Mapping[str, Any]) -> Author:
        for field, value in changes.items():
            setattr(author, field, value)
        author.updated_at = utcnow()
        db.flush()
        return author

    @staticmethod
    # Delete an author together with all of its books
    def delete(db: Session, author: Author) -> int:
        """Returns the number of books removed along with the author."""
        result = db.execute(delete(Book).where(Book.author_id == author.id))
        db.delete(author)
        db.flush()
        return result.rowcount
