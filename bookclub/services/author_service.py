from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from bookclub.core.errors import NotFoundError
from bookclub.core.validation import validate_payload
from bookclub.db.session import reading, transaction
from bookclub.models.author import Author
from bookclub.repos.author_repo import AuthorRepository
from bookclub.schemas.author import AuthorCreate, AuthorUpdate


class AuthorService:
    @staticmethod
    # Create author
    def create_author(db: Session, data: AuthorCreate | Mapping[str, Any]) -> Author:
        payload = validate_payload(AuthorCreate, data)
        with transaction(db):
            author_id = AuthorRepository.create(db, payload.model_dump()).id
        # Reload after commit so no lazy refresh happens outside reading()
        return AuthorService.get_author(db, author_id)

    @staticmethod
    # List authors
    def list_authors(db: Session) -> list[Author]:
        with reading(db):
            return AuthorRepository.list(db)

    @staticmethod
    # Get author, NotFoundError if absent
    def get_author(db: Session, author_id: int) -> Author:
        with reading(db):
            author = AuthorRepository.get(db, author_id)
        if author is None:
            raise NotFoundError("Author", author_id)
        return author

    @staticmethod
    # Partial update: only fields present in the payload are written
    def update_author(
        db: Session, author_id: int, data: AuthorUpdate | Mapping[str, Any]
    ) -> Author:
        payload = validate_payload(AuthorUpdate, data)
        author = AuthorService.get_author(db, author_id)
        with transaction(db):
            AuthorRepository.update(db, author, payload.model_dump(exclude_unset=True))
        return AuthorService.get_author(db, author_id)

    @staticmethod
    # Delete author and, in the same transaction, all of its books
    def delete_author(db: Session, author_id: int) -> None:
        author = AuthorService.get_author(db, author_id)
        with transaction(db):
            _ = AuthorRepository.delete(db, author)
