from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session
from bookclub.db.session import get_db
from bookclub.services.author_service import AuthorService
from bookclub.schemas.author import AuthorCreate, AuthorRead, AuthorUpdate
from bookclub.core.logging import get_logger
from typing import Annotated
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

router = APIRouter(prefix="/authors", tags=["authors"])


@router.post("", response_model=AuthorRead, status_code=HTTP_201_CREATED)
def create_author(
    data: AuthorCreate,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
):
    author = AuthorService.create_author(db, data)
    get_logger(__name__, request).info("Created author %s", author.id)
    return author


@router.get("", response_model=list[AuthorRead])
def list_authors(
    db: Annotated[Session, Depends(get_db)],
):
    return AuthorService.list_authors(db)


@router.get("/{author_id}", response_model=AuthorRead)
def get_author(
    author_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    return AuthorService.get_author(db, author_id)


@router.patch("/{author_id}", response_model=AuthorRead)
def update_author(
    author_id: int,
    data: AuthorUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    return AuthorService.update_author(db, author_id, data)


@router.delete("/{author_id}", status_code=HTTP_204_NO_CONTENT)
def delete_author(
    author_id: int,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    AuthorService.delete_author(db, author_id)
    get_logger(__name__, request).info("Deleted author %s and its books", author_id)
    return Response(status_code=HTTP_204_NO_CONTENT)
