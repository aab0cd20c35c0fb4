from pydantic import BaseModel, StrictInt, field_validator, ConfigDict
from pydantic.alias_generators import to_camel
from typing import ClassVar
from datetime import date, datetime

from bookclub.schemas.author import AuthorRead

TITLE_MAX_LENGTH = 200


def check_title(v: str | None) -> str:
    if v is None:
        raise ValueError("title cannot be null")
    v = v.strip()
    if not v:
        raise ValueError("title cannot be empty")
    if len(v) > TITLE_MAX_LENGTH:
        raise ValueError(f"title must be at most {TITLE_MAX_LENGTH} characters")
    return v


def check_author_id(v: int | None) -> int:
    if v is None:
        raise ValueError("authorId cannot be null")
    if v < 1:
        raise ValueError("authorId must be a positive integer")
    return v


def check_published_year(v: int | None) -> int | None:
    if v is None:
        return v
    current = date.today().year
    if not 1 <= v <= current:
        raise ValueError(f"publishedYear must be between 1 and {current}")
    return v


_PAYLOAD_CONFIG = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, extra="ignore"
)


# Book create schema
class BookCreate(BaseModel):
    title: str
    author_id: StrictInt
    description: str | None = None
    published_year: StrictInt | None = None

    model_config: ClassVar[ConfigDict] = _PAYLOAD_CONFIG

    @field_validator("title")
    @classmethod
    def trim_and_check(cls, v: str) -> str:
        return check_title(v)

    @field_validator("author_id")
    @classmethod
    def positive_author_id(cls, v: int) -> int:
        return check_author_id(v)

    @field_validator("published_year")
    @classmethod
    def year_in_range(cls, v: int | None) -> int | None:
        return check_published_year(v)


# Book update schema; unset fields are left untouched
class BookUpdate(BaseModel):
    title: str | None = None
    author_id: StrictInt | None = None
    description: str | None = None
    published_year: StrictInt | None = None

    model_config: ClassVar[ConfigDict] = _PAYLOAD_CONFIG

    @field_validator("title")
    @classmethod
    def trim_and_check(cls, v: str | None) -> str:
        return check_title(v)

    @field_validator("author_id")
    @classmethod
    def positive_author_id(cls, v: int | None) -> int:
        return check_author_id(v)

    @field_validator("published_year")
    @classmethod
    def year_in_range(cls, v: int | None) -> int | None:
        return check_published_year(v)


# Book read schema, owning author embedded
class BookRead(BaseModel):
    id: int
    title: str
    author_id: int
    description: str | None = None
    published_year: int | None = None
    author: AuthorRead
    created_at: datetime
    updated_at: datetime

    model_config: ClassVar[ConfigDict] = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )
