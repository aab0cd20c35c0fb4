from pydantic import BaseModel, field_validator, ConfigDict
from pydantic.alias_generators import to_camel
from typing import ClassVar
from datetime import datetime

NAME_MAX_LENGTH = 100


def check_name(v: str | None) -> str:
    if v is None:
        raise ValueError("name cannot be null")
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty")
    if len(v) > NAME_MAX_LENGTH:
        raise ValueError(f"name must be at most {NAME_MAX_LENGTH} characters")
    return v


# Author create schema
class AuthorCreate(BaseModel):
    name: str
    bio: str | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    @field_validator("name")
    @classmethod
    def trim_and_check(cls, v: str) -> str:
        return check_name(v)


# Author update schema; unset fields are left untouched
class AuthorUpdate(BaseModel):
    name: str | None = None
    bio: str | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    @field_validator("name")
    @classmethod
    def trim_and_check(cls, v: str | None) -> str:
        return check_name(v)


# Author read schema
class AuthorRead(BaseModel):
    id: int
    name: str
    bio: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config: ClassVar[ConfigDict] = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )
