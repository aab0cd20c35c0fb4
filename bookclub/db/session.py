from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from bookclub.core.config import settings
from bookclub.core.errors import StoreUnavailableError


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    # SQLite ignores REFERENCES / ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for `url`; SQLite gets FK enforcement and thread sharing."""
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty db
            kwargs["poolclass"] = StaticPool
        sqlite_engine = create_engine(url, echo=echo, **kwargs)
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    return create_engine(url, echo=echo, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    """One session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run the enclosed writes as one unit: commit on success, roll back on
    any exception. Integrity errors propagate as-is for the caller to
    translate; other store failures become StoreUnavailableError.
    """
    try:
        yield db
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreUnavailableError("Database operation failed") from e
    except BaseException:
        db.rollback()
        raise


@contextmanager
def reading(db: Session) -> Iterator[Session]:
    """Translate store failures during reads into StoreUnavailableError."""
    try:
        yield db
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreUnavailableError("Database operation failed") from e
