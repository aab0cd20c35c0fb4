import datetime
from sqlalchemy import ForeignKey, Integer, String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bookclub.models.base import Base, utcnow
from bookclub.models.author import Author

#Book
class Book(Base):
    __tablename__: str = "books"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("authors.id", ondelete="CASCADE"),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    published_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # Many-to-one only; removing an author's books is the repository's job.
    author: Mapped[Author] = relationship(Author, lazy="joined", innerjoin=True)

    __table_args__ = (Index("ix_books_author_id", "author_id"),)

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title={self.title!r}, author_id={self.author_id})"
