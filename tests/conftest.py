import os

# Point the app at an in-memory SQLite database BEFORE importing it
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from bookclub.main import app
from bookclub.db.session import engine, SessionLocal
from bookclub.models.base import Base
import bookclub.models.author  # registers Author
import bookclub.models.book  # registers Book


@pytest.fixture(autouse=True)
def setup_test_database():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Create a database session for service/repository tests."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def test_client():
    """Create a test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def sample_author(test_client):
    """Create a sample author through the API."""
    response = test_client.post(
        "/authors",
        json={"name": "Jane Austen", "bio": "English novelist known for romantic fiction."},
    )
    assert response.status_code == 201, f"Failed to create sample author: {response.text}"
    return response.json()


@pytest.fixture
def sample_book(test_client, sample_author):
    """Create a sample book through the API."""
    response = test_client.post(
        "/books",
        json={
            "title": "Pride and Prejudice",
            "authorId": sample_author["id"],
            "description": "A romantic novel of manners.",
            "publishedYear": 1813,
        },
    )
    assert response.status_code == 201, f"Failed to create sample book: {response.text}"
    return response.json()


@pytest.fixture
def sample_author_model(db_session):
    """Create a sample author model for service/repository tests."""
    from bookclub.models.author import Author

    author = Author(name="George Orwell", bio="English novelist and essayist.")
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_book_model(db_session, sample_author_model):
    """Create a sample book model for service/repository tests."""
    from bookclub.models.book import Book

    book = Book(
        title="Animal Farm",
        author_id=sample_author_model.id,
        description="A satirical allegorical novella.",
        published_year=1945,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book
