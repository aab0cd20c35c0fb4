import pytest
from datetime import date
from fastapi import status


class TestBookEndpoints:
    """Test book management endpoints."""

    def test_create_book_success(self, test_client, sample_author):
        book_data = {
            "title": "Emma",
            "authorId": sample_author["id"],
            "description": "A comedy of manners.",
            "publishedYear": 1815,
        }

        response = test_client.post("/books", json=book_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["title"] == "Emma"
        assert data["authorId"] == sample_author["id"]
        assert data["description"] == "A comedy of manners."
        assert data["publishedYear"] == 1815
        assert data["author"]["id"] == sample_author["id"]
        assert data["author"]["name"] == "Jane Austen"

    def test_create_book_minimal(self, test_client, sample_author):
        response = test_client.post(
            "/books", json={"title": "Persuasion", "authorId": sample_author["id"]}
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["description"] is None
        assert data["publishedYear"] is None

    def test_create_book_missing_author(self, test_client):
        response = test_client.post("/books", json={"title": "X", "authorId": 999})

        assert response.status_code == status.HTTP_409_CONFLICT
        body = response.json()
        assert body["type"] == "reference_not_found"
        assert "999" in body["message"]
        assert all(book["title"] != "X" for book in test_client.get("/books").json())

    def test_create_book_validation_errors(self, test_client):
        response = test_client.post(
            "/books",
            json={"title": "", "authorId": 0, "publishedYear": date.today().year + 1},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        errors = response.json()["errors"]
        assert set(errors) == {"title", "authorId", "publishedYear"}

    @pytest.mark.parametrize("author_id", [True, "1", 1.0])
    def test_create_book_non_integer_author_id(self, test_client, sample_author, author_id):
        response = test_client.post("/books", json={"title": "Typed", "authorId": author_id})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "authorId" in response.json()["errors"]
        assert all(book["title"] != "Typed" for book in test_client.get("/books").json())

    @pytest.mark.parametrize("year", [True, "1949", 1949.0])
    def test_create_book_non_integer_year(self, test_client, sample_author, year):
        response = test_client.post(
            "/books",
            json={"title": "Typed", "authorId": sample_author["id"], "publishedYear": year},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "publishedYear" in response.json()["errors"]

    def test_update_book_string_author_id(self, test_client, sample_book, sample_author):
        response = test_client.patch(
            f"/books/{sample_book['id']}", json={"authorId": str(sample_author["id"])}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "authorId" in response.json()["errors"]

    def test_create_book_year_zero(self, test_client, sample_author):
        response = test_client.post(
            "/books",
            json={"title": "Ancient", "authorId": sample_author["id"], "publishedYear": 0},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "publishedYear" in response.json()["errors"]

    def test_create_book_current_year(self, test_client, sample_author):
        response = test_client.post(
            "/books",
            json={
                "title": "New Release",
                "authorId": sample_author["id"],
                "publishedYear": date.today().year,
            },
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_list_books(self, test_client, sample_book):
        response = test_client.get("/books")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data) == 1
        assert data[0]["id"] == sample_book["id"]
        assert data[0]["author"]["name"] == "Jane Austen"

    def test_get_book(self, test_client, sample_book):
        response = test_client.get(f"/books/{sample_book['id']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == sample_book

    def test_get_book_not_found(self, test_client):
        response = test_client.get("/books/999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Book with ID 999 not found"

    def test_update_book_partial(self, test_client, sample_book):
        response = test_client.patch(
            f"/books/{sample_book['id']}", json={"description": "Elizabeth and Mr. Darcy."}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["description"] == "Elizabeth and Mr. Darcy."
        assert data["title"] == sample_book["title"]
        assert data["publishedYear"] == sample_book["publishedYear"]

    def test_update_book_change_author(self, test_client, sample_book):
        other = test_client.post("/authors", json={"name": "Charlotte Bronte"}).json()

        response = test_client.patch(f"/books/{sample_book['id']}", json={"authorId": other["id"]})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["authorId"] == other["id"]
        assert data["author"]["name"] == "Charlotte Bronte"

    def test_update_book_missing_author(self, test_client, sample_book):
        response = test_client.patch(f"/books/{sample_book['id']}", json={"authorId": 999})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert test_client.get(f"/books/{sample_book['id']}").json()["authorId"] == sample_book["authorId"]

    def test_update_book_invalid_year(self, test_client, sample_book):
        response = test_client.patch(
            f"/books/{sample_book['id']}", json={"publishedYear": date.today().year + 1}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_book_not_found(self, test_client):
        response = test_client.patch("/books/999", json={"title": "Ghost"})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_book(self, test_client, sample_book, sample_author):
        response = test_client.delete(f"/books/{sample_book['id']}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert test_client.get(f"/books/{sample_book['id']}").status_code == status.HTTP_404_NOT_FOUND
        assert test_client.get(f"/authors/{sample_author['id']}").status_code == status.HTTP_200_OK

    def test_delete_book_not_found(self, test_client):
        response = test_client.delete("/books/999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
