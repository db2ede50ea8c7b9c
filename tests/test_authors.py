from datetime import date

from models.author import Author


class TestAuthorPages:
    def test_list_sorted_by_family_name(self, client, db, captured_templates):
        Author(first_name="Ursula", family_name="LeGuin").save()
        Author(first_name="Iain", family_name="Banks").save()
        client.get("/catalog/authors")
        _, context = captured_templates[-1]
        assert [a.name for a in context["author_list"]] == ["Banks, Iain", "LeGuin, Ursula"]

    def test_detail_lists_books(self, client, author, book, captured_templates):
        response = client.get(f"/catalog/author/{author.id}")
        assert response.status_code == 200
        _, context = captured_templates[-1]
        assert [b.id for b in context["author_books"]] == [book.id]

    def test_detail_missing_author_is_404(self, client, db):
        response = client.get("/catalog/author/missing")
        assert response.status_code == 404
        assert b"Author not found" in response.data


class TestAuthorCreate:
    def test_valid_author_is_inserted(self, client, db):
        response = client.post(
            "/catalog/author/create",
            data={"first_name": " Iain ", "family_name": "Banks", "date_of_birth": "1954-02-16", "date_of_death": ""},
        )
        author = db.query(Author).one()
        assert response.status_code == 302
        assert response.headers["Location"] == f"/catalog/author/{author.id}"
        assert author.first_name == "Iain"
        assert author.date_of_birth == date(1954, 2, 16)
        assert author.date_of_death is None

    def test_non_alphanumeric_and_bad_dates_are_reported(self, client, db, captured_templates):
        response = client.post(
            "/catalog/author/create",
            data={"first_name": "Jean-Luc", "family_name": "Picard", "date_of_birth": "soon"},
        )
        assert response.status_code == 200
        assert db.query(Author).count() == 0
        _, context = captured_templates[-1]
        assert context["errors"] == [
            {"field": "first_name", "message": "First name has non-alphanumeric characters."},
            {"field": "date_of_birth", "message": "Invalid date of birth"},
        ]
        assert context["author"]["first_name"] == "Jean-Luc"

    def test_death_before_birth_is_rejected(self, client, db, captured_templates):
        client.post(
            "/catalog/author/create",
            data={"first_name": "A", "family_name": "B", "date_of_birth": "2000-01-01", "date_of_death": "1999-01-01"},
        )
        _, context = captured_templates[-1]
        assert [e["field"] for e in context["errors"]] == ["date_of_death"]


class TestAuthorDelete:
    def test_get_missing_author_redirects_to_list(self, client, db):
        response = client.get("/catalog/author/missing/delete")
        assert response.status_code == 302
        assert response.headers["Location"] == "/catalog/authors"

    def test_post_refuses_while_books_exist(self, client, db, author, book):
        response = client.post(f"/catalog/author/{author.id}/delete", data={"authorid": author.id})
        assert response.status_code == 200
        assert b"Delete the following books" in response.data
        assert db.get(Author, author.id) is not None

    def test_post_checks_books_of_the_body_author(self, client, db, author, book):
        other = Author(first_name="Robin", family_name="Hobb")
        other.save()
        response = client.post(f"/catalog/author/{other.id}/delete", data={"authorid": author.id})
        assert response.status_code == 200
        assert b"Delete the following books" in response.data
        assert db.get(Author, author.id) is not None

    def test_post_deletes_author_without_books(self, client, db, author):
        response = client.post(f"/catalog/author/{author.id}/delete", data={"authorid": author.id})
        assert response.status_code == 302
        assert db.query(Author).count() == 0


class TestAuthorUpdate:
    def test_get_prefills_dates(self, client, db):
        author = Author(first_name="Iain", family_name="Banks", date_of_birth=date(1954, 2, 16))
        author.save()
        response = client.get(f"/catalog/author/{author.id}/update")
        assert response.status_code == 200
        assert b'value="1954-02-16"' in response.data

    def test_post_replaces_fields(self, client, db, author):
        response = client.post(
            f"/catalog/author/{author.id}/update",
            data={"first_name": "Pat", "family_name": "Rothfuss", "date_of_birth": "1973-06-06"},
        )
        assert response.status_code == 302
        updated = db.get(Author, author.id)
        assert updated.name == "Rothfuss, Pat"
        assert updated.lifespan == "Jun 06, 1973 - "
