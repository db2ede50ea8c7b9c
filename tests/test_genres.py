from models.book import Book
from models.genre import Genre


def template_names(captured):
    return [name for name, _ in captured]


class TestGenreList:
    def test_sorted_by_name(self, client, db, captured_templates):
        for name in ("Poetry", "Fantasy", "Mystery"):
            Genre(name=name).save()
        response = client.get("/catalog/genres")
        assert response.status_code == 200
        name, context = captured_templates[-1]
        assert name == "genre_list.html"
        assert [g.name for g in context["genre_list"]] == ["Fantasy", "Mystery", "Poetry"]


class TestGenreDetail:
    def test_lists_books_in_genre(self, client, book, genre, captured_templates):
        response = client.get(f"/catalog/genre/{genre.id}")
        assert response.status_code == 200
        _, context = captured_templates[-1]
        assert context["genre"].id == genre.id
        assert [b.id for b in context["genre_books"]] == [book.id]
        assert b"The Name of the Wind" in response.data

    def test_missing_genre_is_404(self, client, db, captured_templates):
        response = client.get("/catalog/genre/does-not-exist")
        assert response.status_code == 404
        assert template_names(captured_templates) == ["error.html"]
        assert b"Genre not found" in response.data


class TestGenreCreate:
    def test_get_renders_empty_form(self, client, db, captured_templates):
        response = client.get("/catalog/genre/create")
        assert response.status_code == 200
        name, context = captured_templates[-1]
        assert name == "genre_form.html"
        assert "genre" not in context

    def test_short_name_is_not_saved(self, client, db, captured_templates):
        response = client.post("/catalog/genre/create", data={"name": "  ab  "})
        assert response.status_code == 200
        assert db.query(Genre).count() == 0
        name, context = captured_templates[-1]
        assert name == "genre_form.html"
        assert context["genre"]["name"] == "ab"
        assert [e["field"] for e in context["errors"]] == ["name"]
        assert context["errors"][0]["message"] == "Genre name must contain at least 3 characters"

    def test_missing_name_is_a_field_error(self, client, db, captured_templates):
        response = client.post("/catalog/genre/create", data={})
        assert response.status_code == 200
        _, context = captured_templates[-1]
        assert context["errors"] == [
            {"field": "name", "message": "Genre name must contain at least 3 characters"}
        ]

    def test_valid_name_is_inserted(self, client, db):
        response = client.post("/catalog/genre/create", data={"name": "  Science Fiction "})
        genre = db.query(Genre).one()
        assert genre.name == "Science Fiction"
        assert response.status_code == 302
        assert response.headers["Location"] == f"/catalog/genre/{genre.id}"

    def test_name_is_html_escaped(self, client, db):
        client.post("/catalog/genre/create", data={"name": "<b>Horror</b>"})
        assert db.query(Genre).one().name == "&lt;b&gt;Horror&lt;/b&gt;"

    def test_name_too_long_once_escaped_is_not_saved(self, client, db, captured_templates):
        response = client.post("/catalog/genre/create", data={"name": "<" * 30})
        assert response.status_code == 200
        assert db.query(Genre).count() == 0
        _, context = captured_templates[-1]
        assert context["errors"] == [{"field": "name", "message": "Genre name must be at most 100 characters"}]

    def test_duplicate_name_redirects_to_existing(self, client, db, genre):
        response = client.post("/catalog/genre/create", data={"name": "Fantasy"})
        assert response.status_code == 302
        assert response.headers["Location"] == f"/catalog/genre/{genre.id}"
        assert db.query(Genre).count() == 1


class TestGenreDelete:
    def test_get_missing_genre_redirects_to_list(self, client, db):
        response = client.get("/catalog/genre/does-not-exist/delete")
        assert response.status_code == 302
        assert response.headers["Location"] == "/catalog/genres"

    def test_get_lists_dependent_books(self, client, book, genre, captured_templates):
        response = client.get(f"/catalog/genre/{genre.id}/delete")
        assert response.status_code == 200
        name, context = captured_templates[-1]
        assert name == "genre_delete.html"
        assert [b.id for b in context["books_using_genre"]] == [book.id]

    def test_post_refuses_while_books_use_genre(self, client, db, book, genre, captured_templates):
        response = client.post(f"/catalog/genre/{genre.id}/delete", data={"genreid": genre.id})
        assert response.status_code == 200
        assert db.get(Genre, genre.id) is not None
        name, context = captured_templates[-1]
        assert name == "genre_delete.html"
        assert [b.title for b in context["books_using_genre"]] == ["The Name of the Wind"]

    def test_post_deletes_unused_genre(self, client, db, genre):
        response = client.post(f"/catalog/genre/{genre.id}/delete", data={"genreid": genre.id})
        assert response.status_code == 302
        assert response.headers["Location"] == "/catalog/genres"
        assert db.query(Genre).count() == 0

    def test_post_without_body_id_uses_path_id(self, client, db, genre):
        client.post(f"/catalog/genre/{genre.id}/delete")
        assert db.query(Genre).count() == 0

    def test_post_checks_books_of_the_body_genre(self, client, db, book, genre, captured_templates):
        unused = Genre(name="Poetry")
        unused.save()
        response = client.post(f"/catalog/genre/{unused.id}/delete", data={"genreid": genre.id})
        assert response.status_code == 200
        assert db.get(Genre, genre.id) is not None
        assert [g.id for g in db.get(Book, book.id).genres] == [genre.id]
        _, context = captured_templates[-1]
        assert context["genre"].id == genre.id


class TestGenreUpdate:
    def test_get_prefills_form(self, client, genre, captured_templates):
        response = client.get(f"/catalog/genre/{genre.id}/update")
        assert response.status_code == 200
        _, context = captured_templates[-1]
        assert context["genre"].name == "Fantasy"
        assert b'value="Fantasy"' in response.data

    def test_get_missing_genre_is_404(self, client, db):
        assert client.get("/catalog/genre/nope/update").status_code == 404

    def test_post_replaces_name(self, client, db, genre):
        response = client.post(f"/catalog/genre/{genre.id}/update", data={"name": " Epic Fantasy "})
        assert response.status_code == 302
        assert response.headers["Location"] == f"/catalog/genre/{genre.id}"
        assert db.get(Genre, genre.id).name == "Epic Fantasy"

    def test_post_empty_name_rerenders(self, client, db, genre, captured_templates):
        response = client.post(f"/catalog/genre/{genre.id}/update", data={"name": "   "})
        assert response.status_code == 200
        _, context = captured_templates[-1]
        assert context["errors"] == [{"field": "name", "message": "Genre name must not be empty."}]
        assert context["genre"]["id"] == genre.id
        assert db.get(Genre, genre.id).name == "Fantasy"

    def test_post_missing_genre_is_404(self, client, db):
        response = client.post("/catalog/genre/nope/update", data={"name": "Anything"})
        assert response.status_code == 404
        assert db.query(Genre).count() == 0
