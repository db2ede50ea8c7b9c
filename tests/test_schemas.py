from datetime import date

import pytest
from marshmallow import ValidationError

from models.schemas.book import BookFormSchema
from models.schemas.book_instance import BookInstanceFormSchema
from models.schemas.common import form_errors, parse_iso_date
from models.schemas.genre import GenreCreateSchema, GenreUpdateSchema


class TestGenreSchemas:
    def test_create_trims_then_checks_length(self):
        with pytest.raises(ValidationError) as exc:
            GenreCreateSchema().load({"name": "  ab   "})
        assert exc.value.messages == {"name": ["Genre name must contain at least 3 characters"]}

    def test_update_accepts_single_character(self):
        assert GenreUpdateSchema().load({"name": " X "}) == {"name": "X"}

    def test_unknown_fields_are_ignored(self):
        assert GenreCreateSchema().load({"name": "Drama", "genreid": "abc"}) == {"name": "Drama"}

    def test_sanitize_keeps_rejected_value(self):
        assert GenreCreateSchema().sanitize({"name": " <i> "}) == {"name": "&lt;i&gt;"}

    def test_long_name_has_its_own_message(self):
        with pytest.raises(ValidationError) as exc:
            GenreCreateSchema().load({"name": "x" * 150})
        assert exc.value.messages == {"name": ["Genre name must be at most 100 characters"]}

    def test_length_limit_applies_to_escaped_name(self):
        # 30 characters that escape to 120
        with pytest.raises(ValidationError) as exc:
            GenreUpdateSchema().load({"name": "<" * 30})
        assert exc.value.messages == {"name": ["Genre name must be at most 100 characters"]}
        assert GenreUpdateSchema().load({"name": "<" * 25}) == {"name": "&lt;" * 25}


class TestBookInstanceSchema:
    def test_maps_form_names_to_model_fields(self):
        data = BookInstanceFormSchema().load({"book": "b1", "imprint": "First", "status": "Available"})
        assert data == {"book_id": "b1", "imprint": "First", "status": "Available", "due_back": None}

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2026-10-19", date(2026, 10, 19)),
            ("2026-10-19T08:30:00", date(2026, 10, 19)),
            ("2026-10-19T08:30:00Z", date(2026, 10, 19)),
        ],
    )
    def test_due_back_accepts_iso_8601(self, raw, expected):
        data = BookInstanceFormSchema().load({"book": "b1", "imprint": "i", "due_back": raw})
        assert data["due_back"] == expected

    def test_empty_due_back_is_none(self):
        data = BookInstanceFormSchema().load({"book": "b1", "imprint": "i", "due_back": "  "})
        assert data["due_back"] is None

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            BookInstanceFormSchema().load({"book": "b1", "imprint": "i", "status": "Lost"})
        assert exc.value.messages == {"status": ["Invalid status"]}


class TestBookSchema:
    def test_long_isbn_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            BookFormSchema().load({"title": "T", "author": "a1", "summary": "S", "isbn": "9" * 40})
        assert exc.value.messages == {"isbn": ["ISBN must be at most 32 characters"]}

    def test_single_genre_becomes_list(self):
        data = BookFormSchema().load({"title": "T", "author": "a1", "summary": "S", "isbn": "1", "genre": "g1"})
        assert data["genre_ids"] == ["g1"]
        assert data["author_id"] == "a1"


class TestFormErrors:
    def test_flattens_in_form_order(self):
        schema = BookInstanceFormSchema()
        with pytest.raises(ValidationError) as exc:
            schema.load({"due_back": "bad", "imprint": ""})
        assert form_errors(exc.value, schema) == [
            {"field": "book", "message": "Book must be specified"},
            {"field": "imprint", "message": "Imprint must be specified"},
            {"field": "due_back", "message": "Invalid date"},
        ]


def test_parse_iso_date_rejects_free_text():
    with pytest.raises(ValueError):
        parse_iso_date("tomorrow")
