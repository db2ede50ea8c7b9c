from marshmallow import fields, validate

from models.schemas.common import FormSchema, validate_escaped_length


class BookFormSchema(FormSchema):
    ESCAPE = ("title", "author_id", "summary", "isbn", "genre_ids")
    MULTI = ("genre",)

    title = fields.String(
        required=True,
        validate=[
            validate.Length(min=1, error="Title must not be empty."),
            validate_escaped_length(255, "Title must be at most 255 characters."),
        ],
        error_messages={"required": "Title must not be empty."},
    )
    author_id = fields.String(
        data_key="author",
        required=True,
        validate=[
            validate.Length(min=1, error="Author must not be empty."),
            validate_escaped_length(36, "Invalid author."),
        ],
        error_messages={"required": "Author must not be empty."},
    )
    summary = fields.String(
        required=True,
        validate=validate.Length(min=1, error="Summary must not be empty."),
        error_messages={"required": "Summary must not be empty."},
    )
    isbn = fields.String(
        required=True,
        validate=[
            validate.Length(min=1, error="ISBN must not be empty"),
            validate_escaped_length(32, "ISBN must be at most 32 characters"),
        ],
        error_messages={"required": "ISBN must not be empty"},
    )
    genre_ids = fields.List(
        fields.String(validate=validate_escaped_length(36, "Invalid genre.")),
        data_key="genre",
        load_default=list,
    )
