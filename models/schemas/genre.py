from marshmallow import fields, validate

from models.schemas.common import FormSchema, validate_escaped_length

NAME_MAX = 100
NAME_TOO_LONG = f"Genre name must be at most {NAME_MAX} characters"


class GenreCreateSchema(FormSchema):
    ESCAPE = ("name",)

    name = fields.String(
        required=True,
        validate=[
            validate.Length(min=3, error="Genre name must contain at least 3 characters"),
            validate_escaped_length(NAME_MAX, NAME_TOO_LONG),
        ],
        error_messages={"required": "Genre name must contain at least 3 characters"},
    )


class GenreUpdateSchema(FormSchema):
    ESCAPE = ("name",)

    name = fields.String(
        required=True,
        validate=[
            validate.Length(min=1, error="Genre name must not be empty."),
            validate_escaped_length(NAME_MAX, NAME_TOO_LONG),
        ],
        error_messages={"required": "Genre name must not be empty."},
    )
