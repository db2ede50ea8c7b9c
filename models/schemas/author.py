from marshmallow import fields, validate, validates_schema, ValidationError

from models.schemas.common import FormSchema, IsoDate, validate_alphanumeric, validate_escaped_length


class AuthorFormSchema(FormSchema):
    ESCAPE = ("first_name", "family_name")
    OPTIONAL = ("date_of_birth", "date_of_death")

    first_name = fields.String(
        required=True,
        validate=[
            validate.Length(min=1, error="First name must be specified."),
            validate_escaped_length(100, "First name must be at most 100 characters."),
            validate_alphanumeric("First name has non-alphanumeric characters."),
        ],
        error_messages={"required": "First name must be specified."},
    )
    family_name = fields.String(
        required=True,
        validate=[
            validate.Length(min=1, error="Family name must be specified."),
            validate_escaped_length(100, "Family name must be at most 100 characters."),
            validate_alphanumeric("Family name has non-alphanumeric characters."),
        ],
        error_messages={"required": "Family name must be specified."},
    )
    date_of_birth = IsoDate(load_default=None, allow_none=True, error_messages={"invalid": "Invalid date of birth"})
    date_of_death = IsoDate(load_default=None, allow_none=True, error_messages={"invalid": "Invalid date of death"})

    @validates_schema
    def _validate_lifespan(self, data, **kwargs):
        born, died = data.get("date_of_birth"), data.get("date_of_death")
        if born and died and died < born:
            raise ValidationError("Date of death must not be before date of birth.", field_name="date_of_death")
