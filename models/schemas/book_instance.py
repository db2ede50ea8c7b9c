from marshmallow import fields, validate, post_load

from models.book_instance import BookInstanceStatus
from models.schemas.common import FormSchema, IsoDate, validate_escaped_length

STATUS_VALUES = [status.value for status in BookInstanceStatus]


class BookInstanceFormSchema(FormSchema):
    """Create and update share one form: book, imprint, status, due_back."""

    ESCAPE = ("book_id", "imprint", "status")
    OPTIONAL = ("status", "due_back")

    book_id = fields.String(
        data_key="book",
        required=True,
        validate=[
            validate.Length(min=1, error="Book must be specified"),
            validate_escaped_length(36, "Invalid book"),
        ],
        error_messages={"required": "Book must be specified"},
    )
    imprint = fields.String(
        required=True,
        validate=[
            validate.Length(min=1, error="Imprint must be specified"),
            validate_escaped_length(255, "Imprint must be at most 255 characters"),
        ],
        error_messages={"required": "Imprint must be specified"},
    )
    # Not required; a blank choice falls back to the model default
    status = fields.String(
        load_default=BookInstanceStatus.MAINTENANCE.value,
        allow_none=True,
        validate=validate.OneOf(STATUS_VALUES, error="Invalid status"),
    )
    due_back = IsoDate(load_default=None, allow_none=True, error_messages={"invalid": "Invalid date"})

    @post_load
    def _default_status(self, data, **kwargs):
        data["status"] = data.get("status") or BookInstanceStatus.MAINTENANCE.value
        return data
