from datetime import date, datetime
from typing import List

from markupsafe import escape
from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, post_load


def trim(value):
    """Strip surrounding whitespace from strings (and strings inside lists)."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        return [trim(v) for v in value]
    return value


def escape_html(value):
    """HTML-escape strings (and strings inside lists); other values pass through."""
    if isinstance(value, str):
        return str(escape(value))
    if isinstance(value, (list, tuple)):
        return [escape_html(v) for v in value]
    return value


def validate_alphanumeric(message: str):
    def _validate(value: str) -> None:
        if not value.isalnum():
            raise ValidationError(message)
    return _validate


def validate_escaped_length(maximum: int, message: str):
    """Reject values whose HTML-escaped form would not fit a column of `maximum` characters."""
    def _validate(value: str) -> None:
        if len(escape_html(value)) > maximum:
            raise ValidationError(message)
    return _validate


def parse_iso_date(raw: str) -> date:
    """Parse an ISO-8601 date or date-time string into a date."""
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    # Date-times (with or without offset) keep only their calendar date
    return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()


class IsoDate(fields.Field):
    """A date sent as ISO-8601 text; date-time strings are truncated to the date."""

    default_error_messages = {"invalid": "Invalid date"}

    def _serialize(self, value, attr, obj, **kwargs):
        return value.isoformat() if value else None

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, date):
            return value
        if not isinstance(value, str):
            raise self.make_error("invalid")
        try:
            return parse_iso_date(value)
        except ValueError as exc:
            raise self.make_error("invalid") from exc


class FormSchema(Schema):
    """
    Base for HTML form schemas.

    - every string is trimmed before validation
    - empty optional fields (listed in OPTIONAL) load as None
    - fields listed in ESCAPE are HTML-escaped after validation
    - unknown form fields (ids of the record being edited, submit buttons) are ignored
    """

    ESCAPE: tuple = ()
    OPTIONAL: tuple = ()
    # Fields submitted as repeated keys (checkbox groups)
    MULTI: tuple = ()

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def _trim(self, data, **kwargs):
        cleaned = {key: trim(value) for key, value in data.items()}
        for key in self.OPTIONAL:
            if cleaned.get(key) in ("", None):
                cleaned[key] = None
        for key in self.MULTI:
            value = cleaned.get(key)
            if value is None or value == "":
                cleaned[key] = []
            elif isinstance(value, str):
                cleaned[key] = [value]
        return cleaned

    @post_load
    def _escape(self, data, **kwargs):
        for name in self.ESCAPE:
            attr = self.fields[name].attribute or name
            if attr in data:
                data[attr] = escape_html(data[attr])
        return data

    def sanitize(self, form) -> dict:
        """
        Trimmed, escaped copy of the submitted values keyed like load() output,
        used to re-render a form that failed validation.
        """
        data = self._trim(dict(form))
        out = {}
        for name, field in self.load_fields.items():
            key = field.data_key or name
            if key not in data:
                continue
            value = data[key]
            out[field.attribute or name] = escape_html(value) if name in self.ESCAPE else value
        return out


def form_errors(err: ValidationError, schema: Schema) -> List[dict]:
    """Flatten marshmallow messages into [{"field": ..., "message": ...}] in form field order."""
    messages = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
    order = {field.data_key or name: i for i, (name, field) in enumerate(schema.load_fields.items())}
    errors = []
    for field in sorted(messages, key=lambda f: order.get(f, len(order))):
        msgs = messages[field]
        if isinstance(msgs, dict):
            # Nested/list fields report per-index messages
            msgs = [m for sub in msgs.values() for m in (sub if isinstance(sub, list) else [sub])]
        for message in msgs:
            errors.append({"field": field, "message": message})
    return errors
