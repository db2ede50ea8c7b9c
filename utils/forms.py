from __future__ import annotations

import logging
from datetime import date
from typing import List, Tuple

from marshmallow import ValidationError

from models.schemas.common import FormSchema, form_errors

logger = logging.getLogger(__name__)


def form_data(form, multi=()) -> dict:
    """Plain dict of a submitted MultiDict; keys in multi keep every value."""
    return {key: form.getlist(key) if key in multi else form.get(key) for key in form.keys()}


def load_form(schema: FormSchema, form) -> Tuple[dict, List[dict]]:
    """
    Validate a submitted form.

    Returns (data, errors). On success errors is empty and data is ready to
    persist; on failure data is the sanitized submission for re-rendering.
    """
    raw = form_data(form, schema.MULTI)
    try:
        return schema.load(raw), []
    except ValidationError as err:
        errors = form_errors(err, schema)
        logger.debug("Form rejected by %s: %s", schema.__class__.__name__, errors)
        return schema.sanitize(raw), errors


def form_date(value) -> str:
    """Value for an <input type="date">: ISO date, or the raw text the user sent."""
    if isinstance(value, date):
        return value.isoformat()
    return value or ""
