#!/usr/bin/env python3
"""
Shared SQLAlchemy base for the library catalog.

- UUID primary key (String(36)) generated on construction
- created_at / updated_at timestamps
- save() that uses the DBStorage singleton
- to_dict() that formats timestamps, removes SA internals, adds __class__
- url property built from the model's URL_SEGMENT

Notes:
- We use server-side defaults (func.now()) so timestamps are set consistently by the DB.
- For SQLite, func.now() maps to CURRENT_TIMESTAMP.
"""

from __future__ import annotations

from datetime import datetime, date, timezone
import uuid

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
# defined in models/__init__.py.
import models

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

TIME_FMT = "%Y-%m-%dT%H:%M:%S.%f"
# Medium date, e.g. "Oct 19, 2026"
DATE_MED_FMT = "%b %d, %Y"

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


def format_date_med(value) -> str:
    """Render a date as e.g. "Oct 19, 2026"; empty string for unset values."""
    if isinstance(value, date):
        return value.strftime(DATE_MED_FMT)
    return ""


class BaseModel:
    """
    Base mixin for all persistent models.

    - id, created_at, updated_at
    - save() wired to DBStorage
    - to_dict() with __class__ and timestamp formatting
    - url, the catalog page of the record
    """

    # Path segment under /catalog/ for the detail page; set by subclasses
    URL_SEGMENT = None

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        We do NOT force created_at/updated_at in __init__; DB defaults handle those on insert.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        # Ensure an id exists if caller passed none, so url is usable before flush
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __str__(self) -> str:
        """Human-friendly representation including id and fields."""
        return f"[{self.__class__.__name__}] ({self.id}) {self.to_dict()}"

    @property
    def url(self) -> str:
        return f"/catalog/{self.URL_SEGMENT}/{self.id}"

    def save(self):
        """Update updated_at and persist the instance using DBStorage."""
        # Let DB onupdate handle updated_at; setting here helps when the object isn't flushed yet.
        self.updated_at = datetime.now(timezone.utc)
        models.storage.new(self)
        models.storage.save()

    def to_dict(self) -> dict:
        """
        Return a dictionary of column values:
        - Adds __class__
        - Formats created_at / updated_at to TIME_FMT if they are datetime objects
        - Removes SQLAlchemy internal state and loaded relationships
        """
        d = {k: v for k, v in self.__dict__.items() if k != "_sa_instance_state" and not isinstance(v, (Base, list))}
        if isinstance(d.get("created_at"), datetime):
            d["created_at"] = d["created_at"].strftime(TIME_FMT)
        if isinstance(d.get("updated_at"), datetime):
            d["updated_at"] = d["updated_at"].strftime(TIME_FMT)
        d["__class__"] = self.__class__.__name__
        return d
