"""
Narrow data-access interface over one mapped model.

Controllers talk to a Repository instead of the session so the store can be
swapped (or faked in tests) without touching request handling. All calls go
through the storage's thread-scoped session.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional

import models


class Repository:
    def __init__(self, model, storage=None):
        self.model = model
        self._storage = storage

    @property
    def storage(self):
        # Resolved per call: the application factory may reconfigure the singleton
        return self._storage or models.storage

    @property
    def session(self):
        return self.storage.get_session()

    def _query(self, options: Iterable = ()):
        query = self.session.query(self.model)
        if options:
            query = query.options(*options)
        return query

    def find_by_id(self, obj_id: Optional[str], options: Iterable = ()):
        """Return the record with obj_id, or None. Relationship loaders go in options."""
        if not obj_id:
            return None
        if not options:
            return self.session.get(self.model, obj_id)
        return self._query(options).filter(self.model.id == obj_id).first()

    def find_all_sorted(self, *order_by, options: Iterable = ()) -> List[Any]:
        return self._query(options).order_by(*order_by).all()

    def find_by_filter(self, *criteria, order_by: Iterable = (), options: Iterable = ()) -> List[Any]:
        return self._query(options).filter(*criteria).order_by(*order_by).all()

    def find_one(self, *criteria):
        return self._query().filter(*criteria).first()

    def count(self, *criteria) -> int:
        return self._query().filter(*criteria).count()

    def insert(self, obj):
        self.storage.new(obj)
        self.storage.save()
        return obj

    def update_by_id(self, obj_id: str, values: dict):
        """Replace the given fields on the record matched by obj_id; None when nothing matches."""
        obj = self.find_by_id(obj_id)
        if obj is None:
            return None
        for field, value in values.items():
            setattr(obj, field, value)
        self.storage.new(obj)
        self.storage.save()
        return obj

    def delete_by_id(self, obj_id: Optional[str]) -> bool:
        obj = self.find_by_id(obj_id)
        if obj is None:
            return False
        self.storage.delete(obj)
        self.storage.save()
        return True
