from __future__ import annotations

from django.db import DEFAULT_DB_ALIAS

from imports.exceptions import UnresolvedReferenceError


class ReferenceResolver:
    """
    Looks up foreign natural keys (department code, student ID, ...) and
    returns surrogate ids.

    Queries go through the same database alias, inside the same open
    transaction, as the writes, so rows inserted earlier in the same file
    are visible. Only hits are cached: a miss may be satisfied by a later
    row of the same file.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using
        self._hits: dict[tuple, int] = {}

    def lookup(self, model, field: str, value) -> int | None:
        key = (model._meta.label, field, value)
        if key in self._hits:
            return self._hits[key]

        pk = (
            model._default_manager.using(self.using)
            .filter(**{field: value})
            .values_list("pk", flat=True)
            .first()
        )
        if pk is not None:
            self._hits[key] = pk
        return pk

    def resolve(self, reference, value) -> int:
        pk = self.lookup(reference.model, reference.lookup, value)
        if pk is None:
            raise UnresolvedReferenceError(f"{reference.label} '{value}' not found")
        return pk
