from __future__ import annotations

from django.db import DEFAULT_DB_ALIAS, DataError, IntegrityError, transaction

from imports.exceptions import ConstraintViolationError


def upsert(model, values: dict, unique_fields, update_fields, using: str = DEFAULT_DB_ALIAS) -> int:
    """
    INSERT ... ON CONFLICT (unique_fields) DO UPDATE SET update_fields.

    `values` is keyed by attname (department_id, not department). The write
    runs in its own savepoint so a constraint violation unrelated to the
    unique key (duplicate email, dangling foreign key, a number too large
    for the column) fails this row only and leaves the surrounding transaction usable.

    Returns the affected row's primary key.
    """
    obj = model(**values)
    try:
        with transaction.atomic(using=using):
            model._default_manager.using(using).bulk_create(
                [obj],
                update_conflicts=True,
                unique_fields=list(unique_fields),
                update_fields=list(update_fields),
            )
    except (IntegrityError, DataError, OverflowError) as e:
        raise ConstraintViolationError(str(e)) from e

    if obj.pk is None:
        # Backends that do not return ids from ON CONFLICT statements
        lookup = {}
        for name in unique_fields:
            attname = model._meta.get_field(name).attname
            lookup[attname] = values[attname]
        obj.pk = model._default_manager.using(using).filter(**lookup).values_list("pk", flat=True).get()

    return obj.pk
