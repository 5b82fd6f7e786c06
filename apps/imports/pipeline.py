from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, transaction

from imports.exceptions import InputError, RowError, RowValidationError, TransactionFailure
from imports.normalizers import clean_str, normalize_value
from imports.references import ReferenceResolver
from imports.schemas import EntitySchema, HeaderMap, get_schema, SCHEMAS
from imports.upsert import upsert

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    entity: str
    label: str
    total_rows: int = 0
    success_count: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def add_error(self, row_num: int, exc: Exception):
        self.errors.append(f"Row {row_num}: {exc}")

    def to_dict(self, preview: int | None = None) -> dict:
        if preview is None:
            preview = getattr(settings, "IMPORT_ERROR_PREVIEW", 10)
        return {
            "success": True,
            "message": f"Successfully imported {self.success_count} {self.label}",
            "details": {
                "totalRows": self.total_rows,
                "successCount": self.success_count,
                "errorCount": self.error_count,
                "errors": self.errors[:preview],
            },
        }


class ImportPipeline:
    """
    Streams one CSV file through resolve -> normalize -> validate ->
    resolve references -> upsert, inside a single transaction.

    Rules:
    - A bad row (missing field, bad date, unknown reference, constraint
      violation) is reported as "Row <n>: <reason>" and skipped.
    - Good rows are committed even when other rows failed.
    - A file that is not UTF-8 CSV is rejected as a whole with InputError.
    - Anything else going wrong while the transaction is open rolls back the
      whole file and raises TransactionFailure.
    """

    def __init__(self, schema: EntitySchema, using: str = DEFAULT_DB_ALIAS):
        self.schema = schema
        self.using = using

    def run(self, file_path, actor=None) -> ImportResult:
        result = ImportResult(entity=self.schema.key, label=self.schema.label)
        try:
            with open(file_path, newline="", encoding="utf-8-sig") as fh:
                reader = csv.DictReader(fh)
                headers = HeaderMap(reader.fieldnames or [], self.schema)
                if headers.missing:
                    logger.debug("%s file has no column for: %s", self.schema.key, ", ".join(headers.missing))
                resolver = ReferenceResolver(self.using)

                with transaction.atomic(using=self.using):
                    # Row 1 is the header
                    for row_num, row in enumerate(reader, start=2):
                        result.total_rows += 1
                        try:
                            self.import_row(headers.resolve(row), resolver)
                        except RowError as e:
                            result.add_error(row_num, e)
                        else:
                            result.success_count += 1
        except (UnicodeDecodeError, csv.Error) as e:
            logger.warning("%s import rejected (actor=%s): unreadable file: %s", self.schema.key, actor, e)
            raise InputError(f"File is not a valid UTF-8 CSV file: {e}") from e
        except Exception as e:
            logger.exception("%s import failed (actor=%s): %s", self.schema.key, actor, e)
            raise TransactionFailure(str(e)) from e

        logger.info(
            "%s import (actor=%s): rows=%d imported=%d errors=%d",
            self.schema.key,
            actor,
            result.total_rows,
            result.success_count,
            result.error_count,
        )
        return result

    def import_row(self, raw: dict, resolver: ReferenceResolver) -> int:
        schema = self.schema

        missing = [c.header for c in schema.required_columns if clean_str(raw.get(c.name)) is None]
        if missing:
            raise RowValidationError(f"Missing required fields ({', '.join(missing)})")

        values = {c.name: normalize_value(c, raw.get(c.name)) for c in schema.columns}

        if schema.prepare is not None:
            values = schema.prepare(values)

        model_values = self.model_values(values)
        for ref in schema.references:
            natural_key = values.get(ref.column)
            model_values[ref.attname] = resolver.resolve(ref, natural_key) if natural_key is not None else None

        for name in schema.unique_fields:
            attname = schema.model._meta.get_field(name).attname
            if model_values.get(attname) is None:
                raise RowValidationError(f"Missing required fields ({name})")

        return upsert(
            schema.model,
            model_values,
            schema.unique_fields,
            schema.update_fields,
            using=self.using,
        )

    def model_values(self, values: dict) -> dict:
        """Map normalized columns onto model attnames; absent cells take the model default."""
        opts = self.schema.model._meta
        skip = self.schema.reference_columns
        out = {}
        for name, value in values.items():
            if name in skip:
                continue
            if value is None:
                value = opts.get_field(name).get_default()
            out[name] = value
        return out


def run_import(entity_type: str, file_path, actor=None, using: str = DEFAULT_DB_ALIAS) -> ImportResult:
    schema = get_schema(entity_type)
    if schema is None:
        raise InputError(f"Invalid upload type '{entity_type}'. Available types: {', '.join(SCHEMAS)}")
    return ImportPipeline(schema, using=using).run(file_path, actor=actor)
