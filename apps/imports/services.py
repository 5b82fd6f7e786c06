from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from datetime import datetime

from django.conf import settings
from django.core.files.storage import FileSystemStorage
from django.db import DEFAULT_DB_ALIAS

from academics.models import Classroom, Course, Department, Faculty
from students.models import Student

from imports.exceptions import InputError
from imports.pipeline import ImportResult, run_import
from imports.schemas import SCHEMAS, get_schema

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPES = ("text/csv", "application/csv")


def _imports_storage() -> FileSystemStorage:
    imports_dir = os.path.join(settings.MEDIA_ROOT, "imports")
    os.makedirs(imports_dir, exist_ok=True)
    return FileSystemStorage(location=imports_dir)


def validate_upload(upload):
    """Reject a missing, non-CSV or oversized upload before anything is parsed."""
    if not upload:
        raise InputError("No file uploaded")

    name = (getattr(upload, "name", "") or "").lower()
    content_type = (getattr(upload, "content_type", "") or "").lower()
    if not (name.endswith(".csv") or content_type in CSV_CONTENT_TYPES):
        raise InputError("Only CSV files are allowed")

    max_bytes = settings.CSV_UPLOAD_MAX_BYTES
    if upload.size is not None and upload.size > max_bytes:
        raise InputError(f"File too large ({upload.size} bytes). Maximum is {max_bytes} bytes")


@contextmanager
def stored_upload(upload, prefix: str):
    """Save the upload under MEDIA_ROOT/imports and always delete it afterwards."""
    fs = _imports_storage()
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = fs.save(f"{prefix}_{ts}_{os.path.basename(upload.name)}", upload)
    try:
        yield fs.path(filename)
    finally:
        try:
            fs.delete(filename)
        except OSError:
            logger.warning("Could not remove uploaded file %s", filename, exc_info=True)


def import_uploaded_csv(entity_type: str, upload, actor=None, using: str = DEFAULT_DB_ALIAS) -> ImportResult:
    schema = get_schema(entity_type)
    if schema is None:
        raise InputError(f"Invalid upload type '{entity_type}'. Available types: {', '.join(SCHEMAS)}")
    validate_upload(upload)

    with stored_upload(upload, schema.key) as file_path:
        return run_import(schema.key, file_path, actor=actor, using=using)


def collect_stats(using: str = DEFAULT_DB_ALIAS) -> dict:
    return {
        "departments": Department.objects.using(using).count(),
        "courses": Course.objects.using(using).count(),
        "students": Student.objects.using(using).filter(deleted_at__isnull=True).count(),
        "faculty": Faculty.objects.using(using).filter(deleted_at__isnull=True).count(),
        "classrooms": Classroom.objects.using(using).count(),
    }
