from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.models import Count, Q

from students.models import Enrollment, Student

from cohorts.models import Batch
from imports.exceptions import InputError, TransactionFailure
from imports.upsert import upsert

logger = logging.getLogger(__name__)


def min_batch_size() -> int:
    return int(getattr(settings, "BATCH_MIN_SIZE", 20))


def max_batch_size() -> int:
    return int(getattr(settings, "BATCH_MAX_SIZE", 60))


@dataclass
class EnrolledStudent:
    id: int
    student_id: str
    program_id: int
    program_code: str
    program_name: str
    department_code: str
    duration_years: int
    enrollment_year: int
    courses: list[str] = field(default_factory=list)

    @property
    def signature(self) -> str:
        """Sorted, comma-joined course codes: identical signature => identical timetable."""
        return ",".join(sorted(set(self.courses)))


@dataclass
class PlannedBatch:
    name: str
    program_id: int
    program_code: str
    program_name: str
    enrollment_year: int
    duration_years: int
    signature: str
    students: list[EnrolledStudent]
    below_minimum: bool = False

    @property
    def size(self) -> int:
        return len(self.students)


@dataclass
class BatchRun:
    success: bool
    message: str
    batches_created: int = 0
    students_processed: int = 0
    errors: list[str] = field(default_factory=list)
    batches: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "details": {
                "batchesCreated": self.batches_created,
                "totalStudentsProcessed": self.students_processed,
                "errorCount": len(self.errors),
                "errors": self.errors[:10],
                "batches": self.batches,
            },
        }


# ======================================================
# GROUPING
# ======================================================

def collect_enrolled_students(academic_year: str, semester: int, using: str = DEFAULT_DB_ALIAS) -> list[EnrolledStudent]:
    """
    Every non-deleted student with at least one enrollment in (year, semester),
    with their enrolled course codes.

    Ordered by program code, enrollment year, course signature, student ID.
    """
    rows = (
        Enrollment.objects.using(using)
        .filter(academic_year=academic_year, semester=semester, student__deleted_at__isnull=True)
        .values_list(
            "student_id",
            "student__student_id",
            "student__program_id",
            "student__program__code",
            "student__program__name",
            "student__program__department__code",
            "student__program__duration_years",
            "student__enrollment_year",
            "course__course_code",
        )
    )

    by_student: dict[int, EnrolledStudent] = {}
    for pk, sid, program_id, code, name, dept, duration, year, course_code in rows:
        student = by_student.get(pk)
        if student is None:
            student = by_student[pk] = EnrolledStudent(
                id=pk,
                student_id=sid,
                program_id=program_id,
                program_code=code,
                program_name=name,
                department_code=dept,
                duration_years=duration,
                enrollment_year=year,
            )
        student.courses.append(course_code)

    return sorted(
        by_student.values(),
        key=lambda s: (s.program_code, s.enrollment_year, s.signature, s.student_id),
    )


def group_by_program(students) -> dict[tuple[str, int], list[EnrolledStudent]]:
    groups: dict[tuple[str, int], list[EnrolledStudent]] = {}
    for s in students:
        groups.setdefault((s.program_code, s.enrollment_year), []).append(s)
    return groups


def group_by_pattern(students) -> dict[str, list[EnrolledStudent]]:
    patterns: dict[str, list[EnrolledStudent]] = {}
    for s in students:
        patterns.setdefault(s.signature, []).append(s)
    return patterns


def split_group(students: list, max_size: int) -> list[list]:
    """
    Groups above max_size become ceil(n / max_size) chunks of
    ceil(n / chunks) students each (the last may be smaller), order kept.
    """
    n = len(students)
    if n <= max_size:
        return [list(students)]
    num_batches = math.ceil(n / max_size)
    per_batch = math.ceil(n / num_batches)
    return [students[i * per_batch:(i + 1) * per_batch] for i in range(num_batches)]


def batch_name(program_code: str, enrollment_year: int, sequence: int) -> str:
    return f"{program_code}-{enrollment_year}-B{sequence}"


def plan_batches(students, min_size: int | None = None, max_size: int | None = None) -> list[PlannedBatch]:
    """
    Partition students into cohorts without touching the database.

    Program group (program code + enrollment year) -> pattern group
    (identical course signature) -> size split. Sequence numbers restart
    at 1 for every program group. Undersized pattern groups still get
    their own batch; they are only flagged.
    """
    min_size = min_batch_size() if min_size is None else min_size
    max_size = max_batch_size() if max_size is None else max_size

    planned = []
    for (program_code, year), members in group_by_program(students).items():
        sequence = 1
        for signature, pattern_students in group_by_pattern(members).items():
            for chunk in split_group(pattern_students, max_size):
                first = chunk[0]
                planned.append(
                    PlannedBatch(
                        name=batch_name(program_code, year, sequence),
                        program_id=first.program_id,
                        program_code=program_code,
                        program_name=first.program_name,
                        enrollment_year=year,
                        duration_years=first.duration_years,
                        signature=signature,
                        students=chunk,
                        below_minimum=len(chunk) < min_size,
                    )
                )
                sequence += 1
    return planned


# ======================================================
# GENERATION
# ======================================================

def validate_term(academic_year, semester) -> tuple[str, int]:
    academic_year = str(academic_year or "").strip()
    if not academic_year or semester in (None, ""):
        raise InputError("Academic year and semester are required")
    try:
        value = int(str(semester).strip())
    except (TypeError, ValueError):
        raise InputError(f"Invalid semester '{semester}'")
    if value < 1:
        raise InputError(f"Invalid semester '{semester}'")
    return academic_year, value


def generate_batches(academic_year, semester, using: str = DEFAULT_DB_ALIAS) -> BatchRun:
    """
    Build cohorts for every student enrolled in (academic_year, semester)
    and assign each student to exactly one of them.

    All or nothing: any failure while writing rolls back every batch and
    assignment of the run and raises TransactionFailure.
    """
    academic_year, semester = validate_term(academic_year, semester)

    try:
        with transaction.atomic(using=using):
            students = collect_enrolled_students(academic_year, semester, using=using)
            if not students:
                return BatchRun(
                    success=False,
                    message="No student enrollments found for the specified academic year and semester",
                )

            planned = plan_batches(students)
            batch_ids = []
            for plan in planned:
                batch_ids.append(_write_batch(plan, semester, using))

            summaries = describe_batches(batch_ids, planned, using)
    except InputError:
        raise
    except Exception as e:
        logger.exception("Batch generation failed for %s semester %s", academic_year, semester)
        raise TransactionFailure(str(e)) from e

    logger.info(
        "Batch generation %s semester %s: %d batches for %d students",
        academic_year,
        semester,
        len(planned),
        len(students),
    )
    return BatchRun(
        success=True,
        message=f"Successfully created {len(planned)} batches using intelligent grouping algorithm",
        batches_created=len(planned),
        students_processed=len(students),
        batches=summaries,
    )


def _write_batch(plan: PlannedBatch, semester: int, using: str) -> int:
    batch_id = upsert(
        Batch,
        {
            "name": plan.name,
            "program_id": plan.program_id,
            "start_year": plan.enrollment_year,
            "end_year": plan.enrollment_year + plan.duration_years,
            "current_semester": semester,
            "total_students": plan.size,
        },
        unique_fields=("name",),
        update_fields=("total_students",),
        using=using,
    )
    Student.objects.using(using).filter(pk__in=[s.id for s in plan.students]).update(batch_id=batch_id)

    if plan.below_minimum:
        logger.warning(
            "Batch %s has %d students (minimum %d); review for merging",
            plan.name,
            plan.size,
            min_batch_size(),
        )
    else:
        logger.info("Batch %s: %d students", plan.name, plan.size)
    return batch_id


def describe_batches(batch_ids, planned, using: str = DEFAULT_DB_ALIAS) -> list[dict]:
    below = {p.name: p.below_minimum for p in planned}
    qs = (
        Batch.objects.using(using)
        .filter(pk__in=batch_ids)
        .select_related("program")
        .annotate(actual_student_count=Count("students", filter=Q(students__deleted_at__isnull=True)))
        .order_by("name")
    )
    return [
        {
            "id": b.id,
            "name": b.name,
            "programCode": b.program.code,
            "programName": b.program.name,
            "startYear": b.start_year,
            "endYear": b.end_year,
            "currentSemester": b.current_semester,
            "totalStudents": b.total_students,
            "actualStudentCount": b.actual_student_count,
            "belowMinimum": below.get(b.name, False),
        }
        for b in qs
    ]
