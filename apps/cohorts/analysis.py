from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS
from django.db.models import Count, Q

from cohorts.models import Batch
from cohorts.services import collect_enrolled_students, max_batch_size, min_batch_size, validate_term

LOW_COURSE_LOAD = 4

Q2 = Decimal("0.01")


def q2(x) -> float:
    return float(Decimal(str(x)).quantize(Q2, rounding=ROUND_HALF_UP))


def program_distribution(academic_year: str, semester: int, using: str = DEFAULT_DB_ALIAS) -> list[dict]:
    """One row per (program, enrollment year) with head count and course load."""
    rows: dict[tuple[str, int], dict] = {}
    for s in collect_enrolled_students(academic_year, semester, using=using):
        key = (s.program_code, s.enrollment_year)
        row = rows.get(key)
        if row is None:
            row = rows[key] = {
                "programCode": s.program_code,
                "programName": s.program_name,
                "departmentCode": s.department_code,
                "enrollmentYear": s.enrollment_year,
                "_courses": set(),
                "_course_counts": [],
            }
        row["_courses"].update(s.courses)
        row["_course_counts"].append(len(s.courses))

    distribution = []
    for row in rows.values():
        courses = sorted(row.pop("_courses"))
        counts = row.pop("_course_counts")
        row.update(
            {
                "totalStudents": len(counts),
                "uniqueCourses": len(courses),
                "courseList": ", ".join(courses),
                "avgCoursesPerStudent": q2(sum(counts) / len(counts)),
            }
        )
        distribution.append(row)
    return distribution


def existing_batches(using: str = DEFAULT_DB_ALIAS) -> list[dict]:
    qs = (
        Batch.objects.using(using)
        .select_related("program")
        .annotate(current_students=Count("students", filter=Q(students__deleted_at__isnull=True)))
        .order_by("name")
    )
    return [
        {
            "id": b.id,
            "name": b.name,
            "programCode": b.program.code,
            "startYear": b.start_year,
            "endYear": b.end_year,
            "currentSemester": b.current_semester,
            "totalStudents": b.total_students,
            "currentStudents": b.current_students,
        }
        for b in qs
    ]


def recommend(distribution: list[dict]) -> list[dict]:
    """
    - more than BATCH_MAX_SIZE students -> split into ceil(total / BATCH_SPLIT_TARGET) batches
    - fewer than BATCH_MIN_SIZE students -> merge or mixed batch
    - fewer than 4 courses per student on average -> check enrollments are complete
    """
    split_target = int(getattr(settings, "BATCH_SPLIT_TARGET", 50))
    recommendations = []

    for program in distribution:
        total = program["totalStudents"]
        if total > max_batch_size():
            recommendations.append(
                {
                    "program": program["programCode"],
                    "issue": "Large cohort",
                    "suggestion": f"Split {total} students into {math.ceil(total / split_target)} batches",
                    "priority": "high",
                }
            )
        elif total < min_batch_size():
            recommendations.append(
                {
                    "program": program["programCode"],
                    "issue": "Small cohort",
                    "suggestion": "Consider merging with similar program or creating mixed batch",
                    "priority": "medium",
                }
            )

        if program["avgCoursesPerStudent"] < LOW_COURSE_LOAD:
            recommendations.append(
                {
                    "program": program["programCode"],
                    "issue": "Low course load",
                    "suggestion": "Verify if all student enrollments are complete",
                    "priority": "high",
                }
            )

    return recommendations


def analyze_batches(academic_year, semester, using: str = DEFAULT_DB_ALIAS) -> dict:
    academic_year, semester = validate_term(academic_year, semester)

    distribution = program_distribution(academic_year, semester, using=using)
    return {
        "success": True,
        "analysis": {
            "programDistribution": distribution,
            "existingBatches": existing_batches(using=using),
            "recommendations": recommend(distribution),
        },
    }
