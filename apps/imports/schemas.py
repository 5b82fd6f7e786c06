"""
Per-entity CSV column contracts.

Each schema lists its canonical columns with the header spellings operators
use, the unique key the upsert conflicts on, the fields refreshed on
re-import and the foreign natural keys to resolve. Header matching ignores
case, spaces and punctuation ("Start Date" == "start_date").
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from academics.models import (
    AcademicTerm,
    Classroom,
    Course,
    CourseAssignment,
    CoursePrerequisite,
    Department,
    Faculty,
    Program,
    TimeSlot,
)
from cohorts.models import Batch
from students.models import Enrollment, Student

from imports.normalizers import clean_str


def _norm(s) -> str:
    return "".join(ch.lower() for ch in str(s or "").strip() if ch.isalnum())


@dataclass(frozen=True)
class Column:
    name: str
    header: str
    aliases: tuple[str, ...] = ()
    kind: str = "str"
    required: bool = False
    default: Any = None
    choices: tuple[str, ...] = ()

    def spellings(self):
        return (self.header, self.name, *self.aliases)

    def default_value(self):
        if callable(self.default):
            return self.default()
        return self.default


@dataclass(frozen=True)
class Reference:
    column: str
    attname: str
    model: Any
    lookup: str
    label: str


@dataclass(frozen=True)
class EntitySchema:
    key: str
    label: str
    model: Any
    columns: tuple[Column, ...]
    unique_fields: tuple[str, ...]
    update_fields: tuple[str, ...]
    references: tuple[Reference, ...] = ()
    prepare: Callable[[dict], dict] | None = None

    @property
    def required_columns(self) -> list[Column]:
        return [c for c in self.columns if c.required]

    @property
    def reference_columns(self) -> set[str]:
        return {r.column for r in self.references}


class HeaderMap:
    """Field Resolver: maps a file's actual headers onto canonical columns, once per file."""

    def __init__(self, headers, schema: EntitySchema):
        self.schema = schema
        present = {}
        for h in headers or []:
            key = _norm(h)
            if key and key not in present:
                present[key] = h

        self.headers: dict[str, str] = {}
        for col in schema.columns:
            for spelling in col.spellings():
                actual = present.get(_norm(spelling))
                if actual is not None:
                    self.headers[col.name] = actual
                    break

    @property
    def missing(self) -> list[str]:
        return [c.name for c in self.schema.columns if c.name not in self.headers]

    def resolve(self, row: dict) -> dict[str, str | None]:
        resolved = {}
        for col in self.schema.columns:
            header = self.headers.get(col.name)
            raw = row.get(header) if header is not None else None
            if clean_str(raw) is None:
                raw = col.default_value()
            resolved[col.name] = raw
        return resolved


def resolve_fields(row: dict, schema: EntitySchema) -> dict[str, str | None]:
    return HeaderMap(row.keys(), schema).resolve(row)


def _today() -> str:
    return date.today().isoformat()


def _derive_department_code(values: dict) -> dict:
    # Code falls back to the first three letters of the name (CSE, ECE...)
    if not values.get("code") and values.get("name"):
        values["code"] = re.sub(r"[^A-Za-z]", "", values["name"])[:3].upper() or None
    return values


# ======================================================
# SCHEMAS (in dependency order)
# ======================================================

ACADEMIC_TERMS = EntitySchema(
    key="academic_terms",
    label="academic terms",
    model=AcademicTerm,
    columns=(
        Column("name", "Name", required=True),
        Column("start_date", "Start Date", kind="date", required=True),
        Column("end_date", "End Date", kind="date", required=True),
        Column("academic_year", "Academic Year", required=True),
        Column("status", "Status", default="upcoming", choices=("active", "upcoming", "closed")),
    ),
    unique_fields=("name",),
    update_fields=("start_date", "end_date", "academic_year", "status"),
)

DEPARTMENTS = EntitySchema(
    key="departments",
    label="departments",
    model=Department,
    columns=(
        Column("code", "Code"),
        Column("name", "Name", aliases=("Department",), required=True),
        Column("description", "Description"),
        Column("hod_email", "Head of Department Email", aliases=("HOD Email",)),
    ),
    unique_fields=("code",),
    update_fields=("name", "description", "hod_email"),
    prepare=_derive_department_code,
)

PROGRAMS = EntitySchema(
    key="programs",
    label="programs",
    model=Program,
    columns=(
        Column("code", "Code", aliases=("Program Code",), required=True),
        Column("name", "Name", aliases=("Program Name",), required=True),
        Column("department_code", "Department Code", aliases=("Department",), required=True),
        Column("duration_years", "Duration Years", aliases=("Duration",), kind="int", default="4"),
        Column("total_semesters", "Total Semesters", kind="int", default="8"),
        Column("description", "Description"),
    ),
    unique_fields=("code",),
    update_fields=("name", "department", "duration_years", "total_semesters", "description"),
    references=(
        Reference("department_code", "department_id", Department, "code", "Department code"),
    ),
)

CLASSROOMS = EntitySchema(
    key="classrooms",
    label="classrooms",
    model=Classroom,
    columns=(
        Column("room_code", "Room Code", aliases=("Room", "Code"), required=True),
        Column("building", "Building", required=True),
        Column("floor", "Floor", kind="int"),
        Column("capacity", "Capacity", kind="int", required=True),
        Column("room_type", "Type", aliases=("Room Type",)),
        Column("equipment", "Equipment", kind="list"),
        Column("is_available", "Is Available", aliases=("Available",), kind="bool"),
    ),
    unique_fields=("room_code",),
    update_fields=("building", "floor", "capacity", "room_type", "equipment", "is_available"),
)

FACULTY = EntitySchema(
    key="faculty",
    label="faculty members",
    model=Faculty,
    columns=(
        Column("name", "Name", required=True),
        Column("employee_id", "Employee ID", aliases=("Emp ID",), required=True),
        Column("email", "Email", required=True),
        Column("department_code", "Department Code", aliases=("Department",), required=True),
        Column("designation", "Designation"),
        Column("phone", "Phone"),
        Column("qualification", "Qualification"),
        Column("experience_years", "Experience Years", aliases=("Experience",), kind="int"),
        Column("specialization", "Specialization", kind="list"),
        Column("working_hours_per_week", "Working Hours Per Week", aliases=("Working Hours",), kind="int"),
        Column("time_preferences", "Time Preferences", kind="list"),
        Column("subjects_can_teach", "Subjects Can Teach", aliases=("Subjects",), kind="list"),
    ),
    unique_fields=("employee_id",),
    update_fields=(
        "name",
        "email",
        "department",
        "designation",
        "phone",
        "qualification",
        "experience_years",
        "specialization",
        "working_hours_per_week",
        "time_preferences",
        "subjects_can_teach",
    ),
    references=(
        Reference("department_code", "department_id", Department, "code", "Department code"),
    ),
)

COURSES = EntitySchema(
    key="courses",
    label="courses",
    model=Course,
    columns=(
        Column("course_code", "Course Code", aliases=("Code",), required=True),
        Column("title", "Title", aliases=("Course Title", "Name"), required=True),
        Column("department_code", "Department Code", aliases=("Department",), required=True),
        Column("semester", "Semester", kind="int", required=True),
        Column("credits", "Credits", aliases=("Credit Hours",), kind="int", required=True),
        Column("hours_per_week", "Hours Per Week", kind="int"),
        Column("course_type", "Course Type", aliases=("Type",), default="theory", choices=("theory", "lab")),
        Column("prerequisites", "Prerequisites", aliases=("Prerequisite",)),
        Column("is_elective", "Is Elective", aliases=("Elective",), kind="bool"),
        Column("description", "Description"),
    ),
    unique_fields=("course_code",),
    update_fields=(
        "title",
        "department",
        "semester",
        "credits",
        "hours_per_week",
        "course_type",
        "prerequisite",
        "is_elective",
        "description",
    ),
    references=(
        Reference("department_code", "department_id", Department, "code", "Department code"),
        Reference("prerequisites", "prerequisite_id", Course, "course_code", "Prerequisite course code"),
    ),
)

COURSE_PREREQUISITES = EntitySchema(
    key="course_prerequisites",
    label="course prerequisites",
    model=CoursePrerequisite,
    columns=(
        Column("course_code", "Course Code", required=True),
        Column("prerequisite_code", "Prerequisite Course Code", aliases=("Prerequisite",), required=True),
        Column("is_mandatory", "Is Mandatory", aliases=("Mandatory",), kind="bool"),
    ),
    unique_fields=("course", "prerequisite"),
    update_fields=("is_mandatory",),
    references=(
        Reference("course_code", "course_id", Course, "course_code", "Course code"),
        Reference("prerequisite_code", "prerequisite_id", Course, "course_code", "Prerequisite course code"),
    ),
)

TIME_SLOTS = EntitySchema(
    key="time_slots",
    label="time slots",
    model=TimeSlot,
    columns=(
        Column("slot_name", "Slot Name", aliases=("Name",), required=True),
        Column("start_time", "Start Time", kind="time", required=True),
        Column("end_time", "End Time", kind="time", required=True),
        Column("duration_minutes", "Duration Minutes", aliases=("Duration",), kind="int"),
        Column("slot_type", "Slot Type", aliases=("Type",)),
        Column("is_active", "Is Active", aliases=("Active",), kind="bool"),
    ),
    unique_fields=("slot_name",),
    update_fields=("start_time", "end_time", "duration_minutes", "slot_type", "is_active"),
)

BATCHES = EntitySchema(
    key="batches",
    label="batches",
    model=Batch,
    columns=(
        Column("name", "Name", aliases=("Batch Name",), required=True),
        Column("program_code", "Program Code", aliases=("Program",), required=True),
        Column("start_year", "Start Year", kind="int", required=True),
        Column("end_year", "End Year", kind="int", required=True),
        Column("current_semester", "Current Semester", aliases=("Semester",), kind="int"),
    ),
    unique_fields=("name",),
    update_fields=("program", "start_year", "end_year", "current_semester"),
    references=(
        Reference("program_code", "program_id", Program, "code", "Program code"),
    ),
)

STUDENTS = EntitySchema(
    key="students",
    label="students",
    model=Student,
    columns=(
        Column("name", "Name", aliases=("Student Name",), required=True),
        Column("student_id", "Student ID", aliases=("Roll Number", "Registration No"), required=True),
        Column("email", "Email", required=True),
        Column("program_code", "Program Code", aliases=("Program",), required=True),
        Column("enrollment_year", "Enrollment Year", kind="int", required=True),
        Column("current_semester", "Current Semester", aliases=("Semester",), kind="int"),
        Column("phone", "Phone"),
        Column("guardian_name", "Guardian Name"),
        Column("guardian_phone", "Guardian Phone"),
        Column("address", "Address"),
        Column("status", "Status", default="active"),
    ),
    unique_fields=("student_id",),
    update_fields=(
        "name",
        "email",
        "program",
        "enrollment_year",
        "current_semester",
        "phone",
        "guardian_name",
        "guardian_phone",
        "address",
        "status",
    ),
    references=(
        Reference("program_code", "program_id", Program, "code", "Program code"),
    ),
)

STUDENT_ENROLLMENTS = EntitySchema(
    key="student_enrollments",
    label="student enrollments",
    model=Enrollment,
    columns=(
        Column("student_id", "Student ID", required=True),
        Column("course_code", "Course Code", required=True),
        Column("academic_year", "Academic Year", required=True),
        Column("semester", "Semester", kind="int", required=True),
        Column("enrollment_date", "Enrollment Date", kind="date", default=_today),
        Column("status", "Status", default="enrolled", choices=("enrolled", "dropped", "completed")),
    ),
    unique_fields=("student", "course", "academic_year"),
    update_fields=("semester", "enrollment_date", "status"),
    references=(
        Reference("student_id", "student_id", Student, "student_id", "Student ID"),
        Reference("course_code", "course_id", Course, "course_code", "Course code"),
    ),
)

COURSE_ASSIGNMENTS = EntitySchema(
    key="course_assignments",
    label="course assignments",
    model=CourseAssignment,
    columns=(
        Column("course_code", "Course Code", required=True),
        Column("faculty_employee_id", "Faculty Employee ID", aliases=("Employee ID",), required=True),
        Column("academic_year", "Academic Year", required=True),
        Column("semester", "Semester", kind="int", required=True),
        Column("section", "Section", default="A"),
        Column("max_students", "Max Students", kind="int"),
    ),
    unique_fields=("course", "academic_year", "semester", "section"),
    update_fields=("faculty", "max_students"),
    references=(
        Reference("course_code", "course_id", Course, "course_code", "Course code"),
        Reference("faculty_employee_id", "faculty_id", Faculty, "employee_id", "Faculty employee ID"),
    ),
)


SCHEMAS: dict[str, EntitySchema] = {
    s.key: s
    for s in (
        ACADEMIC_TERMS,
        DEPARTMENTS,
        PROGRAMS,
        CLASSROOMS,
        FACULTY,
        COURSES,
        COURSE_PREREQUISITES,
        TIME_SLOTS,
        BATCHES,
        STUDENTS,
        STUDENT_ENROLLMENTS,
        COURSE_ASSIGNMENTS,
    )
}

IMPORT_ORDER = list(SCHEMAS)


def get_schema(key: str) -> EntitySchema | None:
    return SCHEMAS.get((key or "").strip().lower())
