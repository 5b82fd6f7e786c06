from django.db import models

from academics.models import Course, Program


class Student(models.Model):
    """
    A student admitted to a Program in a given enrollment year.
    The batch (cohort) is assigned by batch generation, never by import.
    """

    student_id = models.CharField(max_length=30, unique=True)
    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    program = models.ForeignKey(Program, on_delete=models.PROTECT, related_name="students")
    batch = models.ForeignKey(
        "cohorts.Batch", on_delete=models.SET_NULL, null=True, blank=True, related_name="students"
    )
    enrollment_year = models.PositiveSmallIntegerField()
    current_semester = models.PositiveSmallIntegerField(default=1)
    phone = models.CharField(max_length=20, blank=True)
    guardian_name = models.CharField(max_length=200, blank=True)
    guardian_phone = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    status = models.CharField(max_length=20, default="active")
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["student_id"]

    def __str__(self):
        return f"{self.name} ({self.student_id})"


class Enrollment(models.Model):
    """
    A student registered for a course in an academic year (e.g. "2024-25").
    One row per (student, course, academic year); re-imports update it.
    """

    STATUS_CHOICES = [
        ("enrolled", "Enrolled"),
        ("dropped", "Dropped"),
        ("completed", "Completed"),
    ]

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="enrollments")
    course = models.ForeignKey(Course, on_delete=models.PROTECT, related_name="enrollments")
    academic_year = models.CharField(max_length=10)
    semester = models.PositiveSmallIntegerField()
    enrollment_date = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="enrolled")

    class Meta:
        unique_together = ("student", "course", "academic_year")
        ordering = ["academic_year", "semester"]

    def __str__(self):
        return f"{self.student.student_id} | {self.course.course_code} | {self.academic_year}"
