from django.db import models


class Department(models.Model):
    """An academic department, identified by its short code (e.g. CSE)."""

    code = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    hod_email = models.EmailField(blank=True)

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} - {self.name}"


class Program(models.Model):
    """
    Example:
    - CSE-BTECH (4 Years, 8 Semesters)
    - ECE-BTECH (4 Years, 8 Semesters)
    """

    code = models.CharField(max_length=30, unique=True)
    name = models.CharField(max_length=200)
    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name="programs")
    duration_years = models.PositiveSmallIntegerField(default=4)
    total_semesters = models.PositiveSmallIntegerField(default=8)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} ({self.total_semesters} semesters)"


class AcademicTerm(models.Model):
    STATUS_CHOICES = [
        ("active", "Active"),
        ("upcoming", "Upcoming"),
        ("closed", "Closed"),
    ]

    name = models.CharField(max_length=50, unique=True)
    start_date = models.DateField()
    end_date = models.DateField()
    academic_year = models.CharField(max_length=10)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="upcoming")

    class Meta:
        ordering = ["start_date"]

    def __str__(self):
        return f"{self.name} ({self.academic_year})"


class Course(models.Model):
    TYPE_CHOICES = [
        ("theory", "Theory"),
        ("lab", "Lab"),
    ]

    course_code = models.CharField(max_length=30, unique=True)
    title = models.CharField(max_length=255)
    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name="courses")
    semester = models.PositiveSmallIntegerField()
    credits = models.PositiveSmallIntegerField()
    hours_per_week = models.PositiveSmallIntegerField(null=True, blank=True)
    course_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default="theory")
    prerequisite = models.ForeignKey(
        "self", on_delete=models.SET_NULL, null=True, blank=True, related_name="unlocks"
    )
    is_elective = models.BooleanField(default=False)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ["course_code"]

    def __str__(self):
        return f"{self.course_code} - {self.title} ({self.credits} CR)"


class CoursePrerequisite(models.Model):
    """Explicit prerequisite edges, imported separately from the course file."""

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="prerequisite_links")
    prerequisite = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="required_by")
    is_mandatory = models.BooleanField(default=True)

    class Meta:
        unique_together = ("course", "prerequisite")

    def __str__(self):
        return f"{self.course.course_code} <- {self.prerequisite.course_code}"


class Classroom(models.Model):
    room_code = models.CharField(max_length=20, unique=True)
    building = models.CharField(max_length=100)
    floor = models.SmallIntegerField(null=True, blank=True)
    capacity = models.PositiveIntegerField()
    room_type = models.CharField(max_length=30, default="Class")
    equipment = models.JSONField(default=list, blank=True)
    is_available = models.BooleanField(default=True)

    class Meta:
        ordering = ["room_code"]

    def __str__(self):
        return f"{self.room_code} ({self.building}, {self.capacity} seats)"


class Faculty(models.Model):
    employee_id = models.CharField(max_length=30, unique=True)
    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name="faculty")
    designation = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    qualification = models.CharField(max_length=255, blank=True)
    experience_years = models.PositiveSmallIntegerField(null=True, blank=True)
    specialization = models.JSONField(default=list, blank=True)
    working_hours_per_week = models.PositiveSmallIntegerField(null=True, blank=True)
    time_preferences = models.JSONField(default=list, blank=True)
    subjects_can_teach = models.JSONField(default=list, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "faculty"

    def __str__(self):
        return f"{self.name} ({self.employee_id})"


class TimeSlot(models.Model):
    slot_name = models.CharField(max_length=50, unique=True)
    start_time = models.TimeField()
    end_time = models.TimeField()
    duration_minutes = models.PositiveSmallIntegerField(null=True, blank=True)
    slot_type = models.CharField(max_length=20, default="lecture")
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["start_time"]

    def __str__(self):
        return f"{self.slot_name} {self.start_time:%H:%M}-{self.end_time:%H:%M}"


class CourseAssignment(models.Model):
    """Which faculty member teaches which section of a course in a term."""

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="assignments")
    faculty = models.ForeignKey(Faculty, on_delete=models.PROTECT, related_name="assignments")
    academic_year = models.CharField(max_length=10)
    semester = models.PositiveSmallIntegerField()
    section = models.CharField(max_length=5, default="A")
    max_students = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        unique_together = ("course", "academic_year", "semester", "section")
        ordering = ["academic_year", "semester", "section"]

    def __str__(self):
        return f"{self.course.course_code} | {self.academic_year} | Sem {self.semester} | {self.section}"
