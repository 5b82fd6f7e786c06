from django.contrib import admin

from .models import Student, Enrollment


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("student_id", "name", "email", "program", "batch", "enrollment_year", "status")
    search_fields = ("student_id", "name", "email")
    list_filter = ("program", "enrollment_year", "status")


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ("student", "course", "academic_year", "semester", "status")
    list_filter = ("academic_year", "semester", "status")
    search_fields = ("student__student_id", "student__name", "course__course_code")
