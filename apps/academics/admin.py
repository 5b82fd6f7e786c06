from django.contrib import admin

from .models import (
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


@admin.register(AcademicTerm)
class AcademicTermAdmin(admin.ModelAdmin):
    list_display = ("name", "academic_year", "start_date", "end_date", "status")
    list_filter = ("status", "academic_year")
    search_fields = ("name",)


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "hod_email")
    search_fields = ("code", "name")


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "department", "duration_years", "total_semesters", "is_active")
    list_filter = ("department", "is_active")
    search_fields = ("code", "name")


@admin.register(Classroom)
class ClassroomAdmin(admin.ModelAdmin):
    list_display = ("room_code", "building", "floor", "capacity", "room_type", "is_available")
    list_filter = ("building", "room_type", "is_available")
    search_fields = ("room_code", "building")


@admin.register(Faculty)
class FacultyAdmin(admin.ModelAdmin):
    list_display = ("employee_id", "name", "email", "department", "designation")
    list_filter = ("department",)
    search_fields = ("employee_id", "name", "email")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("course_code", "title", "department", "semester", "credits", "course_type")
    list_filter = ("department", "semester", "course_type", "is_elective")
    search_fields = ("course_code", "title")
    ordering = ("course_code",)


@admin.register(CoursePrerequisite)
class CoursePrerequisiteAdmin(admin.ModelAdmin):
    list_display = ("course", "prerequisite", "is_mandatory")
    list_filter = ("is_mandatory",)
    search_fields = ("course__course_code", "prerequisite__course_code")


@admin.register(TimeSlot)
class TimeSlotAdmin(admin.ModelAdmin):
    list_display = ("slot_name", "start_time", "end_time", "slot_type", "is_active")
    list_filter = ("slot_type", "is_active")


@admin.register(CourseAssignment)
class CourseAssignmentAdmin(admin.ModelAdmin):
    list_display = ("course", "faculty", "academic_year", "semester", "section", "max_students")
    list_filter = ("academic_year", "semester")
    search_fields = ("course__course_code", "faculty__employee_id", "faculty__name")
