from django.contrib import admin

from .models import Batch


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display = ("name", "program", "start_year", "end_year", "current_semester", "total_students")
    list_filter = ("program", "start_year")
    search_fields = ("name", "program__code")
