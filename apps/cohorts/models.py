from django.db import models

from academics.models import Program


class Batch(models.Model):
    """
    A teachable cohort inside a program/enrollment year.
    Generated names look like CSE-BTECH-2024-B1.
    """

    name = models.CharField(max_length=50, unique=True)
    program = models.ForeignKey(Program, on_delete=models.PROTECT, related_name="batches")
    start_year = models.PositiveSmallIntegerField()
    end_year = models.PositiveSmallIntegerField()
    current_semester = models.PositiveSmallIntegerField(default=1)

    # denormalized; refreshed by every batch generation run
    total_students = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "batches"

    def __str__(self):
        return f"{self.name} ({self.start_year}-{self.end_year})"
