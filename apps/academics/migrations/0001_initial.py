from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Department",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("hod_email", models.EmailField(blank=True, max_length=254)),
            ],
            options={
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="AcademicTerm",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50, unique=True)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("academic_year", models.CharField(max_length=10)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("upcoming", "Upcoming"), ("closed", "Closed")],
                        default="upcoming",
                        max_length=20,
                    ),
                ),
            ],
            options={
                "ordering": ["start_date"],
            },
        ),
        migrations.CreateModel(
            name="Classroom",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("room_code", models.CharField(max_length=20, unique=True)),
                ("building", models.CharField(max_length=100)),
                ("floor", models.SmallIntegerField(blank=True, null=True)),
                ("capacity", models.PositiveIntegerField()),
                ("room_type", models.CharField(default="Class", max_length=30)),
                ("equipment", models.JSONField(blank=True, default=list)),
                ("is_available", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ["room_code"],
            },
        ),
        migrations.CreateModel(
            name="TimeSlot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("slot_name", models.CharField(max_length=50, unique=True)),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField()),
                ("duration_minutes", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("slot_type", models.CharField(default="lecture", max_length=20)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ["start_time"],
            },
        ),
        migrations.CreateModel(
            name="Program",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=30, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("duration_years", models.PositiveSmallIntegerField(default=4)),
                ("total_semesters", models.PositiveSmallIntegerField(default=8)),
                ("description", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "department",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="programs",
                        to="academics.department",
                    ),
                ),
            ],
            options={
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("course_code", models.CharField(max_length=30, unique=True)),
                ("title", models.CharField(max_length=255)),
                ("semester", models.PositiveSmallIntegerField()),
                ("credits", models.PositiveSmallIntegerField()),
                ("hours_per_week", models.PositiveSmallIntegerField(blank=True, null=True)),
                (
                    "course_type",
                    models.CharField(choices=[("theory", "Theory"), ("lab", "Lab")], default="theory", max_length=10),
                ),
                ("is_elective", models.BooleanField(default=False)),
                ("description", models.TextField(blank=True)),
                (
                    "department",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="courses",
                        to="academics.department",
                    ),
                ),
                (
                    "prerequisite",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="unlocks",
                        to="academics.course",
                    ),
                ),
            ],
            options={
                "ordering": ["course_code"],
            },
        ),
        migrations.CreateModel(
            name="Faculty",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("employee_id", models.CharField(max_length=30, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("designation", models.CharField(blank=True, max_length=100)),
                ("phone", models.CharField(blank=True, max_length=20)),
                ("qualification", models.CharField(blank=True, max_length=255)),
                ("experience_years", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("specialization", models.JSONField(blank=True, default=list)),
                ("working_hours_per_week", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("time_preferences", models.JSONField(blank=True, default=list)),
                ("subjects_can_teach", models.JSONField(blank=True, default=list)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                (
                    "department",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="faculty",
                        to="academics.department",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "faculty",
            },
        ),
        migrations.CreateModel(
            name="CoursePrerequisite",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_mandatory", models.BooleanField(default=True)),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="prerequisite_links",
                        to="academics.course",
                    ),
                ),
                (
                    "prerequisite",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="required_by",
                        to="academics.course",
                    ),
                ),
            ],
            options={
                "unique_together": {("course", "prerequisite")},
            },
        ),
        migrations.CreateModel(
            name="CourseAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("academic_year", models.CharField(max_length=10)),
                ("semester", models.PositiveSmallIntegerField()),
                ("section", models.CharField(default="A", max_length=5)),
                ("max_students", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assignments",
                        to="academics.course",
                    ),
                ),
                (
                    "faculty",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assignments",
                        to="academics.faculty",
                    ),
                ),
            ],
            options={
                "ordering": ["academic_year", "semester", "section"],
                "unique_together": {("course", "academic_year", "semester", "section")},
            },
        ),
    ]
