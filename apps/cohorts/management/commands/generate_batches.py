from django.core.management.base import BaseCommand, CommandError

from cohorts.services import generate_batches
from imports.exceptions import InputError, TransactionFailure


class Command(BaseCommand):
    help = "Group enrolled students into batches for one academic year + semester."

    def add_arguments(self, parser):
        parser.add_argument("--academic-year", required=True, help='e.g. "2024-25"')
        parser.add_argument("--semester", required=True, type=int, help="Semester number")
        parser.add_argument("--database", default="default", help="Database alias")

    def handle(self, *args, **options):
        try:
            run = generate_batches(options["academic_year"], options["semester"], using=options["database"])
        except (InputError, TransactionFailure) as e:
            raise CommandError(f"Batch generation failed: {e}")

        if not run.success:
            self.stdout.write(self.style.WARNING(run.message))
            return

        for b in run.batches:
            line = f"{b['name']}: {b['totalStudents']} students ({b['programCode']} {b['startYear']}-{b['endYear']})"
            if b["belowMinimum"]:
                self.stdout.write(self.style.WARNING(f"{line} [below minimum]"))
            else:
                self.stdout.write(self.style.SUCCESS(line))

        self.stdout.write(self.style.SUCCESS(
            f"\nDone. Batches={run.batches_created}, Students={run.students_processed}"
        ))
