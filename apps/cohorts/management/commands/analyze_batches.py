import json

from django.core.management.base import BaseCommand, CommandError

from cohorts.analysis import analyze_batches
from imports.exceptions import InputError


class Command(BaseCommand):
    help = "Print the batch analysis report (program distribution, batches, recommendations) as JSON."

    def add_arguments(self, parser):
        parser.add_argument("--academic-year", required=True, help='e.g. "2024-25"')
        parser.add_argument("--semester", required=True, type=int, help="Semester number")
        parser.add_argument("--database", default="default", help="Database alias")

    def handle(self, *args, **options):
        try:
            report = analyze_batches(options["academic_year"], options["semester"], using=options["database"])
        except InputError as e:
            raise CommandError(str(e))

        self.stdout.write(json.dumps(report, indent=2))
