from django.core.management.base import BaseCommand, CommandError

from imports.exceptions import InputError, TransactionFailure
from imports.pipeline import run_import
from imports.schemas import IMPORT_ORDER


class Command(BaseCommand):
    help = "Import one CSV file (same rules as the upload API). The file is left in place."

    def add_arguments(self, parser):
        parser.add_argument("entity_type", choices=IMPORT_ORDER, help="What the file contains")
        parser.add_argument("file", type=str, help="Path to CSV file")
        parser.add_argument("--database", default="default", help="Database alias to import into")
        parser.add_argument("--show-errors", type=int, default=10, help="How many row errors to print")

    def handle(self, *args, **options):
        entity_type = options["entity_type"]
        file_path = options["file"]

        try:
            result = run_import(entity_type, file_path, actor="cli", using=options["database"])
        except (InputError, TransactionFailure) as e:
            raise CommandError(f"{entity_type} import failed: {e}")

        for message in result.errors[: options["show_errors"]]:
            self.stdout.write(self.style.ERROR(message))
        if result.error_count > options["show_errors"]:
            self.stdout.write(self.style.WARNING(
                f"... and {result.error_count - options['show_errors']} more row errors"
            ))

        self.stdout.write(self.style.SUCCESS(
            f"\nDone. Rows={result.total_rows}, Imported={result.success_count}, Errors={result.error_count}"
        ))
