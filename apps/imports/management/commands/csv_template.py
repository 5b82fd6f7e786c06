from django.core.management.base import BaseCommand, CommandError

from imports.csv_templates import available_templates, get_template, template_workbook


class Command(BaseCommand):
    help = "Print the CSV template for an entity type, or write it as an Excel workbook."

    def add_arguments(self, parser):
        parser.add_argument("entity_type", type=str, help="e.g. students, courses")
        parser.add_argument("--xlsx", metavar="PATH", help="Write an .xlsx workbook to PATH instead")

    def handle(self, *args, **options):
        entity_type = options["entity_type"]
        text = get_template(entity_type)
        if text is None:
            raise CommandError(
                f"Invalid template type '{entity_type}'. Available: {', '.join(available_templates())}"
            )

        if options["xlsx"]:
            with open(options["xlsx"], "wb") as fh:
                fh.write(template_workbook(entity_type))
            self.stdout.write(self.style.SUCCESS(f"Wrote {options['xlsx']}"))
            return

        self.stdout.write(text)
