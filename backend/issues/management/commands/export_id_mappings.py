from django.core.management.base import BaseCommand, CommandError

from issues.default_data import RecordInvalid
from issues.default_data.mappings import render_id_mappings


class Command(BaseCommand):
    help = "Print the id mappings YAML used by the ticket handler services."

    def add_arguments(self, parser):
        parser.add_argument("--output", help="File to write instead of stdout")

    def handle(self, *args, **options):
        try:
            document = render_id_mappings()
        except RecordInvalid as exc:
            raise CommandError(str(exc)) from exc
        output = options.get("output")
        if not output:
            self.stdout.write(document, ending="")
            return
        with open(output, "w", encoding="utf-8") as handle:
            handle.write(document)
        self.stdout.write(self.style.SUCCESS(f"Wrote id mappings to {output}"))
