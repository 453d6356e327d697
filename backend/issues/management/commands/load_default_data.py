import json
from pathlib import Path

import yaml
from django.core.management.base import BaseCommand, CommandError

from issues.default_data import AlreadyBootstrapped, InvalidConfiguration, RecordInvalid, load
from issues.default_data.mappings import dump_id_mappings


class Command(BaseCommand):
    help = "Load the default roles, trackers, statuses, workflow and seed project into an empty installation."

    def add_arguments(self, parser):
        parser.add_argument("--lang", default="en", help="Language used for role, priority and query names")
        parser.add_argument("--no-workflow", action="store_true", help="Skip workflow transitions")
        parser.add_argument("--workflow-file", dest="workflow_file", help="YAML or JSON workflow policy table")
        parser.add_argument("--mappings-out", dest="mappings_out", help="Write the handler id mappings YAML here")

    def handle(self, *args, **options):
        load_options = {"workflow": not options.get("no_workflow")}
        workflow_file = options.get("workflow_file")
        if workflow_file:
            path = Path(workflow_file)
            if not path.exists():
                raise CommandError(f"Workflow file not found: {path}")
            try:
                load_options["workflow_policies"] = yaml.safe_load(path.read_text(encoding="utf-8"))
            except yaml.YAMLError as exc:
                raise CommandError(f"Cannot parse workflow file {path}: {exc}") from exc

        try:
            loaded = load(options.get("lang") or "en", load_options)
        except AlreadyBootstrapped as exc:
            self.stdout.write(self.style.WARNING(f"Already configured: {exc}"))
            return
        except (InvalidConfiguration, RecordInvalid) as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(json.dumps(loaded.summary(), indent=2, default=str))
        mappings_out = options.get("mappings_out")
        if mappings_out:
            try:
                with open(mappings_out, "w", encoding="utf-8") as handle:
                    dump_id_mappings(handle)
            except OSError as exc:
                raise CommandError(
                    f"Default configuration data was loaded, but the id mappings could not be written to {mappings_out}: {exc}"
                ) from exc
            self.stdout.write(f"Wrote id mappings to {mappings_out}")
        self.stdout.write(self.style.SUCCESS("Default configuration data was successfully loaded."))
