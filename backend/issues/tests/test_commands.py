import json
import tempfile
from io import StringIO
from pathlib import Path

import yaml
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from issues.models import Project, Role, User, WorkflowTransition


class LoadDefaultDataCommandTests(TestCase):
    def setUp(self):
        self.operator = User.objects.create(login="operator", firstname="Olga", lastname="Operator")
        self.settings_override = self.settings(MODKIT_OPERATOR_USER_ID=self.operator.pk)
        self.settings_override.enable()
        self.addCleanup(self.settings_override.disable)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def _call(self, *args):
        out = StringIO()
        call_command("load_default_data", *args, stdout=out)
        return out.getvalue()

    def test_loads_and_reports_summary(self):
        output = self._call("--lang", "en")
        self.assertIn("Default configuration data was successfully loaded.", output)
        summary = json.loads(output[: output.rindex("}") + 1])
        self.assertEqual(summary["roles"], 4)
        self.assertEqual(summary["project"], "tickets")
        self.assertEqual(Project.objects.count(), 1)

    def test_second_run_only_warns(self):
        self._call()
        output = self._call()
        self.assertIn("Already configured", output)
        self.assertEqual(Role.objects.givable().count(), 4)

    def test_no_workflow_flag(self):
        self._call("--no-workflow")
        self.assertEqual(WorkflowTransition.objects.count(), 0)

    def test_workflow_file(self):
        path = Path(self.tmp.name) / "workflow.yaml"
        path.write_text(
            yaml.safe_dump([{"tracker": "appeal", "role": "moderator", "rule": "cross", "from": ["new"], "to": ["granted", "denied"]}]),
            encoding="utf-8",
        )
        self._call("--workflow-file", str(path))
        self.assertEqual(WorkflowTransition.objects.count(), 2)

    def test_overlapping_workflow_file_fails(self):
        path = Path(self.tmp.name) / "workflow.yaml"
        path.write_text(
            yaml.safe_dump(
                [
                    {"tracker": "ticket", "role": "trainee", "rule": "edge", "old": "new", "new": "closed"},
                    {"tracker": "ticket", "role": "trainee", "rule": "cross", "from": ["new"], "to": ["closed"]},
                ]
            ),
            encoding="utf-8",
        )
        with self.assertRaises(CommandError) as ctx:
            self._call("--workflow-file", str(path))
        self.assertIn("overlap", str(ctx.exception))
        self.assertEqual(Project.objects.count(), 0)

    def test_missing_workflow_file(self):
        with self.assertRaises(CommandError):
            self._call("--workflow-file", str(Path(self.tmp.name) / "absent.yaml"))

    def test_unparseable_workflow_file(self):
        path = Path(self.tmp.name) / "workflow.yaml"
        path.write_text("- tracker: [ticket\n", encoding="utf-8")
        with self.assertRaises(CommandError):
            self._call("--workflow-file", str(path))

    def test_record_failure_becomes_command_error(self):
        User.objects.create(login="modbot", firstname="Someone", lastname="Else")
        with self.assertRaises(CommandError):
            self._call()
        self.assertEqual(Role.objects.givable().count(), 0)

    def test_mappings_out(self):
        path = Path(self.tmp.name) / "mappings.yaml"
        self._call("--mappings-out", str(path))
        mappings = yaml.safe_load(path.read_text(encoding="utf-8"))
        self.assertEqual(mappings["projectId"], Project.objects.get().pk)

    def test_unwritable_mappings_out_reports_loaded_data(self):
        path = Path(self.tmp.name) / "missing-dir" / "mappings.yaml"
        with self.assertRaises(CommandError) as ctx:
            self._call("--mappings-out", str(path))
        self.assertIn("was loaded", str(ctx.exception))
        self.assertEqual(Project.objects.count(), 1)
        self.assertEqual(Role.objects.givable().count(), 4)


class ExportIdMappingsCommandTests(TestCase):
    def test_requires_loaded_data(self):
        with self.assertRaises(CommandError):
            call_command("export_id_mappings", stdout=StringIO())

    def test_prints_yaml(self):
        operator = User.objects.create(login="operator", firstname="Olga", lastname="Operator")
        with self.settings(MODKIT_OPERATOR_USER_ID=operator.pk):
            call_command("load_default_data", stdout=StringIO())
        out = StringIO()
        call_command("export_id_mappings", stdout=out)
        self.assertEqual(yaml.safe_load(out.getvalue())["projectId"], Project.objects.get().pk)
