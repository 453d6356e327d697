import yaml
from django.test import TestCase

from issues.default_data import RecordInvalid, load
from issues.default_data.mappings import build_id_mappings, render_id_mappings
from issues.models import CustomField, Enumeration, IssueStatus, Project, Tracker, User


class IdMappingTests(TestCase):
    def setUp(self):
        operator = User.objects.create(login="operator", firstname="Olga", lastname="Operator")
        with self.settings(MODKIT_OPERATOR_USER_ID=operator.pk):
            load("en")

    def test_mappings_point_at_loaded_records(self):
        mappings = build_id_mappings()
        self.assertEqual(mappings["projectId"], Project.objects.get(identifier="tickets").pk)
        self.assertEqual(mappings["statuses"]["completed"], IssueStatus.objects.get(name="Closed").pk)
        self.assertEqual(mappings["statuses"]["inProgress"], IssueStatus.objects.get(name="In progress").pk)
        self.assertEqual(set(mappings["ticketTypes"]), {"ticket", "appeal"})
        self.assertNotIn("incident", mappings["ticketTypes"])
        self.assertEqual(mappings["ticketTypes"]["appeal"], Tracker.objects.get(name="Appeal").pk)
        self.assertEqual(mappings["fields"]["displayName"], CustomField.objects.get(name="Display name").pk)
        self.assertEqual(mappings["users"], [])

    def test_priorities_follow_position(self):
        mappings = build_id_mappings()
        self.assertEqual(list(mappings["priorities"]), ["low", "normal", "high", "urgent"])
        self.assertEqual(mappings["priorities"]["normal"], Enumeration.objects.get(is_default=True).pk)

    def test_rendered_yaml(self):
        document = render_id_mappings()
        self.assertTrue(document.startswith("projectId:"))
        self.assertEqual(yaml.safe_load(document), build_id_mappings())


class IdMappingWithoutDataTests(TestCase):
    def test_missing_project(self):
        with self.assertRaises(RecordInvalid):
            build_id_mappings()
