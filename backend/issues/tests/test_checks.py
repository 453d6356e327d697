from django.test import TestCase

from issues.default_data import is_empty, no_data
from issues.models import Enumeration, IssueStatus, Query, Role, Setting, Tracker, User


class NoDataTests(TestCase):
    def test_fresh_installation_has_no_data(self):
        self.assertTrue(no_data())
        self.assertTrue(is_empty())

    def test_builtin_roles_do_not_count(self):
        self.assertEqual(Role.objects.builtin().count(), 2)
        self.assertTrue(no_data())

    def test_users_and_settings_do_not_count(self):
        User.objects.create(login="jdoe", firstname="J", lastname="Doe")
        Setting.objects.create(name="app_title", value="Tracker")
        self.assertTrue(no_data())

    def test_givable_role_counts(self):
        Role.objects.create(name="Reviewer", position=1)
        self.assertFalse(no_data())

    def test_each_configuration_table_counts(self):
        status = IssueStatus.objects.create(name="Open")
        self.assertFalse(no_data())
        status.delete()
        self.assertTrue(no_data())

        Enumeration.objects.create(type="IssuePriority", name="Low")
        self.assertFalse(no_data())
        Enumeration.objects.all().delete()

        Query.objects.create(type="IssueQuery", name="Everything")
        self.assertFalse(no_data())
        Query.objects.all().delete()

        Tracker.objects.create(name="Bug", default_status=IssueStatus.objects.create(name="New"))
        self.assertFalse(no_data())
