from unittest import mock

from django.test import TestCase

from issues.default_data import store
from issues.default_data.errors import RecordInvalid
from issues.models import IssueStatus, Project, Role, Setting, User


class CreateTests(TestCase):
    def test_creates_valid_record(self):
        status = store.create(IssueStatus, name="New", position=1)
        self.assertTrue(IssueStatus.objects.filter(pk=status.pk).exists())

    def test_validation_error_becomes_record_invalid(self):
        with self.assertRaises(RecordInvalid) as ctx:
            store.create(Role, name="Reviewer", permissions=["launch_rockets"])
        self.assertEqual(ctx.exception.kind, "Role")
        self.assertEqual(ctx.exception.record, "Reviewer")
        self.assertTrue(ctx.exception.messages[0].startswith("permissions:"))
        self.assertFalse(Role.objects.filter(name="Reviewer").exists())

    def test_duplicate_name_becomes_record_invalid(self):
        store.create(IssueStatus, name="New")
        with self.assertRaises(RecordInvalid):
            store.create(IssueStatus, name="New")
        self.assertEqual(IssueStatus.objects.count(), 1)


class HelperTests(TestCase):
    def test_fetch_missing_record(self):
        with self.assertRaises(RecordInvalid) as ctx:
            store.fetch(User, pk=4242)
        self.assertIn("referenced record not found", ctx.exception.messages[0])

    def test_put_setting_upserts(self):
        store.put_setting("autologin", 7)
        store.put_setting("autologin", 28)
        self.assertEqual(Setting.objects.get(name="autologin").value, 28)

    def test_add_member_rejects_empty_roles(self):
        project = Project.objects.create(name="Tickets", identifier="tickets")
        user = User.objects.create(login="jdoe", firstname="J", lastname="Doe")
        with self.assertRaises(RecordInvalid) as ctx:
            store.add_member(project, user.principal_ptr, roles=[], editable_roles=[])
        self.assertEqual(ctx.exception.kind, "Member")


class BootstrapLockTests(TestCase):
    def test_lock_is_skipped_outside_postgres(self):
        fake = mock.MagicMock(vendor="sqlite")
        with mock.patch.object(store, "connection", fake):
            store.acquire_bootstrap_lock()
        fake.cursor.assert_not_called()

    def test_lock_uses_transaction_scoped_advisory_lock(self):
        fake = mock.MagicMock(vendor="postgresql")
        cursor = fake.cursor.return_value.__enter__.return_value
        with mock.patch.object(store, "connection", fake):
            store.acquire_bootstrap_lock()
        cursor.execute.assert_called_once_with("SELECT pg_advisory_xact_lock(%s)", [store.BOOTSTRAP_LOCK_KEY])
