from django.conf import settings
from django.test import SimpleTestCase

from issues.default_data.labels import LABELS, LabelResolver, resolve, select_language


class SelectLanguageTests(SimpleTestCase):
    def test_supported_language(self):
        self.assertEqual(select_language("de"), "de")

    def test_case_and_region_are_normalised(self):
        self.assertEqual(select_language("PT-BR"), "pt-br")
        self.assertEqual(select_language("de-at"), "de")

    def test_unknown_language_falls_back(self):
        with self.assertLogs("issues.default_data.labels", level="INFO"):
            self.assertEqual(select_language("tlh"), settings.LANGUAGE_CODE)

    def test_empty_language_uses_default(self):
        self.assertEqual(select_language(""), settings.LANGUAGE_CODE)
        self.assertEqual(select_language(None), settings.LANGUAGE_CODE)


class ResolveTests(SimpleTestCase):
    def test_known_key(self):
        self.assertEqual(resolve("default_role_admin", "en"), "Admin")
        self.assertEqual(resolve("label_my_bookmarks", "en"), "My bookmarks")

    def test_unknown_key_uses_default_then_key(self):
        self.assertEqual(resolve("default_role_auditor", "en", default="Auditor"), "Auditor")
        self.assertEqual(resolve("default_role_auditor", "en"), "default_role_auditor")

    def test_resolver_is_bound_to_locale(self):
        label = LabelResolver("en")
        self.assertEqual(label.locale, "en")
        self.assertEqual(label("default_priority_normal"), "Normal")

    def test_every_label_resolves_to_text(self):
        for key in LABELS:
            self.assertTrue(resolve(key, "en").strip())
