from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from _support import make_store

from guess_master.languages import display_name, effective_lang, language_from_code, parse_lang


class ParseLangTest(unittest.TestCase):
    def test_tags_are_case_insensitive(self):
        self.assertEqual(parse_lang("en"), "en")
        self.assertEqual(parse_lang("IT"), "it")
        self.assertIsNone(parse_lang("xx"))
        self.assertIsNone(parse_lang(""))
        self.assertIsNone(parse_lang(None))

    def test_language_names_including_native_spellings(self):
        self.assertEqual(parse_lang("Italiano"), "it")
        self.assertEqual(parse_lang("english"), "en")
        self.assertEqual(parse_lang("Русский"), "ru")
        self.assertEqual(parse_lang("中文"), "zh")

    def test_locale_prefix(self):
        self.assertEqual(language_from_code("en-US"), "en")
        self.assertEqual(language_from_code("it"), "it")
        self.assertIsNone(language_from_code("pt-BR"))
        self.assertIsNone(language_from_code(None))

    def test_display_name(self):
        self.assertEqual(display_name("it"), "Italiano")
        self.assertEqual(display_name("xx"), "xx")


class EffectiveLangTest(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory(prefix="lang_test_")
        self.addCleanup(self.tmpdir.cleanup)
        self.store = make_store(Path(self.tmpdir.name) / "data")

    def test_transport_code_used_for_new_users(self):
        self.assertEqual(effective_lang(self.store, 100, 200, "it", "en"), "it")
        self.assertEqual(effective_lang(self.store, 101, 300, "en-US", "it"), "en")
        self.assertEqual(effective_lang(self.store, 101, 300, None, "it"), "it")

    def test_user_then_chat_preference_wins(self):
        self.store.set_chat_language(100, "ru")
        self.assertEqual(effective_lang(self.store, 100, 200, "it", "en"), "ru")
        self.store.set_user_language((100, 200), "zh")
        self.assertEqual(effective_lang(self.store, 100, 200, "it", "en"), "zh")
        self.assertEqual(effective_lang(self.store, 100, 201, "it", "en"), "ru")
        self.assertEqual(effective_lang(self.store, 100, None, "it", "en"), "ru")

    def test_language_preferences_are_not_persisted(self):
        self.store.set_user_language((1, 1), "it")
        restarted = make_store(Path(self.tmpdir.name) / "data")
        self.assertIsNone(restarted.user_language((1, 1)))


if __name__ == "__main__":
    unittest.main()
