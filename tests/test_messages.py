from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from _support import PROJECT_ROOT

from guess_master.games.outcomes import (
    CannotIdentify,
    ConfigShown,
    Exhausted,
    GameStarted,
    Ignored,
    LanguageSet,
    LanguageShown,
    NotAuthorized,
    TooLow,
    WelcomePrompt,
    Won,
)
from guess_master.languages import SUPPORTED_LANGUAGES
from guess_master.messages import (
    DEFAULT_MESSAGES,
    MESSAGE_KEYS,
    MessageCatalog,
    format_with,
    load_all_messages,
    load_messages_file,
)

MESSAGES_DIR = PROJECT_ROOT / "messages"


class MessageFilesTest(unittest.TestCase):
    def test_shipped_languages_have_every_key(self):
        for path in sorted(MESSAGES_DIR.glob("*.json")):
            raw = json.loads(path.read_text(encoding="utf-8"))
            for key in MESSAGE_KEYS:
                self.assertTrue(str(raw.get(key, "")).strip(), f"{path.name} missing {key}")

    def test_directory_load_includes_every_file(self):
        catalog = load_all_messages(str(MESSAGES_DIR))
        for path in MESSAGES_DIR.glob("*.json"):
            self.assertIn(path.stem, catalog)
        self.assertEqual(catalog["it"]["language_name"], "Italiano")

    def test_every_supported_language_ships_a_catalog(self):
        catalog = load_all_messages(str(MESSAGES_DIR))
        self.assertEqual(sorted(catalog), sorted(SUPPORTED_LANGUAGES))
        self.assertEqual(catalog["zh"]["language_name"], "中文")

    def test_unknown_and_broken_files(self):
        with tempfile.TemporaryDirectory(prefix="messages_test_") as tmp:
            base = Path(tmp)
            (base / "xx.json").write_text("{}", encoding="utf-8")
            (base / "it.json").write_text("{broken", encoding="utf-8")
            (base / "ru.json").write_text(json.dumps({"pong": "понг"}), encoding="utf-8")
            logged = []

            catalog = load_all_messages(tmp, clean_log=lambda *a, **k: logged.append(a[0]))

            self.assertNotIn("xx", catalog)
            self.assertEqual(catalog["it"], dict(DEFAULT_MESSAGES, language_name="Italiano"))
            self.assertEqual(catalog["ru"]["pong"], "понг")
            self.assertEqual(catalog["ru"]["language_name"], "Русский")
            self.assertEqual(catalog["ru"]["too_low"], DEFAULT_MESSAGES["too_low"])
            self.assertIn("en", catalog)
            self.assertTrue(any("xx.json" in line for line in logged))

    def test_missing_directory_still_has_english(self):
        self.assertEqual(load_all_messages("/nonexistent/messages"), {"en": DEFAULT_MESSAGES})

    def test_missing_file_falls_back_to_defaults(self):
        self.assertEqual(load_messages_file("/nonexistent/en.json"), DEFAULT_MESSAGES)


class RenderTest(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = MessageCatalog.from_directory(str(MESSAGES_DIR), "en")

    def test_game_outcomes(self):
        started = self.catalog.render(GameStarted(min=1, max=100, attempts=5), "en", chat_id=3)
        self.assertIn("between 1 and 100", started.text)
        self.assertIn("Attempts left: 5", started.text)
        self.assertEqual(started.reason, "game_started")
        self.assertEqual(started.chat_id, 3)

        self.assertEqual(self.catalog.text_for(TooLow(remaining=4)), "Too low. Attempts left: 4")
        won = self.catalog.text_for(Won(next_attempts=9, threshold=3))
        self.assertIn("9 attempts", won)
        self.assertIn("3 attempts before failing", won)

    def test_exhausted_variants(self):
        revealed = self.catalog.text_for(Exhausted(target=42, remaining_before_reset=2))
        self.assertIn("42", revealed)
        self.assertIn("2", revealed)
        blocked = self.catalog.text_for(Exhausted(target=42, remaining_before_reset=2, final_guess=False))
        self.assertNotIn("42", blocked)
        self.assertEqual(blocked, self.catalog.for_lang("en")["no_attempts"])

    def test_italian_rendering_and_fallback(self):
        config = self.catalog.text_for(ConfigShown(min=1, max=100, attempts=5, number_attempts=2), "it")
        self.assertIn("Tentativi per indovinare = 5", config)
        self.assertIn("2", config)
        fallback = self.catalog.render(TooLow(remaining=1), "pt")
        self.assertEqual(fallback.lang, "en")
        self.assertEqual(fallback.text, "Too low. Attempts left: 1")

    def test_language_listing(self):
        text = self.catalog.text_for(LanguageShown(current="it", available=("en", "it")), "it")
        self.assertTrue(text.startswith("Lingua attuale: Italiano (it)"))
        self.assertIn("English (en)", text)

    def test_listing_names_languages_without_a_file(self):
        catalog = MessageCatalog({"en": dict(DEFAULT_MESSAGES)})
        text = catalog.text_for(LanguageShown(current="en", available=("en", "ru")))
        self.assertIn("Русский (ru)", text)

    def test_misc_outcomes(self):
        self.assertEqual(self.catalog.text_for(NotAuthorized()), "Not authorized.")
        self.assertIn("Ada", self.catalog.text_for(WelcomePrompt(name="Ada")))
        self.assertEqual(
            self.catalog.text_for(LanguageSet(scope="chat", lang="it")),
            DEFAULT_MESSAGES["lang_set_chat"],
        )
        self.assertEqual(self.catalog.text_for(CannotIdentify(action="guess")), DEFAULT_MESSAGES["cannot_guess"])
        self.assertIsNone(self.catalog.render(Ignored()))


def test_format_with_leaves_unknown_placeholders():
    assert format_with("{a} and {b}", a=1) == "1 and {b}"
    assert format_with("no placeholders") == "no placeholders"


if __name__ == "__main__":
    unittest.main()
