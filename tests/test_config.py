from __future__ import annotations

import contextlib
import importlib.util
import io
import json
import tempfile
import unittest
from pathlib import Path

from _support import PROJECT_ROOT

from guess_master.config import ConfigError, GameConfig, build_config, load_config, parse_reset_list


class BuildConfigTest(unittest.TestCase):
    def test_defaults(self):
        config = build_config({}, environ={})
        self.assertEqual((config.min, config.max, config.attempts), (1, 100, 5))
        self.assertEqual(config.restart_threshold, 3)
        self.assertEqual(config.ttl_seconds, 60 * 60 * 24 * 30)
        self.assertIsNone(config.bot_owner_id)
        self.assertEqual(config.reset_user_starts, frozenset())

    def test_file_values_and_environment_overrides(self):
        raw = {"game_min": 5, "game_max": 50, "game_attempts": 7, "number_attempts": 2}
        env = {"GAME_MAX": "60", "BOT_OWNER_ID": "1234", "RESET_USER_STARTS": ' "1:2" , 3:4,, '}
        config = build_config(raw, environ=env)
        self.assertEqual((config.min, config.max, config.attempts), (5, 60, 7))
        self.assertEqual(config.restart_threshold, 2)
        self.assertEqual(config.bot_owner_id, 1234)
        self.assertEqual(config.reset_user_starts, frozenset({"1:2", "3:4"}))

    def test_unparseable_numbers_fall_back(self):
        config = build_config({"game_attempts": "many"}, environ={"GAME_MIN": "low"})
        self.assertEqual(config.attempts, 5)
        self.assertEqual(config.min, 1)

    def test_invalid_range_is_fatal(self):
        with self.assertRaises(ConfigError):
            build_config({"game_min": 10, "game_max": 10}, environ={})

    def test_non_positive_attempts_is_fatal(self):
        with self.assertRaises(ConfigError):
            build_config({}, environ={"GAME_ATTEMPTS": "0"})

    def test_negative_threshold_is_fatal(self):
        with self.assertRaises(ConfigError):
            GameConfig(restart_threshold=-1).validate()

    def test_negative_ttl_is_fatal(self):
        with self.assertRaises(ConfigError):
            build_config({"seen_welcome_ttl_secs": -1}, environ={})
        with self.assertRaises(ConfigError):
            build_config({}, environ={"SEEN_WELCOME_TTL_SECS": "-5"})

    def test_default_language_is_normalized(self):
        self.assertEqual(build_config({"default_language": "it-IT"}, environ={}).default_language, "it")
        self.assertEqual(build_config({}, environ={"DEFAULT_LANG": "RU_ru"}).default_language, "ru")
        self.assertEqual(build_config({"default_language": "Italiano"}, environ={}).default_language, "it")
        self.assertEqual(build_config({"default_language": "pt-BR"}, environ={}).default_language, "en")

    def test_reset_list_forms(self):
        self.assertEqual(parse_reset_list(["1:2", " 3:4 "]), frozenset({"1:2", "3:4"}))
        self.assertEqual(parse_reset_list(None), frozenset())
        self.assertEqual(parse_reset_list(42), frozenset())


class LoadConfigTest(unittest.TestCase):
    def test_shipped_config_is_valid(self):
        config = load_config(str(PROJECT_ROOT / "config.json"), environ={})
        self.assertEqual(config.default_language, "en")
        self.assertEqual(config.public_view()["number_attempts"], config.restart_threshold)

    def test_missing_file_uses_defaults(self):
        config = load_config("/nonexistent/config.json", environ={})
        self.assertEqual(config, GameConfig())

    def test_non_object_file_uses_defaults(self):
        with tempfile.TemporaryDirectory(prefix="config_test_") as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
            self.assertEqual(load_config(str(path), environ={}), GameConfig())


class EntryScriptTest(unittest.TestCase):
    def _load_script(self):
        script = PROJECT_ROOT / "guess-master.py"
        spec = importlib.util.spec_from_file_location("guess_master_script", script)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def test_invalid_config_exits_non_zero(self):
        script = self._load_script()
        with tempfile.TemporaryDirectory(prefix="config_test_") as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"game_min": 10, "game_max": 10}), encoding="utf-8")
            out = io.StringIO()
            with contextlib.redirect_stdout(out):
                code = script.main(["--config", str(path)])
        self.assertEqual(code, 2)
        self.assertIn("GAME_MIN", out.getvalue())


if __name__ == "__main__":
    unittest.main()
