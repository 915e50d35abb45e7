"""Tests for preference persistence.

Malformed or mistyped config values fall back to defaults, and saving
preferences never drops keys written by other code.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from prismtui.instance_model import SortMode
from prismtui.runtime import config


class PreferencesTests(unittest.TestCase):
    def test_missing_config_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("prismtui.runtime.config.CONFIG_PATH", Path(tmp) / "config.json"):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_preferences(), config.Preferences())

    def test_round_trip_keeps_unknown_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("prismtui.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"keep_me": 1})
                config.save_preferences(config.Preferences(SortMode.VERSION, False, "plain"))

                saved = json.loads(config_path.read_text(encoding="utf-8"))
                self.assertEqual(saved["keep_me"], 1)
                self.assertEqual(saved["default_sort"], "Version")
                self.assertIs(saved["sort_ascending"], False)
                self.assertEqual(
                    config.load_preferences(),
                    config.Preferences(sort_mode=SortMode.VERSION, sort_ascending=False, theme="plain"),
                )

    def test_saving_without_theme_keeps_stored_theme(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("prismtui.runtime.config.CONFIG_PATH", Path(tmp) / "config.json"):
                config.save_config({"theme": "solarized"})
                config.save_preferences(config.Preferences(SortMode.NAME, True))
                self.assertEqual(config.load_preferences().theme, "solarized")

    def test_invalid_values_are_sanitized(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                json.dumps({"default_sort": "Random", "sort_ascending": "no", "theme": "   "}),
                encoding="utf-8",
            )
            with mock.patch("prismtui.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_preferences(), config.Preferences())

    def test_malformed_json_and_non_object_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("prismtui.runtime.config.CONFIG_PATH", config_path):
                config_path.write_text("{not json", encoding="utf-8")
                with self.assertLogs("prismtui.runtime.config", level="WARNING"):
                    self.assertEqual(config.load_config(), {})

                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})

    def test_unwritable_directory_is_logged_not_raised(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "blocker"
            blocker.write_text("", encoding="utf-8")
            with mock.patch("prismtui.runtime.config.CONFIG_PATH", blocker / "config.json"):
                with self.assertLogs("prismtui.runtime.config", level="WARNING"):
                    config.save_config({"default_sort": "Name"})


if __name__ == "__main__":
    unittest.main()
