"""Tests for config.load_config."""

import json
import os
import tempfile
import unittest

from config import load_config


class TestLoadConfig(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "config.json")

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def _write(self, text: str) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(text)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config(self.path)

    def test_invalid_json_reports_line(self) -> None:
        self._write('{\n  "API_URL": "http://x",\n  oops\n}')
        with self.assertRaises(ValueError) as ctx:
            load_config(self.path)
        self.assertIn("Line 3", str(ctx.exception))

    def test_missing_required_key(self) -> None:
        self._write(json.dumps({"SESSION_FILE": "s.json"}))
        with self.assertRaises(KeyError):
            load_config(self.path)

    def test_defaults_applied(self) -> None:
        self._write(json.dumps({"API_URL": "https://inventaris.example.com/"}))
        config = load_config(self.path)
        self.assertEqual(config["API_URL"], "https://inventaris.example.com")
        self.assertEqual(config["SESSION_FILE"], "session.json")
        self.assertEqual(config["REQUEST_TIMEOUT"], 10)
        self.assertTrue(config["VERIFY_TLS"])
        self.assertEqual(config["SEARCH_DEBOUNCE_MS"], 300)
        self.assertEqual(config["IMAGE_BASE_URL"], "https://inventaris.example.com")

    def test_explicit_values_kept(self) -> None:
        self._write(json.dumps({"API_URL": "http://x", "VERIFY_TLS": False, "SEARCH_DEBOUNCE_MS": 150}))
        config = load_config(self.path)
        self.assertFalse(config["VERIFY_TLS"])
        self.assertEqual(config["SEARCH_DEBOUNCE_MS"], 150)


if __name__ == "__main__":
    unittest.main()
