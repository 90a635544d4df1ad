import json
import tempfile
import unittest
from pathlib import Path

from settings import Settings


class SettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "settings.json"

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_missing_file_gives_defaults(self) -> None:
        s = Settings.load(self.path)
        self.assertTrue(s.answer_timeout)
        self.assertEqual(s.earth_health, 100)
        self.assertEqual(s.starting_wave, 1)
        self.assertIsNone(s.seed)

    def test_saved_values_come_back(self) -> None:
        Settings(answer_timeout=False, starting_wave=4, seed=9).save(self.path)
        s = Settings.load(self.path)
        self.assertFalse(s.answer_timeout)
        self.assertEqual(s.starting_wave, 4)
        self.assertEqual(s.seed, 9)

    def test_unknown_keys_are_ignored(self) -> None:
        self.path.write_text(json.dumps({"earth_health": 50, "question_order": "random"}), encoding="utf-8")
        self.assertEqual(Settings.load(self.path).earth_health, 50)

    def test_bad_files_fall_back(self) -> None:
        self.path.write_text("{oops", encoding="utf-8")
        self.assertEqual(Settings.load(self.path), Settings())
        self.path.write_text("[1, 2]", encoding="utf-8")
        self.assertEqual(Settings.load(self.path), Settings())
        self.path.write_text(json.dumps({"earth_health": "lots"}), encoding="utf-8")
        self.assertEqual(Settings.load(self.path), Settings())

    def test_values_are_clamped(self) -> None:
        self.path.write_text(
            json.dumps({"earth_health": -5, "starting_wave": 0, "time_freeze_charges": -1}), encoding="utf-8"
        )
        s = Settings.load(self.path)
        self.assertEqual(s.earth_health, 1)
        self.assertEqual(s.starting_wave, 1)
        self.assertEqual(s.time_freeze_charges, 0)


if __name__ == "__main__":
    unittest.main()
