import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from tabletrainer.config.config import load_config, validate_config
from tabletrainer.config.settings import PracticeSettings


class ConfigTests(unittest.TestCase):
    def test_packaged_defaults(self) -> None:
        cfg = validate_config(load_config())
        self.assertEqual(cfg["practice"]["selected_tables"], [2, 3, 4, 5])
        self.assertEqual(cfg["practice"]["session_length"], 20)
        self.assertTrue(cfg["storage"]["write_session_log"])

    def test_empty_config_gets_defaults(self) -> None:
        cfg = validate_config({})
        self.assertEqual(cfg["practice"]["question_delay_ms"], 1500)
        self.assertEqual(cfg["analytics"]["reports_dir"], "./reports")

    def test_values_are_clamped(self) -> None:
        raw = {"practice": {"difficulty_multiplier": 7, "session_length": 3, "question_delay_ms": "slow"}}
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            cfg = validate_config(raw)
        self.assertEqual(cfg["practice"]["difficulty_multiplier"], 3.0)
        self.assertEqual(cfg["practice"]["session_length"], 10)
        self.assertEqual(cfg["practice"]["question_delay_ms"], 500)
        self.assertIn("WARNING", buf.getvalue())

    def test_bad_tables_dropped(self) -> None:
        with contextlib.redirect_stdout(io.StringIO()):
            cfg = validate_config({"practice": {"selected_tables": [3, "x", 13, 3, 0, 12]}})
        self.assertEqual(cfg["practice"]["selected_tables"], [3, 12])

    def test_missing_file_exits(self) -> None:
        with tempfile.TemporaryDirectory() as d, contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                load_config(str(Path(d) / "nope.yml"))

    def test_yaml_file_is_read(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            path = Path(d) / "cfg.yml"
            path.write_text("practice:\n  selected_tables: [7, 8]\n  adaptive_difficulty: true\n", encoding="utf-8")
            cfg = validate_config(load_config(str(path)))
        self.assertEqual(cfg["practice"]["selected_tables"], [7, 8])
        self.assertTrue(cfg["practice"]["adaptive_difficulty"])


class PracticeSettingsTests(unittest.TestCase):
    def test_from_config(self) -> None:
        s = PracticeSettings.from_config(validate_config({"practice": {"selected_tables": [6], "question_delay_ms": 900}}))
        self.assertEqual(s.selected_tables, [6])
        self.assertEqual(s.question_delay, 900)
        self.assertFalse(s.adaptive_difficulty)

    def test_overrides_skip_none_and_clamp(self) -> None:
        base = PracticeSettings(selected_tables=[2])
        with contextlib.redirect_stdout(io.StringIO()):
            s = base.with_overrides(selected_tables=None, session_length=500, difficulty_multiplier=1.5, adaptive_difficulty=True)
        self.assertEqual(s.selected_tables, [2])
        self.assertEqual(s.session_length, 50)
        self.assertEqual(s.difficulty_multiplier, 1.5)
        self.assertTrue(s.adaptive_difficulty)
        self.assertEqual(base.session_length, 20)


if __name__ == "__main__":
    unittest.main()
