import contextlib
import io
import random
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import matplotlib

matplotlib.use("Agg")

from storage.session_log import load_log
from storage.store import InMemoryProfileStore, JsonProfileStore
from tabletrainer.app.cli import _parse_tables, main, run_drill
from tabletrainer.app.session_manager import SessionManager
from tabletrainer.config.settings import PracticeSettings
from tabletrainer.questions.model import Question


class ScriptedUI:
    def __init__(self, answers, clock_ms) -> None:
        self.answers = list(answers)
        self.clock_ms = list(clock_ms)
        self.messages = []
        self.waits = []

    def as_dict(self):
        return {
            "ask": lambda prompt: self.answers.pop(0),
            "inform": self.messages.append,
            "wait_ms": self.waits.append,
            "now_ms": lambda: self.clock_ms.pop(0),
        }


class RunDrillTests(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = PracticeSettings(selected_tables=[3], question_delay=700)
        self.sm = SessionManager(InMemoryProfileStore(), rng=random.Random(1))
        self.sm.start_session(self.settings)
        self.questions = [Question.make(3, 4), Question.make(6, 3), Question.make(3, 3)]

    def test_answers_feedback_and_quit(self) -> None:
        ui = ScriptedUI([" 12 ", "17", "q"], [0, 1500, 2000, 4250, 5000, 5100])
        answered = run_drill(self.sm, self.questions, self.settings, ui.as_dict())
        self.assertEqual(answered, 2)
        results = self.sm.tracker.stats.questions
        self.assertEqual([(r.is_correct, r.time_spent) for r in results], [(True, 1500), (False, 2250)])
        self.assertEqual(ui.messages, ["Correct!", "Incorrect. 6 × 3 = 18.", "Stopping early."])
        self.assertEqual(ui.waits, [700, 700])

    def test_non_numeric_answer_is_wrong(self) -> None:
        ui = ScriptedUI(["twelve", "18", "9"], [0, 10, 20, 30, 40, 50])
        run_drill(self.sm, self.questions, self.settings, ui.as_dict(), feedback=False)
        results = self.sm.tracker.stats.questions
        self.assertIsNone(results[0].user_answer)
        self.assertEqual([r.is_correct for r in results], [False, True, True])
        self.assertEqual(ui.messages, [])
        # no pause after the last question
        self.assertEqual(len(ui.waits), 2)

    def test_parse_tables(self) -> None:
        self.assertEqual(_parse_tables("2, 3,7-9"), [2, 3, 7, 8, 9])
        with self.assertRaises(ValueError):
            _parse_tables("two")


class MainTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.profiles = root / "profiles.json"
        self.log_dir = root / "log"
        self.reports = root / "reports"
        self.config = root / "config.yml"
        self.config.write_text(
            "practice:\n"
            "  selected_tables: [3]\n"
            "  session_length: 10\n"
            "  question_delay_ms: 500\n"
            "storage:\n"
            f"  profiles_path: {self.profiles.as_posix()}\n"
            f"  session_log_dir: {self.log_dir.as_posix()}\n"
            "  write_session_log: true\n"
            "analytics:\n"
            f"  reports_dir: {self.reports.as_posix()}\n",
            encoding="utf-8",
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _main(self, *args: str) -> tuple:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main(["--config", str(self.config), *args])
        return code, out.getvalue()

    def test_user_management(self) -> None:
        code, out = self._main("create-user", "Ada")
        self.assertEqual(code, 0)
        self.assertIn("Created Ada", out)
        store = JsonProfileStore(self.profiles)
        uid = store.get_current_user_id()
        self.assertIsNotNone(uid)

        self._main("create-user", "Bo")
        code, out = self._main("users")
        self.assertIn(f"* {uid}: Ada", out)
        self.assertIn("Bo", out)

        self.assertEqual(self._main("select-user", "user-missing")[0], 2)
        self.assertEqual(self._main("create-user", "  ")[0], 2)

        self.assertEqual(self._main("delete-user", uid)[0], 0)
        self.assertIsNone(store.get_current_user_id())
        self.assertEqual([u.name for u in store.load_all()], ["Bo"])

    def test_presets(self) -> None:
        code, out = self._main("presets")
        self.assertEqual(code, 0)
        self.assertIn("beginner", out)
        self.assertIn("advanced", out)

    def test_unknown_preset(self) -> None:
        code, out = self._main("run", "--preset", "expert")
        self.assertEqual(code, 2)
        self.assertIn("Unknown preset", out)

    def test_run_stats_and_report(self) -> None:
        self._main("create-user", "Ada")
        uid = JsonProfileStore(self.profiles).get_current_user_id()

        with mock.patch("builtins.input", side_effect=["nope"] * 10), mock.patch("time.sleep"):
            code, out = self._main("run")
        self.assertEqual(code, 0)
        self.assertIn("Session Summary:", out)
        self.assertIn("Score: 0/10 correct (0%)", out)

        user = JsonProfileStore(self.profiles).load(uid)
        self.assertEqual((user.total_sessions, user.total_questions, user.total_correct), (1, 10, 0))
        log = load_log(self.log_dir)
        self.assertIn(3, set(int(t) for t in log["table"]))

        code, out = self._main("stats", "--sort", "time", "--table", "3")
        self.assertEqual(code, 0)
        self.assertIn("Overall accuracy: 0%", out)

        code, out = self._main("report")
        self.assertEqual(code, 0)
        self.assertTrue((self.reports / "question_stats.csv").exists())
        self.assertTrue((self.reports / "trend_table_3.png").exists())

    def test_run_no_save_quits_early(self) -> None:
        self._main("create-user", "Ada")
        uid = JsonProfileStore(self.profiles).get_current_user_id()
        with mock.patch("builtins.input", side_effect=["q"]), mock.patch("time.sleep"):
            code, out = self._main("run", "--no-save", "--tables", "4-5", "--questions", "12")
        self.assertEqual(code, 0)
        self.assertIn("Stopping early.", out)
        self.assertIn("12 questions from tables 4, 5", out)
        self.assertEqual(JsonProfileStore(self.profiles).load(uid).total_sessions, 0)
        self.assertTrue(load_log(self.log_dir).empty)

    def test_stats_without_user(self) -> None:
        code, out = self._main("stats")
        self.assertEqual(code, 2)
        self.assertIn("No user selected", out)


if __name__ == "__main__":
    unittest.main()
