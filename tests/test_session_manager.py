import random
import tempfile
import unittest
from pathlib import Path

from storage.session_log import DATA_FILE, load_log
from storage.store import InMemoryProfileStore
from tabletrainer.app.session_manager import SessionManager
from tabletrainer.config.settings import PracticeSettings
from tabletrainer.errors import InvalidInputError, SessionStateError
from tabletrainer.profile.profile import create_user_profile
from tabletrainer.questions.model import Question

from helpers import StepClock, make_stat


class SessionManagerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.log_dir = Path(self._tmp.name) / "log"
        self.store = InMemoryProfileStore()
        self.user = create_user_profile("Ada", clock=StepClock())
        self.store.save(self.user)
        self.settings = PracticeSettings(selected_tables=[3, 7], session_length=10)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _manager(self, seed: int = 7) -> SessionManager:
        return SessionManager(self.store, rng=random.Random(seed), clock=StepClock(), session_log_dir=self.log_dir)

    def test_questions_come_from_selected_tables(self) -> None:
        questions = self._manager().start_session(self.settings)
        self.assertEqual(len(questions), 10)
        for q in questions:
            self.assertTrue({3, 7} & {q.factor1, q.factor2})
            self.assertEqual(q.answer, q.factor1 * q.factor2)

    def test_same_seed_same_questions(self) -> None:
        a = self._manager(seed=3).start_session(self.settings)
        b = self._manager(seed=3).start_session(self.settings)
        self.assertEqual([(q.factor1, q.factor2) for q in a], [(q.factor1, q.factor2) for q in b])

    def test_adaptive_with_profile(self) -> None:
        self.user.question_stats = {"3x9": make_stat(3, 9, attempts=5, success_rate=20, average_time=6000)}
        settings = self.settings.with_overrides(adaptive_difficulty=True)
        questions = self._manager().start_session(settings, self.user)
        self.assertEqual(len(questions), 10)
        for q in questions:
            self.assertTrue({3, 7} & {q.factor1, q.factor2})

    def test_no_tables_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            self._manager().start_session(PracticeSettings(selected_tables=[]))

    def test_finish_before_start(self) -> None:
        with self.assertRaises(SessionStateError):
            self._manager().finish()

    def test_full_session_is_saved(self) -> None:
        sm = self._manager()
        questions = sm.start_session(self.settings, self.user)
        for i, q in enumerate(questions):
            sm.submit(q, q.answer if i % 2 == 0 else None, 1500)
        outcome = sm.finish()

        self.assertEqual((outcome.stats.correct, outcome.stats.total), (5, 10))
        self.assertEqual(outcome.report.accuracy, 50)
        self.assertEqual(outcome.report.grade.grade, "C-")
        saved = self.store.load(self.user.id)
        self.assertEqual((saved.total_sessions, saved.total_questions, saved.total_correct), (1, 10, 5))
        self.assertEqual(outcome.profile, saved)
        self.assertEqual(sum(s.attempts for s in saved.question_stats.values()), 10)

        log = load_log(self.log_dir)
        self.assertFalse(log.empty)
        self.assertEqual(set(log["user_id"]), {self.user.id})
        self.assertEqual(set(log["session_id"]), {sm.session_id})

        with self.assertRaises(SessionStateError):
            sm.submit(questions[0], 1, 100)

    def test_second_finish_does_not_merge_again(self) -> None:
        sm = self._manager()
        q = sm.start_session(self.settings, self.user)[0]
        sm.submit(q, q.answer, 900)
        first = sm.finish()
        second = sm.finish()
        self.assertIs(second, first)
        saved = self.store.load(self.user.id)
        self.assertEqual((saved.total_sessions, saved.total_questions), (1, 1))
        log = load_log(self.log_dir)
        self.assertEqual(len(log), len(set(log["table"])))

    def test_next_session_merges_onto_saved_profile(self) -> None:
        sm = self._manager()
        q = sm.start_session(self.settings, self.user)[0]
        sm.submit(q, q.answer, 900)
        first = sm.finish()
        q = sm.start_session(self.settings, first.profile)[0]
        sm.submit(q, None, 1100)
        second = sm.finish()
        self.assertIsNot(second, first)
        saved = self.store.load(self.user.id)
        self.assertEqual((saved.total_sessions, saved.total_questions, saved.total_correct), (2, 2, 1))

    def test_finish_without_saving(self) -> None:
        sm = self._manager()
        q = sm.start_session(self.settings, self.user)[0]
        sm.submit(q, q.answer, 800)
        outcome = sm.finish(save=False)
        self.assertEqual(outcome.profile.total_questions, 1)
        self.assertEqual(self.store.load(self.user.id).total_questions, 0)
        self.assertFalse((self.log_dir / DATA_FILE).exists())

    def test_empty_session_leaves_profile_alone(self) -> None:
        sm = self._manager()
        sm.start_session(self.settings, self.user)
        outcome = sm.finish()
        self.assertIsNone(outcome.profile)
        self.assertEqual(outcome.report.total, 0)
        self.assertEqual(self.store.load(self.user.id).total_sessions, 0)

    def test_report_uses_history_before_session(self) -> None:
        self.user.question_stats = {"3x4": make_stat(3, 4, times=(4000, 4000, 4000, 3000, 3000, 3000))}
        sm = self._manager()
        sm.start_session(self.settings, self.user)
        sm.submit(Question.make(4, 3), 12, 9000)
        outcome = sm.finish(save=False)
        self.assertEqual([i.question_key for i in outcome.report.improvements], ["4x3"])
        self.assertAlmostEqual(outcome.report.improvements[0].improvement, 25.0)


if __name__ == "__main__":
    unittest.main()
