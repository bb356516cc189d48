import unittest
from datetime import timedelta

from tabletrainer.profile.models import QuestionAttempt
from tabletrainer.stats.improvement import (
    ImprovementIndicator,
    calculate_improvement_indicators,
    format_improvement_message,
)

from helpers import T0, make_result, make_session, make_stat


class ImprovementTests(unittest.TestCase):
    def test_faster_example(self) -> None:
        stats = {"3x4": make_stat(3, 4, times=(4000, 4000, 4000, 3000, 3000, 3000))}
        found = calculate_improvement_indicators(make_session([make_result(3, 4)]), stats)
        self.assertEqual(len(found), 1)
        imp = found[0]
        self.assertEqual(imp.previous_average_time, 4000)
        self.assertEqual(imp.recent_average_time, 3000)
        self.assertAlmostEqual(imp.improvement, 25.0)
        self.assertTrue(imp.is_significant)
        self.assertIn("faster", format_improvement_message(imp))
        self.assertEqual(format_improvement_message(imp), "3 × 4: 1.0s faster (25.0% improvement)")

    def test_slower_is_reported_as_decline(self) -> None:
        stats = {"6x7": make_stat(6, 7, times=(2000, 2000, 2000, 3000, 3000, 3000))}
        imp = calculate_improvement_indicators(make_session([make_result(6, 7)]), stats)[0]
        self.assertAlmostEqual(imp.improvement, -50.0)
        self.assertEqual(format_improvement_message(imp), "6 × 7: 1.0s slower (50.0% decline)")

    def test_needs_six_attempts(self) -> None:
        stats = {"3x4": make_stat(3, 4, times=(9000, 9000, 1000, 1000, 1000))}
        self.assertEqual(calculate_improvement_indicators(make_session([make_result(3, 4)]), stats), [])

    def test_small_change_is_not_reported(self) -> None:
        stats = {"3x4": make_stat(3, 4, times=(3000, 3000, 3000, 2700, 2700, 2700))}
        self.assertEqual(calculate_improvement_indicators(make_session([make_result(3, 4)]), stats), [])

    def test_boundary_fifteen_percent_is_significant(self) -> None:
        stats = {"3x4": make_stat(3, 4, times=(2000, 2000, 2000, 1700, 1700, 1700))}
        found = calculate_improvement_indicators(make_session([make_result(3, 4)]), stats)
        self.assertEqual(len(found), 1)

    def test_zero_previous_average_is_skipped(self) -> None:
        stats = {"3x4": make_stat(3, 4, times=(0, 0, 0, 1000, 1000, 1000))}
        self.assertEqual(calculate_improvement_indicators(make_session([make_result(3, 4)]), stats), [])

    def test_uses_last_six_by_date(self) -> None:
        stat = make_stat(2, 5, times=(9000, 9000, 9000, 9000, 4000, 4000, 4000, 2000, 2000, 2000))
        # stored out of order: history is sorted by date first
        stat.recent_attempts = list(reversed(stat.recent_attempts))
        imp = calculate_improvement_indicators(make_session([make_result(2, 5)]), {"2x5": stat})[0]
        self.assertEqual((imp.previous_average_time, imp.recent_average_time), (4000, 2000))

    def test_reversed_presentation_finds_stat(self) -> None:
        stats = {"3x4": make_stat(3, 4, times=(4000, 4000, 4000, 3000, 3000, 3000))}
        found = calculate_improvement_indicators(make_session([make_result(4, 3)]), stats)
        self.assertEqual([(i.factor1, i.factor2, i.question_key) for i in found], [(4, 3, "4x3")])

    def test_pair_reported_once_per_session(self) -> None:
        stats = {"3x4": make_stat(3, 4, times=(4000, 4000, 4000, 3000, 3000, 3000))}
        session = make_session([make_result(3, 4), make_result(4, 3), make_result(3, 4)])
        self.assertEqual(len(calculate_improvement_indicators(session, stats)), 1)

    def test_unknown_pair_is_skipped(self) -> None:
        self.assertEqual(calculate_improvement_indicators(make_session([make_result(11, 12)]), {}), [])

    def test_message_uses_one_decimal(self) -> None:
        imp = ImprovementIndicator("8x9", 8, 9, 2500.0, 4000.0, 37.5, True)
        self.assertEqual(format_improvement_message(imp), "8 × 9: 1.5s faster (37.5% improvement)")


if __name__ == "__main__":
    unittest.main()
