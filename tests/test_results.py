import copy
import unittest

from schoolresults.core.models import (
    AttendanceConfig,
    ComponentSplit,
    GradingRule,
    MarkEntry,
    SplitScore,
    Student,
    StudentAttendance,
    Subject,
    TotalScore,
)
from schoolresults.core.results import calculate_results, index_marks, rank_results

RULES = [GradingRule("A", 80), GradingRule("B", 60), GradingRule("F", 0)]
MATH = Subject("math", "Math", 100)
ENG = Subject("eng", "English", 100)


def mark(student_id, subject_id, obtained=None, theory=None, practical=None):
    return MarkEntry(student_id, subject_id, "term-1", obtained, theory, practical)


class CalculateResultsTests(unittest.TestCase):
    def test_three_student_scenario(self):
        students = [Student("s3", "Cara"), Student("s1", "Ali"), Student("s2", "Ben")]
        marks = [
            mark("s1", "math", 90), mark("s1", "eng", 85),
            mark("s2", "math", 70), mark("s2", "eng", 70),
            mark("s3", "math", 40), mark("s3", "eng", 30),
        ]
        results = calculate_results(students, [MATH, ENG], marks, RULES)

        self.assertEqual([r.student.id for r in results], ["s1", "s2", "s3"])
        self.assertEqual([r.grade for r in results], ["A", "B", "F"])
        self.assertEqual([(r.rank, r.position_suffix) for r in results], [(1, "st"), (2, "nd"), (3, "rd")])
        self.assertAlmostEqual(results[0].percentage, 87.5)
        self.assertEqual(results[0].total_obtained, 175)
        self.assertEqual(results[0].total_max, 200)
        self.assertIsNone(results[0].attendance)

    def test_percentage_matches_totals(self):
        subjects = [Subject("a", "A", 75), Subject("b", "B", 40)]
        results = calculate_results([Student("s", "S")], subjects, [mark("s", "a", 61), mark("s", "b", 17)], RULES)
        r = results[0]
        self.assertAlmostEqual(r.percentage, r.total_obtained / r.total_max * 100)

    def test_zero_maximum_gives_zero_percentage(self):
        students = [Student("s1", "A"), Student("s2", "B")]
        for subjects in ([], [Subject("x", "X", 0)]):
            results = calculate_results(students, subjects, [mark("s1", "x", 5)], RULES)
            self.assertEqual([r.percentage for r in results], [0, 0])
            self.assertEqual([r.grade for r in results], ["F", "F"])
            self.assertEqual([r.rank for r in results], [1, 1])

    def test_ties_share_rank_with_gap(self):
        students = [Student(sid, sid) for sid in ("a", "b", "c", "d")]
        marks = [mark("a", "math", 90), mark("b", "math", 90), mark("c", "math", 50), mark("d", "math", 50)]
        results = calculate_results(students, [MATH], marks, RULES)
        self.assertEqual([r.rank for r in results], [1, 1, 3, 3])
        self.assertEqual([r.position_suffix for r in results], ["st", "st", "rd", "rd"])

    def test_ties_keep_input_order(self):
        students = [Student("z", "Zed"), Student("a", "Amy")]
        results = calculate_results(students, [MATH], [mark("z", "math", 50), mark("a", "math", 50)], RULES)
        self.assertEqual([r.student.id for r in results], ["z", "a"])

    def test_missing_mark_scores_zero(self):
        results = calculate_results([Student("s", "S")], [MATH, ENG], [mark("s", "math", 60)], RULES)
        self.assertEqual(results[0].marks["eng"], TotalScore(0.0))
        self.assertEqual(results[0].total_obtained, 60)
        self.assertEqual(results[0].total_max, 200)

    def test_component_scoring_takes_precedence(self):
        entry = mark("s", "math", obtained=95, theory=30)
        results = calculate_results([Student("s", "S")], [MATH], [entry], RULES)
        self.assertEqual(results[0].marks["math"], SplitScore(30, 0))
        self.assertEqual(results[0].total_obtained, 30)

    def test_split_subject_maximum(self):
        physics = Subject("phy", "Physics", split=ComponentSplit(70, 30))
        entry = mark("s", "phy", theory=56, practical=24)
        results = calculate_results([Student("s", "S")], [physics], [entry], RULES)
        self.assertEqual(results[0].total_max, 100)
        self.assertAlmostEqual(results[0].percentage, 80.0)
        self.assertEqual(results[0].grade, "A")

    def test_first_duplicate_entry_wins(self):
        marks = [mark("s", "math", 40), mark("s", "math", 99)]
        self.assertEqual(index_marks(marks)[("s", "math")].obtained_marks, 40)
        results = calculate_results([Student("s", "S")], [MATH], marks, RULES)
        self.assertEqual(results[0].total_obtained, 40)

    def test_attendance_subject_excluded_from_totals(self):
        subjects = [MATH, Subject("term-attendance", "Attendance", 200)]
        marks = [mark("s", "math", 50), mark("s", "term-attendance", 180)]
        results = calculate_results([Student("s", "S")], subjects, marks, RULES)
        self.assertEqual(results[0].total_max, 100)
        self.assertNotIn("term-attendance", results[0].marks)
        self.assertIsNone(results[0].attendance)

    def test_attendance_block_from_mark_entry(self):
        marks = [mark("s", "math", 50), mark("s", "term-attendance", 45)]
        results = calculate_results([Student("s", "S")], [MATH], marks, RULES, AttendanceConfig(total_days=50))
        att = results[0].attendance
        self.assertEqual((att.present, att.total, att.percentage), (45, 50, 90))

    def test_grading_rule_order_does_not_matter(self):
        shuffled = [GradingRule("F", 0), GradingRule("A", 80), GradingRule("B", 60)]
        results = calculate_results([Student("s", "S")], [MATH], [mark("s", "math", 85)], shuffled)
        self.assertEqual(results[0].grade, "A")

    def test_output_length_and_order(self):
        students = [Student(str(i), str(i)) for i in range(7)]
        marks = [mark(str(i), "math", (i * 37) % 100) for i in range(7)]
        results = calculate_results(students, [MATH], marks, RULES)
        self.assertEqual(len(results), 7)
        percentages = [r.percentage for r in results]
        self.assertEqual(percentages, sorted(percentages, reverse=True))

    def test_pure_and_repeatable(self):
        students = [Student("s1", "A", attendance_present=10), Student("s2", "B")]
        subjects = [MATH, ENG]
        marks = [mark("s1", "math", 80), mark("s2", "eng", theory=20, practical=5)]
        rules = [GradingRule("F", 0), GradingRule("A", 80)]
        config = AttendanceConfig(20, {"s2": StudentAttendance(present=18)})
        snapshot = copy.deepcopy((students, subjects, marks, rules, config))

        first = calculate_results(students, subjects, marks, rules, config)
        second = calculate_results(*copy.deepcopy(snapshot))

        self.assertEqual(first, second)
        self.assertEqual((students, subjects, marks, rules, config), snapshot)
        self.assertEqual([r.label for r in rules], ["F", "A"])

    def test_nan_mark_does_not_break_ordering(self):
        students = [Student("a", "A"), Student("b", "B"), Student("c", "C")]
        marks = [mark("a", "math", 50), mark("b", "math", float("nan")), mark("c", "math", 90)]
        results = calculate_results(students, [MATH], marks, RULES)
        self.assertEqual([(r.student.id, r.rank) for r in results], [("c", 1), ("a", 2), ("b", 3)])
        self.assertEqual(results[2].percentage, 0.0)

    def test_rank_results_on_empty_input(self):
        self.assertEqual(rank_results([]), [])
        self.assertEqual(calculate_results([], [MATH], [], RULES), [])


if __name__ == "__main__":
    unittest.main()
