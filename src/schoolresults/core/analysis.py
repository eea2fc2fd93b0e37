from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from schoolresults.core.attendance import round_half_up
from schoolresults.core.grading import calc_percentage, grade_for_percentage, sort_rules
from schoolresults.core.models import DEFAULT_GRADE, GradingRule, StudentResult, Subject


@dataclass(frozen=True)
class ClassSummary:
    size: int
    average: float
    pass_count: int
    pass_rate: float
    fail_label: str


def filter_results(
    results: Iterable[StudentResult],
    campus: Optional[str] = None,
    class_name: Optional[str] = None,
    section: Optional[str] = None,
) -> list[StudentResult]:
    filtered = []
    for r in results:
        if campus and r.student.campus != campus:
            continue
        if class_name and r.student.class_name != class_name:
            continue
        if section and r.student.section != section:
            continue
        filtered.append(r)
    return filtered


def subjects_for_class(subjects: Sequence[Subject], subject_ids: Optional[Sequence[str]]) -> list[Subject]:
    """Subjects taught in a class; every subject when the class lists none."""
    if not subject_ids:
        return list(subjects)
    wanted = set(subject_ids)
    return [s for s in subjects if s.id in wanted]


def _academic(subjects: Sequence[Subject]) -> list[Subject]:
    return [s for s in subjects if not s.is_attendance]


def fail_label(grading_rules: Iterable[GradingRule]) -> str:
    for rule in grading_rules:
        if rule.min_percentage == 0:
            return rule.label
    return DEFAULT_GRADE


def summarize_class(results: Sequence[StudentResult], grading_rules: Sequence[GradingRule]) -> ClassSummary:
    label = fail_label(grading_rules)
    size = len(results)
    if size == 0:
        return ClassSummary(size=0, average=0.0, pass_count=0, pass_rate=0.0, fail_label=label)

    pass_count = sum(1 for r in results if r.grade != label)
    return ClassSummary(
        size=size,
        average=sum(r.percentage for r in results) / size,
        pass_count=pass_count,
        pass_rate=(pass_count / size) * 100,
        fail_label=label,
    )


def subject_highs(results: Sequence[StudentResult], subjects: Sequence[Subject]) -> dict[str, float]:
    highs: dict[str, float] = {}
    for subject in _academic(subjects):
        scores = [r.marks[subject.id].total for r in results if subject.id in r.marks]
        highs[subject.id] = max([0.0, *scores])
    return highs


def subject_averages(results: Sequence[StudentResult], subjects: Sequence[Subject]) -> list[tuple[str, int]]:
    """(subject name, rounded average) pairs, weakest subject first."""
    averages = []
    for subject in _academic(subjects):
        scores = [r.marks[subject.id].total for r in results if subject.id in r.marks]
        avg = sum(scores) / len(scores) if scores else 0.0
        averages.append((subject.name, round_half_up(avg)))
    averages.sort(key=lambda item: item[1])
    return averages


def grade_distribution(results: Sequence[StudentResult], grading_rules: Sequence[GradingRule]) -> list[tuple[str, int]]:
    distribution = []
    for rule in sort_rules(grading_rules):
        count = sum(1 for r in results if r.grade == rule.label)
        if count > 0:
            distribution.append((rule.label, count))
    return distribution


def top_performers(results: Sequence[StudentResult], n: int = 5) -> list[StudentResult]:
    return sorted(results, key=lambda r: r.percentage, reverse=True)[:n]


def bottom_performers(results: Sequence[StudentResult], n: int = 5) -> list[StudentResult]:
    return list(reversed(sorted(results, key=lambda r: r.percentage, reverse=True)))[:n]


@dataclass(frozen=True)
class SubjectPassStats:
    subject_id: str
    pass_count: int
    fail_count: int
    pass_pct: float
    fail_pct: float


def subject_grades(
    result: StudentResult,
    subjects: Sequence[Subject],
    grading_rules: Sequence[GradingRule],
) -> dict[str, str]:
    """Grade of each subject on a result card, graded against that subject's maximum."""
    sorted_rules = sort_rules(grading_rules)
    grades: dict[str, str] = {}
    for subject in _academic(subjects):
        score = result.marks.get(subject.id)
        obtained = score.total if score is not None else 0.0
        grades[subject.id] = grade_for_percentage(calc_percentage(obtained, subject.max_marks), sorted_rules)
    return grades


def subject_pass_stats(
    results: Sequence[StudentResult],
    subjects: Sequence[Subject],
    grading_rules: Sequence[GradingRule],
) -> list[SubjectPassStats]:
    """Broadsheet pass/fail tallies per subject; a fail is a subject grade equal to the fail label."""
    label = fail_label(grading_rules)
    fail_counts = {s.id: 0 for s in _academic(subjects)}
    for r in results:
        for subject_id, grade in subject_grades(r, subjects, grading_rules).items():
            if grade == label:
                fail_counts[subject_id] += 1

    total = len(results)
    stats = []
    for subject_id, fail_count in fail_counts.items():
        pass_count = total - fail_count
        stats.append(
            SubjectPassStats(
                subject_id=subject_id,
                pass_count=pass_count,
                fail_count=fail_count,
                pass_pct=(pass_count / total) * 100 if total else 0.0,
                fail_pct=(fail_count / total) * 100 if total else 0.0,
            )
        )
    return stats
