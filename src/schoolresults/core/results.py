from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, Optional, Sequence, Tuple

from schoolresults.core.attendance import resolve_attendance
from schoolresults.core.grading import calc_percentage, grade_for_percentage, ordinal_suffix, sort_rules
from schoolresults.core.models import (
    ATTENDANCE_SUBJECT_ID,
    AttendanceConfig,
    GradingRule,
    MarkEntry,
    Score,
    Student,
    StudentResult,
    Subject,
    TotalScore,
)

logger = logging.getLogger(__name__)

MarkIndex = Dict[Tuple[str, str], MarkEntry]


def index_marks(marks: Iterable[MarkEntry]) -> MarkIndex:
    """Map (student_id, subject_id) to the first matching entry."""
    index: MarkIndex = {}
    for entry in marks:
        index.setdefault((entry.student_id, entry.subject_id), entry)
    return index


def score_student(
    student: Student,
    subjects: Sequence[Subject],
    index: MarkIndex,
    sorted_rules: Sequence[GradingRule],
    attendance_config: Optional[AttendanceConfig] = None,
) -> StudentResult:
    """Unranked result for one student."""
    student_marks: Dict[str, Score] = {}
    total_obtained = 0.0
    total_max = 0.0

    for subject in subjects:
        if subject.is_attendance:
            continue
        entry = index.get((student.id, subject.id))
        score = entry.score() if entry is not None else TotalScore(0.0)
        student_marks[subject.id] = score
        total_obtained += score.total
        total_max += subject.max_marks

    attendance = resolve_attendance(
        student,
        attendance_config,
        index.get((student.id, ATTENDANCE_SUBJECT_ID)),
    )

    percentage = calc_percentage(total_obtained, total_max)
    return StudentResult(
        student=student,
        marks=student_marks,
        total_obtained=total_obtained,
        total_max=total_max,
        percentage=percentage,
        grade=grade_for_percentage(percentage, sorted_rules),
        attendance=attendance,
    )


def rank_results(results: Iterable[StudentResult]) -> list[StudentResult]:
    """Sort by percentage descending and assign competition ranks (1, 1, 3, ...)."""
    ordered = sorted(results, key=lambda r: r.percentage, reverse=True)
    ranked: list[StudentResult] = []
    current_rank = 1
    for i, result in enumerate(ordered):
        if i > 0 and result.percentage < ordered[i - 1].percentage:
            current_rank = i + 1
        ranked.append(replace(result, rank=current_rank, position_suffix=ordinal_suffix(current_rank)))
    return ranked


def calculate_results(
    students: Sequence[Student],
    subjects: Sequence[Subject],
    marks: Sequence[MarkEntry],
    grading_rules: Sequence[GradingRule],
    attendance_config: Optional[AttendanceConfig] = None,
) -> list[StudentResult]:
    """
    Score, grade and rank every student.

    Missing marks score 0, a zero maximum gives 0%, and a percentage below
    every rule grades as "F". Inputs are never modified.
    """
    logger.debug(
        "Calculating results for %d students, %d subjects, %d mark entries",
        len(students),
        len(subjects),
        len(marks),
    )
    sorted_rules = sort_rules(grading_rules)
    index = index_marks(marks)
    results = [score_student(s, subjects, index, sorted_rules, attendance_config) for s in students]
    return rank_results(results)
