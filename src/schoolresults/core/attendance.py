from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from schoolresults.core.models import (
    AttendanceConfig,
    AttendanceSummary,
    MarkEntry,
    Student,
    StudentAttendance,
    StudentResult,
)


def round_half_up(value: float) -> int:
    # Non-finite values have no integer form
    if not math.isfinite(value):
        return 0
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def attendance_percentage(present: float, total: float) -> int:
    if total <= 0:
        return 0
    return round_half_up((present / total) * 100)


def _from_override(override: StudentAttendance, total: float) -> Optional[AttendanceSummary]:
    if override.present is not None:
        present = override.present
    elif override.absent is not None:
        present = max(total - override.absent, 0)
    elif override.percentage is not None:
        present = round_half_up(total * override.percentage / 100)
    else:
        return None

    if override.percentage is not None:
        percentage = override.percentage
    else:
        percentage = attendance_percentage(present, total)
    return AttendanceSummary(present=present, total=total, percentage=percentage)


def resolve_attendance(
    student: Student,
    config: Optional[AttendanceConfig],
    attendance_mark: Optional[MarkEntry] = None,
) -> Optional[AttendanceSummary]:
    """
    Attendance block for one student, or None when no config is given.

    Precedence: the per-student override in ``config.students``, then the
    student's ``term-attendance`` mark entry, then the stored legacy fields.
    The total is always ``config.total_days``.
    """
    if config is None:
        return None
    total = config.total_days

    override = config.students.get(student.id)
    if override is not None:
        summary = _from_override(override, total)
        if summary is not None:
            return summary

    if attendance_mark is not None:
        present = attendance_mark.score().total
        return AttendanceSummary(present=present, total=total, percentage=attendance_percentage(present, total))

    if student.attendance_present is not None:
        present = student.attendance_present
        return AttendanceSummary(present=present, total=total, percentage=attendance_percentage(present, total))

    return None


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def format_attendance(student: Student) -> str:
    if student.attendance_present is not None and student.attendance_total is not None:
        return f"{_fmt(student.attendance_present)}/{_fmt(student.attendance_total)}"
    return "N/A"


def format_result_attendance(result: StudentResult) -> str:
    if result.attendance is not None:
        return f"{_fmt(result.attendance.present)}/{_fmt(result.attendance.total)}"
    return format_attendance(result.student)
