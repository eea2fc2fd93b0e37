from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Union

ATTENDANCE_SUBJECT_ID = "term-attendance"
DEFAULT_GRADE = "F"


@dataclass(frozen=True)
class TotalScore:
    value: float = 0.0

    @property
    def total(self) -> float:
        return self.value


@dataclass(frozen=True)
class SplitScore:
    theory: float = 0.0
    practical: float = 0.0

    @property
    def total(self) -> float:
        return self.theory + self.practical


Score = Union[TotalScore, SplitScore]


@dataclass(frozen=True)
class ComponentSplit:
    theory_max: float
    practical_max: float


@dataclass(frozen=True)
class Subject:
    id: str
    name: str
    total_marks: Optional[float] = None
    split: Optional[ComponentSplit] = None
    teacher_name: Optional[str] = None

    @property
    def max_marks(self) -> float:
        if self.total_marks is not None:
            return self.total_marks
        if self.split is not None:
            return self.split.theory_max + self.split.practical_max
        return 0.0

    @property
    def is_attendance(self) -> bool:
        return self.id == ATTENDANCE_SUBJECT_ID


@dataclass(frozen=True)
class Student:
    id: str
    name: str
    roll_number: Optional[str] = None
    campus: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    parent_phone: Optional[str] = None
    session_id: Optional[str] = None
    # Legacy stored attendance, superseded by AttendanceConfig
    attendance_present: Optional[float] = None
    attendance_total: Optional[float] = None
    attendance_percentage: Optional[float] = None


@dataclass(frozen=True)
class MarkEntry:
    student_id: str
    subject_id: str
    exam_term_id: str
    obtained_marks: Optional[float] = None
    theory_marks: Optional[float] = None
    practical_marks: Optional[float] = None
    session_id: Optional[str] = None

    @property
    def is_split(self) -> bool:
        return self.theory_marks is not None or self.practical_marks is not None

    def score(self) -> Score:
        if self.is_split:
            return SplitScore(self.theory_marks or 0.0, self.practical_marks or 0.0)
        return TotalScore(self.obtained_marks or 0.0)


@dataclass(frozen=True)
class GradingRule:
    label: str
    min_percentage: float


@dataclass(frozen=True)
class StudentAttendance:
    present: Optional[float] = None
    absent: Optional[float] = None
    percentage: Optional[float] = None


@dataclass(frozen=True)
class AttendanceConfig:
    total_days: float
    students: Mapping[str, StudentAttendance] = field(default_factory=dict)


@dataclass(frozen=True)
class AttendanceSummary:
    present: float
    total: float
    percentage: float


@dataclass(frozen=True)
class StudentResult:
    student: Student
    marks: Dict[str, Score]
    total_obtained: float
    total_max: float
    percentage: float
    grade: str
    rank: int = 0
    position_suffix: str = ""
    attendance: Optional[AttendanceSummary] = None
