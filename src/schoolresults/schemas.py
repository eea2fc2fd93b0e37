"""
Validation models for the camelCase JSON the presentation layer produces.

Input models convert to the core dataclasses with ``to_domain()``; output
models render a StudentResult back into the same JSON shape.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from schoolresults.core.models import (
    AttendanceConfig,
    AttendanceSummary,
    ComponentSplit,
    GradingRule,
    MarkEntry,
    SplitScore,
    Student,
    StudentAttendance,
    StudentResult,
    Subject,
    TotalScore,
)


class PayloadError(Exception):
    pass


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StudentPayload(_Payload):
    id: str = Field(..., min_length=1)
    name: str = ""
    roll_number: Optional[str] = None
    campus: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    parent_phone: Optional[str] = None
    session_id: Optional[str] = None
    attendance_present: Optional[float] = Field(None, allow_inf_nan=False)
    attendance_total: Optional[float] = Field(None, allow_inf_nan=False)
    attendance_percentage: Optional[float] = Field(None, allow_inf_nan=False)

    def to_domain(self) -> Student:
        return Student(**self.model_dump())

    @classmethod
    def from_domain(cls, student: Student) -> "StudentPayload":
        return cls(**{name: getattr(student, name) for name in cls.model_fields})


class SubjectPayload(_Payload):
    id: str = Field(..., min_length=1)
    name: str = ""
    total_marks: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    theory_max: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    practical_max: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    teacher_name: Optional[str] = None

    def to_domain(self) -> Subject:
        split = None
        if self.theory_max is not None or self.practical_max is not None:
            split = ComponentSplit(self.theory_max or 0.0, self.practical_max or 0.0)
        return Subject(
            id=self.id,
            name=self.name,
            total_marks=self.total_marks,
            split=split,
            teacher_name=self.teacher_name,
        )


class MarkEntryPayload(_Payload):
    student_id: str = Field(..., min_length=1)
    subject_id: str = Field(..., min_length=1)
    exam_term_id: str
    obtained_marks: Optional[float] = Field(None, allow_inf_nan=False)
    theory_marks: Optional[float] = Field(None, allow_inf_nan=False)
    practical_marks: Optional[float] = Field(None, allow_inf_nan=False)
    session_id: Optional[str] = None

    def to_domain(self) -> MarkEntry:
        return MarkEntry(**self.model_dump())


class GradingRulePayload(_Payload):
    label: str = Field(..., min_length=1)
    min_percentage: float = Field(..., allow_inf_nan=False)

    def to_domain(self) -> GradingRule:
        return GradingRule(label=self.label, min_percentage=self.min_percentage)


class StudentAttendancePayload(_Payload):
    present: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    absent: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    percentage: Optional[float] = Field(None, allow_inf_nan=False)

    def to_domain(self) -> StudentAttendance:
        return StudentAttendance(present=self.present, absent=self.absent, percentage=self.percentage)


class AttendanceConfigPayload(_Payload):
    total_days: float = Field(..., ge=0, allow_inf_nan=False)
    students: Dict[str, StudentAttendancePayload] = Field(default_factory=dict)

    def to_domain(self) -> AttendanceConfig:
        return AttendanceConfig(
            total_days=self.total_days,
            students={sid: entry.to_domain() for sid, entry in self.students.items()},
        )


class ResultRequest(_Payload):
    students: List[StudentPayload] = Field(default_factory=list)
    subjects: List[SubjectPayload] = Field(default_factory=list)
    marks: List[MarkEntryPayload] = Field(default_factory=list)
    grading_rules: List[GradingRulePayload] = Field(default_factory=list)
    attendance_config: Optional[AttendanceConfigPayload] = None

    @model_validator(mode="after")
    def check_unique_students(self) -> "ResultRequest":
        seen = set()
        for student in self.students:
            if student.id in seen:
                raise ValueError(f"Duplicate student id: {student.id}")
            seen.add(student.id)
        return self

    def domain_students(self) -> List[Student]:
        return [s.to_domain() for s in self.students]

    def domain_subjects(self) -> List[Subject]:
        return [s.to_domain() for s in self.subjects]

    def domain_marks(self) -> List[MarkEntry]:
        return [m.to_domain() for m in self.marks]

    def domain_rules(self) -> List[GradingRule]:
        return [r.to_domain() for r in self.grading_rules]

    def domain_attendance(self) -> Optional[AttendanceConfig]:
        return self.attendance_config.to_domain() if self.attendance_config is not None else None


class SplitScorePayload(_Payload):
    theory: float
    practical: float


class AttendanceSummaryPayload(_Payload):
    present: float
    total: float
    percentage: float

    @classmethod
    def from_domain(cls, summary: AttendanceSummary) -> "AttendanceSummaryPayload":
        return cls(present=summary.present, total=summary.total, percentage=summary.percentage)


class StudentResultPayload(_Payload):
    student: StudentPayload
    marks: Dict[str, Union[SplitScorePayload, float]]
    total_obtained: float
    total_max: float
    percentage: float
    grade: str
    rank: int
    position_suffix: str
    attendance: Optional[AttendanceSummaryPayload] = None

    @classmethod
    def from_domain(cls, result: StudentResult) -> "StudentResultPayload":
        marks: Dict[str, Union[SplitScorePayload, float]] = {}
        for subject_id, score in result.marks.items():
            if isinstance(score, SplitScore):
                marks[subject_id] = SplitScorePayload(theory=score.theory, practical=score.practical)
            elif isinstance(score, TotalScore):
                marks[subject_id] = score.value
        attendance = None
        if result.attendance is not None:
            attendance = AttendanceSummaryPayload.from_domain(result.attendance)
        return cls(
            student=StudentPayload.from_domain(result.student),
            marks=marks,
            total_obtained=result.total_obtained,
            total_max=result.total_max,
            percentage=result.percentage,
            grade=result.grade,
            rank=result.rank,
            position_suffix=result.position_suffix,
            attendance=attendance,
        )


def load_request(data: Any) -> ResultRequest:
    try:
        return ResultRequest.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'request'}: {err['msg']}" for err in exc.errors()
        )
        raise PayloadError(f"Invalid result request: {problems}") from exc


def dump_result(result: StudentResult) -> Dict[str, Any]:
    return StudentResultPayload.from_domain(result).model_dump(by_alias=True, exclude_none=True)
