import logging
from typing import Any, Dict, List

from schoolresults.config.settings import settings
from schoolresults.core.analysis import (
    bottom_performers,
    grade_distribution,
    subject_averages,
    subject_grades,
    subject_highs,
    subject_pass_stats,
    summarize_class,
    top_performers,
)
from schoolresults.core.remarks import class_performance_summary, student_remark
from schoolresults.core.results import calculate_results
from schoolresults.core.models import StudentResult
from schoolresults.schemas import ResultRequest, dump_result, load_request

logger = logging.getLogger(__name__)


class ResultService:
    def __init__(self, performer_count: int = 5, pass_mark: float = 40.0) -> None:
        if performer_count < 0:
            raise ValueError("performer_count must not be negative")
        self.performer_count = performer_count
        self.pass_mark = pass_mark

    @classmethod
    def from_settings(cls) -> "ResultService":
        return cls(performer_count=settings.performer_count, pass_mark=settings.pass_mark)

    @staticmethod
    def _compute(request: ResultRequest) -> List[StudentResult]:
        return calculate_results(
            request.domain_students(),
            request.domain_subjects(),
            request.domain_marks(),
            request.domain_rules(),
            request.domain_attendance(),
        )

    def calculate(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        request = load_request(payload)
        results = self._compute(request)
        logger.info("Calculated %d results across %d subjects", len(results), len(request.subjects))
        return [dump_result(r) for r in results]

    def report(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        request = load_request(payload)
        results = self._compute(request)
        subjects = request.domain_subjects()
        rules = request.domain_rules()
        summary = summarize_class(results, rules)
        logger.info(
            "Built report for %d students: average %.1f%%, pass rate %.1f%%",
            summary.size,
            summary.average,
            summary.pass_rate,
        )

        return {
            "results": [
                {**dump_result(r), "remark": student_remark(r), "subjectGrades": subject_grades(r, subjects, rules)}
                for r in results
            ],
            "summary": {
                "size": summary.size,
                "average": summary.average,
                "passCount": summary.pass_count,
                "passRate": summary.pass_rate,
                "failLabel": summary.fail_label,
            },
            "analysis": class_performance_summary(results, pass_mark=self.pass_mark),
            "subjectHighs": subject_highs(results, subjects),
            "subjectStats": [
                {
                    "id": s.subject_id,
                    "passCount": s.pass_count,
                    "failCount": s.fail_count,
                    "passPct": s.pass_pct,
                    "failPct": s.fail_pct,
                }
                for s in subject_pass_stats(results, subjects, rules)
            ],
            "subjectAverages": [{"name": name, "avg": avg} for name, avg in subject_averages(results, subjects)],
            "gradeDistribution": [{"name": label, "value": count} for label, count in grade_distribution(results, rules)],
            "topPerformers": [r.student.id for r in top_performers(results, self.performer_count)],
            "bottomPerformers": [r.student.id for r in bottom_performers(results, self.performer_count)],
        }
