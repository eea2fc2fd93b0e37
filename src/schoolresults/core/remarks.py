from __future__ import annotations

from typing import Sequence

from schoolresults.core.models import StudentResult


def student_remark(result: StudentResult) -> str:
    p = result.percentage
    first_name = result.student.name.split(" ")[0] if result.student.name else ""

    if p >= 95:
        return f"Outstanding achievement, {first_name}! Your hard work is truly inspiring."
    if p >= 90:
        return f"Excellent performance, {first_name}. Keep aiming high!"
    if p >= 85:
        return "Very good results. You are showing great potential."
    if p >= 75:
        return f"Good job, {first_name}. Consistent effort will take you further."
    if p >= 65:
        return "Satisfactory progress. Focus on your weaker subjects to improve."
    if p >= 50:
        return "You passed, but there is significant room for improvement."
    if p >= 40:
        return "Borderline performance. Extra attention is required in class."
    return "Below expectations. Please meet the class teacher for remedial planning."


def class_performance_summary(results: Sequence[StudentResult], pass_mark: float = 40.0) -> str:
    if not results:
        return "No data available for analysis."

    avg = sum(r.percentage for r in results) / len(results)
    pass_count = sum(1 for r in results if r.percentage >= pass_mark)
    pass_rate = (pass_count / len(results)) * 100

    if avg >= 80:
        trend = "The class is performing exceptionally well."
        suggestion = "Encourage advanced topics to keep students engaged."
    elif avg >= 60:
        trend = "The class performance is steady."
        suggestion = "Focus on moving average students to the top tier."
    else:
        trend = "The class average is concerning."
        suggestion = "Immediate remedial classes are recommended for core subjects."

    return (
        f"Class Size: {len(results)} | Average: {avg:.1f}% | Pass Rate: {pass_rate:.1f}%. "
        f"{trend} {suggestion}"
    )
