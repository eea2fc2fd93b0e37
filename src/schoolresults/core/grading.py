from __future__ import annotations

import math
from typing import Iterable, Sequence

from schoolresults.core.models import DEFAULT_GRADE, GradingRule


def sort_rules(rules: Iterable[GradingRule]) -> list[GradingRule]:
    """Return a new list of rules ordered by descending minimum percentage."""
    return sorted(rules, key=lambda rule: rule.min_percentage, reverse=True)


def grade_for_percentage(percentage: float, sorted_rules: Sequence[GradingRule]) -> str:
    """Label of the first rule whose threshold is met; ``sorted_rules`` must come from ``sort_rules``."""
    for rule in sorted_rules:
        if percentage >= rule.min_percentage:
            return rule.label
    return DEFAULT_GRADE


def calc_percentage(obtained: float, maximum: float) -> float:
    if maximum <= 0:
        return 0.0
    percentage = (obtained / maximum) * 100
    return percentage if math.isfinite(percentage) else 0.0


def ordinal_suffix(rank: int) -> str:
    if rank % 100 in (11, 12, 13):
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(rank % 10, "th")
