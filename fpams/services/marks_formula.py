"""
Marks formula engine.

Pure mapping from a performance category and its raw inputs to a marks value.
No database access, no side effects other than a warning log for unknown
categories.

Raw inputs are plain dicts (the ``details`` JSON of an activity, or
``{"score": pct}`` for a teaching score). Count-style inputs treat a missing
or zero count as one entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)


class Category(str, Enum):
    TEACHING_SCORE = "TEACHING_SCORE"
    PROJECTS_GUIDED = "PROJECTS_GUIDED"
    ADMIN_ACTIVITIES = "ADMIN_ACTIVITIES"
    ACHIEVEMENTS = "ACHIEVEMENTS"
    COUNSELLING = "COUNSELLING"
    RESEARCH = "RESEARCH"
    EVENTS_ATTENDED = "EVENTS_ATTENDED"
    EVENTS_CONDUCTED = "EVENTS_CONDUCTED"
    PAPERS_PUBLISHED = "PAPERS_PUBLISHED"
    BOOKS_AUTHORED = "BOOKS_AUTHORED"
    PATENTS = "PATENTS"
    ARTICLES = "ARTICLES"
    STUDENT_ENRICHMENT = "STUDENT_ENRICHMENT"
    EXTERNAL_PRESENTATIONS = "EXTERNAL_PRESENTATIONS"
    COURSES_UNDERTAKEN = "COURSES_UNDERTAKEN"
    EXTRA_CURRICULAR = "EXTRA_CURRICULAR"


@dataclass(frozen=True)
class CategoryRule:
    name: str
    max_marks: float
    formula: str
    validator: str
    # marks shown on dashboards; only teaching differs from max_marks
    display_max: float | None = None


CATEGORY_RULES: dict[Category, CategoryRule] = {
    Category.TEACHING_SCORE: CategoryRule(
        "Teaching Subject Score", 80, "Pass Percentage x 80 / 100", "EXAM_CELL", display_max=320
    ),
    Category.PROJECTS_GUIDED: CategoryRule(
        "Projects Guided", 30, "1 Project=10, 2 Projects=20, 3+=30", "HOD"
    ),
    Category.ADMIN_ACTIVITIES: CategoryRule(
        "Administrative Activities", 30, "1=10, 2=20, 3+=30", "HOD"
    ),
    Category.ACHIEVEMENTS: CategoryRule(
        "Achievements & Awards", 10, "Only one entry considered", "HOD"
    ),
    Category.COUNSELLING: CategoryRule(
        "Counselling Activities", 30, "1=10, 2=20, 3+=30", "COUNSELLING_COORDINATOR"
    ),
    Category.RESEARCH: CategoryRule(
        "Research Projects", 50, "Per project marks", "RND_COORDINATOR"
    ),
    Category.EVENTS_ATTENDED: CategoryRule(
        "Events Attended",
        30,
        "Seminar=5, Guest Lecture=5, Workshop=5, FDP=10, Conference=10 (Max 30)",
        "IQAC",
    ),
    Category.EVENTS_CONDUCTED: CategoryRule(
        "Events Conducted",
        40,
        "Seminar=5, Guest Lecture=5, Workshop=10, FDP=15, Conference=15 (Max 40)",
        "IQAC",
    ),
    Category.PAPERS_PUBLISHED: CategoryRule(
        "Papers Published",
        60,
        "Conference National=10, Conference International=30, "
        "Journal National=10, Journal International=30",
        "RND_COORDINATOR",
    ),
    Category.BOOKS_AUTHORED: CategoryRule(
        "Books Authored", 20, "Partial=10, Authored=20", "RND_COORDINATOR"
    ),
    Category.PATENTS: CategoryRule(
        "Patents Filed", 20, "Filed=5, Granted=20", "RND_COORDINATOR"
    ),
    Category.ARTICLES: CategoryRule(
        "Articles Published", 10, "IF 1=5, IF 2+=10", "HOD"
    ),
    Category.STUDENT_ENRICHMENT: CategoryRule(
        "Student Enrichment Activities", 40, "1=10, 2=20, 3=30, 4+=40", "HOD"
    ),
    Category.EXTERNAL_PRESENTATIONS: CategoryRule(
        "External Presentations", 40, "1=10, 2=20, 3=30, 4+=40", "HOD"
    ),
    Category.COURSES_UNDERTAKEN: CategoryRule(
        "Courses Undertaken", 40, "Per course marks", "HOD"
    ),
    Category.EXTRA_CURRICULAR: CategoryRule(
        "Extra-Curricular Activities", 40, "1=10, 2=20, 3=30, 4+=40", "HOD"
    ),
}


def _num(raw: Mapping[str, Any], key: str) -> float:
    return raw.get(key) or 0


def _count(raw: Mapping[str, Any], key: str = "count") -> float:
    return raw.get(key) or 1


def _tiered_30(raw: Mapping[str, Any]) -> float:
    n = _count(raw)
    if n >= 3:
        return 30
    if n == 2:
        return 20
    return 10


def _tiered_40(raw: Mapping[str, Any]) -> float:
    n = _count(raw)
    if n >= 4:
        return 40
    if n == 3:
        return 30
    if n == 2:
        return 20
    return 10


def _teaching(raw: Mapping[str, Any]) -> float:
    score = raw.get("score")
    return score * 80 / 100 if score else 0


def _events(weights: tuple[int, int, int, int, int], cap: float) -> Callable[[Mapping[str, Any]], float]:
    keys = ("seminars", "guest_lectures", "workshops", "fdp", "conferences")

    def formula(raw: Mapping[str, Any]) -> float:
        total = sum(_num(raw, key) * weight for key, weight in zip(keys, weights))
        return min(total, cap)

    return formula


def _papers(raw: Mapping[str, Any]) -> float:
    # not clamped to the nominal 60: the sum is kept as-is
    return (
        _num(raw, "conf_national") * 10
        + _num(raw, "conf_international") * 30
        + _num(raw, "journal_national") * 10
        + _num(raw, "journal_international") * 30
    )


_FORMULAS: dict[Category, Callable[[Mapping[str, Any]], float]] = {
    Category.TEACHING_SCORE: _teaching,
    Category.PROJECTS_GUIDED: _tiered_30,
    Category.ADMIN_ACTIVITIES: _tiered_30,
    Category.COUNSELLING: _tiered_30,
    Category.ACHIEVEMENTS: lambda raw: 10,
    Category.RESEARCH: lambda raw: _num(raw, "marks"),
    Category.EVENTS_ATTENDED: _events((5, 5, 5, 10, 10), 30),
    Category.EVENTS_CONDUCTED: _events((5, 5, 10, 15, 15), 40),
    Category.PAPERS_PUBLISHED: _papers,
    Category.BOOKS_AUTHORED: lambda raw: 20 if raw.get("is_authored") else 10,
    Category.PATENTS: lambda raw: 20 if raw.get("is_granted") else 5,
    Category.ARTICLES: lambda raw: 10 if _count(raw, "impact_factor_count") >= 2 else 5,
    Category.STUDENT_ENRICHMENT: _tiered_40,
    Category.EXTERNAL_PRESENTATIONS: _tiered_40,
    Category.EXTRA_CURRICULAR: _tiered_40,
    Category.COURSES_UNDERTAKEN: lambda raw: min(_count(raw) * 10, 40),
}

def check_exhaustive(formulas: Mapping[Category, Any], rules: Mapping[Category, Any]) -> None:
    """Every Category must carry a formula and a rule; runs at import."""
    if set(formulas) != set(Category):
        raise RuntimeError(f"Categories without a formula: {set(Category) - set(formulas)}")
    if set(rules) != set(Category):
        raise RuntimeError(f"Categories without a rule: {set(Category) - set(rules)}")


check_exhaustive(_FORMULAS, CATEGORY_RULES)


def parse_category(category: str | Category) -> Category | None:
    if isinstance(category, Category):
        return category
    try:
        return Category(category)
    except ValueError:
        return None


def has_formula(category: str | Category) -> bool:
    return parse_category(category) is not None


def max_marks(category: str | Category) -> float | None:
    parsed = parse_category(category)
    return CATEGORY_RULES[parsed].max_marks if parsed is not None else None


def compute_marks(category: str | Category, raw: Mapping[str, Any] | None = None) -> float:
    """
    Compute marks for ``category`` from its raw inputs.

    Unknown categories return 0 and log a warning; use ``has_formula`` to tell
    "no formula" apart from a genuine zero.
    """
    parsed = parse_category(category)
    if parsed is None:
        logger.warning(f"No marks formula for category {category!r}; scoring as 0")
        return 0
    return _FORMULAS[parsed](raw or {})
