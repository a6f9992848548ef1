# fpams/services/analytics_service.py
from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from fpams.models.activity import Activity
from fpams.models.department import Department
from fpams.models.enums import Role, SubmissionStatus
from fpams.models.feedback import Feedback
from fpams.models.teaching_score import TeachingScore
from fpams.models.user import User
from fpams.schemas.analytics import (
    AggregateResult,
    DepartmentAnalytics,
    DepartmentReport,
    FacultyReport,
    IqacReport,
    YearTrend,
)

APPROVED = SubmissionStatus.APPROVED.value


def _round2(value: float) -> float:
    return round(value * 100) / 100


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0


def aggregate(
    db: Session,
    *,
    department_id: Optional[int] = None,
    faculty_id: Optional[int] = None,
    academic_year: Optional[str] = None,
) -> AggregateResult:
    """
    Sum approved marks (activities + teaching scores) of non-deleted faculty
    in scope, and average the feedback those faculty received.

    An empty scope gives zeros.
    """
    total_marks = 0.0
    counts = 0

    for model in (Activity, TeachingScore):
        query = (
            db.query(func.count(model.id), func.coalesce(func.sum(model.marks), 0))
            .join(User, User.id == model.faculty_id)
            .filter(
                model.status == APPROVED,
                model.is_deleted.is_(False),
                User.is_deleted.is_(False),
            )
        )
        if department_id is not None:
            query = query.filter(User.department_id == department_id)
        if faculty_id is not None:
            query = query.filter(model.faculty_id == faculty_id)
        if academic_year:
            query = query.filter(model.academic_year == academic_year)

        count, marks = query.one()
        counts += count or 0
        total_marks += float(marks or 0)

    feedback_query = (
        db.query(func.avg(Feedback.rating))
        .join(User, User.id == Feedback.faculty_id)
        .filter(User.is_deleted.is_(False))
    )
    if department_id is not None:
        feedback_query = feedback_query.filter(User.department_id == department_id)
    if faculty_id is not None:
        feedback_query = feedback_query.filter(Feedback.faculty_id == faculty_id)
    avg_feedback = feedback_query.scalar()

    return AggregateResult(
        total_marks=_round2(total_marks),
        avg_feedback=_round2(float(avg_feedback or 0)),
        counts=counts,
    )


def _active_faculty(db: Session) -> List[User]:
    return (
        db.query(User)
        .filter(User.role == Role.FACULTY.value, User.is_deleted.is_(False))
        .order_by(User.id)
        .all()
    )


def _approved_by_faculty(db: Session, model, faculty_ids: List[int]) -> Dict[int, list]:
    grouped: Dict[int, list] = defaultdict(list)
    if not faculty_ids:
        return grouped
    rows = (
        db.query(model)
        .filter(
            model.faculty_id.in_(faculty_ids),
            model.status == APPROVED,
            model.is_deleted.is_(False),
        )
        .all()
    )
    for row in rows:
        grouped[row.faculty_id].append(row)
    return grouped


def _ratings_by_faculty(db: Session, faculty_ids: List[int]) -> Dict[int, List[int]]:
    grouped: Dict[int, List[int]] = defaultdict(list)
    if not faculty_ids:
        return grouped
    for faculty_id, rating in (
        db.query(Feedback.faculty_id, Feedback.rating)
        .filter(Feedback.faculty_id.in_(faculty_ids))
        .all()
    ):
        grouped[faculty_id].append(rating)
    return grouped


def department_analytics(db: Session) -> List[DepartmentAnalytics]:
    """
    Principal dashboard: per department, the mean over faculty of each
    faculty's mean approved activity marks, and likewise for feedback.
    Faculty without a department are reported in an "Unassigned" bucket.
    """
    faculty = _active_faculty(db)
    ids = [f.id for f in faculty]
    activities = _approved_by_faculty(db, Activity, ids)
    ratings = _ratings_by_faculty(db, ids)

    by_department: Dict[Optional[int], List[User]] = defaultdict(list)
    for f in faculty:
        by_department[f.department_id].append(f)

    def compute(dept_id, name, code, users: List[User]) -> DepartmentAnalytics:
        total_activities = sum(len(activities[u.id]) for u in users)
        per_faculty_marks = []
        per_faculty_feedback = []
        for u in users:
            scored = [a.marks for a in activities[u.id] if a.marks is not None]
            per_faculty_marks.append(_mean(scored))
            per_faculty_feedback.append(_mean(ratings[u.id]))
        return DepartmentAnalytics(
            department_id=dept_id,
            department_name=name,
            department_code=code,
            total_faculty=len(users),
            total_activities=total_activities,
            approved_activities=total_activities,
            avg_marks=_round2(_mean(per_faculty_marks)),
            avg_feedback=_round2(_mean(per_faculty_feedback)),
        )

    analytics = [
        compute(dept.id, dept.name, dept.code, by_department.get(dept.id, []))
        for dept in db.query(Department).order_by(Department.id).all()
    ]
    if by_department.get(None):
        analytics.append(compute(None, "Unassigned", "N/A", by_department[None]))
    return analytics


def iqac_report(db: Session) -> IqacReport:
    """
    Quality-assurance report: per faculty totals and an overall score of
    activity marks + teaching marks + 2 x average feedback; per department
    the mean overall score; approved activity marks by academic year.
    """
    faculty = _active_faculty(db)
    ids = [f.id for f in faculty]
    activities = _approved_by_faculty(db, Activity, ids)
    teaching = _approved_by_faculty(db, TeachingScore, ids)
    ratings = _ratings_by_faculty(db, ids)

    departments = []
    for dept in db.query(Department).order_by(Department.id).all():
        rows = []
        for u in (f for f in faculty if f.department_id == dept.id):
            activity_marks = sum(a.marks or 0 for a in activities[u.id])
            teaching_marks = sum(t.marks or 0 for t in teaching[u.id])
            avg_feedback = _round2(_mean(ratings[u.id]))
            rows.append(
                FacultyReport(
                    faculty_id=u.id,
                    name=u.name,
                    email=u.email,
                    total_activities=len(activities[u.id]),
                    total_activity_marks=activity_marks,
                    total_teaching_marks=teaching_marks,
                    avg_feedback=avg_feedback,
                    overall_score=_round2(activity_marks + teaching_marks + avg_feedback * 2),
                )
            )
        departments.append(
            DepartmentReport(
                department=dept.name,
                code=dept.code,
                faculty=rows,
                avg_department_score=_round2(_mean([r.overall_score for r in rows])),
            )
        )

    trends: Dict[str, YearTrend] = {}
    year_rows = (
        db.query(Activity.academic_year, Activity.marks)
        .join(User, User.id == Activity.faculty_id)
        .filter(
            Activity.status == APPROVED,
            Activity.is_deleted.is_(False),
            User.is_deleted.is_(False),
        )
        .all()
    )
    for year, marks in year_rows:
        trend = trends.setdefault(year, YearTrend())
        trend.count += 1
        trend.total_marks += marks or 0

    return IqacReport(departments=departments, year_wise_trends=trends)
