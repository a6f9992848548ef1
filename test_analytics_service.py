"""
Aggregations over approved submissions and student feedback, plus the audit
log listing that backs the admin views.
"""

import pytest

from fpams.models.enums import AuditAction, Role, SubmissionKind, ValidationAction
from fpams.models.feedback import Feedback
from fpams.schemas.activity import ActivityCreate
from fpams.schemas.teaching_score import TeachingScoreCreate
from fpams.schemas.validation import TransitionRequest
from fpams.services import analytics_service, audit_service, submission_service
from fpams.services.marks_formula import Category
from fpams.services.validation_service import validation_service


def approve(db, kind, submission, actor, **fields):
    return validation_service.transition(
        db,
        kind=kind,
        submission_id=submission.id,
        actor=actor,
        action=ValidationAction.APPROVE,
        payload=TransitionRequest(action=ValidationAction.APPROVE, **fields),
    )


def add_activity(db, owner, category, details=None, year="2024-25"):
    return submission_service.create_activity(
        db,
        faculty=owner,
        obj_in=ActivityCreate(category=category, title="Entry", academic_year=year, details=details or {}),
    )


@pytest.fixture
def populated(db_session, faculty, other_faculty, hod, hod_ece, principal, student, subject):
    """CSE faculty: 30 activity + 68 teaching, ratings 4 and 5. ECE faculty: 10 activity."""
    a1 = add_activity(db_session, faculty, Category.PROJECTS_GUIDED, {"count": 3})
    approve(db_session, SubmissionKind.ACTIVITY, a1, hod)
    add_activity(db_session, faculty, Category.ACHIEVEMENTS)  # stays pending

    ts = submission_service.create_teaching_score(
        db_session,
        faculty=faculty,
        obj_in=TeachingScoreCreate(subject_id=subject.id, academic_year="2024-25", score=85),
    )
    approve(db_session, SubmissionKind.TEACHING, ts, hod)

    a2 = add_activity(db_session, other_faculty, Category.ACHIEVEMENTS, year="2023-24")
    approve(db_session, SubmissionKind.ACTIVITY, a2, hod_ece)

    for rating in (4, 5):
        db_session.add(Feedback(student_id=student.id, faculty_id=faculty.id, rating=rating))
    db_session.commit()


class TestAggregate:

    def test_empty_scope_gives_zeros(self, db_session, cse):
        result = analytics_service.aggregate(db_session, department_id=cse.id)
        assert result.total_marks == 0
        assert result.avg_feedback == 0
        assert result.counts == 0

    def test_department_scope(self, db_session, populated, cse, ece):
        cse_result = analytics_service.aggregate(db_session, department_id=cse.id)
        assert cse_result.total_marks == 98
        assert cse_result.counts == 2
        assert cse_result.avg_feedback == 4.5

        ece_result = analytics_service.aggregate(db_session, department_id=ece.id)
        assert ece_result.total_marks == 10
        assert ece_result.avg_feedback == 0

    def test_year_filter(self, db_session, populated):
        result = analytics_service.aggregate(db_session, academic_year="2023-24")
        assert result.total_marks == 10
        assert result.counts == 1

    def test_deleted_faculty_excluded(self, db_session, populated, faculty):
        submission_service.soft_delete_user(db_session, user=faculty)
        result = analytics_service.aggregate(db_session)
        assert result.total_marks == 10
        assert result.avg_feedback == 0


class TestReports:

    def test_department_analytics(self, db_session, populated, make_user):
        make_user(Role.FACULTY, "visiting@college.edu")
        rows = {r.department_code: r for r in analytics_service.department_analytics(db_session)}

        assert rows["CSE"].total_faculty == 1
        assert rows["CSE"].approved_activities == 1
        assert rows["CSE"].avg_marks == 30
        assert rows["CSE"].avg_feedback == 4.5
        assert rows["ECE"].avg_marks == 10
        assert rows["N/A"].department_name == "Unassigned"
        assert rows["N/A"].total_faculty == 1

    def test_iqac_report(self, db_session, populated, faculty):
        report = analytics_service.iqac_report(db_session)
        cse = next(d for d in report.departments if d.code == "CSE")
        row = cse.faculty[0]

        assert row.faculty_id == faculty.id
        assert row.total_activity_marks == 30
        assert row.total_teaching_marks == 68
        assert row.overall_score == 30 + 68 + 4.5 * 2
        assert cse.avg_department_score == row.overall_score

        assert report.year_wise_trends["2024-25"].total_marks == 30
        assert report.year_wise_trends["2023-24"].count == 1


class TestAuditLog:

    def test_newest_first_with_actor_name(self, db_session, populated, hod):
        logs = audit_service.list_audit_logs(db_session)
        assert len(logs) == 3
        assert logs[0].id > logs[-1].id
        assert logs[-1].actor_name == hod.name

    def test_filters(self, db_session, populated):
        teaching = audit_service.list_audit_logs(db_session, target_type=SubmissionKind.TEACHING.value)
        assert len(teaching) == 1
        assert teaching[0].action_type == AuditAction.SCORE_APPROVE.value
        assert teaching[0].new_value["marks"] == 68

        assert audit_service.list_audit_logs(db_session, action_type=AuditAction.SCORE_LOCK.value) == []
        assert len(audit_service.list_audit_logs(db_session, limit=2)) == 2
