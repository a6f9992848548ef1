"""
HTTP surface: auth, role routing, error rendering and notification enqueue.
"""

from fpams.models.enums import SubmissionKind, ValidationAction

API = "/api/v1"


def create_activity(client, headers, faculty, **overrides):
    body = {
        "category": "PROJECTS_GUIDED",
        "title": "Final year projects",
        "academic_year": "2024-25",
        "details": {"count": 3},
    }
    body.update(overrides)
    r = client.post(f"{API}/activities/", json=body, headers=headers(faculty))
    assert r.status_code == 201, r.text
    return r.json()


class TestAuth:

    def test_missing_token(self, client):
        r = client.get(f"{API}/users/me")
        assert r.status_code == 401
        assert r.json()["code"] == "AUTH_REQUIRED"

    def test_bad_token(self, client):
        r = client.get(f"{API}/users/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401

    def test_me(self, client, headers, faculty):
        r = client.get(f"{API}/users/me", headers=headers(faculty))
        assert r.status_code == 200
        assert r.json()["email"] == faculty.email
        assert r.json()["role"] == "FACULTY"

    def test_deleted_user_loses_access(self, client, headers, faculty, admin):
        r = client.delete(f"{API}/users/{faculty.id}", headers=headers(admin))
        assert r.status_code == 204
        r = client.get(f"{API}/users/me", headers=headers(faculty))
        assert r.status_code == 401

    def test_health(self, client):
        assert client.get(f"{API}/health/live").json() == {"status": "ok"}
        assert client.get(f"{API}/health/db").json() == {"status": "ok"}


class TestSubmissions:

    def test_create_and_list(self, client, headers, faculty):
        created = create_activity(client, headers, faculty)
        assert created["status"] == "PENDING"
        assert created["marks"] is None
        assert created["was_modified_after_approval"] is False

        r = client.get(f"{API}/activities/me", headers=headers(faculty))
        assert [a["id"] for a in r.json()] == [created["id"]]

    def test_unknown_category_rejected(self, client, headers, faculty):
        r = client.post(
            f"{API}/activities/",
            json={"category": "KNITTING", "title": "x", "academic_year": "2024-25"},
            headers=headers(faculty),
        )
        assert r.status_code == 422

    def test_negative_detail_counts_rejected(self, client, headers, faculty):
        r = client.post(
            f"{API}/activities/",
            json={
                "category": "EVENTS_ATTENDED",
                "title": "Seminars",
                "academic_year": "2024-25",
                "details": {"seminars": -10},
            },
            headers=headers(faculty),
        )
        assert r.status_code == 422

    def test_validator_cannot_create(self, client, headers, hod):
        r = client.post(
            f"{API}/activities/",
            json={"category": "ACHIEVEMENTS", "title": "x", "academic_year": "2024-25"},
            headers=headers(hod),
        )
        assert r.status_code == 403
        assert r.json() == {
            "error": "Forbidden",
            "code": "FORBIDDEN",
            "message": "Role HOD is not allowed here",
        }

    def test_view_scope(self, client, headers, faculty, other_faculty, hod, hod_ece):
        created = create_activity(client, headers, faculty)
        url = f"{API}/activities/{created['id']}"
        assert client.get(url, headers=headers(faculty)).status_code == 200
        assert client.get(url, headers=headers(hod)).status_code == 200
        assert client.get(url, headers=headers(hod_ece)).status_code == 403
        assert client.get(url, headers=headers(other_faculty)).status_code == 403

    def test_delete_then_missing(self, client, headers, faculty):
        created = create_activity(client, headers, faculty)
        url = f"{API}/activities/{created['id']}"
        assert client.delete(url, headers=headers(faculty)).status_code == 204
        r = client.get(url, headers=headers(faculty))
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"

    def test_teaching_score_routes(self, client, headers, faculty, subject):
        r = client.post(
            f"{API}/teaching-scores/",
            json={"subject_id": subject.id, "academic_year": "2024-25", "score": 92.5},
            headers=headers(faculty),
        )
        assert r.status_code == 201
        score_id = r.json()["id"]

        r = client.put(f"{API}/teaching-scores/{score_id}", json={"score": 95}, headers=headers(faculty))
        assert r.json()["score"] == 95


class TestValidations:

    def test_teaching_flow_over_http(
        self, client, headers, enqueued, faculty, subject, exam_cell, hod, principal
    ):
        r = client.post(
            f"{API}/teaching-scores/",
            json={"subject_id": subject.id, "academic_year": "2024-25", "score": 85},
            headers=headers(faculty),
        )
        score_id = r.json()["id"]
        url = f"{API}/validations/teaching/{score_id}"

        r = client.post(url, json={"action": "VERIFY"}, headers=headers(exam_cell))
        assert r.status_code == 200, r.text
        assert r.json()["status"] == "UNDER_REVIEW"

        r = client.post(url, json={"action": "APPROVE"}, headers=headers(hod))
        assert r.json()["marks"] == 68

        assert client.post(url, json={"action": "LOCK"}, headers=headers(principal)).status_code == 200

        r = client.post(url, json={"action": "REVALIDATE", "reason": "Recount", "marks": 60}, headers=headers(hod))
        assert r.status_code == 423
        assert r.json()["code"] == "LOCKED"

        r = client.post(url, json={"action": "OVERRIDE", "marks": 70}, headers=headers(principal))
        assert r.json()["marks"] == 70
        assert r.json()["was_modified_after_approval"] is True

        assert enqueued == [
            ("teaching", score_id, ValidationAction.VERIFY.value),
            ("teaching", score_id, ValidationAction.APPROVE.value),
            ("teaching", score_id, ValidationAction.LOCK.value),
            ("teaching", score_id, ValidationAction.OVERRIDE.value),
        ]

        r = client.get(f"{API}/audit-logs/", params={"target_id": score_id}, headers=headers(principal))
        assert [e["action_type"] for e in r.json()] == [
            "SCORE_OVERRIDE",
            "SCORE_LOCK",
            "SCORE_APPROVE",
            "SCORE_VERIFY",
        ]
        assert r.json()[0]["actor_name"] == principal.name

    def test_error_codes(self, client, headers, faculty, hod):
        created = create_activity(client, headers, faculty)
        url = f"{API}/validations/activity/{created['id']}"

        r = client.post(url, json={"action": "REVALIDATE", "reason": "x"}, headers=headers(hod))
        assert r.status_code == 409
        assert r.json()["code"] == "INVALID_STATE"

        r = client.post(url, json={"action": "APPROVE", "marks": 45}, headers=headers(hod))
        assert r.status_code == 400
        assert r.json()["code"] == "VALIDATION_ERROR"

        r = client.post(f"{API}/validations/activity/9999", json={"action": "APPROVE"}, headers=headers(hod))
        assert r.status_code == 404

    def test_enqueue_failure_does_not_undo_transition(self, client, headers, faculty, hod, monkeypatch):
        from redis.exceptions import ConnectionError

        def broken(*args):
            raise ConnectionError("redis down")

        monkeypatch.setattr("fpams.workers.queue.enqueue_notification_task", broken)
        created = create_activity(client, headers, faculty)
        r = client.post(
            f"{API}/validations/activity/{created['id']}", json={"action": "APPROVE"}, headers=headers(hod)
        )
        assert r.status_code == 200
        assert r.json()["status"] == "APPROVED"

    def test_queue(self, client, headers, faculty, hod, exam_cell):
        created = create_activity(client, headers, faculty)
        r = client.get(f"{API}/validations/activity", params={"status": "PENDING"}, headers=headers(hod))
        assert [a["id"] for a in r.json()] == [created["id"]]
        assert client.get(f"{API}/validations/activity", headers=headers(exam_cell)).status_code == 403
        assert client.get(f"{API}/validations/activity", headers=headers(faculty)).status_code == 403

    def test_audit_logs_restricted(self, client, headers, hod, admin):
        assert client.get(f"{API}/audit-logs/", headers=headers(hod)).status_code == 403
        assert client.get(f"{API}/audit-logs/", headers=headers(admin)).status_code == 200


class TestAnalyticsAndExtras:

    def test_hod_aggregate_pinned_to_department(self, client, headers, faculty, other_faculty, hod, hod_ece, ece):
        created = create_activity(client, headers, other_faculty, category="ACHIEVEMENTS")
        client.post(
            f"{API}/validations/{SubmissionKind.ACTIVITY.value}/{created['id']}",
            json={"action": "APPROVE"},
            headers=headers(hod_ece),
        )
        r = client.get(f"{API}/analytics/aggregate", params={"department_id": ece.id}, headers=headers(hod))
        assert r.json() == {"total_marks": 0, "avg_feedback": 0, "counts": 0}

        r = client.get(f"{API}/analytics/aggregate", headers=headers(hod_ece))
        assert r.json()["total_marks"] == 10

    def test_report_roles(self, client, headers, principal, iqac, hod):
        assert client.get(f"{API}/analytics/departments", headers=headers(principal)).status_code == 200
        assert client.get(f"{API}/analytics/departments", headers=headers(iqac)).status_code == 403
        assert client.get(f"{API}/analytics/iqac-report", headers=headers(iqac)).status_code == 200
        assert client.get(f"{API}/analytics/iqac-report", headers=headers(hod)).status_code == 403

    def test_categories_and_preview(self, client, headers, faculty):
        r = client.get(f"{API}/categories/", headers=headers(faculty))
        teaching = next(c for c in r.json() if c["code"] == "TEACHING_SCORE")
        assert teaching["max_marks"] == 80
        assert teaching["display_max"] == 320

        r = client.post(
            f"{API}/categories/preview",
            json={"category": "EVENTS_CONDUCTED", "details": {"fdp": 2, "workshops": 1}},
            headers=headers(faculty),
        )
        assert r.json() == {"category": "EVENTS_CONDUCTED", "marks": 40, "max_marks": 40, "has_formula": True}

        r = client.post(f"{API}/categories/preview", json={"category": "NOPE"}, headers=headers(faculty))
        assert r.json()["has_formula"] is False
        assert r.json()["marks"] == 0

    def test_feedback(self, client, headers, student, faculty, hod):
        r = client.post(f"{API}/feedback/", json={"faculty_id": faculty.id, "rating": 5}, headers=headers(student))
        assert r.status_code == 201
        r = client.post(f"{API}/feedback/", json={"faculty_id": hod.id, "rating": 5}, headers=headers(student))
        assert r.status_code == 404
        r = client.post(f"{API}/feedback/", json={"faculty_id": faculty.id, "rating": 5}, headers=headers(faculty))
        assert r.status_code == 403

    def test_notifications(self, client, headers, db_session, faculty):
        from fpams.models.notification import Notification

        db_session.add(Notification(user_id=faculty.id, title="Submission approved", message="ok", read=False))
        db_session.commit()

        r = client.get(f"{API}/notifications/", headers=headers(faculty))
        assert len(r.json()) == 1
        r = client.patch(f"{API}/notifications/", json={"mark_all": True}, headers=headers(faculty))
        assert r.json() == {"updated": 1}
