"""
Shared fixtures: an in-memory SQLite database, a small institution
(two departments, one of each validator role) and an API client.
"""

import os

# Point the app at SQLite before fpams.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fpams import models  # noqa
from fpams.core.security import create_access_token
from fpams.db.base import Base
from fpams.db.session import get_db
from fpams.models.department import Department
from fpams.models.enums import Role
from fpams.models.subject import Subject
from fpams.models.user import User

# Test database (in-memory SQLite, one connection shared across threads)
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def db_session():
    """Create a test database session."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


def _add(db, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def cse(db_session):
    return _add(db_session, Department(name="Computer Science", code="CSE"))


@pytest.fixture
def ece(db_session):
    return _add(db_session, Department(name="Electronics", code="ECE"))


@pytest.fixture
def make_user(db_session):
    def factory(role: Role, email: str, department=None, name=None):
        return _add(
            db_session,
            User(
                email=email,
                name=name or email.split("@")[0].replace(".", " ").title(),
                role=role.value,
                department_id=department.id if department is not None else None,
            ),
        )

    return factory


@pytest.fixture
def faculty(make_user, cse):
    return make_user(Role.FACULTY, "asha.rao@college.edu", cse)


@pytest.fixture
def other_faculty(make_user, ece):
    return make_user(Role.FACULTY, "vikram.iyer@college.edu", ece)


@pytest.fixture
def hod(make_user, cse):
    return make_user(Role.HOD, "hod.cse@college.edu", cse)


@pytest.fixture
def hod_ece(make_user, ece):
    return make_user(Role.HOD, "hod.ece@college.edu", ece)


@pytest.fixture
def principal(make_user):
    return make_user(Role.PRINCIPAL, "principal@college.edu")


@pytest.fixture
def exam_cell(make_user):
    return make_user(Role.EXAM_CELL, "exam.cell@college.edu")


@pytest.fixture
def counselling_coordinator(make_user, ece):
    return make_user(Role.COUNSELLING_COORDINATOR, "counselling@college.edu", ece)


@pytest.fixture
def rnd_coordinator(make_user, ece):
    return make_user(Role.RND_COORDINATOR, "research@college.edu", ece)


@pytest.fixture
def iqac(make_user):
    return make_user(Role.IQAC, "iqac@college.edu")


@pytest.fixture
def admin(make_user):
    return make_user(Role.SUPER_ADMIN, "admin@college.edu")


@pytest.fixture
def student(make_user, cse):
    return make_user(Role.STUDENT, "student.one@college.edu", cse)


@pytest.fixture
def subject(db_session, cse):
    return _add(db_session, Subject(name="Data Structures", code="CS201", department_id=cse.id))


@pytest.fixture
def enqueued(monkeypatch):
    """Capture notification jobs instead of talking to Redis."""
    calls = []

    def fake_enqueue(kind, submission_id, action):
        calls.append((kind, submission_id, action))
        return f"job-{len(calls)}"

    monkeypatch.setattr("fpams.workers.queue.enqueue_notification_task", fake_enqueue)
    return calls


@pytest.fixture
def client(db_session, enqueued):
    from fpams.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    token = create_access_token({"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth_headers
