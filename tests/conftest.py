import os

# Point settings at SQLite before the app (and its engine) is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import studyhub.models  # noqa: F401
from studyhub.core.database import Base, get_db
from studyhub.main import app
from studyhub.models.course import Course
from studyhub.models.institution import Institution, Programme
from studyhub.models.material import Material, MaterialType, ModerationStatus
from studyhub.models.quiz import Quiz, QuizQuestion, QuizAttempt, QuestionType
from studyhub.models.user import User, UserRole

BASE_TIME = datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    emails = count(1)

    def _make(role=UserRole.student, onboarded=True, **fields):
        user = User(
            email=fields.pop("email", f"user{next(emails)}@example.com"),
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", "User"),
            role=role,
            onboarding_completed=onboarded,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def student(make_user):
    return make_user(UserRole.student)


@pytest.fixture
def instructor(make_user):
    return make_user(UserRole.instructor)


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.admin)


@pytest.fixture
def make_institution(db):
    def _make(name="Lagos Polytechnic", **fields):
        institution = Institution(name=name, **fields)
        db.add(institution)
        db.commit()
        db.refresh(institution)
        return institution

    return _make


@pytest.fixture
def make_programme(db):
    def _make(institution, name="Computer Science", **fields):
        programme = Programme(institution_id=institution.id, name=name, **fields)
        db.add(programme)
        db.commit()
        db.refresh(programme)
        return programme

    return _make


@pytest.fixture
def make_course(db):
    def _make(title="Data Structures", **fields):
        course = Course(title=title, **fields)
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make


@pytest.fixture
def make_material(db):
    minutes = count(0)

    def _make(uploader=None, title="Lecture notes", status=ModerationStatus.approved, **fields):
        # Distinct, increasing timestamps so "newest" ordering is deterministic
        created_at = fields.pop("created_at", BASE_TIME + timedelta(minutes=next(minutes)))
        material = Material(
            title=title,
            material_type=fields.pop("material_type", MaterialType.lecture_notes),
            moderation_status=status,
            uploaded_by_id=uploader.id if uploader else None,
            created_at=created_at,
            **fields,
        )
        db.add(material)
        db.commit()
        db.refresh(material)
        return material

    return _make


@pytest.fixture
def make_quiz(db):
    def _make(questions=(), status=ModerationStatus.approved, passing_score=70, **fields):
        quiz = Quiz(
            title=fields.pop("title", "Weekly quiz"),
            moderation_status=status,
            passing_score=passing_score,
            **fields,
        )
        db.add(quiz)
        db.flush()
        for position, (text, answer) in enumerate(questions, start=1):
            db.add(
                QuizQuestion(
                    quiz_id=quiz.id,
                    question=text,
                    question_type=QuestionType.mcq,
                    options=[answer, "Something else"],
                    correct_answer=answer,
                    order=position,
                )
            )
        db.commit()
        db.refresh(quiz)
        return quiz

    return _make


@pytest.fixture
def make_attempt(db):
    def _make(student, quiz=None, score=0, total=10, passed=False, completed_at=None):
        attempt = QuizAttempt(
            quiz_id=quiz.id if quiz else None,
            student_id=student.id,
            answers={},
            score=score,
            total_questions=total,
            passed=passed,
            completed_at=completed_at or datetime.now(timezone.utc),
        )
        db.add(attempt)
        db.commit()
        db.refresh(attempt)
        return attempt

    return _make
