import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.deps import get_db
from app.core.security import create_access_token, hash_password
from app.db.base import Base
from app.main import app
from app.models.assignment import Assignment
from app.models.calculated_penalty import CalculatedPenalty
from app.models.late_policy import LatePolicy
from app.models.submission import Submission
from app.models.user import User

TEST_DB_FILE = "test_late_policies.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# bcrypt is slow on purpose; hash the shared test password once
PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def users():
    """Seed a clean set of users for each test and return their ids by role."""
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        db.query(CalculatedPenalty).delete()
        db.query(Submission).delete()
        db.query(Assignment).delete()
        db.query(LatePolicy).delete()
        db.query(User).delete()
        db.commit()

        instructor = User(email="instructor1@example.com", full_name="Instructor One", role="instructor",
                          hashed_password=PASSWORD_HASH)
        other_instructor = User(email="instructor2@example.com", full_name="Instructor Two", role="instructor",
                                hashed_password=PASSWORD_HASH)
        admin = User(email="admin@example.com", full_name="Admin", role="admin", hashed_password=PASSWORD_HASH)
        db.add_all([instructor, other_instructor, admin])
        db.commit()

        ta = User(email="ta1@example.com", full_name="TA One", role="ta", parent_id=instructor.id,
                  hashed_password=PASSWORD_HASH)
        student = User(email="student1@example.com", full_name="Student One", role="student",
                       parent_id=instructor.id, hashed_password=PASSWORD_HASH)
        db.add_all([ta, student])
        db.commit()

        ids = {
            "instructor": instructor.id,
            "other_instructor": other_instructor.id,
            "admin": admin.id,
            "ta": ta.id,
            "student": student.id,
        }
        yield ids
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_policy(db):
    def _make(instructor_id, policy_name="Standard", penalty_per_unit=5, penalty_unit="Day",
              max_penalty=50, private=True):
        policy = LatePolicy(
            policy_name=policy_name,
            penalty_per_unit=penalty_per_unit,
            penalty_unit=penalty_unit,
            max_penalty=max_penalty,
            instructor_id=instructor_id,
            private=private,
        )
        db.add(policy)
        db.commit()
        db.refresh(policy)
        return policy

    return _make


@pytest.fixture()
def auth_headers(users):
    """Bearer headers per seeded role, e.g. auth_headers["ta"]."""
    return {
        role: {"Authorization": f"Bearer {create_access_token({'sub': str(user_id)})}"}
        for role, user_id in users.items()
    }


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
