"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client (database and storage overridden)
- Users for every role and their auth headers
- Reference data and a job factory
"""

import os

# Point the application engine at SQLite before any app module is imported
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite:///:memory:")
os.environ.setdefault("JSON_LOGS", "false")

from datetime import date, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.core.storage import LocalStorage, get_storage
from app.crud import job as job_crud
from app.crud import user as user_crud
from app.models.lookups import (
    EmploymentContractType,
    JobApplicationStatus,
    JobCategory,
    Location,
    SalaryType,
)
from app.models.user import UserRole
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "SecurePass123"


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage(tmp_path):
    """Local storage rooted in a per-test temporary directory."""
    return LocalStorage(str(tmp_path / "uploads"))


@pytest.fixture
def client(db_session, storage):
    """
    FastAPI test client with overridden database and storage dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory: create an active user with the given role."""
    counter = {"n": 0}

    def _make_user(role: UserRole = UserRole.USER, email: str = None, is_active: bool = True):
        counter["n"] += 1
        user = user_crud.create(
            db_session,
            email=email or f"{role.value}{counter['n']}@example.com",
            password=TEST_PASSWORD,
            first_name="Test",
            last_name=role.value.title(),
            role=role,
        )
        if not is_active:
            user = user_crud.set_active(db_session, user, False)
        return user

    return _make_user


def headers_for(user) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    """Build Authorization headers for any user."""
    return headers_for


@pytest.fixture
def job_seeker(make_user):
    return make_user(UserRole.USER)


@pytest.fixture
def recruiter(make_user):
    return make_user(UserRole.RECRUITER)


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def user_headers(job_seeker):
    return headers_for(job_seeker)


@pytest.fixture
def recruiter_headers(recruiter):
    return headers_for(recruiter)


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture
def lookups(db_session):
    """Reference data: three locations, two categories, two of each type and three statuses."""
    def add(model, name, **extra):
        item = model(name=name, **extra)
        db_session.add(item)
        return item

    data = SimpleNamespace(
        london=add(Location, "London"),
        leeds=add(Location, "Leeds"),
        manchester=add(Location, "Manchester"),
        engineering=add(JobCategory, "Engineering", description="Software and hardware"),
        design=add(JobCategory, "Design"),
        annual=add(SalaryType, "Annual"),
        hourly=add(SalaryType, "Hourly"),
        permanent=add(EmploymentContractType, "Permanent"),
        contract=add(EmploymentContractType, "Contract"),
        submitted=add(JobApplicationStatus, "submitted"),
        withdrawn=add(JobApplicationStatus, "withdrawn"),
        shortlisted=add(JobApplicationStatus, "shortlisted"),
    )
    db_session.commit()
    return data


@pytest.fixture
def job_payload(lookups):
    """A valid job creation request body."""
    return {
        "title": "Senior Python Developer",
        "salary": "65000",
        "description": "Build and run the APIs behind our job board.",
        "deadline": (date.today() + timedelta(days=30)).isoformat(),
        "active": True,
        "salary_type_id": lookups.annual.id,
        "employment_contract_type_id": lookups.permanent.id,
        "locations": [lookups.london.id, lookups.leeds.id],
        "categories": [lookups.engineering.id],
    }


@pytest.fixture
def make_job(db_session, lookups):
    """Factory: create and commit a job linked to the given locations and categories."""
    def _make_job(title="Backend Engineer", active=True, locations=None, categories=None, **fields):
        data = {
            "title": title,
            "salary": "50000",
            "description": "Work on the job board backend.",
            "deadline": date.today() + timedelta(days=30),
            "active": active,
            "salary_type_id": lookups.annual.id,
            "employment_contract_type_id": lookups.permanent.id,
        }
        data.update(fields)
        job = job_crud.create(
            db_session,
            data,
            locations if locations is not None else [lookups.london.id],
            categories if categories is not None else [lookups.engineering.id],
        )
        db_session.commit()
        return job

    return _make_job
