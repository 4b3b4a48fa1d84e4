"""
Unit tests for authentication endpoints.

Tests:
- User registration
- Login
- Token refresh
- Current user profile
- Password validation
"""

from datetime import timedelta

import pytest
from jose import JWTError

from app.core.security import (
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_token,
    get_password_hash,
    verify_password,
)
from app.crud import user as user_crud
from app.models.user import UserRole

PASSWORD = "SecurePass123"


class TestUserRegistration:
    """Test user registration endpoint"""

    def test_register_success(self, client, db_session):
        """Test successful user registration"""
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": "Test@Example.com",
                "password": PASSWORD,
                "first_name": "Test",
                "last_name": "User"
            }
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "test@example.com"
        assert data["user"]["role"] == "user"

        user = user_crud.get_by_email(db_session, "test@example.com")
        assert user is not None
        assert verify_password(PASSWORD, user.hashed_password)

    def test_register_duplicate_email(self, client, make_user):
        """Test registration with duplicate email fails"""
        make_user(email="existing@example.com")

        response = client.post(
            "/api/v1/auth/register",
            json={"email": "existing@example.com", "password": "DifferentPass123"}
        )

        assert response.status_code == 400
        assert "already registered" in response.json()["message"].lower()

    def test_register_weak_password(self, client):
        """Test registration with weak password fails"""
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "test@example.com", "password": "weak"}
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"

    def test_register_password_without_digit(self, client):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "test@example.com", "password": "NoDigitsHere"}
        )

        assert response.status_code == 400

    def test_register_invalid_email(self, client):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "not-an-email", "password": PASSWORD}
        )

        assert response.status_code == 400


class TestLogin:
    """Test login endpoint"""

    def test_login_success(self, client, db_session, make_user):
        user = make_user(email="login@example.com")

        response = client.post(
            "/api/v1/auth/login",
            json={"username": "login@example.com", "password": PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["id"] == user.id
        db_session.refresh(user)
        assert user.last_login_at is not None

    def test_login_wrong_password(self, client, make_user):
        make_user(email="login@example.com")

        response = client.post(
            "/api/v1/auth/login",
            json={"username": "login@example.com", "password": "WrongPass123"}
        )

        assert response.status_code == 401
        assert response.json() == {"status": "fail", "message": "Incorrect email or password"}

    def test_login_unknown_email(self, client):
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "nobody@example.com", "password": PASSWORD}
        )

        assert response.status_code == 401

    def test_login_inactive_account(self, client, make_user):
        make_user(email="inactive@example.com", is_active=False)

        response = client.post(
            "/api/v1/auth/login",
            json={"username": "inactive@example.com", "password": PASSWORD}
        )

        assert response.status_code == 403


class TestTokens:
    """Test token refresh and token validation"""

    def test_refresh_success(self, client, job_seeker):
        refresh = create_refresh_token({"sub": str(job_seeker.id)})

        response = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["access_token"]
        assert data["user"] is None

    def test_access_token_cannot_refresh(self, client, job_seeker):
        access = create_access_token({"sub": str(job_seeker.id)})

        response = client.post("/api/v1/auth/refresh", json={"refresh_token": access})

        assert response.status_code == 401

    def test_refresh_garbage_token(self, client):
        response = client.post("/api/v1/auth/refresh", json={"refresh_token": "not-a-jwt"})

        assert response.status_code == 401

    def test_refresh_token_cannot_authenticate(self, client, job_seeker):
        refresh = create_refresh_token({"sub": str(job_seeker.id)})

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {refresh}"})

        assert response.status_code == 401

    def test_expired_access_token(self, client, job_seeker):
        expired = create_access_token({"sub": str(job_seeker.id)}, expires_delta=timedelta(minutes=-1))

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {expired}"})

        assert response.status_code == 401

    def test_missing_token(self, client):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"


class TestProfile:

    def test_auth_me(self, client, recruiter, recruiter_headers):
        response = client.get("/api/v1/auth/me", headers=recruiter_headers)

        assert response.status_code == 200
        assert response.json()["data"]["user"]["role"] == UserRole.RECRUITER.value

    def test_me_lists_own_applications_and_uploads(self, client, make_job, job_seeker, user_headers):
        job = make_job()
        client.post(
            "/api/v1/job-applications/",
            data={"job_id": str(job.id)},
            files={"cv": ("cv.pdf", b"%PDF", "application/pdf")},
            headers=user_headers,
        )

        profile = client.get("/api/v1/me", headers=user_headers)
        applications = client.get("/api/v1/me/job-applications", headers=user_headers)
        uploads = client.get("/api/v1/me/uploads", headers=user_headers)

        assert profile.json()["data"]["user"]["id"] == job_seeker.id
        assert [a["job_id"] for a in applications.json()["data"]["applications"]] == [job.id]
        assert [u["title"] for u in uploads.json()["data"]["uploads"]] == ["cv.pdf"]


class TestSecurityUtilities:

    def test_password_hash_round_trip(self):
        hashed = get_password_hash(PASSWORD)

        assert hashed != PASSWORD
        assert verify_password(PASSWORD, hashed)
        assert not verify_password("WrongPass123", hashed)

    def test_token_pair_types(self):
        access, refresh = create_token_pair(42, "recruiter")

        access_payload = decode_token(access, expected_type="access")
        assert access_payload["sub"] == "42"
        assert access_payload["role"] == "recruiter"
        assert decode_token(refresh, expected_type="refresh")["sub"] == "42"

    def test_wrong_token_type_rejected(self):
        _, refresh = create_token_pair(42, "user")

        with pytest.raises(JWTError):
            decode_token(refresh, expected_type="access")

    def test_token_without_subject_rejected(self):
        token = create_access_token({"role": "user"})

        with pytest.raises(JWTError):
            decode_token(token)
