"""
Unit tests for admin endpoints.

Tests:
- Admin dashboard stats
- User management (roles, activation)
- System health checks
"""

from app.models.user import UserRole


class TestAdminDashboard:
    """Test admin stats endpoint"""

    def test_get_stats(self, client, make_job, recruiter, admin_headers):
        """Test getting system statistics"""
        make_job(active=True)
        make_job(active=False)

        response = client.get("/api/v1/admin/stats", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total_users"] == 2
        assert data["total_recruiters"] == 1
        assert data["active_jobs"] == 1
        assert data["total_applications"] == 0

    def test_stats_requires_admin(self, client, recruiter_headers):
        """Test non-admin users cannot access stats"""
        response = client.get("/api/v1/admin/stats", headers=recruiter_headers)

        assert response.status_code == 403


class TestUserManagement:

    def test_list_users_by_role(self, client, make_user, admin_headers):
        make_user(UserRole.RECRUITER)
        make_user(UserRole.USER)

        response = client.get("/api/v1/admin/users", params={"role": "recruiter"}, headers=admin_headers)

        data = response.json()["data"]
        assert data["totalRecords"] == 1
        assert data["users"][0]["role"] == "recruiter"

    def test_promote_to_recruiter(self, client, job_seeker, admin_headers, auth_headers, make_job):
        response = client.patch(
            f"/api/v1/admin/users/{job_seeker.id}/role",
            json={"role": "recruiter"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["role"] == "recruiter"

        # The promoted account now passes recruiter gates
        job = make_job()
        update = client.put(f"/api/v1/jobs/{job.id}", json={"title": "New"}, headers=auth_headers(job_seeker))
        assert update.status_code == 200

    def test_invalid_role(self, client, job_seeker, admin_headers):
        response = client.patch(
            f"/api/v1/admin/users/{job_seeker.id}/role",
            json={"role": "superuser"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_admin_cannot_demote_self(self, client, admin, admin_headers):
        response = client.patch(
            f"/api/v1/admin/users/{admin.id}/role",
            json={"role": "user"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_deactivated_user_is_locked_out(self, client, job_seeker, user_headers, admin_headers):
        response = client.patch(
            f"/api/v1/admin/users/{job_seeker.id}/active",
            json={"is_active": False},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert client.get("/api/v1/me", headers=user_headers).status_code == 403

    def test_unknown_user(self, client, admin_headers):
        response = client.patch("/api/v1/admin/users/9999/role", json={"role": "user"}, headers=admin_headers)

        assert response.status_code == 404


class TestHealth:
    """System health checks"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health(self, client):
        response = client.get("/health/detailed")

        assert response.status_code == 200
        checks = response.json()["checks"]
        assert checks["database"]["status"] == "healthy"
        assert checks["storage"]["backend"] == "local"
