import pytest
from fastapi.testclient import TestClient

from tourneyhub.api.dependencies import get_db
from tourneyhub.core.config import settings
from tourneyhub.core.errors import InternalError, Unauthenticated
from tourneyhub.services import auth_service


class TestIdentityHeaders:

    def test_current_user_from_headers(self):
        user = auth_service.get_current_user(x_user_uuid="user-1", x_user_name="Player One")

        assert user.uuid == "user-1"
        assert user.name == "Player One"

    @pytest.mark.parametrize("uuid", [None, "", "  ", "anonymous"])
    def test_missing_or_anonymous_identity(self, uuid):
        with pytest.raises(Unauthenticated):
            auth_service.get_current_user(x_user_uuid=uuid, x_user_name=None)

        assert auth_service.get_optional_user(x_user_uuid=uuid, x_user_name=None) is None

    def test_non_admin_forbidden(self, client: TestClient, make_user):
        make_user("user-1")

        response = client.delete("/tournaments/1", headers={"x-user-uuid": "user-1"})

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Admin access required"}

    def test_unknown_user_is_not_admin(self, client: TestClient):
        response = client.post("/tournaments/1/status", json={"status": "live"}, headers={"x-user-uuid": "ghost"})

        assert response.status_code == 403

    def test_banner_needs_no_identity(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestDatabaseHeaders:

    def test_database_url_header_selects_database(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'tenant.db'}"
        sessions = get_db(x_database_url=url, x_database_token=None)

        db = next(sessions)
        try:
            assert str(db.get_bind().url) == url
        finally:
            sessions.close()

    def test_missing_database_configuration(self, monkeypatch):
        monkeypatch.setattr(settings, "DATABASE_URL", "")

        with pytest.raises(InternalError) as exc_info:
            next(get_db(x_database_url=None, x_database_token=None))

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Database configuration missing"
