import pytest
from fastapi.testclient import TestClient

from tourneyhub.api.dependencies import get_db
from tourneyhub.main import app


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin(make_user):
    return make_user("admin-1", username="admin", role="admin")
