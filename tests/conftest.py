import os

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session", autouse=True)
def setup_test_settings():
    os.environ["ENV"] = "test"
    os.environ["ALLOWED_REDIRECT_HOSTS"] = "trusted.com,example.com"
    os.environ["ENFORCE_ALLOW_LIST"] = "true"
    os.environ["OBSERVABILITY_ENABLED"] = "false"

    from app.core.config import get_settings
    from app.services.redirect_validator import get_redirect_validator

    get_settings.cache_clear()
    get_redirect_validator.cache_clear()

    yield

    get_settings.cache_clear()
    get_redirect_validator.cache_clear()


@pytest.fixture
def client(setup_test_settings):
    from app.main import app

    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
