import logging

import pytest
from fastapi.testclient import TestClient

from brenda.config.settings import Settings
from brenda.main import app, get_settings

TEST_SECRET = "test-session-secret"
TEST_API_KEY = "sk-test-api-key"


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


@pytest.fixture
def secret():
    return TEST_SECRET


@pytest.fixture
def settings():
    """Settings with both secrets configured and default policy values."""
    return Settings(openai_api_key=TEST_API_KEY, session_secret=TEST_SECRET)


@pytest.fixture
def test_client(settings):
    """TestClient whose settings dependency returns the ``settings`` fixture."""
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()
