"""
Pytest Configuration
====================

The app reads its settings at import time, so the test database and
accounts are configured through the environment before anything from
cpi_app is imported.
"""

import os
import tempfile

_TEST_DB_DIR = tempfile.mkdtemp(prefix="cpi-tests-")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(_TEST_DB_DIR, "test.db")
os.environ["BASIC_AUTH_USERNAME"] = "tester"
os.environ["BASIC_AUTH_PASSWORD"] = "secret"
os.environ["EXTRA_USERS"] = '{"other": "other-secret"}'
os.environ["CALCULATION_LOG_DIR"] = ""

import pytest  # noqa: E402


@pytest.fixture(scope="session")
def client():
    """TestClient over the whole app, lifespan included (creates the tables)."""
    from fastapi.testclient import TestClient

    from cpi_app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth():
    return ("tester", "secret")


@pytest.fixture
def other_auth():
    return ("other", "other-secret")
