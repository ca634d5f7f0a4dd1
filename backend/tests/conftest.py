"""
Fixtures partagées — store SQLite en mémoire et client HTTP FastAPI.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from agrismart.core.settings import Settings
from agrismart.main import create_app
from agrismart.services.advisory import AdvisoryService
from agrismart.services.db_handler import FarmDatabase


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        STATIC_DIR=str(tmp_path / "no-dist"),
        DATABASE_URL="sqlite://",
        LOG_FILE="",
        _env_file=None,
    )


@pytest.fixture
def store():
    db = FarmDatabase("sqlite://")
    yield db
    db.close()


@pytest.fixture
def advisory():
    return MagicMock(spec=AdvisoryService)


@pytest.fixture
def client(test_settings, store, advisory):
    app = create_app(test_settings, store=store, advisory=advisory)
    return TestClient(app)
