# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import json
import pytest
from unittest.mock import MagicMock

from racf_core.api.base_connector import APIConfig
from racf_core.api.user_connector import UserAPIConnector
from racf_core.offline.backends import LocalBackend, RemoteBackend
from racf_core.offline.connection_manager import ConnectionManager
from racf_core.offline.local_database import LocalDatabase
from racf_core.offline.seed_manager import SeedManager
from racf_core.offline.settings_store import SettingsStore
from racf_core.offline.unified_data_service import UnifiedDataService


# =============================================================================
# LOCAL STORAGE FIXTURES
# =============================================================================

@pytest.fixture
def local_db(tmp_path):
    """Empty record store in a temporary directory"""
    db = LocalDatabase(tmp_path / "users.db")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def settings_store(tmp_path):
    """Settings file next to (not inside) the record store"""
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def seed_manager(local_db, settings_store):
    return SeedManager(local_db, settings_store)


@pytest.fixture
def local_backend(local_db, seed_manager):
    return LocalBackend(local_db, seed_manager)


@pytest.fixture
def offline_service(local_backend):
    """Data service with no remote configured: every call is local"""
    return UnifiedDataService(
        connection_manager=ConnectionManager(None),
        local_backend=local_backend,
    )


# =============================================================================
# REMOTE FIXTURES
# =============================================================================

def _fake_response(status_code=200, body=None, text=None):
    """Build a requests.Response look-alike"""
    response = MagicMock()
    response.status_code = status_code

    if body is not None:
        response.content = json.dumps(body).encode()
        response.json.return_value = body
    else:
        response.content = (text or "").encode()
        response.json.side_effect = ValueError("No JSON object could be decoded")

    return response


@pytest.fixture
def fake_response():
    """Factory for fake HTTP responses: fake_response(status, body=None, text=None)"""
    return _fake_response


@pytest.fixture
def api_config():
    return APIConfig(
        api_name="User Service",
        base_url="http://racf.test/api/",
        timeout=30,
        health_timeout=1.5,
    )


@pytest.fixture
def mock_session():
    """Mock requests.Session; set ``request.return_value`` / ``side_effect`` per test"""
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def connector(api_config, mock_session):
    return UserAPIConnector(api_config, session=mock_session)


@pytest.fixture
def mock_connector():
    """Connector double for data service tests"""
    connector = MagicMock(spec=UserAPIConnector)
    connector.config = APIConfig(api_name="User Service", base_url="http://racf.test/api")
    connector.health.return_value = {"status": "ok"}
    return connector


@pytest.fixture
def online_service(mock_connector, local_backend):
    """Data service whose remote answers health probes"""
    return UnifiedDataService(
        connection_manager=ConnectionManager(mock_connector),
        local_backend=local_backend,
        remote_backend=RemoteBackend(mock_connector),
    )


# =============================================================================
# MOCK FIXTURES
# =============================================================================

@pytest.fixture
def mock_streamlit(monkeypatch):
    """Mock the Streamlit calls made by the error handlers"""
    mock_st = MagicMock()
    mock_st.session_state = {}
    monkeypatch.setattr("racf_core.errors.handlers.st", mock_st)
    return mock_st
