"""Shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.core.session import SessionContext
from app.main import app
from app.services.session_service import SessionManager
from app.utils.dependencies import get_backend, get_session_manager

from tests.fakes import FakeBackend, make_identity


@pytest.fixture
def backend():
    """Empty in-memory backend."""
    return FakeBackend()


@pytest.fixture
def session():
    """Anonymous session."""
    return SessionContext()


@pytest.fixture
def owner():
    return make_identity("owner-1", name="Ravi", phone="9123456780")


@pytest.fixture
def buyer():
    return make_identity("buyer-1", name="Meera", phone="8123456789")


@pytest.fixture
def owner_session(owner):
    return SessionContext(identity=owner)


@pytest.fixture
def buyer_session(buyer):
    return SessionContext(identity=buyer)


@pytest.fixture
def manager(backend, session):
    return SessionManager(backend, session)


@pytest.fixture(name="client")
def client_fixture(backend, manager):
    """Test client wired to the fake backend; the lifespan is not run."""
    app.dependency_overrides[get_backend] = lambda: backend
    app.dependency_overrides[get_session_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()
