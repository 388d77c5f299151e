import os

import pytest
from fastapi.testclient import TestClient
from unittest import mock

os.environ.setdefault("SECRET_KEY", "test-secret-key")


def passthrough_decorator(*args, **kwargs):
    """Passthrough decorator that doesn't do rate limiting"""

    def decorator(func):
        return func

    return decorator


mock.patch("slowapi.Limiter.limit", passthrough_decorator).start()
mock.patch("slowapi.Limiter.shared_limit", passthrough_decorator).start()

# ruff: noqa: E402
from app.main import app
from app.core.config import settings
from app.core.events import MAINTENANCE_MODE_CHANGED, EventNotifier
from app.core.flag_store import FlagStore
from app.core.ip_normalizer import IPAddressNormalizer
from app.core.maintenance_mode import MaintenanceMode
from app.core.security import create_access_token


class EventRecorder:
    """observer that remembers every event it receives"""

    def __init__(self):
        self.events = []

    def __call__(self, event_name, payload):
        self.events.append((event_name, payload))


@pytest.fixture(scope="function")
def var_dir(tmp_path, monkeypatch):
    """point the runtime data directory at a fresh temp dir"""
    directory = tmp_path / "var"
    monkeypatch.setattr(settings, "VAR_DIR", directory)
    return directory


@pytest.fixture(scope="function")
def store(var_dir):
    return FlagStore(var_dir)


@pytest.fixture(scope="function")
def recorder():
    return EventRecorder()


@pytest.fixture(scope="function")
def notifier(recorder):
    event_notifier = EventNotifier()
    event_notifier.subscribe(MAINTENANCE_MODE_CHANGED, recorder)
    return event_notifier


@pytest.fixture(scope="function")
def maintenance_mode(store, notifier):
    return MaintenanceMode(store=store, event_notifier=notifier, address_normalizer=IPAddressNormalizer())


@pytest.fixture(scope="function")
def client(var_dir):
    """create a test client whose maintenance state lives in a temp dir"""

    async def passthrough_middleware(self, request, call_next):
        """passthrough middleware that doesnt do rate limiting"""
        response = await call_next(request)
        return response

    with mock.patch("slowapi.middleware.SlowAPIMiddleware.dispatch", passthrough_middleware):
        with TestClient(app, base_url="http://localhost:8000") as test_client:
            yield test_client


@pytest.fixture(scope="function")
def app_maintenance_mode(client):
    """the maintenance mode instance the running app uses"""
    return client.app.state.maintenance_mode


@pytest.fixture(scope="function")
def admin_auth_headers():
    """get authentication headers for an admin"""
    token, _, _ = create_access_token({"sub": "adminuser", "is_superuser": True})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def auth_headers():
    """get authentication headers for a regular user"""
    token, _, _ = create_access_token({"sub": "testuser", "is_superuser": False})
    return {"Authorization": f"Bearer {token}"}
