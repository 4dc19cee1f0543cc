import os
import sys

import pytest

# Ensure project root is on sys.path so 'app', 'config', and 'src' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support import factories as test_factories
from tests.support import stubs as test_stubs


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Ensure a clean env: fake Spotify credentials, no OpenAI key, logs under tmp."""
    monkeypatch.setenv("SPOTIPY_CLIENT_ID", "test-client-id")
    monkeypatch.setenv("SPOTIPY_CLIENT_SECRET", "test-client-secret")
    monkeypatch.setenv("SPOTIPY_REDIRECT_URI", "http://localhost:4000/auth/callback")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "log"))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)
    yield


@pytest.fixture
def factories():
    return test_factories


@pytest.fixture
def fake_catalog():
    return test_stubs.FakeCatalog()


@pytest.fixture
def fake_inference():
    return test_stubs.FakeInference(configured=False)


@pytest.fixture
def app(fake_catalog, fake_inference):
    import app as app_module

    application = app_module.create_app({"TESTING": True})
    # Swap upstream collaborators for in-memory fakes
    application.extensions["catalog_factory"] = lambda access_token: fake_catalog
    application.extensions["genre_inference"] = fake_inference
    yield application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer test-access-token"}
