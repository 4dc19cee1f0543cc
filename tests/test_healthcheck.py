import importlib.util
import os
from urllib import error

_SCRIPT = os.path.join(os.path.dirname(__file__), os.pardir, "scripts", "healthcheck.py")


def _load():
    spec = importlib.util.spec_from_file_location("healthcheck_script", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class _Response:
    def __init__(self, status):
        self.status = status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def test_readiness_url_from_env(monkeypatch):
    monkeypatch.setenv("HEALTHCHECK_HOST", "api")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.delenv("HEALTHCHECK_PATH", raising=False)
    assert _load().readiness_url() == "http://api:8080/readyz"


def test_main_ok(monkeypatch):
    healthcheck = _load()
    seen = []

    def _urlopen(url, timeout):
        seen.append(url)
        return _Response(200)

    monkeypatch.setattr(healthcheck.request, "urlopen", _urlopen)
    assert healthcheck.main() == 0
    assert seen[0].endswith("/readyz")


def test_main_unreachable(monkeypatch):
    healthcheck = _load()

    def _urlopen(url, timeout):
        raise error.URLError("connection refused")

    monkeypatch.setattr(healthcheck.request, "urlopen", _urlopen)
    assert healthcheck.main() == 1
