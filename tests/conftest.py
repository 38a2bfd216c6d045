import pytest

from sunsync.config import ENV_OVERRIDES


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    # Host locale must not leak into "auto" locations.
    monkeypatch.setattr("sunsync.location.detect_region", lambda: None)
