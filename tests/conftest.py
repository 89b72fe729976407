"""
Shared test configuration.

pydantic-settings is kept away from the developer's real .env file: tests
control configuration only through monkeypatch.setenv() or explicit
AppSettings(...) keyword arguments.
"""

import pytest

from config import AppSettings


@pytest.fixture(autouse=True)
def isolate_from_dotenv(monkeypatch):
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture
def log_path(tmp_path):
    """Path of a not-yet-created event log inside the test's tmp dir."""
    return tmp_path / "logs.json"


@pytest.fixture
def settings(log_path):
    return AppSettings(
        log_file=str(log_path),
        ipinfo_token="",
        docs_url=None,
    )
