"""Unit tests for the server entry point.

Test coverage includes:
    1. Startup
       - Ensures configuration, service and app are wired and handed to uvicorn.
    2. Missing credentials
       - Confirms the server refuses to start without basic auth credentials.
"""

from unittest.mock import MagicMock

import pytest

import urlshortener.__main__ as entrypoint
from urlshortener.exceptions import MissingEnvironmentVariableError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ('REDIS_HOST', 'SHORTENER_HOST', 'SHORTENER_PORT', 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID', 'APPCONFIG_PROFILE_ID'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(entrypoint, 'initialize_logging', MagicMock())


# -------------------------------
# 1. Startup
# -------------------------------


def test_main_runs_uvicorn(monkeypatch):
    monkeypatch.setenv('SHORTENER_USERNAME', 'admin')
    monkeypatch.setenv('SHORTENER_PASSWORD', 'secret')
    monkeypatch.setenv('SHORTENER_PORT', '9000')
    run = MagicMock()
    monkeypatch.setattr(entrypoint.uvicorn, 'run', run)

    entrypoint.main()

    run.assert_called_once()
    app = run.call_args.args[0]
    assert app.state.config['auth'] == {'username': 'admin', 'password': 'secret'}
    assert app.state.service.journal is None
    assert run.call_args.kwargs == {'host': 'localhost', 'port': 9000, 'log_config': None}


# -------------------------------
# 2. Missing credentials
# -------------------------------


def test_main_requires_credentials(monkeypatch):
    monkeypatch.delenv('SHORTENER_USERNAME', raising=False)
    monkeypatch.setenv('SHORTENER_PASSWORD', 'secret')
    run = MagicMock()
    monkeypatch.setattr(entrypoint.uvicorn, 'run', run)

    with pytest.raises(MissingEnvironmentVariableError, match='SHORTENER_USERNAME'):
        entrypoint.main()
    run.assert_not_called()
