"""Unit tests for the JSON log formatter and logging initialization.

Test coverage includes:
    1. JsonFormatter
       - Ensures standard fields are rendered and `extra` fields attached.
       - Ensures exceptions are rendered and non-JSON values stringified.
    2. initialize_logging()
       - Ensures the root logger level follows LOG_LEVEL.
"""

import sys
import json
import logging
from datetime import datetime, UTC

import pytest

from urlshortener.utils.logging import JsonFormatter, initialize_logging


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def formatter():
    return JsonFormatter()


def make_record(msg='Redirecting client.', level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord('urlshortener.api.routes', level, __file__, 1, msg, None, exc_info)
    record.created = datetime(2025, 12, 26, 12, 0, 0, tzinfo=UTC).timestamp()
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -------------------------------
# 1. JsonFormatter
# -------------------------------


def test_format_standard_fields(formatter):
    log = json.loads(formatter.format(make_record()))

    assert log == {
        'timestamp': '2025-12-26T12:00:00.000Z',
        'level': 'INFO',
        'logger': 'urlshortener.api.routes',
        'message': 'Redirecting client.',
    }


def test_format_attaches_extra_fields(formatter):
    log = json.loads(formatter.format(make_record(shortcode='abc', event='REDIRECT_SUCCESS')))

    assert log['shortcode'] == 'abc'
    assert log['event'] == 'REDIRECT_SUCCESS'


def test_format_ignores_uvicorn_color_message(formatter):
    log = json.loads(formatter.format(make_record(color_message='\x1b[32mINFO\x1b[0m')))
    assert 'color_message' not in log


def test_format_exception(formatter):
    try:
        raise KeyError('boom')
    except KeyError:
        record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

    log = json.loads(formatter.format(record))
    assert 'KeyError' in log['exception']


def test_format_stringifies_unknown_types(formatter):
    moment = datetime(2025, 10, 15, tzinfo=UTC)
    log = json.loads(formatter.format(make_record(expires_at=moment)))
    assert log['expires_at'] == str(moment)


# -------------------------------
# 2. initialize_logging()
# -------------------------------


def test_initialize_logging_level(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    root = logging.getLogger()
    previous_level, previous_handlers = root.level, root.handlers[:]

    try:
        initialize_logging()
        assert root.level == logging.DEBUG
        assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)
