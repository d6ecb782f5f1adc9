"""Unit tests for the double-submit ConfirmationGate.

Test coverage includes:

1. Token generation
   - Ensures tokens are URL-safe, long and unique.

2. Confirmation
   - Ensures equal, non-empty query and cookie tokens confirm a request.
   - Confirms missing, empty and unequal tokens don't.
   - Confirms any equal pair confirms, no matter who issued it.
"""

import re

import pytest

from urlshortener.confirmation import ConfirmationGate, generate_token


# -------------------------------
# 1. Token generation
# -------------------------------


def test_generate_token_is_url_safe():
    token = generate_token()
    assert re.fullmatch(r'[A-Za-z0-9_-]+', token)
    assert len(token) >= 43  # 32 bytes, base64


def test_generate_token_is_unique():
    assert len({generate_token() for _ in range(100)}) == 100


def test_issue_token_uses_factory():
    gate = ConfirmationGate(token_factory=lambda: 'fixed')
    assert gate.issue_token() == 'fixed'


# -------------------------------
# 2. Confirmation
# -------------------------------


@pytest.mark.parametrize(
    'query_token, cookie_token, expected',
    [
        ('tkn', 'tkn', True),
        ('tkn', 'other', False),
        ('tkn', None, False),
        (None, 'tkn', False),
        (None, None, False),
        ('', '', False),
        ('tkn', 'tkn ', False),
    ],
)
def test_confirmed(query_token, cookie_token, expected):
    assert ConfirmationGate().confirmed(query_token, cookie_token) is expected


def test_issued_token_confirms_itself():
    gate = ConfirmationGate()
    token = gate.issue_token()
    assert gate.confirmed(token, token)


def test_tokens_are_stateless():
    """A pair the gate never issued still confirms (the gate keeps no record)."""
    assert ConfirmationGate().confirmed('made-up', 'made-up')
