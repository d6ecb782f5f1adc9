"""Double-submit cookie confirmation for create requests

A create request is only carried out once the client echoes back, as the
`token` query parameter, the exact value it holds in its `token` cookie.
The server keeps no record of issued tokens:

    request without matching tokens
        -> challenge: issue a fresh token, set it as a cookie and hand out a
           link to the same request with ?token=<fresh token>
    request with matching tokens
        -> confirmed: the write goes ahead

A cross-origin page can make the browser send the cookie, but can't read it,
so it can't produce a matching query parameter.

NOTE:
    Tokens never expire. Any equal query/cookie pair confirms a request,
    no matter which challenge issued it.
"""

import hmac
import secrets

from urlshortener.constants import Confirmation
from urlshortener.types import TokenFactory


def generate_token() -> str:
    """Return a fresh, URL-safe confirmation token from the OS CSPRNG."""
    return secrets.token_urlsafe(Confirmation.TOKEN_BYTES)


class ConfirmationGate:
    """Stateless challenge/response check guarding every write

    Attributes:
        token_factory (TokenFactory):
            Callable returning a new unpredictable token. Defaults to generate_token().

    Example:
        >>> gate = ConfirmationGate()
        >>> gate.confirmed(None, None)
        False
        >>> token = gate.issue_token()
        >>> gate.confirmed(token, token)
        True
    """

    def __init__(self, token_factory: TokenFactory = generate_token):
        self.token_factory = token_factory

    def confirmed(self, query_token: str | None, cookie_token: str | None) -> bool:
        """Return True if both tokens are present and equal

        Empty strings count as absent. The comparison runs in constant time.
        """
        if not query_token or not cookie_token:
            return False
        return hmac.compare_digest(query_token.encode('utf-8'), cookie_token.encode('utf-8'))

    def issue_token(self) -> str:
        return self.token_factory()
