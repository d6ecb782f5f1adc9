"""HTTP basic authentication for the mutating and listing routes

The expected credentials come from the application configuration
(`config['auth']`, see urlshortener.utils.config). Without configured
credentials every request is rejected.
"""

import logging
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from urlshortener.constants import UNAUTHORIZED


logger = logging.getLogger(__name__)

security = HTTPBasic(auto_error=False, realm='urlshortener')


def _matches(given: str, expected: str | None) -> bool:
    if not expected:
        return False
    return secrets.compare_digest(given.encode('utf-8'), expected.encode('utf-8'))


def require_credentials(
    request: Request,
    credentials: Annotated[HTTPBasicCredentials | None, Depends(security)],
) -> str:
    """FastAPI dependency: check HTTP basic credentials against the configuration

    Returns:
        str: the authenticated username.

    Raises:
        HTTPException:
            401 with a `WWW-Authenticate` challenge if the credentials are missing or wrong.
    """
    auth = request.app.state.config['auth']

    # NOTE: both comparisons always run, no short-circuit on the username
    username_ok = credentials is not None and _matches(credentials.username, auth.get('username'))
    password_ok = credentials is not None and _matches(credentials.password, auth.get('password'))
    if not (username_ok and password_ok):
        logger.info(
            'Missing or invalid credentials. Responding with 401.',
            extra={'path': request.url.path, 'event': UNAUTHORIZED},
        )
        raise HTTPException(
            status_code=401,
            detail='Unauthorized',
            headers={'WWW-Authenticate': 'Basic realm="urlshortener"'},
        )
    return credentials.username
