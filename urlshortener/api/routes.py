"""HTTP routes

    GET /{shortcode}                 redirect to the current target URL
    GET /history/{shortcode}         every version of a shortcode (JSON)
    GET /list                        every resolvable shortcode (JSON, basic auth)
    GET /create/{shortcode}?url=...  create/reassign a shortcode (basic auth, confirmed)

Every route is a plain (synchronous) function, so FastAPI dispatches each
request on its worker thread pool; the ShortenerService coordinates them.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import HttpUrl, TypeAdapter, ValidationError

from urlshortener.api.auth import require_credentials
from urlshortener.api.responses import (
    serialize_version,
    response_200,
    response_302,
    response_400,
    response_404,
    response_confirm,
)
from urlshortener.constants import (
    Confirmation,
    REDIRECT_SUCCESS,
    SHORT_URL_NOT_FOUND,
    HISTORY_SUCCESS,
    LIST_SUCCESS,
    INVALID_TARGET_URL,
    INVALID_CREATE_REQUEST,
)
from urlshortener.dao.exceptions import ShortURLNotFoundError
from urlshortener.models import BadRequest, NeedsConfirmation
from urlshortener.service import ShortenerService


logger = logging.getLogger(__name__)

router = APIRouter()

_http_url = TypeAdapter(HttpUrl)


def get_service(request: Request) -> ShortenerService:
    return request.app.state.service


def valid_target_url(url: str | None) -> bool:
    """Return True for absolute http(s) URLs."""
    if not url:
        return False
    try:
        _http_url.validate_python(url)
    except ValidationError:
        return False
    return True


@router.get('/history/{shortcode}')
def url_history(shortcode: str, service: Annotated[ShortenerService, Depends(get_service)]) -> JSONResponse:
    try:
        history = service.history(shortcode)
    except ShortURLNotFoundError:
        logger.info(
            'Short URL history not found. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message=f"short url '{shortcode}' doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    logger.debug('Returning %s versions.', len(history), extra={'shortcode': shortcode, 'event': HISTORY_SUCCESS})
    return response_200(
        {
            'shortcode': shortcode,
            'history': [serialize_version(version) for version in history],
        }
    )


@router.get('/list', dependencies=[Depends(require_credentials)])
def list_urls(service: Annotated[ShortenerService, Depends(get_service)]) -> JSONResponse:
    current = service.list_current()
    logger.debug('Listing %s short URLs.', len(current), extra={'event': LIST_SUCCESS})
    return response_200(current)


@router.get('/create/{shortcode}', dependencies=[Depends(require_credentials)])
def create_url(
    shortcode: str,
    request: Request,
    service: Annotated[ShortenerService, Depends(get_service)],
) -> Response:
    """Create or reassign a shortcode

    This handler follows this procedure:
    - Step 1: Validate the target URL (`url` query parameter)
    - Step 2: Hand the request over to the service (expiration, confirmation, write)
    - Step 3: Respond according to the outcome

    HTTP responses:
        200: Version created
            shortcode, url, created_at, expires_at
        400: Bad client request
            message: invalid target URL or expiration directive
        400: Confirmation required (text/html)
            link repeating this request with ?token=<token>, token set as cookie
        401: Unauthorized
    """
    params = request.query_params

    # 1- Validate the target URL
    target = params.get('url')
    if not valid_target_url(target):
        logger.info(
            'Missing or invalid target URL. Responding with 400.',
            extra={'shortcode': shortcode, 'event': INVALID_TARGET_URL},
        )
        return response_400(message="missing or invalid 'url' query parameter", error_code=INVALID_TARGET_URL)

    # 2- Create (or challenge) through the service
    outcome = service.create(
        shortcode,
        target,
        expiration=params,
        query_token=params.get(Confirmation.QUERY_PARAM),
        cookie_token=request.cookies.get(Confirmation.COOKIE_NAME),
    )

    # 3- Respond according to the outcome
    if isinstance(outcome, BadRequest):
        return response_400(message=outcome.reason, error_code=INVALID_CREATE_REQUEST)

    if isinstance(outcome, NeedsConfirmation):
        confirm_url = request.url.include_query_params(**{Confirmation.QUERY_PARAM: outcome.token})
        return response_confirm(
            link=f'{confirm_url.path}?{confirm_url.query}',
            token=outcome.token,
            cookie_secure=request.app.state.config['server']['cookie_secure'],
        )

    return response_200(
        {
            'message': f'Successfully pointed {shortcode} to {outcome.short_url.target}',
            'shortcode': shortcode,
            **serialize_version(outcome.short_url),
        }
    )


# NOTE: registered last, the fixed prefixes above must win
@router.get('/{shortcode}')
def redirect_url(shortcode: str, service: Annotated[ShortenerService, Depends(get_service)]) -> Response:
    try:
        target = service.resolve(shortcode)
    except ShortURLNotFoundError:
        logger.info(
            'Short URL not found or expired. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message=f"short url '{shortcode}' doesn't exist", error_code=SHORT_URL_NOT_FOUND)

    logger.info(
        'Redirecting client to target URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=target)
