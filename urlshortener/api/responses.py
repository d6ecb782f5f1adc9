import html

from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from urlshortener.constants import Confirmation
from urlshortener.models import ShortURLModel


def serialize_version(short_url: ShortURLModel) -> dict:
    return {
        'url': short_url.target,
        'created_at': short_url.created_at.isoformat(),
        'expires_at': short_url.expires_at.isoformat() if short_url.expires_at else None,
    }


def response_200(body: dict) -> JSONResponse:
    return JSONResponse(status_code=200, content=body)


def response_302(*, location: str) -> RedirectResponse:
    return RedirectResponse(url=location, status_code=302)


def response_400(message: str | None = None, error_code: str | None = None) -> JSONResponse:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return JSONResponse(status_code=400, content=body)


def response_404(message: str | None = None, error_code: str | None = None) -> JSONResponse:
    base = 'Not Found'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return JSONResponse(status_code=404, content=body)


def response_500(message: str | None = None, error_code: str | None = None) -> JSONResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return JSONResponse(status_code=500, content=body)


def response_confirm(*, link: str, token: str, cookie_secure: bool = False) -> HTMLResponse:
    """Confirmation page: a single link repeating the request with the token

    The token is also set as a cookie the browser sends back on confirmation.
    The page is answered with 400 since the request wasn't carried out.
    """
    # fmt: off
    content = (
        '<!DOCTYPE html><title>Confirm</title>'
        f'<a href="{html.escape(link, quote=True)}">Confirm</a>'
    )
    # fmt: on
    response = HTMLResponse(status_code=400, content=content, headers={'X-Frame-Options': 'deny'})
    response.set_cookie(
        Confirmation.COOKIE_NAME,
        token,
        path='/',
        httponly=True,
        samesite='strict',
        secure=cookie_secure,
    )
    return response
