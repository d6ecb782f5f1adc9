import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from urlshortener.api.responses import response_500
from urlshortener.api.routes import router
from urlshortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from urlshortener.service import ShortenerService
from urlshortener.types import AppConfig


logger = logging.getLogger(__name__)


def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        'Unhandled error while serving request. Responding with 500.',
        exc_info=exc,
        extra={'path': request.url.path, 'event': UNKNOWN_INTERNAL_SERVER_ERROR, 'error': exc.__class__.__name__},
    )
    return response_500()


def create_app(service: ShortenerService, config: AppConfig) -> FastAPI:
    """Build the HTTP gateway around an existing ShortenerService

    Args:
        service (ShortenerService):
            The process-wide service instance (see build_service()).
        config (AppConfig):
            Application configuration (see urlshortener.utils.config.load_config()).

    Returns:
        FastAPI: the ASGI application.

    Example:
        >>> app = create_app(ShortenerService(), load_config())
        >>> uvicorn.run(app, host='localhost', port=8080)
    """
    app = FastAPI(title='urlshortener', docs_url=None, redoc_url=None, openapi_url=None)
    app.state.service = service
    app.state.config = config

    app.add_exception_handler(Exception, handle_unexpected_error)
    app.include_router(router)
    return app
