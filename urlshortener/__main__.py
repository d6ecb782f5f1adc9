"""Run the URL shortener server

Usage:
    SHORTENER_USERNAME=admin SHORTENER_PASSWORD=secret python -m urlshortener

See urlshortener.utils.config for every supported environment variable.
"""

import logging

import uvicorn

from urlshortener.api import create_app
from urlshortener.constants import ENV
from urlshortener.service import build_service
from urlshortener.utils import initialize_logging, load_config, require_environment


logger = logging.getLogger('urlshortener')


@require_environment(ENV.Server.USERNAME, ENV.Server.PASSWORD)
def main() -> None:
    initialize_logging()

    config = load_config()
    service = build_service(config)
    app = create_app(service, config)

    host, port = config['server']['host'], config['server']['port']
    logger.info('Starting URL shortener on %s:%s.', host, port, extra={'journal': service.journal is not None})
    # log_config=None keeps the JSON logging configured above
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == '__main__':
    main()
