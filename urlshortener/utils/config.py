"""Utility functions for application configuration management.

Configuration is read from environment variables. Optionally, a JSON document
deployed through **AWS AppConfig** overrides the environment: when
`APPCONFIG_APP_ID`, `APPCONFIG_ENV_ID` and `APPCONFIG_PROFILE_ID` are all set,
the document's `configs.<section>` entry is layered on top.

The AppConfig JSON follows this structure:

    {
        "build": 42,
        "configs": {
            "server": {
                "server": {"host": "0.0.0.0", "port": 8080},
                "redis": {"host": "redis.internal", "port": 6379, "db": 0}
            }
        }
    }

The resulting configuration dictionary looks like this:

    {
        "server": {"host": "localhost", "port": 8080, "cookie_secure": False},
        "auth": {"username": "admin", "password": "..."},
        "redis": {"host": "...", "port": 6379, "db": 0, "username": None, "password": None} | None
    }

`redis` is None unless `REDIS_HOST` (or the AppConfig document) provides a
host, in which case the Redis history journal is enabled.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    appconfig_enabled() -> bool
        True if every AppConfig identifier is present in the environment.

    load_appconfig(section: str) -> dict
        Pull the latest AppConfig document and return its `configs.<section>` entry.

    load_config() -> dict
        Build the full configuration dictionary described above.

Example:
    >>> from urlshortener.utils.config import load_config
    >>> config = load_config()
    >>> config['server']['port']
    8080
"""

import os
import json
import logging
from typing import Any

import boto3

from urlshortener.constants import ENV, Defaults
from urlshortener.exceptions import BadConfigurationError
from urlshortener.types import AppConfig, AppConfigDataClient
from urlshortener.utils.helpers import require_environment


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'urlshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'urlshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def appconfig_enabled() -> bool:
    return all(os.environ.get(name) for name in ENV.AppConfig)


def _as_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise BadConfigurationError(f"'{name}' must be an integer (given value: {value!r}).") from e


def _as_bool(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    return value.strip().lower() in {'1', 'true', 'yes', 'on'}


def _env_config() -> AppConfig:
    redis_host = os.environ.get(ENV.Redis.HOST)
    # fmt: off
    return {
        'server': {
            'host': os.environ.get(ENV.Server.HOST, Defaults.HOST),
            'port': os.environ.get(ENV.Server.PORT, Defaults.PORT),
            'cookie_secure': os.environ.get(ENV.Server.COOKIE_SECURE, 'false'),
        },
        'auth': {
            'username': os.environ.get(ENV.Server.USERNAME),
            'password': os.environ.get(ENV.Server.PASSWORD),
        },
        'redis': None if not redis_host else {
            'host': redis_host,
            'port': os.environ.get(ENV.Redis.PORT, Defaults.REDIS_PORT),
            'db': os.environ.get(ENV.Redis.DB, Defaults.REDIS_DB),
            'username': os.environ.get(ENV.Redis.USERNAME),
            'password': os.environ.get(ENV.Redis.PASSWORD),
        },
    }
    # fmt: on


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_appconfig(section: str = 'server') -> AppConfig:
    """Pull the latest AWS AppConfig document and return one of its sections

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        section (str):
            Key under the document's `configs` object. Defaults to 'server'.

    Returns:
        dict: The section as a Python dictionary.

    Raises:
        MissingEnvironmentVariableError:
            If any AppConfig identifier is missing.
        BadConfigurationError:
            If the document has no such section.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'section': section})

    appconfig: AppConfigDataClient = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    try:
        data = document['configs'][section]
    except KeyError as e:
        raise BadConfigurationError(f"AppConfig document has no '{section}' section.") from e

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'section': section, 'build': document.get('build')})
    return data


def load_config() -> AppConfig:
    """Build the application configuration

    Environment variables provide the base configuration. If AppConfig is
    enabled, its `server` section overrides the `server` and `redis` entries.

    Returns:
        dict: configuration dictionary (see module docstring).

    Raises:
        BadConfigurationError:
            If a numeric setting isn't an integer.
    """
    config = _env_config()

    if appconfig_enabled():
        overlay = load_appconfig('server')
        config['server'].update(overlay.get('server', {}))
        if overlay.get('redis'):
            config['redis'] = {**(config['redis'] or {}), **overlay['redis']}

    server = config['server']
    server['port'] = _as_int(ENV.Server.PORT, server['port'])
    server['cookie_secure'] = _as_bool(server['cookie_secure'])

    redis_config = config['redis']
    if redis_config is not None:
        if not redis_config.get('host'):
            raise BadConfigurationError(f"Redis configuration requires a host ('{ENV.Redis.HOST}').")
        redis_config['port'] = _as_int(ENV.Redis.PORT, redis_config.get('port', Defaults.REDIS_PORT))
        redis_config['db'] = _as_int(ENV.Redis.DB, redis_config.get('db', Defaults.REDIS_DB))

    return config
