from enum import StrEnum


class Expiration:
    """Expiration directive query parameters, in order of precedence."""

    MONTH = 'month'
    WEEK = 'week'
    DAY = 'day'
    EXPIRES_AFTER = 'expires_after'

    PRECEDENCE = (MONTH, WEEK, DAY, EXPIRES_AFTER)


class Confirmation:
    """Double-submit confirmation token names."""

    QUERY_PARAM = 'token'
    COOKIE_NAME = 'token'
    TOKEN_BYTES = 32  # entropy handed to secrets.token_urlsafe()


class Defaults:
    """Default server settings."""

    HOST = 'localhost'
    PORT = 8080
    REDIS_PORT = 6379
    REDIS_DB = 0


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        LOG_LEVEL = 'LOG_LEVEL'

    class Server(StrEnum):
        HOST = 'SHORTENER_HOST'
        PORT = 'SHORTENER_PORT'
        USERNAME = 'SHORTENER_USERNAME'
        PASSWORD = 'SHORTENER_PASSWORD'  # noqa: S105
        COOKIE_SECURE = 'SHORTENER_COOKIE_SECURE'

    class Redis(StrEnum):
        HOST = 'REDIS_HOST'
        PORT = 'REDIS_PORT'
        DB = 'REDIS_DB'
        USERNAME = 'REDIS_USERNAME'
        PASSWORD = 'REDIS_PASSWORD'  # noqa: S105

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'


# Log event codes
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
HISTORY_SUCCESS = 'HISTORY_SUCCESS'
LIST_SUCCESS = 'LIST_SUCCESS'
INVALID_TARGET_URL = 'INVALID_TARGET_URL'
INVALID_CREATE_REQUEST = 'INVALID_CREATE_REQUEST'
CONFIRMATION_REQUIRED = 'CONFIRMATION_REQUIRED'
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
UNAUTHORIZED = 'UNAUTHORIZED'
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
